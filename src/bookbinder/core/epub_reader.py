"""Read a finished EPUB back using ebooklib."""

import logging
import warnings
from pathlib import Path

import ebooklib
from ebooklib import epub
from lxml import etree

from bookbinder.core.assembler import NCX_MEDIA_TYPE
from bookbinder.models.epub import EpubInfo, InspectedEpub, NavPointEntry

# ebooklib warns about future defaults on every read
warnings.filterwarnings("ignore", category=UserWarning, module="ebooklib")
warnings.filterwarnings("ignore", category=FutureWarning, module="ebooklib")

log = logging.getLogger(__name__)

NCX_NAMESPACES = {"ncx": "http://www.daisy.org/z3986/2005/ncx/"}


class EpubReader:
    """Read an EPUB container and report its package and navigation map."""

    def __init__(self, epub_path: Path):
        self.path = epub_path
        self.book = epub.read_epub(str(epub_path), options={"ignore_ncx": False})

    def read(self) -> InspectedEpub:
        """Read the EPUB and return its structure."""
        return InspectedEpub(
            metadata=self._get_metadata(),
            nav_points=self._read_nav_map(),
            documents=[
                item.get_name()
                for item in self.book.get_items_of_type(ebooklib.ITEM_DOCUMENT)
            ],
            images=[
                item.get_name()
                for item in self.book.get_items()
                if item.get_type() in (ebooklib.ITEM_IMAGE, ebooklib.ITEM_COVER)
            ],
            spine_order=[idref for idref, _linear in self.book.spine],
        )

    def _first(self, name: str) -> str | None:
        values = self.book.get_metadata("DC", name)
        return values[0][0] if values else None

    def _get_metadata(self) -> EpubInfo:
        authors = self.book.get_metadata("DC", "creator")
        return EpubInfo(
            title=self._first("title") or "Unknown Title",
            authors=[a[0] for a in authors] if authors else [],
            language=self._first("language"),
            publisher=self._first("publisher"),
            identifier=self._first("identifier"),
            publication_date=self._first("date"),
        )

    def _read_nav_map(self) -> list[NavPointEntry]:
        """Parse the NCX navMap, keeping play order and nesting."""
        ncx = next(
            (item for item in self.book.get_items() if item.media_type == NCX_MEDIA_TYPE),
            None,
        )
        if ncx is None:
            log.warning(f"{self.path} has no NCX navigation map")
            return []

        root = etree.fromstring(ncx.get_content())
        nav_map = root.find("ncx:navMap", NCX_NAMESPACES)
        if nav_map is None:
            return []
        return self._parse_nav_points(nav_map)

    def _parse_nav_points(self, parent: etree._Element, level: int = 0) -> list[NavPointEntry]:
        entries = []
        for point in parent.findall("ncx:navPoint", NCX_NAMESPACES):
            content = point.find("ncx:content", NCX_NAMESPACES)
            play_order = point.get("playOrder", "")
            label = point.findtext("ncx:navLabel/ncx:text", "", NCX_NAMESPACES)
            entries.append(
                NavPointEntry(
                    id=point.get("id", ""),
                    label=label.strip() or "Untitled",
                    src=content.get("src", "") if content is not None else "",
                    level=level,
                    play_order=int(play_order) if play_order.isdigit() else None,
                    children=self._parse_nav_points(point, level + 1),
                )
            )
        return entries

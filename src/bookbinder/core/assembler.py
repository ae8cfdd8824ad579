"""EPUB document assembly.

The assembler collects metadata, pages, images and notes through chainable
mutators, then renders every fixed document and hands the entries to an
ArchiveBuilder. Generation works on a snapshot taken when generate() is
called, so it never observes later mutation.
"""

import datetime
import logging
import mimetypes
import threading
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

import pydantic

from bookbinder.config import AssemblerConfig, LocaleLabels
from bookbinder.core.archive import (
    MIMETYPE_PATH,
    ArchiveBuilder,
    ProgressCallback,
    parse_output_kind,
)
from bookbinder.core.content_processor import ContentProcessor
from bookbinder.core.hierarchy import validate_level
from bookbinder.core.navigation import (
    NOTES_PAGE,
    OUTLINE_PAGE,
    TITLE_PAGE,
    NavMapRenderer,
    OutlineRenderer,
    page_file_name,
)
from bookbinder.core.pages import PageModel
from bookbinder.core.resources import ResourceRegistry
from bookbinder.errors import (
    InvalidDateError,
    NotInitializedError,
    ValidationError,
)
from bookbinder.models.book import BookIdentifier, BookMetadata, PageEntry
from bookbinder.models.output import OutputKind
from bookbinder.utils import is_blank, iso_timestamp, looks_like_uri, new_uuid

log = logging.getLogger(__name__)

EPUB_MIMETYPE = "application/epub+zip"
CONTENT_DIR = "OEBPS"
CONTAINER_PATH = "META-INF/container.xml"
STYLESHEET_PATH = f"{CONTENT_DIR}/style.css"
PACKAGE_PATH = "book.opf"
NCX_PATH = "toc.ncx"
COVER_PAGE = "front-cover.html"

XHTML_MEDIA_TYPE = "application/xhtml+xml"
NCX_MEDIA_TYPE = "application/x-dtbncx+xml"

# Entries that never appear in the package manifest
UNLISTED_PATHS = {MIMETYPE_PATH, CONTAINER_PATH, PACKAGE_PATH}


class AssemblerState(str, Enum):
    """Lifecycle of an assembler."""

    UNINITIALIZED = "uninitialized"
    ACCEPTING = "accepting"
    GENERATING = "generating"
    GENERATED = "generated"


@dataclass(frozen=True)
class ManifestItem:
    """One package manifest entry."""

    id: str
    href: str
    media_type: str


@dataclass(frozen=True)
class BuildSnapshot:
    """Read-only view of everything a generation run needs."""

    metadata: BookMetadata
    labels: LocaleLabels
    identifier: BookIdentifier
    date: str
    pages: tuple[PageEntry, ...]
    resources: ResourceRegistry
    notes: str | None
    base: ArchiveBuilder
    revision: int


class EpubAssembler:
    """Builds an EPUB 2 container from metadata, pages and images.

    Example:
        book = EpubAssembler().initialize({"title": "My Book", "locale": "en"})
        book.add_page("Chapter 1", "<p>Hello</p>")
        data = asyncio.run(book.generate())
    """

    def __init__(self, config: AssemblerConfig | None = None):
        self.config = config or AssemblerConfig()
        self.processor = ContentProcessor()
        self._lock = threading.RLock()
        self._state = AssemblerState.UNINITIALIZED
        self._revision = 0

        self._metadata: BookMetadata | None = None
        self._labels: LocaleLabels | None = None
        self._identifier: BookIdentifier | None = None
        self._date: str | None = None
        self._notes: str | None = None
        self._pages = PageModel()
        self._resources = ResourceRegistry()
        self._archive: ArchiveBuilder | None = None

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> AssemblerState:
        return self._state

    @property
    def metadata(self) -> BookMetadata | None:
        return self._metadata

    @property
    def labels(self) -> LocaleLabels | None:
        return self._labels

    @property
    def identifier(self) -> BookIdentifier | None:
        return self._identifier

    @property
    def date(self) -> str | None:
        return self._date

    @property
    def notes(self) -> str | None:
        return self._notes

    @property
    def pages(self) -> tuple[PageEntry, ...]:
        with self._lock:
            return self._pages.snapshot()

    @property
    def resources(self) -> ResourceRegistry:
        """Copy of the registry; register through the assembler instead."""
        with self._lock:
            return self._resources.snapshot()

    @property
    def archive(self) -> ArchiveBuilder | None:
        return self._archive

    @staticmethod
    def html_to_text(html: str, no_br: bool = False) -> str:
        """Convert HTML to plain text."""
        return ContentProcessor().to_text(html, no_br)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def initialize(
        self, details: BookMetadata | dict | ArchiveBuilder | None = None
    ) -> "EpubAssembler":
        """Start a new book from metadata or an existing container.

        An existing ArchiveBuilder keeps its entries and receives the
        mandatory boilerplate; metadata then falls back to placeholders.

        Raises:
            UnknownLocaleError: If the metadata names an unknown locale
            ValidationError: If the metadata cannot be parsed
        """
        archive: ArchiveBuilder | None = None
        if isinstance(details, ArchiveBuilder):
            archive = details
            metadata = BookMetadata()
        elif isinstance(details, BookMetadata):
            metadata = details
        elif details is None:
            metadata = BookMetadata()
        elif isinstance(details, dict):
            try:
                metadata = BookMetadata.model_validate(details)
            except pydantic.ValidationError as e:
                raise ValidationError(f"Book details are not valid: {e}", field="details") from e
        else:
            raise ValidationError("Book details are not valid", field="details")

        labels = self.config.locale(metadata.locale or self.config.default_locale)

        if archive is None:
            archive = ArchiveBuilder(compression_level=self.config.compression_level)
        self._write_boilerplate(archive)

        with self._lock:
            self._metadata = metadata
            self._labels = labels
            self._identifier = BookIdentifier(scheme="uuid", value=new_uuid())
            self._date = iso_timestamp()
            self._notes = None
            self._pages = PageModel()
            self._resources = ResourceRegistry()
            self._archive = archive
            self._touch()

        log.debug(f"Initialized book '{metadata.title}' ({labels.code})")
        return self

    def set_date(self, value: object) -> "EpubAssembler":
        """Set the publication date from a date or datetime."""
        self._require_initialized("set_date")
        # datetime is a date subclass
        if not isinstance(value, datetime.date):
            raise InvalidDateError(value)
        with self._lock:
            self._date = iso_timestamp(value)
            self._touch()
        return self

    def set_identifier(self, value: object) -> "EpubAssembler":
        """Override the book identifier; values with a URI scheme use scheme URI."""
        self._require_initialized("set_identifier")
        if is_blank(value) or not isinstance(value, str):
            raise ValidationError("UUID value is empty", field="identifier")
        scheme = "URI" if looks_like_uri(value) else "uuid"
        with self._lock:
            self._identifier = BookIdentifier(scheme=scheme, value=value)
            self._touch()
        return self

    def register_cover(self, data: object) -> "EpubAssembler":
        """Set the cover image, replacing any previous one."""
        with self._lock:
            self._require_initialized("register_cover")
            resource = self._resources.register_cover(data)
            self._touch()
        log.debug(f"Cover set to {resource.path}")
        return self

    def register_image(self, data: object, name: str) -> "EpubAssembler":
        """Register an image that pages can reference by name."""
        with self._lock:
            self._require_initialized("register_image")
            self._resources.register_image(data, name)
            self._touch()
        return self

    def set_notes(self, html: object) -> "EpubAssembler":
        """Add the notes page."""
        self._require_initialized("set_notes")
        if is_blank(html) or not isinstance(html, str):
            raise ValidationError("Notes is empty", field="notes")
        with self._lock:
            self._notes = html
            self._touch()
        return self

    def add_page(
        self,
        title: object,
        content: str | Sequence[str] | None = None,
        level: int | None = None,
        *,
        index: int | None = None,
    ) -> "EpubAssembler":
        """Add a page.

        Args:
            title: Page title, shown in both navigation documents
            content: HTML with {{ variable }} / {{ image("name") }}
                placeholders, or a list of plain paragraphs
            level: Nesting level; defaults to the previous page's level
            index: Slot to place the page in; an occupied slot is overwritten

        Raises:
            ValidationError: Empty title, bad content or unknown variable
            InvalidLevelError: Level is not a non-negative integer
            InvalidHierarchyError: Level is more than one deeper than the previous page
        """
        self._require_initialized("add_page")
        if is_blank(title) or not isinstance(title, str):
            raise ValidationError("Title is empty", field="title")

        if isinstance(content, str) or content is None:
            page_content: str | tuple[str, ...] | None = content
        elif isinstance(content, (list, tuple)) and all(isinstance(p, str) for p in content):
            page_content = tuple(content)
        else:
            raise ValidationError(f"Content of {title} is not valid", field="content")

        if isinstance(page_content, str):
            unknown = self.processor.find_unknown_variables(page_content)
            if unknown:
                raise ValidationError(
                    f"Unknown template variable(s) in {title}: {', '.join(unknown)}",
                    field="content",
                )

        with self._lock:
            if level is None:
                level = self._pages.previous_level(index)
            validate_level(level)
            slot = self._pages.add(
                PageEntry(title=title, content=page_content, level=level), index
            )
            self._touch()

        log.debug(f"Added page '{title}' at slot {slot}, level {level}")
        return self

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate(
        self,
        output_kind: OutputKind | str = OutputKind.BYTES,
        on_progress: ProgressCallback | None = None,
    ) -> Awaitable[Any]:
        """Snapshot the book and return an awaitable for the finished archive.

        Errors about the request itself are raised here, before anything
        is awaited.

        Raises:
            NotInitializedError: If initialize() was never called
            UnsupportedOutputTypeError: If the output kind is unknown
        """
        with self._lock:
            self._require_initialized("generate")
            kind = parse_output_kind(output_kind)
            snapshot = self._snapshot()
            self._state = AssemblerState.GENERATING
        return self._generate(snapshot, kind, on_progress)

    async def _generate(
        self,
        snapshot: BuildSnapshot,
        kind: OutputKind,
        on_progress: ProgressCallback | None,
    ) -> Any:
        log.info(f"Generating '{snapshot.metadata.title}' with {len(snapshot.pages)} page(s)")
        try:
            archive = self.assemble(snapshot)
            result = await archive.finalize(kind, on_progress)
        except BaseException:
            with self._lock:
                if self._revision == snapshot.revision:
                    self._state = AssemblerState.ACCEPTING
            raise

        with self._lock:
            if self._revision == snapshot.revision:
                self._state = AssemblerState.GENERATED
        return result

    def _snapshot(self) -> BuildSnapshot:
        assert self._metadata is not None and self._labels is not None
        assert self._identifier is not None and self._archive is not None
        return BuildSnapshot(
            metadata=self._metadata.with_defaults(self._labels.code),
            labels=self._labels,
            identifier=self._identifier,
            date=self._date or iso_timestamp(),
            pages=self._pages.snapshot(),
            resources=self._resources.snapshot(),
            notes=self._notes,
            base=self._archive.copy(),
            revision=self._revision,
        )

    def assemble(self, snapshot: BuildSnapshot) -> ArchiveBuilder:
        """Render every document of a snapshot into a fresh archive."""
        environment = self.config.template_environment()
        archive = snapshot.base.copy()
        resources = snapshot.resources
        common = {"labels": snapshot.labels, "metadata": snapshot.metadata}

        def render(template_name: str, **context: Any) -> str:
            return environment.get_template(template_name).render(**common, **context)

        archive.add_entry(
            f"{CONTENT_DIR}/{TITLE_PAGE}",
            render(
                f"{CONTENT_DIR}/{TITLE_PAGE}",
                description=self.processor.to_xhtml(snapshot.metadata.description),
            ),
        )

        cover = resources.cover
        if cover is not None:
            archive.add_entry(
                f"{CONTENT_DIR}/{COVER_PAGE}",
                render(f"{CONTENT_DIR}/{COVER_PAGE}", cover=cover),
            )

        if snapshot.notes is not None:
            archive.add_entry(
                f"{CONTENT_DIR}/{NOTES_PAGE}",
                render(
                    f"{CONTENT_DIR}/{NOTES_PAGE}",
                    notes=self.processor.to_xhtml(snapshot.notes),
                ),
            )

        for index, page in enumerate(snapshot.pages):
            archive.add_entry(
                f"{CONTENT_DIR}/{page_file_name(index)}",
                self._render_page(page, snapshot, render),
            )

        for image in resources.images.values():
            archive.add_entry(f"{CONTENT_DIR}/{image.path}", image.data)
        if cover is not None:
            archive.add_entry(f"{CONTENT_DIR}/{cover.path}", cover.data)

        archive.add_entry(
            f"{CONTENT_DIR}/{OUTLINE_PAGE}",
            OutlineRenderer(environment).render(snapshot.pages, **common),
        )
        archive.add_entry(
            NCX_PATH,
            NavMapRenderer(environment, has_notes=snapshot.notes is not None).render(
                snapshot.pages, identifier=snapshot.identifier, **common
            ),
        )
        archive.add_entry(
            PACKAGE_PATH,
            render(
                PACKAGE_PATH,
                identifier=snapshot.identifier,
                date=snapshot.date,
                description=self.processor.to_text(snapshot.metadata.description, no_br=True),
                cover=cover,
                manifest=self._manifest(snapshot, archive),
                spine=self._spine(snapshot),
            ),
        )
        return archive

    def _render_page(self, page: PageEntry, snapshot: BuildSnapshot, render) -> str:
        if page.is_paragraphs:
            return render(
                f"{CONTENT_DIR}/page.html", title=page.title, paragraphs=page.content
            )

        variables = {
            "title": page.title,
            "book_title": snapshot.metadata.title or "",
            "author": snapshot.metadata.author or "",
            "publisher": snapshot.metadata.publisher or "",
            "locale": snapshot.labels.code,
        }
        expanded = self.processor.expand(
            page.content or "", variables, snapshot.resources.resolve
        )
        return render(
            f"{CONTENT_DIR}/page.html",
            title=page.title,
            paragraphs=None,
            body=self.processor.to_xhtml(expanded),
        )

    def _manifest(self, snapshot: BuildSnapshot, archive: ArchiveBuilder) -> list[ManifestItem]:
        resources = snapshot.resources
        items = [
            ManifestItem("ncx", NCX_PATH, NCX_MEDIA_TYPE),
            ManifestItem("style", STYLESHEET_PATH, "text/css"),
        ]
        if resources.cover is not None:
            items.append(
                ManifestItem("front-cover", f"{CONTENT_DIR}/{COVER_PAGE}", XHTML_MEDIA_TYPE)
            )
            items.append(
                ManifestItem(
                    "cover-image",
                    f"{CONTENT_DIR}/{resources.cover.path}",
                    resources.cover.mime_type,
                )
            )
        items.append(ManifestItem("title-page", f"{CONTENT_DIR}/{TITLE_PAGE}", XHTML_MEDIA_TYPE))
        if snapshot.notes is not None:
            items.append(ManifestItem("notes", f"{CONTENT_DIR}/{NOTES_PAGE}", XHTML_MEDIA_TYPE))
        items.append(
            ManifestItem("table-of-contents", f"{CONTENT_DIR}/{OUTLINE_PAGE}", XHTML_MEDIA_TYPE)
        )
        for index in range(len(snapshot.pages)):
            items.append(
                ManifestItem(f"page-{index}", f"{CONTENT_DIR}/{page_file_name(index)}", XHTML_MEDIA_TYPE)
            )
        for position, image in enumerate(resources.images.values()):
            items.append(
                ManifestItem(f"image-{position}", f"{CONTENT_DIR}/{image.path}", image.mime_type)
            )

        # Entries carried over from a caller-supplied container
        listed = {item.href for item in items} | UNLISTED_PATHS
        extras = [path for path in archive.paths if path not in listed]
        for position, path in enumerate(extras):
            media_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
            items.append(ManifestItem(f"extra-{position}", path, media_type))
        return items

    def _spine(self, snapshot: BuildSnapshot) -> list[str]:
        spine = []
        if snapshot.resources.cover is not None:
            spine.append("front-cover")
        spine.extend(["title-page", "table-of-contents"])
        spine.extend(f"page-{index}" for index in range(len(snapshot.pages)))
        if snapshot.notes is not None:
            spine.append("notes")
        return spine

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _write_boilerplate(self, archive: ArchiveBuilder) -> None:
        environment = self.config.template_environment()
        archive.add_entry(MIMETYPE_PATH, EPUB_MIMETYPE, store_uncompressed=True)
        archive.add_entry(
            CONTAINER_PATH, environment.get_template(CONTAINER_PATH).render()
        )
        archive.add_entry(
            STYLESHEET_PATH, environment.get_template(STYLESHEET_PATH).render()
        )

    def _require_initialized(self, operation: str) -> None:
        if self._state is AssemblerState.UNINITIALIZED:
            raise NotInitializedError(operation)

    def _touch(self) -> None:
        self._revision += 1
        self._state = AssemblerState.ACCEPTING

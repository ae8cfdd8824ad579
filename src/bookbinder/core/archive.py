"""In-memory ZIP container builder."""

import asyncio
import io
import logging
import zipfile
from collections.abc import Callable
from dataclasses import dataclass

from bookbinder.errors import UnsupportedOutputTypeError
from bookbinder.models.output import OutputKind, ProgressUpdate

log = logging.getLogger(__name__)

MIMETYPE_PATH = "mimetype"

ProgressCallback = Callable[[ProgressUpdate], None]


def parse_output_kind(value: object) -> OutputKind:
    """Resolve a requested output kind.

    Raises:
        UnsupportedOutputTypeError: If the kind is unknown
    """
    if isinstance(value, OutputKind):
        return value
    try:
        return OutputKind(value)
    except ValueError:
        raise UnsupportedOutputTypeError(value) from None


@dataclass(frozen=True)
class ArchiveEntry:
    """Single named file in the container."""

    path: str
    data: bytes
    store_uncompressed: bool = False


class ArchiveBuilder:
    """Collects named entries and writes them into a ZIP container.

    The mimetype entry is always written first and stored uncompressed;
    every other entry follows in insertion order.
    """

    def __init__(self, compression_level: int = 9):
        self.compression_level = compression_level
        self._entries: dict[str, ArchiveEntry] = {}

    def __contains__(self, path: str) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def paths(self) -> list[str]:
        """Entry paths in the order they will be written."""
        return [entry.path for entry in self._ordered()]

    def has_entry(self, path: str) -> bool:
        return path in self._entries

    def get_entry(self, path: str) -> ArchiveEntry | None:
        return self._entries.get(path)

    def add_entry(
        self,
        path: str,
        content: str | bytes,
        *,
        store_uncompressed: bool = False,
    ) -> None:
        """Add or replace an entry. Text is stored as UTF-8."""
        data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        self._entries[path] = ArchiveEntry(
            path=path, data=data, store_uncompressed=store_uncompressed
        )

    def remove_entry(self, path: str) -> None:
        self._entries.pop(path, None)

    def copy(self) -> "ArchiveBuilder":
        """Independent builder holding the same entries."""
        clone = ArchiveBuilder(compression_level=self.compression_level)
        clone._entries = dict(self._entries)
        return clone

    def _ordered(self) -> list[ArchiveEntry]:
        entries = list(self._entries.values())
        first = [entry for entry in entries if entry.path == MIMETYPE_PATH]
        rest = [entry for entry in entries if entry.path != MIMETYPE_PATH]
        return first + rest

    def _zip_info(self, entry: ArchiveEntry) -> zipfile.ZipInfo:
        # Fixed timestamp keeps output byte-identical between runs
        info = zipfile.ZipInfo(entry.path, date_time=(1980, 1, 1, 0, 0, 0))
        info.external_attr = 0o644 << 16
        if entry.store_uncompressed or entry.path == MIMETYPE_PATH:
            info.compress_type = zipfile.ZIP_STORED
        else:
            info.compress_type = zipfile.ZIP_DEFLATED
        return info

    async def finalize(
        self,
        output_kind: OutputKind | str = OutputKind.BYTES,
        on_progress: ProgressCallback | None = None,
    ) -> bytes | bytearray | io.BytesIO:
        """Write every entry and return the finished container.

        Progress is reported once per entry with non-decreasing percent.
        The buffer is only handed back once every entry is written.
        """
        kind = parse_output_kind(output_kind)
        entries = self._ordered()
        total = len(entries)
        buffer = io.BytesIO()

        log.debug(f"Writing {total} archive entries")
        with zipfile.ZipFile(buffer, "w") as archive:
            for position, entry in enumerate(entries, start=1):
                info = self._zip_info(entry)
                if info.compress_type == zipfile.ZIP_STORED:
                    archive.writestr(info, entry.data)
                else:
                    archive.writestr(
                        info, entry.data, compresslevel=self.compression_level
                    )
                if on_progress is not None:
                    on_progress(
                        ProgressUpdate(
                            percent=position * 100.0 / total,
                            current_file=entry.path,
                        )
                    )
                await asyncio.sleep(0)

        data = buffer.getvalue()
        log.info(f"Archive finalized: {total} entries, {len(data):,} bytes")

        if kind is OutputKind.BYTEARRAY:
            return bytearray(data)
        if kind is OutputKind.STREAM:
            return io.BytesIO(data)
        return data

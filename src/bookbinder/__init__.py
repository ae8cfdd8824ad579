"""Assemble EPUB books from metadata, pages and images."""

from bookbinder.config import AssemblerConfig, LocaleLabels
from bookbinder.core.archive import ArchiveBuilder
from bookbinder.core.assembler import AssemblerState, EpubAssembler
from bookbinder.models.resource import DeclaredType, RawBytes

__version__ = "0.1.0"

__all__ = [
    "ArchiveBuilder",
    "AssemblerConfig",
    "AssemblerState",
    "DeclaredType",
    "EpubAssembler",
    "LocaleLabels",
    "RawBytes",
]

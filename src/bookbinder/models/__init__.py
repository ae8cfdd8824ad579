"""Data models."""

from bookbinder.models.book import (
    BookIdentifier,
    BookMetadata,
    PageEntry,
)
from bookbinder.models.epub import (
    EpubInfo,
    InspectedEpub,
    NavPointEntry,
)
from bookbinder.models.output import (
    OutputKind,
    ProgressUpdate,
)
from bookbinder.models.resource import (
    DeclaredType,
    ImageType,
    RawBytes,
    Resource,
    ResourceInput,
)
from bookbinder.models.source import (
    BookSource,
    SourcePage,
)

__all__ = [
    # Book models
    "BookMetadata",
    "BookIdentifier",
    "PageEntry",
    # Resource models
    "DeclaredType",
    "RawBytes",
    "ResourceInput",
    "ImageType",
    "Resource",
    # Output models
    "OutputKind",
    "ProgressUpdate",
    # Reading back
    "NavPointEntry",
    "EpubInfo",
    "InspectedEpub",
    # CLI input
    "BookSource",
    "SourcePage",
]

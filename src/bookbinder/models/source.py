"""Data models for a JSON book description consumed by the CLI."""

from datetime import datetime

from pydantic import BaseModel, Field

from bookbinder.models.book import BookMetadata


class SourcePage(BaseModel):
    """Page as written in the book description."""

    title: str
    content: str | list[str] | None = None
    level: int | None = None


class BookSource(BaseModel):
    """Everything needed to build one book from disk."""

    metadata: BookMetadata = Field(default_factory=BookMetadata)
    date: datetime | None = None
    identifier: str | None = None
    cover: str | None = None  # path relative to the description file
    images: dict[str, str] = Field(default_factory=dict)  # name -> path
    notes: str | None = None
    pages: list[SourcePage] = Field(default_factory=list)

"""Data models for reading a finished EPUB back."""

from pydantic import BaseModel, Field


class NavPointEntry(BaseModel):
    """navPoint read back from an NCX navigation map."""

    id: str
    label: str
    src: str
    level: int = 0
    play_order: int | None = None
    children: list["NavPointEntry"] = Field(default_factory=list)


class EpubInfo(BaseModel):
    """Book-level metadata found in the package document."""

    title: str
    authors: list[str] = Field(default_factory=list)
    language: str | None = None
    publisher: str | None = None
    identifier: str | None = None
    publication_date: str | None = None


class InspectedEpub(BaseModel):
    """Complete structure of a finished EPUB."""

    metadata: EpubInfo
    nav_points: list[NavPointEntry] = Field(default_factory=list)
    documents: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    spine_order: list[str] = Field(default_factory=list)

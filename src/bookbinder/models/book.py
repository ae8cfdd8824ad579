"""Data models for book metadata and pages."""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

PLACEHOLDER_TITLE = "Untitled"
PLACEHOLDER_AUTHOR = "Unknown"
PLACEHOLDER_PUBLISHER = "Unknown"


class BookMetadata(BaseModel):
    """Book-level metadata as supplied by the caller."""

    title: str | None = None
    author: str | None = None
    publisher: str | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    # Older callers pass the locale as "i18n"
    locale: str | None = Field(
        default=None, validation_alias=AliasChoices("locale", "i18n")
    )

    def with_defaults(self, default_locale: str = "en") -> "BookMetadata":
        """Return a copy where every missing field holds its placeholder."""
        return BookMetadata(
            title=self.title or PLACEHOLDER_TITLE,
            author=self.author or PLACEHOLDER_AUTHOR,
            publisher=self.publisher or PLACEHOLDER_PUBLISHER,
            description=self.description or "",
            tags=list(self.tags),
            locale=self.locale or default_locale,
        )


class BookIdentifier(BaseModel):
    """Unique identifier written to the package metadata."""

    scheme: Literal["uuid", "URI"] = "uuid"
    value: str


class PageEntry(BaseModel):
    """Single titled content unit of the book."""

    model_config = ConfigDict(frozen=True)

    title: str
    content: str | tuple[str, ...] | None = None
    level: int = 0

    @property
    def is_paragraphs(self) -> bool:
        """True when content is a plain paragraph sequence."""
        return isinstance(self.content, tuple)

"""Data models for embedded binary resources."""

from pydantic import BaseModel, ConfigDict


class DeclaredType(BaseModel):
    """Resource bytes with a caller-declared MIME label."""

    data: bytes
    mime_type: str


class RawBytes(BaseModel):
    """Resource bytes whose type is sniffed from the content."""

    data: bytes


ResourceInput = DeclaredType | RawBytes


class ImageType(BaseModel):
    """Detected image type."""

    model_config = ConfigDict(frozen=True)

    mime_type: str
    extension: str


class Resource(BaseModel):
    """Registered resource; path is relative to the content directory."""

    model_config = ConfigDict(frozen=True)

    name: str
    mime_type: str
    extension: str
    path: str
    data: bytes = b""

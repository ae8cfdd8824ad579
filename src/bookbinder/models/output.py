"""Data models for archive output."""

from enum import Enum

from pydantic import BaseModel


class OutputKind(str, Enum):
    """Shape of the finished archive handed back to the caller."""

    BYTES = "bytes"
    BYTEARRAY = "bytearray"
    STREAM = "stream"  # io.BytesIO positioned at 0


class ProgressUpdate(BaseModel):
    """Progress report emitted once per archive entry."""

    percent: float
    current_file: str | None = None

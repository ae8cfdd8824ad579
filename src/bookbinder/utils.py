"""Small value helpers shared by the assembler."""

import re
import uuid
from datetime import date, datetime, timezone

URI_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:\S+$")


def is_blank(value: object) -> bool:
    """True for None and for strings that are empty or whitespace only."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def looks_like_uri(value: str) -> bool:
    """True when the value carries a URI scheme (https:, urn:, ...)."""
    return bool(URI_RE.match(value.strip()))


def new_uuid() -> str:
    return str(uuid.uuid4())


def iso_timestamp(value: date | datetime | None = None) -> str:
    """Format a moment as UTC ISO-8601 with milliseconds, e.g. 2023-06-01T10:00:00.000Z.

    Naive datetimes are taken as UTC; a plain date means midnight UTC.
    """
    if value is None:
        value = datetime.now(timezone.utc)
    elif not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"

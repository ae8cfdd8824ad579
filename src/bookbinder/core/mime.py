"""Image type detection from content bytes and MIME labels."""

from bookbinder.models.resource import ImageType

MIME_TO_EXTENSION = {
    "image/jpg": "jpg",
    "image/jpeg": "jpg",
    "image/svg+xml": "svg",
    "image/gif": "gif",
    "image/apng": "apng",
    "image/png": "png",
    "image/webp": "webp",
    "image/bmp": "bmp",
    "image/tiff": "tif",
    "image/x-icon": "ico",
    "image/vnd.microsoft.icon": "ico",
}

# Extensions accepted from a bare "image/<subtype>" label
SAFE_IMAGE_SUBTYPES = {"gif", "apng", "png", "webp", "bmp"}

# (prefix, mime type), checked in order
BYTE_SIGNATURES: list[tuple[bytes, str]] = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF", "image/gif"),
    (b"BM", "image/bmp"),
]

TIFF_SIGNATURES = (b"II*\x00", b"MM\x00*")
ICO_SIGNATURE = b"\x00\x00\x01\x00"
SVG_SCAN_BYTES = 256


def mime_to_extension(mime: object) -> str | None:
    """Map a MIME label to a canonical file extension.

    Parameters after ';' are ignored and case does not matter.
    Returns None for anything that is not a supported image type.
    """
    if not isinstance(mime, str):
        return None

    clean = mime.strip().lower().split(";")[0].strip()
    if clean in MIME_TO_EXTENSION:
        return MIME_TO_EXTENSION[clean]

    if clean.startswith("image/"):
        subtype = clean.split("/", 1)[1]
        if subtype in SAFE_IMAGE_SUBTYPES:
            return subtype

    return None


def _looks_like_svg(data: bytes) -> bool:
    text = data[:SVG_SCAN_BYTES].decode("latin-1")
    return "<svg" in text or ("<?xml" in text and "svg" in text)


def detect_mime_type(data: bytes) -> str | None:
    """Sniff the MIME type of image bytes, or None when nothing matches."""
    if not data:
        return None

    for signature, mime in BYTE_SIGNATURES:
        if data.startswith(signature):
            return mime

    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"

    if _looks_like_svg(data):
        return "image/svg+xml"

    if data.startswith(TIFF_SIGNATURES):
        return "image/tiff"

    if data.startswith(ICO_SIGNATURE):
        return "image/x-icon"

    return None


def detect_image_type(data: bytes) -> ImageType | None:
    """Detect image type and canonical extension from content bytes."""
    mime = detect_mime_type(data)
    if mime is None:
        return None
    return ImageType(mime_type=mime, extension=MIME_TO_EXTENSION[mime])


def resolve_image_type(data: bytes, declared_mime: str | None = None) -> ImageType | None:
    """Resolve a type from a declared label first, then from the bytes."""
    if declared_mime is not None:
        extension = mime_to_extension(declared_mime)
        if extension is not None:
            clean = declared_mime.strip().lower().split(";")[0].strip()
            if clean == "image/jpg":
                clean = "image/jpeg"
            return ImageType(mime_type=clean, extension=extension)
    return detect_image_type(data)

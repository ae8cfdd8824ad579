"""Registry of embedded images and the cover."""

import logging
from types import MappingProxyType
from typing import Mapping

from bookbinder.core.mime import resolve_image_type
from bookbinder.errors import UnsupportedFormatError, ValidationError
from bookbinder.models.resource import DeclaredType, ImageType, RawBytes, Resource

log = logging.getLogger(__name__)

# 1x1 transparent GIF used when a page references an unregistered image
FALLBACK_IMAGE_SRC = (
    "data:image/gif;base64,R0lGODlhAQABAIAAAAUEBAAAACwAAAAAAQABAAACAkQBADs="
)

IMAGE_DIR = "assets"
COVER_STEM = "cover-image"


def coerce_resource_input(data: object, kind: str = "Image") -> DeclaredType | RawBytes:
    """Normalise caller input into the tagged resource union.

    Raises:
        ValidationError: If data is neither a tagged input nor raw bytes
    """
    if isinstance(data, (DeclaredType, RawBytes)):
        return data
    if isinstance(data, (bytes, bytearray, memoryview)):
        return RawBytes(data=bytes(data))
    raise ValidationError(f"{kind} data is not valid", field=kind.lower())


def _detect(source: DeclaredType | RawBytes, kind: str) -> ImageType:
    declared = source.mime_type if isinstance(source, DeclaredType) else None
    image_type = resolve_image_type(source.data, declared)
    if image_type is None:
        raise UnsupportedFormatError(f"{kind} data is not allowed")
    return image_type


class ResourceRegistry:
    """Maps resource names to detected type and archive path."""

    def __init__(self) -> None:
        self._images: dict[str, Resource] = {}
        self._cover: Resource | None = None

    @property
    def images(self) -> Mapping[str, Resource]:
        """Read-only view of the named images."""
        return MappingProxyType(self._images)

    @property
    def cover(self) -> Resource | None:
        return self._cover

    def register_image(self, data: object, name: str) -> Resource:
        """Detect the type of an image and store it under name.

        A name that is already registered is overwritten.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Image name is empty", field="name")

        source = coerce_resource_input(data, "Image")
        image_type = _detect(source, "Image")

        resource = Resource(
            name=name,
            mime_type=image_type.mime_type,
            extension=image_type.extension,
            path=f"{IMAGE_DIR}/{name}.{image_type.extension}",
            data=source.data,
        )
        if name in self._images:
            log.debug(f"Overwriting image '{name}' ({self._images[name].path})")
        self._images[name] = resource
        log.debug(f"Registered image '{name}' as {resource.mime_type}")
        return resource

    def register_cover(self, data: object) -> Resource:
        """Detect the type of the cover image and replace any previous cover."""
        source = coerce_resource_input(data, "Cover")
        image_type = _detect(source, "Cover")

        resource = Resource(
            name=COVER_STEM,
            mime_type=image_type.mime_type,
            extension=image_type.extension,
            path=f"{COVER_STEM}.{image_type.extension}",
            data=source.data,
        )
        if self._cover is not None:
            log.debug(f"Replacing cover {self._cover.path} with {resource.path}")
        self._cover = resource
        return resource

    def resolve(self, name: str) -> str:
        """Return the path of a named image, or the fallback image source."""
        resource = self._images.get(name)
        if resource is None:
            log.debug(f"Image '{name}' is not registered, using fallback")
            return FALLBACK_IMAGE_SRC
        return resource.path

    def snapshot(self) -> "ResourceRegistry":
        """Copy of the registry that later registrations do not affect."""
        copy = ResourceRegistry()
        copy._images = dict(self._images)
        copy._cover = self._cover
        return copy

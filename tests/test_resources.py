"""Tests for the resource registry."""

import pytest

from bookbinder.core.resources import FALLBACK_IMAGE_SRC, ResourceRegistry
from bookbinder.errors import UnsupportedFormatError, ValidationError
from bookbinder.models.resource import DeclaredType, RawBytes


def test_register_image_from_raw_bytes(png_bytes):
    registry = ResourceRegistry()
    resource = registry.register_image(png_bytes, "map")
    assert resource.path == "assets/map.png"
    assert resource.mime_type == "image/png"
    assert registry.images["map"] is resource


def test_jpeg_prefix_registers_as_jpg():
    resource = ResourceRegistry().register_image(b"\xff\xd8\xff", "photo")
    assert resource.extension == "jpg"
    assert resource.path == "assets/photo.jpg"


def test_declared_type_is_used(png_bytes):
    resource = ResourceRegistry().register_image(
        DeclaredType(data=png_bytes, mime_type="image/webp"), "img"
    )
    assert resource.extension == "webp"


def test_tagged_raw_bytes(gif_bytes):
    resource = ResourceRegistry().register_image(RawBytes(data=gif_bytes), "anim")
    assert resource.mime_type == "image/gif"


def test_unsupported_bytes():
    with pytest.raises(UnsupportedFormatError, match="Image data is not allowed"):
        ResourceRegistry().register_image(b"no signature here", "x")


@pytest.mark.parametrize("data", ["a string", 42, None, ["list"]])
def test_invalid_input(data):
    with pytest.raises(ValidationError, match="Image data is not valid"):
        ResourceRegistry().register_image(data, "x")


@pytest.mark.parametrize("name", ["", "   ", None])
def test_empty_name(png_bytes, name):
    with pytest.raises(ValidationError):
        ResourceRegistry().register_image(png_bytes, name)


def test_same_name_overwrites(png_bytes, gif_bytes):
    registry = ResourceRegistry()
    registry.register_image(png_bytes, "pic")
    registry.register_image(gif_bytes, "pic")
    assert len(registry.images) == 1
    assert registry.images["pic"].path == "assets/pic.gif"


def test_cover_replaces_previous(png_bytes, jpeg_bytes):
    registry = ResourceRegistry()
    registry.register_cover(png_bytes)
    cover = registry.register_cover(jpeg_bytes)
    assert registry.cover is cover
    assert cover.path == "cover-image.jpg"


def test_unsupported_cover():
    with pytest.raises(UnsupportedFormatError, match="Cover data is not allowed"):
        ResourceRegistry().register_cover(b"nope")


def test_resolve_falls_back_for_unknown_names(png_bytes):
    registry = ResourceRegistry()
    registry.register_image(png_bytes, "known")
    assert registry.resolve("known") == "assets/known.png"
    assert registry.resolve("missing") == FALLBACK_IMAGE_SRC


def test_images_view_is_read_only(png_bytes):
    registry = ResourceRegistry()
    registry.register_image(png_bytes, "a")
    with pytest.raises(TypeError):
        registry.images["b"] = registry.images["a"]


def test_snapshot_isolated_from_later_registration(png_bytes):
    registry = ResourceRegistry()
    registry.register_image(png_bytes, "a")
    snapshot = registry.snapshot()
    registry.register_image(png_bytes, "b")
    registry.register_cover(png_bytes)
    assert list(snapshot.images) == ["a"]
    assert snapshot.cover is None

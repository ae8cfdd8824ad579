"""Shared fixtures."""

import asyncio
import io
import zipfile

import pytest

from bookbinder.config import AssemblerConfig
from bookbinder.core.assembler import EpubAssembler

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 24
GIF_BYTES = b"GIF89a" + b"\x00" * 24


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def jpeg_bytes() -> bytes:
    return JPEG_BYTES


@pytest.fixture
def gif_bytes() -> bytes:
    return GIF_BYTES


@pytest.fixture
def config() -> AssemblerConfig:
    return AssemblerConfig()


@pytest.fixture
def environment(config):
    return config.template_environment()


@pytest.fixture
def book() -> EpubAssembler:
    """Initialized assembler with basic metadata."""
    return EpubAssembler().initialize(
        {
            "title": "Field Notes",
            "author": "A. Writer",
            "publisher": "Small Press",
            "description": "<p>A short <b>book</b>.</p>",
            "tags": ["nature", "essays"],
            "locale": "en",
        }
    )


@pytest.fixture
def build_zip():
    """Generate a book and open the result as a ZipFile."""

    def _build(assembler: EpubAssembler) -> zipfile.ZipFile:
        data = asyncio.run(assembler.generate("bytes"))
        return zipfile.ZipFile(io.BytesIO(data))

    return _build

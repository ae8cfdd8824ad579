"""Round trip through ebooklib."""

import asyncio

import pytest

from bookbinder.core.assembler import EpubAssembler
from bookbinder.core.epub_reader import EpubReader


@pytest.fixture
def epub_path(tmp_path, png_bytes):
    book = EpubAssembler().initialize(
        {"title": "Round Trip", "author": "B. Reader", "publisher": "Loop", "locale": "en"}
    )
    book.set_identifier("urn:isbn:9781234567897")
    book.register_image(png_bytes, "plate")
    book.add_page("Part One", "<p>Opening</p>")
    book.add_page("Chapter 1", "<p>{{ image('plate') }}</p>", 1)
    book.add_page("Chapter 2", ["Text"], 1)
    book.add_page("Part Two", "<p>Closing</p>", 0)
    book.set_notes("<p>Notes</p>")

    path = tmp_path / "round-trip.epub"
    path.write_bytes(asyncio.run(book.generate()))
    return path


def flatten(entries):
    for entry in entries:
        yield entry
        yield from flatten(entry.children)


def test_metadata(epub_path):
    metadata = EpubReader(epub_path).read().metadata
    assert metadata.title == "Round Trip"
    assert metadata.authors == ["B. Reader"]
    assert metadata.language == "en"
    assert metadata.publisher == "Loop"
    assert metadata.identifier == "urn:isbn:9781234567897"


def test_nav_map_tree(epub_path):
    nav_points = EpubReader(epub_path).read().nav_points
    assert [entry.label for entry in nav_points] == [
        "Information",
        "Table of Contents",
        "Part One",
        "Part Two",
        "Notes",
    ]
    part_one = nav_points[2]
    assert [child.label for child in part_one.children] == ["Chapter 1", "Chapter 2"]
    assert all(child.level == 1 for child in part_one.children)
    assert nav_points[3].src == "OEBPS/page-3.html"
    assert nav_points[4].id == "notes"


def test_play_order_survives_round_trip(epub_path):
    entries = list(flatten(EpubReader(epub_path).read().nav_points))
    assert [entry.play_order for entry in entries] == list(range(1, 8))
    assert [entry.label for entry in entries][2:5] == ["Part One", "Chapter 1", "Chapter 2"]


def test_documents_and_spine(epub_path):
    inspected = EpubReader(epub_path).read()
    assert "OEBPS/page-0.html" in inspected.documents
    assert "OEBPS/assets/plate.png" in inspected.images
    assert inspected.spine_order[:3] == ["title-page", "table-of-contents", "page-0"]
    assert inspected.spine_order[-1] == "notes"

"""Tests for navigation trees and their rendered forms."""

import re

import pytest

from bookbinder.core.navigation import (
    NavMapRenderer,
    OutlineRenderer,
    build_nav_tree,
    iter_nodes,
    tree_depth,
)
from bookbinder.errors import InvalidHierarchyError
from bookbinder.models.book import BookIdentifier, BookMetadata, PageEntry

LEVEL_SEQUENCES = [
    [],
    [0],
    [0, 0, 0],
    [0, 1, 1, 0],
    [0, 1, 2, 3],
    [0, 1, 2, 3, 1],
    [0, 1, 2, 0, 1, 0, 1, 2, 2, 1],
]


def make_pages(levels: list[int]) -> list[PageEntry]:
    return [PageEntry(title=f"Page {i}", content="", level=level) for i, level in enumerate(levels)]


def max_list_nesting(html: str) -> int:
    depth = deepest = 0
    for token in re.findall(r"</?ul>", html):
        depth += -1 if token.startswith("</") else 1
        deepest = max(deepest, depth)
    return deepest


@pytest.fixture
def context(config):
    return {
        "labels": config.locale("en"),
        "metadata": BookMetadata().with_defaults(),
        "identifier": BookIdentifier(value="urn:test"),
    }


def test_tree_for_siblings_under_one_parent():
    nodes = build_nav_tree(make_pages([0, 1, 1, 0]))
    assert [n.title for n in nodes] == ["Page 0", "Page 3"]
    assert [c.title for c in nodes[0].children] == ["Page 1", "Page 2"]
    assert nodes[1].children == []


def test_tree_numbering_and_prefix():
    nodes = build_nav_tree(make_pages([0, 1, 0]), href_prefix="OEBPS/", start_order=3)
    flat = list(iter_nodes(nodes))
    assert [n.play_order for n in flat] == [3, 4, 5]
    assert flat[1].href == "OEBPS/page-1.html"


def test_tree_rejects_skipped_level():
    with pytest.raises(InvalidHierarchyError):
        build_nav_tree(make_pages([0, 2]))


@pytest.mark.parametrize("levels", LEVEL_SEQUENCES)
def test_tree_depth_matches_max_level(levels):
    expected = max(levels) + 1 if levels else 0
    assert tree_depth(build_nav_tree(make_pages(levels))) == expected


@pytest.mark.parametrize("levels", LEVEL_SEQUENCES)
def test_outline_list_tokens_balance(environment, context, levels):
    html = OutlineRenderer(environment).render(make_pages(levels), **context)
    assert html.count("<ul>") == html.count("</ul>")
    assert html.count("<li ") == html.count("</li>") == len(levels)


@pytest.mark.parametrize("levels", LEVEL_SEQUENCES)
def test_outline_nesting_equals_max_level_plus_one(environment, context, levels):
    html = OutlineRenderer(environment).render(make_pages(levels), **context)
    expected = max(levels) + 1 if levels else 0
    assert max_list_nesting(html) == expected


def test_outline_scenario_two_lists(environment, context):
    html = OutlineRenderer(environment).render(make_pages([0, 1, 1, 0]), **context)
    assert html.count("<ul>") == 2
    assert html.count("</ul>") == 2
    assert 'class="chaptertype-2"' in html
    assert 'href="page-1.html"' in html


def test_outline_escapes_titles(environment, context):
    pages = [PageEntry(title="Fish & <Chips>", level=0)]
    html = OutlineRenderer(environment).render(pages, **context)
    assert "Fish &amp; &lt;Chips&gt;" in html


@pytest.mark.parametrize("has_notes", [False, True])
@pytest.mark.parametrize("levels", LEVEL_SEQUENCES)
def test_nav_map_play_order_is_contiguous(environment, context, levels, has_notes):
    ncx = NavMapRenderer(environment, has_notes=has_notes).render(make_pages(levels), **context)
    orders = [int(value) for value in re.findall(r'playOrder="(\d+)"', ncx)]
    expected_total = len(levels) + 2 + (1 if has_notes else 0)
    assert sorted(orders) == list(range(1, expected_total + 1))
    assert ncx.count("<navPoint ") == ncx.count("</navPoint>") == expected_total


def test_nav_map_scenario(environment, context):
    ncx = NavMapRenderer(environment).render(make_pages([0, 1, 1, 0]), **context)
    orders = [int(value) for value in re.findall(r'playOrder="(\d+)"', ncx)]
    assert orders == [1, 2, 3, 4, 5, 6]
    assert 'src="OEBPS/page-0.html"' in ncx
    assert '<meta name="dtb:depth" content="2"/>' in ncx


def test_nav_map_notes_come_last(environment, context):
    ncx = NavMapRenderer(environment, has_notes=True).render(make_pages([0, 0]), **context)
    assert 'id="notes" playOrder="5"' in ncx
    assert ncx.index('id="notes"') > ncx.index('id="page-1"')

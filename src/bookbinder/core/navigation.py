"""Navigation trees derived from the page level sequence.

Both the in-book outline (nested lists) and the NCX navigation map are
rendered from the same tree. The tree is built with a depth stack: a page
one level deeper than the current depth opens a container under the
previous page, a page on the same level becomes a sibling, and a
shallower page closes containers until its depth is reached.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from jinja2 import Environment

from bookbinder.errors import InvalidHierarchyError
from bookbinder.models.book import PageEntry

TITLE_PAGE = "title-page.html"
OUTLINE_PAGE = "table-of-contents.html"
NOTES_PAGE = "notes.html"


def page_file_name(index: int) -> str:
    return f"page-{index}.html"


@dataclass
class NavNode:
    """Node of a navigation tree."""

    id: str
    title: str
    href: str
    level: int
    play_order: int | None = None
    children: list["NavNode"] = field(default_factory=list)


def build_nav_tree(
    pages: Sequence[PageEntry],
    href_prefix: str = "",
    start_order: int | None = None,
) -> list[NavNode]:
    """Build the page tree in document order.

    Args:
        pages: Pages in final order, already validated
        href_prefix: Prefix joined to each page file name
        start_order: First play order number; None leaves nodes unnumbered

    Returns:
        Top-level nodes; nested pages hang off their parent's children
    """
    roots: list[NavNode] = []
    # stack[d] is the open container at depth d
    stack: list[list[NavNode]] = [roots]

    for index, page in enumerate(pages):
        depth = len(stack) - 1
        if page.level > depth:
            if page.level != depth + 1 or not stack[-1]:
                raise InvalidHierarchyError(page.level, depth if index else None)
            stack.append(stack[-1][-1].children)
        else:
            while len(stack) - 1 > page.level:
                stack.pop()

        stack[-1].append(
            NavNode(
                id=f"page-{index}",
                title=page.title,
                href=f"{href_prefix}{page_file_name(index)}",
                level=page.level,
                play_order=None if start_order is None else start_order + index,
            )
        )

    return roots


def iter_nodes(nodes: Sequence[NavNode]):
    """Yield every node depth-first, in document order."""
    for node in nodes:
        yield node
        yield from iter_nodes(node.children)


def tree_depth(nodes: Sequence[NavNode]) -> int:
    """Number of nested containers needed to hold the tree."""
    if not nodes:
        return 0
    return 1 + max(tree_depth(node.children) for node in nodes)


class TreeRenderer:
    """Renders a page tree through one of the book templates."""

    template_name: str = ""
    href_prefix: str = ""
    numbered: bool = False

    def __init__(self, environment: Environment):
        self.environment = environment

    def build(self, pages: Sequence[PageEntry]) -> list[NavNode]:
        start = self.first_page_order() if self.numbered else None
        return build_nav_tree(pages, href_prefix=self.href_prefix, start_order=start)

    def first_page_order(self) -> int:
        return 1

    def render(self, pages: Sequence[PageEntry], **context: Any) -> str:
        nodes = self.build(pages)
        template = self.environment.get_template(self.template_name)
        return template.render(nodes=nodes, **self.extra_context(pages, nodes), **context)

    def extra_context(self, pages: Sequence[PageEntry], nodes: list[NavNode]) -> dict[str, Any]:
        return {}


class OutlineRenderer(TreeRenderer):
    """Nested-list table of contents shown inside the book."""

    template_name = "OEBPS/table-of-contents.html"


class NavMapRenderer(TreeRenderer):
    """NCX navigation map with sequential play order.

    Order: title page, outline page, content pages, then notes if any.
    Numbering ignores nesting depth.
    """

    template_name = "toc.ncx"
    href_prefix = "OEBPS/"
    numbered = True

    def __init__(self, environment: Environment, has_notes: bool = False):
        super().__init__(environment)
        self.has_notes = has_notes

    def first_page_order(self) -> int:
        return 3

    def extra_context(self, pages: Sequence[PageEntry], nodes: list[NavNode]) -> dict[str, Any]:
        title_node = NavNode(
            id="title-page", title="", href=f"{self.href_prefix}{TITLE_PAGE}", level=0, play_order=1
        )
        outline_node = NavNode(
            id="table-of-contents", title="", href=f"{self.href_prefix}{OUTLINE_PAGE}", level=0, play_order=2
        )
        notes_node = None
        if self.has_notes:
            notes_node = NavNode(
                id="notes",
                title="",
                href=f"{self.href_prefix}{NOTES_PAGE}",
                level=0,
                play_order=len(pages) + 3,
            )
        return {
            "title_node": title_node,
            "outline_node": outline_node,
            "notes_node": notes_node,
            "depth": max(tree_depth(nodes), 1),
        }

"""Process page HTML into XHTML, plain text and expanded templates."""

import html
import re
from collections.abc import Callable, Mapping

from bs4 import BeautifulSoup
from lxml import etree
from lxml import html as lxml_html

# {{ name }} or {{ image("name") }}; nothing else is evaluated
PLACEHOLDER_RE = re.compile(
    r"\{\{\s*(?:image\(\s*(?P<quote>['\"])(?P<image>.*?)(?P=quote)\s*\)"
    r"|(?P<var>[A-Za-z_][A-Za-z0-9_]*))\s*\}\}"
)

PAGE_VARIABLES = frozenset({"title", "book_title", "author", "publisher", "locale"})


class ContentProcessor:
    """Process HTML fragments for the book documents."""

    def find_unknown_variables(
        self, template: str, allowed: frozenset[str] = PAGE_VARIABLES
    ) -> list[str]:
        """Variable names used in a template that will not be available."""
        unknown = []
        for match in PLACEHOLDER_RE.finditer(template):
            name = match.group("var")
            if name and name not in allowed and name not in unknown:
                unknown.append(name)
        return unknown

    def expand(
        self,
        template: str,
        variables: Mapping[str, str],
        resolve_image: Callable[[str], str],
    ) -> str:
        """Substitute variables and image references in page content."""

        def replace(match: re.Match) -> str:
            image_name = match.group("image")
            if image_name is not None:
                src = html.escape(resolve_image(image_name), quote=True)
                return f'<img src="{src}" alt=""/>'
            return html.escape(str(variables.get(match.group("var"), "")))

        return PLACEHOLDER_RE.sub(replace, template)

    def to_xhtml(self, html_content: object) -> str:
        """Normalise an HTML fragment into well-formed XHTML markup.

        Nodes are serialised with the XML method, so void elements close
        and text inside script or style is escaped.
        """
        if not isinstance(html_content, str) or not html_content.strip():
            return ""

        parts = []
        for node in lxml_html.fragments_fromstring(html_content):
            if isinstance(node, str):
                parts.append(html.escape(node, quote=False))
            else:
                parts.append(etree.tostring(node, method="xml", encoding="unicode"))
        return "".join(parts)

    def to_text(self, html_content: object, no_br: bool = False) -> str:
        """Extract plain text with line breaks at block boundaries."""
        if not isinstance(html_content, str):
            return ""

        # Remove style and script blocks
        cleaned = re.sub(r"<style([\s\S]*?)</style>", "", html_content, flags=re.I)
        cleaned = re.sub(r"<script([\s\S]*?)</script>", "", cleaned, flags=re.I)

        # Block ends become line breaks
        cleaned = re.sub(r"</(div|p|li|dd|h[1-6])>", "\n", cleaned, flags=re.I)
        cleaned = re.sub(r"<(br|hr)\s*/?>", "\n", cleaned, flags=re.I)
        cleaned = re.sub(r"<li>", "+ ", cleaned, flags=re.I)

        # Remaining tags
        cleaned = re.sub(r"<[^>]+>", "", cleaned)
        cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)

        text = BeautifulSoup(cleaned, "lxml").get_text().strip()
        if no_br:
            text = re.sub(r"\n+", " ", text)
        return text

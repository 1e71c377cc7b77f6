"""
Markdown rendering for feature descriptions.

Descriptions are rendered with ``markdown-it-py`` using the CommonMark
rules plus tables and strikethrough.  Raw HTML in the source is
disabled, so literal tags are escaped rather than passed through.  The
rendered HTML is then cleaned with ``nh3`` against an allow‑list of
formatting tags and attributes.

The parser is built once at import time and only read afterwards.
"""

from typing import Optional

import nh3
from markdown_it import MarkdownIt

_markdown = MarkdownIt("commonmark", {"html": False}).enable(["table", "strikethrough"])

ALLOWED_TAGS = {
    "a", "blockquote", "br", "code", "del", "em", "h1", "h2", "h3", "h4", "h5", "h6",
    "hr", "img", "li", "ol", "p", "pre", "s", "strong", "table", "tbody", "td", "th",
    "thead", "tr", "ul",
}

ALLOWED_ATTRIBUTES = {
    "a": {"href", "title"},
    "code": {"class"},
    "img": {"src", "alt", "title"},
    "ol": {"start"},
    "td": {"style"},
    "th": {"style"},
}


class MarkdownService:
    """Render Markdown to sanitised HTML."""

    @classmethod
    def render_to_html(cls, markdown: Optional[str]) -> str:
        """Convert ``markdown`` to HTML.

        ``None``, empty and whitespace‑only input render to an empty
        string.
        """
        if markdown is None or not markdown.strip():
            return ""
        return cls.sanitize_html(_markdown.render(markdown))

    @staticmethod
    def sanitize_html(html: Optional[str]) -> str:
        """Strip every tag and attribute not on the allow‑list."""
        if html is None or not html.strip():
            return ""
        return nh3.clean(
            html,
            tags=ALLOWED_TAGS,
            attributes=ALLOWED_ATTRIBUTES,
            url_schemes={"http", "https", "mailto"},
            link_rel=None,
        )

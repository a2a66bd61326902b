"""
Markdown rendering and plain-text derivation for post bodies.

Post bodies are MDX-flavoured Markdown: besides plain Markdown they may embed
components such as ``<Callout type="info">...</Callout>`` or ``<Chart />``.
Those components have no meaning outside the source blog, so they are
removed before rendering, summarizing or counting words.
"""

from __future__ import annotations

import logging
import re

import markdown
import pymdownx.emoji

logger = logging.getLogger(__name__)


# Capitalised tag, optional attributes, optionally followed by its content and closing tag
MDX_COMPONENT_RE = re.compile(
    r"<[A-Z][a-zA-Z0-9]*(?:\s+[^>]*)?\s*/?>(?:.*?</[A-Z][a-zA-Z0-9]*>)?",
    re.DOTALL,
)

_PLAIN_TEXT_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"`[^`]+`"), ""),
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), ""),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),
    (re.compile(r"\*([^*]+)\*"), r"\1"),
    (re.compile(r"__([^_]+)__"), r"\1"),
    (re.compile(r"_([^_]+)_"), r"\1"),
    (re.compile(r"^#+\s+", re.MULTILINE), ""),
    (re.compile(r"^>\s+", re.MULTILINE), ""),
    (re.compile(r"^[-*_]{3,}\s*$", re.MULTILINE), ""),
    (re.compile(r"\s+"), " "),
]

MARKDOWN_EXTENSIONS = [
    "extra",
    "toc",
    "sane_lists",
    "pymdownx.magiclink",
    "pymdownx.emoji",
]

# Shortcodes such as :tada: render as the Unicode character, not an image
MARKDOWN_EXTENSION_CONFIGS = {
    "pymdownx.emoji": {
        "emoji_index": pymdownx.emoji.gemoji,
        "emoji_generator": pymdownx.emoji.to_alt,
    },
}

RENDER_ERROR_HTML = "<p>Error rendering content</p>"


def strip_mdx_components(text: str) -> str:
    return MDX_COMPONENT_RE.sub("", text)


def to_plain_text(text: str) -> str:
    """Reduce Markdown to plain text by removing common syntax.

    Code is dropped entirely, link text is kept, emphasis is unwrapped and
    all whitespace runs collapse to single spaces.
    """
    for pattern, replacement in _PLAIN_TEXT_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


class MarkdownRenderer:
    """Renders post bodies to HTML and derives summaries and word counts.

    Attributes:
        summary_max_chars: Default length limit for generated summaries
    """

    def __init__(self, summary_max_chars: int = 200):
        self.summary_max_chars = summary_max_chars
        self._md = markdown.Markdown(
            extensions=MARKDOWN_EXTENSIONS,
            extension_configs=MARKDOWN_EXTENSION_CONFIGS,
            output_format="html",
        )

    def render_html(self, text: str) -> str:
        """Render Markdown to HTML after stripping MDX components."""
        try:
            cleaned = strip_mdx_components(text)
            return self._md.reset().convert(cleaned)
        except Exception:  # noqa: BLE001
            logger.exception("Error rendering markdown to HTML")
            return RENDER_ERROR_HTML

    def generate_summary(self, text: str, max_length: int | None = None) -> str:
        """Build a short description from the first paragraph of a post.

        Text longer than ``max_length`` is cut at the last word boundary
        before the limit and suffixed with "...".
        """
        limit = self.summary_max_chars if max_length is None else max_length
        plain = to_plain_text(strip_mdx_components(text))

        lines = [line for line in plain.split("\n") if line]
        first_paragraph = lines[0].strip() if lines else ""
        if len(first_paragraph) <= limit:
            return first_paragraph

        truncated = first_paragraph[:limit]
        last_space = truncated.rfind(" ")
        if last_space > 0:
            truncated = truncated[:last_space]
        return truncated + "..."

    def word_count(self, text: str) -> int:
        plain = to_plain_text(strip_mdx_components(text))
        return len(plain.split())

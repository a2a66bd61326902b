"""
YAML front matter parsing for Markdown/MDX posts.

A post file starts with a metadata block delimited by ``---`` lines:

    ---
    title: My Post
    date: 2024-05-01
    categories: [Programming/Architecture]
    tags: python, testing
    ---
    Body text...

Files without a header, or with a header that is not valid YAML, still
produce a (default) PostFrontmatter so the body can be used.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import yaml

from .types import PostFrontmatter

logger = logging.getLogger(__name__)


FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n(.*)$", re.DOTALL)

# YAML key -> PostFrontmatter attribute
_FIELDS = {
    "title": "title",
    "date": "date",
    "description": "description",
    "featured": "featured",
    "tags": "tags",
    "categories": "categories",
    "series": "series",
    "seriesOrder": "series_order",
    "useToc": "use_toc",
    "syndicate": "syndicate",
}


def parse_frontmatter(text: str) -> tuple[PostFrontmatter, str]:
    """Split a post into its front matter and Markdown body.

    Args:
        text: Full file content

    Returns:
        A tuple of (frontmatter, body). Without a header the body is the
        text unchanged; with one it is the remainder, stripped.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return PostFrontmatter(), text

    yaml_text = match.group(1)
    body = match.group(2).strip()

    try:
        raw = yaml.safe_load(yaml_text)
    except (yaml.YAMLError, ValueError) as exc:
        # PyYAML raises a plain ValueError for impossible timestamps such as 2024-02-30
        logger.warning(f"Error parsing frontmatter: {exc}")
        return PostFrontmatter(), body

    if raw is None:
        return PostFrontmatter(), body
    if not isinstance(raw, dict):
        logger.warning("Frontmatter is not a mapping, ignoring it")
        return PostFrontmatter(), body

    return _build_frontmatter(raw), body


def _build_frontmatter(raw: dict[str, Any]) -> PostFrontmatter:
    values: dict[str, Any] = {}
    for key, attr in _FIELDS.items():
        if key in raw:
            values[attr] = raw[key]

    fm = PostFrontmatter(**values)
    for attr in ("title", "description", "featured", "series"):
        value = getattr(fm, attr)
        if value is not None and not isinstance(value, str):
            setattr(fm, attr, str(value))
    fm.use_toc = _coerce_bool(fm.use_toc) or False
    fm.syndicate = _coerce_bool(fm.syndicate)
    return fm


def _coerce_bool(value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "on", "1"):
            return True
        if lowered in ("false", "no", "off", "0"):
            return False
    return None


def normalize_tags(tags: Any) -> list[str]:
    """Normalize a tags value to a list of strings.

    Examples:
        >>> normalize_tags("python, testing")
        ['python', 'testing']
        >>> normalize_tags(["python", None, ""])
        ['python']
    """
    if tags is None:
        return []
    if isinstance(tags, str):
        return [t.strip() for t in tags.split(",") if t.strip()]
    if isinstance(tags, (list, tuple)):
        return _string_items(tags)
    return []


def normalize_categories(categories: Any) -> list[str]:
    """Normalize a categories value to a list of strings.

    Unlike tags, a single string is not split: it is one category, which
    may be a slash-delimited hierarchy such as "Programming/Architecture".
    """
    if categories is None:
        return []
    if isinstance(categories, str):
        return [categories]
    if isinstance(categories, (list, tuple)):
        return _string_items(categories)
    return []


def parse_series_order(series_order: Any) -> int | None:
    if isinstance(series_order, bool):
        return None
    if isinstance(series_order, int):
        return series_order
    if isinstance(series_order, str):
        try:
            return int(series_order.strip())
        except ValueError:
            return None
    return None


def _string_items(items: Any) -> list[str]:
    result = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            result.append(text)
    return result

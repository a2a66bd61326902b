"""
JSON serialization of the post list.

The site reads ``posts.json``: an array of post records with camelCase keys
and ISO 8601 dates. Missing optional values are written as ``null``.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..core.frontmatter import normalize_categories, normalize_tags, parse_series_order
from ..core.types import SOURCE_LOCAL, BlogPost


def post_to_dict(post: BlogPost) -> dict[str, Any]:
    return {
        "id": post.id,
        "title": post.title,
        "date": post.date.isoformat(timespec="seconds"),
        "description": post.description,
        "featured": post.featured,
        "tags": list(post.tags),
        "categories": list(post.categories),
        "series": post.series,
        "seriesOrder": post.series_order,
        "content": post.content,
        "contentHtml": post.content_html,
        "stub": post.stub,
        "wordCount": post.word_count,
        "useToc": post.use_toc,
        "source": post.source,
        "canonicalUrl": post.canonical_url,
    }


def post_from_dict(data: dict[str, Any]) -> BlogPost:
    """Build a BlogPost from a camelCase post record.

    ``tags`` and ``categories`` are normalized the same way as front matter
    values, so a comma separated tag string becomes a list. ``seriesOrder``
    may be an integer or a numeric string.

    Raises:
        ValueError: If ``id``, ``title`` or a valid ``date`` is missing, or a
            field holds a value of the wrong shape
    """
    post_id = data.get("id")
    title = data.get("title")
    if not post_id or not title:
        raise ValueError("post record is missing 'id' or 'title'")

    date = _parse_iso_datetime(data.get("date"))
    description = _optional_str(data, "description")
    return BlogPost(
        id=str(post_id),
        title=str(title),
        date=date,
        content=_optional_str(data, "content") or "",
        content_html=_optional_str(data, "contentHtml") or "",
        stub=_optional_str(data, "stub") or description or "",
        description=description,
        featured=_optional_str(data, "featured"),
        tags=normalize_tags(_list_field(data, "tags")),
        categories=normalize_categories(_list_field(data, "categories")),
        series=_optional_str(data, "series"),
        series_order=_series_order_field(data),
        word_count=int(data.get("wordCount") or 0),
        use_toc=bool(data.get("useToc", False)),
        source=data.get("source") or SOURCE_LOCAL,
        canonical_url=_optional_str(data, "canonicalUrl"),
    )


def write_posts_json(posts: list[BlogPost], output_path: Path, indent: int = 2) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [post_to_dict(post) for post in posts]
    output_path.write_text(
        f"{json.dumps(payload, ensure_ascii=False, indent=indent)}\n", encoding="utf-8"
    )
    return output_path


def read_posts_json(path: Path) -> list[BlogPost]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path} does not contain a JSON array of posts")
    return [post_from_dict(item) for item in raw]


def _parse_iso_datetime(value: Any) -> datetime:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("post record is missing 'date'")
    raw = value.strip()
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is not None:
        return parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValueError(f"post record field '{key}' must be a string")


def _list_field(data: dict[str, Any], key: str) -> Any:
    value = data.get(key)
    if value is None or isinstance(value, (str, list)):
        return value
    raise ValueError(f"post record field '{key}' must be a list or a string")


def _series_order_field(data: dict[str, Any]) -> int | None:
    value = data.get("seriesOrder")
    if value is None:
        return None
    order = parse_series_order(value)
    if order is None:
        raise ValueError(f"post record field 'seriesOrder' is not an integer: {value!r}")
    return order

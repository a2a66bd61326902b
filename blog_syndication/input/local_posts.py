"""
Loading of locally authored posts.

The local posts directory may hold Markdown/MDX files, parsed exactly like
syndicated ones, and JSON files holding a single post record or an array
of records in the ``posts.json`` format. Files that cannot be read or
parsed are skipped with a warning.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..core.types import SOURCE_LOCAL, BlogPost
from ..output.writer import post_from_dict
from ..parser import build_post
from ..renderer import MarkdownRenderer

logger = logging.getLogger(__name__)


MARKDOWN_SUFFIXES = {".md", ".mdx"}


def list_local_files(directory: Path) -> list[Path]:
    """List top-level post files of a directory, sorted by name."""
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix.lower() in MARKDOWN_SUFFIXES | {".json"}
    )


def load_local_posts(directory: Path, renderer: MarkdownRenderer) -> list[BlogPost]:
    """Load all local posts from a directory.

    Raises:
        FileNotFoundError: If the directory does not exist
    """
    if not directory.is_dir():
        raise FileNotFoundError(f"Local posts directory not found: {directory}")

    posts: list[BlogPost] = []
    for path in list_local_files(directory):
        if path.suffix.lower() == ".json":
            posts.extend(_load_json_posts(path))
            continue
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(f"Skipping unreadable local post {path.name}: {exc}")
            continue
        try:
            post = build_post(path.name, content, renderer, source=SOURCE_LOCAL)
        except Exception:  # noqa: BLE001
            logger.exception(f"Error parsing local post {path.name}")
            continue
        if post is not None:
            posts.append(post)

    logger.info(f"Loaded {len(posts)} local posts from {directory}")
    return posts


def _load_json_posts(path: Path) -> list[BlogPost]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning(f"Skipping invalid JSON post file {path.name}: {exc}")
        return []

    records = raw if isinstance(raw, list) else [raw]
    posts: list[BlogPost] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning(f"Skipping non-object record #{index} in {path.name}")
            continue
        try:
            post = post_from_dict(record)
        except (ValueError, TypeError) as exc:
            logger.warning(f"Skipping record #{index} in {path.name}: {exc}")
            continue
        post.source = SOURCE_LOCAL
        posts.append(post)
    return posts

"""
Post deduplication and ordering.

Posts are identified by their slug. When the same slug appears more than
once the first occurrence is kept, except that a locally authored post
always replaces a syndicated one.
"""

from __future__ import annotations

import logging

from .types import SOURCE_LOCAL, SOURCE_SYNDICATED, BlogPost

logger = logging.getLogger(__name__)


def dedup_posts(posts: list[BlogPost]) -> list[BlogPost]:
    """Remove posts with duplicate ids.

    A replaced post keeps the position of the post it replaced, so the
    result is ordered by first appearance of each id.

    Args:
        posts: Posts in priority order (local posts usually first)

    Returns:
        Deduplicated list of posts
    """
    kept: dict[str, BlogPost] = {}

    for post in posts:
        existing = kept.get(post.id)
        if existing is None:
            kept[post.id] = post
            continue
        if post.source == SOURCE_LOCAL and existing.source == SOURCE_SYNDICATED:
            kept[post.id] = post
            logger.info(f"Local post '{post.title}' overrides syndicated version")
        else:
            logger.debug(f"Skipping duplicate post '{post.title}' ({post.id})")

    return list(kept.values())


def sort_posts(posts: list[BlogPost]) -> list[BlogPost]:
    """Sort posts newest first. Posts with equal dates keep their order."""
    return sorted(posts, key=lambda post: post.date, reverse=True)

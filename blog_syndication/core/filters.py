"""
Category and tag filtering for syndicated posts.

Category rules match hierarchically: categories are slash-delimited paths
("Programming/Architecture"), and a rule matches a category when either one
is an ancestor of the other. Tag rules match exactly. All comparisons are
case-insensitive.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..config import FilterConfig
from .types import BlogPost

logger = logging.getLogger(__name__)


def filter_posts(posts: list[BlogPost], filters: FilterConfig | None) -> list[BlogPost]:
    """Return the posts that pass the filters, preserving order."""
    if filters is None:
        logger.info("No filters configured, returning all posts")
        return list(posts)

    filtered = [post for post in posts if should_include_post(post, filters)]
    logger.info(f"Filtered {len(posts)} posts down to {len(filtered)} posts")
    return filtered


def should_include_post(post: BlogPost, filters: FilterConfig) -> bool:
    """Decide whether a post passes the filters.

    Checks run in precedence order: explicit ``syndicate: false`` opt-out,
    excluded tags, excluded categories, then included categories (only when
    any are configured).
    """
    if post.syndicate is False:
        logger.debug(f"Excluding post '{post.title}' - syndication disabled in frontmatter")
        return False

    excluded_tags = {str(tag).casefold() for tag in filters.excluded_tags}
    if excluded_tags and any(tag.casefold() in excluded_tags for tag in post.tags):
        logger.debug(f"Excluding post '{post.title}' - has excluded tag")
        return False

    if filters.excluded_categories and any(
        is_matching_category(category, filters.excluded_categories)
        for category in post.categories
    ):
        logger.debug(f"Excluding post '{post.title}' - has excluded category")
        return False

    if filters.included_categories and not any(
        is_matching_category(category, filters.included_categories)
        for category in post.categories
    ):
        logger.debug(f"Excluding post '{post.title}' - does not match included categories")
        return False

    return True


def is_matching_category(post_category: str, filter_categories: Iterable[str]) -> bool:
    """Check whether a post category matches any filter category.

    Examples:
        >>> is_matching_category("Programming/Architecture", ["Programming"])
        True
        >>> is_matching_category("Programming", ["programming/architecture"])
        True
        >>> is_matching_category("Programming-Languages", ["Programming"])
        False
    """
    category = post_category.casefold()
    for filter_category in filter_categories:
        rule = str(filter_category).casefold()
        if category == rule:
            return True
        # Post category is nested under the rule
        if category.startswith(rule + "/"):
            return True
        # Rule is nested under the post category
        if rule.startswith(category + "/"):
            return True
    return False

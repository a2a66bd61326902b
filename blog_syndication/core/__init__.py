"""
Core domain models and business logic.

This package contains data types and business logic that is
independent of where posts come from or where they are written.
"""

from .types import SOURCE_LOCAL, SOURCE_SYNDICATED, BlogPost, PostFrontmatter
from .dates import parse_post_date
from .dedup import dedup_posts, sort_posts
from .filters import filter_posts, is_matching_category, should_include_post
from .frontmatter import normalize_categories, normalize_tags, parse_frontmatter, parse_series_order
from .slug import canonical_url, slug_from_filename

__all__ = [
    "BlogPost",
    "PostFrontmatter",
    "SOURCE_LOCAL",
    "SOURCE_SYNDICATED",
    "canonical_url",
    "dedup_posts",
    "filter_posts",
    "is_matching_category",
    "normalize_categories",
    "normalize_tags",
    "parse_frontmatter",
    "parse_post_date",
    "parse_series_order",
    "should_include_post",
    "slug_from_filename",
    "sort_posts",
]

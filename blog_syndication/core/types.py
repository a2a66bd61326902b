"""
Core data types for blog syndication.

This module defines the fundamental data structures used throughout the pipeline:
- PostFrontmatter: Raw metadata header parsed from a post file
- BlogPost: Normalized post record written to the output file
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


SOURCE_LOCAL = "local"
SOURCE_SYNDICATED = "syndicated"


@dataclass
class PostFrontmatter:
    """Metadata header of a Markdown/MDX post.

    Values are kept as they come out of YAML; ``tags``, ``categories`` and
    ``series_order`` accept several shapes and are normalized later.

    Attributes:
        title: Post title
        date: Raw date value (string, or date/datetime when YAML typed it)
        description: Short description used as the post stub
        featured: Featured image reference
        tags: A list of tags or a comma-separated string
        categories: A list of categories or a single category string
        series: Name of the series the post belongs to
        series_order: Position inside the series (int or numeric string)
        use_toc: Whether the site renders a table of contents
        syndicate: Explicit opt-in/opt-out for syndication, None when unset
    """
    title: str | None = None
    date: Any = None
    description: str | None = None
    featured: str | None = None
    tags: Any = None
    categories: Any = None
    series: str | None = None
    series_order: Any = None
    use_toc: bool = False
    syndicate: bool | None = None


@dataclass
class BlogPost:
    """A normalized blog post, local or syndicated.

    Attributes:
        id: URL slug, unique across the final post list
        title: Post title
        date: Publication date
        content: Markdown body (front matter removed)
        content_html: Rendered HTML body
        stub: Short text shown in listings, same as description
        description: Description from front matter or a generated summary
        featured: Featured image reference
        tags: Normalized tags
        categories: Normalized categories, possibly slash-delimited hierarchies
        series: Series name
        series_order: Position inside the series
        word_count: Number of words in the plain-text body
        use_toc: Whether the site renders a table of contents
        source: "local" or "syndicated"
        canonical_url: Authoritative address of a syndicated post
        syndicate: Front matter syndication flag, not written to output
    """
    id: str
    title: str
    date: datetime
    content: str
    content_html: str
    stub: str
    description: str | None = None
    featured: str | None = None
    tags: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    series: str | None = None
    series_order: int | None = None
    word_count: int = 0
    use_toc: bool = False
    source: str = SOURCE_LOCAL
    canonical_url: str | None = None
    syndicate: bool | None = None

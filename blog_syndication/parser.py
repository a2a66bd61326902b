"""
Conversion of raw post files into BlogPost records.

A post file is Markdown/MDX with a YAML front matter header. The slug is
taken from the filename, the date from the front matter (posts without a
usable date are skipped), and the HTML, description and word count are
derived from the body.
"""

from __future__ import annotations

import logging

from .core.dates import parse_post_date
from .core.frontmatter import (
    normalize_categories,
    normalize_tags,
    parse_frontmatter,
    parse_series_order,
)
from .core.slug import canonical_url, slug_from_filename, title_from_filename
from .core.types import SOURCE_SYNDICATED, BlogPost
from .renderer import MarkdownRenderer

logger = logging.getLogger(__name__)


def build_post(
    filename: str,
    content: str,
    renderer: MarkdownRenderer,
    *,
    source: str = SOURCE_SYNDICATED,
    base_url: str | None = None,
) -> BlogPost | None:
    """Parse one post file.

    Args:
        filename: Name of the file, used for the slug and as fallback title
        content: Raw file text including the front matter
        renderer: Markdown renderer for HTML, summary and word count
        source: "local" or "syndicated"
        base_url: Source blog URL for the canonical link, None for no link

    Returns:
        The parsed post, or None when the front matter has no valid date
    """
    logger.debug(f"Parsing post: {filename}")
    frontmatter, body = parse_frontmatter(content)

    slug = slug_from_filename(filename)

    date = parse_post_date(frontmatter.date)
    if date is None:
        logger.warning(f"Invalid or missing date for {filename}, skipping")
        return None

    description = frontmatter.description
    if description is None:
        description = renderer.generate_summary(body)

    return BlogPost(
        id=slug,
        title=frontmatter.title or title_from_filename(filename),
        date=date,
        description=description,
        featured=frontmatter.featured,
        tags=normalize_tags(frontmatter.tags),
        categories=normalize_categories(frontmatter.categories),
        series=frontmatter.series,
        series_order=parse_series_order(frontmatter.series_order),
        content=body,
        content_html=renderer.render_html(body),
        stub=description,
        word_count=renderer.word_count(body),
        use_toc=frontmatter.use_toc,
        source=source,
        canonical_url=canonical_url(base_url, slug),
        syndicate=frontmatter.syndicate,
    )

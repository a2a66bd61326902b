from __future__ import annotations

from pathlib import PurePosixPath


def slug_from_filename(filename: str) -> str:
    """Derive a post slug from its filename.

    Example:
        >>> slug_from_filename("My Awesome Post.mdx")
        'my-awesome-post'
    """
    return PurePosixPath(filename).stem.lower().replace(" ", "-")


def title_from_filename(filename: str) -> str:
    return PurePosixPath(filename).stem


def canonical_url(base_url: str | None, slug: str) -> str | None:
    """Build the canonical address of a syndicated post on its source blog."""
    if not base_url:
        return None
    return f"{base_url.rstrip('/')}/blog/{slug}"

"""Read-side queries over a written post list."""

from __future__ import annotations

from pathlib import Path

from .core.types import BlogPost
from .output.writer import read_posts_json


class PostIndex:
    """In-memory view of ``posts.json`` with the lookups the site performs.

    Posts are held newest first. Slug, tag and category lookups are
    case-insensitive; category lookup is an exact match, not hierarchical.
    """

    def __init__(self, posts: list[BlogPost]):
        self._posts = sorted(posts, key=lambda post: post.date, reverse=True)

    @classmethod
    def load(cls, path: Path) -> "PostIndex":
        return cls(read_posts_json(path))

    def all_posts(self) -> list[BlogPost]:
        return list(self._posts)

    def get_by_slug(self, slug: str) -> BlogPost | None:
        wanted = slug.casefold()
        for post in self._posts:
            if post.id.casefold() == wanted:
                return post
        return None

    def by_tag(self, tag: str) -> list[BlogPost]:
        wanted = tag.casefold()
        return [p for p in self._posts if any(t.casefold() == wanted for t in p.tags)]

    def by_category(self, category: str) -> list[BlogPost]:
        wanted = category.casefold()
        return [p for p in self._posts if any(c.casefold() == wanted for c in p.categories)]

    def all_tags(self) -> list[str]:
        return sorted({tag for post in self._posts for tag in post.tags})

    def all_categories(self) -> list[str]:
        return sorted({category for post in self._posts for category in post.categories})

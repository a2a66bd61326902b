"""Post list serialization."""

from .writer import post_from_dict, post_to_dict, read_posts_json, write_posts_json

__all__ = [
    "post_from_dict",
    "post_to_dict",
    "read_posts_json",
    "write_posts_json",
]

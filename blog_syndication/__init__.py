"""
Blog Syndication - post list builder for a static portfolio site.

This package merges locally authored posts with posts syndicated from a
GitHub repository, filters them by category and tag, deduplicates them
and writes a single ``posts.json`` file for the site to render.

Main entry point is the CLI via `blog-syndication run` command.

Example:
    $ blog-syndication run -c config.yaml -o wwwroot/data/posts.json
"""

__all__ = ["__version__", "BlogPost", "build_post", "syndicate_posts", "run_pipeline"]
__version__ = "0.1.0"

from .core.types import BlogPost
from .parser import build_post
from .runner import run_pipeline, syndicate_posts

"""
Input loading utilities.

This package contains code for reading locally authored posts.
"""

from .local_posts import load_local_posts

__all__ = ["load_local_posts"]

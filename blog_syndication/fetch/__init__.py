"""
Remote post fetching.

This package handles listing and downloading posts from the
external source repository.
"""

from .github import GitHubPostFetcher, RemoteFile

__all__ = ["GitHubPostFetcher", "RemoteFile"]

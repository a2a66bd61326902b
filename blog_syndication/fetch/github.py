"""
Post fetching from a GitHub repository.

Posts are discovered through the GitHub contents API, which lists the files
of a directory, and downloaded from the raw content host. Only Markdown and
MDX files are fetched. Problems with a single file are logged and the file
is skipped; a failed directory listing yields no posts.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Any

import httpx

from ..config import FetchConfig, GitHubSourceConfig, get_github_token

logger = logging.getLogger(__name__)


POST_EXTENSIONS = (".md", ".mdx")


@dataclass
class RemoteFile:
    """A post file downloaded from the remote repository.

    Attributes:
        name: Filename, e.g. "my-post.mdx"
        path: Path inside the repository, e.g. "posts/my-post.mdx"
        content: Raw file text
    """
    name: str
    path: str
    content: str


class GitHubPostFetcher:
    """Lists and downloads post files from a GitHub repository directory.

    Use as a context manager to close the underlying HTTP client, unless
    the client was passed in by the caller.
    """

    def __init__(
        self,
        source: GitHubSourceConfig,
        fetch_cfg: FetchConfig | None = None,
        client: httpx.Client | None = None,
    ):
        self.source = source
        self.fetch_cfg = fetch_cfg or FetchConfig()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=self.fetch_cfg.timeout_seconds,
            follow_redirects=True,
            trust_env=self.fetch_cfg.trust_env,
        )
        self._client.headers.update(self._build_headers())

    def __enter__(self) -> "GitHubPostFetcher":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    @property
    def listing_url(self) -> str:
        src = self.source
        api = src.api_base_url.rstrip("/")
        directory = src.posts_directory.strip("/")
        return f"{api}/repos/{src.owner}/{src.repo}/contents/{directory}?ref={src.branch}"

    def raw_url(self, path: str) -> str:
        src = self.source
        raw = src.raw_base_url.rstrip("/")
        return f"{raw}/{src.owner}/{src.repo}/{src.branch}/{path.lstrip('/')}"

    def fetch_posts(self) -> list[RemoteFile]:
        """Fetch every Markdown/MDX post in the configured directory.

        Returns:
            Downloaded files in listing order. Files that fail to download
            or are blank are left out.
        """
        posts: list[RemoteFile] = []
        for entry in self.list_post_files():
            name = entry.get("name", "")
            path = entry.get("path") or name
            try:
                content = self.fetch_file(path)
            except httpx.HTTPError as exc:
                logger.error(f"Error fetching content for {name}: {type(exc).__name__}: {exc}")
                continue
            if not content.strip():
                logger.warning(f"Skipping empty file {name}")
                continue
            posts.append(RemoteFile(name=name, path=path, content=content))
            logger.info(f"Fetched: {name} ({len(content)} bytes)")

        logger.info(f"Successfully fetched {len(posts)} posts")
        return posts

    def list_post_files(self) -> list[dict[str, Any]]:
        """List the Markdown/MDX entries of the posts directory.

        Returns:
            GitHub content entries (dicts with at least ``name`` and ``path``),
            or an empty list if the listing could not be retrieved.
        """
        url = self.listing_url
        logger.info(f"Fetching post list from: {url}")

        try:
            resp = self._get(url)
        except httpx.HTTPError as exc:
            logger.error(f"Error fetching posts from GitHub: {type(exc).__name__}: {exc}")
            return []

        if not resp.is_success:
            logger.error(f"Failed to fetch post list. Status: {resp.status_code}")
            if resp.status_code == 403:
                remaining = resp.headers.get("X-RateLimit-Remaining", "unknown")
                logger.warning(f"GitHub API rate limit may be exceeded. Remaining: {remaining}")
            return []

        try:
            files = resp.json()
        except ValueError as exc:
            logger.error(f"Invalid post list response: {exc}")
            return []

        if not isinstance(files, list) or not files:
            logger.warning(f"No files found in {self.source.posts_directory}")
            return []

        post_files = [
            entry
            for entry in files
            if isinstance(entry, dict)
            and str(entry.get("name", "")).lower().endswith(POST_EXTENSIONS)
        ]
        logger.info(f"Found {len(post_files)} markdown files")
        return post_files

    def fetch_file(self, path: str) -> str:
        """Download the raw text of one file.

        Raises:
            httpx.HTTPError: On transport failure or a non-success status
        """
        url = self.raw_url(path)
        logger.debug(f"Fetching raw content from: {url}")
        resp = self._get(url)
        resp.raise_for_status()
        return resp.text

    def _build_headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": self.fetch_cfg.user_agent,
            "Accept": "application/vnd.github.v3+json",
        }
        token = get_github_token(self.source)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _get(self, url: str) -> httpx.Response:
        """GET with retries on transport errors.

        HTTP error statuses are returned, not retried.
        """
        retries = max(self.fetch_cfg.retries, 0)
        attempt = 0
        while True:
            try:
                return self._client.get(url)
            except httpx.TransportError as exc:
                if attempt >= retries:
                    raise
                logger.debug(f"Retrying {url} after {type(exc).__name__}: {exc}")
                # Linear backoff: 0.5s, 1.0s, 1.5s...
                time.sleep(0.5 * (attempt + 1))
                attempt += 1

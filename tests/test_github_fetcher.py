"""Tests for the GitHub post fetcher using a mocked HTTP transport."""

from __future__ import annotations

import httpx

from blog_syndication.config import FetchConfig, GitHubSourceConfig
from blog_syndication.fetch.github import GitHubPostFetcher

SOURCE = GitHubSourceConfig(owner="octo", repo="blog", branch="main", posts_directory="posts")
LISTING_URL = "https://api.github.com/repos/octo/blog/contents/posts"
RAW_BASE = "https://raw.githubusercontent.com/octo/blog/main"


def _listing(*names: str) -> list[dict]:
    return [{"name": n, "path": f"posts/{n}", "type": "file", "size": 10} for n in names]


def _fetcher(handler, source: GitHubSourceConfig = SOURCE, retries: int = 0) -> GitHubPostFetcher:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return GitHubPostFetcher(source, FetchConfig(retries=retries), client=client)


def test_fetch_posts_lists_and_downloads_markdown_files():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        url = str(request.url)
        if url.startswith(LISTING_URL):
            assert request.url.params["ref"] == "main"
            return httpx.Response(200, json=_listing("first.mdx", "second.MD", "image.png", "notes.txt"))
        if url == f"{RAW_BASE}/posts/first.mdx":
            return httpx.Response(200, text="---\ntitle: First\n---\nHello")
        if url == f"{RAW_BASE}/posts/second.MD":
            return httpx.Response(200, text="Second body")
        return httpx.Response(404)

    posts = _fetcher(handler).fetch_posts()

    assert [p.name for p in posts] == ["first.mdx", "second.MD"]
    assert posts[0].path == "posts/first.mdx"
    assert posts[0].content.startswith("---")
    assert seen[0].headers["Accept"] == "application/vnd.github.v3+json"
    assert seen[0].headers["User-Agent"] == "JdhPro-BlogSyndication"
    assert len(seen) == 3


def test_failed_file_download_is_skipped():
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url.startswith(LISTING_URL):
            return httpx.Response(200, json=_listing("ok.md", "missing.md", "blank.md"))
        if url.endswith("/ok.md"):
            return httpx.Response(200, text="content")
        if url.endswith("/blank.md"):
            return httpx.Response(200, text="   \n")
        return httpx.Response(500)

    posts = _fetcher(handler).fetch_posts()

    assert [p.name for p in posts] == ["ok.md"]


def test_listing_failure_returns_no_posts():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    assert _fetcher(handler).fetch_posts() == []


def test_rate_limit_is_logged(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, headers={"X-RateLimit-Remaining": "0"})

    with caplog.at_level("WARNING", logger="blog_syndication"):
        assert _fetcher(handler).list_post_files() == []

    assert "rate limit" in caplog.text
    assert "Remaining: 0" in caplog.text


def test_non_list_listing_returns_no_posts():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"name": "posts", "type": "file"})

    assert _fetcher(handler).list_post_files() == []


def test_transport_errors_are_retried(monkeypatch):
    monkeypatch.setattr("blog_syndication.fetch.github.time.sleep", lambda _s: None)
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url).startswith(LISTING_URL):
            attempts["count"] += 1
            if attempts["count"] < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=_listing("a.md"))
        return httpx.Response(200, text="body")

    posts = _fetcher(handler, retries=2).fetch_posts()

    assert attempts["count"] == 3
    assert [p.name for p in posts] == ["a.md"]


def test_exhausted_retries_return_no_posts(monkeypatch):
    monkeypatch.setattr("blog_syndication.fetch.github.time.sleep", lambda _s: None)

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    assert _fetcher(handler, retries=1).fetch_posts() == []


def test_token_is_sent_as_bearer(monkeypatch):
    monkeypatch.setenv("BLOG_TOKEN_TEST", "secret")
    source = GitHubSourceConfig(owner="octo", repo="blog", token_env="BLOG_TOKEN_TEST")
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=[])

    _fetcher(handler, source=source).list_post_files()

    assert captured[0].headers["Authorization"] == "Bearer secret"


def test_urls_use_configured_bases():
    source = GitHubSourceConfig(
        owner="octo",
        repo="blog",
        branch="dev",
        posts_directory="/content/posts/",
        api_base_url="https://ghe.example.com/api/v3/",
        raw_base_url="https://raw.example.com",
    )
    fetcher = GitHubPostFetcher(source, client=httpx.Client())

    assert fetcher.listing_url == "https://ghe.example.com/api/v3/repos/octo/blog/contents/content/posts?ref=dev"
    assert fetcher.raw_url("content/posts/a.md") == "https://raw.example.com/octo/blog/dev/content/posts/a.md"

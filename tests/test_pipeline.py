"""Tests for post building and the end-to-end syndication pipeline."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import httpx
import pytest
from rich.console import Console

from blog_syndication.config import AppConfig, FilterConfig, GitHubSourceConfig
from blog_syndication.fetch.github import GitHubPostFetcher
from blog_syndication.input.local_posts import load_local_posts
from blog_syndication.parser import build_post
from blog_syndication.renderer import MarkdownRenderer
from blog_syndication.runner import run_pipeline, syndicate_posts

LISTING_URL = "https://api.github.com/repos/octo/blog/contents/posts"

REMOTE_FILES = {
    "clean-architecture.mdx": (
        "---\n"
        "title: Clean Architecture\n"
        "date: 2024-03-01\n"
        "categories: [Programming/Architecture]\n"
        "tags: [design]\n"
        "---\n"
        "Layers and **boundaries** explained.\n"
    ),
    "shared-post.md": (
        "---\n"
        "title: Remote Version\n"
        "date: 2024-02-01\n"
        "categories: Programming\n"
        "---\n"
        "Remote body.\n"
    ),
    "holiday.md": (
        "---\n"
        "title: Holiday Photos\n"
        "date: 2024-04-01\n"
        "categories: Personal/Travel\n"
        "---\n"
        "Beach.\n"
    ),
    "draft-post.md": (
        "---\n"
        "title: Draft\n"
        "date: 2024-05-01\n"
        "categories: Programming\n"
        "tags: Draft, wip\n"
        "---\n"
        "Not ready.\n"
    ),
    "undated.md": "---\ntitle: No Date\ncategories: Programming\n---\nBody\n",
    "opt-out.md": (
        "---\n"
        "title: Opted Out\n"
        "date: 2024-01-10\n"
        "categories: Programming\n"
        "syndicate: false\n"
        "---\n"
        "Body\n"
    ),
}


def _handler(request: httpx.Request) -> httpx.Response:
    url = str(request.url)
    if url.startswith(LISTING_URL):
        listing = [{"name": n, "path": f"posts/{n}", "type": "file"} for n in REMOTE_FILES]
        return httpx.Response(200, json=listing)
    name = url.rsplit("/", 1)[-1]
    if name in REMOTE_FILES:
        return httpx.Response(200, text=REMOTE_FILES[name])
    return httpx.Response(404)


def _config(tmp_path: Path, local_dir: Path | None = None) -> AppConfig:
    cfg = AppConfig()
    cfg.github = GitHubSourceConfig(
        owner="octo", repo="blog", base_url="https://blog.example.com/"
    )
    cfg.filters = FilterConfig(
        included_categories=["Programming"],
        excluded_categories=["Personal"],
        excluded_tags=["draft"],
    )
    cfg.local.posts_dir = str(local_dir) if local_dir else None
    cfg.output.path = str(tmp_path / "out" / "posts.json")
    cfg.logging.console = False
    return cfg


def _fetcher(cfg: AppConfig) -> GitHubPostFetcher:
    return GitHubPostFetcher(cfg.github, cfg.fetch, client=httpx.Client(transport=httpx.MockTransport(_handler)))


def _write_local_posts(directory: Path) -> None:
    directory.mkdir()
    (directory / "shared-post.md").write_text(
        "---\ntitle: Local Version\ndate: 2023-12-01\n---\nLocal body.\n", encoding="utf-8"
    )
    (directory / "extra.json").write_text(
        json.dumps(
            [
                {"id": "from-json", "title": "From JSON", "date": "2024-06-01T00:00:00", "stub": "json"},
                {"title": "Missing id", "date": "2024-06-01"},
            ]
        ),
        encoding="utf-8",
    )
    (directory / "notes.txt").write_text("ignored", encoding="utf-8")


def test_build_post_normalizes_fields():
    renderer = MarkdownRenderer()
    content = (
        "---\n"
        "date: '2024-03-01'\n"
        "tags: a, b\n"
        "categories: Programming/AI\n"
        "seriesOrder: '3'\n"
        "useToc: true\n"
        "---\n"
        "# Heading\n\nFirst paragraph with **bold** words.\n"
    )

    post = build_post("My Post.mdx", content, renderer, base_url="https://blog.example.com/")

    assert post is not None
    assert post.id == "my-post"
    assert post.title == "My Post"
    assert post.date == datetime(2024, 3, 1)
    assert post.tags == ["a", "b"]
    assert post.categories == ["Programming/AI"]
    assert post.series_order == 3
    assert post.use_toc is True
    assert post.source == "syndicated"
    assert post.canonical_url == "https://blog.example.com/blog/my-post"
    assert post.description == "Heading First paragraph with bold words."
    assert post.stub == post.description
    assert post.word_count == 6
    assert "<strong>bold</strong>" in post.content_html
    assert post.content.startswith("# Heading")


def test_build_post_prefers_frontmatter_description():
    post = build_post(
        "x.md",
        "---\ndate: 2024-01-01\ndescription: Hand written\n---\nBody text",
        MarkdownRenderer(),
    )

    assert post is not None
    assert post.description == "Hand written"
    assert post.stub == "Hand written"
    assert post.canonical_url is None


def test_build_post_keeps_explicit_empty_description():
    post = build_post("x.md", "---\ndate: 2024-01-01\ndescription: \"\"\n---\nBody text", MarkdownRenderer())

    assert post is not None
    assert post.description == ""
    assert post.stub == ""


def test_build_post_without_date_is_skipped():
    assert build_post("x.md", "---\ntitle: T\n---\nBody", MarkdownRenderer()) is None
    assert build_post("x.md", "No header at all", MarkdownRenderer()) is None


def test_load_local_posts_reads_markdown_and_json(tmp_path):
    local_dir = tmp_path / "local"
    _write_local_posts(local_dir)

    posts = load_local_posts(local_dir, MarkdownRenderer())

    assert sorted(p.id for p in posts) == ["from-json", "shared-post"]
    assert all(p.source == "local" for p in posts)
    assert all(p.canonical_url is None for p in posts)


def test_load_local_posts_skips_invalid_markdown(tmp_path, caplog):
    local_dir = tmp_path / "local"
    local_dir.mkdir()
    (local_dir / "good.md").write_text("---\ndate: 2024-01-01\n---\nFine", encoding="utf-8")
    (local_dir / "impossible-date.md").write_text(
        "---\ntitle: T\ndate: 2024-02-30\n---\nBody", encoding="utf-8"
    )
    (local_dir / "bad-yaml.md").write_text("---\ntitle: [oops\n---\nBody", encoding="utf-8")

    posts = load_local_posts(local_dir, MarkdownRenderer())

    assert [p.id for p in posts] == ["good"]
    assert "Error parsing frontmatter" in caplog.text
    assert "Invalid or missing date for impossible-date.md" in caplog.text


def test_load_local_posts_skips_mistyped_json_records(tmp_path, caplog):
    local_dir = tmp_path / "local"
    local_dir.mkdir()
    base = {"title": "T", "date": "2024-01-01T00:00:00"}
    records = [
        {**base, "id": "bad-tags", "tags": 5},
        {**base, "id": "bad-order", "seriesOrder": "third"},
        {**base, "id": "bad-count", "wordCount": [1]},
        {**base, "id": "ok", "tags": "python, testing", "categories": "Programming", "seriesOrder": "3"},
    ]
    (local_dir / "posts.json").write_text(json.dumps(records), encoding="utf-8")

    posts = load_local_posts(local_dir, MarkdownRenderer())

    assert [p.id for p in posts] == ["ok"]
    assert posts[0].tags == ["python", "testing"]
    assert posts[0].categories == ["Programming"]
    assert posts[0].series_order == 3
    assert "Skipping record #0 in posts.json" in caplog.text
    assert "Skipping record #2 in posts.json" in caplog.text


def test_load_local_posts_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_local_posts(tmp_path / "nope", MarkdownRenderer())


def test_syndicate_posts_filters_dedups_and_sorts(tmp_path):
    cfg = _config(tmp_path)
    local = build_post(
        "shared-post.md",
        "---\ntitle: Local Version\ndate: 2023-12-01\n---\nLocal body.",
        MarkdownRenderer(),
        source="local",
    )

    posts = syndicate_posts(cfg, local_posts=[local], fetcher=_fetcher(cfg))

    assert [p.id for p in posts] == ["clean-architecture", "shared-post"]
    shared = posts[1]
    assert shared.title == "Local Version"
    assert shared.source == "local"
    assert posts[0].canonical_url == "https://blog.example.com/blog/clean-architecture"


def test_syndicate_posts_without_github_uses_local_only(tmp_path):
    cfg = AppConfig()
    local = build_post("a.md", "---\ndate: 2024-01-01\n---\nA", MarkdownRenderer(), source="local")

    posts = syndicate_posts(cfg, local_posts=[local])

    assert [p.id for p in posts] == ["a"]


def test_run_pipeline_writes_posts_json(tmp_path):
    local_dir = tmp_path / "local"
    _write_local_posts(local_dir)
    cfg = _config(tmp_path, local_dir)
    console = Console(file=open(tmp_path / "console.txt", "w", encoding="utf-8"))

    output_path, posts = run_pipeline(cfg, show_progress=False, console=console, fetcher=_fetcher(cfg))
    console.file.close()

    assert output_path == tmp_path / "out" / "posts.json"
    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert [item["id"] for item in data] == ["from-json", "clean-architecture", "shared-post"]
    assert [item["id"] for item in data] == [p.id for p in posts]

    record = data[1]
    assert set(record) == {
        "id",
        "title",
        "date",
        "description",
        "featured",
        "tags",
        "categories",
        "series",
        "seriesOrder",
        "content",
        "contentHtml",
        "stub",
        "wordCount",
        "useToc",
        "source",
        "canonicalUrl",
    }
    assert record["date"] == "2024-03-01T00:00:00"
    assert record["source"] == "syndicated"
    assert record["featured"] is None
    assert data[2]["source"] == "local"
    assert data[2]["title"] == "Local Version"

    console_text = (tmp_path / "console.txt").read_text(encoding="utf-8")
    assert "total=3" in console_text


def test_run_pipeline_writes_jsonl_log(tmp_path):
    cfg = _config(tmp_path)
    cfg.logging.file = True
    cfg.logging.dir = str(tmp_path / "logs")

    run_pipeline(cfg, show_progress=False, console=Console(quiet=True), fetcher=_fetcher(cfg))

    lines = (tmp_path / "logs" / "syndication.jsonl").read_text(encoding="utf-8").splitlines()
    events = [json.loads(line).get("event") for line in lines]
    assert "pipeline_start" in events
    assert "pipeline_complete" in events


def test_run_pipeline_requires_a_source(tmp_path):
    cfg = AppConfig()
    cfg.output.path = str(tmp_path / "posts.json")

    with pytest.raises(ValueError, match="No post sources configured"):
        run_pipeline(cfg, show_progress=False, console=Console(quiet=True))

"""
Main pipeline orchestration for blog syndication.

This module coordinates the entire workflow:
1. Load locally authored posts
2. Fetch posts from the GitHub source repository
3. Parse, normalize and filter the syndicated posts
4. Deduplicate (local posts win) and sort newest first
5. Write the post list as JSON

Supports both progress bar and quiet modes.
"""

from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass
import logging
from pathlib import Path

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from .config import AppConfig
from .core.dedup import dedup_posts, sort_posts
from .core.filters import filter_posts
from .core.types import SOURCE_SYNDICATED, BlogPost
from .fetch.github import GitHubPostFetcher
from .input.local_posts import load_local_posts
from .logging_utils import log_event, setup_logging
from .output.writer import write_posts_json
from .parser import build_post
from .renderer import MarkdownRenderer

logger = logging.getLogger(__name__)


@dataclass
class SyndicationStats:
    """Counts collected during a syndication run.

    Attributes:
        local: Local posts loaded
        fetched: Files downloaded from the source repository
        parsed: Syndicated posts successfully parsed
        filtered_out: Syndicated posts removed by the filters
        duplicates: Posts dropped by deduplication
        total: Posts in the final list
    """
    local: int = 0
    fetched: int = 0
    parsed: int = 0
    filtered_out: int = 0
    duplicates: int = 0
    total: int = 0


def fetch_github_posts(
    cfg: AppConfig,
    renderer: MarkdownRenderer,
    fetcher: GitHubPostFetcher | None = None,
    stats: SyndicationStats | None = None,
) -> list[BlogPost]:
    """Fetch, parse and filter the posts of the configured GitHub source.

    Any failure is logged; the result is then simply missing the affected
    posts (or is empty when the listing itself failed).
    """
    stats = stats if stats is not None else SyndicationStats()
    source = cfg.github
    logger.info(f"Starting GitHub syndication from {source.owner}/{source.repo}")

    owned = fetcher is None
    active = fetcher or GitHubPostFetcher(source, cfg.fetch)
    try:
        remote_files = active.fetch_posts()
    finally:
        if owned:
            active.close()
    stats.fetched = len(remote_files)

    logger.info(f"Processing {len(remote_files)} raw posts from GitHub")
    posts: list[BlogPost] = []
    for remote in remote_files:
        try:
            post = build_post(
                remote.name,
                remote.content,
                renderer,
                source=SOURCE_SYNDICATED,
                base_url=source.base_url,
            )
        except Exception:  # noqa: BLE001
            logger.exception(f"Error parsing post {remote.name}")
            continue
        if post is not None:
            posts.append(post)
            logger.debug(f"Parsed post: {post.title} ({post.id})")
    stats.parsed = len(posts)
    logger.info(f"Successfully parsed {len(posts)} GitHub posts")

    logger.info(f"Applying filters to {len(posts)} GitHub posts")
    filtered = filter_posts(posts, cfg.filters)
    stats.filtered_out = len(posts) - len(filtered)
    return filtered


def combine_posts(
    local_posts: list[BlogPost],
    syndicated_posts: list[BlogPost],
    stats: SyndicationStats | None = None,
) -> list[BlogPost]:
    """Merge local and syndicated posts into the final ordered list."""
    all_posts = [*local_posts, *syndicated_posts]
    deduplicated = dedup_posts(all_posts)
    result = sort_posts(deduplicated)
    if stats is not None:
        stats.duplicates = len(all_posts) - len(deduplicated)
        stats.total = len(result)
    logger.info(f"Final post count: {len(result)} posts")
    return result


def syndicate_posts(
    cfg: AppConfig,
    local_posts: list[BlogPost] | None = None,
    fetcher: GitHubPostFetcher | None = None,
    renderer: MarkdownRenderer | None = None,
    stats: SyndicationStats | None = None,
) -> list[BlogPost]:
    """Combine the given local posts with posts syndicated from GitHub.

    Args:
        cfg: Application configuration
        local_posts: Locally authored posts; they win over syndicated
                     posts with the same id
        fetcher: Optional fetcher to use instead of building one from cfg
        renderer: Optional Markdown renderer
        stats: Optional stats object to fill in

    Returns:
        Deduplicated posts sorted by date, newest first
    """
    renderer = renderer or MarkdownRenderer(cfg.render.summary_max_chars)
    local_posts = local_posts or []
    if stats is not None:
        stats.local = len(local_posts)
    if local_posts:
        logger.info(f"Adding {len(local_posts)} local posts")

    syndicated: list[BlogPost] = []
    if cfg.github.is_configured():
        syndicated = fetch_github_posts(cfg, renderer, fetcher, stats)
        logger.info(f"Adding {len(syndicated)} syndicated posts")

    return combine_posts(local_posts, syndicated, stats)


def run_pipeline(
    cfg: AppConfig,
    output_path: Path | None = None,
    show_progress: bool = True,
    console: Console | None = None,
    fetcher: GitHubPostFetcher | None = None,
) -> tuple[Path, list[BlogPost]]:
    """Run the complete syndication pipeline and write the post list.

    Args:
        cfg: Application configuration
        output_path: Destination file, defaults to ``cfg.output.path``
        show_progress: Whether to display a progress bar
        console: Rich console for output (creates default if None)
        fetcher: Optional fetcher to use instead of building one from cfg

    Returns:
        The written file path and the posts it contains

    Raises:
        ValueError: If neither a GitHub source nor a local directory is configured
        FileNotFoundError: If the configured local directory does not exist
    """
    if not cfg.github.is_configured() and not cfg.local.posts_dir:
        raise ValueError(
            "No post sources configured: set github.owner/github.repo or local.posts_dir"
        )

    output_path = output_path or Path(cfg.output.path)
    console = console or Console()
    log_dir = Path(cfg.logging.dir) if cfg.logging.dir else output_path.parent
    run_logger = setup_logging(cfg.logging, log_dir)

    log_event(
        run_logger,
        "Pipeline start",
        event="pipeline_start",
        output=str(output_path),
        github=f"{cfg.github.owner}/{cfg.github.repo}" if cfg.github.is_configured() else None,
        local_dir=cfg.local.posts_dir,
    )

    renderer = MarkdownRenderer(cfg.render.summary_max_chars)
    stats = SyndicationStats()

    progress = (
        Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        )
        if show_progress
        else None
    )

    with progress if progress is not None else nullcontext():
        stage_task = progress.add_task("Syndicating", total=4) if progress else None

        def advance(description: str) -> None:
            if progress is not None and stage_task is not None:
                progress.update(stage_task, advance=1, description=description)

        local_posts: list[BlogPost] = []
        if cfg.local.posts_dir:
            local_posts = load_local_posts(Path(cfg.local.posts_dir), renderer)
        stats.local = len(local_posts)
        advance("Local posts loaded")

        syndicated: list[BlogPost] = []
        if cfg.github.is_configured():
            syndicated = fetch_github_posts(cfg, renderer, fetcher, stats)
        advance("GitHub posts fetched")

        posts = combine_posts(local_posts, syndicated, stats)
        advance("Posts merged")

        write_posts_json(posts, output_path, cfg.output.indent)
        advance("Output written")

    log_event(
        run_logger,
        "Pipeline complete",
        event="pipeline_complete",
        output=str(output_path),
        local=stats.local,
        fetched=stats.fetched,
        parsed=stats.parsed,
        filtered_out=stats.filtered_out,
        duplicates=stats.duplicates,
        total=stats.total,
    )
    _render_summary(posts, stats, output_path, cfg.output.preview_count, console)
    return output_path, posts


def _render_summary(
    posts: list[BlogPost],
    stats: SyndicationStats,
    output_path: Path,
    preview_count: int,
    console: Console,
) -> None:
    """Display the newest posts and run statistics to the console."""
    console.print(
        "[bold]Syndication summary[/bold]: "
        f"local={stats.local}, fetched={stats.fetched}, parsed={stats.parsed}, "
        f"filtered_out={stats.filtered_out}, duplicates={stats.duplicates}, total={stats.total}"
    )

    if posts and preview_count > 0:
        table = Table(title="Post Summary")
        table.add_column("Date")
        table.add_column("Title")
        table.add_column("Categories")
        table.add_column("Source")
        for post in posts[:preview_count]:
            table.add_row(
                post.date.strftime("%Y-%m-%d"),
                post.title,
                ", ".join(post.categories),
                post.source,
            )
        console.print(table)
        if len(posts) > preview_count:
            console.print(f"  ... and {len(posts) - preview_count} more posts")

    size_kb = output_path.stat().st_size // 1024
    console.print(f"File size: {size_kb} KB")

"""
Command-line interface for blog syndication.

Uses Typer to provide a CLI with options for the main configuration
settings. Supports loading .env files for the GitHub token.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console

from .config import load_config
from .content import PostIndex
from .runner import run_pipeline

app = typer.Typer(add_completion=False)
console = Console()


@app.command()
def run(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file."),
    local_dir: Path | None = typer.Option(
        None, "--local-dir", "-l", help="Directory of locally authored posts."
    ),
    owner: str | None = typer.Option(None, "--owner", help="GitHub repository owner."),
    repo: str | None = typer.Option(None, "--repo", help="GitHub repository name."),
    branch: str | None = typer.Option(None, "--branch", help="GitHub branch."),
    posts_dir: str | None = typer.Option(
        None, "--posts-dir", help="Posts directory inside the repository."
    ),
    base_url: str | None = typer.Option(
        None, "--base-url", help="Source blog URL used for canonical links."
    ),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Syndicate blog posts into a single JSON post list.

    Loads local posts, fetches posts from the configured GitHub repository,
    filters and deduplicates them, and writes them newest first.

    Args:
        config: Optional path to YAML config file
        output: Output JSON path (overrides output.path)
        local_dir: Local posts directory (overrides local.posts_dir)
        owner: GitHub owner (overrides github.owner)
        repo: GitHub repository (overrides github.repo)
        branch: GitHub branch (overrides github.branch)
        posts_dir: Repository posts directory (overrides github.posts_directory)
        base_url: Canonical URL prefix (overrides github.base_url)
        progress: Whether to show progress bar
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Enable/disable file logging
    """
    # Load environment variables (GITHUB_TOKEN) from .env if present
    load_dotenv()

    cfg = load_config(str(config) if config else _default_config_path())

    if owner:
        cfg.github.owner = owner
    if repo:
        cfg.github.repo = repo
    if branch:
        cfg.github.branch = branch
    if posts_dir:
        cfg.github.posts_directory = posts_dir
    if base_url:
        cfg.github.base_url = base_url
    if local_dir is not None:
        cfg.local.posts_dir = str(local_dir)
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file

    console.print("Starting blog post syndication...")
    try:
        output_path, posts = run_pipeline(cfg, output, show_progress=progress, console=console)
    except (ValueError, OSError) as exc:
        console.print(f"[red]Error during syndication: {exc}[/red]")
        raise typer.Exit(code=1)

    console.print(f"Successfully syndicated {len(posts)} posts")
    console.print(f"Posts saved to: {output_path}")


@app.command()
def tags(posts_file: Path = typer.Argument(..., exists=True, readable=True)):
    """List the distinct tags of a post list."""
    for tag in PostIndex.load(posts_file).all_tags():
        console.print(tag)


@app.command()
def categories(posts_file: Path = typer.Argument(..., exists=True, readable=True)):
    """List the distinct categories of a post list."""
    for category in PostIndex.load(posts_file).all_categories():
        console.print(category)


@app.command()
def show(
    posts_file: Path = typer.Argument(..., exists=True, readable=True),
    slug: str = typer.Argument(...),
):
    """Show the metadata of one post."""
    post = PostIndex.load(posts_file).get_by_slug(slug)
    if post is None:
        console.print(f"[red]No post with slug '{slug}'[/red]")
        raise typer.Exit(code=1)

    console.print(f"[bold]{post.title}[/bold] ({post.id})")
    console.print(f"Date: {post.date:%Y-%m-%d}")
    console.print(f"Source: {post.source}")
    if post.canonical_url:
        console.print(f"Canonical URL: {post.canonical_url}")
    console.print(f"Categories: {', '.join(post.categories)}")
    console.print(f"Tags: {', '.join(post.tags)}")
    console.print(f"Words: {post.word_count}")
    console.print(post.stub)


def _default_config_path() -> str | None:
    default = Path("config.yaml")
    return str(default) if default.exists() else None


if __name__ == "__main__":
    app()

"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- GitHubSourceConfig: Remote repository holding syndicated posts
- FilterConfig: Category and tag inclusion/exclusion rules
- FetchConfig: HTTP fetching settings
- RenderConfig: Markdown rendering and summary settings
- LocalConfig: Locally authored posts
- OutputConfig: Output file settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml


@dataclass
class GitHubSourceConfig:
    """Configuration for the GitHub repository posts are syndicated from.

    Attributes:
        owner: Repository owner (user or organisation)
        repo: Repository name
        branch: Branch to read posts from
        posts_directory: Directory inside the repository holding post files
        base_url: Public site URL of the source blog, used for canonical URLs
        token_env: Environment variable holding an optional API token
        api_base_url: Base URL of the GitHub REST API
        raw_base_url: Base URL for raw file downloads
    """

    owner: str | None = None
    repo: str | None = None
    branch: str = "main"
    posts_directory: str = "posts"
    base_url: str | None = None
    token_env: str = "GITHUB_TOKEN"
    api_base_url: str = "https://api.github.com"
    raw_base_url: str = "https://raw.githubusercontent.com"

    def is_configured(self) -> bool:
        return bool(self.owner and self.repo)


@dataclass
class FilterConfig:
    """Rules applied to syndicated posts.

    Attributes:
        included_categories: Only keep posts with one of these categories (OR logic).
                             Empty means every category is allowed.
        excluded_categories: Drop posts with any of these categories
        excluded_tags: Drop posts with any of these tags
    """

    included_categories: list[str] = field(default_factory=list)
    excluded_categories: list[str] = field(default_factory=list)
    excluded_tags: list[str] = field(default_factory=list)


@dataclass
class FetchConfig:
    """Configuration for HTTP fetching.

    Attributes:
        timeout_seconds: HTTP request timeout
        retries: Number of retry attempts for failed requests
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 20.0
    retries: int = 2
    trust_env: bool = True
    user_agent: str = "JdhPro-BlogSyndication"


@dataclass
class RenderConfig:
    """Configuration for Markdown rendering.

    Attributes:
        summary_max_chars: Maximum length of a generated description
    """

    summary_max_chars: int = 200


@dataclass
class LocalConfig:
    """Configuration for locally authored posts.

    Attributes:
        posts_dir: Directory of local .md/.mdx/.json posts, or None to skip
    """

    posts_dir: str | None = None


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        path: Destination of the generated post list
        indent: JSON indentation
        preview_count: Number of posts listed in the console summary
    """

    path: str = "data/posts.json"
    indent: int = 2
    preview_count: int = 10


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
        dir: Directory for the log file; defaults to the output directory
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "syndication.jsonl"
    dir: str | None = None


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    github: GitHubSourceConfig = field(default_factory=GitHubSourceConfig)
    filters: FilterConfig = field(default_factory=FilterConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    local: LocalConfig = field(default_factory=LocalConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def default_config() -> AppConfig:
    return AppConfig()


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return default_config()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(default_config(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            # Empty YAML keys (``excluded_tags:``) keep their defaults
            data[key].update(
                {k: v for k, v in value.items() if k in data[key] and v is not None}
            )
        elif value is not None:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        github=GitHubSourceConfig(**data["github"]),
        filters=FilterConfig(**data["filters"]),
        fetch=FetchConfig(**data["fetch"]),
        render=RenderConfig(**data["render"]),
        local=LocalConfig(**data["local"]),
        output=OutputConfig(**data["output"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_github_token(cfg: GitHubSourceConfig) -> str | None:
    """Get the GitHub API token from the configured environment variable."""
    if not cfg.token_env:
        return None
    return os.getenv(cfg.token_env) or None

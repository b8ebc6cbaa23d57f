"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: HTTP fetching settings shared by every source adapter
- StorageConfig: Where the snapshot is persisted
- SchedulerConfig: Periodic refresh triggers and startup staleness
- RankingConfig: Relevance floor, dedup key length, description length
- LoggingConfig: Logging behavior
- SourceConfig: One remote source (feed, page, release listing, org listing)
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml

from .errors import ConfigError


CATEGORY_IDS = ("official", "releases", "tech", "tutorials", "articles", "community")
SOURCE_KINDS = ("feed", "page", "releases", "org")


@dataclass
class FetchConfig:
    """Configuration for HTTP fetching.

    Attributes:
        timeout_seconds: Per-source request timeout; also bounds fetch + parse (parse runs in a worker thread)
        user_agent: HTTP User-Agent header string
        trust_env: Whether to respect system proxy settings
    """

    timeout_seconds: float = 15.0
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    trust_env: bool = True


@dataclass
class StorageConfig:
    """Configuration for snapshot persistence.

    Attributes:
        data_file: Path of the JSON snapshot file. Empty means "use the
            CLAUDE_NEWS_DATA_FILE environment variable, else data/news.json".
    """

    data_file: str | None = None


@dataclass
class SchedulerConfig:
    """Configuration for periodic refreshes.

    Attributes:
        interval_hours: Clock-aligned refresh period (every N hours)
        daily_hour: Hour of the daily refresh (0 = midnight)
        timezone: Timezone name for the cron triggers, None for local time
        stale_after_hours: Age after which loaded data is refreshed at startup
    """

    interval_hours: int = 6
    daily_hour: int = 0
    timezone: str | None = None
    stale_after_hours: float = 6.0


@dataclass
class RankingConfig:
    """Configuration for relevance filtering and deduplication.

    Attributes:
        min_relevance: Items scoring below this are dropped
        dedup_key_length: Number of normalized title characters in the dedup key
        description_max_chars: Cleaned descriptions are truncated to this length
    """

    min_relevance: int = 5
    dedup_key_length: int = 50
    description_max_chars: int = 500


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
        log_dir: Directory for the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "claude_news.jsonl"
    log_dir: str = "logs"


@dataclass(frozen=True)
class SourceConfig:
    """One remote source.

    Attributes:
        name: Display name, stored on every article as ``source``
        category: One of CATEGORY_IDS
        url: Endpoint to fetch
        kind: Adapter kind, one of SOURCE_KINDS
        selector: CSS selector for candidate blocks (page)
        title_selector: CSS selector for the title inside a block (page)
        link_selector: CSS selector for the link inside a block (page)
        summary_selector: CSS selector for the summary inside a block (page)
        date_selector: CSS selector for the date inside a block (page)
        label: Title prefix for releases, owner name for org listings
        topic_keyword: Name filter for org listings
    """

    name: str
    category: str
    url: str
    kind: str = "feed"
    selector: str = 'article, .post, .news-item, [class*="post"], [class*="article"]'
    title_selector: str = "h1, h2, h3, .title"
    link_selector: str = "a"
    summary_selector: str = "p, .summary, .excerpt"
    date_selector: str = "time, .date"
    label: str = ""
    topic_keyword: str = "claude"


def _feed(name: str, url: str, category: str) -> SourceConfig:
    return SourceConfig(name=name, category=category, url=url, kind="feed")


DEFAULT_SOURCES: tuple[SourceConfig, ...] = (
    _feed(
        "Hacker News",
        "https://hnrss.org/newest?q=claude+code+OR+anthropic+claude+OR+claude+ai",
        "tech",
    ),
    _feed("Hacker News Claude", "https://hnrss.org/newest?q=claude", "tech"),
    _feed(
        "Reddit AI",
        "https://www.reddit.com/r/artificial/search.rss?q=claude&restrict_sr=on&sort=new&t=week",
        "community",
    ),
    _feed(
        "Reddit LocalLLaMA",
        "https://www.reddit.com/r/LocalLLaMA/search.rss?q=claude&restrict_sr=on&sort=new&t=week",
        "community",
    ),
    _feed("Reddit ClaudeAI", "https://www.reddit.com/r/ClaudeAI/new.rss", "community"),
    _feed(
        "Reddit MachineLearning",
        "https://www.reddit.com/r/MachineLearning/search.rss"
        "?q=claude+OR+anthropic&restrict_sr=on&sort=new&t=week",
        "community",
    ),
    _feed("Dev.to Claude", "https://dev.to/feed/tag/claude", "tutorials"),
    _feed("Dev.to Anthropic", "https://dev.to/feed/tag/anthropic", "tutorials"),
    _feed("Medium AI", "https://medium.com/feed/tag/claude-ai", "articles"),
    _feed("TechCrunch AI", "https://techcrunch.com/tag/anthropic/feed/", "tech"),
    _feed(
        "The Verge AI",
        "https://www.theverge.com/rss/ai-artificial-intelligence/index.xml",
        "tech",
    ),
    _feed("Ars Technica AI", "https://feeds.arstechnica.com/arstechnica/technology-lab", "tech"),
    _feed("VentureBeat AI", "https://venturebeat.com/category/ai/feed/", "tech"),
    _feed(
        "Google News Claude",
        "https://news.google.com/rss/search?q=claude+code+anthropic&hl=en-US&gl=US&ceid=US:en",
        "articles",
    ),
    _feed(
        "Google News Claude AI",
        "https://news.google.com/rss/search?q=claude+ai+anthropic&hl=en-US&gl=US&ceid=US:en",
        "articles",
    ),
    SourceConfig(
        name="Anthropic Blog",
        category="official",
        url="https://www.anthropic.com/news",
        kind="page",
    ),
    SourceConfig(
        name="GitHub Claude Code",
        category="releases",
        url="https://github.com/anthropics/claude-code/releases",
        kind="releases",
        label="Claude Code",
    ),
    SourceConfig(
        name="GitHub Anthropic",
        category="releases",
        url="https://github.com/anthropics",
        kind="org",
        label="Anthropic",
        topic_keyword="claude",
    ),
)


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    ranking: RankingConfig = field(default_factory=RankingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    sources: list[SourceConfig] = field(default_factory=lambda: list(DEFAULT_SOURCES))


_SECTIONS = ("fetch", "storage", "scheduler", "ranking", "logging")


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Sections are merged key by key; ``sources`` replaces the default list.
    """
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    data: dict[str, Any] = {name: dict(vars(getattr(cfg, name))) for name in _SECTIONS}
    data["sources"] = [dict(vars(source)) for source in cfg.sources]
    return data


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    try:
        return AppConfig(
            fetch=FetchConfig(**data["fetch"]),
            storage=StorageConfig(**data["storage"]),
            scheduler=SchedulerConfig(**data["scheduler"]),
            ranking=RankingConfig(**data["ranking"]),
            logging=LoggingConfig(**data["logging"]),
            sources=[build_source(item) for item in data["sources"] or []],
        )
    except TypeError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def build_source(raw: dict[str, Any]) -> SourceConfig:
    """Build and validate a SourceConfig from a mapping."""
    missing = [key for key in ("name", "category", "url") if not raw.get(key)]
    if missing:
        raise ConfigError(f"Source is missing required fields: {', '.join(missing)}")
    source = SourceConfig(**raw)
    if source.kind not in SOURCE_KINDS:
        raise ConfigError(
            f"Unknown source kind {source.kind!r} for {source.name}. "
            f"Supported: {', '.join(SOURCE_KINDS)}"
        )
    if source.category not in CATEGORY_IDS:
        raise ConfigError(f"Unknown category {source.category!r} for {source.name}")
    return source


def get_data_file(cfg: StorageConfig) -> str:
    """Get the snapshot path from inline config or environment variable."""
    if cfg.data_file:
        return cfg.data_file
    return os.getenv("CLAUDE_NEWS_DATA_FILE", os.path.join("data", "news.json"))

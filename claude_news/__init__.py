"""
Claude News - topic news aggregator.

This package fetches Claude Code / Anthropic news from RSS feeds and
scraped pages, scores each item for topical relevance, deduplicates and
ranks the result into a snapshot, persists it, and answers paginated
queries against it.

Main entry point is the CLI via the `claude-news` command.

Example:
    $ claude-news refresh
    $ claude-news query --category tech --limit 12
"""

__all__ = ["__version__", "ArticleStore", "NewsService", "load_config", "score"]
__version__ = "0.1.0"

from .config import load_config
from .core.scoring import score
from .service import NewsService
from .store import ArticleStore

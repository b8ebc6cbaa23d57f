"""
Core domain models and business logic.

This package contains data types, relevance scoring and ranking that are
independent of how items are fetched or where snapshots are stored.
"""

from .dedup import dedup_articles, dedup_key, rank_articles
from .normalize import clean_text, make_id, parse_date, to_article
from .scoring import DEFAULT_TIERS, Tier, score
from .types import (
    Article,
    Category,
    ConcurrentRefreshRejected,
    QueryResult,
    RawItem,
    RefreshResult,
    SchedulerStatus,
    Snapshot,
    Stats,
    StatsReport,
)

__all__ = [
    "Article",
    "Category",
    "ConcurrentRefreshRejected",
    "DEFAULT_TIERS",
    "QueryResult",
    "RawItem",
    "RefreshResult",
    "SchedulerStatus",
    "Snapshot",
    "Stats",
    "StatsReport",
    "Tier",
    "clean_text",
    "dedup_articles",
    "dedup_key",
    "make_id",
    "parse_date",
    "rank_articles",
    "score",
    "to_article",
]

"""
Core data types for the news pipeline.

This module defines the records that flow through an ingestion cycle and
the result shapes handed to external callers:
- RawItem: What a source adapter extracts, before scoring
- Article: Canonical, scored record stored in a snapshot
- Snapshot: Immutable ordered set of articles from one cycle
- QueryResult / Stats / SchedulerStatus / StatsReport: read-side results
- RefreshResult / ConcurrentRefreshRejected: outcomes of a refresh trigger

Every external result has a ``to_dict()`` returning the camelCase JSON form
that the persisted file and the route layer use.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from dateutil import parser as date_parser


def _parse_iso(value: str) -> datetime:
    """Parse a persisted ISO timestamp; naive values are taken as UTC."""
    dt = date_parser.isoparse(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class RawItem:
    """An item extracted by a source adapter.

    Attributes:
        title: Item headline
        link: Absolute URL, or empty string when the source has none
        description: Cleaned and truncated summary text
        pub_date: Timezone-aware publish time
        thumbnail: Optional image URL
        is_release: True for release-listing records
        relevance: Fixed relevance set by the adapter, or None to score it
    """

    title: str
    link: str
    description: str
    pub_date: datetime
    thumbnail: str | None = None
    is_release: bool = False
    relevance: int | None = None


@dataclass(frozen=True)
class Article:
    """Canonical record served to readers.

    ``id`` is derived from the link (or the title when there is no link),
    so the same item gets the same id on every cycle.
    """

    id: str
    title: str
    link: str
    description: str
    pub_date: datetime
    source: str
    category: str
    relevance: int
    thumbnail: str | None = None
    is_release: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "link": self.link,
            "description": self.description,
            "pubDate": self.pub_date.isoformat(),
            "source": self.source,
            "category": self.category,
            "relevance": self.relevance,
            "thumbnail": self.thumbnail,
        }
        if self.is_release:
            data["isRelease"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Article":
        """Rebuild an article from its persisted form.

        Raises KeyError/ValueError/TypeError on malformed records.
        """
        pub_date = _parse_iso(data["pubDate"])
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            link=str(data.get("link") or ""),
            description=str(data.get("description") or ""),
            pub_date=pub_date,
            source=str(data["source"]),
            category=str(data["category"]),
            relevance=int(data["relevance"]),
            thumbnail=data.get("thumbnail") or None,
            is_release=bool(data.get("isRelease", False)),
        )


@dataclass(frozen=True)
class Snapshot:
    """The complete, immutable result of one ingestion cycle."""

    articles: tuple[Article, ...] = ()
    last_updated: datetime | None = None

    @property
    def count(self) -> int:
        return len(self.articles)

    def ids(self) -> set[str]:
        return {article.id for article in self.articles}

    def to_dict(self) -> dict[str, Any]:
        return {
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
            "count": self.count,
            "articles": [article.to_dict() for article in self.articles],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Snapshot":
        articles = data.get("articles") or []
        if not isinstance(articles, list):
            raise ValueError("'articles' must be a list")
        last_updated = data.get("lastUpdated")
        return cls(
            articles=tuple(Article.from_dict(item) for item in articles),
            last_updated=_parse_iso(last_updated) if last_updated else None,
        )


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    icon: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "icon": self.icon}


@dataclass
class QueryResult:
    articles: list[Article]
    total: int
    page: int
    total_pages: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "articles": [article.to_dict() for article in self.articles],
            "total": self.total,
            "page": self.page,
            "totalPages": self.total_pages,
        }


@dataclass
class Stats:
    total_articles: int
    last_updated: datetime | None
    category_counts: dict[str, int] = field(default_factory=dict)
    avg_relevance: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalArticles": self.total_articles,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
            "categoryCounts": dict(self.category_counts),
            "avgRelevance": self.avg_relevance,
        }


@dataclass
class SchedulerStatus:
    """Attributes:
        running: Whether the periodic timers are armed
        fetching: Whether a cycle is executing right now
        next_run: Next timer fire time, None when disarmed
    """

    running: bool
    fetching: bool
    next_run: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "running": self.running,
            "fetching": self.fetching,
            "nextRun": self.next_run.isoformat() if self.next_run else None,
        }


@dataclass
class StatsReport:
    stats: Stats
    scheduler: SchedulerStatus

    def to_dict(self) -> dict[str, Any]:
        data = self.stats.to_dict()
        data["scheduler"] = self.scheduler.to_dict()
        return data


@dataclass
class RefreshResult:
    """Outcome of one executed ingestion cycle.

    Attributes:
        total_articles: Size of the new snapshot
        new_count: Article ids in the new snapshot absent from the previous one
        sources_ok: Names of sources that returned without error
        sources_failed: Names of sources that failed or timed out
        duration_seconds: Wall time of the cycle
        saved: Whether the new snapshot was written to disk
    """

    total_articles: int
    new_count: int
    sources_ok: list[str] = field(default_factory=list)
    sources_failed: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0
    saved: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "totalArticles": self.total_articles,
            "newCount": self.new_count,
            "sourcesOk": len(self.sources_ok),
            "sourcesFailed": len(self.sources_failed),
            "failedSources": list(self.sources_failed),
            "message": (
                f"Found {self.new_count} NEW articles!"
                if self.new_count > 0
                else "No new articles found - check back later"
            ),
        }


@dataclass(frozen=True)
class ConcurrentRefreshRejected:
    """Returned instead of running a cycle while another one is in flight."""

    message: str = "Refresh already in progress"

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "message": self.message}

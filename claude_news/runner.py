"""
Ingestion cycle for the news pipeline.

This module coordinates one full refresh:
1. Fetch every configured source concurrently
2. Score each item and normalize it into an Article
3. Filter, deduplicate and rank the merged list
4. Swap the result into the store as the new snapshot and persist it
5. Count articles that were not in the previous snapshot

A failing or slow source only loses its own items; the cycle always
completes and produces a snapshot, possibly an empty one.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import time
from typing import Callable

import httpx

from .config import FetchConfig, RankingConfig
from .core.dedup import rank_articles
from .core.normalize import to_article, utcnow
from .core.types import Article, RefreshResult, Snapshot
from .fetch.fetcher import build_client
from .logging_utils import log_event
from .sources.base import SourceAdapter, SourceResult
from .store import ArticleStore


logger = logging.getLogger(__name__)

ClientFactory = Callable[[FetchConfig], httpx.AsyncClient]


@dataclass
class FetchStats:
    """Statistics collected during the fetch stage.

    Attributes:
        total: Number of sources fetched
        ok: Sources that returned without error
        failed: Sources that failed or timed out
        items: Raw items collected across all successful sources
    """

    total: int = 0
    ok: int = 0
    failed: int = 0
    items: int = 0


class IngestionRunner:
    """Runs ingestion cycles against a fixed set of adapters.

    Args:
        adapters: Source adapters, in configuration order
        store: Store receiving the new snapshot
        fetch_cfg: HTTP settings for the shared client
        ranking_cfg: Relevance floor and dedup settings
        client_factory: Builds the HTTP client for a cycle (tests inject a
            client backed by httpx.MockTransport)
    """

    def __init__(
        self,
        adapters: list[SourceAdapter],
        store: ArticleStore,
        fetch_cfg: FetchConfig | None = None,
        ranking_cfg: RankingConfig | None = None,
        client_factory: ClientFactory = build_client,
    ):
        self.adapters = list(adapters)
        self.store = store
        self.fetch_cfg = fetch_cfg or FetchConfig()
        self.ranking_cfg = ranking_cfg or RankingConfig()
        self.client_factory = client_factory

    async def run(self) -> RefreshResult:
        """Execute one full ingestion cycle."""
        started = time.monotonic()
        log_event(
            logger,
            "Starting news fetch...",
            event="cycle_start",
            sources=len(self.adapters),
        )

        results = await self.fetch_all()
        stats = _collect_stats(results)
        articles = self.build_articles(results)
        ranked = rank_articles(
            articles,
            min_relevance=self.ranking_cfg.min_relevance,
            key_length=self.ranking_cfg.dedup_key_length,
        )

        previous = self.store.current_snapshot()
        snapshot = Snapshot(articles=tuple(ranked), last_updated=utcnow())
        saved = self.store.replace(snapshot)
        new_count = ArticleStore.diff_new_count(previous, snapshot)

        elapsed = time.monotonic() - started
        log_event(
            logger,
            f"Fetched {snapshot.count} articles in {elapsed:.2f}s "
            f"({new_count} new, {stats.failed}/{stats.total} sources failed)",
            event="cycle_done",
            count=snapshot.count,
            new_count=new_count,
            sources_ok=stats.ok,
            sources_failed=stats.failed,
            raw_items=stats.items,
            duration_seconds=round(elapsed, 3),
        )
        return RefreshResult(
            total_articles=snapshot.count,
            new_count=new_count,
            sources_ok=[r.source.name for r in results if r.ok],
            sources_failed=[r.source.name for r in results if not r.ok],
            duration_seconds=elapsed,
            saved=saved,
        )

    async def fetch_all(self) -> list[SourceResult]:
        """Fetch all sources concurrently.

        Results come back in adapter order regardless of completion order.
        """
        if not self.adapters:
            return []
        async with self.client_factory(self.fetch_cfg) as client:
            tasks = [asyncio.create_task(adapter.fetch(client)) for adapter in self.adapters]
            return list(await asyncio.gather(*tasks))

    @staticmethod
    def build_articles(results: list[SourceResult]) -> list[Article]:
        articles: list[Article] = []
        for result in results:
            for item in result.items:
                articles.append(to_article(item, result.source.name, result.source.category))
        return articles


def _collect_stats(results: list[SourceResult]) -> FetchStats:
    stats = FetchStats(total=len(results))
    for result in results:
        if result.ok:
            stats.ok += 1
            stats.items += len(result.items)
        else:
            stats.failed += 1
    return stats

"""
Service object exposing the core operations to outer layers.

One ``NewsService`` is built at process start and handed to whatever
serves requests (the CLI here, an HTTP route layer elsewhere). It owns the
store, the adapters and the scheduler; nothing in the package keeps
process-wide state.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
import logging

from .config import AppConfig, get_data_file
from .core.normalize import utcnow
from .core.types import (
    Article,
    Category,
    ConcurrentRefreshRejected,
    QueryResult,
    RefreshResult,
    StatsReport,
)
from .fetch.fetcher import build_client
from .query import DEFAULT_PAGE_SIZE, compute_stats, featured_articles, list_categories, query_articles
from .runner import ClientFactory, IngestionRunner
from .scheduler import RefreshScheduler
from .sources.factory import create_adapters
from .store import ArticleStore


logger = logging.getLogger(__name__)


class NewsService:
    """Facade over store, ingestion runner and scheduler.

    Args:
        cfg: Application configuration; adapters are built from it once
        store: Optional pre-built store (defaults to the configured data file)
        client_factory: HTTP client builder passed to the runner
    """

    def __init__(
        self,
        cfg: AppConfig,
        store: ArticleStore | None = None,
        client_factory: ClientFactory = build_client,
    ):
        self.cfg = cfg
        self.store = store or ArticleStore(get_data_file(cfg.storage))
        self.runner = IngestionRunner(
            create_adapters(cfg),
            self.store,
            fetch_cfg=cfg.fetch,
            ranking_cfg=cfg.ranking,
            client_factory=client_factory,
        )
        self.scheduler = RefreshScheduler(self.runner.run, cfg.scheduler)
        self._background: asyncio.Task | None = None

    def load(self) -> bool:
        return self.store.load()

    def query_articles(
        self,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        category: str | None = None,
        search: str | None = None,
        min_relevance: int | None = None,
    ) -> QueryResult:
        return query_articles(
            self.store.current_snapshot(),
            page=page,
            limit=limit,
            category=category,
            search=search,
            min_relevance=min_relevance,
        )

    def get_featured(self) -> list[Article]:
        return featured_articles(self.store.current_snapshot()).articles

    def get_categories(self) -> list[Category]:
        return list_categories()

    def get_stats(self) -> StatsReport:
        return StatsReport(
            stats=compute_stats(self.store.current_snapshot()),
            scheduler=self.scheduler.status(),
        )

    async def trigger_refresh(self) -> RefreshResult | ConcurrentRefreshRejected:
        return await self.scheduler.run_cycle()

    def is_stale(self) -> bool:
        last_updated = self.store.current_snapshot().last_updated
        if last_updated is None:
            return True
        max_age = timedelta(hours=self.cfg.scheduler.stale_after_hours)
        return utcnow() - last_updated > max_age

    async def bootstrap(self) -> None:
        """Load persisted data, refresh if needed, and arm the scheduler.

        With no usable data the first cycle runs before returning; stale
        data is served immediately while a cycle runs in the background.
        """
        if not self.load():
            logger.info("No cached data found, fetching fresh news...")
            await self.trigger_refresh()
        elif self.is_stale():
            logger.info("Cached data is stale, refreshing in the background...")
            self._background = asyncio.create_task(self.trigger_refresh())
        self.scheduler.start()

    async def aclose(self) -> None:
        """Disarm the scheduler and wait for a background refresh to finish."""
        self.scheduler.stop()
        task, self._background = self._background, None
        if task is not None:
            try:
                await task
            except Exception:  # noqa: BLE001
                logger.exception("Background refresh failed")

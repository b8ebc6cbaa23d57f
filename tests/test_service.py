"""Tests for the service facade and startup policy."""

from __future__ import annotations

import asyncio
from datetime import timedelta
import json

import httpx

from claude_news.config import AppConfig, SourceConfig, StorageConfig
from claude_news.core.normalize import utcnow
from claude_news.core.types import ConcurrentRefreshRejected, RefreshResult
from claude_news.service import NewsService
from claude_news.store import ArticleStore


RSS = b"""<?xml version="1.0"?>
<rss version="2.0"><channel><title>t</title>
<item><title>Claude Code adds hooks</title><link>https://example.com/hooks</link></item>
<item><title>Claude Sonnet benchmark</title><link>https://example.com/sonnet</link></item>
</channel></rss>
"""


def _service(tmp_path, handler=None, sources=None) -> NewsService:
    cfg = AppConfig(
        storage=StorageConfig(data_file=str(tmp_path / "news.json")),
        sources=sources
        if sources is not None
        else [SourceConfig(name="Feed", category="tech", url="https://example.com/rss")],
    )
    handler = handler or (lambda request: httpx.Response(200, content=RSS))

    def _factory(fetch_cfg):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return NewsService(cfg, client_factory=_factory)


def test_corrupt_data_file_serves_empty_stats(tmp_path):
    (tmp_path / "news.json").write_text("]]]", encoding="utf-8")
    service = _service(tmp_path)

    assert service.load() is False

    report = service.get_stats().to_dict()
    assert report["totalArticles"] == 0
    assert report["avgRelevance"] == 0
    assert report["lastUpdated"] is None
    assert report["scheduler"] == {"running": False, "fetching": False, "nextRun": None}


def test_queries_read_current_snapshot(tmp_path, article_factory, snapshot_factory):
    service = _service(tmp_path)
    service.store.replace(
        snapshot_factory(
            [
                article_factory("Claude Code 2.0", relevance=100, category="releases"),
                article_factory("Minor mention", relevance=10, category="community"),
                article_factory("Claude Opus review", relevance=45),
            ]
        )
    )

    assert [a.title for a in service.get_featured()] == ["Claude Code 2.0", "Claude Opus review"]
    assert service.query_articles(category="community").total == 1
    assert service.query_articles(search="claude", limit=1).total_pages == 2
    assert len(service.get_categories()) == 6
    assert service.get_stats().stats.category_counts == {"releases": 1, "community": 1, "tech": 1}


def test_trigger_refresh_is_single_flight(tmp_path):
    async def slow(request):
        await asyncio.sleep(0.05)
        return httpx.Response(200, content=RSS)

    service = _service(tmp_path, handler=slow)

    async def _run():
        return await asyncio.gather(service.trigger_refresh(), service.trigger_refresh())

    first, second = asyncio.run(_run())

    assert isinstance(first, RefreshResult)
    assert first.total_articles == 2
    assert isinstance(second, ConcurrentRefreshRejected)
    assert service.scheduler.fetching is False


def test_bootstrap_without_data_fetches_before_returning(tmp_path):
    service = _service(tmp_path)

    async def _run():
        await service.bootstrap()
        count = service.store.current_snapshot().count
        running = service.scheduler.running
        await service.aclose()
        return count, running

    count, running = asyncio.run(_run())

    assert count == 2
    assert running is True
    assert service.scheduler.running is False
    assert json.loads((tmp_path / "news.json").read_text(encoding="utf-8"))["count"] == 2


def test_bootstrap_with_stale_data_serves_it_then_refreshes(tmp_path, article_factory, snapshot_factory):
    stale = snapshot_factory([article_factory("Old news")], last_updated=utcnow() - timedelta(hours=12))
    ArticleStore(tmp_path / "news.json").replace(stale)
    service = _service(tmp_path)

    async def _run():
        await service.bootstrap()
        served = [a.title for a in service.store.current_snapshot().articles]
        await service.aclose()
        return served

    served = asyncio.run(_run())

    assert served == ["Old news"]
    assert service.store.current_snapshot().count == 2


def test_bootstrap_with_fresh_data_does_not_refresh(tmp_path, article_factory, snapshot_factory):
    fresh = snapshot_factory([article_factory("Today's news")], last_updated=utcnow())
    ArticleStore(tmp_path / "news.json").replace(fresh)
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, content=RSS)

    service = _service(tmp_path, handler=handler)

    async def _run():
        await service.bootstrap()
        await service.aclose()

    asyncio.run(_run())

    assert requests == []
    assert service.is_stale() is False
    assert service.store.current_snapshot().articles[0].title == "Today's news"

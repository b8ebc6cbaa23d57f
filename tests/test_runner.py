"""Tests for the ingestion cycle."""

from __future__ import annotations

import asyncio

import httpx

from claude_news.config import FetchConfig, SourceConfig
from claude_news.runner import IngestionRunner
from claude_news.sources import FeedAdapter
from claude_news.store import ArticleStore


def _rss(*items: tuple[str, str]) -> bytes:
    body = "".join(
        f"<item><title>{title}</title><link>{link}</link>"
        f"<pubDate>Mon, 06 Oct 2025 10:00:00 GMT</pubDate></item>"
        for title, link in items
    )
    return f'<?xml version="1.0"?><rss version="2.0"><channel><title>t</title>{body}</channel></rss>'.encode()


FEEDS = {
    "https://hn.example.com/rss": _rss(
        ("Claude Code 2.0 released", "https://hn.example.com/1"),
        ("Gardening tips for autumn", "https://hn.example.com/2"),
    ),
    "https://reddit.example.com/rss": _rss(
        ("claude code 2.0 released!!", "https://reddit.example.com/1"),
        ("Anthropic API pricing update", "https://reddit.example.com/2"),
    ),
}


def _adapter(name: str, url: str, category: str = "tech") -> FeedAdapter:
    return FeedAdapter(SourceConfig(name=name, category=category, url=url))


def _client_factory(handler):
    def _factory(cfg: FetchConfig) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _factory


def _serve_feeds(request: httpx.Request) -> httpx.Response:
    content = FEEDS.get(str(request.url))
    if content is None:
        return httpx.Response(500)
    return httpx.Response(200, content=content)


def _runner(store: ArticleStore, adapters, handler=_serve_feeds) -> IngestionRunner:
    return IngestionRunner(adapters, store, client_factory=_client_factory(handler))


def test_cycle_merges_dedups_and_isolates_failures(tmp_path):
    store = ArticleStore(tmp_path / "news.json")
    runner = _runner(
        store,
        [
            _adapter("Hacker News", "https://hn.example.com/rss"),
            _adapter("Broken", "https://broken.example.com/rss"),
            _adapter("Reddit", "https://reddit.example.com/rss", category="community"),
        ],
    )

    result = asyncio.run(runner.run())

    snapshot = store.current_snapshot()
    assert [(a.title, a.source) for a in snapshot.articles] == [
        ("Claude Code 2.0 released", "Hacker News"),
        ("Anthropic API pricing update", "Reddit"),
    ]
    assert snapshot.articles[0].relevance == 55
    assert snapshot.last_updated is not None
    assert result.total_articles == 2
    assert result.new_count == 2
    assert result.sources_ok == ["Hacker News", "Reddit"]
    assert result.sources_failed == ["Broken"]
    assert result.saved is True
    payload = result.to_dict()
    assert payload["message"] == "Found 2 NEW articles!"
    assert payload["sourcesOk"] == 2
    assert payload["sourcesFailed"] == 1
    assert payload["failedSources"] == ["Broken"]
    assert (tmp_path / "news.json").exists()


def test_repeat_cycle_reports_no_new_articles(tmp_path):
    store = ArticleStore(tmp_path / "news.json")
    runner = _runner(store, [_adapter("Hacker News", "https://hn.example.com/rss")])

    asyncio.run(runner.run())
    result = asyncio.run(runner.run())

    assert result.total_articles == 1
    assert result.new_count == 0
    assert result.to_dict()["message"] == "No new articles found - check back later"


def test_all_sources_failing_yields_empty_snapshot(tmp_path, article_factory, snapshot_factory):
    store = ArticleStore(tmp_path / "news.json")
    store.replace(snapshot_factory([article_factory("Yesterday's story")]))
    runner = _runner(
        store,
        [_adapter("A", "https://a.example.com/rss"), _adapter("B", "https://b.example.com/rss")],
    )

    result = asyncio.run(runner.run())

    assert result.total_articles == 0
    assert result.sources_failed == ["A", "B"]
    assert store.current_snapshot().count == 0


def test_readers_see_previous_snapshot_during_cycle(tmp_path, article_factory, snapshot_factory):
    store = ArticleStore(tmp_path / "news.json")
    previous = snapshot_factory([article_factory("Yesterday's story")])
    store.replace(previous)
    seen = []

    def handler(request):
        seen.append(store.current_snapshot())
        return _serve_feeds(request)

    runner = _runner(store, [_adapter("Hacker News", "https://hn.example.com/rss")], handler)

    asyncio.run(runner.run())

    assert seen == [previous]
    assert store.current_snapshot() is not previous
    assert store.current_snapshot().articles[0].title == "Claude Code 2.0 released"


def test_cycle_without_sources(tmp_path):
    store = ArticleStore(tmp_path / "news.json")
    runner = _runner(store, [])

    result = asyncio.run(runner.run())

    assert result.total_articles == 0
    assert result.sources_ok == []
    assert store.current_snapshot().last_updated is not None

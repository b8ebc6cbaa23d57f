"""Shared helpers for building articles and snapshots in tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from claude_news.core.normalize import make_id
from claude_news.core.types import Article, Snapshot


BASE_TIME = datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc)


def make_article(
    title: str,
    relevance: int = 50,
    category: str = "tech",
    source: str = "Test Source",
    description: str = "",
    hours_ago: int = 0,
    link: str | None = None,
) -> Article:
    link = link if link is not None else f"https://example.com/{make_id('', title)}"
    return Article(
        id=make_id(link, title),
        title=title,
        link=link,
        description=description,
        pub_date=BASE_TIME - timedelta(hours=hours_ago),
        source=source,
        category=category,
        relevance=relevance,
    )


@pytest.fixture
def article_factory():
    return make_article


@pytest.fixture
def snapshot_factory():
    def _build(articles, last_updated=BASE_TIME):
        return Snapshot(articles=tuple(articles), last_updated=last_updated)

    return _build

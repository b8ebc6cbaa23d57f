"""
Read-side operations over a snapshot.

Queries never re-sort: the snapshot is already in serve order, so
filtering preserves ranking and pagination is a plain slice.
"""

from __future__ import annotations

from collections import Counter
import math

from .core.types import Category, QueryResult, Snapshot, Stats


DEFAULT_PAGE_SIZE = 20
FEATURED_LIMIT = 5
FEATURED_MIN_RELEVANCE = 30

CATEGORIES: tuple[Category, ...] = (
    Category("official", "Official News", "megaphone"),
    Category("releases", "Releases", "rocket"),
    Category("tech", "Tech News", "cpu"),
    Category("tutorials", "Tutorials", "book-open"),
    Category("articles", "Articles", "file-text"),
    Category("community", "Community", "users"),
)


def query_articles(
    snapshot: Snapshot,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    category: str | None = None,
    search: str | None = None,
    min_relevance: int | None = None,
) -> QueryResult:
    """Filter and paginate a snapshot.

    Filters apply in order: category equality, case-insensitive substring
    match of ``search`` in title or description, ``relevance >= min_relevance``.
    Empty or zero filter values are ignored.

    Args:
        snapshot: Snapshot to read
        page: 1-based page number; values below 1 are treated as 1
        limit: Page size; values below 1 fall back to DEFAULT_PAGE_SIZE
        category: Category id to keep
        search: Search term
        min_relevance: Relevance floor

    Returns:
        QueryResult; a page past the end has an empty article list
    """
    page = page if page >= 1 else 1
    limit = limit if limit >= 1 else DEFAULT_PAGE_SIZE

    articles = list(snapshot.articles)
    if category:
        articles = [a for a in articles if a.category == category]
    if search:
        term = search.lower()
        articles = [
            a for a in articles if term in a.title.lower() or term in a.description.lower()
        ]
    if min_relevance:
        articles = [a for a in articles if a.relevance >= min_relevance]

    total = len(articles)
    start = (page - 1) * limit
    return QueryResult(
        articles=articles[start : start + limit],
        total=total,
        page=page,
        total_pages=math.ceil(total / limit),
    )


def featured_articles(snapshot: Snapshot) -> QueryResult:
    return query_articles(
        snapshot, page=1, limit=FEATURED_LIMIT, min_relevance=FEATURED_MIN_RELEVANCE
    )


def compute_stats(snapshot: Snapshot) -> Stats:
    """Aggregate counts in a single pass over the snapshot."""
    counts: Counter[str] = Counter()
    relevance_sum = 0
    for article in snapshot.articles:
        counts[article.category] += 1
        relevance_sum += article.relevance

    total = snapshot.count
    # Round half up, not to even.
    avg = math.floor(relevance_sum / total + 0.5) if total else 0
    return Stats(
        total_articles=total,
        last_updated=snapshot.last_updated,
        category_counts=dict(counts),
        avg_relevance=int(avg),
    )


def list_categories() -> list[Category]:
    return list(CATEGORIES)

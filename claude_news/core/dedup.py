"""
Article filtering, deduplication and ranking.

This module turns the merged output of all adapters into the final serve
order of a snapshot:
1. Drop items below the relevance floor
2. Keep the first item per normalized title (dedup key)
3. Sort by relevance, then by publish date, both descending
"""

from __future__ import annotations

import re

from .types import Article


_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def dedup_key(title: str, length: int = 50) -> str:
    """Normalize a title for duplicate detection.

    Lowercases, strips everything outside ``[a-z0-9]`` and caps the length,
    so titles differing only in case, punctuation or whitespace collide.

    Example:
        >>> dedup_key("Claude Code 2.0 released!!")
        'claudecode20released'
    """
    return _NON_ALNUM_RE.sub("", title.lower())[:length]


def dedup_articles(articles: list[Article], key_length: int = 50) -> list[Article]:
    """Remove duplicate articles, preserving original order.

    The first article seen for a key wins, even if a later duplicate has a
    different source, category or relevance.
    """
    seen: set[str] = set()
    kept: list[Article] = []
    for article in articles:
        key = dedup_key(article.title, key_length)
        if key in seen:
            continue
        seen.add(key)
        kept.append(article)
    return kept


def rank_articles(
    articles: list[Article],
    min_relevance: int = 5,
    key_length: int = 50,
) -> list[Article]:
    """Filter, deduplicate and order articles for a new snapshot.

    Args:
        articles: All scored articles of one cycle, in source order
        min_relevance: Articles scoring below this are dropped
        key_length: Dedup key length

    Returns:
        Articles in final serve order
    """
    relevant = [article for article in articles if article.relevance >= min_relevance]
    unique = dedup_articles(relevant, key_length)
    # Two stable passes: newest first, then highest relevance first.
    unique.sort(key=lambda article: article.pub_date, reverse=True)
    unique.sort(key=lambda article: article.relevance, reverse=True)
    return unique

"""Normalization helpers shared by the source adapters."""

from __future__ import annotations

from datetime import datetime, timezone
import hashlib
import re
from typing import Any

from bs4 import BeautifulSoup
from dateutil import parser as date_parser

from .scoring import score
from .types import Article, RawItem


_WS_RE = re.compile(r"\s+")
_IMG_SRC_RE = re.compile(r"<img[^>]+src=[\"']([^\"']+)[\"']", re.IGNORECASE)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def make_id(link: str, title: str) -> str:
    """Stable article id: hash of the link, or of the title without one."""
    key = link or title
    return hashlib.md5(key.encode("utf-8")).hexdigest()[:12]


def clean_text(text: str | None, max_chars: int = 500) -> str:
    """Collapse whitespace, trim, and truncate to max_chars."""
    if not text:
        return ""
    return _WS_RE.sub(" ", text).strip()[:max_chars]


def strip_html(html: str | None) -> str:
    """Plain text of an HTML fragment, script/style removed."""
    if not html:
        return ""
    if "<" not in html:
        return html
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return soup.get_text(separator=" ")


def parse_date(value: Any, default: datetime | None = None) -> datetime:
    """Parse a timestamp into a timezone-aware datetime.

    Accepts datetimes, ``time.struct_time``-like tuples (as produced by
    feedparser, always UTC) and strings. Naive values are taken as UTC.
    Falls back to ``default`` (or now) when the value is missing or bad.
    """
    fallback = default or utcnow()
    if value is None or value == "":
        return fallback
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (tuple, list)) or hasattr(value, "tm_year"):
        try:
            dt = datetime(*tuple(value)[:6], tzinfo=timezone.utc)
        except (TypeError, ValueError):
            return fallback
    else:
        try:
            dt = date_parser.parse(str(value))
        except (ValueError, OverflowError):
            return fallback
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def first_image_src(html: str | None) -> str | None:
    """Best-effort: src of the first ``<img>`` in an HTML fragment."""
    if not html:
        return None
    match = _IMG_SRC_RE.search(html)
    return match.group(1) if match else None


def to_article(item: RawItem, source: str, category: str) -> Article:
    """Score a raw item and turn it into a canonical article.

    Adapters with a fixed relevance (releases, org listings) bypass the
    scorer; everything else is scored on title and cleaned description.
    """
    relevance = item.relevance if item.relevance is not None else score(item.title, item.description)
    return Article(
        id=make_id(item.link, item.title),
        title=item.title,
        link=item.link,
        description=item.description,
        pub_date=item.pub_date,
        source=source,
        category=category,
        relevance=max(0, min(int(relevance), 100)),
        thumbnail=item.thumbnail,
        is_release=item.is_release,
    )

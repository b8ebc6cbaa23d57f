"""RSS/Atom feed adapter."""

from __future__ import annotations

from typing import Any

import feedparser

from ..core.normalize import clean_text, first_image_src, parse_date, strip_html
from ..core.types import RawItem
from ..errors import SourceFetchError
from .base import SourceAdapter


class FeedAdapter(SourceAdapter):
    kind = "feed"

    def parse(self, content: bytes) -> list[RawItem]:
        feed = feedparser.parse(content)
        entries = getattr(feed, "entries", None) or []
        if getattr(feed, "bozo", False) and not entries:
            raise SourceFetchError(self.name, f"Unparseable feed: {feed.get('bozo_exception')}")
        return [self._to_item(entry) for entry in entries]

    def _to_item(self, entry: Any) -> RawItem:
        title = clean_text(strip_html(entry.get("title")), max_chars=1000) or "Untitled"
        return RawItem(
            title=title,
            link=str(entry.get("link") or ""),
            description=clean_text(strip_html(_entry_html(entry)), self.description_max_chars),
            pub_date=parse_date(entry.get("published_parsed") or entry.get("updated_parsed")),
            thumbnail=_thumbnail(entry),
        )


def _entry_html(entry: Any) -> str:
    summary = entry.get("summary") or entry.get("description")
    if summary:
        return str(summary)
    content = entry.get("content")
    if content and isinstance(content, list):
        value = content[0].get("value")
        if value:
            return str(value)
    return ""


def _thumbnail(entry: Any) -> str | None:
    """Best available image for an entry, or None.

    Order: enclosure, media:content, media:thumbnail, first <img> in the
    content or summary markup.
    """
    for enclosure in entry.get("enclosures") or []:
        href = enclosure.get("href") or enclosure.get("url")
        kind = enclosure.get("type") or ""
        if href and (not kind or kind.startswith("image/")):
            return str(href)
    for key in ("media_content", "media_thumbnail"):
        for media in entry.get(key) or []:
            url = media.get("url")
            if url:
                return str(url)
    content = entry.get("content")
    if content and isinstance(content, list):
        found = first_image_src(content[0].get("value"))
        if found:
            return found
    return first_image_src(entry.get("summary"))

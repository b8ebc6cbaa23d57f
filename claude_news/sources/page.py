"""Generic HTML page adapter driven by CSS selectors."""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..core.normalize import clean_text, parse_date
from ..core.types import RawItem
from .base import SourceAdapter


MIN_TITLE_CHARS = 6


class PageAdapter(SourceAdapter):
    kind = "page"
    max_items = 20

    def parse(self, content: bytes) -> list[RawItem]:
        soup = BeautifulSoup(content, "html.parser")
        items: list[RawItem] = []
        for block in soup.select(self.source.selector):
            item = self._block_to_item(block)
            if item is not None:
                items.append(item)
        return items

    def _block_to_item(self, block: Tag) -> RawItem | None:
        title = _text(block.select_one(self.source.title_selector), 1000)
        # Short titles are navigation crumbs and buttons, not stories.
        if len(title) < MIN_TITLE_CHARS:
            return None

        link_el = block.select_one(self.source.link_selector)
        href = link_el.get("href") if link_el is not None else None
        link = urljoin(self.source.url, str(href)) if href else ""

        date_el = block.select_one(self.source.date_selector)
        raw_date = None
        if date_el is not None:
            raw_date = date_el.get("datetime") or date_el.get_text(strip=True)

        return RawItem(
            title=title,
            link=link,
            description=_text(
                block.select_one(self.source.summary_selector), self.description_max_chars
            ),
            pub_date=parse_date(raw_date),
        )


def _text(element: Tag | None, max_chars: int) -> str:
    if element is None:
        return ""
    return clean_text(element.get_text(" "), max_chars)

"""Release listing adapter (GitHub releases page markup)."""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..core.normalize import clean_text, parse_date
from ..core.types import RawItem
from .base import SourceAdapter


RELEASE_RELEVANCE = 100
RELEASE_BODY_CHARS = 300

_BLOCK_SELECTOR = '[data-hpc] .Box-row, .release, [class*="Box-row"]'
_TITLE_SELECTOR = 'a.Link--primary, .release-title, a[href*="/releases/tag"]'
_LINK_SELECTOR = 'a.Link--primary, .release-title a, a[href*="/releases/tag"]'
_BODY_SELECTOR = '.markdown-body, [class*="markdown"]'


class ReleasesAdapter(SourceAdapter):
    """One record per release block; releases are always maximally relevant."""

    kind = "releases"
    max_items = 10

    def parse(self, content: bytes) -> list[RawItem]:
        soup = BeautifulSoup(content, "html.parser")
        items: list[RawItem] = []
        for block in soup.select(_BLOCK_SELECTOR):
            item = self._block_to_item(block)
            if item is not None:
                items.append(item)
        return items

    def _block_to_item(self, block: Tag) -> RawItem | None:
        title_el = block.select_one(_TITLE_SELECTOR)
        tag_name = clean_text(title_el.get_text(" "), 200) if title_el is not None else ""
        if not tag_name:
            return None

        link_el = block.select_one(_LINK_SELECTOR)
        href = link_el.get("href") if link_el is not None else None
        time_el = block.select_one("relative-time")
        body_el = block.select_one(_BODY_SELECTOR)
        body = clean_text(body_el.get_text(" "), RELEASE_BODY_CHARS) if body_el is not None else ""

        return RawItem(
            title=f"{self.source.label} {tag_name}".strip(),
            link=urljoin(self.source.url, str(href)) if href else "",
            description=body or "New release available",
            pub_date=parse_date(time_el.get("datetime") if time_el is not None else None),
            is_release=True,
            relevance=RELEASE_RELEVANCE,
        )

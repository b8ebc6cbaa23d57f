"""Organization repository listing adapter."""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ..core.normalize import clean_text, utcnow
from ..core.types import RawItem
from .base import SourceAdapter


ORG_RELEVANCE = 80

_ENTRY_SELECTOR = '[itemprop="name codeRepository"], .repo, [class*="repo"]'


class OrgAdapter(SourceAdapter):
    """Repositories whose name mentions the topic keyword."""

    kind = "org"
    max_items = 5

    def parse(self, content: bytes) -> list[RawItem]:
        soup = BeautifulSoup(content, "html.parser")
        keyword = self.source.topic_keyword.lower()
        label = self.source.label
        fetched_at = utcnow()
        items: list[RawItem] = []
        for element in soup.select(_ENTRY_SELECTOR):
            name = clean_text(element.get_text(" "), 200)
            if not name or keyword not in name.lower():
                continue
            href = element.get("href")
            items.append(
                RawItem(
                    title=f"{label} Repository: {name}" if label else f"Repository: {name}",
                    link=urljoin(self.source.url, str(href)) if href else "",
                    description=(
                        f"Official {label} repository for {name}"
                        if label
                        else f"Official repository for {name}"
                    ),
                    pub_date=fetched_at,
                    relevance=ORG_RELEVANCE,
                )
            )
        return items

"""Abstract interface for source adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
from dataclasses import dataclass, field
import logging

import httpx

from ..config import FetchConfig, SourceConfig
from ..core.types import RawItem
from ..errors import SourceFetchError
from ..fetch.fetcher import fetch_url
from ..logging_utils import log_event


logger = logging.getLogger(__name__)


@dataclass
class SourceResult:
    """Outcome of fetching one source.

    Either items (possibly empty) or error is meaningful, never both: a
    failed source always carries an empty item list.
    """

    source: SourceConfig
    items: list[RawItem] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SourceAdapter(ABC):
    """Fetches one source and extracts raw items from it.

    Subclasses implement ``parse``; download, timeout, item cap and failure
    isolation live here so every kind behaves the same way.
    """

    kind: str = ""
    max_items: int | None = None

    def __init__(
        self,
        source: SourceConfig,
        fetch_cfg: FetchConfig | None = None,
        description_max_chars: int = 500,
    ):
        self.source = source
        self.fetch_cfg = fetch_cfg or FetchConfig()
        self.description_max_chars = description_max_chars

    @property
    def name(self) -> str:
        return self.source.name

    async def fetch(self, client: httpx.AsyncClient) -> SourceResult:
        """Fetch and parse the source; never raises."""
        timeout = self.fetch_cfg.timeout_seconds
        try:
            items = await asyncio.wait_for(self._fetch_items(client), timeout=timeout)
        except asyncio.TimeoutError:
            return self._failed(f"Timed out after {timeout:g}s")
        except SourceFetchError as exc:
            return self._failed(exc.message)
        except Exception as exc:  # noqa: BLE001
            return self._failed(f"{type(exc).__name__}: {exc}")

        log_event(
            logger,
            f"{self.name}: {len(items)} items",
            level=logging.DEBUG,
            event="source_ok",
            source=self.name,
            count=len(items),
        )
        return SourceResult(source=self.source, items=items)

    async def _fetch_items(self, client: httpx.AsyncClient) -> list[RawItem]:
        result = await fetch_url(client, self.source.url, self.fetch_cfg.timeout_seconds)
        if result.error or result.content is None:
            raise SourceFetchError(self.name, result.error or "Empty response")
        # Parse off the event loop so wait_for also bounds it.
        items = await asyncio.to_thread(self.parse, result.content)
        if self.max_items is not None:
            items = items[: self.max_items]
        return items

    def _failed(self, error: str) -> SourceResult:
        log_event(
            logger,
            f"Fetch error for {self.name}: {error}",
            level=logging.WARNING,
            event="source_failed",
            source=self.name,
            url=self.source.url,
            error=error,
        )
        return SourceResult(source=self.source, items=[], error=error)

    @abstractmethod
    def parse(self, content: bytes) -> list[RawItem]:
        """Extract raw items from a downloaded document.

        Raises SourceFetchError when the document cannot be understood.
        """
        raise NotImplementedError

"""
HTTP fetching for source adapters.

All adapters of one cycle share a single ``httpx.AsyncClient`` built by
``build_client``; each request carries its own timeout so one slow source
never holds up the others.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from ..config import FetchConfig


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either content will be populated (success) or error will be populated
    (failure), but never both. status_code may be None for network-level
    failures.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if request failed before getting response
        content: The raw response body, or None on error
        error: Error message if fetch failed, None on success
    """

    url: str
    status_code: int | None
    content: bytes | None
    error: str | None


def build_client(cfg: FetchConfig, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Build the shared async client for one ingestion cycle.

    Args:
        cfg: Fetch configuration
        transport: Optional transport override (tests pass httpx.MockTransport)
    """
    return httpx.AsyncClient(
        timeout=cfg.timeout_seconds,
        headers={
            "User-Agent": cfg.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/rss+xml,application/xml;q=0.9,*/*;q=0.8",
        },
        follow_redirects=True,
        trust_env=cfg.trust_env,
        transport=transport,
    )


async def fetch_url(client: httpx.AsyncClient, url: str, timeout: float) -> FetchResult:
    """Fetch a URL once.

    Non-2xx responses are reported as errors. There is no retry: a failed
    source simply contributes nothing to the current cycle.

    Args:
        client: Shared async client
        url: The URL to fetch
        timeout: Request timeout in seconds

    Returns:
        FetchResult with content on success or error message on failure
    """
    try:
        resp = await client.get(url, timeout=timeout)
    except httpx.HTTPError as exc:
        return FetchResult(url=url, status_code=None, content=None, error=f"{type(exc).__name__}: {exc}")

    if not resp.is_success:
        return FetchResult(
            url=url,
            status_code=resp.status_code,
            content=None,
            error=f"HTTP {resp.status_code}",
        )
    return FetchResult(url=url, status_code=resp.status_code, content=resp.content, error=None)

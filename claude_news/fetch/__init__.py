"""
HTTP fetching.

This package handles the network side of source adapters.
"""

from .fetcher import FetchResult, build_client, fetch_url

__all__ = [
    "FetchResult",
    "build_client",
    "fetch_url",
]

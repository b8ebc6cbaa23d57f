"""
Source adapters.

One adapter class per source kind:
- feed: RSS/Atom feeds
- page: Generic HTML pages scraped with CSS selectors
- releases: Release listing pages
- org: Organization repository listings

To add a new kind:
1. Inherit from SourceAdapter and implement parse()
2. Register the class in factory._ADAPTER_REGISTRY
3. Add the kind name to config.SOURCE_KINDS
"""

from .base import SourceAdapter, SourceResult
from .factory import available_kinds, create_adapter, create_adapters
from .feed import FeedAdapter
from .org import OrgAdapter
from .page import PageAdapter
from .releases import ReleasesAdapter

__all__ = [
    "FeedAdapter",
    "OrgAdapter",
    "PageAdapter",
    "ReleasesAdapter",
    "SourceAdapter",
    "SourceResult",
    "available_kinds",
    "create_adapter",
    "create_adapters",
]

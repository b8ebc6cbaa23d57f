"""Adapter registry: maps a source kind to its adapter class."""

from __future__ import annotations

from ..config import AppConfig, FetchConfig, SourceConfig
from ..errors import ConfigError
from .base import SourceAdapter
from .feed import FeedAdapter
from .org import OrgAdapter
from .page import PageAdapter
from .releases import ReleasesAdapter


AdapterBuilder = type[SourceAdapter]

_ADAPTER_REGISTRY: dict[str, AdapterBuilder] = {
    "feed": FeedAdapter,
    "page": PageAdapter,
    "releases": ReleasesAdapter,
    "org": OrgAdapter,
}


def available_kinds() -> list[str]:
    """Return the registered source kinds."""
    return sorted(_ADAPTER_REGISTRY.keys())


def create_adapter(
    source: SourceConfig,
    fetch_cfg: FetchConfig | None = None,
    description_max_chars: int = 500,
) -> SourceAdapter:
    """Build the adapter for one source."""
    builder = _ADAPTER_REGISTRY.get(source.kind)
    if builder is None:
        supported = ", ".join(available_kinds())
        raise ConfigError(f"Unsupported source kind: {source.kind}. Supported: {supported}")
    return builder(source, fetch_cfg, description_max_chars)


def create_adapters(cfg: AppConfig) -> list[SourceAdapter]:
    """Build adapters for every configured source, in configuration order."""
    return [
        create_adapter(source, cfg.fetch, cfg.ranking.description_max_chars)
        for source in cfg.sources
    ]

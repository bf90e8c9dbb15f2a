# src/cache/cache_factory.py — v3
"""Factory for the process-wide cache store."""

from __future__ import annotations

from trendscout.cache.base_cache_store import BaseCacheStore
from trendscout.cache.memory_store import MemoryCacheStore
from trendscout.config.settings import Settings


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore:
    """Instantiate the shared cache store.

    Called once at startup; the same instance is injected into the
    pipeline, the scheduler and the HTTP layer.

    Args:
        settings: Application settings. Defaults to an unbounded store.

    Returns:
        Configured BaseCacheStore implementation.
    """
    max_entries = 0 if settings is None else settings.cache_max_entries
    return MemoryCacheStore(max_entries=max_entries)

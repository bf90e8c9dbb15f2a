# src/cache/base_cache_store.py — v2
"""Abstract cache store interface.

Implementations own their synchronization: callers never lock around
store operations. All operations are in-memory and never suspend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any

from trendscout.cache.models import CacheHit


class BaseCacheStore(ABC):
    """Unified interface for TTL cache backends."""

    @abstractmethod
    def get(self, key: str) -> CacheHit | None:
        """Return the entry for key with its freshness, or None if absent."""

    @abstractmethod
    def put(self, key: str, value: Any, ttl: timedelta) -> None:
        """Store value under key, replacing any previous entry."""

    @abstractmethod
    def get_even_if_stale(self, key: str) -> Any | None:
        """Return the last written value for key regardless of freshness."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove an entry."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of stored entries, fresh or stale."""

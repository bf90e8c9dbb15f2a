# src/cache/memory_store.py — v1
"""In-process TTL cache store.

Entries live for the lifetime of the process. Expired entries are not
purged; they are reported as stale on read and stay available to
get_even_if_stale(). An optional capacity bound evicts the least
recently written entry.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from trendscout.cache.base_cache_store import BaseCacheStore
from trendscout.cache.models import CacheEntry, CacheHit

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryCacheStore(BaseCacheStore):
    """Thread-safe dict-backed cache store."""

    def __init__(self, max_entries: int = 0, clock: Clock = utc_now) -> None:
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._max_entries = max_entries
        self._clock = clock

    def get(self, key: str) -> CacheHit | None:
        """Retrieve an entry and report whether it is still fresh."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            logger.info("Cache MISS: %s", key)
            return None

        now = self._clock()
        fresh = entry.is_fresh(now)
        age = entry.age(now).total_seconds()
        if fresh:
            logger.info("Cache HIT: %s (age: %ds)", key, age)
        else:
            logger.info("Cache EXPIRED: %s (age: %ds)", key, age)
        return CacheHit(value=entry.value, is_fresh=fresh, age_seconds=age)

    def put(self, key: str, value: Any, ttl: timedelta) -> None:
        """Store a value; the previous entry for key, if any, is replaced."""
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        entry = CacheEntry(key=key, value=value, cached_at=self._clock(), ttl=ttl)
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = entry
            evicted = self._evict_locked()
        for old_key in evicted:
            logger.debug("Cache EVICT: %s", old_key)
        logger.info("Cache SET: %s", key)

    def get_even_if_stale(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
        return None if entry is None else entry.value

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Cache cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _evict_locked(self) -> list[str]:
        """Drop least recently written entries beyond capacity. Caller holds the lock."""
        evicted: list[str] = []
        if self._max_entries == 0:
            return evicted
        while len(self._entries) > self._max_entries:
            old_key, _ = self._entries.popitem(last=False)
            evicted.append(old_key)
        return evicted

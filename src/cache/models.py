# src/cache/models.py — v2
"""Cache domain models: CacheEntry, CacheHit."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict


class CacheEntry(BaseModel):
    """Single immutable cache entry with its own expiry window."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: str
    value: Any
    cached_at: datetime
    ttl: timedelta

    @property
    def expires_at(self) -> datetime:
        return self.cached_at + self.ttl

    def is_fresh(self, now: datetime) -> bool:
        """Fresh while now < cached_at + ttl."""
        return now < self.expires_at

    def age(self, now: datetime) -> timedelta:
        return now - self.cached_at


class CacheHit(BaseModel):
    """Result of a cache read: the value and whether it is still fresh."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any
    is_fresh: bool
    age_seconds: float = 0.0

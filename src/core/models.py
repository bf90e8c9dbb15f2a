# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

SearchSpec is the structured form of a user question; RepositoryRecord is
one search hit. Both are immutable value types.
"""

from __future__ import annotations

import json
import re
from datetime import timedelta
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Timeframe = Literal["day", "week", "month", "quarter", "year"]

TIMEFRAME_WINDOWS: dict[str, timedelta] = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "quarter": timedelta(days=90),
    "year": timedelta(days=365),
}

DEFAULT_TIMEFRAME: Timeframe = "week"
DEFAULT_MIN_STARS = 10
DEFAULT_COUNT = 5
MAX_COUNT = 20

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Lower-case, trim and collapse internal whitespace."""
    return _WHITESPACE.sub(" ", text).strip().lower()


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = normalize_text(value)
    return cleaned or None


# === SEARCH SPECIFICATION ===


class SearchSpec(BaseModel):
    """Structured search parameters produced from a natural-language query."""

    model_config = ConfigDict(frozen=True)

    keyword: str | None = None
    language: str | None = None
    topics: tuple[str, ...] = ()
    timeframe: Timeframe = DEFAULT_TIMEFRAME
    min_stars: int = Field(default=DEFAULT_MIN_STARS, ge=0)
    count: int = Field(default=DEFAULT_COUNT, ge=1, le=MAX_COUNT)

    def canonical(self) -> SearchSpec:
        """Return the canonical form used for cache keys.

        Text fields are lower-cased and trimmed, empty strings become None,
        and topics are de-duplicated and sorted. Idempotent.
        """
        topics = sorted({t for t in (_optional_text(x) for x in self.topics) if t})
        return SearchSpec(
            keyword=_optional_text(self.keyword),
            language=_optional_text(self.language),
            topics=tuple(topics),
            timeframe=self.timeframe,
            min_stars=self.min_stars,
            count=self.count,
        )

    def cache_encoding(self) -> str:
        """Deterministic string encoding of the canonical form."""
        payload = self.canonical().model_dump(mode="json")
        return json.dumps(payload, sort_keys=True, separators=(",", ":"))

    @property
    def window(self) -> timedelta:
        """Age window implied by the timeframe."""
        return TIMEFRAME_WINDOWS[self.timeframe]


# === SEARCH RESULTS ===


class RepositoryRecord(BaseModel):
    """A single repository returned by the search API."""

    model_config = ConfigDict(frozen=True)

    full_name: str
    description: str | None = None
    url: str
    language: str | None = None
    stars: int = Field(ge=0)

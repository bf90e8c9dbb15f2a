# src/github/query_builder.py — v1
"""SearchSpec → GitHub Search API query.

Terms are emitted in a fixed order: keyword, language, topics, creation
cutoff, star floor. Sorting is always by stars, descending.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from trendscout.core.models import SearchSpec

SORT_FIELD = "stars"
SORT_ORDER = "desc"


@dataclass(frozen=True)
class SearchQuery:
    """A fully built repository search request."""

    terms: tuple[str, ...]
    per_page: int
    sort: str = SORT_FIELD
    order: str = SORT_ORDER

    @property
    def q(self) -> str:
        """Terms joined by the API's separator (a space, sent as '+')."""
        return " ".join(self.terms)

    def params(self) -> dict[str, str | int]:
        return {"q": self.q, "sort": self.sort, "order": self.order, "per_page": self.per_page}


def age_cutoff(spec: SearchSpec, now: datetime) -> str:
    """Creation-date cutoff for the timeframe as YYYY-MM-DD."""
    return (now - spec.window).strftime("%Y-%m-%d")


def _qualifier_value(value: str) -> str:
    return f'"{value}"' if " " in value else value


def build_query_terms(spec: SearchSpec, now: datetime) -> list[str]:
    terms: list[str] = []
    if spec.keyword:
        terms.append(spec.keyword)
    if spec.language:
        terms.append(f"language:{_qualifier_value(spec.language)}")
    terms.extend(f"topic:{_qualifier_value(topic)}" for topic in spec.topics)
    terms.append(f"created:>={age_cutoff(spec, now)}")
    terms.append(f"stars:>={spec.min_stars}")
    return terms


def build_search_query(spec: SearchSpec, now: datetime) -> SearchQuery:
    """Build the search request for spec as of now."""
    return SearchQuery(terms=tuple(build_query_terms(spec, now)), per_page=spec.count)

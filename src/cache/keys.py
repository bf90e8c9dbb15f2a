# src/cache/keys.py — v1
"""Cache key construction.

Two disjoint namespaces share one store: parsed questions under
``parse:`` and search results under ``search:``.
"""

from __future__ import annotations

from trendscout.core.models import SearchSpec, normalize_text

PARSE_PREFIX = "parse:"
SEARCH_PREFIX = "search:"


def parse_key(raw_text: str) -> str:
    """Key for a parsed question: normalized text."""
    return f"{PARSE_PREFIX}{normalize_text(raw_text)}"


def search_key(spec: SearchSpec) -> str:
    """Key for search results: canonical SearchSpec encoding."""
    return f"{SEARCH_PREFIX}{spec.cache_encoding()}"

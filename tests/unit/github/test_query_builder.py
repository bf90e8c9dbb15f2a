# tests/unit/github/test_query_builder.py — v1
"""Tests for github/query_builder.py."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from trendscout.core.models import SearchSpec
from trendscout.github.query_builder import age_cutoff, build_query_terms, build_search_query

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


class TestAgeCutoff:
    @pytest.mark.parametrize(
        "timeframe,expected",
        [
            ("day", "2026-03-01"),
            ("week", "2026-02-23"),
            ("month", "2026-01-31"),
            ("quarter", "2025-12-02"),
            ("year", "2025-03-02"),
        ],
    )
    def test_windows(self, timeframe, expected):
        assert age_cutoff(SearchSpec(timeframe=timeframe), NOW) == expected


class TestBuildQueryTerms:
    def test_language_only(self, rust_spec):
        assert build_query_terms(rust_spec, NOW) == [
            "language:rust",
            "created:>=2026-02-23",
            "stars:>=10",
        ]

    def test_full_order(self):
        spec = SearchSpec(
            keyword="web framework", language="python", topics=("async", "http"),
            timeframe="month", min_stars=100,
        )
        assert build_query_terms(spec, NOW) == [
            "web framework",
            "language:python",
            "topic:async",
            "topic:http",
            "created:>=2026-01-31",
            "stars:>=100",
        ]

    def test_multiword_language_quoted(self):
        spec = SearchSpec(language="jupyter notebook")
        assert 'language:"jupyter notebook"' in build_query_terms(spec, NOW)


class TestBuildSearchQuery:
    def test_params(self, rust_spec):
        query = build_search_query(rust_spec, NOW)
        assert query.params() == {
            "q": "language:rust created:>=2026-02-23 stars:>=10",
            "sort": "stars",
            "order": "desc",
            "per_page": 5,
        }

    def test_per_page_follows_count(self):
        assert build_search_query(SearchSpec(count=12), NOW).per_page == 12

# tests/unit/service/test_formatter.py — v1
"""Tests for service/formatter.py."""

from __future__ import annotations

import re

from trendscout.core.models import SearchSpec
from trendscout.service.formatter import (
    EMPTY_RESULT,
    STALE_MARKER,
    describe_scope,
    format_repository,
    format_trending,
)


class TestDescribeScope:
    def test_language_and_timeframe(self, rust_spec):
        assert describe_scope(rust_spec) == "language: rust, week"

    def test_topics(self):
        spec = SearchSpec(topics=("cli", "tui"), timeframe="day")
        assert describe_scope(spec) == "topics: cli, tui, day"

    def test_timeframe_only(self):
        assert describe_scope(SearchSpec(timeframe="year")) == "year"


class TestFormatRepository:
    def test_entry(self, sample_repos):
        assert format_repository(1, sample_repos[0]) == (
            "1. owner1/crate1 - 950 stars\n"
            "   Rust - Crate number 1\n"
            "   https://github.com/owner1/crate1"
        )

    def test_missing_description_and_language(self, sample_repos):
        repo = sample_repos[2].model_copy(update={"language": None})
        text = format_repository(3, repo)
        assert "   Unknown - \n" in text


class TestFormatTrending:
    def test_header_and_ranks(self, sample_repos, rust_spec):
        text = format_trending(sample_repos, rust_spec)
        assert text.startswith("Trending on GitHub (language: rust, week)\n\n")
        ranks = [int(m) for m in re.findall(r"^(\d+)\. ", text, flags=re.MULTILINE)]
        assert ranks == [1, 2, 3, 4, 5]
        assert STALE_MARKER not in text

    def test_stale_marker(self, sample_repos, rust_spec):
        text = format_trending(sample_repos, rust_spec, stale=True)
        assert text.splitlines()[0] == "Trending on GitHub (language: rust, week) [cached, may be stale]"

    def test_empty(self, rust_spec):
        text = format_trending([], rust_spec)
        assert text.endswith(EMPTY_RESULT)

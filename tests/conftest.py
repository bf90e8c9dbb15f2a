# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a controllable clock, a cache store bound to it, sample
repositories, and mocked parser / executor / LLM collaborators.
No external dependencies: all I/O is mocked.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from trendscout.cache.memory_store import MemoryCacheStore
from trendscout.core.models import RepositoryRecord, SearchSpec
from trendscout.llm.models import LLMResponse
from trendscout.service.pipeline import ResolutionPipeline


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


# === FIXTURES: Clock + cache ===


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock: FakeClock) -> MemoryCacheStore:
    return MemoryCacheStore(clock=clock)


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_repos() -> list[RepositoryRecord]:
    """Five Rust repositories, most starred first."""
    stars = [950, 720, 410, 120, 35]
    return [
        RepositoryRecord(
            full_name=f"owner{i}/crate{i}",
            description=f"Crate number {i}" if i != 3 else None,
            url=f"https://github.com/owner{i}/crate{i}",
            language="Rust",
            stars=s,
        )
        for i, s in enumerate(stars, start=1)
    ]


@pytest.fixture
def rust_spec() -> SearchSpec:
    return SearchSpec(language="rust", timeframe="week", min_stars=10, count=5)


def github_item(full_name: str, stars: int, **overrides: Any) -> dict[str, Any]:
    """Minimal GitHub search item."""
    item: dict[str, Any] = {
        "id": abs(hash(full_name)) % 10_000,
        "name": full_name.split("/")[-1],
        "full_name": full_name,
        "owner": {"login": full_name.split("/")[0]},
        "html_url": f"https://github.com/{full_name}",
        "description": f"About {full_name}",
        "stargazers_count": stars,
        "forks_count": 0,
        "language": "Rust",
        "topics": [],
    }
    item.update(overrides)
    return item


@pytest.fixture
def make_github_item() -> Callable[..., dict[str, Any]]:
    return github_item


@pytest.fixture
def make_request() -> Callable[..., dict[str, Any]]:
    """Factory for message/send request envelopes."""

    def _make(
        text: str = "Trending Rust projects",
        request_id: str = "req-001",
        task_id: str | None = None,
        method: str = "message/send",
    ) -> dict[str, Any]:
        message: dict[str, Any] = {
            "kind": "message",
            "role": "user",
            "parts": [{"kind": "text", "text": text}],
            "messageId": "msg-001",
        }
        if task_id is not None:
            message["taskId"] = task_id
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": method,
            "params": {"message": message, "configuration": {"blocking": True}},
        }

    return _make


# === FIXTURES: Mock collaborators ===


@pytest.fixture
def mock_parser(rust_spec: SearchSpec) -> AsyncMock:
    parser = AsyncMock()
    parser.parse = AsyncMock(return_value=rust_spec)
    return parser


@pytest.fixture
def mock_executor(sample_repos: list[RepositoryRecord]) -> AsyncMock:
    executor = AsyncMock()
    executor.execute = AsyncMock(return_value=list(sample_repos))
    return executor


@pytest.fixture
def pipeline(
    store: MemoryCacheStore, mock_parser: AsyncMock, mock_executor: AsyncMock
) -> ResolutionPipeline:
    return ResolutionPipeline(
        store,
        mock_parser,
        mock_executor,
        parser_ttl=timedelta(hours=24),
        search_ttl=timedelta(hours=6),
    )


@pytest.fixture
def mock_llm_response() -> LLMResponse:
    """Standard parser reply for 'Trending Rust projects'."""
    return LLMResponse(
        content='{"language": "rust", "topics": [], "timeframe": "week", "min_stars": 10, "count": 5}',
        input_tokens=120,
        output_tokens=30,
        model="gemini-1.5-flash",
        provider="google",
        latency_ms=300,
    )


@pytest.fixture
def mock_llm_client(mock_llm_response: LLMResponse) -> AsyncMock:
    """Mock BaseLLMClient with default response."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value=mock_llm_response)
    client.provider_name = "mock"
    return client

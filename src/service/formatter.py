# src/service/formatter.py — v1
"""Plain-text rendering of search results."""

from __future__ import annotations

from collections.abc import Sequence

from trendscout.core.models import RepositoryRecord, SearchSpec

STALE_MARKER = " [cached, may be stale]"
EMPTY_RESULT = "No repositories matched this search."


def describe_scope(spec: SearchSpec) -> str:
    """Effective language, topics and timeframe, e.g. 'language: rust, week'."""
    parts: list[str] = []
    if spec.language:
        parts.append(f"language: {spec.language}")
    if spec.topics:
        parts.append(f"topics: {', '.join(spec.topics)}")
    parts.append(spec.timeframe)
    return ", ".join(parts)


def format_repository(rank: int, repo: RepositoryRecord) -> str:
    return (
        f"{rank}. {repo.full_name} - {repo.stars} stars\n"
        f"   {repo.language or 'Unknown'} - {repo.description or ''}\n"
        f"   {repo.url}"
    )


def format_trending(
    repositories: Sequence[RepositoryRecord], spec: SearchSpec, stale: bool = False
) -> str:
    """Render the response text.

    Entries are numbered from 1 in the order given; callers pass them
    sorted by stars, descending.
    """
    header = f"Trending on GitHub ({describe_scope(spec)})"
    if stale:
        header += STALE_MARKER
    if not repositories:
        return f"{header}\n\n{EMPTY_RESULT}"
    entries = [format_repository(rank, repo) for rank, repo in enumerate(repositories, start=1)]
    return header + "\n\n" + "\n\n".join(entries)

# src/service/pipeline.py — v1
"""Query resolution pipeline.

Orchestrates parse cache → parser → search cache → executor → formatter.

Degradation rules:
  - Parser failure: fall back to rule-based keyword extraction. The
    fallback SearchSpec is never cached.
  - Executor failure (unavailable, rate limited or malformed): serve the
    last written search result for the key, fresh or not, and mark the
    outcome degraded. With nothing cached, raise NoDataAvailable.

Nothing is retried. Concurrent misses on the same key may both reach the
upstream; the store keeps the last write.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Literal

from trendscout.cache.keys import parse_key, search_key
from trendscout.core.errors import (
    INVALID_PARAMS,
    InvalidRequest,
    MalformedResponse,
    NoDataAvailable,
    ParseFailure,
    RateLimited,
    UpstreamUnavailable,
)
from trendscout.core.models import RepositoryRecord, SearchSpec
from trendscout.parser.fallback import extract_search_spec
from trendscout.service.formatter import format_trending

if TYPE_CHECKING:
    from trendscout.cache.base_cache_store import BaseCacheStore
    from trendscout.github.client import GitHubSearchClient
    from trendscout.parser.query_parser import QueryParser

logger = logging.getLogger(__name__)

ParseSource = Literal["cache", "parser", "fallback", "fixed"]
SearchSource = Literal["cache", "upstream", "stale"]


@dataclass(frozen=True)
class Resolution:
    """Outcome of one pipeline run."""

    spec: SearchSpec
    repositories: tuple[RepositoryRecord, ...]
    text: str
    parse_source: ParseSource
    search_source: SearchSource

    @property
    def degraded(self) -> bool:
        """Served from a stale cache entry because the search failed."""
        return self.search_source == "stale"


class ResolutionPipeline:
    """Resolves questions (or fixed specs) into formatted results."""

    def __init__(
        self,
        store: BaseCacheStore,
        parser: QueryParser,
        executor: GitHubSearchClient,
        parser_ttl: timedelta = timedelta(hours=24),
        search_ttl: timedelta = timedelta(hours=6),
    ) -> None:
        self._store = store
        self._parser = parser
        self._executor = executor
        self._parser_ttl = parser_ttl
        self._search_ttl = search_ttl

    async def resolve(self, raw_text: str) -> Resolution:
        """Resolve a natural-language question.

        Raises:
            InvalidRequest: If the text is blank.
            NoDataAvailable: If search failed and nothing is cached.
        """
        if not raw_text or not raw_text.strip():
            raise InvalidRequest(INVALID_PARAMS, "Query text is empty")
        spec, parse_source = await self._parse(raw_text)
        return await self.resolve_spec(spec, parse_source=parse_source)

    async def resolve_spec(
        self, spec: SearchSpec, parse_source: ParseSource = "fixed"
    ) -> Resolution:
        """Resolve an already structured search (no parsing step)."""
        canonical = spec.canonical()
        repositories, search_source = await self._search(canonical)
        text = format_trending(repositories, canonical, stale=search_source == "stale")
        return Resolution(
            spec=canonical,
            repositories=repositories,
            text=text,
            parse_source=parse_source,
            search_source=search_source,
        )

    async def _parse(self, raw_text: str) -> tuple[SearchSpec, ParseSource]:
        key = parse_key(raw_text)
        hit = self._store.get(key)
        if hit is not None and hit.is_fresh:
            return hit.value, "cache"

        try:
            spec = (await self._parser.parse(raw_text)).canonical()
        except ParseFailure as e:
            logger.warning("Query parsing failed, using keyword fallback: %s", e)
            return extract_search_spec(raw_text).canonical(), "fallback"

        self._store.put(key, spec, self._parser_ttl)
        return spec, "parser"

    async def _search(
        self, spec: SearchSpec
    ) -> tuple[tuple[RepositoryRecord, ...], SearchSource]:
        key = search_key(spec)
        hit = self._store.get(key)
        if hit is not None and hit.is_fresh:
            return hit.value, "cache"

        try:
            repositories = tuple(await self._executor.execute(spec))
        except (UpstreamUnavailable, MalformedResponse) as e:
            kind = "rate limited" if isinstance(e, RateLimited) else type(e).__name__
            logger.warning("GitHub search failed (%s): %s", kind, e)
            stale = self._store.get_even_if_stale(key)
            if stale is None:
                raise NoDataAvailable(f"No cached results for {key}") from e
            logger.info("Serving stale results for %s", key)
            return stale, "stale"

        self._store.put(key, repositories, self._search_ttl)
        return repositories, "upstream"

# src/github/client.py — v1
"""GitHub repository search executor.

One request per call, no retries: repeated load is absorbed by the
pipeline's search cache. Failures are classified so the pipeline can
decide on a fallback:

- RateLimited: 429, or 403 with an exhausted quota
- UpstreamUnavailable: transport errors, timeouts and other non-2xx
- MalformedResponse: a 2xx body that does not decode into repositories
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

import httpx

from trendscout.core.errors import MalformedResponse, RateLimited, UpstreamUnavailable
from trendscout.core.models import RepositoryRecord, SearchSpec
from trendscout.github.query_builder import SearchQuery, build_search_query

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_URL = "https://api.github.com/search/repositories"


class GitHubSearchClient:
    """Executes SearchSpecs against the GitHub Search API.

    The httpx.AsyncClient is injected so that callers own its lifecycle
    and tests can pass one built on httpx.MockTransport.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        search_url: str = DEFAULT_SEARCH_URL,
        token: str | None = None,
        timeout_s: float = 10.0,
        user_agent: str = "trendscout-agent",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._search_url = search_url
        self._timeout = httpx.Timeout(timeout_s)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent,
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        else:
            logger.warning("No GitHub token provided - using unauthenticated requests")

    async def execute(self, spec: SearchSpec) -> list[RepositoryRecord]:
        """Run the search and return repositories, most starred first.

        Raises:
            RateLimited: The API reported quota exhaustion.
            UpstreamUnavailable: Network failure, timeout or error status.
            MalformedResponse: The payload could not be decoded.
        """
        query = build_search_query(spec, self._clock())
        logger.info("GitHub search query: %s", query.q)

        response = await self._send(query)
        records = parse_search_response(response)
        records.sort(key=lambda r: r.stars, reverse=True)
        return records[: spec.count]

    async def _send(self, query: SearchQuery) -> httpx.Response:
        try:
            response = await self._client.get(
                self._search_url,
                params=query.params(),
                headers=self._headers,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            raise UpstreamUnavailable(f"GitHub search timed out: {e}") from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"GitHub search request failed: {e}") from e

        if response.is_success:
            return response

        if is_rate_limited(response):
            raise RateLimited(
                f"GitHub rate limit exceeded ({response.status_code})",
                status_code=response.status_code,
            )
        raise UpstreamUnavailable(
            f"GitHub API error ({response.status_code}): {response.text[:200]}",
            status_code=response.status_code,
        )


def is_rate_limited(response: httpx.Response) -> bool:
    """Whether an error response signals quota exhaustion."""
    if response.status_code == 429:
        return True
    if response.status_code != 403:
        return False
    if response.headers.get("X-RateLimit-Remaining") == "0":
        return True
    return "rate limit" in response.text.lower()


def parse_search_response(response: httpx.Response) -> list[RepositoryRecord]:
    """Decode a search payload. Any malformed item rejects the whole payload."""
    try:
        payload = response.json()
    except ValueError as e:
        raise MalformedResponse(f"GitHub response is not valid JSON: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
        raise MalformedResponse("GitHub response has no 'items' list")

    logger.info(
        "GitHub returned %s total results, %d items",
        payload.get("total_count", "?"), len(payload["items"]),
    )
    return [_parse_item(item) for item in payload["items"]]


def _parse_item(item: Any) -> RepositoryRecord:
    try:
        return RepositoryRecord(
            full_name=item["full_name"],
            description=item.get("description"),
            url=item["html_url"],
            language=item.get("language"),
            stars=item["stargazers_count"],
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedResponse(f"Malformed repository item: {e}") from e

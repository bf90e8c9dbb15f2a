# src/api/state.py — v1
"""Process-wide application state.

Built once at startup. The cache store is the only state shared between
request handling and the scheduler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from trendscout.api.rate_limiter import RateLimiter
from trendscout.cache.base_cache_store import BaseCacheStore
from trendscout.cache.cache_factory import create_cache_store
from trendscout.config.settings import Settings
from trendscout.delivery.webhook import WebhookChannel
from trendscout.github.client import GitHubSearchClient
from trendscout.llm.base_client import BaseLLMClient
from trendscout.llm.client_factory import create_parser_client
from trendscout.parser.query_parser import QueryParser
from trendscout.scheduler.runner import DigestScheduler, build_scheduler
from trendscout.service.pipeline import ResolutionPipeline

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    settings: Settings
    store: BaseCacheStore
    pipeline: ResolutionPipeline
    http_client: httpx.AsyncClient
    rate_limiter: RateLimiter
    channel: WebhookChannel | None = None
    scheduler: DigestScheduler | None = None

    async def aclose(self) -> None:
        if self.scheduler is not None:
            await self.scheduler.stop()
        await self.http_client.aclose()


def _configured(value: str) -> str:
    return "configured" if value else "not configured"


def build_state(
    settings: Settings,
    llm_client: BaseLLMClient | None = None,
    http_client: httpx.AsyncClient | None = None,
    store: BaseCacheStore | None = None,
) -> AppState:
    """Wire every component from settings.

    Args:
        settings: Application settings.
        llm_client: Parser LLM client. Built from settings if None.
        http_client: Shared httpx client for GitHub and the webhook.
        store: Shared cache store. Built from settings if None.
    """
    logger.info("GitHub access token: %s", _configured(settings.github_access_token))
    logger.info("External webhook url: %s", _configured(settings.external_webhook_url))
    logger.info("LLM provider: %s (%s)", settings.llm_provider, settings.llm_model)

    if http_client is None:
        http_client = httpx.AsyncClient()
    if store is None:
        store = create_cache_store(settings)
    if llm_client is None:
        llm_client = create_parser_client(settings)

    parser = QueryParser(
        llm_client,
        system_prompt=settings.llm_system_prompt or None,
        timeout_s=settings.llm_timeout_s,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
    )
    executor = GitHubSearchClient(
        http_client,
        search_url=settings.github_search_url,
        token=settings.github_access_token or None,
        timeout_s=settings.github_timeout_s,
        user_agent=settings.github_user_agent,
    )
    pipeline = ResolutionPipeline(
        store,
        parser,
        executor,
        parser_ttl=settings.parser_cache_ttl,
        search_ttl=settings.search_cache_ttl,
    )

    channel = None
    if settings.external_webhook_url:
        channel = WebhookChannel(
            http_client, settings.external_webhook_url, timeout_s=settings.webhook_timeout_s
        )

    scheduler = None
    if settings.scheduler_enabled:
        scheduler = build_scheduler(settings, pipeline, channel)

    return AppState(
        settings=settings,
        store=store,
        pipeline=pipeline,
        http_client=http_client,
        rate_limiter=RateLimiter(settings.rate_limit_requests, settings.rate_limit_window_s),
        channel=channel,
        scheduler=scheduler,
    )

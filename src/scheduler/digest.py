# src/scheduler/digest.py — v1
"""Scheduled digests: fixed searches pushed to the external channel.

Digests go through the same pipeline as user questions (minus parsing),
so they warm the shared search cache and reuse it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from trendscout.core.errors import DeliveryFailed, NoDataAvailable
from trendscout.core.models import SearchSpec
from trendscout.logging.context import clear_context, set_job_context

if TYPE_CHECKING:
    from trendscout.service.pipeline import Resolution, ResolutionPipeline

logger = logging.getLogger(__name__)


class Channel(Protocol):
    async def deliver(self, text: str) -> None: ...


@dataclass(frozen=True)
class DigestJob:
    name: str
    spec: SearchSpec


DAILY_DIGEST = DigestJob(
    name="daily_digest",
    spec=SearchSpec(timeframe="day", count=5, min_stars=30),
)
WEEKLY_ROUNDUP = DigestJob(
    name="weekly_roundup",
    spec=SearchSpec(timeframe="week", count=10, min_stars=50),
)

DIGEST_JOBS = {"daily": DAILY_DIGEST, "weekly": WEEKLY_ROUNDUP}


async def run_digest(
    job: DigestJob, pipeline: ResolutionPipeline, channel: Channel | None
) -> Resolution | None:
    """Resolve and deliver one digest.

    Failures are logged, never raised: a failed run waits for the next
    scheduled one. Returns the resolution when one was produced.
    """
    set_job_context(job.name)
    try:
        logger.info("Running %s", job.name)
        try:
            resolution = await pipeline.resolve_spec(job.spec)
        except NoDataAvailable as e:
            logger.error("%s failed: %s", job.name, e)
            return None

        if channel is None:
            logger.info("%s resolved; no delivery channel configured", job.name)
            return resolution
        try:
            await channel.deliver(resolution.text)
        except DeliveryFailed as e:
            logger.error("%s delivery failed: %s", job.name, e)
            return resolution

        logger.info("%s sent successfully", job.name)
        return resolution
    finally:
        clear_context()

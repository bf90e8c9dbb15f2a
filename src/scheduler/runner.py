# src/scheduler/runner.py — v1
"""Asyncio task that fires digest jobs on their schedules."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Awaitable, Callable
from zoneinfo import ZoneInfo

from trendscout.config.settings import Settings
from trendscout.scheduler.digest import DAILY_DIGEST, WEEKLY_ROUNDUP, Channel, DigestJob, run_digest
from trendscout.scheduler.schedule import Schedule

if TYPE_CHECKING:
    from trendscout.service.pipeline import ResolutionPipeline

logger = logging.getLogger(__name__)


@dataclass
class ScheduledJob:
    job: DigestJob
    schedule: Schedule
    next_run: datetime


class DigestScheduler:
    """Runs digests alongside request handling; shares only the cache."""

    def __init__(
        self,
        pipeline: ResolutionPipeline,
        channel: Channel | None,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._pipeline = pipeline
        self._channel = channel
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sleep = sleep
        self._jobs: list[ScheduledJob] = []
        self._task: asyncio.Task | None = None

    @property
    def jobs(self) -> list[ScheduledJob]:
        return list(self._jobs)

    def add_job(self, job: DigestJob, schedule: Schedule) -> None:
        self._jobs.append(ScheduledJob(job, schedule, schedule.next_fire(self._clock())))
        logger.info("%s job scheduled (%s)", job.name, schedule.describe())

    async def run_due(self, now: datetime | None = None) -> list[str]:
        """Run every job whose fire time has passed; return their names."""
        now = now or self._clock()
        ran: list[str] = []
        for entry in self._jobs:
            if entry.next_run > now:
                continue
            try:
                await run_digest(entry.job, self._pipeline, self._channel)
            except Exception:
                logger.exception("%s crashed (non-fatal)", entry.job.name)
            entry.next_run = entry.schedule.next_fire(now)
            ran.append(entry.job.name)
        return ran

    async def run_forever(self) -> None:
        if not self._jobs:
            logger.warning("Scheduler started with no jobs")
            return
        while True:
            upcoming = min(entry.next_run for entry in self._jobs)
            delay = (upcoming - self._clock()).total_seconds()
            if delay > 0:
                await self._sleep(delay)
            await self.run_due()

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run_forever(), name="digest-scheduler")
            logger.info("Scheduler started")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Scheduler stopped")


def build_scheduler(
    settings: Settings, pipeline: ResolutionPipeline, channel: Channel | None
) -> DigestScheduler:
    """Scheduler with the daily digest and weekly roundup from settings."""
    tz = ZoneInfo(settings.scheduler_timezone)
    scheduler = DigestScheduler(pipeline, channel)
    scheduler.add_job(DAILY_DIGEST, Schedule.daily(settings.daily_digest_time, tz))
    scheduler.add_job(
        WEEKLY_ROUNDUP,
        Schedule.weekly(settings.weekly_digest_weekday, settings.weekly_digest_time, tz),
    )
    return scheduler

# src/scheduler/schedule.py — v1
"""Wall-clock schedules: every day at HH:MM, or one weekday at HH:MM."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo

from trendscout.config.settings import WEEKDAYS


@dataclass(frozen=True)
class Schedule:
    """Fires at hour:minute local time, optionally only on one weekday (0 = Monday)."""

    hour: int
    minute: int
    weekday: int | None = None
    tz: tzinfo = ZoneInfo("UTC")

    @classmethod
    def daily(cls, time_of_day: str, tz: tzinfo) -> Schedule:
        hour, minute = _split_time(time_of_day)
        return cls(hour=hour, minute=minute, tz=tz)

    @classmethod
    def weekly(cls, weekday: str, time_of_day: str, tz: tzinfo) -> Schedule:
        hour, minute = _split_time(time_of_day)
        return cls(hour=hour, minute=minute, weekday=WEEKDAYS.index(weekday.lower()[:3]), tz=tz)

    def next_fire(self, after: datetime) -> datetime:
        """First fire time strictly after the given aware datetime."""
        local = after.astimezone(self.tz)
        candidate = local.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)
        if self.weekday is None:
            if candidate <= local:
                candidate += timedelta(days=1)
            return candidate
        candidate += timedelta(days=(self.weekday - local.weekday()) % 7)
        if candidate <= local:
            candidate += timedelta(days=7)
        return candidate

    def describe(self) -> str:
        day = "daily" if self.weekday is None else WEEKDAYS[self.weekday].capitalize()
        return f"{day} {self.hour:02d}:{self.minute:02d} {self.tz}"


def _split_time(time_of_day: str) -> tuple[int, int]:
    hour, minute = time_of_day.split(":")
    return int(hour), int(minute)

# src/logging/context.py — v2
"""Contextual logging support: attach request_id, task_id, job to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per request or per scheduled job.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_task_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "task_id", default=None
)
_job: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    task_id: str | None = None
    job: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        task_id=_task_id.get(),
        job=_job.get(),
    )


def set_request_context(request_id: str, task_id: str | None = None) -> None:
    """Set request-level context (called once per inbound request)."""
    _request_id.set(request_id)
    _task_id.set(task_id)


def set_job_context(job: str) -> None:
    """Set context for a scheduled job run."""
    _job.set(job)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _task_id.set(None)
    _job.set(None)

# src/api/rate_limiter.py — v1
"""Fixed-window request limiter keyed by client address."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass
class _Window:
    started_at: float
    count: int = 0


class RateLimiter:
    """Allows max_requests per window_s for each client key."""

    def __init__(
        self,
        max_requests: int,
        window_s: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_requests = max_requests
        self._window_s = window_s
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    @property
    def window_s(self) -> float:
        return self._window_s

    def allow(self, client_key: str) -> bool:
        """Count one request; False when the client is over its quota."""
        now = self._clock()
        with self._lock:
            self._prune_locked(now)
            window = self._windows.get(client_key)
            if window is None or now - window.started_at >= self._window_s:
                window = _Window(started_at=now)
                self._windows[client_key] = window
            if window.count >= self._max_requests:
                return False
            window.count += 1
            return True

    def _prune_locked(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if now - w.started_at >= 2 * self._window_s]
        for key in expired:
            del self._windows[key]

"""Per-client sliding-window rate limiting for ingestion requests."""

from __future__ import annotations

import time
import collections
from collections.abc import Callable

from adrelay.errors import RateLimitError

TimeFn = Callable[[], float]

_GLOBAL_KEY = "*"


class SlidingWindowRateLimiter:
    """Track request times per client key over a rolling window.

    Disabled if limit <= 0 or window_seconds <= 0. Keys whose window emptied
    are forgotten so one-off callers do not accumulate.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        now_fn: TimeFn | None = None,
    ) -> None:
        self.limit = max(0, int(limit))
        self.window_seconds = max(0.0, float(window_seconds))
        self.enabled = self.limit > 0 and self.window_seconds > 0
        self._now = now_fn or time.monotonic
        self._events: dict[str, collections.deque[float]] = {}

    def tracked_keys(self) -> int:
        return len(self._events)

    def consume(self, key: str | None = None) -> None:
        if not self.enabled:
            return

        now = self._now()
        self._prune(now - self.window_seconds)

        events = self._events.setdefault(key or _GLOBAL_KEY, collections.deque())
        if len(events) >= self.limit:
            raise RateLimitError(
                retry_in=max(0.0, (events[0] + self.window_seconds) - now),
                limit=self.limit,
                window_seconds=self.window_seconds,
            )
        events.append(now)

    def _prune(self, cutoff: float) -> None:
        for key in list(self._events):
            events = self._events[key]
            while events and events[0] <= cutoff:
                events.popleft()
            if not events:
                del self._events[key]


__all__ = ["RateLimitError", "SlidingWindowRateLimiter"]

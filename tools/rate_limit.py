"""Sliding-window request limiter shared by the Gemini clients."""
from __future__ import annotations

import logging
import threading
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60.0


class SlidingWindowRateLimiter:
    """Allow at most ``requests_per_window`` calls per key in any ``window_seconds`` span."""

    def __init__(
        self,
        requests_per_window: int = 15,
        window_seconds: float = WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.requests_per_window = requests_per_window
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def _cleanup(self, key: str, now: float) -> Deque[float]:
        timestamps = self._requests[key]
        cutoff = now - self.window_seconds
        while timestamps and timestamps[0] <= cutoff:
            timestamps.popleft()
        return timestamps

    def try_acquire(self, key: str = "default") -> bool:
        """Record a request and return True, or return False if the window is full."""

        with self._lock:
            now = self._clock()
            timestamps = self._cleanup(key, now)
            if len(timestamps) >= self.requests_per_window:
                logger.warning("Rate limit exceeded for %s", key)
                return False
            timestamps.append(now)
            return True

    def remaining(self, key: str = "default") -> int:
        with self._lock:
            timestamps = self._cleanup(key, self._clock())
            return max(0, self.requests_per_window - len(timestamps))

    def retry_after(self, key: str = "default") -> float:
        """Seconds until the oldest request in the window expires (0 when not limited)."""

        with self._lock:
            now = self._clock()
            timestamps = self._cleanup(key, now)
            if len(timestamps) < self.requests_per_window:
                return 0.0
            return max(0.0, timestamps[0] + self.window_seconds - now)


__all__ = ["SlidingWindowRateLimiter"]

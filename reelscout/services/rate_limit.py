"""Sliding-window rate limiter guarding outbound provider calls."""

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque

from reelscout.core.errors import RateLimitError

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Admit at most ``limit`` calls in any trailing ``window`` seconds.

    ``acquire`` never sleeps: the call is either recorded and admitted, or
    rejected with :class:`RateLimitError`. Stale timestamps are pruned before
    every admission check.
    """

    def __init__(
        self,
        limit: int,
        window: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        name: str = "provider",
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.limit = limit
        self.window = window
        self.name = name
        self._clock = clock
        self._requests: Deque[float] = deque()
        self._lock = threading.Lock()

    def _prune(self, now: float) -> None:
        while self._requests and now - self._requests[0] >= self.window:
            self._requests.popleft()

    def acquire(self) -> None:
        """Record a call, or raise RateLimitError if the window is full."""
        with self._lock:
            now = self._clock()
            self._prune(now)
            if len(self._requests) >= self.limit:
                logger.warning(
                    "Rate limit exceeded for %s: %d requests in %.0fs",
                    self.name,
                    len(self._requests),
                    self.window,
                )
                raise RateLimitError(
                    f"{self.name} rate limit exceeded, please try again later"
                )
            self._requests.append(now)

    def remaining(self) -> int:
        """Number of calls that would currently be admitted."""
        with self._lock:
            self._prune(self._clock())
            return self.limit - len(self._requests)

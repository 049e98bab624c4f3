"""Per-client expiring cache for provider responses."""

import math
import threading
import time
from typing import Any, Callable, NamedTuple, Optional

from cachetools import TLRUCache


class _Entry(NamedTuple):
    value: Any
    ttl: float


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class ExpiringCache:
    """String-keyed cache where every entry carries its own lifetime.

    There is no capacity bound. Entries are only considered absent once
    ``now >= expires_at``. Nothing sweeps them in the background, but every
    ``set`` drops entries that have already expired, since TLRUCache expires
    on write. Concurrent
    misses on the same key are not coalesced, so each caller fetches on its
    own.
    """

    def __init__(self, timer: Callable[[], float] = time.monotonic):
        self._data = TLRUCache(maxsize=math.inf, ttu=_time_to_use, timer=timer)
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""
        with self._lock:
            entry = self._data.get(key)
        return entry.value if entry is not None else None

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds, replacing any prior entry."""
        with self._lock:
            self._data[key] = _Entry(value, ttl)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

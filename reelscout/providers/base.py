"""Provider client base classes."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, TypeVar

import niquests

from reelscout.core.errors import UpstreamError
from reelscout.services.cache import ExpiringCache
from reelscout.services.rate_limit import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL = 30 * 60


class CachedClient(ABC):
    """Base class for every external provider client.

    Each instance owns its own cache and rate limiter. A lookup goes
    cache -> rate limiter -> fetch -> cache store; the limiter is only
    consulted on a miss, and nothing is retried.
    """

    def __init__(
        self,
        cache: Optional[ExpiringCache] = None,
        rate_limiter: Optional[SlidingWindowRateLimiter] = None,
        ttl: float = DEFAULT_TTL,
        requests_per_minute: int = 60,
    ):
        self.cache = cache if cache is not None else ExpiringCache()
        self.rate_limiter = rate_limiter or SlidingWindowRateLimiter(
            requests_per_minute, 60.0, name=self.name
        )
        self.ttl = ttl

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the provider name used in logs and errors."""
        pass

    async def _cached(
        self,
        key: str,
        fetch: Callable[[], Awaitable[T]],
        ttl: Optional[float] = None,
    ) -> T:
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("%s cache hit: %s", self.name, key)
            return cached

        self.rate_limiter.acquire()
        result = await fetch()
        self.cache.set(key, result, self.ttl if ttl is None else ttl)
        return result

    async def aclose(self) -> None:
        """Release network resources; nothing to do by default."""


class HTTPProvider(CachedClient):
    """Provider that talks JSON over HTTP through a niquests session."""

    def __init__(self, timeout: float = 30, **kwargs):
        super().__init__(**kwargs)
        self.timeout = timeout
        self.session = niquests.AsyncSession()

    async def aclose(self) -> None:
        """Properly close the internal HTTP session."""
        if hasattr(self, "session") and self.session:
            await self.session.close()

    async def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        """GET ``url`` and decode its JSON body; any failure is an UpstreamError."""
        try:
            response = await self.session.get(url, params=params, timeout=self.timeout)
        except niquests.exceptions.RequestException as exc:
            logger.error("%s request to %s failed: %s", self.name, url, exc)
            raise UpstreamError(f"{self.name} request failed: {exc}", exc)

        if response.status_code != 200:
            logger.error("%s returned HTTP %s for %s", self.name, response.status_code, url)
            raise UpstreamError(f"{self.name} API error: {response.status_code}")

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(f"{self.name} returned malformed JSON", exc)


def normalize(value: str) -> str:
    """Normalize a free-text argument for use in a cache key."""
    return " ".join(value.split()).lower()

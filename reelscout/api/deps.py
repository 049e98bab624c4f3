"""Service wiring and FastAPI dependencies."""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Header

from reelscout.core.config import Settings, get_settings
from reelscout.core.database import create_db_engine
from reelscout.providers import OMDBClient, TMDBClient, WatchProvidersClient, YouTubeClient
from reelscout.services.discovery import DiscoveryService
from reelscout.services.genres import GenreService
from reelscout.services.recommendations import RecommendationService
from reelscout.services.watchlist import WatchlistService
from reelscout.services.watchlist_store import (
    InMemoryWatchlistStore,
    SQLWatchlistStore,
    WatchlistStore,
)

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything the routes need, built once per process."""

    tmdb: TMDBClient
    omdb: OMDBClient
    youtube: YouTubeClient
    watch_providers: WatchProvidersClient
    discovery: DiscoveryService
    genres: GenreService
    watchlist: WatchlistService
    recommendations: RecommendationService

    async def aclose(self) -> None:
        for client in (self.tmdb, self.omdb, self.youtube, self.watch_providers):
            try:
                await client.aclose()
            except Exception as e:
                logger.error(f"Error closing provider {client.name}: {e}")


def build_store(settings: Settings) -> WatchlistStore:
    if settings.database_url:
        return SQLWatchlistStore(create_db_engine(settings.database_url, echo=settings.debug))
    return InMemoryWatchlistStore()


def build_services(settings: Settings, store: Optional[WatchlistStore] = None) -> Services:
    rpm = settings.rate_limit_requests_per_minute
    ttl = settings.cache_duration_minutes * 60

    tmdb = TMDBClient(
        settings.tmdb_api_key,
        timeout=settings.metadata_timeout,
        genre_ttl=settings.genre_cache_hours * 3600,
        ttl=ttl,
        requests_per_minute=rpm,
    )
    omdb = OMDBClient(
        settings.omdb_api_key,
        settings.omdb_base_url,
        timeout=settings.metadata_timeout,
        ttl=ttl,
        requests_per_minute=rpm,
    )
    youtube = YouTubeClient(
        settings.youtube_api_key,
        settings.youtube_base_url,
        timeout=settings.auxiliary_timeout,
        ttl=ttl,
        requests_per_minute=rpm,
    )
    watch_providers = WatchProvidersClient(
        settings.tmdb_api_key,
        settings.watch_providers_base_url,
        timeout=settings.auxiliary_timeout,
        ttl=ttl,
        requests_per_minute=rpm,
    )

    discovery = DiscoveryService(tmdb, omdb, youtube, watch_providers)
    genres = GenreService(tmdb)
    watchlist = WatchlistService(store or build_store(settings))
    return Services(
        tmdb=tmdb,
        omdb=omdb,
        youtube=youtube,
        watch_providers=watch_providers,
        discovery=discovery,
        genres=genres,
        watchlist=watchlist,
        recommendations=RecommendationService(discovery, watchlist, genres),
    )


_services: Optional[Services] = None


def get_services() -> Services:
    global _services
    if _services is None:
        _services = build_services(get_settings())
    return _services


async def close_services() -> None:
    global _services
    if _services is not None:
        await _services.aclose()
        _services = None


def get_discovery_service() -> DiscoveryService:
    return get_services().discovery


def get_genre_service() -> GenreService:
    return get_services().genres


def get_watchlist_service() -> WatchlistService:
    return get_services().watchlist


def get_recommendation_service() -> RecommendationService:
    return get_services().recommendations


def get_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Caller identity; falls back to the configured pseudo-user."""
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return get_settings().default_user

"""External provider clients."""

from reelscout.providers.base import CachedClient, HTTPProvider
from reelscout.providers.omdb import OMDBClient
from reelscout.providers.tmdb import TMDBClient
from reelscout.providers.watch_providers import WatchProvidersClient
from reelscout.providers.youtube import YouTubeClient

__all__ = [
    "CachedClient",
    "HTTPProvider",
    "OMDBClient",
    "TMDBClient",
    "WatchProvidersClient",
    "YouTubeClient",
]

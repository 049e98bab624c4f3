"""TMDB client: the primary provider for search, details, trending and genres."""

import asyncio
import logging
from typing import Any, Callable, List, Optional, TYPE_CHECKING

import requests
import tmdbsimple as tmdb
from pydantic import ValidationError

from reelscout.core.errors import NotFoundError, UpstreamError
from reelscout.models.media import Genre, MediaType, Movie, PagedResults, TVShow
from reelscout.providers.base import CachedClient, normalize

if TYPE_CHECKING:
    from reelscout.services.genres import DiscoveryFilters

logger = logging.getLogger(__name__)

GENRE_TTL = 24 * 60 * 60


def _parse_movies(response: dict) -> PagedResults[Movie]:
    return PagedResults[Movie](
        page=response.get("page", 1),
        results=[Movie.model_validate(m) for m in response.get("results", [])],
        total_pages=response.get("total_pages", 0),
        total_results=response.get("total_results", 0),
    )


def _parse_tv(response: dict) -> PagedResults[TVShow]:
    return PagedResults[TVShow](
        page=response.get("page", 1),
        results=[TVShow.model_validate(s) for s in response.get("results", [])],
        total_pages=response.get("total_pages", 0),
        total_results=response.get("total_results", 0),
    )


class TMDBClient(CachedClient):
    """Async wrapper over tmdbsimple with caching and rate limiting.

    tmdbsimple is synchronous, so every call runs in a worker thread.
    """

    def __init__(
        self,
        api_key: str,
        timeout: float = 30,
        genre_ttl: float = GENRE_TTL,
        **kwargs,
    ):
        super().__init__(**kwargs)
        tmdb.API_KEY = api_key
        tmdb.REQUESTS_TIMEOUT = timeout
        self.genre_ttl = genre_ttl

    @property
    def name(self) -> str:
        return "TMDB"

    def _call_sync(self, call: Callable[[], Any], what: str) -> Any:
        try:
            return call()
        except requests.exceptions.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            if status == 404:
                raise NotFoundError(f"{what} not found on TMDB", exc)
            logger.error("TMDB error fetching %s: %s", what, exc)
            raise UpstreamError(f"TMDB API error: {status}", exc)
        except requests.exceptions.RequestException as exc:
            logger.error("TMDB request failed fetching %s: %s", what, exc)
            raise UpstreamError(f"Failed to fetch {what} from TMDB", exc)
        except ValueError as exc:
            raise UpstreamError(f"Failed to parse TMDB response for {what}", exc)

    async def _run(
        self,
        call: Callable[[], Any],
        what: str,
        parse: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """Run a blocking tmdbsimple call in a worker thread and parse its payload."""
        data = await asyncio.to_thread(self._call_sync, call, what)
        if parse is None:
            return data
        try:
            return parse(data)
        except ValidationError as exc:
            logger.error("Unexpected TMDB payload for %s: %s", what, exc)
            raise UpstreamError(f"Failed to parse TMDB response for {what}", exc)

    async def search_movies(self, query: str, page: int = 1) -> PagedResults[Movie]:
        """Search TMDB for movies."""

        async def fetch():
            return await self._run(
                lambda: tmdb.Search().movie(query=query, page=page),
                "movie search",
                _parse_movies,
            )

        return await self._cached(f"search_movies_{normalize(query)}_{page}", fetch)

    async def search_tv(self, query: str, page: int = 1) -> PagedResults[TVShow]:
        """Search TMDB for TV shows."""

        async def fetch():
            return await self._run(
                lambda: tmdb.Search().tv(query=query, page=page), "TV search", _parse_tv
            )

        return await self._cached(f"search_tv_{normalize(query)}_{page}", fetch)

    async def get_movie(self, movie_id: int) -> Movie:
        """Fetch full movie details."""

        async def fetch():
            return await self._run(
                lambda: tmdb.Movies(movie_id).info(), f"movie {movie_id}", Movie.model_validate
            )

        return await self._cached(f"movie_details_{movie_id}", fetch)

    async def get_tv_show(self, tv_id: int) -> TVShow:
        """Fetch full TV show details."""

        async def fetch():
            return await self._run(
                lambda: tmdb.TV(tv_id).info(), f"TV show {tv_id}", TVShow.model_validate
            )

        return await self._cached(f"tv_details_{tv_id}", fetch)

    async def find_movie(self, title: str, year: str = "") -> Movie:
        """Return the best TMDB match for a title and optional release year."""

        async def fetch():
            params = {"query": title}
            if year:
                params["year"] = year
            found = await self._run(
                lambda: tmdb.Search().movie(**params), "movie lookup", _parse_movies
            )
            if not found.results:
                raise NotFoundError(f"No TMDB movie matches '{title}' ({year or 'any year'})")
            return found.results[0]

        return await self._cached(f"find_movie_{normalize(title)}_{year}", fetch)

    async def get_trending(
        self, media_type: MediaType, time_window: str = "week", page: int = 1
    ) -> PagedResults:
        """Trending movies or TV shows for a day/week window."""

        async def fetch():
            return await self._run(
                lambda: tmdb.Trending(
                    media_type=media_type.value, time_window=time_window
                ).info(page=page),
                f"trending {media_type.value}",
                _parse_movies if media_type == MediaType.MOVIE else _parse_tv,
            )

        return await self._cached(
            f"trending_{media_type.value}_{time_window}_{page}", fetch
        )

    async def get_genres(self, media_type: MediaType) -> List[Genre]:
        """Genre taxonomy; cached far longer than dynamic data."""

        def call():
            genres = tmdb.Genres()
            return genres.movie_list() if media_type == MediaType.MOVIE else genres.tv_list()

        async def fetch():
            return await self._run(
                call,
                f"{media_type.value} genres",
                lambda data: [Genre.model_validate(g) for g in data.get("genres", [])],
            )

        return await self._cached(f"{media_type.value}_genres", fetch, ttl=self.genre_ttl)

    async def discover(
        self,
        media_type: MediaType,
        genre_id: int,
        page: int,
        filters: "DiscoveryFilters",
    ) -> PagedResults:
        """Discover titles in a genre, constrained by repaired filters."""
        date_field = (
            "primary_release_date" if media_type == MediaType.MOVIE else "first_air_date"
        )
        params = {
            "with_genres": str(genre_id),
            "page": page,
            "sort_by": filters.sort_by,
            "vote_average.gte": f"{filters.min_rating:.1f}",
            "vote_average.lte": f"{filters.max_rating:.1f}",
            f"{date_field}.gte": f"{filters.min_year}-01-01",
            f"{date_field}.lte": f"{filters.max_year}-12-31",
        }

        def call():
            discover = tmdb.Discover()
            if media_type == MediaType.MOVIE:
                return discover.movie(**params)
            return discover.tv(**params)

        async def fetch():
            return await self._run(
                call,
                f"{media_type.value} discovery",
                _parse_movies if media_type == MediaType.MOVIE else _parse_tv,
            )

        key = (
            f"discover_{media_type.value}_{genre_id}_{page}_{filters.sort_by}_"
            f"{filters.min_rating}_{filters.max_rating}_{filters.min_year}_{filters.max_year}"
        )
        return await self._cached(key, fetch)

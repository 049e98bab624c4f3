"""Discovery service combining primary catalog data with secondary enrichment."""

import asyncio
import logging
import math
from typing import List

from reelscout.core.errors import InvalidRequestError, ReelScoutError, UpstreamError
from reelscout.models.media import (
    Enrichment,
    MediaType,
    Movie,
    PagedResults,
    TVShow,
    WatchProvider,
    WatchProviders,
    YouTubeVideo,
    merge_enrichment,
)
from reelscout.providers.omdb import OMDBClient
from reelscout.providers.tmdb import TMDBClient
from reelscout.providers.watch_providers import WatchProvidersClient
from reelscout.providers.youtube import YouTubeClient

logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = 100
MAX_PAGE = 1000
OMDB_PAGE_SIZE = 10
TIME_WINDOWS = ("day", "week")


def validate_query(query: str) -> None:
    """Reject blank queries and queries over 100 characters."""
    if not query or not query.strip():
        raise InvalidRequestError("search query cannot be empty")
    if len(query) > MAX_QUERY_LENGTH:
        raise InvalidRequestError(
            f"search query too long (max {MAX_QUERY_LENGTH} characters)"
        )


def validate_page(page: int) -> None:
    if page < 1:
        raise InvalidRequestError("page number must be positive")
    if page > MAX_PAGE:
        raise InvalidRequestError(f"page number too high (max {MAX_PAGE})")


class DiscoveryService:
    """Search, details and trending backed by TMDB, enriched from OMDB.

    Enrichment is best effort: a failed OMDB lookup is logged and the TMDB
    record is returned as is.
    """

    def __init__(
        self,
        tmdb_client: TMDBClient,
        omdb_client: OMDBClient,
        youtube_client: YouTubeClient,
        providers_client: WatchProvidersClient,
    ):
        self.tmdb = tmdb_client
        self.omdb = omdb_client
        self.youtube = youtube_client
        self.providers = providers_client

    async def _enrich_movie(self, movie: Movie) -> Movie:
        if not movie.title:
            return movie
        try:
            record = await self.omdb.get_movie_by_title(movie.title, movie.release_year)
        except ReelScoutError as e:
            logger.warning(f"Failed to enhance movie {movie.title} with OMDB data: {e}")
            return movie
        return merge_enrichment(movie, Enrichment.from_omdb(record))

    async def _enrich_tv_show(self, show: TVShow) -> TVShow:
        if not show.name:
            return show
        try:
            record = await self.omdb.get_tv_by_title(show.name, show.release_year)
        except ReelScoutError as e:
            logger.warning(f"Failed to enhance TV show {show.name} with OMDB data: {e}")
            return show
        return merge_enrichment(show, Enrichment.from_omdb(record))

    async def search_movies(self, query: str, page: int = 1) -> PagedResults[Movie]:
        """Search movies on TMDB, falling back to OMDB search if TMDB fails."""
        validate_query(query)
        validate_page(page)
        try:
            results = await self.tmdb.search_movies(query, page)
        except ReelScoutError as e:
            logger.error(f"TMDB search error: {e}")
            return await self._search_movies_fallback(query, page)

        enriched = await asyncio.gather(*[self._enrich_movie(m) for m in results.results])
        return results.model_copy(update={"results": list(enriched)})

    async def _search_movies_fallback(self, query: str, page: int) -> PagedResults[Movie]:
        try:
            found = await self.omdb.search_movies(query, page)
        except ReelScoutError as e:
            raise UpstreamError(f"both TMDB and OMDB search failed: {e}", e)

        movies = [
            Movie(
                title=hit.title,
                release_date=hit.year,
                poster_path=hit.poster if hit.poster and hit.poster != "N/A" else None,
                imdb_id=hit.imdb_id,
            )
            for hit in found.search
        ]
        try:
            total_results = int(found.total_results)
        except ValueError:
            total_results = len(movies)

        return PagedResults[Movie](
            page=page,
            results=movies,
            total_pages=math.ceil(total_results / OMDB_PAGE_SIZE),
            total_results=total_results,
        )

    async def search_tv(self, query: str, page: int = 1) -> PagedResults[TVShow]:
        """Search TV shows on TMDB. OMDB has no useful TV search, so no fallback."""
        validate_query(query)
        validate_page(page)
        results = await self.tmdb.search_tv(query, page)
        enriched = await asyncio.gather(*[self._enrich_tv_show(s) for s in results.results])
        return results.model_copy(update={"results": list(enriched)})

    async def get_movie_details(self, movie_id: int) -> Movie:
        movie = await self.tmdb.get_movie(movie_id)
        return await self._enrich_movie(movie)

    async def get_tv_details(self, tv_id: int) -> TVShow:
        show = await self.tmdb.get_tv_show(tv_id)
        return await self._enrich_tv_show(show)

    async def get_trending_movies(self, time_window: str = "week", page: int = 1) -> PagedResults[Movie]:
        validate_page(page)
        if time_window not in TIME_WINDOWS:
            time_window = "week"
        return await self.tmdb.get_trending(MediaType.MOVIE, time_window, page)

    async def get_trending_tv(self, time_window: str = "week", page: int = 1) -> PagedResults[TVShow]:
        validate_page(page)
        if time_window not in TIME_WINDOWS:
            time_window = "week"
        return await self.tmdb.get_trending(MediaType.TV, time_window, page)

    async def _title_and_year(self, media_id: int, media_type: MediaType) -> tuple[str, str]:
        if media_type == MediaType.MOVIE:
            movie = await self.tmdb.get_movie(media_id)
            return movie.title, movie.release_year
        show = await self.tmdb.get_tv_show(media_id)
        return show.name, show.release_year

    async def get_trailers(self, media_id: int, media_type: MediaType) -> List[YouTubeVideo]:
        title, year = await self._title_and_year(media_id, media_type)
        return await self.youtube.search_trailers(title, year, media_type)

    async def get_official_trailer(self, media_id: int, media_type: MediaType) -> YouTubeVideo:
        title, year = await self._title_and_year(media_id, media_type)
        return await self.youtube.get_official_trailer(title, year, media_type)

    async def get_watch_providers(self, media_id: int, media_type: MediaType) -> WatchProviders:
        return await self.providers.get_watch_providers(media_id, media_type)

    async def get_streaming_services(
        self, media_id: int, media_type: MediaType, region: str = "US"
    ) -> List[WatchProvider]:
        return await self.providers.get_streaming_services(media_id, media_type, region)

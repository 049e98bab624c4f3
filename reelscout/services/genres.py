"""Genre listing and genre-based discovery."""

import logging
from typing import List

from pydantic import BaseModel, model_validator

from reelscout.models.media import Genre, MediaType, PagedResults
from reelscout.providers.tmdb import TMDBClient
from reelscout.services.discovery import validate_page

logger = logging.getLogger(__name__)

SORT_OPTIONS = {
    "popularity.desc",
    "popularity.asc",
    "vote_average.desc",
    "vote_average.asc",
    "release_date.desc",
    "release_date.asc",
    "revenue.desc",
    "revenue.asc",
    "primary_release_date.desc",
    "primary_release_date.asc",
}
DEFAULT_SORT = "popularity.desc"
MIN_RATING, MAX_RATING = 0.0, 10.0
MIN_YEAR, MAX_YEAR = 1900, 2030


class DiscoveryFilters(BaseModel):
    """Discover filters. Out-of-range input is repaired rather than rejected."""

    sort_by: str = DEFAULT_SORT
    min_rating: float = MIN_RATING
    max_rating: float = MAX_RATING
    min_year: int = MIN_YEAR
    max_year: int = MAX_YEAR

    @model_validator(mode="after")
    def repair(self) -> "DiscoveryFilters":
        if self.sort_by not in SORT_OPTIONS:
            self.sort_by = DEFAULT_SORT

        self.min_rating = min(max(self.min_rating, MIN_RATING), MAX_RATING)
        self.max_rating = min(max(self.max_rating, MIN_RATING), MAX_RATING)
        if self.min_rating > self.max_rating:
            self.min_rating, self.max_rating = self.max_rating, self.min_rating

        self.min_year = min(max(self.min_year, MIN_YEAR), MAX_YEAR)
        self.max_year = min(max(self.max_year, MIN_YEAR), MAX_YEAR)
        if self.min_year > self.max_year:
            self.min_year, self.max_year = self.max_year, self.min_year
        return self


class GenreService:
    def __init__(self, tmdb_client: TMDBClient):
        self.tmdb = tmdb_client

    async def get_genres(self, media_type: MediaType) -> List[Genre]:
        return await self.tmdb.get_genres(media_type)

    async def discover(
        self,
        media_type: MediaType,
        genre_id: int,
        page: int = 1,
        filters: DiscoveryFilters | None = None,
    ) -> PagedResults:
        """Titles in ``genre_id`` matching the (already repaired) filters."""
        validate_page(page)
        filters = filters or DiscoveryFilters()
        logger.debug(
            "Discovering %s in genre %s page %s with %s",
            media_type.value,
            genre_id,
            page,
            filters,
        )
        return await self.tmdb.discover(media_type, genre_id, page, filters)

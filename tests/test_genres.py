import pytest
from unittest.mock import AsyncMock, MagicMock

from reelscout.core.errors import InvalidRequestError
from reelscout.models.media import MediaType, Movie, PagedResults
from reelscout.services.genres import DiscoveryFilters, GenreService


def test_inverted_rating_bounds_are_swapped():
    filters = DiscoveryFilters(min_rating=9, max_rating=2)
    assert filters.min_rating == 2
    assert filters.max_rating == 9


def test_years_are_clamped():
    filters = DiscoveryFilters(min_year=1800, max_year=2100)
    assert filters.min_year == 1900
    assert filters.max_year == 2030


def test_ratings_clamped_before_swap():
    filters = DiscoveryFilters(min_rating=15, max_rating=-3)
    assert (filters.min_rating, filters.max_rating) == (0, 10)


def test_unknown_sort_falls_back_to_popularity():
    assert DiscoveryFilters(sort_by="rand()").sort_by == "popularity.desc"
    assert DiscoveryFilters(sort_by="vote_average.desc").sort_by == "vote_average.desc"


@pytest.mark.asyncio
async def test_discover_uses_default_filters():
    tmdb = MagicMock()
    tmdb.discover = AsyncMock(return_value=PagedResults[Movie](page=1, results=[Movie(id=1, title="Heat")]))
    service = GenreService(tmdb)

    found = await service.discover(MediaType.MOVIE, 28)

    assert found.results[0].title == "Heat"
    media_type, genre_id, page, filters = tmdb.discover.call_args.args
    assert (media_type, genre_id, page) == (MediaType.MOVIE, 28, 1)
    assert filters == DiscoveryFilters()


@pytest.mark.asyncio
async def test_discover_rejects_bad_page():
    tmdb = MagicMock()
    tmdb.discover = AsyncMock()
    service = GenreService(tmdb)

    with pytest.raises(InvalidRequestError):
        await service.discover(MediaType.TV, 18, page=0)
    tmdb.discover.assert_not_called()

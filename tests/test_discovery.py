import pytest
from unittest.mock import AsyncMock, MagicMock

from reelscout.core.errors import InvalidRequestError, NotFoundError, UpstreamError
from reelscout.models.media import (
    Enrichment,
    MediaType,
    Movie,
    OMDBSearchResults,
    OMDBTitle,
    PagedResults,
    TVShow,
    merge_enrichment,
    parse_runtime,
)
from reelscout.services.discovery import DiscoveryService, validate_page, validate_query

OMDB_RECORD = OMDBTitle(
    title="The Matrix",
    year="1999",
    rated="R",
    runtime="136 min",
    plot="A computer hacker learns about the true nature of reality.",
    director="Lana Wachowski, Lilly Wachowski",
    imdb_rating="8.7",
    imdb_id="tt0133093",
    ratings=[{"Source": "Rotten Tomatoes", "Value": "83%"}],
)


def make_service():
    tmdb = MagicMock()
    omdb = MagicMock()
    youtube = MagicMock()
    providers = MagicMock()
    for client, methods in (
        (tmdb, ["search_movies", "search_tv", "get_movie", "get_tv_show", "get_trending"]),
        (omdb, ["get_movie_by_title", "get_tv_by_title", "search_movies"]),
        (youtube, ["search_trailers", "get_official_trailer"]),
        (providers, ["get_watch_providers", "get_streaming_services"]),
    ):
        for method in methods:
            setattr(client, method, AsyncMock())
    return DiscoveryService(tmdb, omdb, youtube, providers)


def matrix():
    return Movie(id=603, title="The Matrix", release_date="1999-03-30", vote_average=8.2)


# --- Validation ---


@pytest.mark.parametrize("query", ["", "   ", "\t\n"])
def test_blank_queries_rejected(query):
    with pytest.raises(InvalidRequestError) as excinfo:
        validate_query(query)
    assert str(excinfo.value) == "search query cannot be empty"


def test_query_length_limit():
    validate_query("a" * 100)
    with pytest.raises(InvalidRequestError):
        validate_query("a" * 101)


@pytest.mark.parametrize("page", [0, -1, 1001])
def test_page_out_of_range(page):
    with pytest.raises(InvalidRequestError):
        validate_page(page)


@pytest.mark.asyncio
async def test_invalid_search_never_reaches_provider():
    service = make_service()
    with pytest.raises(InvalidRequestError):
        await service.search_movies("   ")
    service.tmdb.search_movies.assert_not_called()


# --- Enrichment ---


def test_parse_runtime():
    assert parse_runtime("142 min") == 142
    assert parse_runtime("N/A") is None
    assert parse_runtime("") is None
    assert parse_runtime("about two hours") is None


def test_merge_enrichment_overlays_fields():
    merged = merge_enrichment(matrix(), Enrichment.from_omdb(OMDB_RECORD))
    assert merged.id == 603
    assert merged.vote_average == 8.2
    assert merged.imdb_rating == "8.7"
    assert merged.rotten_tomatoes == "83%"
    assert merged.runtime == 136


@pytest.mark.asyncio
async def test_search_movies_enriches_results():
    service = make_service()
    service.tmdb.search_movies.return_value = PagedResults[Movie](
        page=1, results=[matrix()], total_pages=1, total_results=1
    )
    service.omdb.get_movie_by_title.return_value = OMDB_RECORD

    results = await service.search_movies("matrix")

    assert results.results[0].plot.startswith("A computer hacker")
    assert results.results[0].imdb_id == "tt0133093"
    service.omdb.get_movie_by_title.assert_awaited_once_with("The Matrix", "1999")


@pytest.mark.asyncio
async def test_enrichment_failure_never_fails_search():
    service = make_service()
    movies = [matrix(), Movie(id=604, title="The Matrix Reloaded", release_date="2003-05-15")]
    service.tmdb.search_movies.return_value = PagedResults[Movie](
        page=1, results=movies, total_pages=1, total_results=2
    )
    service.omdb.get_movie_by_title.side_effect = [OMDB_RECORD, NotFoundError("Movie not found!")]

    results = await service.search_movies("matrix")

    assert [m.title for m in results.results] == ["The Matrix", "The Matrix Reloaded"]
    assert results.results[0].imdb_rating == "8.7"
    assert results.results[1].imdb_rating == ""


@pytest.mark.asyncio
async def test_search_falls_back_to_secondary_provider():
    service = make_service()
    service.tmdb.search_movies.side_effect = UpstreamError("TMDB API error: 500")
    service.omdb.search_movies.return_value = OMDBSearchResults.model_validate(
        {
            "Search": [
                {"Title": "The Matrix", "Year": "1999", "imdbID": "tt0133093", "Poster": "https://img/m.jpg"},
                {"Title": "The Matrix Revisited", "Year": "2001", "imdbID": "tt0295432", "Poster": "N/A"},
            ],
            "totalResults": "25",
        }
    )

    results = await service.search_movies("matrix", 2)

    assert results.page == 2
    assert results.total_results == 25
    assert results.total_pages == 3
    assert results.results[0].id is None
    assert results.results[0].poster_path == "https://img/m.jpg"
    assert results.results[1].poster_path is None
    service.omdb.get_movie_by_title.assert_not_called()


@pytest.mark.asyncio
async def test_search_fails_when_both_providers_fail():
    service = make_service()
    service.tmdb.search_movies.side_effect = UpstreamError("TMDB API error: 500")
    service.omdb.search_movies.side_effect = UpstreamError("OMDB API error: 503")

    with pytest.raises(UpstreamError) as excinfo:
        await service.search_movies("matrix")
    assert "both TMDB and OMDB search failed" in str(excinfo.value)


@pytest.mark.asyncio
async def test_tv_details_enriched():
    service = make_service()
    service.tmdb.get_tv_show.return_value = TVShow(id=1396, name="Breaking Bad", first_air_date="2008-01-20")
    service.omdb.get_tv_by_title.return_value = OMDBTitle(title="Breaking Bad", awards="Won 16 Primetime Emmys")

    show = await service.get_tv_details(1396)

    assert show.awards == "Won 16 Primetime Emmys"
    service.omdb.get_tv_by_title.assert_awaited_once_with("Breaking Bad", "2008")


@pytest.mark.asyncio
async def test_trending_invalid_window_defaults_to_week():
    service = make_service()
    service.tmdb.get_trending.return_value = PagedResults[TVShow](page=1)

    await service.get_trending_tv("month", 1)

    service.tmdb.get_trending.assert_awaited_once_with(MediaType.TV, "week", 1)


@pytest.mark.asyncio
async def test_trailers_look_up_title_and_year():
    service = make_service()
    service.tmdb.get_movie.return_value = matrix()
    service.youtube.search_trailers.return_value = []

    await service.get_trailers(603, MediaType.MOVIE)

    service.youtube.search_trailers.assert_awaited_once_with("The Matrix", "1999", MediaType.MOVIE)


@pytest.mark.parametrize("query", ["a", "matrix", "a" * 100])
def test_valid_queries_accepted(query):
    validate_query(query)


@pytest.mark.parametrize("page", [1, 500, 1000])
def test_valid_pages_accepted(page):
    validate_page(page)


@pytest.mark.asyncio
async def test_movie_details_enriched_with_runtime():
    service = make_service()
    service.tmdb.get_movie.return_value = matrix()
    service.omdb.get_movie_by_title.return_value = OMDB_RECORD

    movie = await service.get_movie_details(603)

    service.tmdb.get_movie.assert_awaited_once_with(603)
    service.omdb.get_movie_by_title.assert_awaited_once_with("The Matrix", "1999")
    assert movie.runtime == 136
    assert movie.director == "Lana Wachowski, Lilly Wachowski"
    assert movie.vote_average == 8.2


@pytest.mark.asyncio
async def test_movie_details_ignores_unknown_runtime():
    service = make_service()
    service.tmdb.get_movie.return_value = matrix().model_copy(update={"runtime": 136})
    service.omdb.get_movie_by_title.return_value = OMDB_RECORD.model_copy(update={"runtime": "N/A"})

    movie = await service.get_movie_details(603)

    assert movie.runtime == 136
    assert movie.imdb_id == "tt0133093"


@pytest.mark.asyncio
async def test_movie_details_without_enrichment():
    service = make_service()
    service.tmdb.get_movie.return_value = matrix()
    service.omdb.get_movie_by_title.side_effect = UpstreamError("OMDB API error: 503")

    movie = await service.get_movie_details(603)

    assert movie == matrix()

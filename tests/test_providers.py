import pytest
import requests
from unittest.mock import AsyncMock, MagicMock, patch

from reelscout.core.errors import (
    NotConfiguredError,
    NotFoundError,
    RateLimitError,
    UpstreamError,
)
from reelscout.models.media import MediaType
from reelscout.providers import OMDBClient, TMDBClient, WatchProvidersClient, YouTubeClient
from reelscout.services.genres import DiscoveryFilters
from reelscout.services.rate_limit import SlidingWindowRateLimiter

MOVIE_PAGE = {
    "page": 1,
    "results": [
        {"id": 603, "title": "The Matrix", "release_date": "1999-03-30", "vote_average": 8.2, "popularity": 80.5}
    ],
    "total_pages": 1,
    "total_results": 1,
}

OMDB_MATRIX = {
    "Title": "The Matrix",
    "Year": "1999",
    "Rated": "R",
    "Runtime": "136 min",
    "Director": "Lana Wachowski, Lilly Wachowski",
    "Plot": "A computer hacker learns about the true nature of reality.",
    "Ratings": [
        {"Source": "Internet Movie Database", "Value": "8.7/10"},
        {"Source": "Rotten Tomatoes", "Value": "83%"},
    ],
    "imdbRating": "8.7",
    "imdbID": "tt0133093",
    "Response": "True",
}


# --- TMDB ---


@pytest.mark.asyncio
async def test_tmdb_search_movies_is_cached():
    client = TMDBClient("key")
    with patch("reelscout.providers.tmdb.tmdb.Search") as mock_search:
        mock_search.return_value.movie.return_value = MOVIE_PAGE

        first = await client.search_movies("The Matrix", 1)
        second = await client.search_movies("  the   MATRIX ", 1)

    assert first.results[0].title == "The Matrix"
    assert second == first
    mock_search.return_value.movie.assert_called_once_with(query="The Matrix", page=1)


@pytest.mark.asyncio
async def test_tmdb_cache_hit_does_not_consume_rate_limit():
    limiter = SlidingWindowRateLimiter(1, 60.0)
    client = TMDBClient("key", rate_limiter=limiter)
    with patch("reelscout.providers.tmdb.tmdb.Search") as mock_search:
        mock_search.return_value.movie.return_value = MOVIE_PAGE
        await client.search_movies("matrix")
        await client.search_movies("matrix")

        with pytest.raises(RateLimitError):
            await client.search_movies("inception")


@pytest.mark.asyncio
async def test_tmdb_404_maps_to_not_found():
    client = TMDBClient("key")
    error = requests.exceptions.HTTPError(response=MagicMock(status_code=404))
    with patch("reelscout.providers.tmdb.tmdb.Movies") as mock_movies:
        mock_movies.return_value.info.side_effect = error
        with pytest.raises(NotFoundError):
            await client.get_movie(999999)


@pytest.mark.asyncio
async def test_tmdb_transport_failure_maps_to_upstream_error():
    client = TMDBClient("key")
    with patch("reelscout.providers.tmdb.tmdb.TV") as mock_tv:
        mock_tv.return_value.info.side_effect = requests.exceptions.ConnectionError("boom")
        with pytest.raises(UpstreamError) as excinfo:
            await client.get_tv_show(1396)
    assert excinfo.value.status_code == 502


@pytest.mark.asyncio
async def test_tmdb_find_movie_without_results():
    client = TMDBClient("key")
    with patch("reelscout.providers.tmdb.tmdb.Search") as mock_search:
        mock_search.return_value.movie.return_value = {"results": []}
        with pytest.raises(NotFoundError):
            await client.find_movie("No Such Film", "2001")
        mock_search.return_value.movie.assert_called_once_with(query="No Such Film", year="2001")


@pytest.mark.asyncio
async def test_tmdb_genres_use_long_ttl():
    client = TMDBClient("key", genre_ttl=86400)
    with patch("reelscout.providers.tmdb.tmdb.Genres") as mock_genres, patch.object(
        client.cache, "set", wraps=client.cache.set
    ) as mock_set:
        mock_genres.return_value.tv_list.return_value = {"genres": [{"id": 18, "name": "Drama"}]}
        genres = await client.get_genres(MediaType.TV)

    assert genres[0].name == "Drama"
    mock_set.assert_called_once_with("tv_genres", genres, 86400)


@pytest.mark.asyncio
async def test_tmdb_discover_passes_filters_and_keys_cache_on_them():
    client = TMDBClient("key")
    with patch("reelscout.providers.tmdb.tmdb.Discover") as mock_discover:
        mock_discover.return_value.movie.return_value = MOVIE_PAGE
        await client.discover(MediaType.MOVIE, 28, 1, DiscoveryFilters(min_rating=7))
        await client.discover(MediaType.MOVIE, 28, 1, DiscoveryFilters(min_rating=8))

    assert mock_discover.return_value.movie.call_count == 2
    kwargs = mock_discover.return_value.movie.call_args.kwargs
    assert kwargs["with_genres"] == "28"
    assert kwargs["vote_average.gte"] == "8.0"
    assert kwargs["primary_release_date.gte"] == "1900-01-01"
    assert kwargs["primary_release_date.lte"] == "2030-12-31"


# --- OMDB ---


@pytest.mark.asyncio
async def test_omdb_get_movie_by_title():
    client = OMDBClient("key")
    with patch.object(client, "_get_json", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = OMDB_MATRIX
        record = await client.get_movie_by_title("The Matrix", "1999")

    assert record.imdb_id == "tt0133093"
    assert record.rotten_tomatoes() == "83%"
    params = mock_get.call_args.args[1]
    assert params["apikey"] == "key"
    assert params["t"] == "The Matrix"
    assert params["y"] == "1999"
    assert params["type"] == "movie"


@pytest.mark.asyncio
async def test_omdb_false_response_not_found():
    client = OMDBClient("key")
    with patch.object(client, "_get_json", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = {"Response": "False", "Error": "Movie not found!"}
        with pytest.raises(NotFoundError):
            await client.get_tv_by_title("Nothing")


@pytest.mark.asyncio
async def test_omdb_false_response_other_error():
    client = OMDBClient("key")
    with patch.object(client, "_get_json", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = {"Response": "False", "Error": "Invalid API key!"}
        with pytest.raises(UpstreamError):
            await client.get_by_imdb_id("tt0133093")


@pytest.mark.asyncio
async def test_omdb_search_omits_first_page_param():
    client = OMDBClient("key")
    with patch.object(client, "_get_json", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = {
            "Search": [{"Title": "The Matrix", "Year": "1999", "imdbID": "tt0133093"}],
            "totalResults": "1",
            "Response": "True",
        }
        results = await client.search_movies("matrix")

    assert results.search[0].imdb_id == "tt0133093"
    assert "page" not in mock_get.call_args.args[1]


@pytest.mark.asyncio
async def test_http_provider_non_200_is_upstream_error():
    client = OMDBClient("key")
    response = MagicMock(status_code=500)
    with patch.object(client.session, "get", new=AsyncMock(return_value=response)):
        with pytest.raises(UpstreamError) as excinfo:
            await client.get_by_imdb_id("tt0133093")
    assert "500" in str(excinfo.value)


@pytest.mark.asyncio
async def test_http_provider_malformed_json_is_upstream_error():
    client = OMDBClient("key")
    response = MagicMock(status_code=200)
    response.json.side_effect = ValueError("not json")
    with patch.object(client.session, "get", new=AsyncMock(return_value=response)):
        with pytest.raises(UpstreamError):
            await client.get_by_imdb_id("tt0133093")


# --- YouTube ---


@pytest.mark.asyncio
async def test_youtube_without_key_is_not_configured():
    client = YouTubeClient(None)
    assert not client.is_configured()
    with pytest.raises(NotConfiguredError):
        await client.search_trailers("The Matrix", "1999")


@pytest.mark.asyncio
async def test_youtube_official_trailer_preferred():
    client = YouTubeClient("key")
    items = [
        {"id": {"videoId": "a"}, "snippet": {"title": "Matrix fan edit", "thumbnails": {"default": {"url": "d"}}}},
        {"id": {"videoId": "b"}, "snippet": {"title": "The Matrix - Official Trailer", "thumbnails": {"high": {"url": "h"}}}},
        {"id": {"kind": "youtube#channel"}, "snippet": {"title": "no video id"}},
    ]
    with patch.object(client, "_get_json", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = {"items": items}
        trailer = await client.get_official_trailer("The Matrix", "1999", MediaType.MOVIE)
        trailers = await client.search_trailers("The Matrix", "1999", MediaType.MOVIE)

    assert trailer.video_id == "b"
    assert trailer.thumbnail == "h"
    assert [t.video_id for t in trailers] == ["a", "b"]
    mock_get.assert_called_once()
    params = mock_get.call_args.args[1]
    assert params["q"] == "The Matrix trailer 1999"
    assert params["maxResults"] == "5"


@pytest.mark.asyncio
async def test_youtube_tv_query_and_empty_results():
    client = YouTubeClient("key")
    with patch.object(client, "_get_json", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = {"items": []}
        with pytest.raises(NotFoundError):
            await client.get_official_trailer("Breaking Bad", "2008", MediaType.TV)
    assert mock_get.call_args.args[1]["q"] == "Breaking Bad trailer 2008 tv series"


# --- Watch providers ---

PROVIDERS = {
    "id": 603,
    "results": {
        "US": {
            "link": "https://example.org/603",
            "flatrate": [{"provider_id": 8, "provider_name": "Netflix"}],
            "rent": [{"provider_id": 2, "provider_name": "Apple TV"}],
        },
        "GB": {"buy": [{"provider_id": 3, "provider_name": "Google Play"}]},
    },
}


@pytest.mark.asyncio
async def test_watch_providers_region_lookup():
    client = WatchProvidersClient("key")
    with patch.object(client, "_get_json", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = PROVIDERS
        streaming = await client.get_streaming_services(603, MediaType.MOVIE, "us")
        regions = await client.get_available_regions(603, "movie")
        purchase = await client.get_purchase_options(603, MediaType.MOVIE, "US")

        with pytest.raises(NotFoundError):
            await client.get_region(603, MediaType.MOVIE, "FR")

    assert [p.provider_name for p in streaming] == ["Netflix"]
    assert regions == ["GB", "US"]
    assert list(purchase) == ["rent"]
    mock_get.assert_called_once()
    assert mock_get.call_args.args[0].endswith("/movie/603/watch/providers")


@pytest.mark.asyncio
async def test_watch_providers_not_configured():
    client = WatchProvidersClient(None)
    with pytest.raises(NotConfiguredError):
        await client.get_watch_providers(603, MediaType.MOVIE)


def test_popular_providers_and_logo_url():
    providers = WatchProvidersClient.popular_providers()
    assert len(providers) == 8
    assert providers[0].provider_name == "Netflix"
    assert WatchProvidersClient.logo_url("/x.jpg") == "https://image.tmdb.org/t/p/original/x.jpg"
    assert WatchProvidersClient.logo_url(None) == ""


@pytest.mark.asyncio
async def test_tmdb_null_fields_fall_back_to_defaults():
    client = TMDBClient("key")
    info = {
        "id": 1,
        "title": "Obscure",
        "overview": None,
        "imdb_id": None,
        "release_date": None,
        "runtime": None,
        "vote_average": 6.1,
    }
    with patch("reelscout.providers.tmdb.tmdb.Movies") as mock_movies:
        mock_movies.return_value.info.return_value = info
        movie = await client.get_movie(1)

    assert movie.imdb_id == ""
    assert movie.overview == ""
    assert movie.release_date is None
    assert movie.runtime is None


@pytest.mark.asyncio
async def test_tmdb_unparseable_payload_is_upstream_error():
    client = TMDBClient("key")
    with patch("reelscout.providers.tmdb.tmdb.TV") as mock_tv:
        mock_tv.return_value.info.return_value = {"id": "not-a-number", "name": "Broken"}
        with pytest.raises(UpstreamError) as excinfo:
            await client.get_tv_show(1)
    assert "Failed to parse TMDB response" in str(excinfo.value)


@pytest.mark.asyncio
async def test_tmdb_find_movie_returns_first_match():
    client = TMDBClient("key")
    with patch("reelscout.providers.tmdb.tmdb.Search") as mock_search:
        mock_search.return_value.movie.return_value = MOVIE_PAGE
        movie = await client.find_movie("The Matrix", "1999")
    assert movie.id == 603

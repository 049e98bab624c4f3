"""JSON API routes."""

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response

from reelscout.models.media import (
    Genre,
    MediaType,
    Movie,
    PagedResults,
    TVShow,
    WatchProvider,
    WatchProviders,
    YouTubeVideo,
)
from reelscout.models.watchlist import (
    Recommendation,
    WatchedRequest,
    WatchlistItem,
    WatchlistStats,
)
from reelscout.services.discovery import DiscoveryService
from reelscout.services.genres import DiscoveryFilters, GenreService
from reelscout.services.recommendations import DEFAULT_LIMIT, RecommendationService, clamp_limit
from reelscout.services.watchlist import WatchlistService
from reelscout.api.deps import (
    get_discovery_service,
    get_genre_service,
    get_recommendation_service,
    get_user_id,
    get_watchlist_service,
)

router = APIRouter()

GENRE_CONTENT_TYPES = {"movies": MediaType.MOVIE, "tv": MediaType.TV}


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "reelscout"}


# --- Search, details and trending ---


@router.get("/search/movies", response_model=PagedResults[Movie])
async def search_movies(
    q: str = Query(..., description="Search query"),
    page: int = Query(1),
    discovery: DiscoveryService = Depends(get_discovery_service),
):
    """Search movies, enriched with ratings and plot where available."""
    return await discovery.search_movies(q, page)


@router.get("/search/tv", response_model=PagedResults[TVShow])
async def search_tv(
    q: str = Query(..., description="Search query"),
    page: int = Query(1),
    discovery: DiscoveryService = Depends(get_discovery_service),
):
    return await discovery.search_tv(q, page)


@router.get("/movies/{movie_id}", response_model=Movie)
async def movie_details(
    movie_id: int, discovery: DiscoveryService = Depends(get_discovery_service)
):
    return await discovery.get_movie_details(movie_id)


@router.get("/tv/{tv_id}", response_model=TVShow)
async def tv_details(tv_id: int, discovery: DiscoveryService = Depends(get_discovery_service)):
    return await discovery.get_tv_details(tv_id)


@router.get("/trending/movies", response_model=PagedResults[Movie])
async def trending_movies(
    time_window: str = Query("week", description="day or week"),
    page: int = Query(1),
    discovery: DiscoveryService = Depends(get_discovery_service),
):
    return await discovery.get_trending_movies(time_window, page)


@router.get("/trending/tv", response_model=PagedResults[TVShow])
async def trending_tv(
    time_window: str = Query("week", description="day or week"),
    page: int = Query(1),
    discovery: DiscoveryService = Depends(get_discovery_service),
):
    return await discovery.get_trending_tv(time_window, page)


# --- Trailers and watch providers ---


@router.get("/trailers/{media_type}/{media_id}", response_model=List[YouTubeVideo])
async def trailers(
    media_type: MediaType,
    media_id: int,
    discovery: DiscoveryService = Depends(get_discovery_service),
):
    return await discovery.get_trailers(media_id, media_type)


@router.get("/trailers/{media_type}/{media_id}/official", response_model=YouTubeVideo)
async def official_trailer(
    media_type: MediaType,
    media_id: int,
    discovery: DiscoveryService = Depends(get_discovery_service),
):
    return await discovery.get_official_trailer(media_id, media_type)


@router.get("/providers/{media_type}/{media_id}", response_model=WatchProviders)
async def watch_providers(
    media_type: MediaType,
    media_id: int,
    discovery: DiscoveryService = Depends(get_discovery_service),
):
    return await discovery.get_watch_providers(media_id, media_type)


@router.get(
    "/providers/{media_type}/{media_id}/streaming", response_model=List[WatchProvider]
)
async def streaming_services(
    media_type: MediaType,
    media_id: int,
    region: str = Query("US"),
    discovery: DiscoveryService = Depends(get_discovery_service),
):
    return await discovery.get_streaming_services(media_id, media_type, region)


# --- Recommendations ---


@router.get("/recommendations", response_model=List[Recommendation])
async def recommendations(
    limit: int = Query(DEFAULT_LIMIT, description="1 to 50"),
    user_id: str = Depends(get_user_id),
    service: RecommendationService = Depends(get_recommendation_service),
):
    return await service.get_recommendations(user_id, clamp_limit(limit))


@router.get("/recommendations/genre/{genre_id}", response_model=List[Recommendation])
async def genre_recommendations(
    genre_id: int,
    limit: int = Query(DEFAULT_LIMIT),
    user_id: str = Depends(get_user_id),
    service: RecommendationService = Depends(get_recommendation_service),
):
    return await service.get_genre_recommendations(user_id, genre_id, clamp_limit(limit))


# --- Genres ---


@router.get("/genres/movies", response_model=List[Genre])
async def movie_genres(genres: GenreService = Depends(get_genre_service)):
    return await genres.get_genres(MediaType.MOVIE)


@router.get("/genres/tv", response_model=List[Genre])
async def tv_genres(genres: GenreService = Depends(get_genre_service)):
    return await genres.get_genres(MediaType.TV)


@router.get("/discover/genre/{genre_id}")
async def discover_by_genre(
    genre_id: int,
    type: str = Query("movies", description="movies or tv"),
    sort_by: Optional[str] = Query(None),
    min_rating: Optional[float] = Query(None),
    max_rating: Optional[float] = Query(None),
    min_year: Optional[int] = Query(None),
    max_year: Optional[int] = Query(None),
    page: int = Query(1),
    genres: GenreService = Depends(get_genre_service),
):
    """Discover titles in a genre. Filters are repaired, never rejected."""
    media_type = GENRE_CONTENT_TYPES.get(type)
    if media_type is None:
        raise HTTPException(
            status_code=400, detail="Invalid content type. Must be 'movies' or 'tv'"
        )

    overrides = {
        "sort_by": sort_by,
        "min_rating": min_rating,
        "max_rating": max_rating,
        "min_year": min_year,
        "max_year": max_year,
    }
    filters = DiscoveryFilters(**{k: v for k, v in overrides.items() if v is not None})
    return await genres.discover(media_type, genre_id, page, filters)


# --- Watchlist ---


@router.get("/watchlist", response_model=List[WatchlistItem])
def get_watchlist(
    watched: Optional[bool] = Query(None),
    user_id: str = Depends(get_user_id),
    watchlist: WatchlistService = Depends(get_watchlist_service),
):
    if watched is None:
        return watchlist.get(user_id)
    if watched:
        return watchlist.watched_items(user_id)
    return watchlist.unwatched_items(user_id)


@router.post("/watchlist")
def add_to_watchlist(
    item: WatchlistItem,
    user_id: str = Depends(get_user_id),
    watchlist: WatchlistService = Depends(get_watchlist_service),
):
    watchlist.add(user_id, item)
    return {"status": "success"}


@router.get("/watchlist/stats", response_model=WatchlistStats)
def watchlist_stats(
    user_id: str = Depends(get_user_id),
    watchlist: WatchlistService = Depends(get_watchlist_service),
):
    return watchlist.stats(user_id)


@router.get("/watchlist/export/{fmt}")
def export_watchlist(
    fmt: str,
    user_id: str = Depends(get_user_id),
    watchlist: WatchlistService = Depends(get_watchlist_service),
):
    """Download the watchlist as json, csv or pdf."""
    if fmt == "json":
        content, media_type = watchlist.export_json(user_id), "application/json"
    elif fmt == "csv":
        content, media_type = watchlist.export_csv(user_id), "text/csv"
    elif fmt == "pdf":
        content, media_type = watchlist.export_pdf(user_id), "application/pdf"
    else:
        raise HTTPException(status_code=400, detail="Export format must be json, csv or pdf")

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename=watchlist.{fmt}"},
    )


@router.post("/watchlist/import")
def import_watchlist(
    items: List[Any] = Body(..., description="Exported watchlist entries"),
    merge: bool = Query(True),
    user_id: str = Depends(get_user_id),
    watchlist: WatchlistService = Depends(get_watchlist_service),
):
    imported = watchlist.import_items(user_id, items, merge=merge)
    return {"status": "success", "imported": imported}


@router.delete("/watchlist/{media_type}/{item_id}")
def remove_from_watchlist(
    media_type: MediaType,
    item_id: str,
    user_id: str = Depends(get_user_id),
    watchlist: WatchlistService = Depends(get_watchlist_service),
):
    watchlist.remove(user_id, item_id, media_type)
    return {"status": "success"}


@router.put("/watchlist/{media_type}/{item_id}/watched", response_model=WatchlistItem)
def mark_watched(
    media_type: MediaType,
    item_id: str,
    body: Optional[WatchedRequest] = None,
    user_id: str = Depends(get_user_id),
    watchlist: WatchlistService = Depends(get_watchlist_service),
):
    rating = body.rating if body else 0.0
    return watchlist.mark_watched(user_id, item_id, media_type, rating)


@router.put("/watchlist/{media_type}/{item_id}/unwatched", response_model=WatchlistItem)
def mark_unwatched(
    media_type: MediaType,
    item_id: str,
    user_id: str = Depends(get_user_id),
    watchlist: WatchlistService = Depends(get_watchlist_service),
):
    return watchlist.mark_unwatched(user_id, item_id, media_type)

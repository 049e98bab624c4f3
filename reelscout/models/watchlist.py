"""Watchlist and recommendation models."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from reelscout.models.media import MediaType, Movie, TVShow


class WatchlistItem(BaseModel):
    """An entry in a user's watchlist, unique per (id, type)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    media_type: MediaType = Field(alias="type")
    title: str
    poster_path: str = ""
    added_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    watched: bool = False
    rating: float = 0.0

    @property
    def key(self) -> tuple[str, MediaType]:
        return self.id, self.media_type


class WatchedRequest(BaseModel):
    """Body of the mark-as-watched call."""

    rating: float = 0.0


class WatchlistStats(BaseModel):
    total_items: int = 0
    watched_items: int = 0
    unwatched_items: int = 0
    movies: int = 0
    tv_shows: int = 0
    average_rating: float = 0.0
    highest_rated: float = 0.0
    total_watch_time: int = 0


class UserPreferences(BaseModel):
    """Aggregates derived from a watchlist snapshot; never persisted."""

    movie_vs_tv_ratio: float = 0.0
    average_rating: float = 0.0
    preferred_ratings: list[float] = []


class Recommendation(BaseModel):
    item: Movie | TVShow
    score: float
    type: MediaType
    reason: str = ""
    reason_score: Optional[float] = None

"""Preference-scored recommendations over the trending list."""

import logging
import math
from typing import List

from reelscout.models.media import MediaType, Movie, TVShow
from reelscout.models.watchlist import Recommendation, UserPreferences, WatchlistItem
from reelscout.services.discovery import DiscoveryService
from reelscout.services.genres import GenreService
from reelscout.services.watchlist import WatchlistService

logger = logging.getLogger(__name__)

BASELINE_SCORE = 5.0
POPULARITY_WEIGHT = 0.1
RATING_WEIGHT = 0.3
TYPE_PREFERENCE_WEIGHT = 2.0
RECENCY_BONUS = 0.5
RECENT_YEAR = "2020"

MIN_LIMIT, MAX_LIMIT, DEFAULT_LIMIT = 1, 50, 20


def clamp_limit(limit: int) -> int:
    return max(MIN_LIMIT, min(MAX_LIMIT, limit))


def analyze_preferences(watchlist: List[WatchlistItem]) -> UserPreferences:
    """Movie-vs-TV ratio and mean explicit rating of a watchlist snapshot."""
    prefs = UserPreferences()
    movies = sum(1 for item in watchlist if item.media_type == MediaType.MOVIE)
    if watchlist:
        prefs.movie_vs_tv_ratio = movies / len(watchlist)

    prefs.preferred_ratings = [item.rating for item in watchlist if item.rating > 0]
    if prefs.preferred_ratings:
        prefs.average_rating = sum(prefs.preferred_ratings) / len(prefs.preferred_ratings)
    return prefs


def _base_score(item: Movie | TVShow) -> float:
    # log scale keeps popularity from dominating
    return POPULARITY_WEIGHT * math.log(item.popularity + 1) + RATING_WEIGHT * item.vote_average


def _release_date(item: Movie | TVShow) -> str:
    return (item.release_date if isinstance(item, Movie) else item.first_air_date) or ""


def score_item(item: Movie | TVShow, media_type: MediaType, prefs: UserPreferences) -> float:
    score = _base_score(item)

    if media_type == MediaType.MOVIE:
        score += prefs.movie_vs_tv_ratio * TYPE_PREFERENCE_WEIGHT
    else:
        score += (1.0 - prefs.movie_vs_tv_ratio) * TYPE_PREFERENCE_WEIGHT

    # lexical comparison on the date string, not a parsed date
    release_date = _release_date(item)
    if len(release_date) >= 4 and release_date >= RECENT_YEAR:
        score += RECENCY_BONUS
    return score


def explain(item: Movie | TVShow) -> tuple[str, float]:
    if item.vote_average >= 7.0:
        return "Highly rated", item.vote_average
    if item.popularity >= 100:
        return "Popular trending", item.popularity
    return "Based on your preferences", BASELINE_SCORE


def rank(
    items: List[Movie | TVShow],
    media_type: MediaType,
    prefs: UserPreferences,
    limit: int,
) -> List[Recommendation]:
    """Score every item, sort descending and keep the top ``limit``."""
    scored = []
    for item in items:
        reason, reason_score = explain(item)
        scored.append(
            Recommendation(
                item=item,
                score=score_item(item, media_type, prefs),
                type=media_type,
                reason=reason,
                reason_score=reason_score,
            )
        )
    scored.sort(key=lambda r: r.score, reverse=True)
    return scored[:limit]


class RecommendationService:
    def __init__(
        self,
        discovery: DiscoveryService,
        watchlist: WatchlistService,
        genres: GenreService,
    ):
        self.discovery = discovery
        self.watchlist = watchlist
        self.genres = genres

    async def get_recommendations(self, user_id: str, limit: int = DEFAULT_LIMIT) -> List[Recommendation]:
        """Trending movies scored against the user's watchlist preferences."""
        items = self.watchlist.get(user_id)
        if not items:
            return await self._trending_recommendations(limit)

        prefs = analyze_preferences(items)
        logger.debug("Preferences for %s: %s", user_id, prefs)
        trending = await self.discovery.get_trending_movies("week", 1)
        return rank(trending.results, MediaType.MOVIE, prefs, limit)

    async def get_genre_recommendations(
        self, user_id: str, genre_id: int, limit: int = DEFAULT_LIMIT
    ) -> List[Recommendation]:
        """Movies from one genre, scored the same way."""
        prefs = analyze_preferences(self.watchlist.get(user_id))
        found = await self.genres.discover(MediaType.MOVIE, genre_id, 1)
        return rank(found.results, MediaType.MOVIE, prefs, limit)

    async def _trending_recommendations(self, limit: int) -> List[Recommendation]:
        """Fallback for an empty watchlist: trending order, flat baseline score."""
        trending = await self.discovery.get_trending_movies("week", 1)
        recommendations = []
        for item in trending.results[:limit]:
            reason, reason_score = explain(item)
            recommendations.append(
                Recommendation(
                    item=item,
                    score=BASELINE_SCORE + _base_score(item),
                    type=MediaType.MOVIE,
                    reason=reason,
                    reason_score=reason_score,
                )
            )
        return recommendations

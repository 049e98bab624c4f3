"""Watchlist service: validation, state transitions, stats, import/export."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, List

from pydantic import ValidationError

from reelscout.core.errors import DuplicateItemError, InvalidRequestError
from reelscout.models.media import MediaType
from reelscout.models.watchlist import WatchlistItem, WatchlistStats
from reelscout.services.export import watchlist_to_csv, watchlist_to_pdf
from reelscout.services.watchlist_store import WatchlistStore

logger = logging.getLogger(__name__)


def validate_item(item: WatchlistItem) -> None:
    if not item.id.strip():
        raise InvalidRequestError("item ID cannot be empty")
    if not item.title.strip():
        raise InvalidRequestError("item title cannot be empty")
    if not 0 <= item.rating <= 10:
        raise InvalidRequestError("rating must be between 0 and 10")


def parse_item(raw: Any) -> WatchlistItem:
    """Validate one imported entry; malformed entries are an InvalidRequestError."""
    if isinstance(raw, WatchlistItem):
        item = raw
    else:
        try:
            item = WatchlistItem.model_validate(raw)
        except ValidationError as e:
            raise InvalidRequestError(f"invalid watchlist item: {e.errors()[0]['msg']}", e)
    validate_item(item)
    return item


class WatchlistService:
    """Per-user watchlist operations over a pluggable store."""

    def __init__(self, store: WatchlistStore):
        self.store = store

    def add(self, user_id: str, item: WatchlistItem) -> WatchlistItem:
        """Add an item, stamping ``added_at`` server-side."""
        validate_item(item)
        item = item.model_copy(update={"added_at": datetime.now(timezone.utc)})
        self.store.add_item(user_id, item)
        logger.info("Added %s %s to watchlist of %s", item.media_type.value, item.id, user_id)
        return item

    def remove(self, user_id: str, item_id: str, media_type: MediaType) -> None:
        self.store.remove_item(user_id, item_id, media_type)

    def get(self, user_id: str) -> List[WatchlistItem]:
        return self.store.list_items(user_id)

    def watched_items(self, user_id: str) -> List[WatchlistItem]:
        return [item for item in self.get(user_id) if item.watched]

    def unwatched_items(self, user_id: str) -> List[WatchlistItem]:
        return [item for item in self.get(user_id) if not item.watched]

    def contains(self, user_id: str, item_id: str, media_type: MediaType) -> bool:
        return any(item.key == (item_id, media_type) for item in self.get(user_id))

    def mark_watched(
        self, user_id: str, item_id: str, media_type: MediaType, rating: float = 0.0
    ) -> WatchlistItem:
        """Mark as watched. The rating is only recorded when in (0, 10]."""
        new_rating = rating if 0 < rating <= 10 else None
        return self.store.update_item(user_id, item_id, media_type, True, new_rating)

    def mark_unwatched(self, user_id: str, item_id: str, media_type: MediaType) -> WatchlistItem:
        """Mark as unwatched and clear the rating."""
        return self.store.update_item(user_id, item_id, media_type, False, 0.0)

    def stats(self, user_id: str) -> WatchlistStats:
        items = self.get(user_id)
        stats = WatchlistStats(total_items=len(items))
        ratings = []
        for item in items:
            if item.watched:
                stats.watched_items += 1
                if item.rating > 0:
                    ratings.append(item.rating)
            else:
                stats.unwatched_items += 1

            if item.media_type == MediaType.MOVIE:
                stats.movies += 1
            else:
                stats.tv_shows += 1

        if ratings:
            stats.average_rating = sum(ratings) / len(ratings)
            stats.highest_rated = max(ratings)
        return stats

    def export_json(self, user_id: str) -> bytes:
        items = [item.model_dump(mode="json", by_alias=True) for item in self.get(user_id)]
        return json.dumps(items, indent=2).encode("utf-8")

    def export_csv(self, user_id: str) -> bytes:
        return watchlist_to_csv(self.get(user_id))

    def export_pdf(self, user_id: str) -> bytes:
        return watchlist_to_pdf(self.get(user_id), self.stats(user_id))

    def import_items(self, user_id: str, items: List[Any], merge: bool = True) -> int:
        """Import items, replacing the watchlist or merging into it.

        ``items`` may be raw mappings. Merging skips (id, type) pairs already
        present and invalid entries; replacing rejects the whole import on the
        first invalid entry. Returns the number of items added.
        """
        if not merge:
            unique = {}
            for raw in items:
                item = parse_item(raw)
                unique.setdefault(item.key, item)
            self.store.replace_all(user_id, list(unique.values()))
            return len(unique)

        added = 0
        for index, raw in enumerate(items):
            try:
                self.store.add_item(user_id, parse_item(raw))
            except (InvalidRequestError, DuplicateItemError) as e:
                logger.debug("Skipping imported entry %d: %s", index, e)
                continue
            added += 1
        return added

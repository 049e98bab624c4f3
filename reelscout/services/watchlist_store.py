"""Watchlist storage backends, keyed by caller-supplied user id."""

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Field, Session, SQLModel, select

from reelscout.core.database import create_db_and_tables
from reelscout.core.errors import DuplicateItemError, NotFoundError
from reelscout.models.media import MediaType
from reelscout.models.watchlist import WatchlistItem


class WatchlistStore(ABC):
    """Storage interface for per-user watchlists.

    Implementations enforce (id, type) uniqueness per user and raise
    NotFoundError for operations on missing items.
    """

    @abstractmethod
    def list_items(self, user_id: str) -> List[WatchlistItem]:
        """Return a snapshot of the user's items in insertion order."""
        pass

    @abstractmethod
    def add_item(self, user_id: str, item: WatchlistItem) -> None:
        pass

    @abstractmethod
    def remove_item(self, user_id: str, item_id: str, media_type: MediaType) -> None:
        pass

    @abstractmethod
    def update_item(
        self,
        user_id: str,
        item_id: str,
        media_type: MediaType,
        watched: bool,
        rating: Optional[float],
    ) -> WatchlistItem:
        """Set the watched flag and rating of one item and return it.

        A ``rating`` of None keeps the stored rating; the read and the write
        happen atomically.
        """
        pass

    @abstractmethod
    def replace_all(self, user_id: str, items: List[WatchlistItem]) -> None:
        pass


class InMemoryWatchlistStore(WatchlistStore):
    """Dict-backed store guarded by a single lock."""

    def __init__(self):
        self._watchlists: Dict[str, List[WatchlistItem]] = {}
        self._lock = threading.Lock()

    def _find(self, user_id: str, item_id: str, media_type: MediaType) -> int:
        for i, item in enumerate(self._watchlists.get(user_id, [])):
            if item.key == (item_id, media_type):
                return i
        raise NotFoundError("item not found in watchlist")

    def list_items(self, user_id: str) -> List[WatchlistItem]:
        with self._lock:
            return [item.model_copy() for item in self._watchlists.get(user_id, [])]

    def add_item(self, user_id: str, item: WatchlistItem) -> None:
        with self._lock:
            watchlist = self._watchlists.setdefault(user_id, [])
            if any(existing.key == item.key for existing in watchlist):
                raise DuplicateItemError("item already in watchlist")
            watchlist.append(item.model_copy())

    def remove_item(self, user_id: str, item_id: str, media_type: MediaType) -> None:
        with self._lock:
            index = self._find(user_id, item_id, media_type)
            del self._watchlists[user_id][index]

    def update_item(self, user_id, item_id, media_type, watched, rating):
        with self._lock:
            index = self._find(user_id, item_id, media_type)
            current = self._watchlists[user_id][index]
            updated = current.model_copy(
                update={
                    "watched": watched,
                    "rating": current.rating if rating is None else rating,
                }
            )
            self._watchlists[user_id][index] = updated
            return updated.model_copy()

    def replace_all(self, user_id: str, items: List[WatchlistItem]) -> None:
        with self._lock:
            self._watchlists[user_id] = [item.model_copy() for item in items]


class WatchlistRecord(SQLModel, table=True):
    """Row of the persistent watchlist table."""

    __tablename__ = "watchlist_items"
    __table_args__ = (UniqueConstraint("user_id", "item_id", "media_type"),)

    pk: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    item_id: str
    media_type: str
    title: str
    poster_path: str = ""
    added_at: datetime
    watched: bool = False
    rating: float = 0.0

    @classmethod
    def from_item(cls, user_id: str, item: WatchlistItem) -> "WatchlistRecord":
        return cls(
            user_id=user_id,
            item_id=item.id,
            media_type=item.media_type.value,
            title=item.title,
            poster_path=item.poster_path,
            added_at=item.added_at,
            watched=item.watched,
            rating=item.rating,
        )

    def to_item(self) -> WatchlistItem:
        added_at = self.added_at
        if added_at.tzinfo is None:
            # SQLite drops the offset; values are always written in UTC
            added_at = added_at.replace(tzinfo=timezone.utc)
        return WatchlistItem(
            id=self.item_id,
            media_type=MediaType(self.media_type),
            title=self.title,
            poster_path=self.poster_path,
            added_at=added_at,
            watched=self.watched,
            rating=self.rating,
        )


class SQLWatchlistStore(WatchlistStore):
    """SQLModel-backed store for production deployments."""

    def __init__(self, engine: Engine):
        self.engine = engine
        create_db_and_tables(engine)

    def _select(self, user_id: str):
        return (
            select(WatchlistRecord)
            .where(WatchlistRecord.user_id == user_id)
            .order_by(WatchlistRecord.pk)
        )

    def _get(self, session: Session, user_id: str, item_id: str, media_type: MediaType) -> WatchlistRecord:
        record = session.exec(
            self._select(user_id).where(
                WatchlistRecord.item_id == item_id,
                WatchlistRecord.media_type == MediaType(media_type).value,
            )
        ).first()
        if record is None:
            raise NotFoundError("item not found in watchlist")
        return record

    def list_items(self, user_id: str) -> List[WatchlistItem]:
        with Session(self.engine) as session:
            return [record.to_item() for record in session.exec(self._select(user_id))]

    def add_item(self, user_id: str, item: WatchlistItem) -> None:
        with Session(self.engine) as session:
            session.add(WatchlistRecord.from_item(user_id, item))
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateItemError("item already in watchlist", exc)

    def remove_item(self, user_id: str, item_id: str, media_type: MediaType) -> None:
        with Session(self.engine) as session:
            session.delete(self._get(session, user_id, item_id, media_type))
            session.commit()

    def update_item(self, user_id, item_id, media_type, watched, rating):
        with Session(self.engine) as session:
            record = self._get(session, user_id, item_id, media_type)
            record.watched = watched
            if rating is not None:
                record.rating = rating
            session.add(record)
            session.commit()
            session.refresh(record)
            return record.to_item()

    def replace_all(self, user_id: str, items: List[WatchlistItem]) -> None:
        with Session(self.engine) as session:
            for record in session.exec(self._select(user_id)).all():
                session.delete(record)
            session.flush()
            for item in items:
                session.add(WatchlistRecord.from_item(user_id, item))
            session.commit()

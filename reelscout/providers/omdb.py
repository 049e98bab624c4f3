"""OMDB client: the secondary ratings/plot provider."""

import logging
from typing import Any

from reelscout.core.errors import NotFoundError, UpstreamError
from reelscout.models.media import OMDBSearchResults, OMDBTitle
from reelscout.providers.base import HTTPProvider, normalize

logger = logging.getLogger(__name__)


class OMDBClient(HTTPProvider):
    """Title, IMDb id and search lookups against OMDB."""

    def __init__(self, api_key: str, base_url: str = "http://www.omdbapi.com", **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "OMDB"

    async def _query(self, params: dict[str, Any]) -> dict:
        data = await self._get_json(self.base_url, {"apikey": self.api_key, **params})
        if not isinstance(data, dict):
            raise UpstreamError("OMDB returned an unexpected payload")
        # OMDB reports failures with HTTP 200 and Response == "False"
        if data.get("Response") == "False":
            message = data.get("Error", "unknown error")
            if "not found" in message.lower():
                raise NotFoundError(f"OMDB error: {message}")
            raise UpstreamError(f"OMDB error: {message}")
        return data

    async def _title(self, title: str, year: str, kind: str) -> OMDBTitle:
        params = {"t": title, "type": kind, "plot": "full"}
        if year:
            params["y"] = year
        return OMDBTitle.model_validate(await self._query(params))

    async def get_movie_by_title(self, title: str, year: str = "") -> OMDBTitle:
        return await self._cached(
            f"omdb_title_{normalize(title)}_{year}",
            lambda: self._title(title, year, "movie"),
        )

    async def get_tv_by_title(self, title: str, year: str = "") -> OMDBTitle:
        return await self._cached(
            f"omdb_tv_{normalize(title)}_{year}",
            lambda: self._title(title, year, "series"),
        )

    async def get_by_imdb_id(self, imdb_id: str) -> OMDBTitle:
        async def fetch():
            return OMDBTitle.model_validate(
                await self._query({"i": imdb_id, "plot": "full"})
            )

        return await self._cached(f"omdb_imdb_{imdb_id}", fetch)

    async def search_movies(self, query: str, page: int = 1) -> OMDBSearchResults:
        """Movie search; OMDB pages hold ten results."""

        async def fetch():
            params = {"s": query, "type": "movie"}
            if page > 1:
                params["page"] = str(page)
            return OMDBSearchResults.model_validate(await self._query(params))

        return await self._cached(f"omdb_search_{normalize(query)}_{page}", fetch)

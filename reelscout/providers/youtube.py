"""YouTube Data API client for trailer lookup."""

import logging
from typing import List, Optional

from reelscout.core.errors import NotConfiguredError, NotFoundError
from reelscout.models.media import MediaType, YouTubeVideo
from reelscout.providers.base import HTTPProvider, normalize

logger = logging.getLogger(__name__)


def _thumbnail(snippet: dict) -> str:
    thumbnails = snippet.get("thumbnails", {})
    for size in ("high", "medium", "default"):
        url = thumbnails.get(size, {}).get("url")
        if url:
            return url
    return ""


class YouTubeClient(HTTPProvider):
    """Searches YouTube for trailers. Optional: without a key every call
    raises NotConfiguredError."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://www.googleapis.com/youtube/v3",
        **kwargs,
    ):
        kwargs.setdefault("timeout", 10)
        super().__init__(**kwargs)
        self.api_key = api_key or ""
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "YouTube"

    def is_configured(self) -> bool:
        return bool(self.api_key and self.base_url)

    async def search_trailers(
        self, title: str, year: str = "", media_type: MediaType = MediaType.MOVIE
    ) -> List[YouTubeVideo]:
        if not self.is_configured():
            raise NotConfiguredError("YouTube API key not configured")

        query = f"{title} trailer"
        if year:
            query += f" {year}"
        if media_type == MediaType.TV:
            query += " tv series"

        async def fetch():
            data = await self._get_json(
                f"{self.base_url}/search",
                {
                    "part": "snippet",
                    "q": query,
                    "type": "video",
                    "maxResults": "5",
                    "order": "relevance",
                    "key": self.api_key,
                },
            )
            videos = []
            for item in data.get("items", []):
                video_id = item.get("id", {}).get("videoId")
                if not video_id:
                    continue
                snippet = item.get("snippet", {})
                videos.append(
                    YouTubeVideo(
                        video_id=video_id,
                        title=snippet.get("title", ""),
                        description=snippet.get("description", ""),
                        thumbnail=_thumbnail(snippet),
                        channel_title=snippet.get("channelTitle", ""),
                        published_at=snippet.get("publishedAt", ""),
                    )
                )
            return videos

        return await self._cached(f"trailers_{normalize(query)}", fetch)

    async def get_official_trailer(
        self, title: str, year: str = "", media_type: MediaType = MediaType.MOVIE
    ) -> YouTubeVideo:
        """Prefer a video titled as an official trailer, else the top hit."""
        trailers = await self.search_trailers(title, year, media_type)
        if not trailers:
            raise NotFoundError(f"No trailers found for '{title}'")

        for trailer in trailers:
            lowered = trailer.title.lower()
            if "official" in lowered and "trailer" in lowered:
                return trailer
        return trailers[0]

"""Watch-provider lookup (where a title can be streamed, bought or rented)."""

import logging
from typing import List

from reelscout.core.errors import InvalidRequestError, NotConfiguredError, NotFoundError
from reelscout.models.media import MediaType, WatchProvider, WatchProviderRegion, WatchProviders
from reelscout.providers.base import HTTPProvider

logger = logging.getLogger(__name__)

LOGO_BASE_URL = "https://image.tmdb.org/t/p/original"

POPULAR_PROVIDERS = [
    WatchProvider(provider_id=8, provider_name="Netflix", logo_path="/t2yyOv40HZeVlLjYsCsPHnWLk4W.jpg", display_priority=1),
    WatchProvider(provider_id=15, provider_name="Hulu", logo_path="/giwM8XX4V2AQb9vsoN7yti82tKK.jpg", display_priority=2),
    WatchProvider(provider_id=337, provider_name="Disney Plus", logo_path="/7rwgEs15tFwyR9NPQ5vpzxTj19Q.jpg", display_priority=3),
    WatchProvider(provider_id=384, provider_name="HBO Max", logo_path="/Ajqyt5aNxNGjmF9uOfxArGrdf3X.jpg", display_priority=4),
    WatchProvider(provider_id=9, provider_name="Amazon Prime Video", logo_path="/emthp39XA2YScoYL1p0sdbAH2WA.jpg", display_priority=5),
    WatchProvider(provider_id=350, provider_name="Apple TV Plus", logo_path="/6uhKBfmtzFqOcLousHwZuzcrScK.jpg", display_priority=6),
    WatchProvider(provider_id=531, provider_name="Paramount Plus", logo_path="/xbhHHa1YgtpwhC8lb1NQ3ACVcLd.jpg", display_priority=7),
    WatchProvider(provider_id=386, provider_name="Peacock", logo_path="/xTVM8uXT9QocigQ01LKPkBpmpnx.jpg", display_priority=8),
]


class WatchProvidersClient(HTTPProvider):
    """Client for the TMDB ``/{type}/{id}/watch/providers`` endpoint."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.themoviedb.org/3",
        **kwargs,
    ):
        kwargs.setdefault("timeout", 10)
        super().__init__(**kwargs)
        self.api_key = api_key or ""
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "WatchProviders"

    def is_configured(self) -> bool:
        return bool(self.api_key and self.base_url)

    async def get_watch_providers(self, media_id: int, media_type: MediaType | str) -> WatchProviders:
        """All regions' providers for a movie or TV show."""
        if not self.is_configured():
            raise NotConfiguredError("Watch provider lookup not configured")
        try:
            media_type = MediaType(media_type)
        except ValueError:
            raise InvalidRequestError(f"unsupported media type: {media_type}")

        async def fetch():
            data = await self._get_json(
                f"{self.base_url}/{media_type.value}/{media_id}/watch/providers",
                {"api_key": self.api_key},
            )
            return WatchProviders.model_validate(data)

        return await self._cached(f"watch_providers_{media_type.value}_{media_id}", fetch)

    async def get_region(self, media_id: int, media_type: MediaType | str, region: str) -> WatchProviderRegion:
        providers = await self.get_watch_providers(media_id, media_type)
        region_providers = providers.results.get(region.upper())
        if region_providers is None:
            raise NotFoundError(f"no providers found for region: {region}")
        return region_providers

    async def get_available_regions(self, media_id: int, media_type: MediaType | str) -> List[str]:
        providers = await self.get_watch_providers(media_id, media_type)
        return sorted(providers.results)

    async def get_streaming_services(
        self, media_id: int, media_type: MediaType | str, region: str = "US"
    ) -> List[WatchProvider]:
        """Subscription (flatrate) services only."""
        return (await self.get_region(media_id, media_type, region)).flatrate

    async def get_purchase_options(
        self, media_id: int, media_type: MediaType | str, region: str = "US"
    ) -> dict[str, List[WatchProvider]]:
        region_providers = await self.get_region(media_id, media_type, region)
        options = {}
        if region_providers.buy:
            options["buy"] = region_providers.buy
        if region_providers.rent:
            options["rent"] = region_providers.rent
        return options

    @staticmethod
    def popular_providers() -> List[WatchProvider]:
        return list(POPULAR_PROVIDERS)

    @staticmethod
    def logo_url(logo_path: str | None) -> str:
        return f"{LOGO_BASE_URL}{logo_path}" if logo_path else ""

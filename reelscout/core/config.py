"""Configuration management for ReelScout."""

from pydantic import PositiveInt, PositiveFloat, field_validator
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from urllib.parse import urlparse


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Primary metadata provider (TMDB)
    tmdb_api_key: str

    # Secondary ratings provider (OMDB)
    omdb_api_key: str
    omdb_base_url: str = "http://www.omdbapi.com"

    # Auxiliary providers; both degrade to "not configured" without a key
    youtube_api_key: str | None = None
    youtube_base_url: str = "https://www.googleapis.com/youtube/v3"
    watch_providers_base_url: str = "https://api.themoviedb.org/3"

    # Cache and rate limiting
    cache_duration_minutes: PositiveInt = 30
    genre_cache_hours: PositiveInt = 24
    rate_limit_requests_per_minute: PositiveInt = 60

    # Outbound timeouts in seconds
    metadata_timeout: PositiveFloat = 30
    auxiliary_timeout: PositiveFloat = 10

    # Watchlist storage; in-memory when unset
    database_url: str | None = None
    default_user: str = "default_user"

    # Server
    host: str = "localhost"
    port: PositiveInt = 8080
    shutdown_timeout: PositiveInt = 10

    @field_validator("omdb_base_url", "youtube_base_url", "watch_providers_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https"):
            raise ValueError("Base URL must use the http or https scheme")
        if not parsed.netloc:
            raise ValueError("Base URL must have a host")
        return v.rstrip("/")

    # App settings
    debug: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API-Football (RapidAPI or API-Sports direct)
    RAPIDAPI_KEY: str = ""
    RAPIDAPI_HOST: str = "api-football-v1.p.rapidapi.com"
    # Pass-through proxy base (e.g. https://proxy.example/api/football).
    # When set, it replaces the host-derived URL and no key header is sent.
    API_BASE_URL: str = ""
    API_TIMEZONE: str = ""

    # Transport
    API_TIMEOUT_SECONDS: float = 15.0
    API_REQUESTS_PER_MINUTE: int = 600
    API_RATE_LIMIT_RETRIES: int = 2
    API_RATE_LIMIT_BACKOFF_SECONDS: float = 2.0

    # Orchestration
    DOMAIN_TIMEOUT_SECONDS: float = 20.0
    DEFAULT_SEASON: int = 2024
    HEAD_TO_HEAD_LAST: int = 10
    RECENT_FORM_LAST: int = 10

    # Catalog: comma separated league ids, empty = built-in whitelist
    TRACKED_LEAGUES: str = ""
    CATALOG_CACHE_TTL_SECONDS: float = 30.0

    # Live view polling
    LIVE_REFRESH_SECONDS: int = 30
    LIVE_REFRESH_ENABLED: bool = True

    # HTTP API
    RATE_LIMIT_PER_MINUTE: str = "60/minute"
    # Bearer token for /metrics, unset = open
    METRICS_BEARER_TOKEN: str = ""
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    def tracked_league_ids(self) -> Optional[list[int]]:
        """Parse TRACKED_LEAGUES ("39,140") into ids, None when unset or invalid."""
        raw = (self.TRACKED_LEAGUES or "").strip()
        if not raw:
            return None
        ids = []
        for part in raw.split(","):
            part = part.strip()
            if not part:
                continue
            try:
                ids.append(int(part))
            except ValueError:
                return None
        return ids or None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

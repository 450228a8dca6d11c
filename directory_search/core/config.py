"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    database_url: str
    worker_port: int = 9000
    default_radius_miles: float = 50.0
    geocode_timeout_seconds: float = 10.0
    state_text_fallback: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_api_key = os.getenv("GOOGLE_API_KEY", "")
    database_url = os.getenv("DATABASE_URL", "")
    worker_port = int(os.getenv("WORKER_PORT", "9000"))
    default_radius_miles = float(os.getenv("DEFAULT_RADIUS_MILES", "50"))
    geocode_timeout_seconds = float(os.getenv("GEOCODE_TIMEOUT_SECONDS", "10"))
    state_text_fallback = os.getenv("STATE_TEXT_FALLBACK", "false").lower() in _TRUTHY

    if not database_url:
        logger.warning("DATABASE_URL is not set; database operations will fail.")
    if not google_api_key:
        logger.warning("GOOGLE_API_KEY is not configured; geocoding requests will fail.")
    if default_radius_miles <= 0:
        logger.warning("DEFAULT_RADIUS_MILES=%s is not positive; falling back to 50.", default_radius_miles)
        default_radius_miles = 50.0

    return Settings(
        google_api_key=google_api_key,
        database_url=database_url,
        worker_port=worker_port,
        default_radius_miles=default_radius_miles,
        geocode_timeout_seconds=geocode_timeout_seconds,
        state_text_fallback=state_text_fallback,
    )

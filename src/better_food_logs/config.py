"""Application configuration."""

import logging
import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

_logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_key: str
    local_store_path: str = ".better_food_logs/local_storage.json"
    timezone: str = "UTC"
    remote_timeout_seconds: int = 10
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_timezone(raw: str | None) -> str:
    """Return a valid IANA zone name, falling back to UTC."""
    if raw is None:
        return "UTC"
    cleaned = raw.strip()
    if not cleaned:
        return "UTC"
    try:
        ZoneInfo(cleaned)
    except (ZoneInfoNotFoundError, ValueError):
        _logger.warning("Unknown timezone %r; using UTC", cleaned)
        return "UTC"
    return cleaned

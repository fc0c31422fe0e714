"""Environment-driven settings for the hosting layer."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

SERVICE_NAME = "ping-functions"
VERSION = "0.1.0"
DEFAULT_REGION = "us-central1"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


@dataclass
class Settings:
    environment: str = "development"
    region: str = DEFAULT_REGION
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    require_auth: bool = False
    auth_secret: str | None = None
    rate_limit_max_requests: int = 60
    rate_limit_window_seconds: int = 60
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment not in ("development", "preview")


def load_settings() -> Settings:
    """Build settings from the process environment."""
    environment = os.getenv("ENVIRONMENT") or os.getenv("VERCEL_ENV") or "development"
    settings = Settings(environment=environment)

    cors_raw = os.getenv("CORS_ORIGINS")
    if settings.is_production and not cors_raw:
        logger.warning(
            "CORS_ORIGINS not set in production, defaulting to restrictive policy. "
            "Set CORS_ORIGINS=https://yourdomain.com in environment."
        )
        settings.cors_origins = []
    elif cors_raw:
        settings.cors_origins = [o.strip() for o in cors_raw.split(",") if o.strip()]

    settings.region = os.getenv("FUNCTION_REGION") or DEFAULT_REGION
    settings.require_auth = _env_flag("PING_REQUIRE_AUTH")
    settings.auth_secret = os.getenv("AUTH_SECRET") or None
    settings.rate_limit_max_requests = _env_int("RATE_LIMIT_MAX_REQUESTS", 60)
    settings.rate_limit_window_seconds = _env_int("RATE_LIMIT_WINDOW_SECONDS", 60)
    settings.log_level = (os.getenv("LOG_LEVEL") or "INFO").upper()
    return settings

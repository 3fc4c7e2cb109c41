"""
Configuration helpers for the ToGather backend.

Routers and services read settings through ``get_settings()`` instead of
fetching ``os.environ`` directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    public_base_url: str
    session_ttl_seconds: int
    registration_timeout_seconds: float
    register_rate_limit: int
    register_rate_window_seconds: int
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./togather.db"),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "86400"), 86400),
        registration_timeout_seconds=_float(os.getenv("REGISTRATION_TIMEOUT_SECONDS", "15"), 15.0),
        register_rate_limit=_int(os.getenv("REGISTER_RATE_LIMIT", "5"), 5),
        register_rate_window_seconds=_int(os.getenv("REGISTER_RATE_WINDOW_SECONDS", "300"), 300),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )

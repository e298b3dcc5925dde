"""
Centralized configuration for the LogiTrack backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings are grouped by concern (SUPABASE_*, session tuning,
parcel tracking).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "LogiTrack API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""

    # Session reconciliation (seconds unless noted)
    session_probe_timeout: float = 10.0
    logout_timeout: float = 3.0
    sign_in_event_timeout: float = 5.0
    auth_event_dedupe_window: float = 2.0
    profile_retry_attempts: int = 3
    profile_retry_backoff: float = 0.5

    # Parcel tracking
    history_limit: int = 20
    history_settle_delay: float = 0.3
    colis_status_type: str = "colis"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()

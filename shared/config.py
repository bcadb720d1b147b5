"""
Centralized configuration for the Module Hub backend.

All settings are loaded from environment variables with sensible defaults.
These are SERVER settings: the service-role key grants unrestricted row
access and must never be shipped to the client runtime (see client/config.py).
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
    app_name: str = "Module Hub API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase (service role, server only)
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    # Direct Postgres connection, used by run_migrations.py only
    supabase_db_url: str = ""

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Usage tracking
    enable_usage_tracking: bool = True
    usage_history_limit: int = 10
    usage_admin_limit: int = 100
    recent_activity_hours: int = 24


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()

"""
Client runtime configuration.

Only values that are safe to ship to an end user's machine belong here.
The anon key is subject to Row Level Security; the service-role key is
server-only and deliberately has no field in these settings.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Public settings loaded from ``PUBLIC_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PUBLIC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    supabase_url: str = ""
    supabase_anon_key: str = ""


@lru_cache
def get_client_settings() -> ClientSettings:
    """Get cached client settings."""
    return ClientSettings()

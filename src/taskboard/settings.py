"""Application settings using Pydantic BaseSettings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase Configuration
    supabase_url: str | None = None
    supabase_anon_key: str | None = None

    # Service
    service_name: str = "taskboard"
    environment: str = "development"
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"])

    # Cache Configuration (seconds)
    cache_default_ttl_seconds: float = 300
    users_cache_ttl_seconds: float = 600
    cache_cleanup_interval_seconds: float = 60

    # Email -> username, used when the users table has no matching row
    username_fallbacks: dict[str, str] = Field(default_factory=dict)


# Global settings instance
settings = Settings()

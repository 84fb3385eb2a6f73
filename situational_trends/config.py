"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Hosted data store (PostgREST / Supabase)
    supabase_url: str = ""
    supabase_key: str = ""
    request_timeout_seconds: float = 30.0

    # Time-only tipoff strings ("19:30") are read in this zone
    tipoff_timezone: str = "America/New_York"

    # Scoring thresholds
    min_games_threshold: int = 5
    min_consensus_pct: float = 55.0
    min_ats_difference: float = 10.0

    # API Settings
    api_v1_prefix: str = "/api/v1"

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8081",
    ]

    # Logging
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def rest_url(self) -> str:
        """PostgREST endpoint derived from the project URL."""
        return f"{self.supabase_url.rstrip('/')}/rest/v1"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()

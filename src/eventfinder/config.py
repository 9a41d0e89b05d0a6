"""Configuration management using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # OpenAI Configuration
    openai_api_key: str | None = None  # Only needed for searches
    openai_model: str = "gpt-4.1-mini"
    request_timeout: float = 120.0

    # Rate Limiting
    token_limit_per_minute: int = 30_000

    # API Settings (for FastAPI mode)
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_key: str | None = None  # Optional API key for authentication

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AnyHttpUrl, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables with validation."""

    model_config = SettingsConfigDict(
        env_file=(str(Path(__file__).resolve().parents[1] / ".env"), ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    app_name: str = Field(default="Actions Indicators API", alias="APP_NAME")
    app_env: Literal["development", "staging", "production", "test"] = Field(
        default="production",
        alias="APP_ENV",
    )
    app_debug: bool = Field(default=False, alias="APP_DEBUG")
    api_v1_prefix: str = Field(default="/api/v1", alias="API_V1_PREFIX")

    github_token: SecretStr | None = Field(default=None, alias="GITHUB_TOKEN")
    github_api_url: AnyHttpUrl = Field(
        default="https://api.github.com",
        alias="GITHUB_API_URL",
    )
    github_graphql_url: AnyHttpUrl = Field(
        default="https://api.github.com/graphql",
        alias="GITHUB_GRAPHQL_URL",
    )
    http_timeout: float = Field(default=30.0, gt=0, le=300, alias="HTTP_TIMEOUT")

    cache_backend: Literal["memory", "database"] = Field(default="memory", alias="CACHE_BACKEND")
    cache_max_age_hours: int = Field(default=24, ge=1, alias="CACHE_MAX_AGE_HOURS")
    cache_stale_window_hours: int = Field(default=240, ge=0, alias="CACHE_STALE_WINDOW_HOURS")

    database_url: str = Field(
        default="sqlite:///./actions_indicators.db",
        alias="DATABASE_URL",
    )

    @field_validator("api_v1_prefix")
    @classmethod
    def validate_api_prefix(cls, value: str) -> str:
        """Ensure the API prefix starts with a slash and has no trailing slash."""
        normalized = value.strip()
        if not normalized.startswith("/"):
            raise ValueError("API_V1_PREFIX must start with '/'.")
        if len(normalized) > 1 and normalized.endswith("/"):
            normalized = normalized.rstrip("/")
        return normalized

    @field_validator("github_token", mode="before")
    @classmethod
    def blank_token_is_none(cls, value: str | None) -> str | None:
        """Treat an empty GITHUB_TOKEN as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, value: str) -> str:
        """Validate the cache database URL is a SQLite or PostgreSQL SQLAlchemy URL."""
        lowered = value.lower()
        if not lowered.startswith(("sqlite://", "postgresql://", "postgresql+psycopg2://")):
            raise ValueError("DATABASE_URL must start with sqlite://, postgresql:// or postgresql+psycopg2://")
        return value

    @property
    def cache_max_age(self) -> timedelta:
        return timedelta(hours=self.cache_max_age_hours)

    @property
    def cache_stale_window(self) -> timedelta:
        return timedelta(hours=self.cache_stale_window_hours)


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()


settings: Settings = get_settings()

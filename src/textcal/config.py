"""Configuration management using pydantic-settings."""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import DEFAULT_TITLE


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TEXTCAL_",
        extra="ignore",
    )

    # Time handling
    timezone: str = "UTC"
    default_duration_minutes: int = 60

    # Titles
    default_title: str = DEFAULT_TITLE
    untitled_title: str = "Untitled Event"

    # Output formats
    prodid: str = "-//textcal//EN"
    google_calendar_url: str = "https://calendar.google.com/calendar/render"

    # OpenAI Configuration (optional AI extraction)
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    token_limit_per_minute: int = 180_000
    max_tokens_per_request: int = 4000

    # API Settings (for FastAPI mode)
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_key: str | None = None  # Optional API key for authentication

    # Logging
    log_level: str = "INFO"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("default_duration_minutes")
    @classmethod
    def _non_negative_duration(cls, value: int) -> int:
        if value < 0:
            raise ValueError("default_duration_minutes must not be negative")
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def default_duration(self) -> timedelta:
        return timedelta(minutes=self.default_duration_minutes)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

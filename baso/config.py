"""Runtime configuration loaded from the environment."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_PRO_MODEL = "gemini-3-pro-preview"
DEFAULT_FLASH_MODEL = "gemini-2.5-flash"
DEFAULT_REASONING_BUDGET = 2048
DEFAULT_AUTOCOMPLETE_QUIET_SECONDS = 0.8
DEFAULT_AUTOCOMPLETE_MIN_CHARS = 5


class Settings(BaseSettings):
    """Settings for the Gemini transport and the autocomplete session."""

    gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
    pro_model: str = DEFAULT_PRO_MODEL
    flash_model: str = DEFAULT_FLASH_MODEL
    reasoning_budget: int = DEFAULT_REASONING_BUDGET
    autocomplete_quiet_seconds: float = DEFAULT_AUTOCOMPLETE_QUIET_SECONDS
    autocomplete_min_chars: int = DEFAULT_AUTOCOMPLETE_MIN_CHARS

    model_config = SettingsConfigDict(
        env_prefix="BASO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()

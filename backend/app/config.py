from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings read from TRAVEL_ALLOWANCE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TRAVEL_ALLOWANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Falls back to the rules file packaged with travel_allowance.
    rules_path: Path | None = None
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()

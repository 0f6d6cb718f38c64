"""Application configuration, loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: SecretStr | None = None
    github_graphql_url: str = "https://api.github.com/graphql"
    github_page_size: int = Field(default=100, ge=1, le=100)
    github_page_delay_seconds: float = Field(default=0.1, ge=0.0)
    http_timeout_seconds: float = 30.0
    scan_timeout_seconds: float | None = None
    readme_profile: Literal["lenient", "strict"] = "lenient"
    database_url: str = "sqlite+aiosqlite:///./repo_scorer.db"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()

"""
Configuration and settings for the Skillync backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    log_level: str = Field(default="INFO")
    cors_origins: str = Field(default="http://localhost:9002")

    # Firebase (Auth + Firestore)
    firebase_project_id: Optional[str] = Field(default=None)

    # Optional SQL document store (Postgres in production, SQLite in tests)
    database_url: Optional[str] = Field(default=None)

    # LLM / Gemini
    gemini_api_key: Optional[str] = Field(default=None)

    # GitHub REST API
    github_api_url: str = Field(default="https://api.github.com")
    github_token: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()

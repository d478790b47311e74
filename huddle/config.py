"""
Runtime configuration helpers for the FastAPI application.

Loads DATABASE_URL and the other variables from the .env file located in the
project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    # Required: must come from the environment or .env
    database_url: str = Field(..., alias="DATABASE_URL")

    app_name: str = Field(default="Huddle", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    cors_origins: str | None = Field(default=None, alias="CORS_ORIGINS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expires_minutes: int = Field(default=1440, alias="JWT_EXPIRES_MINUTES")

    post_max_length: int = Field(default=2000, alias="POST_MAX_LENGTH")
    message_max_length: int = Field(default=2000, alias="MESSAGE_MAX_LENGTH")
    search_limit: int = Field(default=20, alias="SEARCH_LIMIT")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def allowed_origins(self) -> list[str]:
        if not self.cors_origins:
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]

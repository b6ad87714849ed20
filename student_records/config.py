"""
Application settings.

Values are read from environment variables (or a local .env file) using
pydantic-settings. List-query defaults live here and are handed to the
query engine explicitly by the routes.
"""

from typing import Annotated, List, Literal
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    # ── App ───────────────────────────────────────────────────
    APP_TITLE: str = "Student Records API"
    APP_VERSION: str = "1.0.0"

    # ── Database ──────────────────────────────────────────────
    # Fallback to SQLite for local development when PostgreSQL is not available
    DATABASE_URL: str = "sqlite:///./student_records.db"

    # ── CORS ──────────────────────────────────────────────────
    # Comma separated in the environment: "http://a,http://b"
    CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    # ── List queries ──────────────────────────────────────────
    DEFAULT_SORT_FIELD: str = "name"
    DEFAULT_SORT_ORDER: Literal["asc", "desc"] = "asc"
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # ── Logging ───────────────────────────────────────────────
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()

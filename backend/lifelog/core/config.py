"""Application configuration using pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LIFELOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Lifelog"
    version: str = "0.1.0"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=8787, description="Server port")

    # Paths
    config_path: Path = Field(
        default=Path("/config"),
        description="Path for configuration files and database",
    )

    # Database
    database_url: str | None = Field(
        default=None,
        description="Database connection URL (defaults to SQLite under config_path)",
    )

    # CORS
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )

    # Pagination
    default_page_size: int = Field(
        default=50,
        description="Page size used when limit is absent or not a number",
    )
    max_page_size: int = Field(
        default=100,
        description="Upper bound for the limit query parameter",
    )

    # Search
    search_max_results: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Hard cap on search results",
    )
    search_window_days: int = Field(
        default=90,
        ge=1,
        description="Days covered by a search without an explicit date",
    )

    # Stats
    stats_top_n: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of recent URLs and top tags returned by stats",
    )

    # Link previews
    preview_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for fetching a preview page",
    )
    preview_max_html_chars: int = Field(
        default=400_000,
        description="Preview HTML beyond this many characters is ignored",
    )
    preview_cache_size: int = Field(
        default=256,
        ge=1,
        description="Maximum number of cached link previews",
    )
    preview_cache_ttl: int = Field(
        default=3600,
        ge=0,
        description="Seconds a cached link preview stays valid",
    )
    preview_user_agent: str = "LifeLogPreview/1.0"

    @property
    def db_path(self) -> Path:
        """Get the SQLite database file path."""
        return self.config_path / "lifelog.db"


# Global settings instance
settings = Settings()

"""
Configuration settings for notion-batch.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Notion API
    # ========================================
    notion_api_key: str = Field(
        default="",
        description="Notion integration API key",
    )
    notion_version: str = Field(
        default="2022-06-28",
        description="Notion API version",
    )
    notion_base_url: str = Field(
        default="https://api.notion.com",
        description="Notion API base URL (without the /v1 suffix)",
    )
    notion_timeout_ms: int = Field(
        default=60_000,
        ge=1,
        description="Timeout for a single Notion API call, in milliseconds",
    )
    notion_rate_limit_delay: float = Field(
        default=0.35,
        ge=0.0,
        description="Seconds to wait between consecutive Notion API calls (~3 req/sec)",
    )
    notion_database_id: str | None = Field(
        default=None,
        description="Default Notion database ID for CLI commands",
    )

    # ========================================
    # Batch
    # ========================================
    page_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of entries requested per Notion query page",
    )
    chunk_size: int = Field(
        default=10,
        ge=1,
        description="Number of items written per chunk (commit interval)",
    )

    # ========================================
    # Write Protection
    # ========================================
    protect_notion: bool = Field(
        default=False,
        description="Refuse every write to Notion",
    )
    dry_run: bool = Field(
        default=False,
        description="Log Notion writes without executing them",
    )

    # ========================================
    # Relational Target
    # ========================================
    database_url: str = Field(
        default="sqlite:///notion_batch.db",
        description="SQLAlchemy URL used by the export writer",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    def masked_api_key(self) -> str:
        """Return the API key with all but the last four characters hidden."""
        if not self.notion_api_key:
            return ""
        return "*" * max(len(self.notion_api_key) - 4, 0) + self.notion_api_key[-4:]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

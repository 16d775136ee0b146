"""Configuration settings for the Item Search MCP Server using Pydantic Settings.

This module provides type-safe configuration management with automatic validation,
environment variable loading, and the static list of target websites consulted by
the web-gathering step.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from item_mcp.models import WebsiteConfig

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Central configuration management with Pydantic validation.

    All settings are loaded from environment variables with automatic type conversion
    and validation. Default values are provided for non-critical settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
        validate_default=True,
        populate_by_name=True,
    )

    # ========================================
    # Debug / Logging Settings
    # ========================================
    debug: bool = Field(
        default=False,
        alias="MCP_DEBUG",
        description="Enable debug mode with verbose logging",
    )

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    # ========================================
    # API Keys
    # ========================================
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key for LLM operations",
    )

    # ========================================
    # Server Settings
    # ========================================
    host: str = Field(
        default="0.0.0.0",
        description="Server host address",
    )

    port: int = Field(
        default=3000,
        ge=1024,
        le=65535,
        alias="MCP_SERVER_PORT",
        description="HTTP server port number",
    )

    transport: str = Field(
        default="stdio",
        description="Transport mode (stdio or http)",
    )

    serve_http_api: bool = Field(
        default=True,
        description="Serve the HTTP JSON API alongside the stdio transport",
    )

    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )

    mcp_api_key: str | None = Field(
        default=None,
        description="Bearer token required by the HTTP API (disabled when unset)",
    )

    # ========================================
    # LLM Settings
    # ========================================
    model_choice: str = Field(
        default="gpt-4o-mini",
        description="LLM model used for item search, extraction and summaries",
    )

    llm_temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=2.0,
        description="LLM temperature for item generation",
    )

    llm_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Timeout in seconds for a single LLM request",
    )

    # ========================================
    # Storage Settings
    # ========================================
    db_dir: Path = Field(
        default=Path("db"),
        description="Directory holding one JSON file per item",
    )

    tmp_dir: Path = Field(
        default=Path("tmp"),
        description="Scratch directory for site scraping",
    )

    alternative_cache_dir: Path = Field(
        default=Path("cache") / "sitemcp",
        description="Cache directory passed to sitemcp when no cache exists",
    )

    # ========================================
    # Search Settings
    # ========================================
    search_timeout: float = Field(
        default=90.0,
        gt=0,
        description="Overall deadline in seconds for a full search",
    )

    web_search_timeout: float = Field(
        default=45.0,
        gt=0,
        description="Deadline in seconds for gathering items from a single website",
    )

    max_simultaneous_searches: int = Field(
        default=2,
        ge=1,
        le=100,
        description="Full searches allowed in flight before degraded mode kicks in",
    )

    # ========================================
    # Site Scraper Settings
    # ========================================
    sitemcp_command: str = Field(
        default="npx",
        description="Executable used to launch sitemcp",
    )

    sitemcp_concurrency: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Concurrency passed to sitemcp",
    )

    sitemcp_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Timeout in seconds before the sitemcp process is killed",
    )

    sitemcp_page_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Maximum pages fetched by sitemcp per site",
    )

    sitemcp_max_length: int = Field(
        default=10000,
        ge=100,
        description="Maximum content length kept by sitemcp per page",
    )

    max_items_per_site: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Maximum items extracted from a single site",
    )

    use_fallback_for_failed_sites: bool = Field(
        default=True,
        description="Produce a placeholder item for sites without cached data",
    )

    target_websites: list[WebsiteConfig] = Field(
        default_factory=list,
        description="Target websites as a JSON list",
    )

    websites_file: Path | None = Field(
        default=None,
        description="Optional JSON file with additional target websites",
    )

    # ========================================
    # Validators
    # ========================================
    @field_validator("transport")
    @classmethod
    def validate_transport(cls, v: str) -> str:
        """Normalize and validate the transport name."""
        v = v.strip().lower()
        if v not in ("stdio", "http"):
            msg = f"Unsupported transport: {v}"
            raise ValueError(msg)
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level names."""
        v = v.strip().upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            msg = f"Unsupported log level: {v}"
            raise ValueError(msg)
        return v

    # ========================================
    # Helper Methods
    # ========================================
    def get_cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_target_websites(self) -> list[WebsiteConfig]:
        """Get target websites from the environment and the optional websites file."""
        websites = list(self.target_websites)
        if self.websites_file is None:
            return websites

        try:
            raw = json.loads(self.websites_file.read_text(encoding="utf-8"))
            websites.extend(WebsiteConfig.model_validate(entry) for entry in raw)
        except FileNotFoundError:
            logger.warning("Websites file not found: %s", self.websites_file)
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.error("Invalid websites file %s: %s", self.websites_file, e)
        return websites

    def setup_directories(self) -> None:
        """Create the storage, scratch and cache directories if missing."""
        for directory in (self.db_dir, self.tmp_dir, self.alternative_cache_dir):
            if not directory.exists():
                directory.mkdir(parents=True, exist_ok=True)
                logger.info("Created directory: %s", directory)

    def to_dict(self) -> dict[str, Any]:
        """Export settings as a dictionary (safe version without secrets)."""
        return {
            "debug": self.debug,
            "log_level": self.log_level,
            "host": self.host,
            "port": self.port,
            "transport": self.transport,
            "serve_http_api": self.serve_http_api,
            "has_openai": bool(self.openai_api_key),
            "has_api_key": bool(self.mcp_api_key),
            "model_choice": self.model_choice,
            "db_dir": str(self.db_dir),
            "search_timeout": self.search_timeout,
            "web_search_timeout": self.web_search_timeout,
            "max_simultaneous_searches": self.max_simultaneous_searches,
            "sitemcp_timeout": self.sitemcp_timeout,
            "target_websites": len(self.target_websites),
        }


# Singleton pattern with proper typing
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
        logger.info("Settings initialized from environment")
        logger.debug("Item storage directory: %s", _settings_instance.db_dir)
        if not _settings_instance.openai_api_key:
            logger.warning(
                "OPENAI_API_KEY is missing. LLM features will be unavailable.",
            )
    return _settings_instance


def reset_settings() -> None:
    """Reset settings instance (useful for testing)."""
    global _settings_instance
    _settings_instance = None

"""
Shared pytest fixtures and configuration for all tests.

No test talks to a real LLM or runs sitemcp: the generative source and the
site scraper are replaced by in-memory stubs (see tests/helpers.py), and
every store lives in a temporary directory.
"""

import os
from pathlib import Path

import pytest

# Set test environment variables BEFORE any imports of the package
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.pop("MCP_API_KEY", None)

from item_mcp.config import Settings, reset_settings
from item_mcp.core.context import set_app_context
from item_mcp.database import FileItemRepository
from item_mcp.models import WebsiteConfig


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset settings and application context between tests."""
    reset_settings()
    set_app_context(None)
    yield
    reset_settings()
    set_app_context(None)


@pytest.fixture
def db_dir(tmp_path: Path) -> Path:
    return tmp_path / "db"


@pytest.fixture
def repository(db_dir: Path) -> FileItemRepository:
    """File repository in a temporary directory."""
    return FileItemRepository(db_dir)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing every directory into tmp_path."""
    return Settings(
        _env_file=None,
        db_dir=tmp_path / "db",
        tmp_dir=tmp_path / "tmp",
        alternative_cache_dir=tmp_path / "cache" / "sitemcp",
        openai_api_key="test-key",
        sitemcp_timeout=1.0,
    )


@pytest.fixture
def website() -> WebsiteConfig:
    return WebsiteConfig(
        name="example",
        url="https://example.org/grants",
        description="Example Agency",
    )

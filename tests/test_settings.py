"""
Tests for configuration settings.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from item_mcp.config import Settings, get_settings, reset_settings


class TestSettings:
    """Test Settings defaults, validation and helpers."""

    def test_defaults(self, monkeypatch):
        for name in ("MCP_SERVER_PORT", "TRANSPORT", "SEARCH_TIMEOUT", "MODEL_CHOICE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.port == 3000
        assert settings.transport == "stdio"
        assert settings.search_timeout == 90.0
        assert settings.web_search_timeout == 45.0
        assert settings.max_simultaneous_searches == 2
        assert settings.model_choice == "gpt-4o-mini"
        assert settings.db_dir == Path("db")

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MCP_SERVER_PORT", "8080")
        monkeypatch.setenv("TRANSPORT", "HTTP")
        monkeypatch.setenv("MAX_SIMULTANEOUS_SEARCHES", "5")

        settings = Settings(_env_file=None)

        assert settings.port == 8080
        assert settings.transport == "http"
        assert settings.max_simultaneous_searches == 5

    def test_unknown_transport_is_rejected(self, monkeypatch):
        monkeypatch.setenv("TRANSPORT", "carrier-pigeon")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_target_websites_from_env_and_file(self, monkeypatch, tmp_path):
        websites_file = tmp_path / "websites.json"
        websites_file.write_text(
            json.dumps([{"name": "beta", "url": "https://beta.example", "enabled": False}]),
            encoding="utf-8",
        )
        monkeypatch.setenv(
            "TARGET_WEBSITES",
            json.dumps([{"name": "alpha", "url": "https://alpha.example"}]),
        )
        monkeypatch.setenv("WEBSITES_FILE", str(websites_file))

        websites = Settings(_env_file=None).get_target_websites()

        assert [(site.name, site.enabled) for site in websites] == [
            ("alpha", True),
            ("beta", False),
        ]

    def test_invalid_websites_file_is_ignored(self, monkeypatch, tmp_path):
        websites_file = tmp_path / "websites.json"
        websites_file.write_text("{broken", encoding="utf-8")
        monkeypatch.delenv("TARGET_WEBSITES", raising=False)
        monkeypatch.setenv("WEBSITES_FILE", str(websites_file))

        assert Settings(_env_file=None).get_target_websites() == []

    def test_setup_directories(self, test_settings):
        test_settings.setup_directories()

        assert test_settings.db_dir.is_dir()
        assert test_settings.tmp_dir.is_dir()
        assert test_settings.alternative_cache_dir.is_dir()

    def test_to_dict_hides_secrets(self, test_settings):
        exported = test_settings.to_dict()

        assert exported["has_openai"] is True
        assert "test-key" not in json.dumps(exported)

    def test_get_settings_is_cached_until_reset(self):
        first = get_settings()

        assert get_settings() is first
        reset_settings()
        assert get_settings() is not first

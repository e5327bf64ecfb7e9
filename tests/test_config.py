"""Tests for load_settings() environment parsing."""

from __future__ import annotations

import pytest

from grass_bot.config import (
    CHART_BASE_URL,
    DEFAULT_HTTP_TIMEOUT_S,
    DEFAULT_MAX_CHART_BYTES,
    GITHUB_API_URL,
    SLACK_API_URL,
    load_settings,
)

_ENV_VARS = [
    "SLACK_VERIFICATION_TOKEN",
    "SLACK_BOT_TOKEN",
    "GITHUB_TOKEN",
    "GITHUB_API_URL",
    "CHART_BASE_URL",
    "SLACK_API_URL",
    "RSVG_CONVERT_PATH",
    "HTTP_TIMEOUT_S",
    "MAX_CHART_BYTES",
    "HOST",
    "PORT",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings()

        assert settings.verification_token == ""
        assert settings.slack_bot_token == ""
        assert settings.github_api_url == GITHUB_API_URL
        assert settings.chart_base_url == CHART_BASE_URL
        assert settings.slack_api_url == SLACK_API_URL
        assert settings.rsvg_convert_path == "rsvg-convert"
        assert settings.http_timeout_s == DEFAULT_HTTP_TIMEOUT_S
        assert settings.max_chart_bytes == DEFAULT_MAX_CHART_BYTES
        assert settings.port == 8080
        assert settings.log_level == "INFO"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SLACK_VERIFICATION_TOKEN", " secret \n")
        monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-1")
        monkeypatch.setenv("CHART_BASE_URL", "https://charts.example/")
        monkeypatch.setenv("HTTP_TIMEOUT_S", "2.5")
        monkeypatch.setenv("MAX_CHART_BYTES", "1024")
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = load_settings()

        assert settings.verification_token == "secret"
        assert settings.slack_bot_token == "xoxb-1"
        assert settings.chart_base_url == "https://charts.example"
        assert settings.http_timeout_s == 2.5
        assert settings.max_chart_bytes == 1024
        assert settings.port == 9000
        assert settings.log_level == "DEBUG"

    def test_invalid_port_names_variable(self, monkeypatch):
        monkeypatch.setenv("PORT", "eighty")

        with pytest.raises(ValueError, match="PORT"):
            load_settings()

    def test_invalid_timeout_names_variable(self, monkeypatch):
        monkeypatch.setenv("HTTP_TIMEOUT_S", "soon")

        with pytest.raises(ValueError, match="HTTP_TIMEOUT_S"):
            load_settings()

    def test_settings_are_frozen(self):
        settings = load_settings()

        with pytest.raises(AttributeError):
            settings.port = 1

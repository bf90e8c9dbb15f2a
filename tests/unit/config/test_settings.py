# tests/unit/config/test_settings.py — v2
"""Tests for config/settings.py."""

from __future__ import annotations

from datetime import timedelta

import pytest

from trendscout.config.settings import ConfigurationError, Settings, load_settings


def _settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


class TestDefaults:
    def test_default_values(self):
        s = _settings()
        assert s.llm_provider == "google"
        assert s.github_search_url == "https://api.github.com/search/repositories"
        assert s.parser_cache_ttl == timedelta(hours=24)
        assert s.search_cache_ttl == timedelta(hours=6)
        assert s.scheduler_enabled is False
        assert s.port == 8000

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SEARCH_CACHE_TTL_S", "60")
        monkeypatch.setenv("LLM_PROVIDER", "ollama")
        s = _settings()
        assert s.search_cache_ttl == timedelta(seconds=60)
        assert s.llm_provider == "ollama"

    def test_load_settings_overrides(self, monkeypatch):
        monkeypatch.chdir("/")
        s = load_settings(port=9001)
        assert s.port == 9001


class TestValidation:
    def test_non_positive_ttl(self):
        with pytest.raises(ConfigurationError, match="TTL"):
            _settings(parser_cache_ttl_s=0)

    def test_bad_time_format(self):
        with pytest.raises(ConfigurationError, match="DAILY_DIGEST_TIME"):
            _settings(daily_digest_time="9am")

    def test_weekday_normalized(self):
        assert _settings(weekly_digest_weekday="Friday").weekly_digest_weekday == "fri"

    def test_bad_weekday(self):
        with pytest.raises(ConfigurationError, match="WEEKDAY"):
            _settings(weekly_digest_weekday="someday")

    def test_scheduler_requires_webhook(self):
        with pytest.raises(ConfigurationError, match="EXTERNAL_WEBHOOK_URL"):
            _settings(scheduler_enabled=True)

    def test_scheduler_with_webhook(self):
        s = _settings(scheduler_enabled=True, external_webhook_url="https://hooks.example/x")
        assert s.scheduler_enabled

    def test_rate_limit_positive(self):
        with pytest.raises(ConfigurationError):
            _settings(rate_limit_requests=0)

    def test_errors_are_joined(self):
        with pytest.raises(ConfigurationError) as exc:
            _settings(search_cache_ttl_s=-1, weekly_digest_time="25:00")
        assert ";" in str(exc.value)


class TestHelpers:
    def test_cors_origins_list(self):
        s = _settings(cors_allowed_origins="https://a.example, https://b.example,")
        assert s.cors_allowed_origins_list == ["https://a.example", "https://b.example"]

    def test_cors_empty(self):
        assert _settings().cors_allowed_origins_list == []

# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings.
"""

from __future__ import annotations

import re
from datetime import timedelta
from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TIME_OF_DAY = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === GitHub search ===
    github_search_url: str = "https://api.github.com/search/repositories"
    github_access_token: str = ""
    github_timeout_s: float = 10.0
    github_user_agent: str = "trendscout-agent"

    # === Query parser LLM ===
    llm_provider: str = "google"  # any name in the LLM provider registry
    llm_model: str = "gemini-1.5-flash"
    llm_temperature: float = 0.0
    llm_max_tokens: int = 512
    llm_timeout_s: float = 15.0
    llm_system_prompt: str = ""

    # Provider credentials
    google_api_key: str = ""
    anthropic_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"

    # === Cache ===
    parser_cache_ttl_s: int = 86_400
    search_cache_ttl_s: int = 21_600
    cache_max_entries: int = 0

    # === Delivery ===
    external_webhook_url: str = ""
    webhook_timeout_s: float = 10.0

    # === Scheduler ===
    scheduler_enabled: bool = False
    scheduler_timezone: str = "UTC"
    daily_digest_time: str = "09:00"
    weekly_digest_time: str = "09:00"
    weekly_digest_weekday: str = "mon"

    # === HTTP ===
    host: str = "0.0.0.0"
    port: int = 8000
    cors_allowed_origins: str = ""
    rate_limit_requests: int = 60
    rate_limit_window_s: int = 60

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("cache_max_entries")
    @classmethod
    def validate_cache_max_entries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("cache_max_entries must be >= 0")
        return v

    @field_validator("llm_provider")
    @classmethod
    def normalize_llm_provider(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("weekly_digest_weekday")
    @classmethod
    def normalize_weekday(cls, v: str) -> str:
        return v.strip().lower()[:3]

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.parser_cache_ttl_s <= 0 or self.search_cache_ttl_s <= 0:
            errors.append("Cache TTLs must be positive")

        for name in ("daily_digest_time", "weekly_digest_time"):
            if not _TIME_OF_DAY.match(getattr(self, name)):
                errors.append(f"{name.upper()} must be HH:MM")

        if self.weekly_digest_weekday not in WEEKDAYS:
            errors.append("WEEKLY_DIGEST_WEEKDAY must be one of " + ",".join(WEEKDAYS))

        if self.scheduler_enabled and not self.external_webhook_url:
            errors.append("SCHEDULER_ENABLED requires EXTERNAL_WEBHOOK_URL")

        if self.rate_limit_requests <= 0 or self.rate_limit_window_s <= 0:
            errors.append("Rate limit settings must be positive")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def parser_cache_ttl(self) -> timedelta:
        return timedelta(seconds=self.parser_cache_ttl_s)

    @property
    def search_cache_ttl(self) -> timedelta:
        return timedelta(seconds=self.search_cache_ttl_s)

    @property
    def cors_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins."""
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or one-off runs).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]

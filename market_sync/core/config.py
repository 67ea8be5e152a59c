"""
Settings for the market sync API and worker.

Values resolve in this order (last wins):
1. .env.base                  shared, non-secret defaults
2. .env.{ENVIRONMENT}         per-deployment overrides, kept out of git
3. Process environment        e.g. DASHSCOPE_API_KEY from a k8s Secret
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV = os.getenv("ENVIRONMENT", "development")


class Settings(BaseSettings):
    """Runtime configuration. Field names map to upper-case env vars."""

    model_config = SettingsConfigDict(
        env_file=[".env.base", f".env.{ENV}"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "test", "production"] = "development"

    # Stores
    mongodb_url: str = "mongodb://localhost:27017/market_sync"
    redis_url: str = "redis://localhost:6379"

    # HTTP
    admin_secret: str = "dev-admin-secret-change-in-production"  # sync CronJob header
    allowed_hosts: list[str] = ["*"]
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Advisory service (DashScope); no key means rule-based signals only
    dashscope_api_key: str = ""
    advisory_model: str = "qwen-plus"
    advisory_timeout_seconds: float = Field(20.0, gt=0)

    # Simulated feed
    price_volatility: float = Field(0.02, gt=0, lt=1)
    volume_min: int = Field(10_000_000, ge=0)
    volume_max: int = Field(110_000_000, gt=0)

    # Max concurrent instrument writes / portfolio syncs per pass
    sync_concurrency: int = Field(10, ge=1)

    # Signals
    signal_rate_limit_requests: int = Field(5, ge=1)
    signal_rate_limit_window_seconds: int = Field(3600, ge=1)
    signal_ttl_hours: int = Field(24, ge=1)
    signal_reasoning_max_length: int = Field(1000, ge=1)

    @model_validator(mode="after")
    def _check_volume_range(self) -> "Settings":
        if self.volume_min >= self.volume_max:
            raise ValueError("volume_min must be lower than volume_max")
        return self

    @property
    def database_name(self) -> str:
        """Database path segment of mongodb_url, without query string."""
        return self.mongodb_url.rsplit("/", 1)[-1].split("?", 1)[0]

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def advisory_enabled(self) -> bool:
        """True when a DashScope key is configured."""
        return bool(self.dashscope_api_key)


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings()

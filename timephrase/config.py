"""Configuration management for the timephrase API and CLI."""

from __future__ import annotations

import logging
from datetime import date
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from timephrase.models import Instant, ResolverConfig


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Resolution defaults
    default_to_past: bool = Field(
        default=True,
        description="Resolve under-specified expressions to the nearest past match",
    )
    monday_starts_week: bool = Field(
        default=True, description="Weeks run Monday-Monday instead of Sunday-Sunday"
    )
    pay_period_length: int = Field(default=14, ge=1, description="Pay period length in days")
    pay_period_start: date | None = Field(
        default=None, description="First day of any pay period, anchors the cycle"
    )

    # Server config
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:3001",
        description="Comma-separated CORS origins",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin]

    def resolver_config(self, default_to_past: bool | None = None) -> ResolverConfig:
        """Build the resolver options, optionally overriding the direction."""
        anchor = None
        if self.pay_period_start is not None:
            start = self.pay_period_start
            anchor = Instant(start.year, start.month, start.day)
        return ResolverConfig(
            default_to_past=self.default_to_past if default_to_past is None else default_to_past,
            monday_starts_week=self.monday_starts_week,
            pay_period_length=self.pay_period_length,
            pay_period_start=anchor,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure application logging."""
    if settings is None:
        settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Suppress verbose third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

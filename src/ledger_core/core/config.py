# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Configuration management using Pydantic Settings."""

import logging
from datetime import timedelta
from decimal import Decimal

from beartype import beartype
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings with immutable configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_CORE_",
        env_file=None,
        env_file_encoding="utf-8",
        frozen=True,  # Immutable settings
        validate_default=True,
        extra="forbid",
    )

    app_name: str = Field(
        default="Ledger Core",
        description="Application name",
        min_length=1,
    )
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Deployment environment",
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level",
    )

    # Insurance rules
    min_coverage_amount: Decimal = Field(
        default=Decimal("1000"),
        gt=Decimal("0"),
        description="Minimum coverage amount accepted on policy creation",
    )
    min_premium_amount: Decimal = Field(
        default=Decimal("100"),
        gt=Decimal("0"),
        description="Minimum premium accepted on policy creation",
    )

    # Supply chain rules
    quality_check_interval_hours: int = Field(
        default=24,
        ge=0,
        le=24 * 30,
        description="Minimum hours between two quality checks of a product",
    )
    service_identity: str = Field(
        default="system",
        min_length=1,
        max_length=100,
        description="Identity recorded as createdBy when a caller supplies none",
    )

    @field_validator("min_premium_amount")
    @classmethod
    def validate_premium_floor(
        cls: type["Settings"], v: Decimal, info: ValidationInfo
    ) -> Decimal:
        """Ensure the premium floor does not exceed the coverage floor."""
        if "min_coverage_amount" in info.data:
            coverage_floor = info.data["min_coverage_amount"]
            if v > coverage_floor:
                raise ValueError(
                    f"min_premium_amount ({v}) must be <= "
                    f"min_coverage_amount ({coverage_floor})"
                )
        return v

    @property
    @beartype
    def quality_check_interval(self) -> timedelta:
        """Quality check interval as a timedelta."""
        return timedelta(hours=self.quality_check_interval_hours)

    @property
    @beartype
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return logging.getLevelName(self.log_level)

    @property
    @beartype
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


_settings: Settings | None = None


@beartype
def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


@beartype
def clear_settings_cache() -> None:
    """Clear settings cache (for testing)."""
    global _settings
    _settings = None

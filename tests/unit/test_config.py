"""Unit tests for settings, logging helpers, the clock and result types."""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from ledger_core.core.clock import epoch_millis
from ledger_core.core.config import Settings, clear_settings_cache, get_settings
from ledger_core.core.errors import EntityError, EntityOperationError, ErrorCode
from ledger_core.core.logging_utils import get_logger
from ledger_core.core.result_types import Err, Ok
from tests.fixtures.clock import ManualClock


class TestSettings:
    """Environment-driven, immutable configuration."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.min_coverage_amount == Decimal("1000")
        assert settings.min_premium_amount == Decimal("100")
        assert settings.quality_check_interval == timedelta(hours=24)
        assert settings.service_identity == "system"
        assert settings.log_level_value == logging.INFO
        assert settings.is_production is False

    def test_environment_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LEDGER_CORE_QUALITY_CHECK_INTERVAL_HOURS", "6")
        monkeypatch.setenv("LEDGER_CORE_ENVIRONMENT", "production")

        settings = Settings()

        assert settings.quality_check_interval == timedelta(hours=6)
        assert settings.is_production is True

    def test_settings_are_frozen(self) -> None:
        settings = Settings()

        with pytest.raises(ValidationError):
            settings.service_identity = "other"  # type: ignore[misc]

    def test_premium_floor_above_coverage_floor_rejected(self) -> None:
        with pytest.raises(ValidationError, match="min_premium_amount"):
            Settings(min_coverage_amount=Decimal("500"), min_premium_amount=Decimal("600"))

    def test_invalid_environment_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(environment="qa")

    def test_get_settings_is_cached(self) -> None:
        first = get_settings()

        assert get_settings() is first
        clear_settings_cache()
        assert get_settings() is not first


class TestLogging:
    """Loggers live under the ledger_core namespace."""

    def test_logger_namespace(self) -> None:
        assert get_logger("services.policy").name == "ledger_core.services.policy"
        assert get_logger("ledger_core.dispatch").name == "ledger_core.dispatch"
        assert get_logger().name == "ledger_core"

    def test_explicit_level(self) -> None:
        logger = get_logger("tests.level", level=logging.DEBUG)

        assert logger.level == logging.DEBUG


class TestManualClock:
    """Deterministic time for tests and replays."""

    def test_advance_and_set(self) -> None:
        clock = ManualClock(datetime(2025, 1, 1))

        assert clock().tzinfo is timezone.utc
        assert clock.advance(timedelta(hours=1)) == datetime(2025, 1, 1, 1, tzinfo=timezone.utc)
        clock.set(datetime(2026, 1, 1))
        assert clock() == datetime(2026, 1, 1, tzinfo=timezone.utc)

    def test_epoch_millis(self) -> None:
        assert epoch_millis(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)) == 1000


class TestResultTypes:
    """Ok/Err helpers."""

    def test_ok_helpers(self) -> None:
        result = Ok(2)

        assert result.is_ok() and not result.is_err()
        assert result.map(lambda value: value * 3) == Ok(6)
        assert result.and_then(lambda value: Err(value)) == Err(2)
        assert result.unwrap_or(0) == 2

    def test_err_unwrap_raises_operation_error(self) -> None:
        result = Err(EntityError.not_found("policy POL-1 does not exist"))

        with pytest.raises(EntityOperationError) as exc_info:
            result.unwrap()

        assert exc_info.value.code == ErrorCode.NOT_FOUND
        assert str(exc_info.value) == "NOT_FOUND: policy POL-1 does not exist"
        assert result.map(lambda value: value) is result
        assert result.unwrap_or(5) == 5

    def test_err_with_plain_value(self) -> None:
        with pytest.raises(ValueError, match="Called unwrap on Err"):
            Err("boom").unwrap()

"""Unit tests for derived values."""

from datetime import timedelta
from decimal import Decimal
from typing import Any

import pytest

from ledger_core.engine import derived
from ledger_core.models import (
    ConsentRecord,
    ConsentStatus,
    Policy,
    PolicyCreate,
    Product,
    ProductCreate,
    QualityCheckStatus,
    StorageRequirement,
)
from tests.fixtures.test_data import START, LedgerDataFactory


def _policy(claims: list[dict[str, Any]]) -> Policy:
    payload = PolicyCreate.model_validate(LedgerDataFactory.policy_payload())
    return Policy.model_validate(
        {
            **payload.model_dump(),
            "claims": claims,
            "created_at": START,
            "last_updated": START,
        }
    )


def _claim(claim_id: str, amount: int, status: str) -> dict[str, Any]:
    return {
        "claimId": claim_id,
        "dateSubmitted": START.isoformat(),
        "amount": amount,
        "status": status,
    }


def _product() -> Product:
    payload = ProductCreate.model_validate(LedgerDataFactory.product_payload())
    return Product.model_validate(
        {
            **payload.model_dump(exclude={"created_by"}),
            "status": "manufactured",
            "created_at": START,
            "last_updated": START,
            "created_by": "system",
        }
    )


class TestCoverage:
    """Only APPROVED claims reduce coverage."""

    def test_pending_and_rejected_ignored(self) -> None:
        policy = _policy(
            [
                _claim("CLM-1", 1000, "APPROVED"),
                _claim("CLM-2", 1500, "PENDING"),
                _claim("CLM-3", 2000, "REJECTED"),
            ]
        )

        assert derived.approved_claims_total(policy) == Decimal("1000")
        assert derived.remaining_coverage(policy) == Decimal("4000")

    def test_never_negative(self) -> None:
        """Approved totals above coverage clamp at zero."""
        policy = _policy(
            [_claim("CLM-1", 4000, "APPROVED"), _claim("CLM-2", 3000, "APPROVED")]
        )

        assert derived.remaining_coverage(policy) == Decimal("0")


class TestValidity:
    """Remaining days and expiry relative to the end date."""

    def test_partial_day_rounds_up(self) -> None:
        policy = _policy([])
        now = policy.end_date - timedelta(days=2, hours=3)

        assert derived.remaining_validity_days(policy, now) == 3

    def test_floored_at_zero_after_end(self) -> None:
        policy = _policy([])
        now = policy.end_date + timedelta(days=5)

        assert derived.remaining_validity_days(policy, now) == 0
        assert derived.is_policy_expired(policy, now) is True

    def test_not_expired_at_end_instant(self) -> None:
        """Expiry is strictly after the end date."""
        policy = _policy([])

        assert derived.is_policy_expired(policy, policy.end_date) is False


class TestStorageCompliance:
    """Inclusive bounds on temperature and humidity."""

    @pytest.fixture
    def storage(self) -> StorageRequirement:
        return StorageRequirement.model_validate(LedgerDataFactory.storage())

    @pytest.mark.parametrize(
        ("temperature", "humidity", "expected"),
        [
            (2.0, 30.0, True),
            (8.0, 60.0, True),
            (5.0, 45.0, True),
            (1.99, 45.0, False),
            (8.01, 45.0, False),
            (5.0, 29.9, False),
            (5.0, 60.1, False),
        ],
    )
    def test_bounds(
        self,
        storage: StorageRequirement,
        temperature: float,
        humidity: float,
        expected: bool,
    ) -> None:
        assert derived.is_storage_compliant(storage, temperature, humidity) is expected

    def test_quality_status_follows_compliance(self, storage: StorageRequirement) -> None:
        assert derived.quality_status(storage, 5.0, 45.0) == QualityCheckStatus.PASSED
        assert derived.quality_status(storage, 12.0, 45.0) == QualityCheckStatus.FAILED


class TestProductValues:
    """Value, age and expiry of a product."""

    def test_total_value(self) -> None:
        assert derived.total_value(_product()) == Decimal("1250")

    def test_age_in_whole_days(self) -> None:
        """Manufactured ten days before START."""
        product = _product()

        assert derived.product_age_days(product, START) == 10
        assert derived.product_age_days(product, START + timedelta(hours=23)) == 10

    def test_expiry(self) -> None:
        product = _product()

        assert derived.is_product_expired(product, START) is False
        assert derived.is_product_expired(product, product.expiry_date + timedelta(seconds=1))


class TestConsent:
    """Active consents are ACTIVE and inside their window."""

    def test_window_and_status(self) -> None:
        consent = ConsentRecord.model_validate(LedgerDataFactory.consent_payload())
        revoked = consent.model_copy(update={"status": ConsentStatus.REVOKED})

        assert derived.is_consent_active(consent, START) is True
        assert derived.is_consent_active(consent, START + timedelta(days=31)) is False
        assert derived.is_consent_active(revoked, START) is False

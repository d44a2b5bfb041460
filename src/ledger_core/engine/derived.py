"""Derived values computed on demand from a document's sub-records."""

import math
from datetime import datetime
from decimal import Decimal

from beartype import beartype

from ..models.patient import ConsentRecord, ConsentStatus, Patient
from ..models.policy import ClaimStatus, Policy
from ..models.product import Product, QualityCheckStatus, StorageRequirement

Number = int | float | Decimal

_SECONDS_PER_DAY = 24 * 60 * 60


@beartype
def approved_claims_total(policy: Policy) -> Decimal:
    """Sum of the amounts of APPROVED claims."""
    return sum(
        (claim.amount for claim in policy.claims if claim.status == ClaimStatus.APPROVED),
        Decimal("0"),
    )


@beartype
def remaining_coverage(policy: Policy) -> Decimal:
    """Coverage minus approved claims, never below zero."""
    return max(policy.coverage_amount - approved_claims_total(policy), Decimal("0"))


@beartype
def remaining_validity_days(policy: Policy, now: datetime) -> int:
    """Whole days left until the policy ends, rounded up, never below zero."""
    seconds = (policy.end_date - now).total_seconds()
    return max(math.ceil(seconds / _SECONDS_PER_DAY), 0)


@beartype
def is_policy_expired(policy: Policy, now: datetime) -> bool:
    return now > policy.end_date


@beartype
def is_storage_compliant(
    storage: StorageRequirement, temperature: Number, humidity: Number
) -> bool:
    """Inclusive bounds check on temperature and humidity."""
    return (
        storage.min_temp <= temperature <= storage.max_temp
        and storage.min_humidity <= humidity <= storage.max_humidity
    )


@beartype
def quality_status(
    storage: StorageRequirement, temperature: Number, humidity: Number
) -> QualityCheckStatus:
    if is_storage_compliant(storage, temperature, humidity):
        return QualityCheckStatus.PASSED
    return QualityCheckStatus.FAILED


@beartype
def is_product_expired(product: Product, now: datetime) -> bool:
    return now > product.expiry_date


@beartype
def total_value(product: Product) -> Decimal:
    return product.unit_price * product.quantity


@beartype
def product_age_days(product: Product, now: datetime) -> int:
    """Whole days elapsed since manufacture."""
    return math.floor((now - product.manufacture_date).total_seconds() / _SECONDS_PER_DAY)


@beartype
def is_consent_active(consent: ConsentRecord, now: datetime) -> bool:
    """ACTIVE and ``now`` inside the validity window."""
    return (
        consent.status == ConsentStatus.ACTIVE
        and consent.valid_from <= now <= consent.valid_until
    )


@beartype
def active_consents(patient: Patient, now: datetime) -> list[ConsentRecord]:
    return [entry for entry in patient.consent if is_consent_active(entry, now)]

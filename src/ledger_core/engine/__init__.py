"""Entity validation and state-machine engine.

Everything in this package is pure: rules, transition guards and derived
values take documents in and return values or ``Result``s, never touching
the ledger.
"""

from .derived import (
    active_consents,
    approved_claims_total,
    is_consent_active,
    is_policy_expired,
    is_product_expired,
    is_storage_compliant,
    product_age_days,
    quality_status,
    remaining_coverage,
    remaining_validity_days,
    total_value,
)
from .rules import (
    MIN_COVERAGE,
    MIN_PREMIUM,
    QUALITY_CHECK_INTERVAL,
    check_distributor_allowed,
    check_quality_check_interval,
    parse_payload,
    validate_claim_submission,
    validate_policy_amounts,
    validate_policy_create,
    validate_policy_dates,
    validate_product_create,
    validate_storage,
)
from .state_machine import (
    CLAIM_TRANSITIONS,
    PRODUCT_TRANSITIONS,
    allowed_product_transitions,
    check_claim_transition,
    check_policy_transition,
    check_product_transition,
)

__all__ = [
    "active_consents",
    "approved_claims_total",
    "is_consent_active",
    "is_policy_expired",
    "is_product_expired",
    "is_storage_compliant",
    "product_age_days",
    "quality_status",
    "remaining_coverage",
    "remaining_validity_days",
    "total_value",
    "MIN_COVERAGE",
    "MIN_PREMIUM",
    "QUALITY_CHECK_INTERVAL",
    "check_distributor_allowed",
    "check_quality_check_interval",
    "parse_payload",
    "validate_claim_submission",
    "validate_policy_amounts",
    "validate_policy_create",
    "validate_policy_dates",
    "validate_product_create",
    "validate_storage",
    "CLAIM_TRANSITIONS",
    "PRODUCT_TRANSITIONS",
    "allowed_product_transitions",
    "check_claim_transition",
    "check_policy_transition",
    "check_product_transition",
]

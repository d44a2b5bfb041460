"""Validation rules for proposed entity mutations.

Pure predicates over payloads and stored documents. No I/O, no clock reads:
the caller passes ``now`` and the configured limits in.
"""

from collections.abc import Mapping
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Final, TypeVar

from beartype import beartype
from pydantic import BaseModel, ValidationError

from ..core.errors import EntityError, ErrorCode
from ..core.result_types import Err, Ok, Result
from ..models.policy import ClaimSubmission, Policy, PolicyCreate, PolicyStatus
from ..models.product import (
    Product,
    ProductCreate,
    ProductStatus,
    StorageRequirement,
)
from .derived import approved_claims_total, quality_status

MIN_COVERAGE: Final = Decimal("1000")
MIN_PREMIUM: Final = Decimal("100")
QUALITY_CHECK_INTERVAL: Final = timedelta(hours=24)

ModelT = TypeVar("ModelT", bound=BaseModel)


@beartype
def parse_payload(
    model: type[ModelT], data: Mapping[str, Any] | BaseModel
) -> Result[ModelT, EntityError]:
    """Validate caller input into ``model``, tagging failures as validation errors."""
    if isinstance(data, model):
        return Ok(data)
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True)
    try:
        return Ok(model.model_validate(data))
    except ValidationError as exc:
        return Err(EntityError.from_validation_error(exc))


# ---------------------------------------------------------------------------
# Insurance
# ---------------------------------------------------------------------------


@beartype
def validate_policy_amounts(
    coverage_amount: Decimal,
    premium: Decimal,
    *,
    min_coverage: Decimal = MIN_COVERAGE,
    min_premium: Decimal = MIN_PREMIUM,
) -> Result[None, EntityError]:
    """Coverage and premium floors, and premium not above coverage."""
    if coverage_amount < min_coverage:
        return Err(
            EntityError.validation(
                f"Coverage amount must be at least {min_coverage}", "coverageAmount"
            )
        )
    if premium < min_premium:
        return Err(
            EntityError.validation(
                f"Premium must be at least {min_premium}", "premium"
            )
        )
    if premium > coverage_amount:
        return Err(
            EntityError.validation(
                "Premium cannot be greater than coverage amount", "premium"
            )
        )
    return Ok(None)


@beartype
def validate_policy_dates(
    start_date: datetime,
    end_date: datetime,
    status: PolicyStatus,
    *,
    now: datetime,
) -> Result[None, EntityError]:
    """End after start; a PENDING policy may not start in the past."""
    if end_date <= start_date:
        return Err(
            EntityError.validation("End date must be after start date", "endDate")
        )
    if status == PolicyStatus.PENDING and start_date < now:
        return Err(
            EntityError.validation(
                "Start date cannot be in the past for new policies", "startDate"
            )
        )
    return Ok(None)


@beartype
def validate_policy_create(
    payload: PolicyCreate,
    *,
    now: datetime,
    min_coverage: Decimal = MIN_COVERAGE,
    min_premium: Decimal = MIN_PREMIUM,
) -> Result[PolicyCreate, EntityError]:
    """All create-time invariants of a policy."""
    amounts = validate_policy_amounts(
        payload.coverage_amount,
        payload.premium,
        min_coverage=min_coverage,
        min_premium=min_premium,
    )
    if isinstance(amounts, Err):
        return amounts

    dates = validate_policy_dates(
        payload.start_date, payload.end_date, payload.status, now=now
    )
    if isinstance(dates, Err):
        return dates

    return Ok(payload)


@beartype
def validate_claim_submission(
    policy: Policy, submission: ClaimSubmission
) -> Result[ClaimSubmission, EntityError]:
    """A claim is admissible only on an active policy with enough coverage left.

    Coverage is checked against the APPROVED total at submission time only.
    Pending claims are not counted, and approving a claim later does not
    re-check the total.
    """
    if policy.status != PolicyStatus.ACTIVE:
        return Err(
            EntityError.invalid_state(
                f"Claims can only be added to active policies "
                f"(policy is {policy.status.value})"
            )
        )

    approved = approved_claims_total(policy)
    if approved + submission.amount > policy.coverage_amount:
        return Err(
            EntityError(
                ErrorCode.COVERAGE_EXCEEDED,
                f"Claim amount {submission.amount} exceeds remaining coverage "
                f"({policy.coverage_amount - approved} of {policy.coverage_amount})",
                "amount",
            )
        )
    return Ok(submission)


# ---------------------------------------------------------------------------
# Supply chain
# ---------------------------------------------------------------------------


@beartype
def validate_storage(storage: StorageRequirement) -> Result[StorageRequirement, EntityError]:
    if storage.min_temp >= storage.max_temp:
        return Err(EntityError.validation("Invalid temperature range", "storage.minTemp"))
    if storage.min_humidity >= storage.max_humidity:
        return Err(
            EntityError.validation("Invalid humidity range", "storage.minHumidity")
        )
    return Ok(storage)


@beartype
def validate_product_create(payload: ProductCreate) -> Result[ProductCreate, EntityError]:
    """All create-time invariants of a product."""
    if payload.quantity <= 0:
        return Err(
            EntityError.validation(
                "Quantity and unit price must be positive numbers", "quantity"
            )
        )
    if payload.unit_price <= 0:
        return Err(
            EntityError.validation(
                "Quantity and unit price must be positive numbers", "unitPrice"
            )
        )
    if payload.expiry_date <= payload.manufacture_date:
        return Err(
            EntityError.validation(
                "Expiry date must be after manufacture date", "expiryDate"
            )
        )

    storage = validate_storage(payload.storage)
    if isinstance(storage, Err):
        return storage

    return Ok(payload)


@beartype
def check_distributor_allowed(product: Product) -> Result[Product, EntityError]:
    if product.status != ProductStatus.MANUFACTURED:
        return Err(
            EntityError.invalid_state(
                f"Can only add distributor to manufactured products "
                f"(product is {product.status.value})"
            )
        )
    return Ok(product)


@beartype
def check_quality_check_interval(
    product: Product,
    check_date: datetime,
    *,
    interval: timedelta = QUALITY_CHECK_INTERVAL,
) -> Result[datetime, EntityError]:
    """Enforce the minimum spacing between a product's quality checks."""
    if not product.quality:
        return Ok(check_date)

    last_check = product.quality[-1]
    if check_date - last_check.check_date < interval:
        return Err(
            EntityError(
                ErrorCode.RATE_LIMITED,
                "Minimum interval between quality checks not met "
                f"(last check {last_check.quality_check_id} at "
                f"{last_check.check_date.isoformat()})",
                "checkDate",
            )
        )
    return Ok(check_date)


@beartype
def validate_initial_quality(
    payload: ProductCreate,
    *,
    now: datetime,
    interval: timedelta = QUALITY_CHECK_INTERVAL,
) -> Result[ProductCreate, EntityError]:
    """Validate quality checks supplied at registration.

    They must be in date order and spaced by ``interval``. None may be dated
    after ``now``, and each status must match what its readings imply.
    """
    previous: datetime | None = None
    for index, check in enumerate(payload.quality):
        if check.check_date > now:
            return Err(
                EntityError.validation(
                    f"Quality check {check.quality_check_id} is dated in the future",
                    f"quality[{index}].checkDate",
                )
            )
        if previous is not None and check.check_date - previous < interval:
            return Err(
                EntityError(
                    ErrorCode.RATE_LIMITED,
                    "Minimum interval between quality checks not met "
                    f"(check {check.quality_check_id} at {check.check_date.isoformat()})",
                    f"quality[{index}].checkDate",
                )
            )
        expected = quality_status(payload.storage, check.temperature, check.humidity)
        if check.status != expected:
            return Err(
                EntityError.validation(
                    f"Quality check {check.quality_check_id} status must be "
                    f"{expected.value} for its readings",
                    f"quality[{index}].status",
                )
            )
        previous = check.check_date
    return Ok(payload)

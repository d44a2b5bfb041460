"""Status transition graphs for policies, claims and products.

The guards are pure: they take the current and requested status and return
``Ok(requested)`` or an ``Err`` describing the blocked edge. Services apply
the returned status to a new document value only after the guard passes.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from beartype import beartype

from ..core.errors import EntityError
from ..core.result_types import Err, Ok, Result
from ..models.policy import ClaimStatus, PolicyStatus
from ..models.product import ProductStatus

# Directed, no back-edges; expired is terminal.
PRODUCT_TRANSITIONS: Final[Mapping[ProductStatus, frozenset[ProductStatus]]] = (
    MappingProxyType(
        {
            ProductStatus.MANUFACTURED: frozenset(
                {ProductStatus.IN_TRANSIT, ProductStatus.EXPIRED}
            ),
            ProductStatus.IN_TRANSIT: frozenset(
                {ProductStatus.DELIVERED, ProductStatus.EXPIRED}
            ),
            ProductStatus.DELIVERED: frozenset({ProductStatus.EXPIRED}),
            ProductStatus.EXPIRED: frozenset(),
        }
    )
)

# Only pending claims may be decided.
CLAIM_TRANSITIONS: Final[Mapping[ClaimStatus, frozenset[ClaimStatus]]] = (
    MappingProxyType(
        {
            ClaimStatus.PENDING: frozenset(ClaimStatus),
            ClaimStatus.APPROVED: frozenset(),
            ClaimStatus.REJECTED: frozenset(),
        }
    )
)


@beartype
def check_policy_transition(
    current: PolicyStatus, requested: PolicyStatus
) -> Result[PolicyStatus, EntityError]:
    """Validate a policy status change.

    CANCELLED is absorbing and EXPIRED may only move to CLAIMED. Every other
    edge, self-transitions included, is permitted.
    """
    if current == PolicyStatus.CANCELLED:
        return Err(
            EntityError.invalid_transition(current.value, requested.value)
        )
    if current == PolicyStatus.EXPIRED and requested != PolicyStatus.CLAIMED:
        return Err(
            EntityError.invalid_transition(current.value, requested.value)
        )
    return Ok(requested)


@beartype
def check_claim_transition(
    current: ClaimStatus, requested: ClaimStatus
) -> Result[ClaimStatus, EntityError]:
    """Validate a claim decision; a decided claim is an invalid state."""
    if requested not in CLAIM_TRANSITIONS[current]:
        return Err(
            EntityError.invalid_state(
                f"Can only update pending claims (claim is {current.value})"
            )
        )
    return Ok(requested)


@beartype
def check_product_transition(
    current: ProductStatus, requested: ProductStatus
) -> Result[ProductStatus, EntityError]:
    """Validate a product status change against the transition table."""
    if requested not in PRODUCT_TRANSITIONS[current]:
        return Err(
            EntityError.invalid_transition(current.value, requested.value)
        )
    return Ok(requested)


@beartype
def allowed_product_transitions(current: ProductStatus) -> frozenset[ProductStatus]:
    """Statuses reachable from ``current`` in one step."""
    return PRODUCT_TRANSITIONS[current]

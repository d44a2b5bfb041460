"""Insurance policy and claim documents.

``Policy`` is the stored document. ``PolicyCreate`` and ``ClaimSubmission``
are the payloads accepted by the create and submit-claim operations; they
validate shape only, the business invariants live in ``ledger_core.engine``.
"""

from decimal import Decimal
from enum import Enum

from pydantic import Field

from .base import Amount, BaseModelConfig, TrackedDocument, UtcDatetime


class PolicyType(str, Enum):
    """Enumeration of available policy types."""

    HEALTH = "HEALTH"
    VEHICLE = "VEHICLE"
    LIFE = "LIFE"
    PROPERTY = "PROPERTY"


class PolicyStatus(str, Enum):
    """Enumeration of policy lifecycle states."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"
    CLAIMED = "CLAIMED"


class ClaimStatus(str, Enum):
    """Enumeration of claim processing states."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class PolicyTerms(BaseModelConfig):
    """Contract terms attached to a policy."""

    deductible: Amount = Field(default=Decimal("0"), ge=Decimal("0"))
    copayment: Amount = Field(default=Decimal("0"), ge=Decimal("0"))
    exclusions: list[str] = Field(default_factory=list)
    waiting_period: int = Field(
        default=0, ge=0, description="Waiting period in days"
    )
    max_coverage: Amount = Field(default=Decimal("0"), ge=Decimal("0"))


class Claim(BaseModelConfig):
    """Claim embedded in its parent policy."""

    claim_id: str = Field(..., min_length=1, description="System-assigned id")
    date_submitted: UtcDatetime
    amount: Amount = Field(..., ge=Decimal("0"))
    status: ClaimStatus
    description: str = Field(default="", max_length=5000)
    documents: list[str] = Field(default_factory=list)


class ClaimSubmission(BaseModelConfig):
    """Payload for submitting a new claim against a policy."""

    amount: Amount = Field(..., gt=Decimal("0"), description="Amount being claimed")
    description: str = Field(default="", max_length=5000)
    date_submitted: UtcDatetime | None = Field(
        default=None, description="Defaults to the submission time"
    )
    documents: list[str] = Field(default_factory=list)


class PolicyBase(BaseModelConfig):
    """Policy attributes shared by the create payload and the document."""

    policy_id: str = Field(..., min_length=1, max_length=128)
    policy_holder_name: str = Field(..., min_length=1, max_length=200)
    policy_holder_id: str = Field(
        ..., min_length=1, max_length=128, alias="policyHolderID"
    )
    policy_type: PolicyType
    coverage_amount: Amount
    premium: Amount
    start_date: UtcDatetime
    end_date: UtcDatetime
    status: PolicyStatus = Field(default=PolicyStatus.PENDING)
    terms: PolicyTerms | None = None


class PolicyCreate(PolicyBase):
    """Payload for creating a new policy."""


class Policy(PolicyBase, TrackedDocument):
    """Complete policy document as stored on the ledger."""

    claims: list[Claim] = Field(default_factory=list)
    created_at: UtcDatetime

    def find_claim(self, claim_id: str) -> tuple[int, Claim] | None:
        """Locate a claim by id, returning its position and value."""
        for index, claim in enumerate(self.claims):
            if claim.claim_id == claim_id:
                return index, claim
        return None

"""Insurance policy business logic service."""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from beartype import beartype

from ..core.clock import epoch_millis
from ..core.errors import EntityError
from ..core.result_types import Err, Ok, Result
from ..engine import derived, rules
from ..engine.state_machine import check_claim_transition, check_policy_transition
from ..ledger.gateway import LedgerSequence
from ..models.policy import (
    Claim,
    ClaimStatus,
    ClaimSubmission,
    Policy,
    PolicyCreate,
    PolicyStatus,
    PolicyType,
)
from .base import EntityService, Operation, coerce_enum, payload_key


class PolicyService(EntityService[Policy]):
    """Service for policy and claim business logic."""

    entity_name = "policy"
    document_model = Policy

    def _operation_table(self) -> Mapping[str, Operation]:
        return {
            "createInsurancePolicy": self.create,
            "getInsurancePolicy": self.get,
            "updatePolicyStatus": self.update_status,
            "submitClaim": self.submit_claim,
            "updateClaimStatus": self.update_claim_status,
            "addClaimDocument": self.attach_claim_document,
            "getRemainingCoverage": self.remaining_coverage,
            "getRemainingValidity": self.remaining_validity,
            "isPolicyExpired": self.is_expired,
            "getPolicyByHolder": lambda holder_id: Ok(
                self.query_by_holder(holder_id).to_list()
            ),
            "queryPoliciesByType": lambda policy_type: Ok(
                self.query_by_type(policy_type).to_list()
            ),
            "getPolicyHistory": lambda policy_id: Ok(self.history(policy_id).to_list()),
        }

    @beartype
    def create(self, data: Mapping[str, Any] | PolicyCreate) -> Result[Policy, EntityError]:
        """Create a new policy under its ``policyId``."""
        parsed = rules.parse_payload(PolicyCreate, data)
        if isinstance(parsed, Err):
            return self._reject("create_policy", payload_key(data, "policyId"), parsed.error)

        payload = parsed.value
        now = self._now()

        def build() -> Result[Policy, EntityError]:
            checked = rules.validate_policy_create(
                payload,
                now=now,
                min_coverage=self._settings.min_coverage_amount,
                min_premium=self._settings.min_premium_amount,
            )
            if isinstance(checked, Err):
                return checked
            return Ok(
                Policy.model_validate(
                    {
                        **payload.model_dump(),
                        "claims": [],
                        "created_at": now,
                        "last_updated": now,
                    }
                )
            )

        return self._insert("create_policy", payload.policy_id, build)

    @beartype
    def update_status(
        self, policy_id: str, new_status: PolicyStatus | str
    ) -> Result[Policy, EntityError]:
        """Move a policy to ``new_status`` if the transition guard allows it."""
        status = coerce_enum(PolicyStatus, new_status, "status")
        if isinstance(status, Err):
            return self._reject("update_policy_status", policy_id, status.error)

        def change(policy: Policy) -> Result[Policy, EntityError]:
            allowed = check_policy_transition(policy.status, status.value)
            if isinstance(allowed, Err):
                return allowed
            return Ok(policy.model_copy(update={"status": allowed.value}))

        return self._mutate("update_policy_status", policy_id, change)

    @beartype
    def submit_claim(
        self, policy_id: str, claim: Mapping[str, Any] | ClaimSubmission
    ) -> Result[Claim, EntityError]:
        """Append a new PENDING claim to an active policy.

        The claim id is ``CLM-<epoch-ms>-<position>``; two submissions to the
        same policy in the same millisecond still differ by position.
        """
        parsed = rules.parse_payload(ClaimSubmission, claim)
        if isinstance(parsed, Err):
            return self._reject("submit_claim", policy_id, parsed.error)

        submission = parsed.value
        now = self._now()

        def change(policy: Policy) -> Result[Policy, EntityError]:
            admissible = rules.validate_claim_submission(policy, submission)
            if isinstance(admissible, Err):
                return admissible

            new_claim = Claim(
                claim_id=f"CLM-{epoch_millis(now)}-{len(policy.claims) + 1}",
                date_submitted=submission.date_submitted or now,
                amount=submission.amount,
                status=ClaimStatus.PENDING,
                description=submission.description,
                documents=list(submission.documents),
            )
            return Ok(policy.model_copy(update={"claims": [*policy.claims, new_claim]}))

        result = self._mutate("submit_claim", policy_id, change)
        if isinstance(result, Err):
            return result
        return Ok(result.value.claims[-1])

    @beartype
    def update_claim_status(
        self, policy_id: str, claim_id: str, new_status: ClaimStatus | str
    ) -> Result[Claim, EntityError]:
        """Decide a pending claim.

        Coverage is not re-checked here: it was checked when the claim was
        submitted.
        """
        status = coerce_enum(ClaimStatus, new_status, "status")
        if isinstance(status, Err):
            return self._reject("update_claim_status", policy_id, status.error)

        def change(policy: Policy) -> Result[Policy, EntityError]:
            found = policy.find_claim(claim_id)
            if found is None:
                return Err(EntityError.not_found(f"Claim {claim_id} not found", "claimId"))

            index, current = found
            allowed = check_claim_transition(current.status, status.value)
            if isinstance(allowed, Err):
                return allowed

            claims = list(policy.claims)
            claims[index] = current.model_copy(update={"status": allowed.value})
            return Ok(policy.model_copy(update={"claims": claims}))

        result = self._mutate("update_claim_status", policy_id, change)
        if isinstance(result, Err):
            return result
        return Ok(_claim(result.value, claim_id))

    @beartype
    def attach_claim_document(
        self, policy_id: str, claim_id: str, document_id: str
    ) -> Result[Claim, EntityError]:
        """Append a document id to a claim; duplicates are kept."""
        if not document_id.strip():
            return self._reject(
                "attach_claim_document",
                policy_id,
                EntityError.validation("Document id cannot be empty", "documentId"),
            )

        def change(policy: Policy) -> Result[Policy, EntityError]:
            found = policy.find_claim(claim_id)
            if found is None:
                return Err(EntityError.not_found(f"Claim {claim_id} not found", "claimId"))

            index, current = found
            claims = list(policy.claims)
            claims[index] = current.model_copy(
                update={"documents": [*current.documents, document_id]}
            )
            return Ok(policy.model_copy(update={"claims": claims}))

        result = self._mutate("attach_claim_document", policy_id, change)
        if isinstance(result, Err):
            return result
        return Ok(_claim(result.value, claim_id))

    @beartype
    def remaining_coverage(self, policy_id: str) -> Result[Decimal, EntityError]:
        return self.get(policy_id).map(derived.remaining_coverage)

    @beartype
    def remaining_validity(self, policy_id: str) -> Result[int, EntityError]:
        """Whole days until the policy's end date."""
        now = self._now()
        return self.get(policy_id).map(
            lambda policy: derived.remaining_validity_days(policy, now)
        )

    @beartype
    def is_expired(self, policy_id: str) -> Result[bool, EntityError]:
        now = self._now()
        return self.get(policy_id).map(lambda policy: derived.is_policy_expired(policy, now))

    @beartype
    def query_by_holder(self, holder_id: str) -> LedgerSequence[Policy]:
        return self.query_by_field("policyHolderID", holder_id)

    @beartype
    def query_by_type(self, policy_type: PolicyType | str) -> LedgerSequence[Policy]:
        return self.query_by_field("policyType", policy_type)


def _claim(policy: Policy, claim_id: str) -> Claim:
    return next(claim for claim in policy.claims if claim.claim_id == claim_id)

"""Patient record and consent business logic service.

Patient, medical-record and consent statuses are taken as supplied. There
is no transition graph here, unlike policies and products: any status may
follow any other, and the only checks are presence (NOT_FOUND) and payload
shape (VALIDATION_ERROR).
"""

from collections.abc import Mapping
from typing import Any

from beartype import beartype

from ..core.errors import EntityError
from ..core.result_types import Err, Ok, Result
from ..engine import derived, rules
from ..models.patient import (
    ConsentRecord,
    ConsentStatus,
    MedicalRecord,
    Patient,
    PatientCreate,
    PatientStatus,
    PatientUpdate,
)
from .base import EntityService, Operation, payload_key


class PatientService(EntityService[Patient]):
    """Service for patient records and consent grants."""

    entity_name = "patient"
    document_model = Patient

    def _operation_table(self) -> Mapping[str, Operation]:
        return {
            "createPatient": self.create,
            "getPatient": self.get,
            "patientExists": lambda patient_id: Ok(self.exists(patient_id)),
            "updatePatient": self.update,
            "addMedicalRecord": self.append_medical_record,
            "grantConsent": self.grant_consent,
            "revokeConsent": self.revoke_consent,
            "getActiveConsents": self.active_consents,
            "queryPatients": lambda selector: Ok(self.query(selector).to_list()),
            "getPatientHistory": lambda patient_id: Ok(self.history(patient_id).to_list()),
        }

    @beartype
    def create(self, data: Mapping[str, Any] | PatientCreate) -> Result[Patient, EntityError]:
        """Register a new patient as ACTIVE."""
        parsed = rules.parse_payload(PatientCreate, data)
        if isinstance(parsed, Err):
            return self._reject("create_patient", payload_key(data, "patientId"), parsed.error)

        payload = parsed.value
        now = self._now()

        def build() -> Result[Patient, EntityError]:
            return Ok(
                Patient.model_validate(
                    {
                        **payload.model_dump(exclude={"status", "last_updated"}),
                        "status": PatientStatus.ACTIVE,
                        "last_updated": now,
                    }
                )
            )

        return self._insert("create_patient", payload.patient_id, build)

    @beartype
    def update(
        self, patient_id: str, changes: Mapping[str, Any] | PatientUpdate
    ) -> Result[Patient, EntityError]:
        """Replace personal info, insurance info and/or status."""
        parsed = rules.parse_payload(PatientUpdate, changes)
        if isinstance(parsed, Err):
            return self._reject("update_patient", patient_id, parsed.error)

        update = parsed.value.model_dump(exclude_none=True)

        def change(patient: Patient) -> Result[Patient, EntityError]:
            return Ok(Patient.model_validate({**patient.model_dump(), **update}))

        return self._mutate("update_patient", patient_id, change)

    @beartype
    def append_medical_record(
        self, patient_id: str, record: Mapping[str, Any] | MedicalRecord
    ) -> Result[Patient, EntityError]:
        parsed = rules.parse_payload(MedicalRecord, record)
        if isinstance(parsed, Err):
            return self._reject("add_medical_record", patient_id, parsed.error)

        def change(patient: Patient) -> Result[Patient, EntityError]:
            return Ok(
                patient.model_copy(
                    update={"medical_history": [*patient.medical_history, parsed.value]}
                )
            )

        return self._mutate("add_medical_record", patient_id, change)

    @beartype
    def grant_consent(
        self, patient_id: str, consent: Mapping[str, Any] | ConsentRecord
    ) -> Result[Patient, EntityError]:
        """Append a consent entry.

        ``consentId`` uniqueness is the caller's responsibility; a repeated id
        is appended as a second entry.
        """
        parsed = rules.parse_payload(ConsentRecord, consent)
        if isinstance(parsed, Err):
            return self._reject("grant_consent", patient_id, parsed.error)

        def change(patient: Patient) -> Result[Patient, EntityError]:
            return Ok(patient.model_copy(update={"consent": [*patient.consent, parsed.value]}))

        return self._mutate("grant_consent", patient_id, change)

    @beartype
    def revoke_consent(self, patient_id: str, consent_id: str) -> Result[Patient, EntityError]:
        """Mark the first consent entry with ``consent_id`` as REVOKED."""

        def change(patient: Patient) -> Result[Patient, EntityError]:
            found = patient.find_consent(consent_id)
            if found is None:
                return Err(
                    EntityError.not_found(f"Consent {consent_id} not found", "consentId")
                )

            index, entry = found
            consent = list(patient.consent)
            consent[index] = entry.model_copy(update={"status": ConsentStatus.REVOKED})
            return Ok(patient.model_copy(update={"consent": consent}))

        return self._mutate("revoke_consent", patient_id, change)

    @beartype
    def active_consents(self, patient_id: str) -> Result[list[ConsentRecord], EntityError]:
        """Consents that are ACTIVE and inside their validity window now."""
        now = self._now()
        return self.get(patient_id).map(lambda patient: derived.active_consents(patient, now))

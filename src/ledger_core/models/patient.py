"""Patient record and consent documents.

Patient, medical record and consent statuses are caller-supplied values;
unlike policies and products there is no transition graph behind them.
"""

from datetime import date
from enum import Enum

from pydantic import Field, model_validator

from .base import BaseModelConfig, TrackedDocument, UtcDatetime


class PatientStatus(str, Enum):
    """Enumeration of patient lifecycle states."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ARCHIVED = "ARCHIVED"


class MedicalRecordStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PrescriptionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class AccessLevel(str, Enum):
    READ = "READ"
    WRITE = "WRITE"
    FULL = "FULL"


class ConsentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    REVOKED = "REVOKED"
    EXPIRED = "EXPIRED"


class ContactInfo(BaseModelConfig):
    phone: str = ""
    email: str = ""
    address: str = ""


class PersonalInfo(BaseModelConfig):
    """Identifying details of a patient."""

    name: str = Field(..., min_length=1, max_length=200)
    date_of_birth: date
    gender: str = ""
    contact_info: ContactInfo = Field(default_factory=ContactInfo)


class Prescription(BaseModelConfig):
    prescription_id: str = Field(..., min_length=1)
    medication_name: str = Field(..., min_length=1)
    dosage: str = ""
    frequency: str = ""
    start_date: UtcDatetime
    end_date: UtcDatetime
    prescribed_by: str = ""
    status: PrescriptionStatus = PrescriptionStatus.ACTIVE


class MedicalRecord(BaseModelConfig):
    """A single entry of a patient's append-only medical history."""

    record_id: str = Field(..., min_length=1)
    timestamp: UtcDatetime
    doctor_id: str = Field(..., min_length=1)
    diagnosis: str = ""
    treatment: str = ""
    prescriptions: list[Prescription] = Field(default_factory=list)
    attachments: list[str] = Field(default_factory=list)
    status: MedicalRecordStatus = MedicalRecordStatus.ACTIVE
    notes: str | None = None


class InsuranceInfo(BaseModelConfig):
    policy_number: str = ""
    provider: str = ""
    valid_until: UtcDatetime | None = None
    coverage_details: str | None = None


class ConsentRecord(BaseModelConfig):
    """Access grant given by a patient to a third party."""

    consent_id: str = Field(..., min_length=1)
    grantee_name: str = ""
    grantee_id: str = Field(..., min_length=1)
    access_level: AccessLevel = AccessLevel.READ
    valid_from: UtcDatetime
    valid_until: UtcDatetime
    purpose: str = ""
    status: ConsentStatus = ConsentStatus.ACTIVE

    @model_validator(mode="after")
    def validate_window(self) -> "ConsentRecord":
        """Ensure the validity window is not inverted."""
        if self.valid_until < self.valid_from:
            raise ValueError("validUntil must not be before validFrom")
        return self


class PatientCreate(BaseModelConfig):
    """Payload for registering a new patient.

    ``status`` and ``lastUpdated`` are accepted so a full patient document can
    be submitted as-is, but both are overwritten when the patient is created.
    """

    patient_id: str = Field(..., min_length=1, max_length=128)
    personal_info: PersonalInfo
    medical_history: list[MedicalRecord] = Field(default_factory=list)
    insurance_info: InsuranceInfo | None = None
    consent: list[ConsentRecord] = Field(default_factory=list)
    status: str | None = None
    last_updated: UtcDatetime | None = None


class PatientUpdate(BaseModelConfig):
    """Partial update of a patient's descriptive fields.

    All fields are optional to support partial updates. Medical history and
    consent are only changed through their dedicated operations.
    """

    personal_info: PersonalInfo | None = None
    insurance_info: InsuranceInfo | None = None
    status: PatientStatus | None = None

    @model_validator(mode="after")
    def validate_at_least_one_field(self) -> "PatientUpdate":
        """Ensure at least one field is provided for update."""
        if not any(getattr(self, name) is not None for name in type(self).model_fields):
            raise ValueError("At least one field must be provided for update")
        return self


class Patient(TrackedDocument):
    """Complete patient document as stored on the ledger."""

    patient_id: str = Field(..., min_length=1, max_length=128)
    personal_info: PersonalInfo
    medical_history: list[MedicalRecord] = Field(default_factory=list)
    insurance_info: InsuranceInfo | None = None
    consent: list[ConsentRecord] = Field(default_factory=list)
    status: PatientStatus

    def find_consent(self, consent_id: str) -> tuple[int, ConsentRecord] | None:
        """Locate the first consent entry with the given id."""
        for index, entry in enumerate(self.consent):
            if entry.consent_id == consent_id:
                return index, entry
        return None

"""Domain models package for the ledger entity engine.

This package exports all Pydantic documents and payloads with strict
validation, immutability and camelCase JSON aliases.
"""

from .base import Amount, BaseModelConfig, TrackedDocument, UtcDatetime
from .patient import (
    AccessLevel,
    ConsentRecord,
    ConsentStatus,
    ContactInfo,
    InsuranceInfo,
    MedicalRecord,
    MedicalRecordStatus,
    Patient,
    PatientCreate,
    PatientStatus,
    PatientUpdate,
    PersonalInfo,
    Prescription,
    PrescriptionStatus,
)
from .policy import (
    Claim,
    ClaimStatus,
    ClaimSubmission,
    Policy,
    PolicyCreate,
    PolicyStatus,
    PolicyTerms,
    PolicyType,
)
from .product import (
    Distribution,
    Product,
    ProductCreate,
    ProductStatus,
    QualityCheck,
    QualityCheckStatus,
    Retailer,
    StorageCondition,
    StorageRequirement,
)

__all__ = [
    # Base models
    "Amount",
    "BaseModelConfig",
    "TrackedDocument",
    "UtcDatetime",
    # Policy models
    "Claim",
    "ClaimStatus",
    "ClaimSubmission",
    "Policy",
    "PolicyCreate",
    "PolicyStatus",
    "PolicyTerms",
    "PolicyType",
    # Product models
    "Distribution",
    "Product",
    "ProductCreate",
    "ProductStatus",
    "QualityCheck",
    "QualityCheckStatus",
    "Retailer",
    "StorageCondition",
    "StorageRequirement",
    # Patient models
    "AccessLevel",
    "ConsentRecord",
    "ConsentStatus",
    "ContactInfo",
    "InsuranceInfo",
    "MedicalRecord",
    "MedicalRecordStatus",
    "Patient",
    "PatientCreate",
    "PatientStatus",
    "PatientUpdate",
    "PersonalInfo",
    "Prescription",
    "PrescriptionStatus",
]

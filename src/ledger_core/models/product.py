"""Supply-chain product documents."""

from enum import Enum

from pydantic import Field

from .base import Amount, BaseModelConfig, TrackedDocument, UtcDatetime


class ProductStatus(str, Enum):
    """Enumeration of product lifecycle states."""

    MANUFACTURED = "manufactured"
    IN_TRANSIT = "in-transit"
    DELIVERED = "delivered"
    EXPIRED = "expired"


class QualityCheckStatus(str, Enum):
    """Outcome of a quality check."""

    PASSED = "passed"
    FAILED = "failed"
    PENDING = "pending"


class StorageCondition(str, Enum):
    """Storage regime required by a product."""

    ROOM_TEMPERATURE = "room-temperature"
    REFRIGERATED = "refrigerated"
    FROZEN = "frozen"


class StorageRequirement(BaseModelConfig):
    """Temperature and humidity bounds a product must be kept within."""

    condition: StorageCondition
    min_temp: float
    max_temp: float
    min_humidity: float
    max_humidity: float


class Distribution(BaseModelConfig):
    """Hand-off of a product to a distributor."""

    distributor_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    received_date: UtcDatetime
    shipped_date: UtcDatetime
    status: ProductStatus
    location: str = ""


class QualityCheck(BaseModelConfig):
    """Recorded inspection of a product's storage conditions."""

    quality_check_id: str = Field(..., min_length=1)
    check_date: UtcDatetime
    status: QualityCheckStatus
    temperature: float
    humidity: float
    inspector: str
    notes: list[str] = Field(default_factory=list)


class Retailer(BaseModelConfig):
    """Retailer the product was finally delivered to."""

    retailer_id: str = ""
    name: str = ""
    received_date: UtcDatetime | None = None
    location: str = ""
    quantity: int = Field(default=0, ge=0)


class ProductBase(BaseModelConfig):
    """Product attributes shared by the create payload and the document."""

    product_id: str = Field(..., min_length=1, max_length=128)
    product_name: str = Field(..., min_length=1, max_length=200)
    manufacturer: str = Field(..., min_length=1, max_length=200)
    manufacture_date: UtcDatetime
    expiry_date: UtcDatetime
    batch_number: str = Field(default="", max_length=100)
    quantity: int
    unit_price: Amount
    storage: StorageRequirement


class ProductCreate(ProductBase):
    """Payload for registering a new product.

    Quality checks made before registration may be supplied; they are held
    to the same spacing and pass/fail rules as checks added later.
    """

    quality: list[QualityCheck] = Field(default_factory=list)
    created_by: str | None = Field(default=None, max_length=100)


class Product(ProductBase, TrackedDocument):
    """Complete product document as stored on the ledger."""

    status: ProductStatus
    distribution: list[Distribution] = Field(default_factory=list)
    retailer: Retailer | None = None
    quality: list[QualityCheck] = Field(default_factory=list)
    created_at: UtcDatetime
    created_by: str

"""Supply-chain product business logic service."""

import math
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from beartype import beartype

from ..core.clock import epoch_millis
from ..core.errors import EntityError
from ..core.result_types import Err, Ok, Result
from ..engine import derived, rules
from ..engine.state_machine import check_product_transition
from ..ledger.gateway import LedgerSequence
from ..models.product import (
    Distribution,
    Product,
    ProductCreate,
    ProductStatus,
    QualityCheck,
)
from .base import EntityService, Operation, coerce_enum, payload_key

Number = int | float | Decimal


class ProductService(EntityService[Product]):
    """Service for product, distribution and quality-check business logic."""

    entity_name = "product"
    document_model = Product

    def _operation_table(self) -> Mapping[str, Operation]:
        return {
            "createProduct": self.create,
            "getProduct": self.get,
            "productExists": lambda product_id: Ok(self.exists(product_id)),
            "addDistributor": self._add_distributor_from_payload,
            "addQualityCheck": self._add_quality_check_from_payload,
            "updateProductStatus": self.update_status,
            "isStorageCompliant": self.is_storage_compliant,
            "isProductExpired": self.is_expired,
            "getTotalValue": self.total_value,
            "getProductAge": self.product_age,
            "getQualityHistory": self.quality_history,
            "getDistributionHistory": self.distribution_history,
            "queryByManufacturer": lambda manufacturer: Ok(
                self.query_by_manufacturer(manufacturer).to_list()
            ),
            "getProductHistory": lambda product_id: Ok(self.history(product_id).to_list()),
        }

    @beartype
    def create(self, data: Mapping[str, Any] | ProductCreate) -> Result[Product, EntityError]:
        """Register a new product in the ``manufactured`` state."""
        parsed = rules.parse_payload(ProductCreate, data)
        if isinstance(parsed, Err):
            return self._reject("create_product", payload_key(data, "productId"), parsed.error)

        payload = parsed.value
        now = self._now()

        def build() -> Result[Product, EntityError]:
            checked = rules.validate_product_create(payload)
            if isinstance(checked, Err):
                return checked

            inspected = rules.validate_initial_quality(
                payload, now=now, interval=self._settings.quality_check_interval
            )
            if isinstance(inspected, Err):
                return inspected

            fields = payload.model_dump(exclude={"created_by"})
            return Ok(
                Product.model_validate(
                    {
                        **fields,
                        "status": ProductStatus.MANUFACTURED,
                        "distribution": [],
                        "created_at": now,
                        "last_updated": now,
                        "created_by": payload.created_by or self._settings.service_identity,
                    }
                )
            )

        return self._insert("create_product", payload.product_id, build)

    @beartype
    def update_status(
        self, product_id: str, new_status: ProductStatus | str
    ) -> Result[Product, EntityError]:
        status = coerce_enum(ProductStatus, new_status, "status")
        if isinstance(status, Err):
            return self._reject("update_product_status", product_id, status.error)

        def change(product: Product) -> Result[Product, EntityError]:
            allowed = check_product_transition(product.status, status.value)
            if isinstance(allowed, Err):
                return allowed
            return Ok(product.model_copy(update={"status": allowed.value}))

        return self._mutate("update_product_status", product_id, change)

    @beartype
    def add_distributor(
        self, product_id: str, distributor_id: str, name: str, location: str = ""
    ) -> Result[Product, EntityError]:
        """Hand a manufactured product to a distributor.

        Records the distribution and moves the product to ``in-transit``
        through the regular transition guard.
        """
        if not distributor_id.strip() or not name.strip():
            return self._reject(
                "add_distributor",
                product_id,
                EntityError.validation(
                    "Distributor id and name are required", "distributorId"
                ),
            )
        now = self._now()

        def change(product: Product) -> Result[Product, EntityError]:
            allowed = rules.check_distributor_allowed(product)
            if isinstance(allowed, Err):
                return allowed

            moved = check_product_transition(product.status, ProductStatus.IN_TRANSIT)
            if isinstance(moved, Err):
                return moved

            distribution = Distribution(
                distributor_id=distributor_id,
                name=name,
                received_date=now,
                shipped_date=now,
                status=ProductStatus.IN_TRANSIT,
                location=location,
            )
            return Ok(
                product.model_copy(
                    update={
                        "distribution": [*product.distribution, distribution],
                        "status": moved.value,
                    }
                )
            )

        return self._mutate("add_distributor", product_id, change)

    @beartype
    def add_quality_check(
        self,
        product_id: str,
        inspector: str,
        temperature: Number,
        humidity: Number,
        notes: Sequence[str] = (),
    ) -> Result[QualityCheck, EntityError]:
        """Record an inspection; its pass/fail status is derived from storage bounds.

        Failing checks are kept. A check less than the configured interval
        after the previous one is rejected, and so are readings that are not
        finite numbers.
        """
        if not (math.isfinite(temperature) and math.isfinite(humidity)):
            return self._reject(
                "add_quality_check",
                product_id,
                EntityError.validation(
                    "Temperature and humidity must be finite numbers", "temperature"
                ),
            )
        now = self._now()
        interval = self._settings.quality_check_interval

        def change(product: Product) -> Result[Product, EntityError]:
            spaced = rules.check_quality_check_interval(product, now, interval=interval)
            if isinstance(spaced, Err):
                return spaced

            check = QualityCheck(
                quality_check_id=f"QC-{epoch_millis(now)}",
                check_date=now,
                status=derived.quality_status(product.storage, temperature, humidity),
                temperature=float(temperature),
                humidity=float(humidity),
                inspector=inspector,
                notes=list(notes),
            )
            return Ok(product.model_copy(update={"quality": [*product.quality, check]}))

        result = self._mutate("add_quality_check", product_id, change)
        if isinstance(result, Err):
            return result
        return Ok(result.value.quality[-1])

    @beartype
    def is_storage_compliant(
        self, product_id: str, temperature: Number, humidity: Number
    ) -> Result[bool, EntityError]:
        return self.get(product_id).map(
            lambda product: derived.is_storage_compliant(product.storage, temperature, humidity)
        )

    @beartype
    def is_expired(self, product_id: str) -> Result[bool, EntityError]:
        now = self._now()
        return self.get(product_id).map(lambda product: derived.is_product_expired(product, now))

    @beartype
    def total_value(self, product_id: str) -> Result[Decimal, EntityError]:
        return self.get(product_id).map(derived.total_value)

    @beartype
    def product_age(self, product_id: str) -> Result[int, EntityError]:
        """Whole days since manufacture."""
        now = self._now()
        return self.get(product_id).map(lambda product: derived.product_age_days(product, now))

    @beartype
    def quality_history(self, product_id: str) -> Result[list[QualityCheck], EntityError]:
        return self.get(product_id).map(lambda product: list(product.quality))

    @beartype
    def distribution_history(
        self, product_id: str
    ) -> Result[list[Distribution], EntityError]:
        return self.get(product_id).map(lambda product: list(product.distribution))

    @beartype
    def query_by_manufacturer(self, manufacturer: str) -> LedgerSequence[Product]:
        return self.query_by_field("manufacturer", manufacturer)

    def _add_distributor_from_payload(
        self, product_id: str, distributor: Mapping[str, Any]
    ) -> Result[Product, EntityError]:
        return self.add_distributor(
            product_id,
            str(distributor.get("distributorId", "")),
            str(distributor.get("name", "")),
            str(distributor.get("location", "")),
        )

    def _add_quality_check_from_payload(
        self, product_id: str, check: Mapping[str, Any]
    ) -> Result[QualityCheck, EntityError]:
        temperature = check.get("temperature")
        humidity = check.get("humidity")
        if not isinstance(temperature, (int, float)) or not isinstance(humidity, (int, float)):
            return self._reject(
                "add_quality_check",
                product_id,
                EntityError.validation(
                    "Temperature and humidity must be numbers", "temperature"
                ),
            )
        return self.add_quality_check(
            product_id,
            str(check.get("inspector", "")),
            temperature,
            humidity,
            list(check.get("notes") or []),
        )

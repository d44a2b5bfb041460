"""Unit tests for ProductService.

Tests verify:
- Product creation invariants and the ``createdBy`` fallback
- Distributor hand-off and the transition table
- Quality-check spacing, derived status and id format
- Derived values and manufacturer queries
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from ledger_core.core.clock import epoch_millis
from ledger_core.core.config import Settings
from ledger_core.core.errors import ErrorCode
from ledger_core.core.result_types import Err, Ok
from ledger_core.ledger.memory import InMemoryLedger
from ledger_core.models import Product, ProductStatus, QualityCheckStatus
from ledger_core.services import ProductService
from tests.fixtures.clock import ManualClock
from tests.fixtures.test_data import START, LedgerDataFactory


class TestCreateProduct:
    """Product registration rules."""

    def test_create_success(self, product_service: ProductService) -> None:
        result = product_service.create(LedgerDataFactory.product_payload())

        assert isinstance(result, Ok)
        product = result.value
        assert product.status == ProductStatus.MANUFACTURED
        assert product.distribution == []
        assert product.quality == []
        assert product.created_by == "system"
        assert product.created_at == START

    def test_created_by_from_payload(self, product_service: ProductService) -> None:
        product = product_service.create(
            LedgerDataFactory.product_payload(createdBy="plant-7")
        ).unwrap()

        assert product.created_by == "plant-7"

    def test_created_by_from_settings(
        self, ledger: InMemoryLedger, clock: ManualClock
    ) -> None:
        """The configured service identity is the fallback creator."""
        service = ProductService(
            ledger, settings=Settings(service_identity="factory-line"), clock=clock
        )

        product = service.create(LedgerDataFactory.product_payload()).unwrap()

        assert product.created_by == "factory-line"

    def test_duplicate_key(self, product_service: ProductService, product: Product) -> None:
        result = product_service.create(LedgerDataFactory.product_payload())

        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.DUPLICATE_KEY

    def test_earlier_quality_checks_kept(self, product_service: ProductService) -> None:
        """Checks made before registration are stored and count for spacing."""
        product = product_service.create(
            LedgerDataFactory.product_payload(
                quality=[
                    LedgerDataFactory.quality_check_payload(when=START - timedelta(days=3)),
                    LedgerDataFactory.quality_check_payload(
                        "QC-PRE-2",
                        START - timedelta(days=1),
                        temperature=12.0,
                        status="failed",
                    ),
                ]
            )
        ).unwrap()

        later = product_service.add_quality_check(product.product_id, "QA-1", 5.0, 45.0)

        assert [check.status for check in product.quality] == [
            QualityCheckStatus.PASSED,
            QualityCheckStatus.FAILED,
        ]
        assert isinstance(later, Ok)
        assert len(product_service.quality_history(product.product_id).unwrap()) == 3

    @pytest.mark.parametrize(
        ("quality", "code", "field"),
        [
            (
                [
                    LedgerDataFactory.quality_check_payload(when=START - timedelta(hours=2)),
                    LedgerDataFactory.quality_check_payload(
                        "QC-PRE-2", START - timedelta(hours=1)
                    ),
                ],
                ErrorCode.RATE_LIMITED,
                "quality[1].checkDate",
            ),
            (
                [LedgerDataFactory.quality_check_payload(when=START + timedelta(hours=1))],
                ErrorCode.VALIDATION_ERROR,
                "quality[0].checkDate",
            ),
            (
                [LedgerDataFactory.quality_check_payload(temperature=12.0)],
                ErrorCode.VALIDATION_ERROR,
                "quality[0].status",
            ),
        ],
    )
    def test_earlier_quality_checks_follow_rules(
        self,
        product_service: ProductService,
        quality: list[dict[str, object]],
        code: ErrorCode,
        field: str,
    ) -> None:
        result = product_service.create(LedgerDataFactory.product_payload(quality=quality))

        assert isinstance(result, Err)
        assert result.error.code == code
        assert result.error.field == field
        assert product_service.exists("PRD-001") is False

        assert result.error.code == ErrorCode.DUPLICATE_KEY

    @pytest.mark.parametrize(
        ("overrides", "field"),
        [
            ({"manufacturer": ""}, "manufacturer"),
            ({"quantity": -1}, "quantity"),
            ({"storage": LedgerDataFactory.storage(minTemp=9.0)}, "storage.minTemp"),
        ],
    )
    def test_invalid_product(
        self,
        product_service: ProductService,
        overrides: dict[str, object],
        field: str,
    ) -> None:
        result = product_service.create(LedgerDataFactory.product_payload(**overrides))

        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert result.error.field == field
        assert product_service.exists("PRD-001") is False


class TestDistribution:
    """Hand-off to a distributor and later status moves."""

    def test_add_distributor_moves_in_transit(
        self, product_service: ProductService, product: Product
    ) -> None:
        updated = product_service.add_distributor(
            product.product_id, "DIST-1", "Cold Chain Co", "Rotterdam"
        ).unwrap()

        assert updated.status == ProductStatus.IN_TRANSIT
        assert len(updated.distribution) == 1
        entry = updated.distribution[0]
        assert entry.distributor_id == "DIST-1"
        assert entry.status == ProductStatus.IN_TRANSIT
        assert entry.received_date == START
        assert entry.shipped_date == START

    def test_second_distributor_is_invalid_state(
        self, product_service: ProductService, product: Product
    ) -> None:
        product_service.add_distributor(product.product_id, "DIST-1", "Cold Chain Co")

        result = product_service.add_distributor(product.product_id, "DIST-2", "Other")

        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.INVALID_STATE
        stored = product_service.get(product.product_id).unwrap()
        assert len(stored.distribution) == 1

    def test_distributor_requires_name(
        self, product_service: ProductService, product: Product
    ) -> None:
        result = product_service.add_distributor(product.product_id, "DIST-1", "  ")

        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.VALIDATION_ERROR

    def test_status_follows_table(
        self, product_service: ProductService, product: Product
    ) -> None:
        product_service.add_distributor(product.product_id, "DIST-1", "Cold Chain Co")

        delivered = product_service.update_status(product.product_id, "delivered")
        back = product_service.update_status(product.product_id, ProductStatus.IN_TRANSIT)

        assert isinstance(delivered, Ok)
        assert isinstance(back, Err)
        assert back.error.code == ErrorCode.INVALID_TRANSITION

    def test_unknown_status_value(
        self, product_service: ProductService, product: Product
    ) -> None:
        result = product_service.update_status(product.product_id, "lost")

        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.VALIDATION_ERROR


class TestQualityChecks:
    """Spacing, derived status and identifiers of quality checks."""

    def test_check_records_passed_status(
        self, product_service: ProductService, product: Product, clock: ManualClock
    ) -> None:
        check = product_service.add_quality_check(
            product.product_id, "QA-1", 5.0, 45.0, ["seal intact"]
        ).unwrap()

        assert check.status == QualityCheckStatus.PASSED
        assert check.quality_check_id == f"QC-{epoch_millis(clock())}"
        assert check.check_date == START
        assert check.notes == ["seal intact"]

    def test_failing_check_is_retained(
        self, product_service: ProductService, product: Product
    ) -> None:
        check = product_service.add_quality_check(
            product.product_id, "QA-1", 12.0, 45.0
        ).unwrap()

        assert check.status == QualityCheckStatus.FAILED
        assert product_service.quality_history(product.product_id) == Ok([check])

    def test_interval_enforced(
        self, product_service: ProductService, product: Product, clock: ManualClock
    ) -> None:
        """A second check inside 24h is rate limited, at 24h it succeeds."""
        product_service.add_quality_check(product.product_id, "QA-1", 5.0, 45.0).unwrap()

        clock.advance(timedelta(hours=23, minutes=59))
        too_soon = product_service.add_quality_check(product.product_id, "QA-1", 5.0, 45.0)

        clock.advance(timedelta(minutes=1))
        on_time = product_service.add_quality_check(product.product_id, "QA-1", 9.0, 45.0)

        assert isinstance(too_soon, Err)
        assert too_soon.error.code == ErrorCode.RATE_LIMITED
        assert isinstance(on_time, Ok)
        assert on_time.value.status == QualityCheckStatus.FAILED
        assert len(product_service.get(product.product_id).unwrap().quality) == 2

    def test_interval_from_settings(
        self, ledger: InMemoryLedger, clock: ManualClock, product: Product
    ) -> None:
        service = ProductService(
            ledger, settings=Settings(quality_check_interval_hours=1), clock=clock
        )
        service.add_quality_check(product.product_id, "QA-1", 5.0, 45.0).unwrap()

        clock.advance(timedelta(hours=1))

        assert isinstance(service.add_quality_check(product.product_id, "QA-1", 5.0, 45.0), Ok)

    @pytest.mark.parametrize(
        ("temperature", "humidity"),
        [(float("nan"), 45.0), (5.0, float("inf")), (float("-inf"), float("nan"))],
    )
    def test_non_finite_reading_rejected(
        self,
        product_service: ProductService,
        product: Product,
        temperature: float,
        humidity: float,
    ) -> None:
        """A bad reading is refused and the product stays readable."""
        result = product_service.add_quality_check(
            product.product_id, "QA-1", temperature, humidity
        )

        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert product_service.get(product.product_id) == Ok(product)

    def test_missing_product(self, product_service: ProductService) -> None:
        result = product_service.add_quality_check("PRD-404", "QA-1", 5.0, 45.0)

        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.NOT_FOUND


class TestProductReads:
    """Derived values and queries."""

    def test_storage_compliance(
        self, product_service: ProductService, product: Product
    ) -> None:
        assert product_service.is_storage_compliant(product.product_id, 2.0, 60.0) == Ok(True)
        assert product_service.is_storage_compliant(product.product_id, 1.5, 45.0) == Ok(
            False
        )

    def test_value_age_and_expiry(
        self, product_service: ProductService, product: Product, clock: ManualClock
    ) -> None:
        assert product_service.total_value(product.product_id) == Ok(Decimal("1250"))
        assert product_service.product_age(product.product_id) == Ok(10)
        assert product_service.is_expired(product.product_id) == Ok(False)

        clock.set(product.expiry_date + timedelta(days=1))

        assert product_service.is_expired(product.product_id) == Ok(True)

    def test_distribution_history(
        self, product_service: ProductService, product: Product
    ) -> None:
        product_service.add_distributor(product.product_id, "DIST-1", "Cold Chain Co")

        history = product_service.distribution_history(product.product_id).unwrap()

        assert [entry.distributor_id for entry in history] == ["DIST-1"]

    def test_query_by_manufacturer(self, product_service: ProductService) -> None:
        product_service.create(LedgerDataFactory.product_payload(productId="PRD-A"))
        product_service.create(
            LedgerDataFactory.product_payload(productId="PRD-B", manufacturer="Other Labs")
        )

        found = product_service.query_by_manufacturer("Acme Pharma").to_list()

        assert [p.product_id for p in found] == ["PRD-A"]

    def test_history_counts_writes(
        self, product_service: ProductService, product: Product
    ) -> None:
        product_service.add_distributor(product.product_id, "DIST-1", "Cold Chain Co")
        product_service.update_status(product.product_id, "delivered")
        product_service.update_status(product.product_id, "manufactured")

        entries = product_service.history(product.product_id).to_list()

        assert [entry.value.status for entry in entries if entry.value] == [
            ProductStatus.MANUFACTURED,
            ProductStatus.IN_TRANSIT,
            ProductStatus.DELIVERED,
        ]

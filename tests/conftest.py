"""Test configuration and shared fixtures.

Every service under test runs against the in-memory ledger with a manual
clock pinned to ``START`` so timestamps and generated ids are deterministic.
"""

from collections.abc import Generator

import pytest

from ledger_core.core.config import Settings, clear_settings_cache
from ledger_core.core.logging_utils import reset_logging
from ledger_core.dispatch import OperationRegistry, build_registry
from ledger_core.ledger.memory import InMemoryLedger
from ledger_core.models import Patient, Policy, Product
from ledger_core.services import PatientService, PolicyService, ProductService
from tests.fixtures.clock import ManualClock
from tests.fixtures.test_data import START, LedgerDataFactory


@pytest.fixture(autouse=True)
def reset_global_state() -> Generator[None, None, None]:
    """Drop cached settings and logging configuration around each test."""
    clear_settings_cache()
    reset_logging()
    yield
    clear_settings_cache()
    reset_logging()


@pytest.fixture
def clock() -> ManualClock:
    """Clock pinned to the reference time."""
    return ManualClock(START)


@pytest.fixture
def ledger(clock: ManualClock) -> InMemoryLedger:
    """Empty in-memory ledger sharing the test clock."""
    return InMemoryLedger(clock)


@pytest.fixture
def settings() -> Settings:
    """Default engine settings."""
    return Settings()


@pytest.fixture
def policy_service(
    ledger: InMemoryLedger, settings: Settings, clock: ManualClock
) -> PolicyService:
    return PolicyService(ledger, settings=settings, clock=clock)


@pytest.fixture
def product_service(
    ledger: InMemoryLedger, settings: Settings, clock: ManualClock
) -> ProductService:
    return ProductService(ledger, settings=settings, clock=clock)


@pytest.fixture
def patient_service(
    ledger: InMemoryLedger, settings: Settings, clock: ManualClock
) -> PatientService:
    return PatientService(ledger, settings=settings, clock=clock)


@pytest.fixture
def registry(
    ledger: InMemoryLedger, settings: Settings, clock: ManualClock
) -> OperationRegistry:
    return build_registry(ledger, settings=settings, clock=clock)


@pytest.fixture
def active_policy(policy_service: PolicyService) -> Policy:
    """ACTIVE policy POL-001 with coverage 5000 and premium 200."""
    return policy_service.create(LedgerDataFactory.policy_payload()).unwrap()


@pytest.fixture
def product(product_service: ProductService) -> Product:
    """Manufactured product PRD-001 with refrigerated storage."""
    return product_service.create(LedgerDataFactory.product_payload()).unwrap()


@pytest.fixture
def patient(patient_service: PatientService) -> Patient:
    """ACTIVE patient PAT-001 with no history or consent."""
    return patient_service.create(LedgerDataFactory.patient_payload()).unwrap()

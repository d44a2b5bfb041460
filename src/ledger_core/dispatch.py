# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Operation registry binding public operation names to service handlers.

A host RPC layer looks operations up by name and passes the invocation
arguments through. String arguments that hold a JSON object or array are
parsed first; every other argument is passed unchanged.
"""

import json
from collections.abc import Iterable
from typing import Any

from beartype import beartype

from .core.clock import Clock
from .core.config import Settings
from .core.errors import EntityError
from .core.logging_utils import get_logger
from .core.result_types import Err, Ok, Result
from .ledger.gateway import LedgerGateway
from .services.base import EntityService, Operation
from .services.patient_service import PatientService
from .services.policy_service import PolicyService
from .services.product_service import ProductService

logger = get_logger(__name__)


class OperationRegistry:
    """Name -> handler table merged from one or more entity services."""

    def __init__(self, services: Iterable[EntityService[Any]] = ()) -> None:
        self._handlers: dict[str, Operation] = {}
        for service in services:
            self.register(service)

    @beartype
    def register(self, service: EntityService[Any]) -> None:
        """Add every operation of ``service``; names must be unique."""
        for name, handler in service.operations.items():
            if name in self._handlers:
                raise ValueError(f"Operation {name} is already registered")
            self._handlers[name] = handler
        logger.debug(f"Registered {len(service.operations)} {service.entity_name} operations")

    @property
    def names(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    @beartype
    def invoke(self, name: str, *args: Any) -> Result[Any, EntityError]:
        """Call the handler registered as ``name``."""
        handler = self._handlers.get(name)
        if handler is None:
            return Err(EntityError.not_found(f"Unknown operation {name}", "operation"))

        parsed: list[Any] = []
        for position, argument in enumerate(args):
            decoded = _decode_argument(argument, position)
            if isinstance(decoded, Err):
                logger.warning(f"REJECTED {name}: {decoded.error.message}")
                return decoded
            parsed.append(decoded.value)

        return handler(*parsed)


def _decode_argument(argument: Any, position: int) -> Result[Any, EntityError]:
    if not isinstance(argument, str) or not argument.lstrip().startswith(("{", "[")):
        return Ok(argument)
    try:
        return Ok(json.loads(argument))
    except json.JSONDecodeError as exc:
        return Err(
            EntityError.validation(
                f"Argument {position} is not valid JSON: {exc.msg}", f"args[{position}]"
            )
        )


@beartype
def build_registry(
    ledger: LedgerGateway,
    *,
    settings: Settings | None = None,
    clock: Clock | None = None,
) -> OperationRegistry:
    """Registry with the policy, product and patient services over one ledger."""
    return OperationRegistry(
        [
            PolicyService(ledger, settings=settings, clock=clock),
            ProductService(ledger, settings=settings, clock=clock),
            PatientService(ledger, settings=settings, clock=clock),
        ]
    )

# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""LedgerCore - ledger-backed entity validation and state-machine engine."""

__version__ = "0.1.0"

from .core import EntityError, ErrorCode, Err, Ok, Result, Settings, get_settings
from .dispatch import OperationRegistry, build_registry
from .ledger import InMemoryLedger, LedgerGateway
from .services import EntityService, PatientService, PolicyService, ProductService

__all__ = [
    "__version__",
    "EntityError",
    "ErrorCode",
    "Err",
    "Ok",
    "Result",
    "Settings",
    "get_settings",
    "OperationRegistry",
    "build_registry",
    "InMemoryLedger",
    "LedgerGateway",
    "EntityService",
    "PatientService",
    "PolicyService",
    "ProductService",
]

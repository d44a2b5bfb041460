# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Entity service layer."""

from ledger_core.core.result_types import Err, Ok, Result

from .base import EntityService
from .patient_service import PatientService
from .policy_service import PolicyService
from .product_service import ProductService

__all__ = [
    "Result",
    "Ok",
    "Err",
    "EntityService",
    "PolicyService",
    "ProductService",
    "PatientService",
]

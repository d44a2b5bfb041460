# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Core infrastructure components for the ledger entity engine."""

from .clock import Clock, epoch_millis, utc_now
from .config import Settings, clear_settings_cache, get_settings
from .errors import EntityError, EntityOperationError, ErrorCode
from .logging_utils import configure_logging, get_logger
from .result_types import Err, Ok, Result

__all__ = [
    "Clock",
    "epoch_millis",
    "utc_now",
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "EntityError",
    "EntityOperationError",
    "ErrorCode",
    "configure_logging",
    "get_logger",
    "Ok",
    "Err",
    "Result",
]

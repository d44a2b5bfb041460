# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Base Pydantic model configuration for all ledger documents.

This module provides the foundation for every document stored on the ledger
and every payload accepted by an entity operation, enforcing immutability,
strict validation and the camelCase JSON wire format.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
)
from pydantic.alias_generators import to_camel

FLOAT_EXACT_DIGITS = 15


def _ensure_utc(value: datetime) -> datetime:
    """Interpret naive instants as UTC so they compare with the clock."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _fits_json_number(value: Decimal) -> Decimal:
    """Reject fractional amounts that a JSON float cannot carry exactly."""
    if value == value.to_integral_value():
        return value
    if Decimal(repr(float(value))) != value:
        raise ValueError(
            f"Amount {value} has more precision than can be stored "
            f"(at most {FLOAT_EXACT_DIGITS} significant digits with a fraction)"
        )
    return value


def _decimal_to_number(value: Decimal) -> int | float:
    """Emit amounts as JSON numbers rather than strings."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


UtcDatetime = Annotated[datetime, AfterValidator(_ensure_utc)]

Amount = Annotated[
    Decimal,
    AfterValidator(_fits_json_number),
    PlainSerializer(_decimal_to_number, return_type=int | float, when_used="json"),
]


class BaseModelConfig(BaseModel):
    """Base model with strict configuration for all ledger documents.

    Enforces:
    - Immutability (frozen=True)
    - No extra fields allowed (extra="forbid")
    - Validation on assignment
    - Automatic whitespace stripping
    - Finite numbers only (no NaN or Infinity)
    - camelCase aliases on the wire, snake_case attributes in Python
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )


class TrackedDocument(BaseModelConfig):
    """Base model for top-level entities that carry a last-updated stamp."""

    last_updated: UtcDatetime = Field(
        ..., description="Timestamp of the most recent mutation"
    )

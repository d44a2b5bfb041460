# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Ledger capability contract consumed by the entity services.

The ledger itself (transaction ordering, commit, secondary indexes) lives
outside this package. ``LedgerGateway`` is **runtime_checkable** so beartype
``isinstance`` checks accept any object exposing the four primitives,
including the in-memory ledger and test mocks.
"""

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from datetime import datetime
from typing import Generic, Protocol, TypeVar, runtime_checkable

from attrs import frozen

from ..core.errors import EntityError
from ..core.result_types import Err, Result

T = TypeVar("T")
R = TypeVar("R")


@frozen
class KeyModification:
    """One committed change of a key, as reported by the ledger."""

    tx_id: str
    timestamp_seconds: float
    value: bytes | None
    is_delete: bool = False


@frozen
class QueryRecord:
    """One match of a selector query."""

    key: str
    value: bytes


@frozen
class HistoryEntry(Generic[T]):
    """Decoded projection of a ``KeyModification``."""

    tx_id: str
    timestamp: datetime
    value: T | None
    is_delete: bool


@runtime_checkable
class LedgerGateway(Protocol):
    """Minimal ledger interface used by services."""

    def get(self, key: str) -> bytes | None: ...

    def put(self, key: str, value: bytes) -> None: ...

    def history_for(
        self, key: str
    ) -> AbstractContextManager[Iterator[KeyModification]]: ...

    def query(
        self, selector_json: str
    ) -> AbstractContextManager[Iterator[QueryRecord]]: ...


class LedgerSequence(Generic[T]):
    """Lazy, finite, restartable view over a ledger cursor.

    Every iteration opens a fresh cursor from ``source`` and projects each
    row. Rows projected to ``Err`` are handed to ``on_skip`` and dropped.
    The cursor is closed when iteration ends; use :meth:`open` to get the
    same guarantee when stopping early.
    """

    def __init__(
        self,
        source: Callable[[], AbstractContextManager[Iterator[R]]],
        project: Callable[[R], Result[T, EntityError]],
        on_skip: Callable[[R, EntityError], None] | None = None,
    ) -> None:
        self._source = source
        self._project = project
        self._on_skip = on_skip

    def __iter__(self) -> Iterator[T]:
        with self._source() as rows:
            for row in rows:
                projected = self._project(row)
                if isinstance(projected, Err):
                    if self._on_skip is not None:
                        self._on_skip(row, projected.error)
                    continue
                yield projected.value

    @contextmanager
    def open(self) -> Iterator[Iterator[T]]:
        """Scoped iteration; the cursor is released on exit even if unconsumed."""
        items = iter(self)
        try:
            yield items
        finally:
            items.close()

    def to_list(self) -> list[T]:
        return list(self)

    def first(self) -> T | None:
        """First item, releasing the cursor immediately afterwards."""
        with self.open() as items:
            return next(items, None)

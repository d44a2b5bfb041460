"""In-memory ledger for development and tests.

Keeps every committed value per key so history reads behave like the real
ledger. Selector queries support ``{"selector": {"field": value}}`` with
dotted paths for nested fields, evaluated against each key's latest value.
"""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import uuid4

from beartype import beartype

from ..core.clock import Clock, utc_now
from .gateway import KeyModification, QueryRecord

_MISSING = object()


def _lookup(document: Any, path: str) -> Any:
    current = document
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


class InMemoryLedger:
    """Append-only key-value store with per-key history."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or utc_now
        self._history: dict[str, list[KeyModification]] = {}
        self._open_cursors = 0

    @property
    def open_cursors(self) -> int:
        """Number of history/query cursors not yet closed."""
        return self._open_cursors

    @beartype
    def get(self, key: str) -> bytes | None:
        modifications = self._history.get(key)
        if not modifications or modifications[-1].is_delete:
            return None
        return modifications[-1].value

    @beartype
    def put(self, key: str, value: bytes) -> None:
        self._append(key, value, is_delete=False)

    @beartype
    def delete(self, key: str) -> None:
        """Record a deletion marker; no entity operation calls this."""
        self._append(key, None, is_delete=True)

    @beartype
    def keys(self) -> list[str]:
        return [key for key in self._history if self.get(key) is not None]

    @contextmanager
    def history_for(self, key: str) -> Iterator[Iterator[KeyModification]]:
        snapshot = list(self._history.get(key, ()))
        self._open_cursors += 1
        try:
            yield iter(snapshot)
        finally:
            self._open_cursors -= 1

    @contextmanager
    def query(self, selector_json: str) -> Iterator[Iterator[QueryRecord]]:
        selector = json.loads(selector_json).get("selector", {})
        matches = []
        for key in self._history:
            raw = self.get(key)
            if raw is None:
                continue
            try:
                document = json.loads(raw)
            except ValueError:
                # Non-JSON values only surface for an empty selector.
                if not selector:
                    matches.append(QueryRecord(key=key, value=raw))
                continue
            if all(_lookup(document, path) == expected for path, expected in selector.items()):
                matches.append(QueryRecord(key=key, value=raw))

        self._open_cursors += 1
        try:
            yield iter(matches)
        finally:
            self._open_cursors -= 1

    def _append(self, key: str, value: bytes | None, *, is_delete: bool) -> None:
        modification = KeyModification(
            tx_id=uuid4().hex,
            timestamp_seconds=self._clock().timestamp(),
            value=value,
            is_delete=is_delete,
        )
        self._history.setdefault(key, []).append(modification)

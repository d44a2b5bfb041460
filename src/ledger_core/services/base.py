"""Shared read-modify-write shape of the entity services.

Every mutating operation follows the same sequence: load the document under
its key, run the rule/state-machine checks, build a new document value, and
write it back with a single ``put``. A failed check returns ``Err`` before
``put`` is reached, so nothing is ever half-written. Ledger exceptions are
not caught here; they propagate to the caller as-is.
"""

import json
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Generic, TypeVar

from beartype import beartype
from pydantic import BaseModel

from ..core.clock import Clock, utc_now
from ..core.config import Settings, get_settings
from ..core.errors import EntityError
from ..core.logging_utils import get_logger
from ..core.result_types import Err, Ok, Result
from ..ledger.codec import DocumentCodec
from ..ledger.gateway import (
    HistoryEntry,
    KeyModification,
    LedgerGateway,
    LedgerSequence,
    QueryRecord,
)
from ..models.base import TrackedDocument

DocumentT = TypeVar("DocumentT", bound=TrackedDocument)
EnumT = TypeVar("EnumT", bound=Enum)

Operation = Callable[..., Any]


class EntityService(Generic[DocumentT]):
    """Base service for one ledger entity kind."""

    entity_name: ClassVar[str] = "entity"
    document_model: ClassVar[type[TrackedDocument]]

    def __init__(
        self,
        ledger: LedgerGateway,
        *,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize entity service with dependency validation."""
        if ledger is None or not isinstance(ledger, LedgerGateway):
            raise ValueError("Ledger gateway required and must expose get/put/history_for/query")

        self._ledger = ledger
        self._settings = settings or get_settings()
        self._clock = clock or utc_now
        self._codec: DocumentCodec[DocumentT] = DocumentCodec(self.document_model)
        self._logger = get_logger(f"services.{self.entity_name}")

    @property
    def codec(self) -> DocumentCodec[DocumentT]:
        return self._codec

    @property
    def operations(self) -> Mapping[str, Operation]:
        """Public operation table (name -> bound handler)."""
        return MappingProxyType(dict(self._operation_table()))

    def _operation_table(self) -> Mapping[str, Operation]:
        raise NotImplementedError

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @beartype
    def exists(self, key: str) -> bool:
        raw = self._ledger.get(key)
        return raw is not None and len(raw) > 0

    @beartype
    def get(self, key: str) -> Result[DocumentT, EntityError]:
        """Load and decode the document stored under ``key``."""
        raw = self._ledger.get(key)
        if not raw:
            return Err(EntityError.not_found(f"{self.entity_name} {key} does not exist"))
        return self._codec.decode(raw)

    @beartype
    def history(self, key: str) -> LedgerSequence[HistoryEntry[DocumentT]]:
        """Append-ordered change log of ``key``.

        Entries whose stored value no longer decodes are logged and skipped.
        """
        return LedgerSequence(
            lambda: self._ledger.history_for(key),
            self._project_modification,
            lambda row, error: self._log_skipped(f"history of {key} tx {row.tx_id}", error),
        )

    @beartype
    def query_by_field(self, field_name: str, value: Any) -> LedgerSequence[DocumentT]:
        """Documents whose ``field_name`` (wire name, dotted for nesting) equals ``value``."""
        if isinstance(value, Enum):
            value = value.value
        return self.query({field_name: value})

    @beartype
    def query(self, selector: Mapping[str, Any]) -> LedgerSequence[DocumentT]:
        """Documents matching an equality selector; undecodable matches are skipped.

        ``selector`` is either the bare field map or a full query document
        that already carries a top-level ``selector`` key.
        """
        if isinstance(selector.get("selector"), Mapping):
            document = dict(selector)
        else:
            document = {"selector": dict(selector)}
        selector_json = json.dumps(document, default=str)
        return LedgerSequence(
            lambda: self._ledger.query(selector_json),
            self._project_record,
            lambda row, error: self._log_skipped(f"query match {row.key}", error),
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _insert(
        self, operation: str, key: str, build: Callable[[], Result[DocumentT, EntityError]]
    ) -> Result[DocumentT, EntityError]:
        """Create a document under a key that must not hold a value yet."""
        self._logger.info(f"START {operation} [{key}]")
        if self.exists(key):
            return self._reject(operation, key, EntityError.duplicate_key(f"{self.entity_name} {key}"))

        built = build()
        if isinstance(built, Err):
            return self._reject(operation, key, built.error)

        self._persist(key, built.value)
        self._logger.info(f"END {operation} [{key}]")
        return built

    def _mutate(
        self,
        operation: str,
        key: str,
        change: Callable[[DocumentT], Result[DocumentT, EntityError]],
    ) -> Result[DocumentT, EntityError]:
        """Load, apply ``change`` and persist with a fresh ``lastUpdated``."""
        self._logger.info(f"START {operation} [{key}]")
        loaded = self.get(key)
        if isinstance(loaded, Err):
            return self._reject(operation, key, loaded.error)

        changed = change(loaded.value)
        if isinstance(changed, Err):
            return self._reject(operation, key, changed.error)

        document = changed.value.model_copy(update={"last_updated": self._now()})
        self._persist(key, document)
        self._logger.info(f"END {operation} [{key}]")
        return Ok(document)

    def _persist(self, key: str, document: BaseModel) -> None:
        self._ledger.put(key, self._codec.encode(document))

    def _reject(self, operation: str, key: str, error: EntityError) -> Err[EntityError]:
        self._logger.warning(f"REJECTED {operation} [{key}] {error.code.value}: {error.message}")
        return Err(error)

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def _project_modification(
        self, row: KeyModification
    ) -> Result[HistoryEntry[DocumentT], EntityError]:
        timestamp = datetime.fromtimestamp(row.timestamp_seconds, tz=timezone.utc)
        if row.value is None or row.is_delete:
            return Ok(HistoryEntry(row.tx_id, timestamp, None, row.is_delete))

        decoded = self._codec.decode(row.value)
        if isinstance(decoded, Err):
            return decoded
        return Ok(HistoryEntry(row.tx_id, timestamp, decoded.value, row.is_delete))

    def _project_record(self, row: QueryRecord) -> Result[DocumentT, EntityError]:
        return self._codec.decode(row.value)

    def _log_skipped(self, where: str, error: EntityError) -> None:
        self._logger.warning(f"Skipping {where}: {error.message}")


@beartype
def coerce_enum(
    enum_type: type[EnumT], value: EnumT | str, field_name: str
) -> Result[EnumT, EntityError]:
    """Accept an enum member or its wire value."""
    if isinstance(value, enum_type):
        return Ok(value)
    try:
        return Ok(enum_type(value))
    except ValueError:
        allowed = ", ".join(str(member.value) for member in enum_type)
        return Err(
            EntityError.validation(
                f"{field_name} must be one of {allowed}, got {value!r}", field_name
            )
        )


def payload_key(data: Any, field_name: str) -> str:
    """Best-effort key of a payload that failed validation, for logging."""
    if isinstance(data, Mapping):
        return str(data.get(field_name, "<unknown>"))
    return "<unknown>"

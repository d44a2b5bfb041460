"""Ledger access: gateway contract, document codec and in-memory ledger."""

from .codec import DocumentCodec
from .gateway import (
    HistoryEntry,
    KeyModification,
    LedgerGateway,
    LedgerSequence,
    QueryRecord,
)
from .memory import InMemoryLedger

__all__ = [
    "DocumentCodec",
    "HistoryEntry",
    "KeyModification",
    "LedgerGateway",
    "LedgerSequence",
    "QueryRecord",
    "InMemoryLedger",
]

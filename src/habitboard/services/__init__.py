"""Service module exports."""

from . import ledger, notifications, schedule, statistics, store
from .ledger import CompletionLedger
from .store import TrackerStore

__all__ = [
    "CompletionLedger",
    "TrackerStore",
    "ledger",
    "notifications",
    "schedule",
    "statistics",
    "store",
]

"""Domain value types and repository protocols."""

from .entities import (
    ALL_WEEKDAYS,
    ChangeKind,
    Snapshot,
    Statistics,
    Tracker,
    TrackerCategory,
    TrackerFilter,
    TrackerRecord,
    Weekday,
)

__all__ = [
    "ALL_WEEKDAYS",
    "ChangeKind",
    "Snapshot",
    "Statistics",
    "Tracker",
    "TrackerCategory",
    "TrackerFilter",
    "TrackerRecord",
    "Weekday",
]

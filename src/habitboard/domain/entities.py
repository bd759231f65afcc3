"""Domain value types for trackers, categories and completion records.

These are immutable data classes handed to callers of the store. They are
independent of the SQLModel tables in :mod:`habitboard.models`, so the
schedule/filter engine and the statistics aggregator can run over plain
snapshots without a database session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Iterable
from uuid import UUID


class Weekday(IntEnum):
    """Day of week with Monday as the first day, independent of locale."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def short_name(self) -> str:
        return self.name[:3].title()

    @classmethod
    def from_date(cls, value: date) -> "Weekday":
        """Map a calendar day onto Monday=0 … Sunday=6.

        The Gregorian weekday number (Sunday=1 … Saturday=7) is shifted with
        ``(n + 5) % 7`` so Monday lands on 0 and Sunday on 6.
        """
        gregorian = value.isoweekday() % 7 + 1
        return cls((gregorian + 5) % 7)


ALL_WEEKDAYS: frozenset[Weekday] = frozenset(Weekday)


def to_day(value: date | datetime) -> date:
    """Truncate a datetime to its calendar day; dates pass through."""

    if isinstance(value, datetime):
        return value.date()
    return value


def schedule_to_mask(schedule: Iterable[Weekday | int]) -> int:
    """Encode a weekday set as a 7-bit integer, bit ``n`` for weekday ``n``."""

    mask = 0
    for day in schedule:
        mask |= 1 << int(Weekday(day))
    return mask


def schedule_from_mask(mask: int) -> frozenset[Weekday]:
    if mask < 0 or mask >= 1 << 7:
        raise ValueError(f"Schedule mask out of range: {mask}")
    return frozenset(day for day in Weekday if mask & (1 << day))


class ChangeKind(str, Enum):
    """Entity kind reported to change-feed subscribers."""

    CATEGORY = "category"
    TRACKER = "tracker"
    RECORD = "record"


class TrackerFilter(str, Enum):
    """Predefined tracker list filters."""

    ALL = "all"
    DUE_TODAY = "today"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"


@dataclass(frozen=True)
class Tracker:
    """A habit with a weekly schedule and display attributes."""

    id: UUID
    name: str
    emoji: str
    color: str
    schedule: frozenset[Weekday]
    category_id: UUID

    def is_scheduled(self, day: date | datetime) -> bool:
        return Weekday.from_date(to_day(day)) in self.schedule


@dataclass(frozen=True)
class TrackerCategory:
    """A titled group of trackers."""

    id: UUID
    title: str
    trackers: tuple[Tracker, ...] = ()

    def with_trackers(self, trackers: Iterable[Tracker]) -> "TrackerCategory":
        return TrackerCategory(id=self.id, title=self.title, trackers=tuple(trackers))


@dataclass(frozen=True)
class TrackerRecord:
    """Evidence that a tracker was completed on a calendar day.

    Equality and hashing use ``(tracker_id, day)``; a datetime passed as
    ``day`` is truncated to its date.
    """

    tracker_id: UUID
    day: date

    def __post_init__(self) -> None:
        object.__setattr__(self, "day", to_day(self.day))


@dataclass(frozen=True)
class Statistics:
    """Summary numbers shown on the statistics screen."""

    best_period: int = 0
    ideal_days: int = 0
    completed_trackers: int = 0
    average_value: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.completed_trackers == 0


@dataclass(frozen=True)
class Snapshot:
    """Consistent view of categories (with trackers) and all records."""

    categories: tuple[TrackerCategory, ...] = ()
    records: tuple[TrackerRecord, ...] = field(default_factory=tuple)

    @property
    def trackers(self) -> list[Tracker]:
        return [tracker for category in self.categories for tracker in category.trackers]


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
    "schedule_from_mask",
    "schedule_to_mask",
    "to_day",
]

"""Completion ledger: which tracker was completed on which day."""

from __future__ import annotations

import threading
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable, Optional
from uuid import UUID

from ..domain.entities import TrackerRecord, to_day


def compute_streaks(days: Iterable[date], *, today: date | None = None) -> tuple[int, int]:
    """Return (current_streak, longest_streak) over a collection of days."""

    today = today or date.today()
    completed = set(days)

    # Current streak: walk backwards from today until a gap.
    current = 0
    cursor = today
    while cursor in completed:
        current += 1
        cursor -= timedelta(days=1)

    # Longest streak: sweep the sorted days counting consecutive runs.
    longest = 0
    run = 0
    last_day: date | None = None
    for day in sorted(completed):
        if last_day is not None and day == last_day + timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = day

    return current, longest


class CompletionLedger:
    """In-memory set of completion records keyed by tracker and day.

    Holds at most one record per ``(tracker_id, day)``. All access goes
    through a lock so concurrent toggles cannot duplicate a record.
    """

    def __init__(self, records: Iterable[TrackerRecord] = ()) -> None:
        self._lock = threading.RLock()
        self._days: dict[UUID, set[date]] = defaultdict(set)
        for record in records:
            self._days[record.tracker_id].add(record.day)

    def toggle(self, tracker_id: UUID, day: date | datetime) -> bool:
        """Flip completion for the day; returns the new state."""
        key = to_day(day)
        with self._lock:
            days = self._days[tracker_id]
            if key in days:
                days.discard(key)
                return False
            days.add(key)
            return True

    def is_completed(self, tracker_id: UUID, day: date | datetime) -> bool:
        with self._lock:
            return to_day(day) in self._days.get(tracker_id, ())

    def completion_count(self, tracker_id: UUID) -> int:
        with self._lock:
            return len(self._days.get(tracker_id, ()))

    def records(self, tracker_id: Optional[UUID] = None) -> list[TrackerRecord]:
        with self._lock:
            if tracker_id is not None:
                items = [(tracker_id, day) for day in self._days.get(tracker_id, ())]
            else:
                items = [(tid, day) for tid, days in self._days.items() for day in days]
        items.sort(key=lambda item: (item[1], str(item[0])))
        return [TrackerRecord(tracker_id=tid, day=day) for tid, day in items]

    def days(self) -> list[date]:
        """Distinct days with at least one completion, ascending."""
        with self._lock:
            return sorted({day for days in self._days.values() for day in days})

    def completions_on(self, day: date | datetime) -> set[UUID]:
        key = to_day(day)
        with self._lock:
            return {tid for tid, days in self._days.items() if key in days}

    def current_streak(self, tracker_id: UUID, today: date | None = None) -> int:
        with self._lock:
            days = set(self._days.get(tracker_id, ()))
        current, _ = compute_streaks(days, today=today)
        return current

    def longest_streak(self, tracker_id: UUID) -> int:
        with self._lock:
            days = set(self._days.get(tracker_id, ()))
        _, longest = compute_streaks(days)
        return longest

    def __len__(self) -> int:
        with self._lock:
            return sum(len(days) for days in self._days.values())

    def __contains__(self, record: object) -> bool:
        if not isinstance(record, TrackerRecord):
            return False
        return self.is_completed(record.tracker_id, record.day)


__all__ = ["CompletionLedger", "compute_streaks"]

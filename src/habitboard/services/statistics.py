"""Statistics aggregated from the completion ledger."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable
from uuid import UUID

from ..domain.entities import Statistics, TrackerCategory, Weekday
from .ledger import CompletionLedger, compute_streaks


def compute_statistics(
    categories: Iterable[TrackerCategory], ledger: CompletionLedger
) -> Statistics:
    """Summarize all recorded days.

    - ``completed_trackers``: number of completion records.
    - ``best_period``: longest run of consecutive days with at least one completion.
    - ``ideal_days``: recorded days where every tracker scheduled on that
      weekday was completed. A weekday with nothing scheduled never counts.
    - ``average_value``: completions per day with at least one completion.

    An empty ledger yields all zeros.
    """
    scheduled: dict[Weekday, set[UUID]] = defaultdict(set)
    for category in categories:
        for tracker in category.trackers:
            for weekday in tracker.schedule:
                scheduled[weekday].add(tracker.id)

    completed_by_day: dict[date, set[UUID]] = defaultdict(set)
    total = 0
    for record in ledger.records():
        completed_by_day[record.day].add(record.tracker_id)
        total += 1

    if total == 0:
        return Statistics()

    ideal_days = 0
    for day, completed in completed_by_day.items():
        due = scheduled.get(Weekday.from_date(day))
        if due and due <= completed:
            ideal_days += 1

    _, best_period = compute_streaks(completed_by_day.keys())

    return Statistics(
        best_period=best_period,
        ideal_days=ideal_days,
        completed_trackers=total,
        average_value=total / len(completed_by_day),
    )


__all__ = ["compute_statistics"]

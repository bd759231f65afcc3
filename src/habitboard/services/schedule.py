"""Which trackers are due on a day, and the list filters built on that."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Sequence

from ..domain.entities import Tracker, TrackerCategory, TrackerFilter, Weekday, to_day
from .ledger import CompletionLedger


def weekday_of(day: date | datetime) -> Weekday:
    """Monday=0 … Sunday=6 for the given day."""

    return Weekday.from_date(to_day(day))


def due_trackers(
    categories: Iterable[TrackerCategory], reference_date: date | datetime
) -> list[TrackerCategory]:
    """Keep only trackers scheduled on the reference weekday; drop empty categories."""

    weekday = weekday_of(reference_date)
    result = []
    for category in categories:
        due = [tracker for tracker in category.trackers if weekday in tracker.schedule]
        if due:
            result.append(category.with_trackers(due))
    return result


def apply_filter(
    trackers: Iterable[Tracker],
    tracker_filter: TrackerFilter,
    reference_date: date | datetime,
    ledger: CompletionLedger,
) -> list[Tracker]:
    """Filter trackers; completion filters look only at ``reference_date``."""

    items = list(trackers)
    if tracker_filter is TrackerFilter.ALL:
        return items
    if tracker_filter is TrackerFilter.DUE_TODAY:
        weekday = weekday_of(reference_date)
        return [tracker for tracker in items if weekday in tracker.schedule]
    if tracker_filter is TrackerFilter.COMPLETED:
        return [t for t in items if ledger.is_completed(t.id, reference_date)]
    if tracker_filter is TrackerFilter.INCOMPLETE:
        return [t for t in items if not ledger.is_completed(t.id, reference_date)]
    return items


def filter_categories(
    categories: Iterable[TrackerCategory],
    tracker_filter: TrackerFilter,
    reference_date: date | datetime,
    ledger: CompletionLedger,
) -> list[TrackerCategory]:
    """Apply :func:`apply_filter` per category, dropping categories left empty.

    With ``TrackerFilter.ALL`` every category is kept, including empty ones.
    """

    result = []
    for category in categories:
        if tracker_filter is TrackerFilter.ALL:
            result.append(category)
            continue
        kept = apply_filter(category.trackers, tracker_filter, reference_date, ledger)
        if kept:
            result.append(category.with_trackers(kept))
    return result


def search_trackers(categories: Sequence[TrackerCategory], query: str) -> list[TrackerCategory]:
    """Case-insensitive substring search on tracker names."""

    needle = query.strip().casefold()
    if not needle:
        return list(categories)
    result = []
    for category in categories:
        matches = [t for t in category.trackers if needle in t.name.casefold()]
        if matches:
            result.append(category.with_trackers(matches))
    return result


__all__ = ["apply_filter", "due_trackers", "filter_categories", "search_trackers", "weekday_of"]

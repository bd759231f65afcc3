"""Tracker store: the command/query boundary used by presentation code.

The store owns the database engine, the repositories and the change feed.
Mutations are serialized through one lock, committed before the call
returns, and then announced to subscribers of the affected entity kinds.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Iterable, Optional
from uuid import UUID, uuid4

from sqlalchemy.engine import Engine

from ..config import BaseConfig
from ..constants.palette import NAME_MAX_LENGTH, is_palette_color, is_palette_emoji
from ..domain.entities import (
    ChangeKind,
    Snapshot,
    Statistics,
    Tracker,
    TrackerCategory,
    TrackerFilter,
    TrackerRecord,
    Weekday,
    to_day,
)
from ..domain.repositories import CategoryRepository, RecordRepository, TrackerRepository
from ..errors import (
    CategoryNotFound,
    DuplicateTitle,
    FutureDate,
    InvalidInput,
    TrackerNotFound,
)
from ..infra.database import SessionFactory, create_db_engine, create_session_factory, init_database
from ..infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelRecordRepository,
    SQLModelTrackerRepository,
)
from ..logging_config import get_logger
from .ledger import CompletionLedger
from .notifications import ChangeCallback, ChangeNotifier, Subscription
from .schedule import due_trackers, filter_categories, search_trackers
from .statistics import compute_statistics

logger = get_logger(__name__)

_UNSET = object()


def _clean_text(value: Optional[str], field: str, operation: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidInput(f"{field} must not be empty", operation=operation, context={"field": field})
    if len(text) > NAME_MAX_LENGTH:
        raise InvalidInput(
            f"{field} must be at most {NAME_MAX_LENGTH} characters",
            operation=operation,
            context={"field": field, "length": len(text)},
        )
    return text


def _clean_schedule(schedule: Optional[Iterable[Weekday | int]], operation: str) -> frozenset[Weekday]:
    try:
        days = frozenset(Weekday(int(day)) for day in (schedule or ()))
    except (TypeError, ValueError) as exc:
        raise InvalidInput(
            "schedule must contain weekday numbers 0-6",
            operation=operation,
            context={"field": "schedule"},
        ) from exc
    if not days:
        raise InvalidInput("schedule must not be empty", operation=operation, context={"field": "schedule"})
    return days


def _validate_tracker(tracker: Tracker, operation: str) -> Tracker:
    name = _clean_text(tracker.name, "name", operation)
    if not is_palette_emoji(tracker.emoji):
        raise InvalidInput("emoji is not in the palette", operation=operation, context={"emoji": tracker.emoji})
    if not is_palette_color(tracker.color):
        raise InvalidInput("color is not in the palette", operation=operation, context={"color": tracker.color})
    schedule = _clean_schedule(tracker.schedule, operation)
    return replace(tracker, name=name, schedule=schedule)


class TrackerStore:
    """Durable storage for categories, trackers and completion records."""

    def __init__(
        self,
        config: Optional[BaseConfig] = None,
        *,
        engine: Optional[Engine] = None,
        clock: Optional[Callable[[], date]] = None,
    ) -> None:
        self.config = config
        self._engine = engine
        self._owns_engine = engine is None
        self._clock = clock or date.today
        self._lock = threading.RLock()
        self.notifier = ChangeNotifier()
        self._session_factory: Optional[SessionFactory] = None
        self._categories: Optional[CategoryRepository] = None
        self._trackers: Optional[TrackerRepository] = None
        self._records: Optional[RecordRepository] = None

    # Lifecycle
    def open(self) -> "TrackerStore":
        """Create the engine (unless one was supplied), the schema and the repositories."""
        with self._lock:
            if self._session_factory is not None:
                return self
            if self._engine is None:
                self._engine = create_db_engine(self.config or BaseConfig())
            init_database(self._engine)
            self._session_factory = create_session_factory(self._engine)
            self._categories = SQLModelCategoryRepository(self._session_factory)
            self._trackers = SQLModelTrackerRepository(self._session_factory)
            self._records = SQLModelRecordRepository(self._session_factory)
            logger.info("Tracker store opened", extra={"url": str(self._engine.url)})
            return self

    def close(self) -> None:
        with self._lock:
            if self._session_factory is None:
                return
            self.notifier.clear()
            self._session_factory = None
            self._categories = self._trackers = self._records = None
            if self._owns_engine and self._engine is not None:
                self._engine.dispose()
                self._engine = None
            logger.info("Tracker store closed")

    @property
    def is_open(self) -> bool:
        return self._session_factory is not None

    def __enter__(self) -> "TrackerStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _repos(self) -> tuple[CategoryRepository, TrackerRepository, RecordRepository]:
        if self._categories is None or self._trackers is None or self._records is None:
            raise RuntimeError("Tracker store is not open")
        return self._categories, self._trackers, self._records

    def today(self) -> date:
        return to_day(self._clock())

    # Change feed
    def subscribe(
        self, callback: ChangeCallback, kinds: Optional[Iterable[ChangeKind]] = None
    ) -> Subscription:
        """Register ``callback`` for committed changes of the given kinds (all by default)."""
        return self.notifier.subscribe(callback, kinds)

    def unsubscribe(self, subscription: Subscription) -> bool:
        return self.notifier.unsubscribe(subscription)

    # Categories
    def create_category(self, title: str) -> TrackerCategory:
        categories, _, _ = self._repos()
        clean = _clean_text(title, "title", "create_category")
        with self._lock:
            if categories.get_by_title(clean) is not None:
                raise DuplicateTitle(
                    f"Category '{clean}' already exists",
                    operation="create_category",
                    context={"title": clean},
                )
            category = categories.create(clean)
        logger.info("Category created", extra={"category_id": str(category.id), "title": clean})
        self.notifier.publish(ChangeKind.CATEGORY)
        return category

    def rename_category(self, category_id: UUID, new_title: str) -> TrackerCategory:
        categories, _, _ = self._repos()
        clean = _clean_text(new_title, "title", "rename_category")
        with self._lock:
            if categories.get_by_id(category_id) is None:
                raise CategoryNotFound(
                    "Category not found",
                    operation="rename_category",
                    context={"category_id": str(category_id)},
                )
            clash = categories.get_by_title(clean)
            if clash is not None and clash.id != category_id:
                raise DuplicateTitle(
                    f"Category '{clean}' already exists",
                    operation="rename_category",
                    context={"title": clean},
                )
            category = categories.rename(category_id, clean)
            if category is None:
                raise CategoryNotFound(
                    "Category not found",
                    operation="rename_category",
                    context={"category_id": str(category_id)},
                )
        logger.info("Category renamed", extra={"category_id": str(category_id), "title": clean})
        self.notifier.publish(ChangeKind.CATEGORY)
        return category

    def delete_category(self, category_id: UUID) -> None:
        """Delete a category; its trackers and their records go with it."""
        categories, _, records = self._repos()
        with self._lock:
            existing = categories.get_by_id(category_id)
            if existing is None:
                raise CategoryNotFound(
                    "Category not found",
                    operation="delete_category",
                    context={"category_id": str(category_id)},
                )
            had_records = any(records.count(tracker.id) for tracker in existing.trackers)
            categories.delete(category_id)
        logger.info(
            "Category deleted",
            extra={"category_id": str(category_id), "trackers_removed": len(existing.trackers)},
        )
        kinds = [ChangeKind.CATEGORY]
        if existing.trackers:
            kinds.append(ChangeKind.TRACKER)
        if had_records:
            kinds.append(ChangeKind.RECORD)
        self.notifier.publish(*kinds)

    def get_category(self, category_id: UUID) -> TrackerCategory:
        categories, _, _ = self._repos()
        category = categories.get_by_id(category_id)
        if category is None:
            raise CategoryNotFound(
                "Category not found", operation="get_category", context={"category_id": str(category_id)}
            )
        return category

    def list_categories(self) -> list[TrackerCategory]:
        categories, _, _ = self._repos()
        with self._lock:
            return categories.list_all()

    # Trackers
    def create_tracker(
        self,
        name: str,
        emoji: str,
        color: str,
        schedule: Iterable[Weekday | int],
        category_id: UUID,
    ) -> Tracker:
        categories, trackers, _ = self._repos()
        candidate = _validate_tracker(
            Tracker(
                id=uuid4(),
                name=name,
                emoji=emoji,
                color=color,
                schedule=_clean_schedule(schedule, "create_tracker"),
                category_id=category_id,
            ),
            "create_tracker",
        )
        with self._lock:
            if categories.get_by_id(category_id) is None:
                raise CategoryNotFound(
                    "Category not found",
                    operation="create_tracker",
                    context={"category_id": str(category_id)},
                )
            tracker = trackers.create(candidate)
        logger.info(
            "Tracker created",
            extra={"tracker_id": str(tracker.id), "category_id": str(category_id), "tracker_name": tracker.name},
        )
        self.notifier.publish(ChangeKind.TRACKER)
        return tracker

    def update_tracker(
        self,
        tracker_id: UUID,
        *,
        name: object = _UNSET,
        emoji: object = _UNSET,
        color: object = _UNSET,
        schedule: object = _UNSET,
        category_id: object = _UNSET,
    ) -> Tracker:
        """Change any subset of a tracker's fields, including its category."""
        categories, trackers, _ = self._repos()
        changes = {
            key: value
            for key, value in {
                "name": name,
                "emoji": emoji,
                "color": color,
                "schedule": schedule,
                "category_id": category_id,
            }.items()
            if value is not _UNSET
        }
        if "category_id" in changes and changes["category_id"] is None:
            raise InvalidInput(
                "category_id must not be empty",
                operation="update_tracker",
                context={"field": "category_id"},
            )
        if "schedule" in changes:
            changes["schedule"] = _clean_schedule(changes["schedule"], "update_tracker")  # type: ignore[arg-type]
        with self._lock:
            existing = trackers.get_by_id(tracker_id)
            if existing is None:
                raise TrackerNotFound(
                    "Tracker not found", operation="update_tracker", context={"tracker_id": str(tracker_id)}
                )
            candidate = _validate_tracker(replace(existing, **changes), "update_tracker")
            if candidate.category_id != existing.category_id and categories.get_by_id(candidate.category_id) is None:
                raise CategoryNotFound(
                    "Category not found",
                    operation="update_tracker",
                    context={"category_id": str(candidate.category_id)},
                )
            updated = trackers.update(candidate)
            if updated is None:
                raise TrackerNotFound(
                    "Tracker not found", operation="update_tracker", context={"tracker_id": str(tracker_id)}
                )
        logger.info("Tracker updated", extra={"tracker_id": str(tracker_id), "fields": sorted(changes)})
        self.notifier.publish(ChangeKind.TRACKER)
        return updated

    def delete_tracker(self, tracker_id: UUID) -> None:
        """Delete a tracker and every completion record that references it."""
        _, trackers, records = self._repos()
        with self._lock:
            removed_records = records.count(tracker_id)
            if not trackers.delete(tracker_id):
                raise TrackerNotFound(
                    "Tracker not found", operation="delete_tracker", context={"tracker_id": str(tracker_id)}
                )
        logger.info(
            "Tracker deleted", extra={"tracker_id": str(tracker_id), "records_removed": removed_records}
        )
        kinds = [ChangeKind.TRACKER]
        if removed_records:
            kinds.append(ChangeKind.RECORD)
        self.notifier.publish(*kinds)

    def get_tracker(self, tracker_id: UUID) -> Tracker:
        _, trackers, _ = self._repos()
        tracker = trackers.get_by_id(tracker_id)
        if tracker is None:
            raise TrackerNotFound(
                "Tracker not found", operation="get_tracker", context={"tracker_id": str(tracker_id)}
            )
        return tracker

    def list_trackers(self, category_id: Optional[UUID] = None) -> list[Tracker]:
        categories, trackers, _ = self._repos()
        with self._lock:
            if category_id is not None and categories.get_by_id(category_id) is None:
                raise CategoryNotFound(
                    "Category not found",
                    operation="list_trackers",
                    context={"category_id": str(category_id)},
                )
            return trackers.list_all(category_id)

    # Completion records
    def toggle_completion(self, tracker_id: UUID, day: date | datetime) -> bool:
        """Mark or unmark ``tracker_id`` as done on ``day``; returns the new state."""
        _, trackers, records = self._repos()
        target = to_day(day)
        today = self.today()
        if target > today:
            raise FutureDate(
                "Cannot complete a tracker for a future day",
                operation="toggle_completion",
                context={"day": target.isoformat(), "today": today.isoformat()},
            )
        with self._lock:
            if trackers.get_by_id(tracker_id) is None:
                raise TrackerNotFound(
                    "Tracker not found",
                    operation="toggle_completion",
                    context={"tracker_id": str(tracker_id)},
                )
            completed = records.toggle(tracker_id, target)
        logger.info(
            "Completion toggled",
            extra={"tracker_id": str(tracker_id), "day": target.isoformat(), "completed": completed},
        )
        self.notifier.publish(ChangeKind.RECORD)
        return completed

    def is_completed(self, tracker_id: UUID, day: date | datetime) -> bool:
        _, _, records = self._repos()
        return records.exists(tracker_id, to_day(day))

    def completion_count(self, tracker_id: UUID) -> int:
        _, _, records = self._repos()
        return records.count(tracker_id)

    def list_completions(self, tracker_id: Optional[UUID] = None) -> list[TrackerRecord]:
        _, _, records = self._repos()
        with self._lock:
            return records.list_all(tracker_id)

    # Snapshots for the pure engines
    def snapshot(self) -> Snapshot:
        """Categories and records read with no mutation in between."""
        categories, _, records = self._repos()
        with self._lock:
            return Snapshot(categories=tuple(categories.list_all()), records=tuple(records.list_all()))

    def ledger(self) -> CompletionLedger:
        return CompletionLedger(self.snapshot().records)

    def statistics(self) -> Statistics:
        snap = self.snapshot()
        return compute_statistics(snap.categories, CompletionLedger(snap.records))

    def visible_categories(
        self,
        reference_date: Optional[date | datetime] = None,
        tracker_filter: TrackerFilter = TrackerFilter.DUE_TODAY,
        query: str = "",
    ) -> list[TrackerCategory]:
        """Categories as the main tracker list shows them for ``reference_date``.

        Trackers due that weekday, narrowed by ``tracker_filter`` and the
        name ``query``; ``TrackerFilter.ALL`` skips the weekday restriction.
        """
        day = to_day(reference_date) if reference_date is not None else self.today()
        snap = self.snapshot()
        ledger = CompletionLedger(snap.records)
        categories: list[TrackerCategory] = list(snap.categories)
        if tracker_filter is not TrackerFilter.ALL:
            categories = due_trackers(categories, day)
        categories = filter_categories(categories, tracker_filter, day, ledger)
        return search_trackers(categories, query)


__all__ = ["TrackerStore"]

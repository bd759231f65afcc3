"""SQLModel implementation of the tracker repository."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlmodel import delete, select

from ...domain.entities import Tracker
from ...models import RecordModel, TrackerModel
from ..database import SessionFactory, storage_errors
from .category import tracker_sort_key


class SQLModelTrackerRepository:
    """SQLModel-based tracker repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, tracker_id: UUID) -> Optional[Tracker]:
        with storage_errors("get_tracker", tracker_id=tracker_id), self.session_factory() as session:
            row = session.get(TrackerModel, tracker_id)
            return row.to_entity() if row else None

    def list_all(self, category_id: Optional[UUID] = None) -> list[Tracker]:
        with storage_errors("list_trackers", category_id=category_id), self.session_factory() as session:
            statement = select(TrackerModel)
            if category_id is not None:
                statement = statement.where(TrackerModel.category_id == category_id)
            rows = session.exec(statement).all()
            return sorted((row.to_entity() for row in rows), key=tracker_sort_key)

    def create(self, tracker: Tracker) -> Tracker:
        with storage_errors("create_tracker", tracker_id=tracker.id), self.session_factory() as session:
            row = TrackerModel.from_entity(tracker)
            session.add(row)
            session.flush()
            return row.to_entity()

    def update(self, tracker: Tracker) -> Optional[Tracker]:
        with storage_errors("update_tracker", tracker_id=tracker.id), self.session_factory() as session:
            row = session.get(TrackerModel, tracker.id)
            if row is None:
                return None
            row.apply(tracker)
            session.add(row)
            session.flush()
            return row.to_entity()

    def delete(self, tracker_id: UUID) -> bool:
        with storage_errors("delete_tracker", tracker_id=tracker_id), self.session_factory() as session:
            row = session.get(TrackerModel, tracker_id)
            if row is None:
                return False
            session.exec(delete(RecordModel).where(RecordModel.tracker_id == tracker_id))
            session.delete(row)
            return True


__all__ = ["SQLModelTrackerRepository"]

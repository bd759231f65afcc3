"""SQLModel implementation of the completion record repository."""

from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select

from ...domain.entities import TrackerRecord
from ...models import RecordModel
from ..database import SessionFactory, storage_errors


class SQLModelRecordRepository:
    """SQLModel-based record repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def exists(self, tracker_id: UUID, day: date) -> bool:
        with storage_errors("is_completed", tracker_id=tracker_id, day=day), self.session_factory() as session:
            return session.get(RecordModel, (tracker_id, day)) is not None

    def toggle(self, tracker_id: UUID, day: date) -> bool:
        with storage_errors("toggle_completion", tracker_id=tracker_id, day=day), self.session_factory() as session:
            existing = session.get(RecordModel, (tracker_id, day))
            if existing is not None:
                session.delete(existing)
                return False
            session.add(RecordModel(tracker_id=tracker_id, day=day))
            return True

    def list_all(self, tracker_id: Optional[UUID] = None) -> list[TrackerRecord]:
        with storage_errors("list_completions", tracker_id=tracker_id), self.session_factory() as session:
            statement = select(RecordModel)
            if tracker_id is not None:
                statement = statement.where(RecordModel.tracker_id == tracker_id)
            rows = session.exec(statement.order_by(RecordModel.day)).all()
            return [row.to_entity() for row in rows]

    def count(self, tracker_id: UUID) -> int:
        with storage_errors("completion_count", tracker_id=tracker_id), self.session_factory() as session:
            total = session.exec(
                select(func.count()).select_from(RecordModel).where(RecordModel.tracker_id == tracker_id)
            ).one()
            return int(total)


__all__ = ["SQLModelRecordRepository"]

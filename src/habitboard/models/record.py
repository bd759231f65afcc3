"""Completion record table."""

from __future__ import annotations

from datetime import date
from typing import ClassVar
from uuid import UUID

from sqlmodel import Field, SQLModel

from ..domain.entities import TrackerRecord


class RecordModel(SQLModel, table=True):
    """One completion of a tracker on a calendar day.

    The composite primary key ``(tracker_id, day)`` keeps at most one record
    per tracker per day.
    """

    __tablename__: ClassVar[str] = "tracker_record"

    tracker_id: UUID = Field(foreign_key="tracker.id", primary_key=True)
    day: date = Field(primary_key=True, index=True)

    def to_entity(self) -> TrackerRecord:
        return TrackerRecord(tracker_id=self.tracker_id, day=self.day)

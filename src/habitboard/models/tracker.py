"""Tracker table."""

from __future__ import annotations

from typing import ClassVar
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from ..domain.entities import Tracker, schedule_from_mask, schedule_to_mask


class TrackerModel(SQLModel, table=True):
    """Persisted tracker. The schedule is stored as a 7-bit weekday mask."""

    __tablename__: ClassVar[str] = "tracker"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(nullable=False, max_length=64, index=True)
    emoji: str = Field(nullable=False, max_length=16)
    color: str = Field(nullable=False, max_length=32)
    schedule_mask: int = Field(default=0, nullable=False)
    category_id: UUID = Field(foreign_key="tracker_category.id", nullable=False, index=True)

    def to_entity(self) -> Tracker:
        return Tracker(
            id=self.id,
            name=self.name,
            emoji=self.emoji,
            color=self.color,
            schedule=schedule_from_mask(self.schedule_mask),
            category_id=self.category_id,
        )

    def apply(self, tracker: Tracker) -> None:
        """Copy the mutable fields of ``tracker`` onto this row."""

        self.name = tracker.name
        self.emoji = tracker.emoji
        self.color = tracker.color
        self.schedule_mask = schedule_to_mask(tracker.schedule)
        self.category_id = tracker.category_id

    @classmethod
    def from_entity(cls, tracker: Tracker) -> "TrackerModel":
        return cls(
            id=tracker.id,
            name=tracker.name,
            emoji=tracker.emoji,
            color=tracker.color,
            schedule_mask=schedule_to_mask(tracker.schedule),
            category_id=tracker.category_id,
        )

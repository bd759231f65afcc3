"""Tracker category table."""

from __future__ import annotations

from typing import ClassVar
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from ..domain.entities import Tracker, TrackerCategory


def title_key(title: str) -> str:
    """Case-folded title used for the uniqueness constraint."""

    return title.strip().casefold()


class CategoryModel(SQLModel, table=True):
    """Persisted category; ``title_key`` enforces case-insensitive uniqueness."""

    __tablename__: ClassVar[str] = "tracker_category"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(nullable=False, max_length=64)
    title_key: str = Field(nullable=False, unique=True, index=True, max_length=64)

    def to_entity(self, trackers: tuple[Tracker, ...] = ()) -> TrackerCategory:
        return TrackerCategory(id=self.id, title=self.title, trackers=trackers)

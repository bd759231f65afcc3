"""Tracker repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol
from uuid import UUID

from ..entities import Tracker


class TrackerRepository(Protocol):
    """Repository for trackers."""

    def get_by_id(self, tracker_id: UUID) -> Optional[Tracker]:
        ...

    def list_all(self, category_id: Optional[UUID] = None) -> list[Tracker]:
        """List trackers, optionally limited to one category."""
        ...

    def create(self, tracker: Tracker) -> Tracker:
        ...

    def update(self, tracker: Tracker) -> Optional[Tracker]:
        """Persist new field values; ``None`` when the tracker is missing."""
        ...

    def delete(self, tracker_id: UUID) -> bool:
        """Delete a tracker and its completion records."""
        ...

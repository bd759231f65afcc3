"""Completion record repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol
from uuid import UUID

from ..entities import TrackerRecord


class RecordRepository(Protocol):
    """Repository for completion records."""

    def exists(self, tracker_id: UUID, day: date) -> bool:
        ...

    def toggle(self, tracker_id: UUID, day: date) -> bool:
        """Insert the record when absent, remove it when present.

        Returns the completion state after the change.
        """
        ...

    def list_all(self, tracker_id: Optional[UUID] = None) -> list[TrackerRecord]:
        ...

    def count(self, tracker_id: UUID) -> int:
        ...

"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol
from uuid import UUID

from ..entities import TrackerCategory


class CategoryRepository(Protocol):
    """Repository for tracker categories."""

    def get_by_id(self, category_id: UUID) -> Optional[TrackerCategory]:
        """Retrieve a category, with its trackers, by ID."""
        ...

    def get_by_title(self, title: str) -> Optional[TrackerCategory]:
        """Retrieve a category by title, ignoring case."""
        ...

    def list_all(self) -> list[TrackerCategory]:
        """List categories in canonical order with their trackers embedded."""
        ...

    def create(self, title: str) -> TrackerCategory:
        """Create a category."""
        ...

    def rename(self, category_id: UUID, title: str) -> Optional[TrackerCategory]:
        """Change a category title; ``None`` when the category is missing."""
        ...

    def delete(self, category_id: UUID) -> bool:
        """Delete a category together with its trackers and their records."""
        ...

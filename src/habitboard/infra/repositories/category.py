"""SQLModel implementation of the category repository."""

from __future__ import annotations

from collections import defaultdict
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, delete, select

from ...domain.entities import Tracker, TrackerCategory
from ...errors import DuplicateTitle
from ...models import CategoryModel, RecordModel, TrackerModel, title_key
from ..database import SessionFactory, storage_errors


def category_sort_key(category: TrackerCategory) -> tuple[str, str]:
    return category.title.casefold(), str(category.id)


def tracker_sort_key(tracker: Tracker) -> tuple[str, str]:
    return tracker.name.casefold(), str(tracker.id)


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def _trackers_for(self, session: Session, category_id: UUID) -> tuple[Tracker, ...]:
        rows = session.exec(select(TrackerModel).where(TrackerModel.category_id == category_id)).all()
        return tuple(sorted((row.to_entity() for row in rows), key=tracker_sort_key))

    def get_by_id(self, category_id: UUID) -> Optional[TrackerCategory]:
        with storage_errors("get_category", category_id=category_id), self.session_factory() as session:
            row = session.get(CategoryModel, category_id)
            if row is None:
                return None
            return row.to_entity(self._trackers_for(session, row.id))

    def get_by_title(self, title: str) -> Optional[TrackerCategory]:
        with storage_errors("get_category_by_title", title=title), self.session_factory() as session:
            row = session.exec(
                select(CategoryModel).where(CategoryModel.title_key == title_key(title))
            ).first()
            if row is None:
                return None
            return row.to_entity(self._trackers_for(session, row.id))

    def list_all(self) -> list[TrackerCategory]:
        """Categories by title (case-insensitive, then id) with trackers by name."""
        with storage_errors("list_categories"), self.session_factory() as session:
            categories = session.exec(select(CategoryModel)).all()
            grouped: dict[UUID, list[Tracker]] = defaultdict(list)
            for row in session.exec(select(TrackerModel)).all():
                grouped[row.category_id].append(row.to_entity())

        result = [
            category.to_entity(tuple(sorted(grouped[category.id], key=tracker_sort_key)))
            for category in categories
        ]
        return sorted(result, key=category_sort_key)

    def create(self, title: str) -> TrackerCategory:
        with storage_errors("create_category", title=title), self.session_factory() as session:
            row = CategoryModel(title=title, title_key=title_key(title))
            session.add(row)
            try:
                session.flush()
            except IntegrityError as exc:
                raise DuplicateTitle(
                    f"Category '{title}' already exists",
                    operation="create_category",
                    context={"title": title},
                ) from exc
            return row.to_entity()

    def rename(self, category_id: UUID, title: str) -> Optional[TrackerCategory]:
        with storage_errors("rename_category", category_id=category_id), self.session_factory() as session:
            row = session.get(CategoryModel, category_id)
            if row is None:
                return None
            row.title = title
            row.title_key = title_key(title)
            session.add(row)
            try:
                session.flush()
            except IntegrityError as exc:
                raise DuplicateTitle(
                    f"Category '{title}' already exists",
                    operation="rename_category",
                    context={"title": title},
                ) from exc
            return row.to_entity(self._trackers_for(session, row.id))

    def delete(self, category_id: UUID) -> bool:
        """Delete the category, its trackers and their records in one transaction."""
        with storage_errors("delete_category", category_id=category_id), self.session_factory() as session:
            row = session.get(CategoryModel, category_id)
            if row is None:
                return False
            tracker_ids = select(TrackerModel.id).where(TrackerModel.category_id == category_id)
            session.exec(delete(RecordModel).where(RecordModel.tracker_id.in_(tracker_ids)))
            session.exec(delete(TrackerModel).where(TrackerModel.category_id == category_id))
            session.delete(row)
            return True


__all__ = ["SQLModelCategoryRepository", "category_sort_key", "tracker_sort_key"]

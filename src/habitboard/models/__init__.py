"""SQLModel table exports."""

from .category import CategoryModel, title_key
from .record import RecordModel
from .tracker import TrackerModel

__all__ = ["CategoryModel", "RecordModel", "TrackerModel", "title_key"]

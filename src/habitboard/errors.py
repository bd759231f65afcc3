"""Exception hierarchy raised by the habitboard core.

Every store operation either returns its result or raises one of these.
Persistence failures are never swallowed: repository code wraps driver
errors in :class:`StorageFailure` and re-raises.
"""

from __future__ import annotations

from typing import Any, Optional


class HabitboardError(Exception):
    """Base error carrying the failing operation and structured context."""

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "operation": self.operation,
            "context": self.context,
        }


class InvalidInput(HabitboardError):
    """A field failed validation (empty name, unknown color, empty schedule...)."""


class DuplicateTitle(HabitboardError):
    """A category with the same title (case-insensitive) already exists."""


class NotFound(HabitboardError):
    """The referenced entity does not exist."""


class CategoryNotFound(NotFound):
    """The referenced category does not exist."""


class TrackerNotFound(NotFound):
    """The referenced tracker does not exist."""


class FutureDate(HabitboardError):
    """A completion was requested for a day after today."""


class StorageFailure(HabitboardError):
    """The underlying database read or write failed."""


__all__ = [
    "CategoryNotFound",
    "DuplicateTitle",
    "FutureDate",
    "HabitboardError",
    "InvalidInput",
    "NotFound",
    "StorageFailure",
    "TrackerNotFound",
]

"""Habitboard: habit tracker core with categories, schedules and statistics."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .services.store import TrackerStore

__all__ = ["BaseConfig", "DevConfig", "TrackerStore"]

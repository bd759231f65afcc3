"""Pytest configuration and shared fixtures for habitboard tests.

Every test gets its own SQLite file under ``tmp_path`` so repositories and
the store never touch a real data directory.
"""

from __future__ import annotations

import logging
from datetime import date

import pytest

from habitboard.config import TestConfig
from habitboard.infra.database import create_db_engine, create_session_factory, init_database
from habitboard.logging_config import ROOT_LOGGER_NAME
from habitboard.services.store import TrackerStore

# 2024-01-01 was a Monday. The store clock is pinned to Wednesday 2024-01-10.
MONDAY = date(2024, 1, 1)
TODAY = date(2024, 1, 10)


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path, monkeypatch):
    """Point the data directory at tmp_path and reset package log handlers."""
    monkeypatch.setenv("HABITBOARD_DATA_DIR", str(tmp_path / "instance"))
    monkeypatch.delenv("HABITBOARD_DATABASE_URL", raising=False)
    yield
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(package_logger.handlers):
        handler.close()
    package_logger.handlers.clear()


@pytest.fixture
def config(tmp_path):
    return TestConfig(tmp_path / "data")


@pytest.fixture
def db_engine(config):
    """Create an isolated SQLite database with all tables for one test.

    Yields:
        Engine: SQLModel engine connected to the test database
    """
    engine = create_db_engine(config)
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory matching the one the store hands to repositories."""
    return create_session_factory(db_engine)


@pytest.fixture
def monday() -> date:
    return MONDAY


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def store(db_engine):
    """Open store on the test engine with a fixed clock."""
    tracker_store = TrackerStore(engine=db_engine, clock=lambda: TODAY).open()
    yield tracker_store
    tracker_store.close()


@pytest.fixture
def category_factory(store):
    """Factory for persisted categories."""

    def _create_category(title: str = "Health"):
        return store.create_category(title)

    return _create_category


@pytest.fixture
def tracker_factory(store, category_factory):
    """Factory for persisted trackers with palette defaults.

    A category titled ``Health`` is created on first use when no
    ``category_id`` is given.
    """
    default_category = {}

    def _create_tracker(
        name: str = "Run",
        schedule=(0, 2, 4),
        category_id=None,
        emoji: str = "🙂",
        color: str = "CollectionColor1",
    ):
        if category_id is None:
            if "id" not in default_category:
                default_category["id"] = category_factory("Health").id
            category_id = default_category["id"]
        return store.create_tracker(name, emoji, color, schedule, category_id)

    return _create_tracker

"""Tests for the click command-line front end."""

from __future__ import annotations

import re
from datetime import date

import pytest
from click.testing import CliRunner

from habitboard.cli import cli
from habitboard.config import BaseConfig
from habitboard.services.store import TrackerStore

UUID_RE = re.compile(r"\[([0-9a-f-]{36})\]")


@pytest.fixture
def runner(monkeypatch):
    # Keep INFO log lines off the console so output holds only command text.
    monkeypatch.setenv("HABITBOARD_DEV_MODE", "false")
    return CliRunner()


def _invoke(runner, *args, input=None):
    return runner.invoke(cli, list(args), input=input, catch_exceptions=False)


def _last_id(output: str) -> str:
    return UUID_RE.findall(output)[-1]


def test_empty_listing(runner):
    result = _invoke(runner, "categories")
    assert result.exit_code == 0
    assert "No categories yet." in result.output


def test_category_and_tracker_flow(runner):
    result = _invoke(runner, "add-category", "Health")
    assert result.exit_code == 0
    category_id = _last_id(result.output)

    result = _invoke(runner, "add-tracker", "Run", "--category", category_id, "--day", "0", "--day", "2")
    assert result.exit_code == 0
    tracker_id = _last_id(result.output)

    result = _invoke(runner, "categories")
    assert "Health" in result.output
    assert "Run (Mon, Wed)" in result.output

    result = _invoke(runner, "toggle", tracker_id, "--date", "2024-01-01")
    assert result.exit_code == 0
    assert "2024-01-01: completed (1 day(s) total)" in result.output

    result = _invoke(runner, "due", "--date", "2024-01-01")
    assert "[x]" in result.output and "Run" in result.output

    result = _invoke(runner, "due", "--date", "2024-01-02")
    assert "Nothing to track." in result.output

    result = _invoke(runner, "stats")
    assert "Trackers completed: 1" in result.output
    assert "Average value: 1.0" in result.output

    result = _invoke(runner, "toggle", tracker_id, "--date", "2024-01-01")
    assert "not completed (0 day(s) total)" in result.output


def test_duplicate_category_reports_error(runner):
    _invoke(runner, "add-category", "Sport")
    result = _invoke(runner, "add-category", "sport")
    assert result.exit_code == 1
    assert "DuplicateTitle" in result.output


def test_future_toggle_reports_error(runner):
    category_id = _last_id(_invoke(runner, "add-category", "Health").output)
    tracker_id = _last_id(
        _invoke(runner, "add-tracker", "Run", "--category", category_id, "--day", "0").output
    )

    result = _invoke(runner, "toggle", tracker_id, "--date", "2999-01-01")

    assert result.exit_code == 1
    assert "FutureDate" in result.output


def test_add_tracker_requires_day(runner):
    category_id = _last_id(_invoke(runner, "add-category", "Health").output)
    result = runner.invoke(cli, ["add-tracker", "Run", "--category", category_id])
    assert result.exit_code == 2


def test_rename_and_delete_category(runner):
    category_id = _last_id(_invoke(runner, "add-category", "Health").output)

    result = _invoke(runner, "rename-category", category_id, "Wellbeing")
    assert "Renamed category to Wellbeing" in result.output

    result = _invoke(runner, "delete-category", category_id, input="y\n")
    assert result.exit_code == 0
    assert "Category deleted" in result.output
    assert "No categories yet." in _invoke(runner, "categories").output


def test_delete_tracker_missing(runner):
    result = _invoke(runner, "delete-tracker", "00000000-0000-0000-0000-000000000000")
    assert result.exit_code == 1
    assert "TrackerNotFound" in result.output


def test_stats_empty(runner):
    assert "Nothing to analyze yet." in _invoke(runner, "stats").output


def test_due_filters_and_search(runner):
    category_id = _last_id(_invoke(runner, "add-category", "Health").output)
    run_id = _last_id(_invoke(runner, "add-tracker", "Run", "--category", category_id, "--day", "0").output)
    _invoke(runner, "add-tracker", "Read", "--category", category_id, "--day", "0")
    _invoke(runner, "toggle", run_id, "--date", "2024-01-01")

    completed = _invoke(runner, "due", "--date", "2024-01-01", "--filter", "completed").output
    assert "Run" in completed and "Read" not in completed

    searched = _invoke(runner, "due", "--date", "2024-01-01", "--filter", "all", "--search", "rea").output
    assert "Read" in searched and "Run" not in searched


def test_cli_writes_to_configured_database(runner):
    _invoke(runner, "add-category", "Health")
    with TrackerStore(BaseConfig()) as store:
        assert [c.title for c in store.list_categories()] == ["Health"]
        assert store.today() == date.today()

"""Command-line front end for the tracker store."""

from __future__ import annotations

import functools
from datetime import datetime
from typing import Optional
from uuid import UUID

import click

from .config import BaseConfig
from .constants.palette import COLORS, EMOJIS
from .domain.entities import TrackerFilter, Weekday, to_day
from .errors import HabitboardError
from .logging_config import setup_logging
from .services.store import TrackerStore

DATE_FORMAT = "%Y-%m-%d"


def reports_errors(func):
    """Turn core errors into a clean CLI failure instead of a traceback."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except HabitboardError as exc:
            raise click.ClickException(f"{exc.__class__.__name__}: {exc.message}") from exc

    return wrapper


def _format_schedule(schedule) -> str:
    if len(schedule) == len(Weekday):
        return "every day"
    return ", ".join(day.short_name for day in sorted(schedule))


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track habits by category and weekday."""

    config = BaseConfig()
    setup_logging(config)
    store = TrackerStore(config).open()
    ctx.obj = store
    ctx.call_on_close(store.close)


@cli.command("categories")
@click.pass_obj
@reports_errors
def list_categories(store: TrackerStore) -> None:
    """List categories and their trackers."""

    categories = store.list_categories()
    if not categories:
        click.echo("No categories yet.")
        return
    for category in categories:
        click.echo(f"{category.title} [{category.id}]")
        for tracker in category.trackers:
            count = store.completion_count(tracker.id)
            click.echo(
                f"  {tracker.emoji} {tracker.name} ({_format_schedule(tracker.schedule)}) "
                f"- {count} day(s) [{tracker.id}]"
            )


@cli.command("add-category")
@click.argument("title")
@click.pass_obj
@reports_errors
def add_category(store: TrackerStore, title: str) -> None:
    category = store.create_category(title)
    click.echo(f"Created category {category.title} [{category.id}]")


@cli.command("rename-category")
@click.argument("category_id", type=click.UUID)
@click.argument("title")
@click.pass_obj
@reports_errors
def rename_category(store: TrackerStore, category_id: UUID, title: str) -> None:
    category = store.rename_category(category_id, title)
    click.echo(f"Renamed category to {category.title}")


@cli.command("delete-category")
@click.argument("category_id", type=click.UUID)
@click.confirmation_option(prompt="Delete the category and all of its trackers?")
@click.pass_obj
@reports_errors
def delete_category(store: TrackerStore, category_id: UUID) -> None:
    store.delete_category(category_id)
    click.echo("Category deleted")


@cli.command("add-tracker")
@click.argument("name")
@click.option("--category", "category_id", type=click.UUID, required=True, help="Category id")
@click.option("--emoji", type=click.Choice(EMOJIS), default=EMOJIS[0], show_default=True)
@click.option("--color", type=click.Choice(COLORS), default=COLORS[0], show_default=True)
@click.option(
    "--day",
    "days",
    type=click.IntRange(0, 6),
    multiple=True,
    required=True,
    help="Weekday number, Monday=0 ... Sunday=6. Repeat for several days.",
)
@click.pass_obj
@reports_errors
def add_tracker(
    store: TrackerStore, name: str, category_id: UUID, emoji: str, color: str, days: tuple[int, ...]
) -> None:
    tracker = store.create_tracker(name, emoji, color, days, category_id)
    click.echo(f"Created tracker {tracker.emoji} {tracker.name} [{tracker.id}]")


@cli.command("delete-tracker")
@click.argument("tracker_id", type=click.UUID)
@click.pass_obj
@reports_errors
def delete_tracker(store: TrackerStore, tracker_id: UUID) -> None:
    store.delete_tracker(tracker_id)
    click.echo("Tracker deleted")


@cli.command("due")
@click.option("--date", "on", type=click.DateTime(formats=[DATE_FORMAT]), default=None)
@click.option(
    "--filter",
    "tracker_filter",
    type=click.Choice([f.value for f in TrackerFilter]),
    default=TrackerFilter.DUE_TODAY.value,
    show_default=True,
)
@click.option("--search", default="", help="Only trackers whose name contains this text")
@click.pass_obj
@reports_errors
def due(store: TrackerStore, on: Optional[datetime], tracker_filter: str, search: str) -> None:
    """Show trackers for a day with their completion marks."""

    day = to_day(on) if on is not None else store.today()
    categories = store.visible_categories(day, TrackerFilter(tracker_filter), search)
    if not categories:
        click.echo("Nothing to track.")
        return
    for category in categories:
        click.echo(category.title)
        for tracker in category.trackers:
            mark = "x" if store.is_completed(tracker.id, day) else " "
            click.echo(f"  [{mark}] {tracker.emoji} {tracker.name} [{tracker.id}]")


@cli.command("toggle")
@click.argument("tracker_id", type=click.UUID)
@click.option("--date", "on", type=click.DateTime(formats=[DATE_FORMAT]), default=None)
@click.pass_obj
@reports_errors
def toggle(store: TrackerStore, tracker_id: UUID, on: Optional[datetime]) -> None:
    day = to_day(on) if on is not None else store.today()
    completed = store.toggle_completion(tracker_id, day)
    state = "completed" if completed else "not completed"
    click.echo(f"{day.isoformat()}: {state} ({store.completion_count(tracker_id)} day(s) total)")


@cli.command("stats")
@click.pass_obj
@reports_errors
def stats(store: TrackerStore) -> None:
    statistics = store.statistics()
    if statistics.is_empty:
        click.echo("Nothing to analyze yet.")
        return
    click.echo(f"Best period: {statistics.best_period}")
    click.echo(f"Ideal days: {statistics.ideal_days}")
    click.echo(f"Trackers completed: {statistics.completed_trackers}")
    click.echo(f"Average value: {statistics.average_value:.1f}")


def main() -> None:
    cli(prog_name="habitboard")


if __name__ == "__main__":  # pragma: no cover
    main()

"""Typer CLI for the school calendar."""

from __future__ import annotations

import datetime
import json
import logging
import pathlib
import sys

import typer

from schoolcal.api import holiday_set_to_dict
from schoolcal.events import (
    CalendarEvent,
    EventNotFoundError,
    EventStore,
    EventType,
    ReadOnlyEventError,
    format_month,
    merge_events,
    new_event,
    upcoming as upcoming_events,
)
from schoolcal.holidays import PRESETS, UnsupportedCountryError, compute_holidays

app = typer.Typer(
    name="schoolcal",
    help="School calendar: birthdays, homework, tests and appointments "
    "with national holidays preloaded.",
    add_completion=False,
)

DEFAULT_EVENTS_PATH = pathlib.Path.home() / ".schoolcal" / "events.json"

EVENTS_OPTION = typer.Option(
    DEFAULT_EVENTS_PATH,
    "--events",
    "-e",
    envvar="SCHOOLCAL_EVENTS",
    help="JSON file holding your events.",
)


def _parse_date(value: str) -> datetime.date:
    """Parse a YYYY-MM-DD date string."""
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid date format {value!r}. Use YYYY-MM-DD.") from None


def _parse_time(value: str) -> str:
    """Validate an HH:MM time string."""
    try:
        datetime.datetime.strptime(value, "%H:%M")
    except ValueError:
        raise typer.BadParameter(f"Invalid time format {value!r}. Use HH:MM.") from None
    return value


def _current_year() -> int:
    return datetime.date.today().year


def _load_store(path: pathlib.Path) -> tuple[EventStore, list[CalendarEvent]]:
    store = EventStore(path)
    try:
        events = store.load()
    except json.JSONDecodeError as exc:
        typer.echo(f"Error: Invalid JSON in event file: {exc}", err=True)
        raise typer.Exit(code=1) from None
    except (KeyError, ValueError) as exc:
        typer.echo(f"Error: Malformed event file {path}: {exc}", err=True)
        raise typer.Exit(code=1) from None
    return store, events


@app.callback()
def _main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def holidays(
    country: str = typer.Option(
        "US",
        "--country",
        "-c",
        help=f"Country code ({', '.join(sorted(PRESETS))}).",
    ),
    year: int = typer.Option(
        None,
        "--year",
        "-y",
        min=datetime.MINYEAR,
        max=datetime.MAXYEAR,
        help="Year to list holidays for. Defaults to the current year.",
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        help="Output the holiday set as JSON.",
    ),
) -> None:
    """List holidays for a country."""
    resolved_year = year if year is not None else _current_year()

    try:
        holiday_set = compute_holidays(resolved_year, country)
    except UnsupportedCountryError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if output_json:
        json.dump(holiday_set_to_dict(holiday_set), sys.stdout, indent=2)
        typer.echo()
        return

    typer.echo(f"  {PRESETS[holiday_set.country]} - {resolved_year}")
    typer.echo()
    for h in holiday_set.holidays:
        line = f"    {h.date.strftime('%a, %b %d %Y'):>16}  {h.name}"
        if h.actual_date is not None:
            line += f" (observed; actual {h.actual_date.strftime('%a, %b %d %Y')})"
        typer.echo(line)


@app.command(name="calendar")
def calendar_view(
    year: int = typer.Option(
        None,
        "--year",
        "-y",
        min=datetime.MINYEAR,
        max=datetime.MAXYEAR,
        help="Year to show. Defaults to the current year.",
    ),
    month: int = typer.Option(
        None,
        "--month",
        "-m",
        min=1,
        max=12,
        help="Month to show (1-12). Defaults to the current month.",
    ),
    country: str = typer.Option("US", "--country", "-c", help="Holiday country code."),
    show_holidays: bool = typer.Option(
        True,
        "--holidays/--no-holidays",
        help="Merge national holidays into the view.",
    ),
    event_types: list[EventType] | None = typer.Option(  # noqa: B008
        None,
        "--type",
        "-t",
        help="Only show events of this type. Repeatable.",
    ),
    events_path: pathlib.Path = EVENTS_OPTION,
) -> None:
    """Show a month grid with your events and holidays."""
    today = datetime.date.today()
    resolved_year = year if year is not None else today.year
    resolved_month = month if month is not None else today.month

    _store, events = _load_store(events_path)

    if show_holidays:
        # Next year's New Year's Day can be observed on Dec 31.
        years = [resolved_year]
        if resolved_month == 12 and resolved_year < datetime.MAXYEAR:
            years.append(resolved_year + 1)
        try:
            for y in years:
                events = merge_events(events, compute_holidays(y, country))
        except UnsupportedCountryError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1) from None

    typer.echo(format_month(resolved_year, resolved_month, events, types=event_types))


@app.command()
def add(
    title: str = typer.Argument(..., help="Event title."),
    date: str = typer.Option(..., "--date", "-d", help="Event date (YYYY-MM-DD)."),
    event_type: EventType = typer.Option(
        EventType.ASSIGNMENT,
        "--type",
        "-t",
        help="Event type.",
    ),
    time: str | None = typer.Option(None, "--time", help="Start time (HH:MM)."),
    notes: str | None = typer.Option(None, "--notes", help="Free-form notes."),
    color: str | None = typer.Option(None, "--color", help="Colour override, e.g. #FFAA00."),
    events_path: pathlib.Path = EVENTS_OPTION,
) -> None:
    """Add an event to your calendar."""
    event_date = _parse_date(date)
    event_time = _parse_time(time) if time else None

    store, _events = _load_store(events_path)
    try:
        event = new_event(
            title, event_date, event_type, time=event_time, notes=notes, color_hex=color
        )
    except ReadOnlyEventError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    store.add(event)
    typer.echo(f"Added {event.id}")


@app.command()
def delete(
    event_id: str = typer.Argument(..., help="Id of the event to delete."),
    events_path: pathlib.Path = EVENTS_OPTION,
) -> None:
    """Delete one of your events. Holidays cannot be deleted."""
    store, _events = _load_store(events_path)
    try:
        store.delete(event_id)
    except ReadOnlyEventError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    except EventNotFoundError:
        typer.echo(f"Error: No event with id {event_id!r}", err=True)
        raise typer.Exit(code=1) from None

    typer.echo(f"Deleted {event_id}")


@app.command()
def upcoming(
    limit: int = typer.Option(8, "--limit", "-n", min=1, help="Number of events to show."),
    country: str = typer.Option("US", "--country", "-c", help="Holiday country code."),
    event_types: list[EventType] | None = typer.Option(  # noqa: B008
        None,
        "--type",
        "-t",
        help="Only list events of this type. Repeatable.",
    ),
    events_path: pathlib.Path = EVENTS_OPTION,
) -> None:
    """List the next events, holidays included."""
    today = datetime.date.today()
    _store, events = _load_store(events_path)

    try:
        for y in (today.year, today.year + 1):
            events = merge_events(events, compute_holidays(y, country))
    except UnsupportedCountryError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    for e in upcoming_events(events, today, limit, types=event_types):
        when = f" {e.time}" if e.time else ""
        typer.echo(f"    {e.date.strftime('%a, %b %d %Y')}{when}  [{e.type.value}] {e.title}")


def main() -> None:
    """Entry point for the CLI."""
    app()

"""Calendar events and their merge with computed holidays.

User events are stored in a JSON file.  Holidays are never stored; they
are turned into read-only events (id ``holiday-<date>``) each time the
calendar is built, so a year change only needs a fresh
:func:`~schoolcal.holidays.compute_holidays` call.
"""

from __future__ import annotations

import calendar
import datetime
import enum
import json
import logging
import pathlib
import random
import string
from collections.abc import Iterable
from typing import NamedTuple

from schoolcal.holidays import HolidaySet

logger = logging.getLogger(__name__)

HOLIDAY_ID_PREFIX = "holiday-"

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class EventType(str, enum.Enum):
    BIRTHDAY = "birthday"
    HOMEWORK = "homework"
    ASSIGNMENT = "assignment"
    TEST = "test"
    DUE = "due"
    APPOINTMENT = "appointment"
    HOLIDAY = "holiday"


class CalendarEvent(NamedTuple):
    """An all-day calendar entry, optionally with a start time (``HH:MM``)."""

    id: str
    title: str
    date: datetime.date
    type: EventType
    time: str | None = None
    notes: str | None = None
    color_hex: str | None = None
    is_holiday: bool = False


class ReadOnlyEventError(ValueError):
    """Raised when trying to delete or create a holiday event."""


class EventNotFoundError(KeyError):
    """Raised when no event has the requested id."""


# ---------------------------------------------------------------------------
# Building events
# ---------------------------------------------------------------------------


def _id_suffix(k: int = 6) -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=k))


def new_event(
    title: str,
    date: datetime.date,
    type: EventType,
    *,
    time: str | None = None,
    notes: str | None = None,
    color_hex: str | None = None,
) -> CalendarEvent:
    """Create a user event with a generated id."""
    if type is EventType.HOLIDAY:
        raise ReadOnlyEventError("Holiday events are computed and cannot be created by hand")
    event_id = f"{type.value}-{date.isoformat()}-{title}-{_id_suffix()}"
    return CalendarEvent(
        id=event_id,
        title=title,
        date=date,
        type=type,
        time=time,
        notes=notes,
        color_hex=color_hex,
    )


def holiday_events(holiday_set: HolidaySet) -> list[CalendarEvent]:
    """Turn a holiday set into read-only events keyed by observed date."""
    return [
        CalendarEvent(
            id=f"{HOLIDAY_ID_PREFIX}{h.date.isoformat()}",
            title=h.name,
            date=h.date,
            type=EventType.HOLIDAY,
            is_holiday=True,
        )
        for h in holiday_set.holidays
    ]


def merge_events(
    events: Iterable[CalendarEvent], holiday_set: HolidaySet | None
) -> list[CalendarEvent]:
    """Combine user events with holidays.

    Entries are keyed by id; a holiday replaces any user event that
    happens to share its id.
    """
    merged: dict[str, CalendarEvent] = {e.id: e for e in events}
    if holiday_set is not None:
        for h in holiday_events(holiday_set):
            merged[h.id] = h
    return list(merged.values())


def events_by_date(
    events: Iterable[CalendarEvent],
    types: Iterable[EventType] | None = None,
) -> dict[datetime.date, list[CalendarEvent]]:
    """Group *events* per day, keeping only *types*; holidays sort first.

    No *types* (``None`` or empty) keeps every type.
    """
    allowed = set(types) if types else set(EventType)
    out: dict[datetime.date, list[CalendarEvent]] = {}
    for e in events:
        if e.type not in allowed:
            continue
        out.setdefault(e.date, []).append(e)
    for day_events in out.values():
        day_events.sort(key=lambda e: not e.is_holiday)
    return out


def upcoming(
    events: Iterable[CalendarEvent],
    today: datetime.date,
    limit: int = 8,
    types: Iterable[EventType] | None = None,
) -> list[CalendarEvent]:
    """Return the next *limit* events of *types* on or after *today*."""
    allowed = set(types) if types else set(EventType)
    future = [e for e in events if e.date >= today and e.type in allowed]
    future.sort(key=lambda e: (e.date, e.time or ""))
    return future[:limit]


def delete_event(events: list[CalendarEvent], event_id: str) -> list[CalendarEvent]:
    """Return *events* without *event_id*.

    Raises :class:`ReadOnlyEventError` for holidays and
    :class:`EventNotFoundError` for an unknown id.
    """
    if event_id.startswith(HOLIDAY_ID_PREFIX):
        raise ReadOnlyEventError(f"Event {event_id!r} is a holiday and cannot be deleted")
    remaining = [e for e in events if e.id != event_id]
    if len(remaining) == len(events):
        raise EventNotFoundError(event_id)
    return remaining


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


def event_to_dict(event: CalendarEvent) -> dict[str, object]:
    data: dict[str, object] = {
        "id": event.id,
        "title": event.title,
        "date": event.date.isoformat(),
        "type": event.type.value,
    }
    if event.time:
        data["time"] = event.time
    if event.notes:
        data["notes"] = event.notes
    if event.color_hex:
        data["colorHex"] = event.color_hex
    return data


def event_from_dict(data: dict[str, object]) -> CalendarEvent:
    return CalendarEvent(
        id=str(data["id"]),
        title=str(data["title"]),
        date=datetime.date.fromisoformat(str(data["date"])),
        type=EventType(data["type"]),
        time=data.get("time"),  # type: ignore[arg-type]
        notes=data.get("notes"),  # type: ignore[arg-type]
        color_hex=data.get("colorHex"),  # type: ignore[arg-type]
    )


class EventStore:
    """User events persisted as a JSON list in a single file.

    A missing file reads as an empty calendar.  Holiday events are
    filtered out on save so they are always recomputed.
    """

    def __init__(self, path: str | pathlib.Path):
        self.path = pathlib.Path(path)

    def load(self) -> list[CalendarEvent]:
        if not self.path.exists():
            return []
        raw = json.loads(self.path.read_text())
        if not isinstance(raw, list):
            raise ValueError(f"Event file {self.path} must contain a JSON list")
        for i, item in enumerate(raw):
            if not isinstance(item, dict):
                raise ValueError(f"Entry {i} in {self.path} is not a JSON object")
        return [event_from_dict(item) for item in raw]

    def save(self, events: Iterable[CalendarEvent]) -> None:
        data = [event_to_dict(e) for e in events if not e.is_holiday]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))
        logger.debug("Saved %d events to %s", len(data), self.path)

    def add(self, event: CalendarEvent) -> None:
        events = self.load()
        # newest first
        self.save([event, *events])

    def delete(self, event_id: str) -> None:
        self.save(delete_event(self.load(), event_id))


# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------


def format_month(
    year: int,
    month: int,
    events: Iterable[CalendarEvent],
    types: Iterable[EventType] | None = None,
) -> str:
    """Return a Sunday-first month grid with event markers and a day list."""
    by_date = events_by_date(
        (e for e in events if e.date.year == year and e.date.month == month), types
    )

    lines: list[str] = [
        "",
        f"  {calendar.month_name[month]} {year}",
        "  Legend: H=Holiday  *=Event",
        "  Su  Mo  Tu  We  Th  Fr  Sa",
    ]

    cal = calendar.Calendar(firstweekday=6)
    row = ""
    for day_num, weekday in cal.itermonthdays2(year, month):
        if day_num == 0:
            row += "    "
        else:
            day_events = by_date.get(datetime.date(year, month, day_num), [])
            if any(e.is_holiday for e in day_events):
                cell = f" {day_num:>2}H"
            elif day_events:
                cell = f" {day_num:>2}*"
            else:
                cell = f"  {day_num:>2}"
            row += cell

        if weekday == 5:
            lines.append(row)
            row = ""

    if row.strip():
        lines.append(row)
    lines.append("")

    for d in sorted(by_date):
        for e in by_date[d]:
            when = f" {e.time}" if e.time else ""
            lines.append(f"    {d.strftime('%a, %b %d')}{when}  [{e.type.value}] {e.title}")

    return "\n".join(lines)

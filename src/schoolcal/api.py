"""Boundary handler for the ``/api/holidays`` endpoint.

Framework-free: takes the query parameters as a mapping and returns a
``(status, body)`` pair that any web layer can turn into a JSON response.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Mapping

from schoolcal.holidays import Holiday, HolidaySet, UnsupportedCountryError, compute_holidays

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY = "US"


def holiday_to_dict(holiday: Holiday) -> dict[str, str]:
    out = {"name": holiday.name, "date": holiday.date.isoformat()}
    if holiday.actual_date is not None:
        out["actualDate"] = holiday.actual_date.isoformat()
    return out


def holiday_set_to_dict(holiday_set: HolidaySet) -> dict[str, object]:
    return {
        "year": holiday_set.year,
        "country": holiday_set.country,
        "holidays": [holiday_to_dict(h) for h in holiday_set.holidays],
    }


def _parse_year(value: str | None, today: datetime.date) -> int:
    """Parse the ``year`` parameter, falling back to the current year.

    Years ``datetime.date`` cannot represent count as invalid.
    """
    try:
        year = int(value) if value is not None else 0
    except ValueError:
        year = 0
    if not datetime.MINYEAR <= year <= datetime.MAXYEAR:
        return today.year
    return year


def handle_holidays(
    params: Mapping[str, str | None],
    *,
    today: datetime.date | None = None,
) -> tuple[int, dict[str, object]]:
    """Answer a holidays request.

    ``year`` defaults to the current year when missing or not a number;
    ``country`` defaults to ``US`` and is case-insensitive.  An unsupported
    country yields a 400 with an ``error`` message.
    """
    today = today or datetime.date.today()
    year = _parse_year(params.get("year"), today)
    country = (params.get("country") or DEFAULT_COUNTRY).upper()

    try:
        holiday_set = compute_holidays(year, country)
    except UnsupportedCountryError as exc:
        logger.info("Rejected holidays request: %s", exc)
        return 400, {"error": str(exc)}

    return 200, holiday_set_to_dict(holiday_set)

"""Holiday-date engine.

Computes the *observed* public holidays of a country for a given year
from a declarative rule table.  Three rule kinds cover every entry:

  - ``FixedDate``    - the same month/day each year (July 4)
  - ``NthWeekday``   - the n-th weekday of a month (3rd Monday of January)
  - ``LastWeekday``  - the last weekday of a month (last Monday of May)

Observed rule: when a rule has ``observed=True`` and its date falls on
Saturday the observed date is the preceding Friday; on Sunday it is the
following Monday.  The unshifted date is kept as ``actual_date``.

New Year's Day falling on a Saturday is observed on December 31 of the
*previous* year, so a :class:`HolidaySet` may hold one date outside its
own ``year``.  This matches US federal practice and is left as-is.
"""

from __future__ import annotations

import datetime
import enum
import logging
from typing import NamedTuple

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class Weekday(enum.IntEnum):
    """Day of week with Sunday = 0 … Saturday = 6."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def of(cls, d: datetime.date) -> Weekday:
        return cls(d.isoweekday() % 7)


class FixedDate(NamedTuple):
    """Same calendar day every year."""

    month: int
    day: int
    observed: bool = True


class NthWeekday(NamedTuple):
    """The *n*-th *weekday* of *month* (``n`` is 1-based)."""

    month: int
    weekday: Weekday
    n: int
    observed: bool = False


class LastWeekday(NamedTuple):
    """The last *weekday* of *month*."""

    month: int
    weekday: Weekday
    observed: bool = False


HolidayRule = FixedDate | NthWeekday | LastWeekday


class Observance(NamedTuple):
    observed: datetime.date
    actual: datetime.date


class Holiday(NamedTuple):
    """A named holiday.

    ``date`` is the observed date.  ``actual_date`` is only set when the
    weekend shift moved the holiday off its literal date.
    """

    name: str
    date: datetime.date
    actual_date: datetime.date | None = None


class HolidaySet(NamedTuple):
    """All holidays of *country* for *year*, in rule-table order."""

    year: int
    country: str
    holidays: list[Holiday]


class UnsupportedCountryError(ValueError):
    """Raised for a country code with no rule table."""

    def __init__(self, country: str):
        self.country = country
        self.supported = sorted(RULE_TABLES)
        super().__init__(
            f"Unsupported country {country!r}. Supported: {', '.join(self.supported)}"
        )


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


def nth_weekday_of_month(year: int, month: int, weekday: int, n: int) -> datetime.date:
    """Return the *n*-th occurrence of *weekday* in *month* of *year*.

    *weekday* uses Sunday = 0 … Saturday = 6.  Asking for an occurrence
    the month does not have raises ``ValueError`` from ``datetime.date``.
    """
    first = datetime.date(year, month, 1)
    offset = (7 + weekday - Weekday.of(first)) % 7
    return datetime.date(year, month, 1 + offset + (n - 1) * 7)


def last_weekday_of_month(year: int, month: int, weekday: int) -> datetime.date:
    """Return the last occurrence of *weekday* in *month* of *year*."""
    if month == 12:
        last = datetime.date(year, 12, 31)
    else:
        last = datetime.date(year, month + 1, 1) - datetime.timedelta(days=1)
    offset = (7 + Weekday.of(last) - weekday) % 7
    return last - datetime.timedelta(days=offset)


def observed_date(d: datetime.date) -> Observance:
    """Shift a holiday to its *observed* date (Sat→Fri, Sun→Mon)."""
    wd = Weekday.of(d)
    if wd == Weekday.SATURDAY:
        return Observance(d - datetime.timedelta(days=1), d)
    if wd == Weekday.SUNDAY:
        return Observance(d + datetime.timedelta(days=1), d)
    return Observance(d, d)


# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

RULE_TABLES: dict[str, tuple[tuple[str, HolidayRule], ...]] = {
    "US": (
        ("New Year's Day", FixedDate(1, 1)),
        ("Martin Luther King Jr. Day", NthWeekday(1, Weekday.MONDAY, 3)),
        ("Presidents' Day", NthWeekday(2, Weekday.MONDAY, 3)),
        ("Memorial Day", LastWeekday(5, Weekday.MONDAY)),
        ("Juneteenth National Independence Day", FixedDate(6, 19)),
        ("Independence Day", FixedDate(7, 4)),
        ("Labor Day", NthWeekday(9, Weekday.MONDAY, 1)),
        ("Columbus Day", NthWeekday(10, Weekday.MONDAY, 2)),
        ("Veterans Day", FixedDate(11, 11)),
        ("Thanksgiving Day", NthWeekday(11, Weekday.THURSDAY, 4)),
        ("Christmas Day", FixedDate(12, 25)),
    ),
}

PRESETS: dict[str, str] = {
    "US": "United States federal holidays",
}


def rule_date(rule: HolidayRule, year: int) -> datetime.date:
    """Return the literal (unshifted) date of *rule* in *year*."""
    if isinstance(rule, FixedDate):
        return datetime.date(year, rule.month, rule.day)
    if isinstance(rule, NthWeekday):
        return nth_weekday_of_month(year, rule.month, rule.weekday, rule.n)
    if isinstance(rule, LastWeekday):
        return last_weekday_of_month(year, rule.month, rule.weekday)
    raise TypeError(f"Unknown holiday rule {rule!r}")


def evaluate_rule(name: str, rule: HolidayRule, year: int) -> Holiday:
    actual = rule_date(rule, year)
    if not rule.observed:
        return Holiday(name, actual)
    obs = observed_date(actual)
    if obs.observed == obs.actual:
        return Holiday(name, actual)
    return Holiday(name, obs.observed, obs.actual)


def compute_holidays(year: int, country: str = "US") -> HolidaySet:
    """Return the :class:`HolidaySet` for *country* and *year*.

    *country* is matched case-insensitively.  Raises
    :class:`UnsupportedCountryError` if there is no rule table for it.
    """
    code = country.upper()
    table = RULE_TABLES.get(code)
    if table is None:
        raise UnsupportedCountryError(country)
    holidays = [evaluate_rule(name, rule, year) for name, rule in table]
    logger.debug("Computed %d holidays for %s %d", len(holidays), code, year)
    return HolidaySet(year, code, holidays)

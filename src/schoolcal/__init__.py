"""School calendar.

Birthdays, homework, tests and appointments on a month grid, merged with
national holidays computed for the displayed year.
"""

from schoolcal.holidays import (
    FixedDate,
    Holiday,
    HolidaySet,
    LastWeekday,
    NthWeekday,
    UnsupportedCountryError,
    Weekday,
    compute_holidays,
    last_weekday_of_month,
    nth_weekday_of_month,
    observed_date,
)

__all__ = [
    "FixedDate",
    "Holiday",
    "HolidaySet",
    "LastWeekday",
    "NthWeekday",
    "UnsupportedCountryError",
    "Weekday",
    "compute_holidays",
    "last_weekday_of_month",
    "nth_weekday_of_month",
    "observed_date",
]

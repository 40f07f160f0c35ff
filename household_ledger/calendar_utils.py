"""Calendar helpers shared by the recurrence and budget modules.

All helpers work on local wall-clock dates (``datetime.date``). Nothing here
converts through UTC timestamps, which is what would shift a date onto the
adjacent day.

Two different "week" notions live here and must not be mixed up:

* ``nth_weekday_of_month`` counts occurrences of a date's weekday
  (the 3rd Tuesday of the month is 3).
* ``week_of_month`` is the row of the date in a Sunday-first month grid,
  which depends on the weekday the month starts on.
"""

from __future__ import annotations

import calendar
import math
from datetime import date
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

DATE_FORMAT = "%Y-%m-%d"


def parse_date(value: Union[str, date]) -> date:
    """Parse a ``YYYY-MM-DD`` string into a date.

    Example:
        >>> parse_date('2024-02-29')
        datetime.date(2024, 2, 29)
    """
    if isinstance(value, date):
        return value
    parts = str(value).strip().split("-")
    if len(parts) != 3:
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}")
    try:
        year, month, day = (int(part) for part in parts)
    except ValueError:
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}") from None
    return date(year, month, day)


def format_date(value: date) -> str:
    """Format a date as ``YYYY-MM-DD``."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def weekday_of_first(year: int, month: int) -> int:
    """Grid column of the 1st of the month, Sunday = 0 ... Saturday = 6."""
    return (date(year, month, 1).weekday() + 1) % 7


def nth_weekday_of_month(value: date) -> int:
    """Which occurrence of its weekday ``value`` is within its month (1-5)."""
    return math.ceil(value.day / 7)


def week_of_month(value: date) -> int:
    """Row index (1-based) of ``value`` in its month's Sunday-first grid."""
    return math.ceil((value.day + weekday_of_first(value.year, value.month)) / 7)


def weeks_in_month(year: int, month: int) -> int:
    """Number of grid rows needed to display the month."""
    return week_of_month(date(year, month, days_in_month(year, month)))


def month_key(value: Union[date, int], month: Optional[int] = None) -> str:
    """``YYYY-MM`` key for a date, or for an explicit ``(year, month)`` pair."""
    if isinstance(value, date):
        return f"{value.year:04d}-{value.month:02d}"
    if month is None:
        raise ValueError("month is required when passing a year")
    return f"{value:04d}-{month:02d}"


def add_months(value: date, months: int) -> date:
    """Shift by whole months, clamping to the last day of a shorter month.

    Example:
        >>> add_months(date(2024, 1, 31), 1)
        datetime.date(2024, 2, 29)
    """
    return value + relativedelta(months=months)

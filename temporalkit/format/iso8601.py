"""ISO 8601 formatting.

Formats ISO date and time records in the extended format used by the
value classes' ``__str__``:

Dates:
    - YYYY-MM-DD
    - +YYYYYY-MM-DD / -YYYYYY-MM-DD (years outside 0000..9999)

Times:
    - HH:MM:SS
    - HH:MM:SS.f (fractional seconds, trailing zeros dropped)

Examples:
    >>> from temporalkit._internal.calendar import ISODate, ISOTime
    >>> format_iso_date(ISODate(2024, 1, 15))
    '2024-01-15'
    >>> format_iso_date(ISODate(-10, 3, 1))
    '-000010-03-01'
    >>> format_iso_time(ISOTime(14, 30, 0, 250))
    '14:30:00.25'
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from temporalkit._internal.calendar import ISODate, ISOTime
from temporalkit._internal.constants import DEFAULT_CALENDAR_ID

if TYPE_CHECKING:
    from temporalkit.calendars.base import Calendar


def format_year(year: int) -> str:
    """Format a year, using the six-digit signed form outside 0..9999."""
    if 0 <= year <= 9999:
        return f"{year:04d}"
    sign = "-" if year < 0 else "+"
    return f"{sign}{abs(year):06d}"


def format_iso_date(date: ISODate) -> str:
    return f"{format_year(date.year)}-{date.month:02d}-{date.day:02d}"


def format_iso_time(time: ISOTime) -> str:
    result = f"{time.hour:02d}:{time.minute:02d}:{time.second:02d}"
    fraction = time.millisecond * 1_000_000 + time.microsecond * 1_000 + time.nanosecond
    if fraction:
        result += "." + f"{fraction:09d}".rstrip("0")
    return result


def format_iso_date_time(date: ISODate, time: ISOTime) -> str:
    return f"{format_iso_date(date)}T{format_iso_time(time)}"


def format_calendar_annotation(calendar: Calendar) -> str:
    """Return ``[u-ca=<id>]`` for non-ISO calendars, else an empty string."""
    if calendar.id == DEFAULT_CALENDAR_ID:
        return ""
    return f"[u-ca={calendar.id}]"


__all__ = [
    "format_year",
    "format_iso_date",
    "format_iso_time",
    "format_iso_date_time",
    "format_calendar_annotation",
]

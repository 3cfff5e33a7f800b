"""temporalkit: exact date and time arithmetic with calendars and time zones.

temporalkit models exact instants, wall-clock date-times and calendar
durations separately, with nanosecond precision and explicit policies
for invalid dates and for wall-clock times that are skipped or repeated
by time zone transitions.

Core Types:
    Instant: Exact time since the Unix epoch
    ZonedDateTime: Exact time seen in a time zone and calendar
    PlainDateTime: Calendar date plus wall-clock time
    PlainDate: Calendar date
    PlainTime: Wall-clock time of day
    PlainYearMonth: Month of a year
    PlainMonthDay: Recurring day of the year
    Duration: Years, months, weeks, days and time components

Calendars and Time Zones:
    Calendar, ISO8601Calendar: Calendar capability and its ISO implementation
    get_calendar, register_calendar, list_calendars: Calendar registry
    TimeZone, FixedOffsetTimeZone, IanaTimeZone: Time zone capability
    get_time_zone: Time zone lookup by identifier

Options:
    Unit, Overflow, Disambiguation, OffsetOption, RoundingMode

Exceptions:
    TemporalError: Base exception
    TemporalRangeError, TemporalTypeError: The two error classes
    ValidationError, ParseError, OverflowError, TimezoneError,
    CalendarError: Specific range errors

Example:
    >>> from temporalkit import Duration, PlainDate
    >>> PlainDate(2021, 1, 31).add(Duration(months=1))
    PlainDate(2021, 2, 28)
"""

from __future__ import annotations

__version__ = "0.1.0"

# Core types
from temporalkit.core.duration import Duration
from temporalkit.core.fields import Fields, FieldsBuilder
from temporalkit.core.instant import Instant
from temporalkit.core.plain_date import PlainDate
from temporalkit.core.plain_date_time import PlainDateTime
from temporalkit.core.plain_month_day import PlainMonthDay
from temporalkit.core.plain_time import PlainTime
from temporalkit.core.plain_year_month import PlainYearMonth
from temporalkit.core.zoned_date_time import ZonedDateTime

# Calendars
from temporalkit.calendars import (
    Calendar,
    ISO8601Calendar,
    get_calendar,
    list_calendars,
    register_calendar,
)

# Time zones
from temporalkit.units.timezone import (
    FixedOffsetTimeZone,
    IanaTimeZone,
    TimeZone,
    get_time_zone,
)

# Options
from temporalkit.units.options import (
    Disambiguation,
    OffsetOption,
    Overflow,
    RoundingMode,
)
from temporalkit.units.unit import Unit

# Exceptions
from temporalkit.errors import (
    CalendarError,
    OverflowError,
    ParseError,
    TemporalError,
    TemporalRangeError,
    TemporalTypeError,
    TimezoneError,
    ValidationError,
)

__all__: list[str] = [
    "__version__",
    # Core types
    "Duration",
    "Fields",
    "FieldsBuilder",
    "Instant",
    "PlainDate",
    "PlainDateTime",
    "PlainMonthDay",
    "PlainTime",
    "PlainYearMonth",
    "ZonedDateTime",
    # Calendars
    "Calendar",
    "ISO8601Calendar",
    "get_calendar",
    "list_calendars",
    "register_calendar",
    # Time zones
    "TimeZone",
    "FixedOffsetTimeZone",
    "IanaTimeZone",
    "get_time_zone",
    # Options
    "Unit",
    "Overflow",
    "Disambiguation",
    "OffsetOption",
    "RoundingMode",
    # Exceptions
    "TemporalError",
    "TemporalRangeError",
    "TemporalTypeError",
    "ValidationError",
    "ParseError",
    "OverflowError",
    "TimezoneError",
    "CalendarError",
]

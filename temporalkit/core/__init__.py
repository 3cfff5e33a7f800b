"""Core temporal value types.

This module provides the value kinds of the library:
    - Instant: An exact time as nanoseconds since the Unix epoch
    - ZonedDateTime: An exact time seen in a time zone and calendar
    - PlainDateTime: A calendar date and wall-clock time, no zone
    - PlainDate: A calendar date
    - PlainTime: A wall-clock time of day
    - PlainYearMonth: A month of a particular year
    - PlainMonthDay: A recurring day of the year
    - Duration: A signed span of calendar and time components
    - Fields, FieldsBuilder: Field records used to build values
"""

from __future__ import annotations

from temporalkit.core.duration import Duration
from temporalkit.core.fields import Fields, FieldsBuilder
from temporalkit.core.instant import Instant
from temporalkit.core.plain_date import PlainDate
from temporalkit.core.plain_date_time import PlainDateTime
from temporalkit.core.plain_month_day import PlainMonthDay
from temporalkit.core.plain_time import PlainTime
from temporalkit.core.plain_year_month import PlainYearMonth
from temporalkit.core.zoned_date_time import ZonedDateTime

__all__: list[str] = [
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
]

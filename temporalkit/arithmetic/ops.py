"""Addition and difference primitives shared by the value kinds.

These functions work on ISO records and epoch nanoseconds. The value
classes in temporalkit.core validate their options and delegate here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from temporalkit._internal.calendar import (
    ISODate,
    ISOTime,
    balance_iso_date,
    balance_time,
    compare_iso_date,
    iso_time_to_nanoseconds,
)
from temporalkit._internal.validation import check_epoch_nanoseconds
from temporalkit.arithmetic.balance import (
    DurationRecord,
    TimeDurationRecord,
    balance_time_duration,
    calendar_date_add,
    nanoseconds_to_days,
    total_duration_nanoseconds,
)
from temporalkit.arithmetic.rounding import round_duration
from temporalkit.units.options import Disambiguation, Overflow, RoundingMode
from temporalkit.units.timezone import epoch_nanoseconds_to_local, get_epoch_nanoseconds_for
from temporalkit.units.unit import Unit, larger_of

if TYPE_CHECKING:
    from temporalkit.calendars.base import Calendar
    from temporalkit.units.timezone import TimeZone


def add_instant(epoch_nanoseconds: int, record: DurationRecord) -> int:
    """Add the time components of ``record`` (days as 24 hours) to an instant.

    Raises:
        OverflowError: If the result leaves the instant range.
    """
    return check_epoch_nanoseconds(
        epoch_nanoseconds + total_duration_nanoseconds(*record.time_part)
    )


def add_time(time: ISOTime, record: DurationRecord) -> tuple[int, ISOTime]:
    """Add time components to a time of day, returning (carried days, time)."""
    return balance_time(
        time.hour + record.hours,
        time.minute + record.minutes,
        time.second + record.seconds,
        time.millisecond + record.milliseconds,
        time.microsecond + record.microseconds,
        time.nanosecond + record.nanoseconds,
    )


def add_date_time(
    date: ISODate,
    time: ISOTime,
    calendar: Calendar,
    record: DurationRecord,
    overflow: Overflow = Overflow.CONSTRAIN,
) -> tuple[ISODate, ISOTime]:
    """Add a duration to a date-time.

    The time components are added first; whole days they carry are added
    to the date together with the date components, through the calendar.
    """
    from temporalkit.core.plain_date import PlainDate

    carried, new_time = add_time(time, record)
    added = calendar_date_add(
        calendar,
        PlainDate._from_iso(date, calendar),
        record.years,
        record.months,
        record.weeks,
        record.days + carried,
        overflow,
    )
    return added._iso_date, new_time


def add_zoned_date_time(
    epoch_nanoseconds: int,
    time_zone: TimeZone,
    calendar: Calendar,
    record: DurationRecord,
    overflow: Overflow = Overflow.CONSTRAIN,
) -> int:
    """Add a duration to an instant seen in a time zone.

    Date components move the wall-clock date (keeping the wall-clock
    time, resolved with the compatible policy); time components are then
    added as exact elapsed time.

    Raises:
        OverflowError: If the result leaves the instant range.
    """
    if not any(record.date_part):
        return add_instant(epoch_nanoseconds, record)

    from temporalkit.core.plain_date import PlainDate

    date, time = epoch_nanoseconds_to_local(time_zone, epoch_nanoseconds)
    added = calendar_date_add(
        calendar, PlainDate._from_iso(date, calendar), *record.date_part, overflow
    )
    intermediate = get_epoch_nanoseconds_for(
        time_zone, added._iso_date, time, Disambiguation.COMPATIBLE
    )
    return add_instant(intermediate, DurationRecord(0, 0, 0, 0, *record[4:]))


def difference_time(one: ISOTime, two: ISOTime) -> TimeDurationRecord:
    """Return the balanced hours..nanoseconds from ``one`` to ``two``."""
    elapsed = iso_time_to_nanoseconds(two) - iso_time_to_nanoseconds(one)
    return balance_time_duration(0, 0, 0, 0, 0, 0, elapsed, Unit.HOUR)


def difference_iso_date_time(
    date1: ISODate,
    time1: ISOTime,
    date2: ISODate,
    time2: ISOTime,
    calendar: Calendar,
    largest_unit: Unit,
) -> DurationRecord:
    """Return the duration from one date-time to another.

    When the time of day points against the direction of the dates, one
    day is borrowed from the date difference so both parts share a sign.
    """
    from temporalkit.core.plain_date import PlainDate

    time_difference = difference_time(time1, time2)
    time_sign = _sign(total_duration_nanoseconds(*time_difference))
    date_sign = compare_iso_date(*date2, *date1)

    adjusted = date1
    if time_sign == -date_sign:
        adjusted = balance_iso_date(date1.year, date1.month, date1.day - time_sign)
        time_difference = balance_time_duration(
            -time_sign, *time_difference[1:], largest_unit
        )

    date_largest_unit = larger_of(Unit.DAY, largest_unit)
    span = calendar.date_until(
        PlainDate._from_iso(adjusted, calendar),
        PlainDate._from_iso(date2, calendar),
        date_largest_unit,
    )
    time = balance_time_duration(span.days, *time_difference[1:], largest_unit)
    return DurationRecord(span.years, span.months, span.weeks, *time)


def difference_instant(
    one: int,
    two: int,
    increment: int,
    smallest_unit: Unit,
    largest_unit: Unit,
    mode: RoundingMode = RoundingMode.TRUNC,
) -> TimeDurationRecord:
    """Return the rounded, balanced exact time from ``one`` to ``two``."""
    rounded = round_duration(
        DurationRecord(nanoseconds=two - one), increment, smallest_unit, mode
    ).duration
    return balance_time_duration(0, *rounded[4:], largest_unit)


def difference_zoned_date_time(
    one: int,
    two: int,
    time_zone: TimeZone,
    calendar: Calendar,
    largest_unit: Unit,
) -> DurationRecord:
    """Return the calendar-aware duration between two instants in a zone.

    The wall-clock difference supplies years, months and weeks; what is
    left is split into the zone's real days plus exact time.
    """
    from temporalkit.core.zoned_date_time import ZonedDateTime

    if one == two:
        return DurationRecord()

    start_date, start_time = epoch_nanoseconds_to_local(time_zone, one)
    end_date, end_time = epoch_nanoseconds_to_local(time_zone, two)
    span = difference_iso_date_time(
        start_date, start_time, end_date, end_time, calendar, largest_unit
    )
    intermediate_ns = add_zoned_date_time(
        one, time_zone, calendar, DurationRecord(span.years, span.months, span.weeks)
    )
    intermediate = ZonedDateTime._from_epoch_nanoseconds(intermediate_ns, time_zone, calendar)
    days, remainder, _ = nanoseconds_to_days(two - intermediate_ns, intermediate)
    time = balance_time_duration(0, 0, 0, 0, 0, 0, remainder, Unit.HOUR)
    return DurationRecord(span.years, span.months, span.weeks, days, *time[1:])


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


__all__ = [
    "add_instant",
    "add_time",
    "add_date_time",
    "add_zoned_date_time",
    "difference_time",
    "difference_iso_date_time",
    "difference_instant",
    "difference_zoned_date_time",
]

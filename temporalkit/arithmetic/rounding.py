"""Rounding of numbers, times, instants and durations.

Every rounding is computed exactly: fractional quantities are
fractions.Fraction, never floats, so a half-way case is recognised as
such whatever its magnitude.
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import TYPE_CHECKING, NamedTuple

from temporalkit._internal.calendar import (
    MIDNIGHT,
    ISODate,
    ISOTime,
    balance_iso_date,
    balance_time,
    iso_time_to_nanoseconds,
)
from temporalkit._internal.constants import NANOS_PER_DAY
from temporalkit.arithmetic.balance import (
    DurationRecord,
    add_duration,
    balance_time_duration,
    days_until,
    move_relative_date,
    move_relative_zoned_date_time,
    nanoseconds_to_days,
    total_duration_nanoseconds,
)
from temporalkit.errors import ValidationError
from temporalkit.units.options import RoundingMode
from temporalkit.units.unit import TIME_UNITS, Unit

if TYPE_CHECKING:
    from temporalkit.core.plain_date import PlainDate
    from temporalkit.core.zoned_date_time import ZonedDateTime

logger = logging.getLogger(__name__)

# Rounding modes reduce to five rules on the magnitude
_ZERO = "zero"
_INFINITY = "infinity"
_HALF_ZERO = "half-zero"
_HALF_INFINITY = "half-infinity"
_HALF_EVEN = "half-even"

# mode -> (rule for positive values, rule for negative values)
_UNSIGNED_RULES: dict[RoundingMode, tuple[str, str]] = {
    RoundingMode.CEIL: (_INFINITY, _ZERO),
    RoundingMode.FLOOR: (_ZERO, _INFINITY),
    RoundingMode.EXPAND: (_INFINITY, _INFINITY),
    RoundingMode.TRUNC: (_ZERO, _ZERO),
    RoundingMode.HALF_CEIL: (_HALF_INFINITY, _HALF_ZERO),
    RoundingMode.HALF_FLOOR: (_HALF_ZERO, _HALF_INFINITY),
    RoundingMode.HALF_EXPAND: (_HALF_INFINITY, _HALF_INFINITY),
    RoundingMode.HALF_TRUNC: (_HALF_ZERO, _HALF_ZERO),
    RoundingMode.HALF_EVEN: (_HALF_EVEN, _HALF_EVEN),
}


def _apply_unsigned_rule(value: Fraction, lower: int, rule: str) -> int:
    if value == lower:
        return lower
    upper = lower + 1
    if rule == _ZERO:
        return lower
    if rule == _INFINITY:
        return upper
    below = value - lower
    above = upper - value
    if below < above:
        return lower
    if above < below:
        return upper
    if rule == _HALF_ZERO:
        return lower
    if rule == _HALF_INFINITY:
        return upper
    return lower if lower % 2 == 0 else upper


def round_number_to_increment(
    value: int | Fraction, increment: int, mode: RoundingMode
) -> int:
    """Round ``value`` to a multiple of ``increment`` under ``mode``.

    Examples:
        >>> round_number_to_increment(Fraction(5, 2), 1, RoundingMode.HALF_EVEN)
        2
        >>> round_number_to_increment(-7, 5, RoundingMode.CEIL)
        -5
        >>> round_number_to_increment(-7, 5, RoundingMode.EXPAND)
        -10
    """
    quotient = Fraction(value) / increment
    negative = quotient < 0
    magnitude = -quotient if negative else quotient
    rule = _UNSIGNED_RULES[mode][1 if negative else 0]
    rounded = _apply_unsigned_rule(magnitude, math.floor(magnitude), rule)
    return (-rounded if negative else rounded) * increment


def round_temporal_instant(
    epoch_nanoseconds: int, increment: int, unit: Unit, mode: RoundingMode
) -> int:
    """Round a nanosecond count to ``increment`` of a time unit."""
    return round_number_to_increment(epoch_nanoseconds, increment * unit.nanoseconds, mode)


def round_time(
    time: ISOTime,
    increment: int,
    unit: Unit,
    mode: RoundingMode,
    day_length_nanoseconds: int = NANOS_PER_DAY,
) -> tuple[int, ISOTime]:
    """Round a time of day, returning (carried days, rounded time).

    Rounding to DAY measures the time against ``day_length_nanoseconds``
    (the real length of the day in a time zone) and yields midnight with
    a carry of 0 or 1.

    Examples:
        >>> round_time(ISOTime(23, 59, 30), 1, Unit.MINUTE, RoundingMode.HALF_EXPAND)
        (1, ISOTime(hour=0, minute=0, second=0, millisecond=0, microsecond=0, nanosecond=0))
    """
    elapsed = iso_time_to_nanoseconds(time)
    if unit is Unit.DAY:
        days = round_number_to_increment(
            Fraction(elapsed, day_length_nanoseconds), increment, mode
        )
        return days, MIDNIGHT
    rounded = round_number_to_increment(elapsed, increment * unit.nanoseconds, mode)
    return balance_time(0, 0, 0, 0, 0, rounded)


def round_iso_date_time(
    date: ISODate,
    time: ISOTime,
    increment: int,
    unit: Unit,
    mode: RoundingMode,
    day_length_nanoseconds: int = NANOS_PER_DAY,
) -> tuple[ISODate, ISOTime]:
    """Round a date-time, carrying into the date when the time wraps."""
    days, rounded = round_time(time, increment, unit, mode, day_length_nanoseconds)
    return balance_iso_date(date.year, date.month, date.day + days), rounded


class RoundResult(NamedTuple):
    """A rounded duration and the exact fractional total in the unit."""

    duration: DurationRecord
    total: Fraction


def _sign(value: Fraction) -> int:
    return -1 if value < 0 else 1


def _consume_whole_units(
    relative_to: PlainDate,
    fractional_days: Fraction,
    unit: Unit,
) -> tuple[int, PlainDate, Fraction]:
    """Count whole months or weeks contained in ``fractional_days``.

    Returns the count, the date after moving by it and the days left.
    """
    calendar = relative_to.calendar
    whole_days = math.trunc(fractional_days)
    target, _ = move_relative_date(calendar, relative_to, days=whole_days)
    span = calendar.date_until(relative_to, target, unit)
    count = span.months if unit is Unit.MONTH else span.weeks
    moved, passed = move_relative_date(
        calendar,
        relative_to,
        months=count if unit is Unit.MONTH else 0,
        weeks=count if unit is Unit.WEEK else 0,
    )
    return count, moved, fractional_days - passed


def _fraction_of_unit(
    relative_to: PlainDate, count: int, fractional_days: Fraction, unit: Unit
) -> Fraction:
    """Express leftover days as a fraction of the next month or week."""
    calendar = relative_to.calendar
    sign = _sign(fractional_days)
    step = {"months": sign} if unit is Unit.MONTH else {"weeks": sign}
    later, unit_days = move_relative_date(calendar, relative_to, **step)
    while abs(fractional_days) >= abs(unit_days):
        count += sign
        fractional_days -= unit_days
        relative_to = later
        later, unit_days = move_relative_date(calendar, relative_to, **step)
    return count + fractional_days / abs(unit_days)


def round_duration(
    record: DurationRecord,
    increment: int,
    unit: Unit,
    mode: RoundingMode,
    plain_relative_to: PlainDate | None = None,
    zoned_relative_to: ZonedDateTime | None = None,
) -> RoundResult:
    """Round a duration so ``unit`` is its smallest nonzero component.

    Components smaller than ``unit`` are folded into a fraction of it,
    which is rounded to ``increment`` under ``mode``. For DAY and larger
    units the time components are converted to days first: as 24-hour
    days, or as the real days of ``zoned_relative_to`` after moving it by
    the date components. Months, weeks and years are measured from
    ``plain_relative_to``.

    Args:
        record: The duration to round. Components larger than ``unit``
            are kept; callers unbalance them first when needed.
        increment: Rounding increment, in units of ``unit``.
        unit: The smallest unit of the result.
        mode: Rounding rule.
        plain_relative_to: Date calendar units are measured from.
        zoned_relative_to: Zoned anchor for real day lengths.

    Returns:
        The rounded duration and the unrounded total in ``unit``.

    Raises:
        ValidationError: If ``unit`` is a calendar unit and there is no
            relative date, or a calendar unit measures zero days.
    """
    (years, months, weeks, days, hours, minutes, seconds,
     milliseconds, microseconds, nanoseconds) = record

    if unit.is_calendar_unit and plain_relative_to is None:
        raise ValidationError(f"relative_to is required to round to {unit.plural}")

    fractional_days = Fraction(0)
    if unit.is_date_unit:
        time_nanoseconds = total_duration_nanoseconds(
            0, hours, minutes, seconds, milliseconds, microseconds, nanoseconds
        )
        if zoned_relative_to is not None:
            intermediate = move_relative_zoned_date_time(
                zoned_relative_to, years, months, weeks, days
            )
            extra_days, remainder, day_length = nanoseconds_to_days(
                time_nanoseconds, intermediate
            )
            fractional_days = days + extra_days + Fraction(remainder, day_length)
        else:
            fractional_days = days + Fraction(time_nanoseconds, NANOS_PER_DAY)
        days = hours = minutes = seconds = milliseconds = microseconds = nanoseconds = 0

    if unit is Unit.YEAR:
        calendar = plain_relative_to.calendar
        years_later, _ = move_relative_date(calendar, plain_relative_to, years)
        years_months_weeks_later, _ = move_relative_date(
            calendar, plain_relative_to, years, months, weeks
        )
        fractional_days += days_until(years_later, years_months_weeks_later)
        whole_days_later, _ = move_relative_date(
            calendar, years_later, days=math.trunc(fractional_days)
        )
        years_passed = calendar.date_until(years_later, whole_days_later, Unit.YEAR).years
        years += years_passed
        relative_to, days_passed = move_relative_date(calendar, years_later, years_passed)
        fractional_days -= days_passed
        _, year_days = move_relative_date(
            calendar, relative_to, _sign(fractional_days)
        )
        if year_days == 0:
            raise ValidationError("calendar produced a year of zero days")
        total = years + fractional_days / abs(year_days)
        years = round_number_to_increment(total, increment, mode)
        months = weeks = 0

    elif unit is Unit.MONTH:
        calendar = plain_relative_to.calendar
        years_months_later, _ = move_relative_date(
            calendar, plain_relative_to, years, months
        )
        years_months_weeks_later, _ = move_relative_date(
            calendar, plain_relative_to, years, months, weeks
        )
        fractional_days += days_until(years_months_later, years_months_weeks_later)
        passed, relative_to, fractional_days = _consume_whole_units(
            years_months_later, fractional_days, Unit.MONTH
        )
        total = _fraction_of_unit(relative_to, months + passed, fractional_days, Unit.MONTH)
        months = round_number_to_increment(total, increment, mode)
        weeks = 0

    elif unit is Unit.WEEK:
        calendar = plain_relative_to.calendar
        relative_to, _ = move_relative_date(calendar, plain_relative_to, years, months)
        passed, relative_to, fractional_days = _consume_whole_units(
            relative_to, fractional_days, Unit.WEEK
        )
        total = _fraction_of_unit(relative_to, weeks + passed, fractional_days, Unit.WEEK)
        weeks = round_number_to_increment(total, increment, mode)

    elif unit is Unit.DAY:
        total = fractional_days
        days = round_number_to_increment(total, increment, mode)

    else:
        # Components above the unit are kept, the rest fold into it
        values = dict(
            zip(TIME_UNITS, (hours, minutes, seconds, milliseconds, microseconds, nanoseconds))
        )
        folded = sum(
            value * time_unit.nanoseconds
            for time_unit, value in values.items()
            if time_unit <= unit
        )
        total = Fraction(folded, unit.nanoseconds)
        for time_unit in values:
            if time_unit < unit:
                values[time_unit] = 0
        values[unit] = round_number_to_increment(total, increment, mode)
        hours, minutes, seconds, milliseconds, microseconds, nanoseconds = values.values()

    result = DurationRecord(years, months, weeks, days, hours, minutes, seconds,
                            milliseconds, microseconds, nanoseconds)
    return RoundResult(result, Fraction(total))


def adjust_rounded_duration_days(
    record: DurationRecord,
    increment: int,
    unit: Unit,
    mode: RoundingMode,
    zoned_relative_to: ZonedDateTime | None,
) -> DurationRecord:
    """Move a full day out of rounded time components into days.

    After rounding relative to a zoned anchor, the time part may reach
    or exceed the length of the day it falls in (for example 24 hours
    on a 23-hour day). That day is then moved into the day component
    and the leftover time is rounded again. The correction is applied
    once.

    Raises:
        ValidationError: If the leftover time still spans a whole day.
    """
    if (
        zoned_relative_to is None
        or unit.is_date_unit
        or (unit is Unit.NANOSECOND and increment == 1)
    ):
        return record

    from temporalkit.arithmetic.ops import add_zoned_date_time

    time_remainder = total_duration_nanoseconds(0, *record.time_part[1:])
    direction = -1 if time_remainder < 0 else (1 if time_remainder > 0 else 0)

    time_zone = zoned_relative_to.time_zone
    calendar = zoned_relative_to.calendar
    day_start = add_zoned_date_time(
        zoned_relative_to.epoch_nanoseconds, time_zone, calendar,
        DurationRecord(*record.date_part),
    )
    day_end = add_zoned_date_time(day_start, time_zone, calendar, DurationRecord(days=direction))
    day_length = day_end - day_start
    if direction == 0 or (time_remainder - day_length) * direction < 0:
        return record

    time_remainder = round_temporal_instant(time_remainder - day_length, increment, unit, mode)
    next_day_end = add_zoned_date_time(day_end, time_zone, calendar, DurationRecord(days=direction))
    if time_remainder != 0 and (time_remainder - (next_day_end - day_end)) * direction >= 0:
        raise ValidationError(
            f"rounded time spans more than one day in time zone {time_zone.id!r}"
        )
    logger.debug(
        "Moved a %d ns day into days, %d ns of time remain", day_length, time_remainder
    )

    adjusted = add_duration(
        DurationRecord(*record.date_part),
        DurationRecord(days=direction),
        zoned_relative_to=zoned_relative_to,
    )
    time = balance_time_duration(0, 0, 0, 0, 0, 0, time_remainder, Unit.HOUR)
    return DurationRecord(*adjusted.date_part, *time[1:])


__all__ = [
    "round_number_to_increment",
    "round_temporal_instant",
    "round_time",
    "round_iso_date_time",
    "RoundResult",
    "round_duration",
    "adjust_rounded_duration_days",
]

"""Duration balancing.

Balancing redistributes the ten duration components so that every
component below the chosen largest unit is in its canonical range
(0-23 hours, 0-59 minutes, ...) and the largest unit absorbs the rest.
Sub-day components are balanced with plain integer arithmetic; days,
weeks, months and years need a relative date (and for zoned anchors a
time zone) because their lengths vary.

All functions work on integer records and raise immediately on any
invalid input; nothing is retried.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from temporalkit._internal.calendar import iso_date_to_epoch_days
from temporalkit._internal.constants import (
    MAX_SAFE_INTEGER,
    NANOS_PER_DAY,
    NANOS_PER_HOUR,
    NANOS_PER_MICROSECOND,
    NANOS_PER_MILLISECOND,
    NANOS_PER_MINUTE,
    NANOS_PER_SECOND,
)
from temporalkit._internal.validation import check_epoch_nanoseconds
from temporalkit.errors import ValidationError
from temporalkit.units.options import Overflow
from temporalkit.units.unit import Unit, larger_of

if TYPE_CHECKING:
    from temporalkit.calendars.base import Calendar
    from temporalkit.core.plain_date import PlainDate
    from temporalkit.core.zoned_date_time import ZonedDateTime

logger = logging.getLogger(__name__)


class DateDurationRecord(NamedTuple):
    years: int = 0
    months: int = 0
    weeks: int = 0
    days: int = 0


class TimeDurationRecord(NamedTuple):
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    milliseconds: int = 0
    microseconds: int = 0
    nanoseconds: int = 0


class DurationRecord(NamedTuple):
    """The ten duration components, in the order of the Unit enum."""

    years: int = 0
    months: int = 0
    weeks: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    milliseconds: int = 0
    microseconds: int = 0
    nanoseconds: int = 0

    @classmethod
    def combine(cls, date: DateDurationRecord, time: TimeDurationRecord) -> DurationRecord:
        """Join a date record with the clock components of a time record."""
        return cls(*date, *time[1:])

    @property
    def date_part(self) -> DateDurationRecord:
        return DateDurationRecord(*self[:4])

    @property
    def time_part(self) -> TimeDurationRecord:
        return TimeDurationRecord(*self[3:])

    def negated(self) -> DurationRecord:
        return DurationRecord(*(-value for value in self))


def duration_sign(*components: int) -> int:
    """Return the sign (-1, 0 or 1) of the first nonzero component.

    Components are given in year-to-nanosecond order. An all-zero
    duration has sign 0.

    Raises:
        ValidationError: If nonzero components disagree in sign.

    Examples:
        >>> duration_sign(0, 0, 0, -2, -3)
        -1
        >>> duration_sign(0, 0, 0)
        0
    """
    sign = 0
    for value in components:
        if value == 0:
            continue
        value_sign = 1 if value > 0 else -1
        if sign == 0:
            sign = value_sign
        elif value_sign != sign:
            raise ValidationError("duration components must not have mixed signs")
    return sign


def is_valid_duration(*components: int) -> bool:
    """Check sign uniformity and safe-integer magnitude of every component."""
    seen = 0
    for value in components:
        if abs(value) > MAX_SAFE_INTEGER:
            return False
        if value:
            value_sign = 1 if value > 0 else -1
            if seen and value_sign != seen:
                return False
            seen = value_sign
    return True


def default_largest_unit(record: DurationRecord) -> Unit:
    """Return the largest unit with a nonzero component (NANOSECOND if none)."""
    for unit, value in zip(Unit, record):
        if value != 0:
            return unit
    return Unit.NANOSECOND


def total_duration_nanoseconds(
    days: int,
    hours: int,
    minutes: int,
    seconds: int,
    milliseconds: int,
    microseconds: int,
    nanoseconds: int,
) -> int:
    """Sum the day and time components as 24-hour days, in nanoseconds."""
    return (
        days * NANOS_PER_DAY
        + hours * NANOS_PER_HOUR
        + minutes * NANOS_PER_MINUTE
        + seconds * NANOS_PER_SECOND
        + milliseconds * NANOS_PER_MILLISECOND
        + microseconds * NANOS_PER_MICROSECOND
        + nanoseconds
    )


# Each step carries the remainder of one unit into the next larger one
_CARRY_STEPS: tuple[tuple[Unit, int], ...] = (
    (Unit.MICROSECOND, 1000),
    (Unit.MILLISECOND, 1000),
    (Unit.SECOND, 1000),
    (Unit.MINUTE, 60),
    (Unit.HOUR, 60),
    (Unit.DAY, 24),
)


def balance_time_duration(
    days: int,
    hours: int,
    minutes: int,
    seconds: int,
    milliseconds: int,
    microseconds: int,
    nanoseconds: int,
    largest_unit: Unit,
) -> TimeDurationRecord:
    """Redistribute day and time components up to ``largest_unit``.

    The components are summed into one nanosecond count (days as 24
    hours) and split again so every unit below ``largest_unit`` is in its
    canonical range. Date units balance up to days. The result carries
    the sign of the total.

    Examples:
        >>> balance_time_duration(0, 25, 0, 0, 0, 0, 0, Unit.DAY)
        TimeDurationRecord(days=1, hours=1, minutes=0, seconds=0, milliseconds=0, microseconds=0, nanoseconds=0)
        >>> balance_time_duration(1, 0, 0, 0, 0, 0, 0, Unit.MINUTE).minutes
        1440
    """
    total = total_duration_nanoseconds(
        days, hours, minutes, seconds, milliseconds, microseconds, nanoseconds
    )
    sign = -1 if total < 0 else 1
    if largest_unit.is_date_unit:
        largest_unit = Unit.DAY

    amounts = {Unit.NANOSECOND: abs(total)}
    smaller = Unit.NANOSECOND
    for unit, factor in _CARRY_STEPS:
        if unit > largest_unit:
            break
        amounts[unit], amounts[smaller] = divmod(amounts[smaller], factor)
        smaller = unit

    return TimeDurationRecord(
        *(
            sign * amounts.get(unit, 0)
            for unit in (
                Unit.DAY,
                Unit.HOUR,
                Unit.MINUTE,
                Unit.SECOND,
                Unit.MILLISECOND,
                Unit.MICROSECOND,
                Unit.NANOSECOND,
            )
        )
    )


def days_until(earlier: PlainDate, later: PlainDate) -> int:
    """Return the signed number of days between two dates."""
    return iso_date_to_epoch_days(*later._iso_date) - iso_date_to_epoch_days(
        *earlier._iso_date
    )


def calendar_date_add(
    calendar: Calendar,
    date: PlainDate,
    years: int = 0,
    months: int = 0,
    weeks: int = 0,
    days: int = 0,
    overflow: Overflow = Overflow.CONSTRAIN,
) -> PlainDate:
    """Call ``calendar.date_add`` with a date-only Duration."""
    from temporalkit.core.duration import Duration

    return calendar.date_add(
        date, Duration(years=years, months=months, weeks=weeks, days=days), overflow
    )


def move_relative_date(
    calendar: Calendar,
    relative_to: PlainDate,
    years: int = 0,
    months: int = 0,
    weeks: int = 0,
    days: int = 0,
) -> tuple[PlainDate, int]:
    """Add a date duration and report how many days the move spanned."""
    later = calendar_date_add(calendar, relative_to, years, months, weeks, days)
    return later, days_until(relative_to, later)


def move_relative_zoned_date_time(
    relative_to: ZonedDateTime, years: int, months: int, weeks: int, days: int
) -> ZonedDateTime:
    """Move a zoned anchor by a date duration, keeping its wall-clock time."""
    from temporalkit.arithmetic.ops import add_zoned_date_time
    from temporalkit.core.zoned_date_time import ZonedDateTime

    ns = add_zoned_date_time(
        relative_to.epoch_nanoseconds,
        relative_to.time_zone,
        relative_to.calendar,
        DurationRecord(years, months, weeks, days),
    )
    return ZonedDateTime._from_epoch_nanoseconds(ns, relative_to.time_zone, relative_to.calendar)


def nanoseconds_to_days(
    nanoseconds: int, relative_to: ZonedDateTime | None = None
) -> tuple[int, int, int]:
    """Split a nanosecond count into whole days and a remainder.

    Without an anchor a day is 24 hours. With a zoned anchor each day is
    as long as the zone makes it starting from the anchor, so a day
    across a DST change may be 23 or 25 hours.

    Returns:
        (days, remaining nanoseconds, length of the day the remainder
        falls in). Days and remainder share the sign of the input.

    Raises:
        OverflowError: If the end point is outside the instant range.
        ValidationError: If the zone produces inconsistent day lengths.
    """
    sign = (nanoseconds > 0) - (nanoseconds < 0)
    if sign == 0:
        return 0, 0, NANOS_PER_DAY
    if relative_to is None:
        days, rem = divmod(abs(nanoseconds), NANOS_PER_DAY)
        return sign * days, sign * rem, NANOS_PER_DAY

    from temporalkit.arithmetic.ops import add_zoned_date_time, difference_iso_date_time
    from temporalkit.units.timezone import epoch_nanoseconds_to_local

    time_zone = relative_to.time_zone
    calendar = relative_to.calendar
    start_ns = relative_to.epoch_nanoseconds
    end_ns = check_epoch_nanoseconds(start_ns + nanoseconds)

    start_date, start_time = epoch_nanoseconds_to_local(time_zone, start_ns)
    end_date, end_time = epoch_nanoseconds_to_local(time_zone, end_ns)
    days = difference_iso_date_time(
        start_date, start_time, end_date, end_time, calendar, Unit.DAY
    ).days

    def add_days(start: int, count: int) -> int:
        return add_zoned_date_time(start, time_zone, calendar, DurationRecord(days=count))

    intermediate_ns = add_days(start_ns, days)
    if sign == 1:
        while days > 0 and intermediate_ns > end_ns:
            days -= 1
            intermediate_ns = add_days(start_ns, days)
    nanoseconds = end_ns - intermediate_ns

    while True:
        one_day_farther_ns = add_days(intermediate_ns, sign)
        day_length = one_day_farther_ns - intermediate_ns
        if (nanoseconds - day_length) * sign < 0:
            break
        nanoseconds -= day_length
        intermediate_ns = one_day_farther_ns
        days += sign

    if days * sign < 0 or nanoseconds * sign < 0 or abs(nanoseconds) >= abs(day_length):
        raise ValidationError(
            f"time zone {time_zone.id!r} produced inconsistent day lengths"
        )
    return days, nanoseconds, abs(day_length)


def balance_duration(
    days: int,
    hours: int,
    minutes: int,
    seconds: int,
    milliseconds: int,
    microseconds: int,
    nanoseconds: int,
    largest_unit: Unit,
    relative_to: ZonedDateTime | None = None,
) -> TimeDurationRecord:
    """Balance day and time components, honouring real day lengths.

    Without an anchor this is balance_time_duration. With a zoned anchor
    the components are first applied to the anchor, and when
    ``largest_unit`` is a date unit the elapsed time is split into days
    the zone actually has.
    """
    if relative_to is None:
        return balance_time_duration(
            days, hours, minutes, seconds, milliseconds, microseconds, nanoseconds,
            largest_unit,
        )

    from temporalkit.arithmetic.ops import add_zoned_date_time

    end_ns = add_zoned_date_time(
        relative_to.epoch_nanoseconds,
        relative_to.time_zone,
        relative_to.calendar,
        DurationRecord(0, 0, 0, days, hours, minutes, seconds, milliseconds, microseconds, nanoseconds),
    )
    total = end_ns - relative_to.epoch_nanoseconds
    if largest_unit.is_date_unit:
        whole_days, remainder, _ = nanoseconds_to_days(total, relative_to)
        time = balance_time_duration(0, 0, 0, 0, 0, 0, remainder, Unit.HOUR)
        return time._replace(days=whole_days)
    return balance_time_duration(0, 0, 0, 0, 0, 0, total, largest_unit)


def unbalance_duration_relative(
    years: int,
    months: int,
    weeks: int,
    days: int,
    largest_unit: Unit,
    relative_to: PlainDate | None,
) -> DateDurationRecord:
    """Convert calendar components larger than ``largest_unit`` downwards.

    Years become months when ``largest_unit`` is MONTH; years and months
    become days when it is WEEK (weeks are kept); everything becomes days
    for DAY and smaller. The conversion is measured from ``relative_to``
    in one step.

    Raises:
        ValidationError: If calendar components must be converted but no
            relative date was given.
    """
    if largest_unit is Unit.YEAR or not (years or months or weeks or days):
        return DateDurationRecord(years, months, weeks, days)

    if largest_unit is Unit.MONTH:
        if years == 0:
            return DateDurationRecord(0, months, weeks, days)
        _require_relative(relative_to, "years")
        calendar = relative_to.calendar
        later = calendar_date_add(calendar, relative_to, years=years)
        span = calendar.date_until(relative_to, later, Unit.MONTH)
        years_in_months = span.months
        if span.days:
            # The anniversary was clamped (e.g. from February 29)
            years_in_months += 1 if years > 0 else -1
        return DateDurationRecord(0, months + years_in_months, weeks, days)

    if largest_unit is Unit.WEEK:
        if years == 0 and months == 0:
            return DateDurationRecord(0, 0, weeks, days)
        _require_relative(relative_to, "years and months")
        _, moved = move_relative_date(relative_to.calendar, relative_to, years, months)
        return DateDurationRecord(0, 0, weeks, days + moved)

    if years == 0 and months == 0 and weeks == 0:
        return DateDurationRecord(0, 0, 0, days)
    _require_relative(relative_to, "years, months and weeks")
    _, moved = move_relative_date(relative_to.calendar, relative_to, years, months, weeks)
    return DateDurationRecord(0, 0, 0, days + moved)


def _fold_days(
    relative_to: PlainDate, days: int, sign: int, unit: str
) -> tuple[int, int, PlainDate]:
    """Take whole ``unit`` steps out of ``days``, one step at a time.

    Returns the number of steps, the days left and the date reached.
    """
    calendar = relative_to.calendar
    count = 0
    later, unit_days = move_relative_date(calendar, relative_to, **{unit: sign})
    while unit_days and abs(days) >= abs(unit_days):
        days -= unit_days
        count += sign
        relative_to = later
        later, unit_days = move_relative_date(calendar, relative_to, **{unit: sign})
    return count, days, relative_to


def balance_date_duration_relative(
    years: int,
    months: int,
    weeks: int,
    days: int,
    largest_unit: Unit,
    relative_to: PlainDate | None,
) -> DateDurationRecord:
    """Fold days up into ``largest_unit`` without touching larger components.

    The inverse of unbalance_duration_relative. The existing years,
    months and weeks are applied to ``relative_to`` first; days are then
    converted into whole months (or weeks) of the calendar from that
    point, and for YEAR the months into whole years. Existing components
    are never measured again, so a month that starts on January 31 stays
    a month.

    Raises:
        ValidationError: If balancing is needed but no relative date was
            given.

    Examples:
        >>> balance_date_duration_relative(0, 0, 0, 40, Unit.MONTH, PlainDate(2021, 1, 1))
        DateDurationRecord(years=0, months=1, weeks=0, days=9)
    """
    if not largest_unit.is_calendar_unit or not (years or months or weeks or days):
        return DateDurationRecord(years, months, weeks, days)
    _require_relative(relative_to, f"{largest_unit.plural}")
    calendar = relative_to.calendar
    sign = duration_sign(years, months, weeks, days)

    if largest_unit is Unit.WEEK:
        start, _ = move_relative_date(calendar, relative_to, years, months, weeks)
        folded, days, _ = _fold_days(start, days, sign, "weeks")
        return DateDurationRecord(years, months, weeks + folded, days)

    start, _ = move_relative_date(calendar, relative_to, years, months, weeks)
    folded, days, _ = _fold_days(start, days, sign, "months")
    months += folded
    if largest_unit is Unit.MONTH:
        return DateDurationRecord(years, months, weeks, days)

    year_start, _ = move_relative_date(calendar, relative_to, years)
    while months:
        year_end = calendar_date_add(calendar, year_start, years=sign)
        months_in_year = calendar.date_until(year_start, year_end, Unit.MONTH).months
        if not months_in_year or abs(months) < abs(months_in_year):
            break
        months -= months_in_year
        years += sign
        year_start = year_end
    return DateDurationRecord(years, months, weeks, days)


def add_duration(
    one: DurationRecord,
    two: DurationRecord,
    plain_relative_to: PlainDate | None = None,
    zoned_relative_to: ZonedDateTime | None = None,
) -> DurationRecord:
    """Add two durations, measuring calendar units from an optional anchor.

    Without an anchor neither duration may contain years, months or
    weeks, and days count as 24 hours. With a plain date anchor both
    date parts are applied in turn and the total is measured again; with
    a zoned anchor both durations are applied to the instant and the
    result is the zoned difference.

    Raises:
        ValidationError: If calendar units are present without an anchor.
    """
    largest_unit = larger_of(default_largest_unit(one), default_largest_unit(two))

    if plain_relative_to is None and zoned_relative_to is None:
        if largest_unit.is_calendar_unit:
            raise ValidationError(
                "relative_to is required to add durations with years, months or weeks"
            )
        time = balance_time_duration(
            *(a + b for a, b in zip(one.time_part, two.time_part)), largest_unit
        )
        return DurationRecord(0, 0, 0, *time)

    from temporalkit.arithmetic.ops import (
        add_zoned_date_time,
        difference_instant,
        difference_zoned_date_time,
    )

    if zoned_relative_to is None:
        calendar = plain_relative_to.calendar
        intermediate = calendar_date_add(calendar, plain_relative_to, *one.date_part)
        end = calendar_date_add(calendar, intermediate, *two.date_part)
        time_ns = total_duration_nanoseconds(
            0, *(a + b for a, b in zip(one.time_part[1:], two.time_part[1:]))
        )
        # Whole days of time move the end date, leaving less than a day
        time_sign = (time_ns > 0) - (time_ns < 0)
        whole_days = abs(time_ns) // NANOS_PER_DAY * time_sign
        if whole_days:
            end = calendar_date_add(calendar, end, days=whole_days)
            time_ns -= whole_days * NANOS_PER_DAY
        date_days = days_until(plain_relative_to, end)
        if time_sign and time_sign == -((date_days > 0) - (date_days < 0)):
            # Borrow a day so the date and time parts share a sign
            end = calendar_date_add(calendar, end, days=time_sign)
            time_ns -= time_sign * NANOS_PER_DAY
        date_largest_unit = larger_of(Unit.DAY, largest_unit)
        span = calendar.date_until(plain_relative_to, end, date_largest_unit)
        time = balance_time_duration(span.days, 0, 0, 0, 0, 0, time_ns, largest_unit)
        return DurationRecord(span.years, span.months, span.weeks, *time)

    time_zone = zoned_relative_to.time_zone
    calendar = zoned_relative_to.calendar
    start_ns = zoned_relative_to.epoch_nanoseconds
    intermediate_ns = add_zoned_date_time(start_ns, time_zone, calendar, one)
    end_ns = add_zoned_date_time(intermediate_ns, time_zone, calendar, two)
    if not largest_unit.is_date_unit:
        time = difference_instant(start_ns, end_ns, 1, Unit.NANOSECOND, largest_unit)
        return DurationRecord(0, 0, 0, *time)
    return difference_zoned_date_time(start_ns, end_ns, time_zone, calendar, largest_unit)


def _require_relative(relative_to: PlainDate | None, what: str) -> None:
    if relative_to is None:
        raise ValidationError(f"relative_to is required to balance {what}")


__all__ = [
    "DateDurationRecord",
    "TimeDurationRecord",
    "DurationRecord",
    "duration_sign",
    "is_valid_duration",
    "default_largest_unit",
    "total_duration_nanoseconds",
    "balance_time_duration",
    "days_until",
    "calendar_date_add",
    "move_relative_date",
    "move_relative_zoned_date_time",
    "nanoseconds_to_days",
    "balance_duration",
    "unbalance_duration_relative",
    "balance_date_duration_relative",
    "add_duration",
]

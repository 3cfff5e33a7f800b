"""ISO calendar arithmetic for temporalkit.

This module provides the calendar-free arithmetic on ISO 8601 fields
that every calendar and value kind is built on: leap years, month
lengths, epoch-day conversion, date regulation and addition, and the
nanosecond-precision decomposition of a day.

Epoch day 0 = 1970-01-01 (proleptic Gregorian).

This module is not part of the public API.
"""

from __future__ import annotations

from typing import NamedTuple

from temporalkit._internal.constants import (
    DAYS_IN_MONTH,
    DAYS_PER_WEEK,
    MAX_YEAR,
    MIN_YEAR,
    MONTHS_PER_YEAR,
    NANOS_PER_DAY,
    NANOS_PER_HOUR,
    NANOS_PER_MICROSECOND,
    NANOS_PER_MILLISECOND,
    NANOS_PER_MINUTE,
    NANOS_PER_SECOND,
)
from temporalkit.errors import ValidationError
from temporalkit.units.options import Overflow
from temporalkit.units.unit import Unit


class ISODate(NamedTuple):
    """Year, month and day in the ISO 8601 calendar."""

    year: int
    month: int
    day: int


class ISOTime(NamedTuple):
    """Wall-clock time of day with nanosecond precision."""

    hour: int = 0
    minute: int = 0
    second: int = 0
    millisecond: int = 0
    microsecond: int = 0
    nanosecond: int = 0


class DateDifference(NamedTuple):
    years: int
    months: int
    weeks: int
    days: int


MIDNIGHT = ISOTime()


def _cmp(a: int, b: int) -> int:
    return (a > b) - (a < b)


def is_leap_year(year: int) -> bool:
    """Check if a year is a leap year in the proleptic Gregorian calendar.

    A year is a leap year if:
    - Divisible by 4, AND
    - NOT divisible by 100, unless also divisible by 400

    Args:
        year: The year to check (can be negative).

    Returns:
        True if the year is a leap year.

    Examples:
        >>> is_leap_year(2000)
        True
        >>> is_leap_year(1900)
        False
        >>> is_leap_year(2024)
        True
    """
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a given month.

    Args:
        year: The year (needed for February in leap years).
        month: The month (1-12).

    Returns:
        Number of days in the month, 28 to 31.

    Raises:
        ValidationError: If month is not in 1-12.
    """
    if month < 1 or month > 12:
        raise ValidationError(f"month must be between 1 and 12, got {month}")

    if month == 2 and is_leap_year(year):
        return 29
    return DAYS_IN_MONTH[month]


def days_in_year(year: int) -> int:
    """Return 366 for leap years, 365 otherwise."""
    return 366 if is_leap_year(year) else 365


# Days before each month (cumulative), for non-leap years
# Index 0 is unused, months are 1-indexed
_DAYS_BEFORE_MONTH = (0, 0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)


def _days_before_month(year: int, month: int) -> int:
    result = _DAYS_BEFORE_MONTH[month]
    if month > 2 and is_leap_year(year):
        result += 1
    return result


def is_valid_iso_date(year: int, month: int, day: int) -> bool:
    """Check that the fields name a real ISO date in the supported years.

    Examples:
        >>> is_valid_iso_date(2024, 2, 29)
        True
        >>> is_valid_iso_date(2023, 2, 29)
        False
        >>> is_valid_iso_date(2023, 13, 1)
        False
    """
    if year < MIN_YEAR or year > MAX_YEAR:
        return False
    if month < 1 or month > 12:
        return False
    return 1 <= day <= days_in_month(year, month)


def is_valid_iso_time(
    hour: int,
    minute: int,
    second: int,
    millisecond: int,
    microsecond: int,
    nanosecond: int,
) -> bool:
    """Check that every time field lies in its canonical range."""
    return (
        0 <= hour <= 23
        and 0 <= minute <= 59
        and 0 <= second <= 59
        and 0 <= millisecond <= 999
        and 0 <= microsecond <= 999
        and 0 <= nanosecond <= 999
    )


_TIME_LIMITS: tuple[tuple[str, int], ...] = (
    ("hour", 23),
    ("minute", 59),
    ("second", 59),
    ("millisecond", 999),
    ("microsecond", 999),
    ("nanosecond", 999),
)


def regulate_iso_time(
    hour: int,
    minute: int,
    second: int,
    millisecond: int,
    microsecond: int,
    nanosecond: int,
    overflow: Overflow,
) -> ISOTime:
    """Apply an overflow policy to possibly out-of-range time fields.

    CONSTRAIN clamps each field into its range independently; REJECT
    raises on the first field outside it.

    Examples:
        >>> regulate_iso_time(25, 0, 61, 0, 0, 0, Overflow.CONSTRAIN)
        ISOTime(hour=23, minute=0, second=59, millisecond=0, microsecond=0, nanosecond=0)
    """
    values = (hour, minute, second, millisecond, microsecond, nanosecond)
    if overflow is Overflow.REJECT:
        for (name, limit), value in zip(_TIME_LIMITS, values):
            if value < 0 or value > limit:
                raise ValidationError(f"{name} must be between 0 and {limit}, got {value}")
        return ISOTime(*values)
    return ISOTime(
        *(min(max(value, 0), limit) for (_, limit), value in zip(_TIME_LIMITS, values))
    )


def iso_date_to_epoch_days(year: int, month: int, day: int) -> int:
    """Convert an ISO date to a count of days since 1970-01-01.

    Uses the era-based days-from-civil algorithm, which is exact for
    every proleptic Gregorian date. Python's floor division keeps it
    correct for negative years.

    Args:
        year: The year (astronomical numbering).
        month: The month (1-12).
        day: The day of the month.

    Returns:
        Days since the epoch (negative before 1970).

    Examples:
        >>> iso_date_to_epoch_days(1970, 1, 1)
        0
        >>> iso_date_to_epoch_days(2000, 3, 1)
        11017
    """
    y = year - 1 if month <= 2 else year
    era = y // 400
    year_of_era = y - era * 400
    # Months counted from March so the leap day falls at the end
    shifted_month = (month + 9) % 12
    day_of_shifted_year = (153 * shifted_month + 2) // 5 + day - 1
    day_of_era = (
        year_of_era * 365
        + year_of_era // 4
        - year_of_era // 100
        + day_of_shifted_year
    )
    return era * 146097 + day_of_era - 719468


def epoch_days_to_iso_date(epoch_days: int) -> ISODate:
    """Convert days since 1970-01-01 back to an ISO date.

    Inverse of iso_date_to_epoch_days for every integer input.

    Examples:
        >>> epoch_days_to_iso_date(0)
        ISODate(year=1970, month=1, day=1)
        >>> epoch_days_to_iso_date(-1)
        ISODate(year=1969, month=12, day=31)
    """
    z = epoch_days + 719468
    era = z // 146097
    day_of_era = z - era * 146097
    year_of_era = (
        day_of_era
        - day_of_era // 1460
        + day_of_era // 36524
        - day_of_era // 146096
    ) // 365
    day_of_shifted_year = day_of_era - (
        365 * year_of_era + year_of_era // 4 - year_of_era // 100
    )
    shifted_month = (5 * day_of_shifted_year + 2) // 153
    day = day_of_shifted_year - (153 * shifted_month + 2) // 5 + 1
    month = shifted_month + 3 if shifted_month < 10 else shifted_month - 9
    year = year_of_era + era * 400 + (1 if month <= 2 else 0)
    return ISODate(year, month, day)


def day_of_week(year: int, month: int, day: int) -> int:
    """Return the ISO day of week: Monday is 1, Sunday is 7.

    Examples:
        >>> day_of_week(1970, 1, 1)  # Thursday
        4
    """
    return (iso_date_to_epoch_days(year, month, day) + 3) % 7 + 1


def day_of_year(year: int, month: int, day: int) -> int:
    """Return the 1-based ordinal day within the year."""
    return _days_before_month(year, month) + day


def _weeks_in_year(year: int) -> int:
    def p(y: int) -> int:
        return (y + y // 4 - y // 100 + y // 400) % 7

    return 53 if p(year) == 4 or p(year - 1) == 3 else 52


def iso_week(year: int, month: int, day: int) -> tuple[int, int]:
    """Return the ISO 8601 (week_of_year, year_of_week) pair.

    Week 1 is the week containing the year's first Thursday, so the
    first days of January can belong to the previous year's last week
    and the last days of December to the next year's first week.

    Examples:
        >>> iso_week(2021, 1, 1)  # Friday
        (53, 2020)
        >>> iso_week(2024, 12, 30)  # Monday
        (1, 2025)
    """
    week = (day_of_year(year, month, day) - day_of_week(year, month, day) + 10) // 7
    if week < 1:
        return _weeks_in_year(year - 1), year - 1
    if week > _weeks_in_year(year):
        return 1, year + 1
    return week, year


def compare_iso_date(
    y1: int, m1: int, d1: int, y2: int, m2: int, d2: int
) -> int:
    """Return -1, 0 or 1 comparing two ISO dates field by field."""
    if y1 != y2:
        return _cmp(y1, y2)
    if m1 != m2:
        return _cmp(m1, m2)
    return _cmp(d1, d2)


def compare_iso_time(one: ISOTime, two: ISOTime) -> int:
    """Return -1, 0 or 1 comparing two times of day."""
    for a, b in zip(one, two):
        if a != b:
            return _cmp(a, b)
    return 0


def compare_iso_date_time(
    date_one: ISODate, time_one: ISOTime, date_two: ISODate, time_two: ISOTime
) -> int:
    """Return -1, 0 or 1 comparing two date-times."""
    result = compare_iso_date(*date_one, *date_two)
    if result != 0:
        return result
    return compare_iso_time(time_one, time_two)


def balance_iso_year_month(year: int, month: int) -> tuple[int, int]:
    """Carry an out-of-range month into the year.

    Examples:
        >>> balance_iso_year_month(2021, 13)
        (2022, 1)
        >>> balance_iso_year_month(2021, 0)
        (2020, 12)
    """
    year += (month - 1) // MONTHS_PER_YEAR
    month = (month - 1) % MONTHS_PER_YEAR + 1
    return year, month


def balance_iso_date(year: int, month: int, day: int) -> ISODate:
    """Normalise a date whose month or day may be out of range.

    The day count is applied by epoch-day arithmetic after the year and
    month are balanced, so ``day`` may be any integer.

    Examples:
        >>> balance_iso_date(2021, 1, 32)
        ISODate(year=2021, month=2, day=1)
        >>> balance_iso_date(2021, 3, 0)
        ISODate(year=2021, month=2, day=28)
    """
    year, month = balance_iso_year_month(year, month)
    return epoch_days_to_iso_date(iso_date_to_epoch_days(year, month, 1) + day - 1)


def regulate_iso_date(
    year: int, month: int, day: int, overflow: Overflow
) -> ISODate:
    """Apply an overflow policy to possibly out-of-range date fields.

    Args:
        year: The year.
        month: The month, possibly outside 1-12.
        day: The day, possibly past the end of the month.
        overflow: CONSTRAIN clamps month to 1-12 and day to the month's
            length; REJECT raises instead.

    Returns:
        A valid ISO date.

    Raises:
        ValidationError: Under REJECT when the fields are not a real date.

    Examples:
        >>> regulate_iso_date(2021, 2, 31, Overflow.CONSTRAIN)
        ISODate(year=2021, month=2, day=28)
    """
    if overflow is Overflow.REJECT:
        if month < 1 or month > 12:
            raise ValidationError(f"month must be between 1 and 12, got {month}")
        max_day = days_in_month(year, month)
        if day < 1 or day > max_day:
            raise ValidationError(
                f"day must be between 1 and {max_day} for {year}-{month:02d}, got {day}"
            )
        return ISODate(year, month, day)

    month = min(max(month, 1), 12)
    day = min(max(day, 1), days_in_month(year, month))
    return ISODate(year, month, day)


def add_iso_date(
    year: int,
    month: int,
    day: int,
    years: int,
    months: int,
    weeks: int,
    days: int,
    overflow: Overflow,
) -> ISODate:
    """Add a years/months/weeks/days delta to an ISO date.

    Years and months are applied first and the day-of-month is then
    regulated under ``overflow``; weeks and days are applied afterwards
    by epoch-day arithmetic.

    Examples:
        >>> add_iso_date(2021, 1, 31, 0, 1, 0, 0, Overflow.CONSTRAIN)
        ISODate(year=2021, month=2, day=28)
    """
    year, month = balance_iso_year_month(year + years, month + months)
    year, month, day = regulate_iso_date(year, month, day, overflow)
    return balance_iso_date(year, month, day + weeks * DAYS_PER_WEEK + days)


def _surpasses(sign: int, year: int, month: int, day: int, target: ISODate) -> bool:
    # Lexicographic comparison without clamping the day
    return sign * compare_iso_date(year, month, day, *target) > 0


def difference_iso_date(
    one: ISODate, two: ISODate, largest_unit: Unit
) -> DateDifference:
    """Decompose the span from ``one`` to ``two`` into date components.

    For YEAR and MONTH the span consumes as many whole years, then whole
    months, as possible. A candidate count is only taken when the
    un-clamped intermediate date exists and has not passed ``two``, so
    re-adding the result with the REJECT policy lands on ``two``
    exactly. WEEK and DAY work on the plain day count.

    Examples:
        >>> difference_iso_date(
        ...     ISODate(2021, 1, 31), ISODate(2021, 2, 28), Unit.MONTH
        ... )
        DateDifference(years=0, months=0, weeks=0, days=28)
    """
    sign = -compare_iso_date(*one, *two)
    if sign == 0:
        return DateDifference(0, 0, 0, 0)

    if largest_unit in (Unit.YEAR, Unit.MONTH):
        years = 0
        if largest_unit is Unit.YEAR:
            candidate = two.year - one.year
            while candidate != 0:
                target_year = one.year + candidate
                if not _surpasses(
                    sign, target_year, one.month, one.day, two
                ) and one.day <= days_in_month(target_year, one.month):
                    years = candidate
                    break
                candidate -= sign

        start_total = (one.year + years) * MONTHS_PER_YEAR + one.month - 1
        months = 0
        candidate = two.year * MONTHS_PER_YEAR + two.month - 1 - start_total
        while candidate != 0:
            target_year, target_month = divmod(start_total + candidate, MONTHS_PER_YEAR)
            target_month += 1
            if not _surpasses(
                sign, target_year, target_month, one.day, two
            ) and one.day <= days_in_month(target_year, target_month):
                months = candidate
                break
            candidate -= sign

        mid_year, mid_month = balance_iso_year_month(one.year + years, one.month + months)
        days = iso_date_to_epoch_days(*two) - iso_date_to_epoch_days(
            mid_year, mid_month, one.day
        )
        return DateDifference(years, months, 0, days)

    days = iso_date_to_epoch_days(*two) - iso_date_to_epoch_days(*one)
    weeks = 0
    if largest_unit is Unit.WEEK:
        weeks = abs(days) // DAYS_PER_WEEK * sign
        days -= weeks * DAYS_PER_WEEK
    return DateDifference(0, 0, weeks, days)


# Nanosecond-precision day decomposition


def iso_time_to_nanoseconds(time: ISOTime) -> int:
    """Return the nanoseconds elapsed since midnight."""
    return (
        time.hour * NANOS_PER_HOUR
        + time.minute * NANOS_PER_MINUTE
        + time.second * NANOS_PER_SECOND
        + time.millisecond * NANOS_PER_MILLISECOND
        + time.microsecond * NANOS_PER_MICROSECOND
        + time.nanosecond
    )


def nanoseconds_to_iso_time(nanoseconds: int) -> ISOTime:
    """Decode 0 <= nanoseconds < one day into a time of day."""
    hour, rem = divmod(nanoseconds, NANOS_PER_HOUR)
    minute, rem = divmod(rem, NANOS_PER_MINUTE)
    second, rem = divmod(rem, NANOS_PER_SECOND)
    millisecond, rem = divmod(rem, NANOS_PER_MILLISECOND)
    microsecond, nanosecond = divmod(rem, NANOS_PER_MICROSECOND)
    return ISOTime(hour, minute, second, millisecond, microsecond, nanosecond)


def balance_time(
    hour: int,
    minute: int,
    second: int,
    millisecond: int,
    microsecond: int,
    nanosecond: int,
) -> tuple[int, ISOTime]:
    """Normalise arbitrary time fields into (carried days, time of day).

    Examples:
        >>> balance_time(25, 0, 0, 0, 0, 0)
        (1, ISOTime(hour=1, minute=0, second=0, millisecond=0, microsecond=0, nanosecond=0))
        >>> balance_time(0, 0, 0, 0, 0, -1)[0]
        -1
    """
    total = iso_time_to_nanoseconds(
        ISOTime(hour, minute, second, millisecond, microsecond, nanosecond)
    )
    days, rem = divmod(total, NANOS_PER_DAY)
    return days, nanoseconds_to_iso_time(rem)


def iso_date_time_to_epoch_nanoseconds(date: ISODate, time: ISOTime) -> int:
    """Interpret a date-time as UTC and return its epoch nanoseconds."""
    return iso_date_to_epoch_days(*date) * NANOS_PER_DAY + iso_time_to_nanoseconds(time)


def epoch_nanoseconds_to_iso_date_time(
    epoch_nanoseconds: int,
) -> tuple[ISODate, ISOTime]:
    """Decode epoch nanoseconds (already offset to local) into fields."""
    days, rem = divmod(epoch_nanoseconds, NANOS_PER_DAY)
    return epoch_days_to_iso_date(days), nanoseconds_to_iso_time(rem)


__all__ = [
    "ISODate",
    "ISOTime",
    "DateDifference",
    "MIDNIGHT",
    "is_leap_year",
    "days_in_month",
    "days_in_year",
    "is_valid_iso_date",
    "is_valid_iso_time",
    "regulate_iso_time",
    "iso_date_to_epoch_days",
    "epoch_days_to_iso_date",
    "day_of_week",
    "day_of_year",
    "iso_week",
    "compare_iso_date",
    "compare_iso_time",
    "compare_iso_date_time",
    "balance_iso_year_month",
    "balance_iso_date",
    "regulate_iso_date",
    "add_iso_date",
    "difference_iso_date",
    "iso_time_to_nanoseconds",
    "nanoseconds_to_iso_time",
    "balance_time",
    "iso_date_time_to_epoch_nanoseconds",
    "epoch_nanoseconds_to_iso_date_time",
]

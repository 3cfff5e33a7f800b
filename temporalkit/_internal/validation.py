"""Validation utilities for temporalkit.

This module provides validation decorators and range checks ensuring
temporal values lie within the supported limits.

This module is not part of the public API.
"""

from __future__ import annotations

import functools
import inspect
from typing import Callable, ParamSpec, TypeVar

from temporalkit._internal.calendar import (
    ISODate,
    ISOTime,
    days_in_month,
    iso_date_time_to_epoch_nanoseconds,
)
from temporalkit._internal.constants import (
    MAX_DATE_TIME_NANOSECONDS,
    MAX_EPOCH_NANOSECONDS,
    MAX_YEAR_MONTH,
    MIN_DATE_TIME_NANOSECONDS,
    MIN_EPOCH_NANOSECONDS,
    MIN_YEAR_MONTH,
)
from temporalkit.errors import OverflowError, ValidationError

P = ParamSpec("P")
T = TypeVar("T")


def validate_range(
    **limits: tuple[int, int],
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator to validate that parameters are within specified ranges.

    This decorator validates named parameters against specified (min, max)
    ranges, raising ValidationError if any value is out of range.

    Args:
        **limits: Mapping of parameter names to (min, max) tuples.
                  Both min and max are inclusive.

    Returns:
        A decorator function.

    Examples:
        >>> @validate_range(hour=(0, 23))
        ... def make_time(hour: int) -> None:
        ...     pass

        >>> make_time(24)
        Traceback (most recent call last):
        ...
        ValidationError: hour must be between 0 and 23, got 24
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        param_names = list(inspect.signature(func).parameters.keys())

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            all_args = dict(zip(param_names, args))
            all_args.update(kwargs)

            for param_name, (min_val, max_val) in limits.items():
                value = all_args.get(param_name)
                if value is not None and (value < min_val or value > max_val):
                    raise ValidationError(
                        f"{param_name} must be between {min_val} and {max_val}, "
                        f"got {value}"
                    )

            return func(*args, **kwargs)

        return wrapper

    return decorator


def validate_month(month: int) -> None:
    """Raise ValidationError unless 1 <= month <= 12."""
    if month < 1 or month > 12:
        raise ValidationError(f"month must be between 1 and 12, got {month}")


def validate_day(year: int, month: int, day: int) -> None:
    """Validate that a day is valid for the given year and month.

    Raises:
        ValidationError: If day is invalid for the month.
    """
    max_day = days_in_month(year, month)
    if day < 1 or day > max_day:
        raise ValidationError(
            f"day must be between 1 and {max_day} for {year}-{month:02d}, got {day}"
        )


def check_date_time_within_limits(date: ISODate, time: ISOTime) -> None:
    """Check that a plain date-time is representable.

    A date-time is representable when, interpreted as UTC, it lies
    strictly within one day of the instant range, so that every UTC
    offset maps it to a valid instant or a neighbouring one.

    Raises:
        OverflowError: If the date-time is outside the limits.
    """
    ns = iso_date_time_to_epoch_nanoseconds(date, time)
    if ns <= MIN_DATE_TIME_NANOSECONDS or ns >= MAX_DATE_TIME_NANOSECONDS:
        raise OverflowError(f"date-time {date} {time} is outside the supported range")


def check_date_within_limits(date: ISODate) -> None:
    """Check that a plain date is representable (tested at noon)."""
    check_date_time_within_limits(date, ISOTime(12))


def check_year_month_within_limits(year: int, month: int) -> None:
    """Check that a year-month lies within -271821-04 .. 275760-09."""
    if (year, month) < MIN_YEAR_MONTH or (year, month) > MAX_YEAR_MONTH:
        raise OverflowError(
            f"year-month {year}-{month:02d} is outside the supported range"
        )


def check_epoch_nanoseconds(epoch_nanoseconds: int) -> int:
    """Return epoch_nanoseconds if it is a valid instant, else raise.

    Raises:
        OverflowError: If |epoch_nanoseconds| exceeds 8.64e21.
    """
    if not MIN_EPOCH_NANOSECONDS <= epoch_nanoseconds <= MAX_EPOCH_NANOSECONDS:
        raise OverflowError(
            f"instant {epoch_nanoseconds} ns is outside the supported range"
        )
    return epoch_nanoseconds


__all__ = [
    "validate_range",
    "validate_month",
    "validate_day",
    "check_date_time_within_limits",
    "check_date_within_limits",
    "check_year_month_within_limits",
    "check_epoch_nanoseconds",
]

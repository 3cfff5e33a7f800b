"""Duration class representing a calendar-aware span of time.

This module provides the Duration class: ten signed integer components
from years down to nanoseconds. Unlike a fixed-length time span, a
Duration keeps years, months, weeks and days apart, because their length
depends on the date they are measured from.
"""

from __future__ import annotations

import numbers
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Union

from temporalkit._internal.constants import NANOS_PER_SECOND
from temporalkit.arithmetic.balance import (
    DurationRecord,
    add_duration,
    balance_date_duration_relative,
    balance_duration,
    default_largest_unit,
    duration_sign,
    is_valid_duration,
    move_relative_zoned_date_time,
    total_duration_nanoseconds,
    unbalance_duration_relative,
)
from temporalkit.arithmetic.rounding import adjust_rounded_duration_days, round_duration
from temporalkit.errors import TemporalTypeError, ValidationError
from temporalkit.units.options import RoundingMode, coerce_option, validate_rounding_increment
from temporalkit.units.unit import Unit, larger_of

if TYPE_CHECKING:
    from temporalkit.core.plain_date import PlainDate
    from temporalkit.core.plain_date_time import PlainDateTime
    from temporalkit.core.zoned_date_time import ZonedDateTime

    RelativeTo = Union[PlainDate, PlainDateTime, ZonedDateTime, Mapping[str, Any], None]

_FIELD_NAMES: tuple[str, ...] = DurationRecord._fields

_ISO_DESIGNATORS = (("years", "Y"), ("months", "M"), ("weeks", "W"), ("days", "D"))


def _to_component(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TemporalTypeError(f"{name} must be a number, got {type(value).__name__}")
    if value != value or value in (float("inf"), float("-inf")):
        raise ValidationError(f"{name} must be finite, got {value}")
    if int(value) != value:
        raise ValidationError(f"{name} must be an integer, got {value}")
    return int(value)


def to_relative_to(value: RelativeTo) -> tuple[PlainDate | None, ZonedDateTime | None]:
    """Split a ``relative_to`` argument into a plain date and a zoned anchor.

    A ZonedDateTime yields both its plain date and itself; a PlainDate or
    PlainDateTime yields only a plain date. A mapping with a
    ``time_zone`` key becomes a ZonedDateTime, any other mapping a
    PlainDate.

    Raises:
        TemporalTypeError: If ``value`` is not an acceptable anchor.
    """
    from temporalkit.core.plain_date import PlainDate
    from temporalkit.core.plain_date_time import PlainDateTime
    from temporalkit.core.zoned_date_time import ZonedDateTime

    if value is None:
        return None, None
    if isinstance(value, ZonedDateTime):
        return value.to_plain_date(), value
    if isinstance(value, PlainDateTime):
        return value.to_plain_date(), None
    if isinstance(value, PlainDate):
        return value, None
    if isinstance(value, Mapping):
        if value.get("time_zone") is not None:
            zoned = ZonedDateTime.from_fields(value)
            return zoned.to_plain_date(), zoned
        return PlainDate.from_fields(value), None
    raise TemporalTypeError(
        f"relative_to must be a date, date-time or zoned date-time, got {type(value).__name__}"
    )


class Duration:
    """A signed span of years, months, weeks, days and time.

    All nonzero components share one sign, and each component's
    magnitude is at most 2**53 - 1. Components are never balanced
    implicitly: ``Duration(hours=36)`` stays 36 hours until ``round``
    is asked to balance it.

    Attributes:
        years, months, weeks, days: Calendar components.
        hours, minutes, seconds, milliseconds, microseconds,
        nanoseconds: Time components.

    Examples:
        >>> d = Duration(days=1, hours=12)
        >>> d.hours
        12
        >>> str(d)
        'P1DT12H'
        >>> d.negated().sign
        -1
        >>> Duration(hours=36).round(largest_unit="day")
        Duration(days=1, hours=12)
    """

    __slots__ = ("_record",)

    def __init__(
        self,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> None:
        """Create a Duration from its components.

        Args:
            years: Number of years.
            months: Number of months.
            weeks: Number of weeks.
            days: Number of days.
            hours: Number of hours.
            minutes: Number of minutes.
            seconds: Number of seconds.
            milliseconds: Number of milliseconds.
            microseconds: Number of microseconds.
            nanoseconds: Number of nanoseconds.

        Raises:
            TemporalTypeError: If a component is not a number.
            ValidationError: If a component is not an integer, is too
                large, or the signs are mixed.
        """
        values = (years, months, weeks, days, hours, minutes, seconds,
                  milliseconds, microseconds, nanoseconds)
        record = DurationRecord(
            *(_to_component(name, value) for name, value in zip(_FIELD_NAMES, values))
        )
        if not is_valid_duration(*record):
            raise ValidationError(
                f"invalid duration {_format_components(record)}: "
                "components must share one sign and fit in 53 bits"
            )
        self._record = record

    @classmethod
    def _from_record(cls, record: DurationRecord) -> Duration:
        return cls(*record)

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> Duration:
        """Create a Duration from a mapping of component names.

        Plural and singular names are both accepted.

        Raises:
            TemporalTypeError: If a name is unknown or no component is given.

        Examples:
            >>> Duration.from_fields({"hour": 3, "minutes": 30})
            Duration(hours=3, minutes=30)
        """
        values: dict[str, Any] = {}
        for key, value in fields.items():
            name = key if key in _FIELD_NAMES else f"{key}s"
            if name not in _FIELD_NAMES:
                raise TemporalTypeError(f"unexpected duration field {key!r}")
            values[name] = value
        if not values:
            raise TemporalTypeError("at least one duration field must be provided")
        return cls(**values)

    @classmethod
    def from_value(cls, value: Duration | Mapping[str, Any]) -> Duration:
        """Return ``value`` if it is a Duration, else build one from a mapping."""
        if isinstance(value, Duration):
            return value
        if isinstance(value, Mapping):
            return cls.from_fields(value)
        raise TemporalTypeError(f"expected a Duration, got {type(value).__name__}")

    years = property(lambda self: self._record.years, doc="Number of years.")
    months = property(lambda self: self._record.months, doc="Number of months.")
    weeks = property(lambda self: self._record.weeks, doc="Number of weeks.")
    days = property(lambda self: self._record.days, doc="Number of days.")
    hours = property(lambda self: self._record.hours, doc="Number of hours.")
    minutes = property(lambda self: self._record.minutes, doc="Number of minutes.")
    seconds = property(lambda self: self._record.seconds, doc="Number of seconds.")
    milliseconds = property(lambda self: self._record.milliseconds, doc="Number of milliseconds.")
    microseconds = property(lambda self: self._record.microseconds, doc="Number of microseconds.")
    nanoseconds = property(lambda self: self._record.nanoseconds, doc="Number of nanoseconds.")

    @property
    def sign(self) -> int:
        """Return -1, 0 or 1 according to the sign of the components.

        Examples:
            >>> Duration(minutes=-5).sign
            -1
            >>> Duration().sign
            0
        """
        return duration_sign(*self._record)

    @property
    def blank(self) -> bool:
        """Return True if every component is zero."""
        return self.sign == 0

    def to_record(self) -> DurationRecord:
        """Return the components as a DurationRecord."""
        return self._record

    def negated(self) -> Duration:
        """Return the duration with every component negated."""
        return Duration._from_record(self._record.negated())

    def abs(self) -> Duration:
        """Return the duration with every component made non-negative."""
        return Duration(*(abs(value) for value in self._record))

    def replace(self, **fields: int) -> Duration:
        """Return a copy with some components replaced.

        Raises:
            TemporalTypeError: If a name is unknown or nothing is given.
            ValidationError: If the result is not a valid duration.

        Examples:
            >>> Duration(hours=1, minutes=30).replace(minutes=45)
            Duration(hours=1, minutes=45)
        """
        if not fields:
            raise TemporalTypeError("at least one duration field must be provided")
        unknown = sorted(set(fields) - set(_FIELD_NAMES))
        if unknown:
            raise TemporalTypeError(f"unexpected duration field(s): {', '.join(unknown)}")
        return Duration(**{**self._record._asdict(), **fields})

    # Arithmetic

    def add(
        self, other: Duration | Mapping[str, Any], *, relative_to: RelativeTo = None
    ) -> Duration:
        """Add another duration, balancing up to the larger of their units.

        Without ``relative_to`` neither duration may contain years, months
        or weeks, and days are 24 hours long. With a plain date the
        calendar units are measured from it; with a ZonedDateTime days
        take their real length in its time zone.

        Args:
            other: Duration (or mapping of components) to add.
            relative_to: Anchor for calendar units.

        Returns:
            The sum, balanced up to the largest unit either operand uses.

        Raises:
            ValidationError: If calendar units are present without an
                anchor.

        Examples:
            >>> Duration(hours=20).add(Duration(hours=5))
            Duration(days=1, hours=1)
        """
        other = Duration.from_value(other)
        plain, zoned = to_relative_to(relative_to)
        return Duration._from_record(add_duration(self._record, other._record, plain, zoned))

    def subtract(
        self, other: Duration | Mapping[str, Any], *, relative_to: RelativeTo = None
    ) -> Duration:
        """Subtract another duration. See ``add``."""
        return self.add(Duration.from_value(other).negated(), relative_to=relative_to)

    def round(
        self,
        smallest_unit: Unit | str | None = None,
        *,
        largest_unit: Unit | str | None = None,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.HALF_EXPAND,
        relative_to: RelativeTo = None,
    ) -> Duration:
        """Round to ``smallest_unit`` and balance up to ``largest_unit``.

        At least one of the units must be given. ``largest_unit`` defaults
        to the larger of the duration's own largest unit and
        ``smallest_unit``; ``smallest_unit`` defaults to nanoseconds.

        Calendar units (and any duration containing them, unless
        ``largest_unit`` is years) need ``relative_to``. With a zoned
        anchor, days take their real length and a rounded time part that
        reaches a whole day is carried into days.

        Args:
            smallest_unit: Smallest unit of the result.
            largest_unit: Largest unit of the result, or ``"auto"``.
            rounding_increment: Increment in units of ``smallest_unit``.
            rounding_mode: Rounding rule, ``"halfExpand"`` by default.
            relative_to: Anchor for calendar units.

        Returns:
            The rounded and balanced duration.

        Raises:
            ValidationError: If no unit is given, the units are inverted,
                the increment is invalid, or an anchor is missing.

        Examples:
            >>> Duration(minutes=95).round("hour")
            Duration(hours=2)
            >>> Duration(minutes=95).round(largest_unit="hour")
            Duration(hours=1, minutes=35)
        """
        if smallest_unit is None and largest_unit is None:
            raise ValidationError("at least one of smallest_unit or largest_unit is required")
        smallest = Unit.NANOSECOND if smallest_unit is None else Unit.from_value(smallest_unit)
        default_largest = larger_of(default_largest_unit(self._record), smallest)
        if largest_unit is None or largest_unit == "auto":
            largest = default_largest
        else:
            largest = Unit.from_value(largest_unit)
        if larger_of(largest, smallest) is not largest:
            raise ValidationError(
                f"largest_unit {largest.value!r} is smaller than smallest_unit {smallest.value!r}"
            )
        mode = coerce_option(RoundingMode, rounding_mode)
        increment = validate_rounding_increment(
            rounding_increment, smallest.maximum_increment, inclusive=False
        )
        plain, zoned = to_relative_to(relative_to)

        unbalanced = unbalance_duration_relative(*self._record.date_part, largest, plain)
        rounded = round_duration(
            DurationRecord(*unbalanced, *self._record[4:]), increment, smallest, mode, plain, zoned
        ).duration
        rounded = adjust_rounded_duration_days(rounded, increment, smallest, mode, zoned)

        anchor = None
        if zoned is not None:
            anchor = move_relative_zoned_date_time(
                zoned, rounded.years, rounded.months, rounded.weeks, 0
            )
        time = balance_duration(*rounded.time_part, largest, anchor)
        date = balance_date_duration_relative(
            rounded.years, rounded.months, rounded.weeks, time.days, largest, plain
        )
        return Duration._from_record(DurationRecord.combine(date, time))

    def total(self, unit: Unit | str, *, relative_to: RelativeTo = None) -> float:
        """Return the whole duration expressed in ``unit``.

        Args:
            unit: The unit to express the duration in.
            relative_to: Anchor for calendar units.

        Returns:
            The (possibly fractional) number of ``unit`` in the duration.

        Raises:
            ValidationError: If calendar units are involved without an
                anchor.

        Examples:
            >>> Duration(hours=36).total("day")
            1.5
        """
        unit = Unit.from_value(unit)
        plain, zoned = to_relative_to(relative_to)
        unbalanced = unbalance_duration_relative(*self._record.date_part, unit, plain)
        anchor = None
        if zoned is not None:
            anchor = move_relative_zoned_date_time(
                zoned, unbalanced.years, unbalanced.months, unbalanced.weeks, 0
            )
        time = balance_duration(unbalanced.days, *self._record[4:], unit, anchor)
        record = DurationRecord(unbalanced.years, unbalanced.months, unbalanced.weeks, *time)
        result = round_duration(record, 1, unit, RoundingMode.TRUNC, plain, zoned)
        return float(result.total)

    @classmethod
    def compare(
        cls,
        one: Duration | Mapping[str, Any],
        two: Duration | Mapping[str, Any],
        *,
        relative_to: RelativeTo = None,
    ) -> int:
        """Compare the lengths of two durations.

        With a zoned anchor both durations are applied to it and the end
        instants compared. Otherwise calendar components are converted to
        days from ``relative_to`` (required when any are present) and the
        totals compared with 24-hour days.

        Returns:
            -1, 0 or 1.

        Raises:
            ValidationError: If calendar units are present without an
                anchor.

        Examples:
            >>> Duration.compare(Duration(hours=24), Duration(days=1))
            0
        """
        one = cls.from_value(one)
        two = cls.from_value(two)
        if one._record == two._record:
            return 0
        plain, zoned = to_relative_to(relative_to)

        if zoned is not None:
            from temporalkit.arithmetic.ops import add_zoned_date_time

            def end(duration: Duration) -> int:
                return add_zoned_date_time(
                    zoned.epoch_nanoseconds, zoned.time_zone, zoned.calendar, duration._record
                )

            first, second = end(one), end(two)
        else:
            def total(duration: Duration) -> int:
                days = unbalance_duration_relative(
                    *duration._record.date_part, Unit.DAY, plain
                ).days
                return total_duration_nanoseconds(days, *duration._record[4:])

            first, second = total(one), total(two)
        return (first > second) - (first < second)

    # Comparison and representation

    def equals(self, other: Duration) -> bool:
        """Return True if every component is equal."""
        return self._record == Duration.from_value(other)._record

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._record == other._record

    def __hash__(self) -> int:
        return hash(self._record)

    def __neg__(self) -> Duration:
        return self.negated()

    def __abs__(self) -> Duration:
        return self.abs()

    def __add__(self, other: object) -> Duration:
        """Add two durations without an anchor (see ``add``)."""
        if not isinstance(other, Duration):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.subtract(other)

    def __bool__(self) -> bool:
        return not self.blank

    def __repr__(self) -> str:
        return f"Duration({_format_components(self._record)})"

    def __str__(self) -> str:
        """Return the ISO 8601 duration string, e.g. ``P1Y2M3DT4H5M6.5S``.

        Sub-second components are folded into the seconds field.

        Examples:
            >>> str(Duration(seconds=1, milliseconds=500))
            'PT1.5S'
            >>> str(Duration(days=-3))
            '-P3D'
            >>> str(Duration())
            'PT0S'
        """
        record = DurationRecord(*(abs(value) for value in self._record))
        date = "".join(
            f"{getattr(record, name)}{designator}"
            for name, designator in _ISO_DESIGNATORS
            if getattr(record, name)
        )
        sub_second = (
            record.milliseconds * 1_000_000 + record.microseconds * 1_000 + record.nanoseconds
        )
        whole_seconds = record.seconds + sub_second // NANOS_PER_SECOND
        fraction = sub_second % NANOS_PER_SECOND
        time = ""
        if record.hours:
            time += f"{record.hours}H"
        if record.minutes:
            time += f"{record.minutes}M"
        if whole_seconds or fraction or not (date or time):
            time += str(whole_seconds)
            if fraction:
                time += "." + f"{fraction:09d}".rstrip("0")
            time += "S"
        sign = "-" if self.sign < 0 else ""
        return f"{sign}P{date}" + (f"T{time}" if time else "")


def _format_components(record: DurationRecord) -> str:
    return ", ".join(
        f"{name}={value}" for name, value in zip(_FIELD_NAMES, record) if value
    )


__all__ = ["Duration", "to_relative_to"]

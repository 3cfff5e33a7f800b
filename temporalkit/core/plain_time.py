"""PlainTime class representing a wall-clock time of day.

This module provides the PlainTime class for time-of-day values with
nanosecond precision and no date, calendar or time zone.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from temporalkit._internal.calendar import (
    ISOTime,
    compare_iso_time,
    regulate_iso_time,
)
from temporalkit._internal.validation import validate_range
from temporalkit.arithmetic.balance import DurationRecord, balance_time_duration
from temporalkit.arithmetic.ops import add_time, difference_time
from temporalkit.arithmetic.rounding import round_duration, round_time
from temporalkit.core.duration import Duration
from temporalkit.core.fields import (
    TIME_FIELD_NAMES,
    prepare_fields,
    prepare_partial_fields,
    reject_calendar_and_time_zone,
)
from temporalkit.errors import TemporalTypeError, ValidationError
from temporalkit.format.iso8601 import format_iso_time
from temporalkit.units.options import (
    Overflow,
    RoundingMode,
    coerce_option,
    get_difference_settings,
    validate_rounding_increment,
)
from temporalkit.units.unit import TIME_UNITS, Unit

if TYPE_CHECKING:
    from temporalkit.core.plain_date import PlainDate
    from temporalkit.core.plain_date_time import PlainDateTime
    from temporalkit.core.zoned_date_time import ZonedDateTime
    from temporalkit.units.timezone import TimeZone


class PlainTime:
    """A wall-clock time of day with nanosecond precision.

    Attributes:
        hour: The hour (0-23).
        minute: The minute (0-59).
        second: The second (0-59).
        millisecond: The millisecond (0-999).
        microsecond: The microsecond (0-999).
        nanosecond: The nanosecond (0-999).

    Examples:
        >>> t = PlainTime(14, 30)
        >>> str(t.add(Duration(hours=10)))
        '00:30:00'
        >>> t.until(PlainTime(16, 45))
        Duration(hours=2, minutes=15)
    """

    __slots__ = ("_iso_time",)

    @validate_range(
        hour=(0, 23),
        minute=(0, 59),
        second=(0, 59),
        millisecond=(0, 999),
        microsecond=(0, 999),
        nanosecond=(0, 999),
    )
    def __init__(
        self,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        millisecond: int = 0,
        microsecond: int = 0,
        nanosecond: int = 0,
    ) -> None:
        """Create a PlainTime from its fields.

        Raises:
            ValidationError: If any field is out of range.

        Examples:
            >>> PlainTime(24)
            Traceback (most recent call last):
            ...
            ValidationError: hour must be between 0 and 23, got 24
        """
        self._iso_time = ISOTime(hour, minute, second, millisecond, microsecond, nanosecond)

    @classmethod
    def _from_iso(cls, time: ISOTime) -> PlainTime:
        value = object.__new__(cls)
        value._iso_time = time
        return value

    @classmethod
    def from_fields(
        cls, fields: Mapping[str, Any], overflow: Overflow | str = Overflow.CONSTRAIN
    ) -> PlainTime:
        """Create a PlainTime from a mapping of time fields.

        Missing fields default to 0. Out-of-range fields are clamped
        under ``constrain`` and rejected under ``reject``.

        Examples:
            >>> PlainTime.from_fields({"hour": 25, "minute": 30})
            PlainTime(23, 30, 0)
        """
        overflow = coerce_option(Overflow, overflow)
        prepared = prepare_fields(fields, TIME_FIELD_NAMES)
        return cls._from_iso(
            regulate_iso_time(*(prepared[name] for name in ISOTime._fields), overflow)
        )

    @property
    def hour(self) -> int:
        return self._iso_time.hour

    @property
    def minute(self) -> int:
        return self._iso_time.minute

    @property
    def second(self) -> int:
        return self._iso_time.second

    @property
    def millisecond(self) -> int:
        return self._iso_time.millisecond

    @property
    def microsecond(self) -> int:
        return self._iso_time.microsecond

    @property
    def nanosecond(self) -> int:
        return self._iso_time.nanosecond

    def get_iso_fields(self) -> dict[str, int]:
        """Return the ISO fields as ``iso_hour`` ... ``iso_nanosecond``."""
        return {f"iso_{name}": value for name, value in self._iso_time._asdict().items()}

    def replace(self, *, overflow: Overflow | str = Overflow.CONSTRAIN, **fields: int) -> PlainTime:
        """Return a copy with some fields replaced.

        Raises:
            TemporalTypeError: If no time field is given.

        Examples:
            >>> PlainTime(9, 15).replace(minute=45)
            PlainTime(9, 45, 0)
        """
        reject_calendar_and_time_zone(fields)
        changes = prepare_partial_fields(fields, TIME_FIELD_NAMES)
        return PlainTime.from_fields({**self._iso_time._asdict(), **changes}, overflow)

    # Arithmetic

    def add(self, duration: Duration | Mapping[str, Any]) -> PlainTime:
        """Add the time components of ``duration``, wrapping at midnight.

        Days are ignored; years, months and weeks are rejected.

        Raises:
            ValidationError: If the duration has calendar components.
        """
        record = Duration.from_value(duration).to_record()
        if record.years or record.months or record.weeks:
            raise ValidationError("a PlainTime cannot add years, months or weeks")
        _, time = add_time(self._iso_time, record)
        return PlainTime._from_iso(time)

    def subtract(self, duration: Duration | Mapping[str, Any]) -> PlainTime:
        """Subtract the time components of ``duration``. See ``add``."""
        return self.add(Duration.from_value(duration).negated())

    def until(
        self,
        other: PlainTime,
        *,
        largest_unit: Unit | str | None = None,
        smallest_unit: Unit | str | None = None,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.TRUNC,
    ) -> Duration:
        """Return the time from this time to ``other`` on the same day.

        ``largest_unit`` defaults to hours.
        """
        return self._difference(
            "until", other, largest_unit, smallest_unit, rounding_increment, rounding_mode
        )

    def since(
        self,
        other: PlainTime,
        *,
        largest_unit: Unit | str | None = None,
        smallest_unit: Unit | str | None = None,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.TRUNC,
    ) -> Duration:
        """Return the time from ``other`` to this time. See ``until``."""
        return self._difference(
            "since", other, largest_unit, smallest_unit, rounding_increment, rounding_mode
        )

    def _difference(
        self,
        operation: str,
        other: PlainTime,
        largest_unit: Unit | str | None,
        smallest_unit: Unit | str | None,
        rounding_increment: int,
        rounding_mode: RoundingMode | str,
    ) -> Duration:
        if not isinstance(other, PlainTime):
            raise TemporalTypeError(f"expected a PlainTime, got {type(other).__name__}")
        settings = get_difference_settings(
            operation,
            largest_unit=largest_unit,
            smallest_unit=smallest_unit,
            rounding_increment=rounding_increment,
            rounding_mode=rounding_mode,
            allowed_units=TIME_UNITS,
            fallback_smallest_unit=Unit.NANOSECOND,
            smallest_largest_default_unit=Unit.HOUR,
        )
        difference = difference_time(self._iso_time, other._iso_time)
        rounded = round_duration(
            DurationRecord(0, 0, 0, *difference),
            settings.rounding_increment,
            settings.smallest_unit,
            settings.rounding_mode,
        ).duration
        time = balance_time_duration(0, *rounded[4:], settings.largest_unit)
        result = Duration(0, 0, 0, 0, *time[1:])
        return result.negated() if operation == "since" else result

    def round(
        self,
        smallest_unit: Unit | str,
        *,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.HALF_EXPAND,
    ) -> PlainTime:
        """Round to ``rounding_increment`` ``smallest_unit``, wrapping at midnight.

        Examples:
            >>> PlainTime(11, 52).round("minute", rounding_increment=15)
            PlainTime(11, 45, 0)
        """
        unit = Unit.from_value(smallest_unit)
        if unit not in TIME_UNITS:
            raise ValidationError(f"smallest_unit {unit.value!r} is not allowed here")
        increment = validate_rounding_increment(
            rounding_increment, unit.maximum_increment, inclusive=False
        )
        mode = coerce_option(RoundingMode, rounding_mode)
        _, time = round_time(self._iso_time, increment, unit, mode)
        return PlainTime._from_iso(time)

    # Conversion

    def to_plain_date_time(self, date: PlainDate) -> PlainDateTime:
        """Combine with ``date`` into a PlainDateTime."""
        return date.to_plain_date_time(self)

    def to_zoned_date_time(self, date: PlainDate, time_zone: TimeZone | str) -> ZonedDateTime:
        """Combine with ``date`` and resolve in ``time_zone`` (compatible)."""
        return date.to_plain_date_time(self).to_zoned_date_time(time_zone)

    # Comparison

    @classmethod
    def compare(cls, one: PlainTime, two: PlainTime) -> int:
        return compare_iso_time(one._iso_time, two._iso_time)

    def equals(self, other: PlainTime) -> bool:
        if not isinstance(other, PlainTime):
            raise TemporalTypeError(f"expected a PlainTime, got {type(other).__name__}")
        return self._iso_time == other._iso_time

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainTime):
            return NotImplemented
        return self._iso_time == other._iso_time

    def __hash__(self) -> int:
        return hash(self._iso_time)

    def __add__(self, other: object) -> PlainTime:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> PlainTime:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.subtract(other)

    def __repr__(self) -> str:
        t = self._iso_time
        subsecond = ""
        if t.millisecond or t.microsecond or t.nanosecond:
            subsecond = f", {t.millisecond}, {t.microsecond}, {t.nanosecond}"
        return f"PlainTime({t.hour}, {t.minute}, {t.second}{subsecond})"

    def __str__(self) -> str:
        return format_iso_time(self._iso_time)


__all__ = ["PlainTime"]

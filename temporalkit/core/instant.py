"""Instant class representing an exact point in time.

This module provides the Instant class: a count of nanoseconds since
the Unix epoch (1970-01-01T00:00:00Z), with no calendar or time zone.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from temporalkit._internal.calendar import epoch_nanoseconds_to_iso_date_time
from temporalkit._internal.constants import (
    NANOS_PER_DAY,
    NANOS_PER_MICROSECOND,
    NANOS_PER_MILLISECOND,
    NANOS_PER_SECOND,
)
from temporalkit._internal.validation import check_epoch_nanoseconds
from temporalkit.arithmetic.ops import add_instant, difference_instant
from temporalkit.arithmetic.rounding import round_temporal_instant
from temporalkit.core.duration import Duration
from temporalkit.errors import TemporalTypeError, ValidationError
from temporalkit.format.iso8601 import format_iso_date_time
from temporalkit.units.options import (
    RoundingMode,
    coerce_option,
    get_difference_settings,
    validate_rounding_increment,
)
from temporalkit.units.unit import TIME_UNITS, Unit

if TYPE_CHECKING:
    from temporalkit.calendars.base import Calendar
    from temporalkit.core.zoned_date_time import ZonedDateTime
    from temporalkit.units.timezone import TimeZone


class Instant:
    """An exact time, as nanoseconds since the Unix epoch.

    The supported range is 10**8 days either side of the epoch.

    Attributes:
        epoch_nanoseconds: Nanoseconds since the epoch.

    Examples:
        >>> i = Instant.from_epoch_seconds(1_600_000_000)
        >>> str(i)
        '2020-09-13T12:26:40Z'
        >>> i.add(Duration(hours=1)).epoch_seconds
        1600003600
    """

    __slots__ = ("_epoch_nanoseconds",)

    def __init__(self, epoch_nanoseconds: int) -> None:
        """Create an Instant.

        Args:
            epoch_nanoseconds: Nanoseconds since 1970-01-01T00:00:00Z.

        Raises:
            TemporalTypeError: If the value is not an integer.
            OverflowError: If the value is outside the supported range.
        """
        if isinstance(epoch_nanoseconds, bool) or not isinstance(epoch_nanoseconds, int):
            raise TemporalTypeError(
                f"epoch_nanoseconds must be an integer, got {type(epoch_nanoseconds).__name__}"
            )
        self._epoch_nanoseconds = check_epoch_nanoseconds(epoch_nanoseconds)

    @classmethod
    def _from_epoch_nanoseconds(cls, epoch_nanoseconds: int) -> Instant:
        instant = object.__new__(cls)
        instant._epoch_nanoseconds = epoch_nanoseconds
        return instant

    @classmethod
    def from_epoch_seconds(cls, seconds: int) -> Instant:
        """Create an Instant from whole seconds since the epoch."""
        return cls(seconds * NANOS_PER_SECOND)

    @classmethod
    def from_epoch_milliseconds(cls, milliseconds: int) -> Instant:
        """Create an Instant from milliseconds since the epoch."""
        return cls(milliseconds * NANOS_PER_MILLISECOND)

    @classmethod
    def from_epoch_microseconds(cls, microseconds: int) -> Instant:
        """Create an Instant from microseconds since the epoch."""
        return cls(microseconds * NANOS_PER_MICROSECOND)

    @classmethod
    def from_epoch_nanoseconds(cls, nanoseconds: int) -> Instant:
        """Create an Instant from nanoseconds since the epoch."""
        return cls(nanoseconds)

    @property
    def epoch_seconds(self) -> int:
        """Whole seconds since the epoch, rounded towards negative infinity."""
        return self._epoch_nanoseconds // NANOS_PER_SECOND

    @property
    def epoch_milliseconds(self) -> int:
        return self._epoch_nanoseconds // NANOS_PER_MILLISECOND

    @property
    def epoch_microseconds(self) -> int:
        return self._epoch_nanoseconds // NANOS_PER_MICROSECOND

    @property
    def epoch_nanoseconds(self) -> int:
        return self._epoch_nanoseconds

    # Arithmetic

    def add(self, duration: Duration | Mapping[str, Any]) -> Instant:
        """Return the instant ``duration`` later.

        Only time components are allowed; days, weeks, months and years
        have no fixed length without a time zone.

        Raises:
            ValidationError: If the duration has date components.
            OverflowError: If the result is out of range.

        Examples:
            >>> Instant(0).add(Duration(minutes=-1)).epoch_seconds
            -60
        """
        duration = Duration.from_value(duration)
        record = duration.to_record()
        if any(record.date_part):
            raise ValidationError(
                "an Instant cannot add years, months, weeks or days; use a ZonedDateTime"
            )
        return Instant._from_epoch_nanoseconds(add_instant(self._epoch_nanoseconds, record))

    def subtract(self, duration: Duration | Mapping[str, Any]) -> Instant:
        """Return the instant ``duration`` earlier. See ``add``."""
        return self.add(Duration.from_value(duration).negated())

    def until(
        self,
        other: Instant,
        *,
        largest_unit: Unit | str | None = None,
        smallest_unit: Unit | str | None = None,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.TRUNC,
    ) -> Duration:
        """Return the elapsed time from this instant to ``other``.

        Args:
            other: The end instant.
            largest_unit: Largest unit of the result; defaults to seconds.
            smallest_unit: Smallest unit of the result; defaults to
                nanoseconds.
            rounding_increment: Increment in units of ``smallest_unit``.
            rounding_mode: Rounding rule, ``"trunc"`` by default.

        Returns:
            A Duration with only time components.

        Examples:
            >>> Instant(0).until(Instant.from_epoch_seconds(3725), largest_unit="hour")
            Duration(hours=1, minutes=2, seconds=5)
        """
        return self._difference(
            "until", other, largest_unit, smallest_unit, rounding_increment, rounding_mode
        )

    def since(
        self,
        other: Instant,
        *,
        largest_unit: Unit | str | None = None,
        smallest_unit: Unit | str | None = None,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.TRUNC,
    ) -> Duration:
        """Return the elapsed time from ``other`` to this instant. See ``until``."""
        return self._difference(
            "since", other, largest_unit, smallest_unit, rounding_increment, rounding_mode
        )

    def _difference(
        self,
        operation: str,
        other: Instant,
        largest_unit: Unit | str | None,
        smallest_unit: Unit | str | None,
        rounding_increment: int,
        rounding_mode: RoundingMode | str,
    ) -> Duration:
        if not isinstance(other, Instant):
            raise TemporalTypeError(f"expected an Instant, got {type(other).__name__}")
        settings = get_difference_settings(
            operation,
            largest_unit=largest_unit,
            smallest_unit=smallest_unit,
            rounding_increment=rounding_increment,
            rounding_mode=rounding_mode,
            allowed_units=TIME_UNITS,
            fallback_smallest_unit=Unit.NANOSECOND,
            smallest_largest_default_unit=Unit.SECOND,
        )
        time = difference_instant(
            self._epoch_nanoseconds,
            other._epoch_nanoseconds,
            settings.rounding_increment,
            settings.smallest_unit,
            settings.largest_unit,
            settings.rounding_mode,
        )
        result = Duration(0, 0, 0, 0, *time[1:])
        return result.negated() if operation == "since" else result

    def round(
        self,
        smallest_unit: Unit | str,
        *,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.HALF_EXPAND,
    ) -> Instant:
        """Round to a multiple of ``rounding_increment`` ``smallest_unit``.

        The increment must divide a 24-hour day evenly.

        Raises:
            ValidationError: If the unit is not a time unit or the
                increment is invalid.
            OverflowError: If rounding leaves the supported range.

        Examples:
            >>> Instant(1_500_000_000).round("second").epoch_seconds
            2
        """
        unit = Unit.from_value(smallest_unit)
        if unit not in TIME_UNITS:
            raise ValidationError(f"smallest_unit {unit.value!r} is not allowed here")
        increment = validate_rounding_increment(
            rounding_increment, NANOS_PER_DAY // unit.nanoseconds, inclusive=True
        )
        mode = coerce_option(RoundingMode, rounding_mode)
        rounded = round_temporal_instant(self._epoch_nanoseconds, increment, unit, mode)
        return Instant._from_epoch_nanoseconds(check_epoch_nanoseconds(rounded))

    # Conversion

    def to_zoned_date_time(
        self, time_zone: TimeZone | str, calendar: Calendar | str | None = None
    ) -> ZonedDateTime:
        """Return this instant seen in ``time_zone`` (ISO calendar by default)."""
        from temporalkit.core.zoned_date_time import ZonedDateTime

        return ZonedDateTime(self._epoch_nanoseconds, time_zone, calendar)

    # Comparison

    @classmethod
    def compare(cls, one: Instant, two: Instant) -> int:
        """Return -1, 0 or 1 as ``one`` is before, equal to or after ``two``."""
        a, b = one._epoch_nanoseconds, two._epoch_nanoseconds
        return (a > b) - (a < b)

    def equals(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            raise TemporalTypeError(f"expected an Instant, got {type(other).__name__}")
        return self._epoch_nanoseconds == other._epoch_nanoseconds

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._epoch_nanoseconds == other._epoch_nanoseconds

    def __hash__(self) -> int:
        return hash(self._epoch_nanoseconds)

    def __repr__(self) -> str:
        return f"Instant({self._epoch_nanoseconds})"

    def __str__(self) -> str:
        return format_iso_date_time(*epoch_nanoseconds_to_iso_date_time(self._epoch_nanoseconds)) + "Z"


__all__ = ["Instant"]

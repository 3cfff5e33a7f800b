"""Unit enumeration for duration components.

This module provides the Unit enum naming the ten duration components,
from years down to nanoseconds, together with their ordering and the
fixed lengths of the units that have one.
"""

from __future__ import annotations

from enum import Enum

from temporalkit._internal.constants import (
    NANOS_PER_DAY,
    NANOS_PER_HOUR,
    NANOS_PER_MICROSECOND,
    NANOS_PER_MILLISECOND,
    NANOS_PER_MINUTE,
    NANOS_PER_SECOND,
)
from temporalkit.errors import TemporalTypeError, ValidationError


class Unit(Enum):
    """Duration units, ordered from largest (YEAR) to smallest.

    Units compare by size: ``Unit.DAY > Unit.HOUR`` is True. YEAR, MONTH
    and WEEK are calendar units whose length depends on where they are
    measured; DAY has a nominal length of 24 hours that time zones may
    stretch or shrink.

    String values are accepted wherever a Unit is, in singular or plural
    form.

    Examples:
        >>> Unit.from_value("hours")
        <Unit.HOUR: 'hour'>
        >>> Unit.MINUTE.nanoseconds
        60000000000
        >>> Unit.MONTH.nanoseconds is None
        True
    """

    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MILLISECOND = "millisecond"
    MICROSECOND = "microsecond"
    NANOSECOND = "nanosecond"

    @classmethod
    def _missing_(cls, value: object) -> Unit | None:
        if isinstance(value, str) and value.endswith("s"):
            for member in cls:
                if member.value == value[:-1]:
                    return member
        return None

    @classmethod
    def from_value(cls, value: Unit | str) -> Unit:
        """Coerce a Unit or a unit name into a Unit.

        Raises:
            TemporalTypeError: If value is neither a Unit nor a string.
            ValidationError: If the string names no unit.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise TemporalTypeError(
                f"unit must be a Unit or a string, got {type(value).__name__}"
            )
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"invalid unit {value!r}") from None

    @property
    def rank(self) -> int:
        """Position from the largest unit: YEAR is 0, NANOSECOND is 9."""
        return _RANKS[self]

    @property
    def is_calendar_unit(self) -> bool:
        """True for YEAR, MONTH and WEEK."""
        return self.rank < _RANKS[Unit.DAY]

    @property
    def is_date_unit(self) -> bool:
        """True for YEAR, MONTH, WEEK and DAY."""
        return self.rank <= _RANKS[Unit.DAY]

    @property
    def nanoseconds(self) -> int | None:
        """Nominal length in nanoseconds, or None for calendar units."""
        return _NANOSECONDS[self]

    @property
    def maximum_increment(self) -> int | None:
        """Largest modulus a rounding increment of this unit must divide.

        Returns None for date units, which accept any increment.
        """
        return _MAXIMUM_INCREMENTS.get(self)

    @property
    def plural(self) -> str:
        """Attribute name of this component on a Duration."""
        return self.value + "s"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Unit):
            return NotImplemented
        return self.rank > other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Unit):
            return NotImplemented
        return self.rank >= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Unit):
            return NotImplemented
        return self.rank < other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Unit):
            return NotImplemented
        return self.rank <= other.rank


_RANKS: dict[Unit, int] = {unit: index for index, unit in enumerate(Unit)}

_NANOSECONDS: dict[Unit, int | None] = {
    Unit.YEAR: None,
    Unit.MONTH: None,
    Unit.WEEK: None,
    Unit.DAY: NANOS_PER_DAY,
    Unit.HOUR: NANOS_PER_HOUR,
    Unit.MINUTE: NANOS_PER_MINUTE,
    Unit.SECOND: NANOS_PER_SECOND,
    Unit.MILLISECOND: NANOS_PER_MILLISECOND,
    Unit.MICROSECOND: NANOS_PER_MICROSECOND,
    Unit.NANOSECOND: 1,
}

_MAXIMUM_INCREMENTS: dict[Unit, int] = {
    Unit.HOUR: 24,
    Unit.MINUTE: 60,
    Unit.SECOND: 60,
    Unit.MILLISECOND: 1000,
    Unit.MICROSECOND: 1000,
    Unit.NANOSECOND: 1000,
}

DATE_UNITS: tuple[Unit, ...] = (Unit.YEAR, Unit.MONTH, Unit.WEEK, Unit.DAY)
TIME_UNITS: tuple[Unit, ...] = (
    Unit.HOUR,
    Unit.MINUTE,
    Unit.SECOND,
    Unit.MILLISECOND,
    Unit.MICROSECOND,
    Unit.NANOSECOND,
)


def larger_of(one: Unit, two: Unit) -> Unit:
    """Return the larger of two units."""
    return one if one >= two else two


__all__ = ["Unit", "DATE_UNITS", "TIME_UNITS", "larger_of"]

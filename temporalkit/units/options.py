"""Option enumerations accepted by temporal operations.

These are the caller-supplied policy knobs:
    - Overflow: what to do with out-of-range fields (clamp or reject)
    - Disambiguation: how to pick an instant for a skipped or repeated
      wall-clock time
    - OffsetOption: how an explicit UTC offset interacts with the zone
    - RoundingMode: the nine rounding rules

Every option also accepts its string value, so ``"halfExpand"`` and
``RoundingMode.HALF_EXPAND`` are interchangeable. Snake-case spellings
(``"half_expand"``) are accepted as well.

The module also hosts the shared option validation used by the
``until``/``since``/``round`` operations.
"""

from __future__ import annotations

from collections.abc import Collection
from enum import Enum
from typing import NamedTuple, TypeVar

from temporalkit.errors import TemporalTypeError, ValidationError
from temporalkit.units.unit import Unit, larger_of


class _Option(Enum):
    @classmethod
    def _missing_(cls, value: object) -> _Option | None:
        if isinstance(value, str) and "_" in value:
            head, *rest = value.split("_")
            camel = head + "".join(part.capitalize() for part in rest)
            for member in cls:
                if member.value == camel:
                    return member
        return None


class Overflow(_Option):
    """Overflow policy for out-of-range fields.

    CONSTRAIN clamps each field to its valid range; REJECT raises a
    ValidationError.
    """

    CONSTRAIN = "constrain"
    REJECT = "reject"


class Disambiguation(_Option):
    """Policy for wall-clock times that map to zero or two instants."""

    COMPATIBLE = "compatible"
    EARLIER = "earlier"
    LATER = "later"
    REJECT = "reject"


class OffsetOption(_Option):
    """How an explicit UTC offset is reconciled with the time zone.

    USE trusts the offset, IGNORE trusts the zone, PREFER uses the offset
    when the zone allows it and falls back to the zone otherwise, and
    REJECT raises when the zone disagrees with the offset.
    """

    USE = "use"
    PREFER = "prefer"
    IGNORE = "ignore"
    REJECT = "reject"


class RoundingMode(_Option):
    """Rounding rules for increments.

    Examples:
        >>> RoundingMode("halfEven").negate()
        <RoundingMode.HALF_EVEN: 'halfEven'>
        >>> RoundingMode.CEIL.negate()
        <RoundingMode.FLOOR: 'floor'>
    """

    CEIL = "ceil"
    FLOOR = "floor"
    EXPAND = "expand"
    TRUNC = "trunc"
    HALF_CEIL = "halfCeil"
    HALF_FLOOR = "halfFloor"
    HALF_EXPAND = "halfExpand"
    HALF_TRUNC = "halfTrunc"
    HALF_EVEN = "halfEven"

    def negate(self) -> RoundingMode:
        """Return the mode that rounds the negated value the same way."""
        return _NEGATED_MODES.get(self, self)


_NEGATED_MODES = {
    RoundingMode.CEIL: RoundingMode.FLOOR,
    RoundingMode.FLOOR: RoundingMode.CEIL,
    RoundingMode.HALF_CEIL: RoundingMode.HALF_FLOOR,
    RoundingMode.HALF_FLOOR: RoundingMode.HALF_CEIL,
}


E = TypeVar("E", bound=Enum)


def coerce_option(enum_type: type[E], value: E | str) -> E:
    """Coerce an enum member or its string spelling into ``enum_type``.

    Raises:
        TemporalTypeError: If value is neither a member nor a string.
        ValidationError: If the string is not a valid spelling.
    """
    if isinstance(value, enum_type):
        return value
    if not isinstance(value, str):
        raise TemporalTypeError(
            f"{enum_type.__name__} option must be a string, got {type(value).__name__}"
        )
    try:
        return enum_type(value)
    except ValueError:
        raise ValidationError(
            f"invalid {enum_type.__name__} option {value!r}"
        ) from None


def validate_rounding_increment(
    increment: int, maximum: int | None, inclusive: bool
) -> int:
    """Check a rounding increment against the unit's modulus.

    Args:
        increment: The requested increment.
        maximum: The unit's modulus (e.g. 24 for hours), or None when
            any increment is acceptable.
        inclusive: Whether ``increment == maximum`` is allowed.

    Returns:
        The validated increment.

    Raises:
        TemporalTypeError: If increment is not an integer.
        ValidationError: If increment is below 1, reaches the maximum,
            or does not divide it evenly.
    """
    if isinstance(increment, bool) or not isinstance(increment, int):
        if isinstance(increment, float) and increment.is_integer():
            increment = int(increment)
        else:
            raise TemporalTypeError(
                f"rounding_increment must be an integer, got {increment!r}"
            )
    if increment < 1 or increment > 1_000_000_000:
        raise ValidationError(
            f"rounding_increment must be between 1 and 1000000000, got {increment}"
        )
    if maximum is None:
        return increment
    limit = maximum if inclusive else maximum - 1
    if increment > limit:
        raise ValidationError(
            f"rounding_increment {increment} must be at most {limit}"
        )
    if maximum % increment != 0:
        raise ValidationError(
            f"rounding_increment {increment} does not divide {maximum} evenly"
        )
    return increment


def validate_date_time_rounding_increment(increment: int, unit: Unit) -> int:
    """Check the increment of a date-time round: days allow only 1."""
    if unit is Unit.DAY:
        return validate_rounding_increment(increment, 1, inclusive=True)
    return validate_rounding_increment(increment, unit.maximum_increment, inclusive=False)


class DifferenceSettings(NamedTuple):
    """Resolved options for an until/since operation."""

    smallest_unit: Unit
    largest_unit: Unit
    rounding_mode: RoundingMode
    rounding_increment: int


def get_difference_settings(
    operation: str,
    *,
    largest_unit: Unit | str | None,
    smallest_unit: Unit | str | None,
    rounding_increment: int,
    rounding_mode: RoundingMode | str,
    allowed_units: Collection[Unit],
    fallback_smallest_unit: Unit,
    smallest_largest_default_unit: Unit,
) -> DifferenceSettings:
    """Resolve and validate the options of an until/since call.

    Args:
        operation: ``"until"`` or ``"since"``; ``since`` negates the
            rounding mode.
        largest_unit: Requested largest unit, or None (or ``"auto"``) for
            the larger of ``smallest_largest_default_unit`` and the
            smallest unit.
        smallest_unit: Requested smallest unit, or None for
            ``fallback_smallest_unit``.
        rounding_increment: Increment in units of the smallest unit.
        rounding_mode: Rounding rule applied to the result.
        allowed_units: Units this value kind can produce.
        fallback_smallest_unit: Default smallest unit.
        smallest_largest_default_unit: Floor for the default largest unit.

    Raises:
        ValidationError: On a disallowed unit, a largest unit smaller than
            the smallest unit, or an invalid increment.
    """
    mode = coerce_option(RoundingMode, rounding_mode)
    if operation == "since":
        mode = mode.negate()

    smallest = (
        fallback_smallest_unit if smallest_unit is None else Unit.from_value(smallest_unit)
    )
    if smallest not in allowed_units:
        raise ValidationError(f"smallest_unit {smallest.value!r} is not allowed here")

    default_largest = larger_of(smallest_largest_default_unit, smallest)
    if largest_unit is None or largest_unit == "auto":
        largest = default_largest
    else:
        largest = Unit.from_value(largest_unit)
        if largest not in allowed_units:
            raise ValidationError(f"largest_unit {largest.value!r} is not allowed here")
    if larger_of(largest, smallest) is not largest:
        raise ValidationError(
            f"largest_unit {largest.value!r} is smaller than smallest_unit {smallest.value!r}"
        )

    increment = validate_rounding_increment(
        rounding_increment, smallest.maximum_increment, inclusive=False
    )
    return DifferenceSettings(smallest, largest, mode, increment)


__all__ = [
    "Overflow",
    "Disambiguation",
    "OffsetOption",
    "RoundingMode",
    "coerce_option",
    "validate_rounding_increment",
    "validate_date_time_rounding_increment",
    "DifferenceSettings",
    "get_difference_settings",
]

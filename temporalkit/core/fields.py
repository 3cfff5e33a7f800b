"""Calendar field records.

A fields record is the calendar-neutral form of a temporal value: an
ordered mapping from field name (``year``, ``month``, ``month_code``,
``day``, ``hour`` ... ``nanosecond``, ``offset``) to value. Records are
immutable once built; FieldsBuilder assembles them.

prepare_fields and prepare_partial_fields read the requested fields
from a mapping or from a temporal value, check their types and ranges,
and fill defaults, producing the record a calendar's ``*_from_fields``
method consumes.
"""

from __future__ import annotations

import math
from collections.abc import Collection, Iterable, Iterator, Mapping
from typing import Any, Callable

from temporalkit.errors import TemporalTypeError, ValidationError

DATE_FIELD_NAMES: tuple[str, ...] = ("day", "month", "month_code", "year")
YEAR_MONTH_FIELD_NAMES: tuple[str, ...] = ("month", "month_code", "year")
MONTH_DAY_FIELD_NAMES: tuple[str, ...] = ("day", "month", "month_code", "year")
TIME_FIELD_NAMES: tuple[str, ...] = (
    "hour",
    "microsecond",
    "millisecond",
    "minute",
    "nanosecond",
    "second",
)


class Fields(Mapping[str, Any]):
    """An immutable, ordered field-name to value mapping.

    Examples:
        >>> fields = Fields({"year": 2024, "month": 2})
        >>> fields["year"]
        2024
        >>> dict(fields.merged({"month": 3}))
        {'year': 2024, 'month': 3}
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | Iterable[tuple[str, Any]] = ()) -> None:
        self._data: dict[str, Any] = dict(data)

    def __getitem__(self, name: str) -> Any:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Fields({self._data!r})"

    def merged(self, other: Mapping[str, Any]) -> Fields:
        """Return a new record with ``other``'s entries laid over this one."""
        return FieldsBuilder(self).update(other).build()

    def without(self, *names: str) -> Fields:
        """Return a new record with the given names removed."""
        return Fields((k, v) for k, v in self._data.items() if k not in names)


class FieldsBuilder:
    """Accumulates entries and produces a Fields record once."""

    __slots__ = ("_data",)

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial) if initial else {}

    def set(self, name: str, value: Any) -> FieldsBuilder:
        self._data[name] = value
        return self

    def update(self, other: Mapping[str, Any]) -> FieldsBuilder:
        for name, value in other.items():
            self._data[name] = value
        return self

    def build(self) -> Fields:
        return Fields(self._data)


# Field conversions


def _to_integer(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise TemporalTypeError(f"{name} must be an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError(f"{name} must be finite, got {value}")
        return int(value)
    raise TemporalTypeError(f"{name} must be an integer, got {type(value).__name__}")


def _to_positive_integer(name: str, value: Any) -> int:
    result = _to_integer(name, value)
    if result <= 0:
        raise ValidationError(f"{name} must be positive, got {result}")
    return result


def _to_string(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise TemporalTypeError(f"{name} must be a string, got {type(value).__name__}")
    return value


_CONVERTERS: dict[str, Callable[[str, Any], Any]] = {
    "year": _to_integer,
    "month": _to_positive_integer,
    "month_code": _to_string,
    "day": _to_positive_integer,
    "hour": _to_integer,
    "minute": _to_integer,
    "second": _to_integer,
    "millisecond": _to_integer,
    "microsecond": _to_integer,
    "nanosecond": _to_integer,
    "offset": _to_string,
    "era": _to_string,
    "era_year": _to_integer,
}

_DEFAULTS: dict[str, Any] = {name: 0 for name in TIME_FIELD_NAMES}


def _read(source: Any, name: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def _convert(name: str, value: Any) -> Any:
    converter = _CONVERTERS.get(name)
    return converter(name, value) if converter else value


def prepare_fields(
    source: Any,
    field_names: Iterable[str],
    required_fields: Collection[str] = (),
) -> Fields:
    """Collect ``field_names`` from ``source`` into a Fields record.

    Fields are visited in sorted name order. Present values are type
    checked and converted; absent time fields default to 0; other absent
    fields are left out unless they are required.

    Args:
        source: A mapping, or a temporal value read through attributes.
        field_names: Names the caller (and calendar) is interested in.
        required_fields: Names that must be present.

    Returns:
        The prepared record.

    Raises:
        TemporalTypeError: If a required field is missing or a value has
            the wrong type.
        ValidationError: If ``month`` or ``day`` is not positive.

    Examples:
        >>> dict(prepare_fields({"year": 2024.0, "day": 3}, ["day", "year", "hour"]))
        {'day': 3, 'hour': 0, 'year': 2024}
    """
    builder = FieldsBuilder()
    for name in sorted(set(field_names)):
        value = _read(source, name)
        if value is None:
            if name in required_fields:
                raise TemporalTypeError(f"required field {name!r} is missing")
            if name in _DEFAULTS:
                builder.set(name, _DEFAULTS[name])
            continue
        builder.set(name, _convert(name, value))
    return builder.build()


def prepare_partial_fields(source: Mapping[str, Any], field_names: Iterable[str]) -> Fields:
    """Collect only the fields present in a partial update.

    Raises:
        TemporalTypeError: If ``source`` names a field outside
            ``field_names``, or contains none of them.

    Examples:
        >>> dict(prepare_partial_fields({"month": 6}, ["day", "month", "year"]))
        {'month': 6}
    """
    names = set(field_names)
    unknown = sorted(set(source) - names)
    if unknown:
        raise TemporalTypeError(f"unexpected field(s): {', '.join(unknown)}")

    builder = FieldsBuilder()
    for name in sorted(names):
        value = source.get(name)
        if value is not None:
            builder.set(name, _convert(name, value))
    result = builder.build()
    if not result:
        raise TemporalTypeError("at least one field must be provided")
    return result


def reject_calendar_and_time_zone(source: Mapping[str, Any]) -> None:
    """Raise if a partial update tries to replace the calendar or zone.

    Only with_calendar / with_time_zone may change those.
    """
    for name in ("calendar", "time_zone"):
        if name in source:
            raise TemporalTypeError(
                f"{name} cannot be changed here, use with_{name}() instead"
            )


__all__ = [
    "Fields",
    "FieldsBuilder",
    "DATE_FIELD_NAMES",
    "YEAR_MONTH_FIELD_NAMES",
    "MONTH_DAY_FIELD_NAMES",
    "TIME_FIELD_NAMES",
    "prepare_fields",
    "prepare_partial_fields",
    "reject_calendar_and_time_zone",
]

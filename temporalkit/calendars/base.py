"""The calendar capability interface.

A calendar turns field records into ISO-backed values and back, and
performs the date arithmetic whose meaning depends on the calendar
(adding months, measuring years). Every value kind stores its date in
ISO fields and defers to its calendar for everything else.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from temporalkit._internal.calendar import ISODate
from temporalkit.core.fields import Fields, FieldsBuilder
from temporalkit.errors import TemporalTypeError
from temporalkit.units.options import Overflow
from temporalkit.units.unit import Unit

if TYPE_CHECKING:
    from temporalkit.core.duration import Duration
    from temporalkit.core.plain_date import PlainDate
    from temporalkit.core.plain_month_day import PlainMonthDay
    from temporalkit.core.plain_year_month import PlainYearMonth


def iso_date_of(value: Any) -> ISODate:
    """Return the ISO date backing a date-like value.

    Accepts an ISODate or any value carrying one (PlainDate,
    PlainDateTime, PlainYearMonth, PlainMonthDay, ZonedDateTime).

    Raises:
        TemporalTypeError: If ``value`` has no date.
    """
    if isinstance(value, ISODate):
        return value
    iso = getattr(value, "_iso_date", None)
    if iso is None:
        raise TemporalTypeError(f"expected a date-like value, got {type(value).__name__}")
    return iso


class Calendar(ABC):
    """Abstract base for calendar systems.

    Subclasses provide an ``id`` and implement the field constructors,
    the arithmetic and the accessors. ``fields`` and ``merge_fields`` have
    defaults suitable for calendars without calendar-specific fields.

    Calendars compare equal when their identifiers do.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def id(self) -> str:
        """The calendar identifier, e.g. ``"iso8601"``."""

    # Field protocol

    def fields(self, field_names: Iterable[str]) -> list[str]:
        """Return the field names this calendar needs, given a request.

        A calendar with eras would add ``era`` and ``era_year`` here.
        """
        return list(field_names)

    def merge_fields(
        self, fields: Mapping[str, Any], additional_fields: Mapping[str, Any]
    ) -> Fields:
        """Overlay ``additional_fields`` on ``fields``, skipping None values."""
        builder = FieldsBuilder()
        for source in (fields, additional_fields):
            for name, value in source.items():
                if value is not None:
                    builder.set(name, value)
        return builder.build()

    @abstractmethod
    def date_from_fields(
        self, fields: Mapping[str, Any], overflow: Overflow = Overflow.CONSTRAIN
    ) -> PlainDate:
        """Build a date from ``year``, ``month``/``month_code`` and ``day``."""

    @abstractmethod
    def year_month_from_fields(
        self, fields: Mapping[str, Any], overflow: Overflow = Overflow.CONSTRAIN
    ) -> PlainYearMonth:
        """Build a year-month from ``year`` and ``month``/``month_code``."""

    @abstractmethod
    def month_day_from_fields(
        self, fields: Mapping[str, Any], overflow: Overflow = Overflow.CONSTRAIN
    ) -> PlainMonthDay:
        """Build a month-day from ``month``/``month_code`` and ``day``."""

    # Arithmetic

    @abstractmethod
    def date_add(
        self, date: PlainDate, duration: Duration, overflow: Overflow = Overflow.CONSTRAIN
    ) -> PlainDate:
        """Add the date part of ``duration`` (time parts carry into days)."""

    @abstractmethod
    def date_until(self, one: PlainDate, two: PlainDate, largest_unit: Unit) -> Duration:
        """Return the years/months/weeks/days from ``one`` to ``two``."""

    # Accessors

    @abstractmethod
    def year(self, date: Any) -> int: ...

    @abstractmethod
    def month(self, date: Any) -> int: ...

    @abstractmethod
    def month_code(self, date: Any) -> str: ...

    @abstractmethod
    def day(self, date: Any) -> int: ...

    @abstractmethod
    def day_of_week(self, date: Any) -> int: ...

    @abstractmethod
    def day_of_year(self, date: Any) -> int: ...

    @abstractmethod
    def week_of_year(self, date: Any) -> int: ...

    @abstractmethod
    def year_of_week(self, date: Any) -> int: ...

    @abstractmethod
    def days_in_week(self, date: Any) -> int: ...

    @abstractmethod
    def days_in_month(self, date: Any) -> int: ...

    @abstractmethod
    def days_in_year(self, date: Any) -> int: ...

    @abstractmethod
    def months_in_year(self, date: Any) -> int: ...

    @abstractmethod
    def in_leap_year(self, date: Any) -> bool: ...

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Calendar):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __str__(self) -> str:
        return self.id


__all__ = ["Calendar", "iso_date_of"]

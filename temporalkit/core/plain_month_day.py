"""PlainMonthDay class representing a recurring day of the year."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from temporalkit._internal.calendar import ISODate
from temporalkit._internal.constants import DEFAULT_CALENDAR_ID, ISO_REFERENCE_YEAR
from temporalkit._internal.validation import check_date_within_limits, validate_day, validate_month
from temporalkit.core.fields import (
    MONTH_DAY_FIELD_NAMES,
    prepare_fields,
    prepare_partial_fields,
    reject_calendar_and_time_zone,
)
from temporalkit.errors import TemporalTypeError
from temporalkit.format.iso8601 import format_calendar_annotation, format_iso_date
from temporalkit.units.options import Overflow, coerce_option

if TYPE_CHECKING:
    from temporalkit.calendars.base import Calendar
    from temporalkit.core.plain_date import PlainDate


class PlainMonthDay:
    """A month and day with no year, such as a birthday.

    Stored as an ISO date in a reference year (1972 for ISO, a leap year
    so that February 29 can be represented).

    Examples:
        >>> md = PlainMonthDay(2, 29)
        >>> md.month_code
        'M02'
        >>> md.to_plain_date(year=2021)
        PlainDate(2021, 2, 28)
    """

    __slots__ = ("_iso_date", "_calendar")

    def __init__(
        self,
        month: int,
        day: int,
        calendar: Calendar | str | None = None,
        reference_year: int = ISO_REFERENCE_YEAR,
    ) -> None:
        from temporalkit.calendars.registry import get_calendar

        validate_month(month)
        validate_day(reference_year, month, day)
        date = ISODate(reference_year, month, day)
        check_date_within_limits(date)
        self._iso_date = date
        self._calendar = get_calendar(calendar)

    @classmethod
    def _from_iso(cls, date: ISODate, calendar: Calendar) -> PlainMonthDay:
        check_date_within_limits(date)
        value = object.__new__(cls)
        value._iso_date = date
        value._calendar = calendar
        return value

    @classmethod
    def from_fields(
        cls,
        fields: Mapping[str, Any],
        overflow: Overflow | str = Overflow.CONSTRAIN,
        calendar: Calendar | str | None = None,
    ) -> PlainMonthDay:
        """Create a PlainMonthDay from ``month_code`` (or ``month`` and
        ``year``) and ``day``.

        Raises:
            TemporalTypeError: If ``month`` is given without ``year`` or
                ``month_code``.
        """
        from temporalkit.calendars.registry import get_calendar

        if calendar is None:
            calendar = fields.get("calendar")
        return get_calendar(calendar).month_day_from_fields(
            fields, coerce_option(Overflow, overflow)
        )

    @property
    def calendar(self) -> Calendar:
        return self._calendar

    @property
    def month_code(self) -> str:
        return self._calendar.month_code(self)

    @property
    def day(self) -> int:
        return self._calendar.day(self)

    def get_iso_fields(self) -> dict[str, Any]:
        return {
            "calendar": self._calendar,
            "iso_year": self._iso_date.year,
            "iso_month": self._iso_date.month,
            "iso_day": self._iso_date.day,
        }

    def replace(
        self, *, overflow: Overflow | str = Overflow.CONSTRAIN, **fields: Any
    ) -> PlainMonthDay:
        """Return a copy with some fields replaced.

        Replacing ``month`` requires ``year`` as well, since the month
        number alone does not say whether February 29 exists.

        Examples:
            >>> PlainMonthDay(1, 31).replace(month_code="M04")
            PlainMonthDay(4, 30)
        """
        reject_calendar_and_time_zone(fields)
        field_names = self._calendar.fields(MONTH_DAY_FIELD_NAMES)
        changes = prepare_partial_fields(fields, field_names)
        merged = self._calendar.merge_fields(prepare_fields(self, field_names), changes)
        return self._calendar.month_day_from_fields(merged, coerce_option(Overflow, overflow))

    def to_plain_date(self, year: int) -> PlainDate:
        """Return this day in ``year``, clamping February 29 in common years."""
        field_names = self._calendar.fields(("day", "month_code"))
        merged = self._calendar.merge_fields(
            prepare_fields(self, field_names),
            prepare_fields({"year": year}, ("year",), ("year",)),
        )
        return self._calendar.date_from_fields(merged, Overflow.CONSTRAIN)

    def equals(self, other: PlainMonthDay) -> bool:
        if not isinstance(other, PlainMonthDay):
            raise TemporalTypeError(f"expected a PlainMonthDay, got {type(other).__name__}")
        return self == other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainMonthDay):
            return NotImplemented
        return self._iso_date == other._iso_date and self._calendar == other._calendar

    def __hash__(self) -> int:
        return hash((self._iso_date, self._calendar.id))

    def __repr__(self) -> str:
        _, month, day = self._iso_date
        if self._calendar.id == DEFAULT_CALENDAR_ID:
            return f"PlainMonthDay({month}, {day})"
        return f"PlainMonthDay({month}, {day}, calendar={self._calendar.id!r})"

    def __str__(self) -> str:
        """Return ``MM-DD``, or the full reference date for other calendars."""
        if self._calendar.id == DEFAULT_CALENDAR_ID:
            return f"{self._iso_date.month:02d}-{self._iso_date.day:02d}"
        return format_iso_date(self._iso_date) + format_calendar_annotation(self._calendar)


__all__ = ["PlainMonthDay"]

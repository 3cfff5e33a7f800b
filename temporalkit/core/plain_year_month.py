"""PlainYearMonth class representing a month of a particular year.

A PlainYearMonth is stored as an ISO date whose day is a reference day
chosen by the calendar (the 1st for ISO), so that calendars whose months
do not start on ISO month boundaries can still be represented.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from temporalkit._internal.calendar import ISODate, compare_iso_date
from temporalkit._internal.constants import DEFAULT_CALENDAR_ID, ISO_REFERENCE_DAY
from temporalkit._internal.validation import (
    check_year_month_within_limits,
    validate_day,
    validate_month,
)
from temporalkit.arithmetic.balance import DurationRecord, balance_time_duration, duration_sign
from temporalkit.arithmetic.rounding import round_duration
from temporalkit.core.duration import Duration
from temporalkit.core.fields import (
    YEAR_MONTH_FIELD_NAMES,
    prepare_fields,
    prepare_partial_fields,
    reject_calendar_and_time_zone,
)
from temporalkit.errors import CalendarError, TemporalTypeError
from temporalkit.format.iso8601 import format_calendar_annotation, format_iso_date, format_year
from temporalkit.units.options import (
    Overflow,
    RoundingMode,
    coerce_option,
    get_difference_settings,
)
from temporalkit.units.unit import Unit

if TYPE_CHECKING:
    from temporalkit.calendars.base import Calendar
    from temporalkit.core.plain_date import PlainDate

_YEAR_MONTH_UNITS: tuple[Unit, ...] = (Unit.YEAR, Unit.MONTH)


class PlainYearMonth:
    """A year and month in a calendar, such as "October 2021".

    Examples:
        >>> ym = PlainYearMonth(2021, 1)
        >>> ym.add(Duration(months=13))
        PlainYearMonth(2022, 2)
        >>> ym.until(PlainYearMonth(2023, 4))
        Duration(years=2, months=3)
        >>> ym.to_plain_date(day=31)
        PlainDate(2021, 1, 31)
    """

    __slots__ = ("_iso_date", "_calendar")

    def __init__(
        self,
        year: int,
        month: int,
        calendar: Calendar | str | None = None,
        reference_day: int = ISO_REFERENCE_DAY,
    ) -> None:
        """Create a PlainYearMonth from ISO fields.

        Raises:
            ValidationError: If the month or reference day is invalid.
            OverflowError: If the year-month is outside the supported range.
        """
        from temporalkit.calendars.registry import get_calendar

        validate_month(month)
        validate_day(year, month, reference_day)
        check_year_month_within_limits(year, month)
        self._iso_date = ISODate(year, month, reference_day)
        self._calendar = get_calendar(calendar)

    @classmethod
    def _from_iso(cls, date: ISODate, calendar: Calendar) -> PlainYearMonth:
        check_year_month_within_limits(date.year, date.month)
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
    ) -> PlainYearMonth:
        """Create a PlainYearMonth from ``year`` and ``month``/``month_code``.

        Examples:
            >>> PlainYearMonth.from_fields({"year": 2021, "month_code": "M07"})
            PlainYearMonth(2021, 7)
        """
        from temporalkit.calendars.registry import get_calendar

        if calendar is None:
            calendar = fields.get("calendar")
        return get_calendar(calendar).year_month_from_fields(
            fields, coerce_option(Overflow, overflow)
        )

    @property
    def calendar(self) -> Calendar:
        return self._calendar

    @property
    def year(self) -> int:
        return self._calendar.year(self)

    @property
    def month(self) -> int:
        return self._calendar.month(self)

    @property
    def month_code(self) -> str:
        return self._calendar.month_code(self)

    @property
    def days_in_month(self) -> int:
        return self._calendar.days_in_month(self)

    @property
    def days_in_year(self) -> int:
        return self._calendar.days_in_year(self)

    @property
    def months_in_year(self) -> int:
        return self._calendar.months_in_year(self)

    @property
    def in_leap_year(self) -> bool:
        return self._calendar.in_leap_year(self)

    def get_iso_fields(self) -> dict[str, Any]:
        return {
            "calendar": self._calendar,
            "iso_year": self._iso_date.year,
            "iso_month": self._iso_date.month,
            "iso_day": self._iso_date.day,
        }

    def _fields(self) -> tuple[list[str], dict[str, Any]]:
        field_names = self._calendar.fields(YEAR_MONTH_FIELD_NAMES)
        return field_names, dict(prepare_fields(self, field_names))

    def replace(
        self, *, overflow: Overflow | str = Overflow.CONSTRAIN, **fields: Any
    ) -> PlainYearMonth:
        """Return a copy with ``year``, ``month`` or ``month_code`` replaced."""
        reject_calendar_and_time_zone(fields)
        field_names, own = self._fields()
        changes = prepare_partial_fields(fields, field_names)
        merged = self._calendar.merge_fields(own, changes)
        return self._calendar.year_month_from_fields(merged, coerce_option(Overflow, overflow))

    # Arithmetic

    def add(
        self,
        duration: Duration | Mapping[str, Any],
        overflow: Overflow | str = Overflow.CONSTRAIN,
    ) -> PlainYearMonth:
        """Add a duration to this month.

        The month is anchored on its first day, or on its last day when
        the duration is negative, so that adding days only moves into a
        neighbouring month once the month is used up.

        Examples:
            >>> PlainYearMonth(2021, 3).add(Duration(days=-31))
            PlainYearMonth(2021, 2)
            >>> PlainYearMonth(2021, 3).add(Duration(days=30))
            PlainYearMonth(2021, 3)
        """
        overflow = coerce_option(Overflow, overflow)
        record = Duration.from_value(duration).to_record()
        days = balance_time_duration(*record.time_part, Unit.DAY).days
        sign = duration_sign(record.years, record.months, record.weeks, days)

        field_names, own = self._fields()
        own["day"] = self._calendar.days_in_month(self) if sign < 0 else 1
        start = self._calendar.date_from_fields(own)
        added = self._calendar.date_add(
            start,
            Duration(years=record.years, months=record.months, weeks=record.weeks, days=days),
            overflow,
        )
        return self._calendar.year_month_from_fields(prepare_fields(added, field_names), overflow)

    def subtract(
        self,
        duration: Duration | Mapping[str, Any],
        overflow: Overflow | str = Overflow.CONSTRAIN,
    ) -> PlainYearMonth:
        """Subtract a duration. See ``add``."""
        return self.add(Duration.from_value(duration).negated(), overflow)

    def until(
        self,
        other: PlainYearMonth,
        *,
        largest_unit: Unit | str | None = None,
        smallest_unit: Unit | str | None = None,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.TRUNC,
    ) -> Duration:
        """Return the years and months from this month to ``other``.

        Only ``year`` and ``month`` are allowed as units; the largest
        unit defaults to years.

        Raises:
            CalendarError: If the calendars differ.
        """
        return self._difference(
            "until", other, largest_unit, smallest_unit, rounding_increment, rounding_mode
        )

    def since(
        self,
        other: PlainYearMonth,
        *,
        largest_unit: Unit | str | None = None,
        smallest_unit: Unit | str | None = None,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.TRUNC,
    ) -> Duration:
        """Return the years and months from ``other`` to this month."""
        return self._difference(
            "since", other, largest_unit, smallest_unit, rounding_increment, rounding_mode
        )

    def _difference(
        self,
        operation: str,
        other: PlainYearMonth,
        largest_unit: Unit | str | None,
        smallest_unit: Unit | str | None,
        rounding_increment: int,
        rounding_mode: RoundingMode | str,
    ) -> Duration:
        if not isinstance(other, PlainYearMonth):
            raise TemporalTypeError(f"expected a PlainYearMonth, got {type(other).__name__}")
        if self._calendar != other._calendar:
            raise CalendarError(
                f"cannot compute a difference between calendars "
                f"{self._calendar.id!r} and {other._calendar.id!r}"
            )
        settings = get_difference_settings(
            operation,
            largest_unit=largest_unit,
            smallest_unit=smallest_unit,
            rounding_increment=rounding_increment,
            rounding_mode=rounding_mode,
            allowed_units=_YEAR_MONTH_UNITS,
            fallback_smallest_unit=Unit.MONTH,
            smallest_largest_default_unit=Unit.YEAR,
        )
        start = self._first_day()
        span = self._calendar.date_until(start, other._first_day(), settings.largest_unit)
        years, months = span.years, span.months
        if settings.smallest_unit is not Unit.MONTH or settings.rounding_increment != 1:
            rounded = round_duration(
                DurationRecord(years, months),
                settings.rounding_increment,
                settings.smallest_unit,
                settings.rounding_mode,
                plain_relative_to=start,
            ).duration
            years, months = rounded.years, rounded.months
        result = Duration(years=years, months=months)
        return result.negated() if operation == "since" else result

    def _first_day(self) -> PlainDate:
        _, own = self._fields()
        own["day"] = 1
        return self._calendar.date_from_fields(own)

    # Conversion

    def to_plain_date(self, day: int) -> PlainDate:
        """Return the given day of this month.

        Raises:
            ValidationError: If the month has no such day.

        Examples:
            >>> PlainYearMonth(2021, 2).to_plain_date(day=29)
            Traceback (most recent call last):
            ...
            ValidationError: day must be between 1 and 28 for 2021-02, got 29
        """
        _, own = self._fields()
        merged = self._calendar.merge_fields(own, prepare_fields({"day": day}, ("day",), ("day",)))
        return self._calendar.date_from_fields(merged, Overflow.REJECT)

    # Comparison

    @classmethod
    def compare(cls, one: PlainYearMonth, two: PlainYearMonth) -> int:
        return compare_iso_date(*one._iso_date, *two._iso_date)

    def equals(self, other: PlainYearMonth) -> bool:
        if not isinstance(other, PlainYearMonth):
            raise TemporalTypeError(f"expected a PlainYearMonth, got {type(other).__name__}")
        return self == other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainYearMonth):
            return NotImplemented
        return self._iso_date == other._iso_date and self._calendar == other._calendar

    def __hash__(self) -> int:
        return hash((self._iso_date, self._calendar.id))

    def __repr__(self) -> str:
        year, month, _ = self._iso_date
        if self._calendar.id == DEFAULT_CALENDAR_ID:
            return f"PlainYearMonth({year}, {month})"
        return f"PlainYearMonth({year}, {month}, calendar={self._calendar.id!r})"

    def __str__(self) -> str:
        """Return ``YYYY-MM``, or the full reference date for other calendars."""
        if self._calendar.id == DEFAULT_CALENDAR_ID:
            return f"{format_year(self._iso_date.year)}-{self._iso_date.month:02d}"
        return format_iso_date(self._iso_date) + format_calendar_annotation(self._calendar)


__all__ = ["PlainYearMonth"]

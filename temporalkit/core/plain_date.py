"""PlainDate class representing a calendar date.

This module provides the PlainDate class: an ISO date paired with the
calendar that interprets it. The ISO fields are what is stored; the
calendar supplies the year, month and day a user sees, and performs the
month and year arithmetic.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from temporalkit._internal.calendar import MIDNIGHT, ISODate, compare_iso_date
from temporalkit._internal.validation import (
    check_date_within_limits,
    validate_day,
    validate_month,
)
from temporalkit.arithmetic.balance import DurationRecord, balance_date_duration_relative
from temporalkit.arithmetic.rounding import round_duration
from temporalkit.core.duration import Duration
from temporalkit.core.fields import (
    DATE_FIELD_NAMES,
    MONTH_DAY_FIELD_NAMES,
    YEAR_MONTH_FIELD_NAMES,
    prepare_fields,
    prepare_partial_fields,
    reject_calendar_and_time_zone,
)
from temporalkit.errors import CalendarError, TemporalTypeError
from temporalkit.format.iso8601 import format_calendar_annotation, format_iso_date
from temporalkit.units.options import (
    Overflow,
    RoundingMode,
    coerce_option,
    get_difference_settings,
)
from temporalkit.units.unit import DATE_UNITS, Unit

if TYPE_CHECKING:
    from temporalkit.calendars.base import Calendar
    from temporalkit.core.plain_date_time import PlainDateTime
    from temporalkit.core.plain_month_day import PlainMonthDay
    from temporalkit.core.plain_time import PlainTime
    from temporalkit.core.plain_year_month import PlainYearMonth
    from temporalkit.core.zoned_date_time import ZonedDateTime
    from temporalkit.units.timezone import TimeZone


class PlainDate:
    """A calendar date with no time of day or time zone.

    Dates are stored as ISO 8601 fields. Field accessors (``year``,
    ``month``, ``month_code``, ``day`` ...) are answered by the calendar,
    which for the default ISO calendar returns the ISO fields unchanged.

    Attributes:
        calendar: The calendar interpreting the date.

    Examples:
        >>> d = PlainDate(2021, 1, 31)
        >>> d.add(Duration(months=1))
        PlainDate(2021, 2, 28)
        >>> PlainDate(2021, 1, 15).until(PlainDate(2021, 3, 1), largest_unit="month")
        Duration(months=1, days=14)
        >>> d.day_of_week
        7
    """

    __slots__ = ("_iso_date", "_calendar")

    def __init__(
        self, year: int, month: int, day: int, calendar: Calendar | str | None = None
    ) -> None:
        """Create a PlainDate from ISO fields.

        Args:
            year: ISO year (negative years are allowed).
            month: ISO month (1-12).
            day: Day of the month.
            calendar: Calendar or calendar identifier; ISO 8601 by default.

        Raises:
            ValidationError: If the month or day is invalid.
            OverflowError: If the date is outside the supported range.
            CalendarError: If the calendar identifier is unknown.
        """
        from temporalkit.calendars.registry import get_calendar

        validate_month(month)
        validate_day(year, month, day)
        date = ISODate(year, month, day)
        check_date_within_limits(date)
        self._iso_date = date
        self._calendar = get_calendar(calendar)

    @classmethod
    def _from_iso(cls, date: ISODate, calendar: Calendar) -> PlainDate:
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
    ) -> PlainDate:
        """Create a PlainDate from calendar fields.

        The calendar comes from ``calendar`` or, failing that, a
        ``calendar`` entry in ``fields``.

        Args:
            fields: ``year``, ``month`` or ``month_code``, and ``day``.
            overflow: ``constrain`` clamps out-of-range fields,
                ``reject`` raises.
            calendar: Calendar or identifier.

        Raises:
            TemporalTypeError: If a required field is missing.
            ValidationError: Under ``reject`` when a field is out of range.

        Examples:
            >>> PlainDate.from_fields({"year": 2021, "month": 2, "day": 30})
            PlainDate(2021, 2, 28)
        """
        from temporalkit.calendars.registry import get_calendar

        if calendar is None:
            calendar = fields.get("calendar")
        return get_calendar(calendar).date_from_fields(fields, coerce_option(Overflow, overflow))

    # Calendar fields

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
    def day(self) -> int:
        return self._calendar.day(self)

    @property
    def day_of_week(self) -> int:
        """ISO day of the week, Monday = 1 through Sunday = 7."""
        return self._calendar.day_of_week(self)

    @property
    def day_of_year(self) -> int:
        return self._calendar.day_of_year(self)

    @property
    def week_of_year(self) -> int:
        return self._calendar.week_of_year(self)

    @property
    def year_of_week(self) -> int:
        return self._calendar.year_of_week(self)

    @property
    def days_in_week(self) -> int:
        return self._calendar.days_in_week(self)

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
        """Return the ISO fields and the calendar.

        Examples:
            >>> PlainDate(2024, 2, 29).get_iso_fields()["iso_day"]
            29
        """
        return {
            "calendar": self._calendar,
            "iso_year": self._iso_date.year,
            "iso_month": self._iso_date.month,
            "iso_day": self._iso_date.day,
        }

    def replace(
        self, *, overflow: Overflow | str = Overflow.CONSTRAIN, **fields: Any
    ) -> PlainDate:
        """Return a copy with some calendar fields replaced.

        The given fields are merged over this date's fields by the
        calendar and the result is rebuilt from the merged record.

        Raises:
            TemporalTypeError: If ``calendar`` is passed, or no date field
                is given.

        Examples:
            >>> PlainDate(2021, 3, 31).replace(month=2)
            PlainDate(2021, 2, 28)
        """
        reject_calendar_and_time_zone(fields)
        field_names = self._calendar.fields(DATE_FIELD_NAMES)
        changes = prepare_partial_fields(fields, field_names)
        merged = self._calendar.merge_fields(prepare_fields(self, field_names), changes)
        return self._calendar.date_from_fields(merged, coerce_option(Overflow, overflow))

    def with_calendar(self, calendar: Calendar | str) -> PlainDate:
        """Return the same ISO date viewed in another calendar."""
        from temporalkit.calendars.registry import get_calendar

        return PlainDate._from_iso(self._iso_date, get_calendar(calendar))

    # Arithmetic

    def add(
        self,
        duration: Duration | Mapping[str, Any],
        overflow: Overflow | str = Overflow.CONSTRAIN,
    ) -> PlainDate:
        """Add a duration through the calendar.

        Years and months are added first, clamping (or rejecting) an
        invalid day; then weeks and days. Time components are balanced
        into whole days and any remainder is dropped.

        Raises:
            ValidationError: Under ``reject`` when the day does not exist
                in the target month.
            OverflowError: If the result is outside the supported range.
        """
        return self._calendar.date_add(
            self, Duration.from_value(duration), coerce_option(Overflow, overflow)
        )

    def subtract(
        self,
        duration: Duration | Mapping[str, Any],
        overflow: Overflow | str = Overflow.CONSTRAIN,
    ) -> PlainDate:
        """Subtract a duration. See ``add``."""
        return self.add(Duration.from_value(duration).negated(), overflow)

    def until(
        self,
        other: PlainDate,
        *,
        largest_unit: Unit | str | None = None,
        smallest_unit: Unit | str | None = None,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.TRUNC,
    ) -> Duration:
        """Return the duration from this date to ``other``.

        Args:
            other: The end date, in the same calendar.
            largest_unit: ``year``, ``month``, ``week`` or ``day`` (the
                default).
            smallest_unit: Smallest unit of the result; ``day`` by default.
            rounding_increment: Increment in units of ``smallest_unit``.
            rounding_mode: Rounding rule, ``"trunc"`` by default.

        Raises:
            CalendarError: If the calendars differ.
            ValidationError: On an invalid unit combination.

        Examples:
            >>> PlainDate(2020, 2, 29).until(PlainDate(2021, 2, 28), largest_unit="year")
            Duration(months=11, days=30)
        """
        return self._difference(
            "until", other, largest_unit, smallest_unit, rounding_increment, rounding_mode
        )

    def since(
        self,
        other: PlainDate,
        *,
        largest_unit: Unit | str | None = None,
        smallest_unit: Unit | str | None = None,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.TRUNC,
    ) -> Duration:
        """Return the duration from ``other`` to this date. See ``until``."""
        return self._difference(
            "since", other, largest_unit, smallest_unit, rounding_increment, rounding_mode
        )

    def _difference(
        self,
        operation: str,
        other: PlainDate,
        largest_unit: Unit | str | None,
        smallest_unit: Unit | str | None,
        rounding_increment: int,
        rounding_mode: RoundingMode | str,
    ) -> Duration:
        if not isinstance(other, PlainDate):
            raise TemporalTypeError(f"expected a PlainDate, got {type(other).__name__}")
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
            allowed_units=DATE_UNITS,
            fallback_smallest_unit=Unit.DAY,
            smallest_largest_default_unit=Unit.DAY,
        )
        span = self._calendar.date_until(self, other, settings.largest_unit)
        result = span
        if settings.smallest_unit is not Unit.DAY or settings.rounding_increment != 1:
            rounded = round_duration(
                DurationRecord(span.years, span.months, span.weeks, span.days),
                settings.rounding_increment,
                settings.smallest_unit,
                settings.rounding_mode,
                plain_relative_to=self,
            ).duration
            date = balance_date_duration_relative(
                *rounded.date_part, settings.largest_unit, self
            )
            result = Duration(*date)
        return result.negated() if operation == "since" else result

    # Conversion

    def to_plain_date_time(self, time: PlainTime | None = None) -> PlainDateTime:
        """Combine with ``time`` (midnight by default) into a PlainDateTime.

        Examples:
            >>> str(PlainDate(2024, 6, 1).to_plain_date_time())
            '2024-06-01T00:00:00'
        """
        from temporalkit.core.plain_date_time import PlainDateTime

        iso_time = MIDNIGHT if time is None else time._iso_time
        return PlainDateTime._from_iso(self._iso_date, iso_time, self._calendar)

    def to_zoned_date_time(
        self, time_zone: TimeZone | str, plain_time: PlainTime | None = None
    ) -> ZonedDateTime:
        """Resolve this date at ``plain_time`` in ``time_zone``.

        Without a time, the result is the start of the day, which need
        not be midnight in zones that change offset at midnight.
        """
        if plain_time is None:
            from temporalkit.core.zoned_date_time import ZonedDateTime

            return ZonedDateTime._start_of_day(self._iso_date, time_zone, self._calendar)
        return self.to_plain_date_time(plain_time).to_zoned_date_time(time_zone)

    def to_plain_year_month(self) -> PlainYearMonth:
        """Return the year and month of this date as a PlainYearMonth."""
        fields = prepare_fields(self, self._calendar.fields(YEAR_MONTH_FIELD_NAMES))
        return self._calendar.year_month_from_fields(fields)

    def to_plain_month_day(self) -> PlainMonthDay:
        """Return the month and day of this date as a PlainMonthDay."""
        fields = prepare_fields(self, self._calendar.fields(MONTH_DAY_FIELD_NAMES))
        return self._calendar.month_day_from_fields(fields)

    # Comparison

    @classmethod
    def compare(cls, one: PlainDate, two: PlainDate) -> int:
        """Order two dates by their ISO fields; calendars are not compared."""
        return compare_iso_date(*one._iso_date, *two._iso_date)

    def equals(self, other: PlainDate) -> bool:
        """Return True if the ISO fields and the calendar are both equal."""
        if not isinstance(other, PlainDate):
            raise TemporalTypeError(f"expected a PlainDate, got {type(other).__name__}")
        return self == other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainDate):
            return NotImplemented
        return self._iso_date == other._iso_date and self._calendar == other._calendar

    def __hash__(self) -> int:
        return hash((self._iso_date, self._calendar.id))

    def __add__(self, other: object) -> PlainDate:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> PlainDate | Duration:
        """Subtract a Duration, or another date to get the days between."""
        if isinstance(other, Duration):
            return self.subtract(other)
        if isinstance(other, PlainDate):
            return self.since(other)
        return NotImplemented

    def __repr__(self) -> str:
        year, month, day = self._iso_date
        if self._calendar.id == "iso8601":
            return f"PlainDate({year}, {month}, {day})"
        return f"PlainDate({year}, {month}, {day}, calendar={self._calendar.id!r})"

    def __str__(self) -> str:
        return format_iso_date(self._iso_date) + format_calendar_annotation(self._calendar)


__all__ = ["PlainDate"]

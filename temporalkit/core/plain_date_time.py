"""PlainDateTime class combining a calendar date and a wall-clock time.

This module provides the PlainDateTime class: an ISO date, an ISO time
and a calendar, with no time zone. A PlainDateTime names a wall-clock
reading, not an exact moment; ``to_zoned_date_time`` resolves it in a
time zone.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from temporalkit._internal.calendar import (
    MIDNIGHT,
    ISODate,
    ISOTime,
    compare_iso_date_time,
    regulate_iso_time,
)
from temporalkit._internal.validation import (
    check_date_time_within_limits,
    validate_day,
    validate_month,
    validate_range,
)
from temporalkit.arithmetic.balance import (
    DurationRecord,
    balance_date_duration_relative,
    balance_duration,
)
from temporalkit.arithmetic.ops import add_date_time, difference_iso_date_time
from temporalkit.arithmetic.rounding import round_duration, round_iso_date_time
from temporalkit.core.duration import Duration
from temporalkit.core.fields import (
    DATE_FIELD_NAMES,
    TIME_FIELD_NAMES,
    prepare_fields,
    prepare_partial_fields,
    reject_calendar_and_time_zone,
)
from temporalkit.core.plain_date import PlainDate
from temporalkit.core.plain_time import PlainTime
from temporalkit.errors import CalendarError, TemporalTypeError, ValidationError
from temporalkit.format.iso8601 import format_calendar_annotation, format_iso_date_time
from temporalkit.units.options import (
    Disambiguation,
    Overflow,
    RoundingMode,
    coerce_option,
    get_difference_settings,
    validate_date_time_rounding_increment,
)
from temporalkit.units.unit import TIME_UNITS, Unit

if TYPE_CHECKING:
    from temporalkit.calendars.base import Calendar
    from temporalkit.core.plain_month_day import PlainMonthDay
    from temporalkit.core.plain_year_month import PlainYearMonth
    from temporalkit.core.zoned_date_time import ZonedDateTime
    from temporalkit.units.timezone import TimeZone

_ALL_UNITS: tuple[Unit, ...] = tuple(Unit)


class PlainDateTime:
    """A calendar date and a wall-clock time, without a time zone.

    Attributes:
        calendar: The calendar interpreting the date.

    Examples:
        >>> dt = PlainDateTime(2021, 3, 14, 1, 30)
        >>> str(dt.add(Duration(hours=1)))
        '2021-03-14T02:30:00'
        >>> dt.until(PlainDateTime(2021, 3, 15), largest_unit="day")
        Duration(hours=22, minutes=30)
        >>> dt.round("day")
        PlainDateTime(2021, 3, 14, 0, 0, 0)
    """

    __slots__ = ("_iso_date", "_iso_time", "_calendar")

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
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        millisecond: int = 0,
        microsecond: int = 0,
        nanosecond: int = 0,
        calendar: Calendar | str | None = None,
    ) -> None:
        """Create a PlainDateTime from ISO fields.

        Raises:
            ValidationError: If any field is out of range.
            OverflowError: If the date-time is outside the supported range.
        """
        from temporalkit.calendars.registry import get_calendar

        validate_month(month)
        validate_day(year, month, day)
        date = ISODate(year, month, day)
        time = ISOTime(hour, minute, second, millisecond, microsecond, nanosecond)
        check_date_time_within_limits(date, time)
        self._iso_date = date
        self._iso_time = time
        self._calendar = get_calendar(calendar)

    @classmethod
    def _from_iso(cls, date: ISODate, time: ISOTime, calendar: Calendar) -> PlainDateTime:
        check_date_time_within_limits(date, time)
        value = object.__new__(cls)
        value._iso_date = date
        value._iso_time = time
        value._calendar = calendar
        return value

    @classmethod
    def from_fields(
        cls,
        fields: Mapping[str, Any],
        overflow: Overflow | str = Overflow.CONSTRAIN,
        calendar: Calendar | str | None = None,
    ) -> PlainDateTime:
        """Create a PlainDateTime from calendar date fields and time fields.

        Missing time fields default to 0.

        Examples:
            >>> PlainDateTime.from_fields({"year": 2021, "month": 2, "day": 30, "hour": 9})
            PlainDateTime(2021, 2, 28, 9, 0, 0)
        """
        from temporalkit.calendars.registry import get_calendar

        if calendar is None:
            calendar = fields.get("calendar")
        calendar = get_calendar(calendar)
        overflow = coerce_option(Overflow, overflow)
        date = calendar.date_from_fields(fields, overflow)
        time = prepare_fields(fields, TIME_FIELD_NAMES)
        iso_time = regulate_iso_time(*(time[name] for name in ISOTime._fields), overflow)
        return cls._from_iso(date._iso_date, iso_time, calendar)

    # Fields

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

    @property
    def day_of_week(self) -> int:
        return self._calendar.day_of_week(self)

    @property
    def day_of_year(self) -> int:
        return self._calendar.day_of_year(self)

    @property
    def week_of_year(self) -> int:
        return self._calendar.week_of_year(self)

    @property
    def days_in_month(self) -> int:
        return self._calendar.days_in_month(self)

    @property
    def days_in_year(self) -> int:
        return self._calendar.days_in_year(self)

    @property
    def in_leap_year(self) -> bool:
        return self._calendar.in_leap_year(self)

    def get_iso_fields(self) -> dict[str, Any]:
        """Return the ISO date and time fields and the calendar."""
        fields: dict[str, Any] = {"calendar": self._calendar}
        fields.update(
            (f"iso_{name}", value) for name, value in self._iso_date._asdict().items()
        )
        fields.update(
            (f"iso_{name}", value) for name, value in self._iso_time._asdict().items()
        )
        return fields

    def replace(
        self, *, overflow: Overflow | str = Overflow.CONSTRAIN, **fields: Any
    ) -> PlainDateTime:
        """Return a copy with some date or time fields replaced.

        Raises:
            TemporalTypeError: If ``calendar`` is passed, or no field is
                given.

        Examples:
            >>> PlainDateTime(2021, 1, 31, 12).replace(month=4, minute=5)
            PlainDateTime(2021, 4, 30, 12, 5, 0)
        """
        reject_calendar_and_time_zone(fields)
        field_names = self._calendar.fields(DATE_FIELD_NAMES) + list(TIME_FIELD_NAMES)
        changes = prepare_partial_fields(fields, field_names)
        merged = self._calendar.merge_fields(prepare_fields(self, field_names), changes)
        return PlainDateTime.from_fields(merged, overflow, self._calendar)

    def with_plain_time(self, time: PlainTime | None = None) -> PlainDateTime:
        """Return a copy with the time replaced (midnight by default)."""
        iso_time = MIDNIGHT if time is None else time._iso_time
        return PlainDateTime._from_iso(self._iso_date, iso_time, self._calendar)

    def with_plain_date(self, date: PlainDate) -> PlainDateTime:
        """Return a copy with the date (and its calendar) replaced."""
        return PlainDateTime._from_iso(date._iso_date, self._iso_time, date.calendar)

    def with_calendar(self, calendar: Calendar | str) -> PlainDateTime:
        from temporalkit.calendars.registry import get_calendar

        return PlainDateTime._from_iso(self._iso_date, self._iso_time, get_calendar(calendar))

    # Arithmetic

    def add(
        self,
        duration: Duration | Mapping[str, Any],
        overflow: Overflow | str = Overflow.CONSTRAIN,
    ) -> PlainDateTime:
        """Add a duration: time first, carrying whole days into the date.

        Raises:
            ValidationError: Under ``reject`` when the date is invalid.
            OverflowError: If the result is outside the supported range.

        Examples:
            >>> PlainDateTime(2021, 1, 31, 23).add(Duration(months=1, hours=2))
            PlainDateTime(2021, 3, 1, 1, 0, 0)
        """
        record = Duration.from_value(duration).to_record()
        date, time = add_date_time(
            self._iso_date,
            self._iso_time,
            self._calendar,
            record,
            coerce_option(Overflow, overflow),
        )
        return PlainDateTime._from_iso(date, time, self._calendar)

    def subtract(
        self,
        duration: Duration | Mapping[str, Any],
        overflow: Overflow | str = Overflow.CONSTRAIN,
    ) -> PlainDateTime:
        """Subtract a duration. See ``add``."""
        return self.add(Duration.from_value(duration).negated(), overflow)

    def until(
        self,
        other: PlainDateTime,
        *,
        largest_unit: Unit | str | None = None,
        smallest_unit: Unit | str | None = None,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.TRUNC,
    ) -> Duration:
        """Return the duration from this date-time to ``other``.

        ``largest_unit`` defaults to days (or ``smallest_unit`` if
        larger); ``smallest_unit`` to nanoseconds.

        Raises:
            CalendarError: If the calendars differ.
        """
        return self._difference(
            "until", other, largest_unit, smallest_unit, rounding_increment, rounding_mode
        )

    def since(
        self,
        other: PlainDateTime,
        *,
        largest_unit: Unit | str | None = None,
        smallest_unit: Unit | str | None = None,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.TRUNC,
    ) -> Duration:
        """Return the duration from ``other`` to this date-time. See ``until``."""
        return self._difference(
            "since", other, largest_unit, smallest_unit, rounding_increment, rounding_mode
        )

    def _difference(
        self,
        operation: str,
        other: PlainDateTime,
        largest_unit: Unit | str | None,
        smallest_unit: Unit | str | None,
        rounding_increment: int,
        rounding_mode: RoundingMode | str,
    ) -> Duration:
        if not isinstance(other, PlainDateTime):
            raise TemporalTypeError(f"expected a PlainDateTime, got {type(other).__name__}")
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
            allowed_units=_ALL_UNITS,
            fallback_smallest_unit=Unit.NANOSECOND,
            smallest_largest_default_unit=Unit.DAY,
        )
        difference = difference_iso_date_time(
            self._iso_date,
            self._iso_time,
            other._iso_date,
            other._iso_time,
            self._calendar,
            settings.largest_unit,
        )
        relative_to = self.to_plain_date()
        rounded = round_duration(
            difference,
            settings.rounding_increment,
            settings.smallest_unit,
            settings.rounding_mode,
            plain_relative_to=relative_to,
        ).duration
        time = balance_duration(*rounded.time_part, settings.largest_unit)
        date = balance_date_duration_relative(
            rounded.years,
            rounded.months,
            rounded.weeks,
            time.days,
            settings.largest_unit,
            relative_to,
        )
        result = Duration._from_record(DurationRecord.combine(date, time))
        return result.negated() if operation == "since" else result

    def round(
        self,
        smallest_unit: Unit | str,
        *,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.HALF_EXPAND,
    ) -> PlainDateTime:
        """Round to ``rounding_increment`` ``smallest_unit`` (``day`` allowed).

        Raises:
            ValidationError: If the unit is a calendar unit or the
                increment does not divide the next larger unit.

        Examples:
            >>> PlainDateTime(2021, 12, 31, 23, 59, 30).round("minute")
            PlainDateTime(2022, 1, 1, 0, 0, 0)
        """
        unit = Unit.from_value(smallest_unit)
        if unit.is_calendar_unit:
            raise ValidationError(f"smallest_unit {unit.value!r} is not allowed here")
        increment = validate_date_time_rounding_increment(rounding_increment, unit)
        mode = coerce_option(RoundingMode, rounding_mode)
        date, time = round_iso_date_time(self._iso_date, self._iso_time, increment, unit, mode)
        return PlainDateTime._from_iso(date, time, self._calendar)

    # Conversion

    def to_plain_date(self) -> PlainDate:
        return PlainDate._from_iso(self._iso_date, self._calendar)

    def to_plain_time(self) -> PlainTime:
        return PlainTime._from_iso(self._iso_time)

    def to_plain_year_month(self) -> PlainYearMonth:
        return self.to_plain_date().to_plain_year_month()

    def to_plain_month_day(self) -> PlainMonthDay:
        return self.to_plain_date().to_plain_month_day()

    def to_zoned_date_time(
        self,
        time_zone: TimeZone | str,
        disambiguation: Disambiguation | str = Disambiguation.COMPATIBLE,
    ) -> ZonedDateTime:
        """Resolve this wall-clock reading to an exact time in ``time_zone``.

        Raises:
            TimezoneError: Under ``reject`` when the reading is skipped or
                repeated in the zone.
        """
        from temporalkit.core.zoned_date_time import ZonedDateTime
        from temporalkit.units.timezone import get_epoch_nanoseconds_for, get_time_zone

        zone = get_time_zone(time_zone)
        ns = get_epoch_nanoseconds_for(
            zone,
            self._iso_date,
            self._iso_time,
            coerce_option(Disambiguation, disambiguation),
        )
        return ZonedDateTime._from_epoch_nanoseconds(ns, zone, self._calendar)

    # Comparison

    @classmethod
    def compare(cls, one: PlainDateTime, two: PlainDateTime) -> int:
        return compare_iso_date_time(one._iso_date, one._iso_time, two._iso_date, two._iso_time)

    def equals(self, other: PlainDateTime) -> bool:
        if not isinstance(other, PlainDateTime):
            raise TemporalTypeError(f"expected a PlainDateTime, got {type(other).__name__}")
        return self == other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainDateTime):
            return NotImplemented
        return (
            self._iso_date == other._iso_date
            and self._iso_time == other._iso_time
            and self._calendar == other._calendar
        )

    def __hash__(self) -> int:
        return hash((self._iso_date, self._iso_time, self._calendar.id))

    def __add__(self, other: object) -> PlainDateTime:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> PlainDateTime:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.subtract(other)

    def __repr__(self) -> str:
        t = self._iso_time
        fields = [*self._iso_date, t.hour, t.minute, t.second]
        if t.millisecond or t.microsecond or t.nanosecond:
            fields += [t.millisecond, t.microsecond, t.nanosecond]
        args = ", ".join(str(value) for value in fields)
        if self._calendar.id != "iso8601":
            args += f", calendar={self._calendar.id!r}"
        return f"PlainDateTime({args})"

    def __str__(self) -> str:
        return format_iso_date_time(self._iso_date, self._iso_time) + format_calendar_annotation(
            self._calendar
        )


__all__ = ["PlainDateTime"]

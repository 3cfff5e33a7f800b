"""The ISO 8601 calendar.

The proleptic Gregorian calendar with ISO week numbering. Its fields
are the ISO fields themselves, so every method is a thin layer over
temporalkit._internal.calendar.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from temporalkit._internal import calendar as iso
from temporalkit._internal.constants import (
    DAYS_PER_WEEK,
    DEFAULT_CALENDAR_ID,
    ISO_REFERENCE_DAY,
    ISO_REFERENCE_YEAR,
    MONTHS_PER_YEAR,
)
from temporalkit.calendars.base import Calendar, iso_date_of
from temporalkit.core.fields import (
    DATE_FIELD_NAMES,
    MONTH_DAY_FIELD_NAMES,
    YEAR_MONTH_FIELD_NAMES,
    Fields,
    FieldsBuilder,
    prepare_fields,
)
from temporalkit.errors import CalendarError, TemporalTypeError
from temporalkit.units.options import Overflow, coerce_option
from temporalkit.units.unit import Unit

if TYPE_CHECKING:
    from temporalkit.core.duration import Duration
    from temporalkit.core.plain_date import PlainDate
    from temporalkit.core.plain_month_day import PlainMonthDay
    from temporalkit.core.plain_year_month import PlainYearMonth

_MONTH_CODE_PATTERN = re.compile(r"^M(\d{2})$")


def parse_month_code(month_code: str) -> int:
    """Return the month number for an ISO month code (``"M01"``..``"M12"``).

    Raises:
        CalendarError: If the code is not an ISO month code.
    """
    match = _MONTH_CODE_PATTERN.match(month_code)
    if not match or not 1 <= int(match.group(1)) <= MONTHS_PER_YEAR:
        raise CalendarError(f"invalid month code {month_code!r}")
    return int(match.group(1))


def resolve_iso_month(fields: Mapping[str, Any]) -> int:
    """Reconcile ``month`` and ``month_code`` into one month number.

    Raises:
        TemporalTypeError: If neither is present.
        CalendarError: If both are present and disagree.
    """
    month = fields.get("month")
    month_code = fields.get("month_code")
    if month_code is None:
        if month is None:
            raise TemporalTypeError("either month or month_code is required")
        return month
    from_code = parse_month_code(month_code)
    if month is not None and month != from_code:
        raise CalendarError(f"month {month} does not match month_code {month_code!r}")
    return from_code


class ISO8601Calendar(Calendar):
    """The ISO 8601 calendar, identifier ``"iso8601"``.

    Examples:
        >>> cal = ISO8601Calendar()
        >>> cal.date_from_fields({"year": 2021, "month": 2, "day": 31})
        PlainDate(2021, 2, 28)
        >>> cal.month_code(cal.date_from_fields({"year": 2021, "month_code": "M07", "day": 1}))
        'M07'
    """

    __slots__ = ()

    @property
    def id(self) -> str:
        return DEFAULT_CALENDAR_ID

    def __repr__(self) -> str:
        return "ISO8601Calendar()"

    def merge_fields(
        self, fields: Mapping[str, Any], additional_fields: Mapping[str, Any]
    ) -> Fields:
        """Overlay ``additional_fields``, treating month and month_code as one.

        When either ``month`` or ``month_code`` is supplied in the
        overrides, both are dropped from the base so a stale value cannot
        conflict with the new one.

        Examples:
            >>> dict(ISO8601Calendar().merge_fields(
            ...     {"year": 2021, "month": 1, "month_code": "M01"}, {"month": 5}
            ... ))
            {'year': 2021, 'month': 5}
        """
        overrides_month = any(
            additional_fields.get(name) is not None for name in ("month", "month_code")
        )
        builder = FieldsBuilder()
        for name, value in fields.items():
            if value is None:
                continue
            if overrides_month and name in ("month", "month_code"):
                continue
            builder.set(name, value)
        for name, value in additional_fields.items():
            if value is not None:
                builder.set(name, value)
        return builder.build()

    def date_from_fields(
        self, fields: Mapping[str, Any], overflow: Overflow | str = Overflow.CONSTRAIN
    ) -> PlainDate:
        from temporalkit.core.plain_date import PlainDate

        overflow = coerce_option(Overflow, overflow)
        fields = prepare_fields(fields, DATE_FIELD_NAMES, ("year", "day"))
        month = resolve_iso_month(fields)
        date = iso.regulate_iso_date(fields["year"], month, fields["day"], overflow)
        return PlainDate._from_iso(date, self)

    def year_month_from_fields(
        self, fields: Mapping[str, Any], overflow: Overflow | str = Overflow.CONSTRAIN
    ) -> PlainYearMonth:
        from temporalkit.core.plain_year_month import PlainYearMonth

        overflow = coerce_option(Overflow, overflow)
        fields = prepare_fields(fields, YEAR_MONTH_FIELD_NAMES, ("year",))
        month = resolve_iso_month(fields)
        year, month, _ = iso.regulate_iso_date(fields["year"], month, ISO_REFERENCE_DAY, overflow)
        return PlainYearMonth._from_iso(iso.ISODate(year, month, ISO_REFERENCE_DAY), self)

    def month_day_from_fields(
        self, fields: Mapping[str, Any], overflow: Overflow | str = Overflow.CONSTRAIN
    ) -> PlainMonthDay:
        """Build a month-day, regulated against ``year`` when one is given.

        A bare ``month`` is ambiguous without a year (is February 29
        valid?), so it requires ``year``; ``month_code`` does not, and is
        regulated against the leap reference year 1972.
        """
        from temporalkit.core.plain_month_day import PlainMonthDay

        overflow = coerce_option(Overflow, overflow)
        fields = prepare_fields(fields, MONTH_DAY_FIELD_NAMES, ("day",))
        if fields.get("month_code") is None and fields.get("year") is None:
            raise TemporalTypeError("year is required when month is given without month_code")
        month = resolve_iso_month(fields)
        year = ISO_REFERENCE_YEAR if fields.get("month_code") is not None else fields["year"]
        _, month, day = iso.regulate_iso_date(year, month, fields["day"], overflow)
        return PlainMonthDay._from_iso(iso.ISODate(ISO_REFERENCE_YEAR, month, day), self)

    def date_add(
        self,
        date: PlainDate,
        duration: Duration,
        overflow: Overflow | str = Overflow.CONSTRAIN,
    ) -> PlainDate:
        from temporalkit.arithmetic.balance import balance_time_duration
        from temporalkit.core.plain_date import PlainDate

        overflow = coerce_option(Overflow, overflow)
        balanced = balance_time_duration(
            duration.days,
            duration.hours,
            duration.minutes,
            duration.seconds,
            duration.milliseconds,
            duration.microseconds,
            duration.nanoseconds,
            Unit.DAY,
        )
        result = iso.add_iso_date(
            *iso_date_of(date),
            duration.years,
            duration.months,
            duration.weeks,
            balanced.days,
            overflow,
        )
        return PlainDate._from_iso(result, self)

    def date_until(
        self, one: PlainDate, two: PlainDate, largest_unit: Unit | str = Unit.DAY
    ) -> Duration:
        from temporalkit.core.duration import Duration

        largest_unit = Unit.from_value(largest_unit)
        if not largest_unit.is_date_unit:
            largest_unit = Unit.DAY
        years, months, weeks, days = iso.difference_iso_date(
            iso_date_of(one), iso_date_of(two), largest_unit
        )
        return Duration(years=years, months=months, weeks=weeks, days=days)

    # Accessors

    def year(self, date: Any) -> int:
        return iso_date_of(date).year

    def month(self, date: Any) -> int:
        return iso_date_of(date).month

    def month_code(self, date: Any) -> str:
        return f"M{iso_date_of(date).month:02d}"

    def day(self, date: Any) -> int:
        return iso_date_of(date).day

    def day_of_week(self, date: Any) -> int:
        return iso.day_of_week(*iso_date_of(date))

    def day_of_year(self, date: Any) -> int:
        return iso.day_of_year(*iso_date_of(date))

    def week_of_year(self, date: Any) -> int:
        return iso.iso_week(*iso_date_of(date))[0]

    def year_of_week(self, date: Any) -> int:
        return iso.iso_week(*iso_date_of(date))[1]

    def days_in_week(self, date: Any) -> int:
        return DAYS_PER_WEEK

    def days_in_month(self, date: Any) -> int:
        value = iso_date_of(date)
        return iso.days_in_month(value.year, value.month)

    def days_in_year(self, date: Any) -> int:
        return iso.days_in_year(iso_date_of(date).year)

    def months_in_year(self, date: Any) -> int:
        return MONTHS_PER_YEAR

    def in_leap_year(self, date: Any) -> bool:
        return iso.is_leap_year(iso_date_of(date).year)


__all__ = ["ISO8601Calendar", "parse_month_code", "resolve_iso_month"]

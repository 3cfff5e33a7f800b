"""ZonedDateTime class: an exact time seen in a time zone and calendar.

A ZonedDateTime stores only epoch nanoseconds, a time zone and a
calendar. Wall-clock fields are derived from the zone's offset at that
instant each time they are read.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from temporalkit._internal.calendar import (
    MIDNIGHT,
    ISODate,
    ISOTime,
    balance_iso_date,
    regulate_iso_time,
)
from temporalkit._internal.constants import (
    NANOS_PER_HOUR,
    NANOS_PER_MICROSECOND,
    NANOS_PER_MILLISECOND,
    NANOS_PER_SECOND,
)
from temporalkit._internal.validation import check_epoch_nanoseconds
from temporalkit.arithmetic.balance import (
    DurationRecord,
    balance_date_duration_relative,
    balance_duration,
    move_relative_zoned_date_time,
)
from temporalkit.arithmetic.ops import (
    add_zoned_date_time,
    difference_instant,
    difference_zoned_date_time,
)
from temporalkit.arithmetic.rounding import (
    adjust_rounded_duration_days,
    round_duration,
    round_iso_date_time,
)
from temporalkit.core.duration import Duration
from temporalkit.core.fields import (
    DATE_FIELD_NAMES,
    TIME_FIELD_NAMES,
    prepare_fields,
    prepare_partial_fields,
    reject_calendar_and_time_zone,
)
from temporalkit.core.instant import Instant
from temporalkit.core.plain_date import PlainDate
from temporalkit.core.plain_date_time import PlainDateTime
from temporalkit.core.plain_time import PlainTime
from temporalkit.errors import (
    CalendarError,
    TemporalTypeError,
    TimezoneError,
    ValidationError,
)
from temporalkit.format.iso8601 import format_calendar_annotation, format_iso_date_time
from temporalkit.units.options import (
    Disambiguation,
    OffsetOption,
    Overflow,
    RoundingMode,
    coerce_option,
    get_difference_settings,
    validate_date_time_rounding_increment,
)
from temporalkit.units.timezone import (
    TimeZone,
    epoch_nanoseconds_to_local,
    format_offset_nanoseconds,
    get_epoch_nanoseconds_for,
    get_time_zone,
    parse_offset_string,
    resolve_local_date_time,
)
from temporalkit.units.unit import Unit

if TYPE_CHECKING:
    from temporalkit.calendars.base import Calendar
    from temporalkit.core.plain_month_day import PlainMonthDay
    from temporalkit.core.plain_year_month import PlainYearMonth

logger = logging.getLogger(__name__)

_ALL_UNITS: tuple[Unit, ...] = tuple(Unit)


def _start_of_day_nanoseconds(time_zone: TimeZone, date: ISODate) -> int:
    """Return the first instant of ``date`` in ``time_zone``.

    When midnight is skipped by a transition, the day starts at the
    first wall-clock time after the gap.
    """
    return get_epoch_nanoseconds_for(time_zone, date, MIDNIGHT, Disambiguation.COMPATIBLE)


class ZonedDateTime:
    """An exact time together with the time zone and calendar it is seen in.

    Arithmetic with calendar units follows the wall clock (adding a day
    across a DST change keeps the local time), while time units are
    exact elapsed time.

    Attributes:
        epoch_nanoseconds: Nanoseconds since the Unix epoch.
        time_zone: The zone used to derive local fields.
        calendar: The calendar used to interpret the local date.

    Examples:
        >>> zdt = PlainDateTime(2021, 3, 13, 12).to_zoned_date_time("America/New_York")
        >>> str(zdt.add(Duration(days=1)))
        '2021-03-14T12:00:00-04:00[America/New_York]'
        >>> zdt.add(Duration(hours=24)).hour
        13
    """

    __slots__ = ("_epoch_nanoseconds", "_time_zone", "_calendar")

    def __init__(
        self,
        epoch_nanoseconds: int,
        time_zone: TimeZone | str,
        calendar: Calendar | str | None = None,
    ) -> None:
        """Create a ZonedDateTime.

        Raises:
            TemporalTypeError: If ``epoch_nanoseconds`` is not an integer.
            OverflowError: If it is outside the supported range.
            TimezoneError: If the time zone identifier is unknown.
            CalendarError: If the calendar identifier is unknown.
        """
        from temporalkit.calendars.registry import get_calendar

        if isinstance(epoch_nanoseconds, bool) or not isinstance(epoch_nanoseconds, int):
            raise TemporalTypeError(
                f"epoch_nanoseconds must be an integer, got {type(epoch_nanoseconds).__name__}"
            )
        self._epoch_nanoseconds = check_epoch_nanoseconds(epoch_nanoseconds)
        self._time_zone = get_time_zone(time_zone)
        self._calendar = get_calendar(calendar)

    @classmethod
    def _from_epoch_nanoseconds(
        cls, epoch_nanoseconds: int, time_zone: TimeZone, calendar: Calendar
    ) -> ZonedDateTime:
        value = object.__new__(cls)
        value._epoch_nanoseconds = check_epoch_nanoseconds(epoch_nanoseconds)
        value._time_zone = time_zone
        value._calendar = calendar
        return value

    @classmethod
    def _start_of_day(
        cls, date: ISODate, time_zone: TimeZone | str, calendar: Calendar
    ) -> ZonedDateTime:
        zone = get_time_zone(time_zone)
        return cls._from_epoch_nanoseconds(
            _start_of_day_nanoseconds(zone, date), zone, calendar
        )

    @classmethod
    def from_fields(
        cls,
        fields: Mapping[str, Any],
        time_zone: TimeZone | str | None = None,
        calendar: Calendar | str | None = None,
        *,
        overflow: Overflow | str = Overflow.CONSTRAIN,
        disambiguation: Disambiguation | str = Disambiguation.COMPATIBLE,
        offset_option: OffsetOption | str = OffsetOption.REJECT,
    ) -> ZonedDateTime:
        """Create a ZonedDateTime from local fields and a time zone.

        ``time_zone`` and ``calendar`` may also be given as keys of
        ``fields``. An ``offset`` field (such as ``"-05:00"``) is weighed
        against the zone under ``offset_option``.

        Raises:
            TemporalTypeError: If no time zone is given.
            TimezoneError: If the local time cannot be resolved under the
                chosen policies.

        Examples:
            >>> zdt = ZonedDateTime.from_fields(
            ...     {"year": 2021, "month": 11, "day": 7, "hour": 1, "minute": 30,
            ...      "offset": "-05:00", "time_zone": "America/New_York"}
            ... )
            >>> zdt.offset
            '-05:00'
        """
        from temporalkit.calendars.registry import get_calendar

        if time_zone is None:
            time_zone = fields.get("time_zone")
        if time_zone is None:
            raise TemporalTypeError("required field 'time_zone' is missing")
        if calendar is None:
            calendar = fields.get("calendar")
        zone = get_time_zone(time_zone)
        calendar = get_calendar(calendar)
        overflow = coerce_option(Overflow, overflow)

        date = calendar.date_from_fields(fields, overflow)
        prepared = prepare_fields(fields, (*TIME_FIELD_NAMES, "offset"))
        time = regulate_iso_time(*(prepared[name] for name in ISOTime._fields), overflow)
        offset = prepared.get("offset")
        offset_nanoseconds = None if offset is None else parse_offset_string(offset)

        ns = resolve_local_date_time(
            zone,
            date._iso_date,
            time,
            offset_nanoseconds=offset_nanoseconds,
            disambiguation=coerce_option(Disambiguation, disambiguation),
            offset_option=coerce_option(OffsetOption, offset_option),
        )
        return cls._from_epoch_nanoseconds(ns, zone, calendar)

    # Exact time

    @property
    def epoch_seconds(self) -> int:
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

    @property
    def time_zone(self) -> TimeZone:
        return self._time_zone

    @property
    def calendar(self) -> Calendar:
        return self._calendar

    @property
    def offset_nanoseconds(self) -> int:
        return self._time_zone._offset_nanoseconds_at(self._epoch_nanoseconds)

    @property
    def offset(self) -> str:
        """The UTC offset in effect, such as ``"-04:00"``."""
        return format_offset_nanoseconds(self.offset_nanoseconds)

    # Local fields

    @property
    def _iso_date(self) -> ISODate:
        return epoch_nanoseconds_to_local(self._time_zone, self._epoch_nanoseconds)[0]

    @property
    def _iso_time(self) -> ISOTime:
        return epoch_nanoseconds_to_local(self._time_zone, self._epoch_nanoseconds)[1]

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

    @property
    def hours_in_day(self) -> float:
        """Length of the local day in hours (23 or 25 across DST changes).

        Examples:
            >>> PlainDate(2021, 3, 14).to_zoned_date_time("America/New_York").hours_in_day
            23.0
        """
        start, end = self._day_bounds()
        return (end - start) / NANOS_PER_HOUR

    def _day_bounds(self) -> tuple[int, int]:
        date = self._iso_date
        tomorrow = balance_iso_date(date.year, date.month, date.day + 1)
        return (
            _start_of_day_nanoseconds(self._time_zone, date),
            _start_of_day_nanoseconds(self._time_zone, tomorrow),
        )

    def get_iso_fields(self) -> dict[str, Any]:
        """Return the local ISO fields plus calendar, time zone and offset."""
        date, time = epoch_nanoseconds_to_local(self._time_zone, self._epoch_nanoseconds)
        fields: dict[str, Any] = {
            "calendar": self._calendar,
            "time_zone": self._time_zone,
            "offset": self.offset,
        }
        fields.update((f"iso_{name}", value) for name, value in date._asdict().items())
        fields.update((f"iso_{name}", value) for name, value in time._asdict().items())
        return fields

    # Transformations

    def replace(
        self,
        *,
        overflow: Overflow | str = Overflow.CONSTRAIN,
        disambiguation: Disambiguation | str = Disambiguation.COMPATIBLE,
        offset_option: OffsetOption | str = OffsetOption.PREFER,
        **fields: Any,
    ) -> ZonedDateTime:
        """Return a copy with some local fields replaced.

        The current offset is kept when it is still valid for the new
        wall-clock time, so replacing a field inside a repeated hour does
        not jump to the other occurrence.

        Raises:
            TemporalTypeError: If ``calendar`` or ``time_zone`` is passed,
                or no field is given.
        """
        reject_calendar_and_time_zone(fields)
        field_names = [
            *self._calendar.fields(DATE_FIELD_NAMES), *TIME_FIELD_NAMES, "offset"
        ]
        changes = prepare_partial_fields(fields, field_names)
        merged = self._calendar.merge_fields(prepare_fields(self, field_names), changes)
        return ZonedDateTime.from_fields(
            merged,
            self._time_zone,
            self._calendar,
            overflow=overflow,
            disambiguation=disambiguation,
            offset_option=offset_option,
        )

    def with_time_zone(self, time_zone: TimeZone | str) -> ZonedDateTime:
        """Return the same instant seen in another time zone."""
        return ZonedDateTime._from_epoch_nanoseconds(
            self._epoch_nanoseconds, get_time_zone(time_zone), self._calendar
        )

    def with_calendar(self, calendar: Calendar | str) -> ZonedDateTime:
        from temporalkit.calendars.registry import get_calendar

        return ZonedDateTime._from_epoch_nanoseconds(
            self._epoch_nanoseconds, self._time_zone, get_calendar(calendar)
        )

    def with_plain_time(self, time: PlainTime | None = None) -> ZonedDateTime:
        """Return a copy at another wall-clock time on the same local date.

        Without a time this is the start of the day.
        """
        if time is None:
            return self.start_of_day()
        ns = get_epoch_nanoseconds_for(
            self._time_zone, self._iso_date, time._iso_time, Disambiguation.COMPATIBLE
        )
        return ZonedDateTime._from_epoch_nanoseconds(ns, self._time_zone, self._calendar)

    def with_plain_date(self, date: PlainDate) -> ZonedDateTime:
        """Return a copy on another local date (and its calendar), same wall-clock time."""
        ns = get_epoch_nanoseconds_for(
            self._time_zone, date._iso_date, self._iso_time, Disambiguation.COMPATIBLE
        )
        return ZonedDateTime._from_epoch_nanoseconds(ns, self._time_zone, date.calendar)

    def start_of_day(self) -> ZonedDateTime:
        """Return the first instant of the local day."""
        return ZonedDateTime._start_of_day(self._iso_date, self._time_zone, self._calendar)

    # Arithmetic

    def add(
        self,
        duration: Duration | Mapping[str, Any],
        overflow: Overflow | str = Overflow.CONSTRAIN,
    ) -> ZonedDateTime:
        """Add a duration.

        Years, months, weeks and days move the local date and keep the
        local time; hours and smaller are added as exact time.

        Raises:
            OverflowError: If the result is outside the supported range.
        """
        record = Duration.from_value(duration).to_record()
        ns = add_zoned_date_time(
            self._epoch_nanoseconds,
            self._time_zone,
            self._calendar,
            record,
            coerce_option(Overflow, overflow),
        )
        return ZonedDateTime._from_epoch_nanoseconds(ns, self._time_zone, self._calendar)

    def subtract(
        self,
        duration: Duration | Mapping[str, Any],
        overflow: Overflow | str = Overflow.CONSTRAIN,
    ) -> ZonedDateTime:
        """Subtract a duration. See ``add``."""
        return self.add(Duration.from_value(duration).negated(), overflow)

    def until(
        self,
        other: ZonedDateTime,
        *,
        largest_unit: Unit | str | None = None,
        smallest_unit: Unit | str | None = None,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.TRUNC,
    ) -> Duration:
        """Return the duration from this time to ``other``.

        With the default largest unit of hours the result is exact
        elapsed time. With days or larger the two times must share a
        time zone, and days are the zone's real local days.

        Raises:
            TimezoneError: If a date unit is requested across time zones.
            CalendarError: If the calendars differ.

        Examples:
            >>> start = PlainDate(2021, 3, 14).to_zoned_date_time("America/New_York")
            >>> start.until(start.add(Duration(days=1)))
            Duration(hours=23)
            >>> start.until(start.add(Duration(days=1)), largest_unit="day")
            Duration(days=1)
        """
        return self._difference(
            "until", other, largest_unit, smallest_unit, rounding_increment, rounding_mode
        )

    def since(
        self,
        other: ZonedDateTime,
        *,
        largest_unit: Unit | str | None = None,
        smallest_unit: Unit | str | None = None,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.TRUNC,
    ) -> Duration:
        """Return the duration from ``other`` to this time. See ``until``."""
        return self._difference(
            "since", other, largest_unit, smallest_unit, rounding_increment, rounding_mode
        )

    def _difference(
        self,
        operation: str,
        other: ZonedDateTime,
        largest_unit: Unit | str | None,
        smallest_unit: Unit | str | None,
        rounding_increment: int,
        rounding_mode: RoundingMode | str,
    ) -> Duration:
        if not isinstance(other, ZonedDateTime):
            raise TemporalTypeError(f"expected a ZonedDateTime, got {type(other).__name__}")
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
            smallest_largest_default_unit=Unit.HOUR,
        )

        if not settings.largest_unit.is_date_unit:
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

        if self._time_zone != other._time_zone:
            raise TimezoneError(
                f"cannot compute a difference in {settings.largest_unit.plural} between "
                f"time zones {self._time_zone.id!r} and {other._time_zone.id!r}"
            )
        difference = difference_zoned_date_time(
            self._epoch_nanoseconds,
            other._epoch_nanoseconds,
            self._time_zone,
            self._calendar,
            settings.largest_unit,
        )
        rounded = round_duration(
            difference,
            settings.rounding_increment,
            settings.smallest_unit,
            settings.rounding_mode,
            plain_relative_to=self.to_plain_date(),
            zoned_relative_to=self,
        ).duration
        adjusted = adjust_rounded_duration_days(
            rounded,
            settings.rounding_increment,
            settings.smallest_unit,
            settings.rounding_mode,
            self,
        )
        anchor = move_relative_zoned_date_time(
            self, adjusted.years, adjusted.months, adjusted.weeks, 0
        )
        time = balance_duration(*adjusted.time_part, settings.largest_unit, anchor)
        date = balance_date_duration_relative(
            adjusted.years,
            adjusted.months,
            adjusted.weeks,
            time.days,
            settings.largest_unit,
            self.to_plain_date(),
        )
        result = Duration._from_record(DurationRecord.combine(date, time))
        return result.negated() if operation == "since" else result

    def round(
        self,
        smallest_unit: Unit | str,
        *,
        rounding_increment: int = 1,
        rounding_mode: RoundingMode | str = RoundingMode.HALF_EXPAND,
    ) -> ZonedDateTime:
        """Round the local time, keeping the offset where it is still valid.

        Rounding to ``day`` measures the time of day against the real
        length of the local day.

        Raises:
            ValidationError: If the unit is a calendar unit, the increment
                is invalid, or the local day has zero length.

        Examples:
            >>> zdt = PlainDateTime(2021, 3, 14, 13).to_zoned_date_time("America/New_York")
            >>> zdt.round("day").day
            15
        """
        unit = Unit.from_value(smallest_unit)
        if unit.is_calendar_unit:
            raise ValidationError(f"smallest_unit {unit.value!r} is not allowed here")
        increment = validate_date_time_rounding_increment(rounding_increment, unit)
        mode = coerce_option(RoundingMode, rounding_mode)

        offset_nanoseconds = self.offset_nanoseconds
        date, time = epoch_nanoseconds_to_local(self._time_zone, self._epoch_nanoseconds)
        start, end = self._day_bounds()
        if end == start:
            raise ValidationError(
                f"day of length zero in time zone {self._time_zone.id!r}"
            )
        rounded_date, rounded_time = round_iso_date_time(
            date, time, increment, unit, mode, end - start
        )
        ns = resolve_local_date_time(
            self._time_zone,
            rounded_date,
            rounded_time,
            offset_nanoseconds=offset_nanoseconds,
            disambiguation=Disambiguation.COMPATIBLE,
            offset_option=OffsetOption.PREFER,
        )
        logger.debug(
            "Rounded %s to %s %s(s): %d -> %d",
            self, increment, unit.value, self._epoch_nanoseconds, ns,
        )
        return ZonedDateTime._from_epoch_nanoseconds(ns, self._time_zone, self._calendar)

    # Conversion

    def to_instant(self) -> Instant:
        return Instant._from_epoch_nanoseconds(self._epoch_nanoseconds)

    def to_plain_date(self) -> PlainDate:
        return PlainDate._from_iso(self._iso_date, self._calendar)

    def to_plain_time(self) -> PlainTime:
        return PlainTime._from_iso(self._iso_time)

    def to_plain_date_time(self) -> PlainDateTime:
        date, time = epoch_nanoseconds_to_local(self._time_zone, self._epoch_nanoseconds)
        return PlainDateTime._from_iso(date, time, self._calendar)

    def to_plain_year_month(self) -> PlainYearMonth:
        return self.to_plain_date().to_plain_year_month()

    def to_plain_month_day(self) -> PlainMonthDay:
        return self.to_plain_date().to_plain_month_day()

    # Comparison

    @classmethod
    def compare(cls, one: ZonedDateTime, two: ZonedDateTime) -> int:
        """Compare by exact time only; zone and calendar are ignored."""
        a, b = one._epoch_nanoseconds, two._epoch_nanoseconds
        return (a > b) - (a < b)

    def equals(self, other: ZonedDateTime) -> bool:
        """Return True if the instant, time zone and calendar all match."""
        if not isinstance(other, ZonedDateTime):
            raise TemporalTypeError(f"expected a ZonedDateTime, got {type(other).__name__}")
        return self == other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return (
            self._epoch_nanoseconds == other._epoch_nanoseconds
            and self._time_zone == other._time_zone
            and self._calendar == other._calendar
        )

    def __hash__(self) -> int:
        return hash((self._epoch_nanoseconds, self._time_zone.id, self._calendar.id))

    def __add__(self, other: object) -> ZonedDateTime:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> ZonedDateTime:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.subtract(other)

    def __repr__(self) -> str:
        args = f"{self._epoch_nanoseconds}, {self._time_zone.id!r}"
        if self._calendar.id != "iso8601":
            args += f", calendar={self._calendar.id!r}"
        return f"ZonedDateTime({args})"

    def __str__(self) -> str:
        """Return e.g. ``2021-11-07T01:30:00-05:00[America/New_York]``."""
        date, time = epoch_nanoseconds_to_local(self._time_zone, self._epoch_nanoseconds)
        return (
            format_iso_date_time(date, time)
            + self.offset
            + f"[{self._time_zone.id}]"
            + format_calendar_annotation(self._calendar)
        )


__all__ = ["ZonedDateTime"]

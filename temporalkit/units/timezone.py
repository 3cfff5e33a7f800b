"""Time zones and local date-time resolution.

This module provides the TimeZone protocol with two implementations:
    - FixedOffsetTimeZone: a constant UTC offset ("+05:30", or "UTC")
    - IanaTimeZone: a tz database zone ("America/New_York"), backed by
      the standard library's zoneinfo module

and the resolution algorithms that convert between instants and
wall-clock date-times, including disambiguation of skipped (gap) and
repeated (fold) local times.
"""

from __future__ import annotations

import datetime as _datetime
import logging
import re
import zoneinfo
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from temporalkit._internal.calendar import (
    ISODate,
    ISOTime,
    epoch_nanoseconds_to_iso_date_time,
    iso_date_time_to_epoch_nanoseconds,
)
from temporalkit._internal.constants import (
    NANOS_PER_DAY,
    NANOS_PER_HOUR,
    NANOS_PER_MICROSECOND,
    NANOS_PER_MINUTE,
    NANOS_PER_SECOND,
    SECONDS_PER_DAY,
)
from temporalkit._internal.decorators import memoize
from temporalkit._internal.validation import check_epoch_nanoseconds
from temporalkit.errors import ParseError, TemporalTypeError, TimezoneError
from temporalkit.units.options import Disambiguation, OffsetOption

if TYPE_CHECKING:
    from temporalkit.calendars.base import Calendar
    from temporalkit.core.instant import Instant
    from temporalkit.core.plain_date_time import PlainDateTime

logger = logging.getLogger(__name__)

_OFFSET_PATTERN = re.compile(
    r"^([+-])(\d{1,2})(?::?(\d{2})(?::?(\d{2})(?:[.,](\d{1,9}))?)?)?$"
)


def parse_offset_string(s: str) -> int:
    """Parse a UTC offset string into signed nanoseconds.

    Supported formats: ``+HH``, ``+HHMM``, ``+HH:MM``, ``+HH:MM:SS`` and
    ``+HH:MM:SS.fffffffff`` (with either sign).

    Raises:
        ParseError: If the string is malformed or a field is out of range.

    Examples:
        >>> parse_offset_string("+05:30")
        19800000000000
        >>> parse_offset_string("-0800")
        -28800000000000
    """
    if not isinstance(s, str):
        raise TemporalTypeError(f"offset must be a string, got {type(s).__name__}")
    match = _OFFSET_PATTERN.match(s.strip())
    if not match:
        raise ParseError(f"Cannot parse UTC offset: {s!r}")

    sign_str, hours_str, minutes_str, seconds_str, fraction_str = match.groups()
    hours = int(hours_str)
    minutes = int(minutes_str) if minutes_str else 0
    seconds = int(seconds_str) if seconds_str else 0
    fraction = int(fraction_str.ljust(9, "0")) if fraction_str else 0

    if hours > 23:
        raise ParseError(f"Offset hours out of range: {s!r}")
    if minutes > 59 or seconds > 59:
        raise ParseError(f"Offset minutes or seconds out of range: {s!r}")

    sign = 1 if sign_str == "+" else -1
    return sign * (
        hours * NANOS_PER_HOUR
        + minutes * NANOS_PER_MINUTE
        + seconds * NANOS_PER_SECOND
        + fraction
    )


def format_offset_nanoseconds(offset_nanoseconds: int) -> str:
    """Format an offset as ``+HH:MM``, adding seconds and fraction if nonzero.

    Examples:
        >>> format_offset_nanoseconds(-18000000000000)
        '-05:00'
        >>> format_offset_nanoseconds(1_000_000_000)
        '+00:00:01'
    """
    sign = "-" if offset_nanoseconds < 0 else "+"
    hours, rem = divmod(abs(offset_nanoseconds), NANOS_PER_HOUR)
    minutes, rem = divmod(rem, NANOS_PER_MINUTE)
    seconds, fraction = divmod(rem, NANOS_PER_SECOND)
    result = f"{sign}{hours:02d}:{minutes:02d}"
    if seconds or fraction:
        result += f":{seconds:02d}"
        if fraction:
            result += "." + f"{fraction:09d}".rstrip("0")
    return result


class TimeZone(ABC):
    """The capability interface every time zone implements.

    A time zone maps instants to UTC offsets and wall-clock date-times
    back to the instants that display them. Subclasses implement
    ``id``, ``get_offset_nanoseconds_for`` and
    ``get_possible_instants_for``; everything else is derived.

    Two time zones are equal when their identifiers are equal, so
    ``"UTC"`` and ``"+00:00"`` are different zones even though their
    offsets coincide.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def id(self) -> str:
        """The zone identifier."""

    @abstractmethod
    def get_offset_nanoseconds_for(self, instant: Instant) -> int:
        """Return the UTC offset in effect at ``instant``, in nanoseconds."""

    @abstractmethod
    def get_possible_instants_for(self, date_time: PlainDateTime) -> list[Instant]:
        """Return every instant showing ``date_time`` on the wall clock.

        The list is ordered earliest first and has zero entries in a
        gap, one normally, and two in a fold.
        """

    # Derived operations

    def get_offset_string_for(self, instant: Instant) -> str:
        """Return the offset at ``instant`` formatted as ``+HH:MM``."""
        return format_offset_nanoseconds(self._offset_nanoseconds_at(instant.epoch_nanoseconds))

    def get_plain_date_time_for(
        self, instant: Instant, calendar: Calendar | str = "iso8601"
    ) -> PlainDateTime:
        """Return the wall-clock date-time this zone shows at ``instant``."""
        from temporalkit.calendars.registry import get_calendar
        from temporalkit.core.plain_date_time import PlainDateTime

        date, time = epoch_nanoseconds_to_local(self, instant.epoch_nanoseconds)
        return PlainDateTime._from_iso(date, time, get_calendar(calendar))

    def get_instant_for(
        self,
        date_time: PlainDateTime,
        disambiguation: Disambiguation | str = Disambiguation.COMPATIBLE,
    ) -> Instant:
        """Resolve a wall-clock date-time to a single instant.

        Raises:
            TimezoneError: Under REJECT when the local time is skipped or
                repeated.
        """
        from temporalkit.core.instant import Instant
        from temporalkit.units.options import coerce_option

        ns = get_epoch_nanoseconds_for(
            self,
            date_time._iso_date,
            date_time._iso_time,
            coerce_option(Disambiguation, disambiguation),
        )
        return Instant._from_epoch_nanoseconds(ns)

    # Integer-level hooks used by the arithmetic. The built-in zones
    # override these to avoid wrapping every value in an Instant.

    def _offset_nanoseconds_at(self, epoch_nanoseconds: int) -> int:
        from temporalkit.core.instant import Instant

        offset = self.get_offset_nanoseconds_for(
            Instant._from_epoch_nanoseconds(epoch_nanoseconds)
        )
        if isinstance(offset, bool) or not isinstance(offset, int):
            raise TemporalTypeError(
                f"offset from {self.id!r} must be an integer, got {offset!r}"
            )
        if abs(offset) >= NANOS_PER_DAY:
            raise TimezoneError(f"offset {offset} ns from {self.id!r} exceeds one day")
        return offset

    def _possible_epoch_nanoseconds(self, date: ISODate, time: ISOTime) -> list[int]:
        from temporalkit.calendars.registry import get_calendar
        from temporalkit.core.plain_date_time import PlainDateTime

        date_time = PlainDateTime._from_iso(date, time, get_calendar("iso8601"))
        return sorted(
            instant.epoch_nanoseconds
            for instant in self.get_possible_instants_for(date_time)
        )

    def _instants(self, values: list[int]) -> list[Instant]:
        from temporalkit.core.instant import Instant

        return [Instant._from_epoch_nanoseconds(ns) for ns in values]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeZone):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r})"

    def __str__(self) -> str:
        return self.id


class FixedOffsetTimeZone(TimeZone):
    """A time zone with a constant UTC offset.

    The offset is stored in nanoseconds from UTC, with positive values
    east of UTC. The identifier is the formatted offset (``"+05:30"``)
    unless a name is given; the UTC singleton is named ``"UTC"``.

    Attributes:
        offset_nanoseconds: The UTC offset in nanoseconds.

    Examples:
        >>> FixedOffsetTimeZone.utc().id
        'UTC'
        >>> FixedOffsetTimeZone.from_hours(5, 30).id
        '+05:30'
        >>> FixedOffsetTimeZone.from_string("-0800").offset_nanoseconds
        -28800000000000
    """

    __slots__ = ("_offset_nanoseconds", "_name")

    # UTC singleton instance (lazily initialized)
    _utc_instance: ClassVar[FixedOffsetTimeZone | None] = None

    def __init__(self, offset_nanoseconds: int, name: str | None = None) -> None:
        """Create a zone with the given offset.

        Raises:
            TemporalTypeError: If the offset is not an integer.
            TimezoneError: If |offset| is a day or more.
        """
        if isinstance(offset_nanoseconds, bool) or not isinstance(offset_nanoseconds, int):
            raise TemporalTypeError(
                f"offset_nanoseconds must be an integer, got {type(offset_nanoseconds).__name__}"
            )
        if abs(offset_nanoseconds) >= NANOS_PER_DAY:
            raise TimezoneError(
                f"offset_nanoseconds {offset_nanoseconds} must be less than one day"
            )
        self._offset_nanoseconds = offset_nanoseconds
        self._name = name

    @classmethod
    def utc(cls) -> FixedOffsetTimeZone:
        """Return the UTC zone. All calls return the same instance."""
        if cls._utc_instance is None:
            cls._utc_instance = cls(0, "UTC")
        return cls._utc_instance

    @classmethod
    def from_hours(cls, hours: int, minutes: int = 0) -> FixedOffsetTimeZone:
        """Create a zone from an hour offset and non-negative minutes.

        The sign of ``hours`` applies to the minutes as well.

        Examples:
            >>> FixedOffsetTimeZone.from_hours(-3, 30).id
            '-03:30'
        """
        if minutes < 0 or minutes > 59:
            raise TimezoneError(f"minutes must be 0-59, got {minutes}")
        total = abs(hours) * NANOS_PER_HOUR + minutes * NANOS_PER_MINUTE
        return cls(-total if hours < 0 else total)

    @classmethod
    def from_string(cls, s: str) -> FixedOffsetTimeZone:
        """Parse ``"UTC"`` or an offset string such as ``"+05:30"``.

        Raises:
            ParseError: If the string cannot be parsed.
        """
        if isinstance(s, str) and s.strip().upper() == "UTC":
            return cls.utc()
        return cls(parse_offset_string(s))

    @property
    def offset_nanoseconds(self) -> int:
        return self._offset_nanoseconds

    @property
    def id(self) -> str:
        if self._name:
            return self._name
        return format_offset_nanoseconds(self._offset_nanoseconds)

    def get_offset_nanoseconds_for(self, instant: Instant) -> int:
        return self._offset_nanoseconds

    def get_possible_instants_for(self, date_time: PlainDateTime) -> list[Instant]:
        return self._instants(
            self._possible_epoch_nanoseconds(date_time._iso_date, date_time._iso_time)
        )

    def _offset_nanoseconds_at(self, epoch_nanoseconds: int) -> int:
        return self._offset_nanoseconds

    def _possible_epoch_nanoseconds(self, date: ISODate, time: ISOTime) -> list[int]:
        ns = iso_date_time_to_epoch_nanoseconds(date, time) - self._offset_nanoseconds
        return [check_epoch_nanoseconds(ns)]


# zoneinfo works on datetime, which only spans years 1..9999. Instants
# outside that window use the offset in effect at its edge.
_UTC_EPOCH = _datetime.datetime(1970, 1, 1, tzinfo=_datetime.timezone.utc)
_NAIVE_EPOCH = _datetime.datetime(1970, 1, 1)
_MIN_SECONDS = int((_datetime.datetime(1, 1, 2) - _NAIVE_EPOCH).total_seconds())
_MAX_SECONDS = int((_datetime.datetime(9999, 12, 30) - _NAIVE_EPOCH).total_seconds())


def _clamped_seconds(epoch_nanoseconds: int) -> int:
    seconds = epoch_nanoseconds // NANOS_PER_SECOND
    return min(max(seconds, _MIN_SECONDS), _MAX_SECONDS)


def _timedelta_to_nanoseconds(delta: _datetime.timedelta) -> int:
    return (
        (delta.days * SECONDS_PER_DAY + delta.seconds) * NANOS_PER_SECOND
        + delta.microseconds * NANOS_PER_MICROSECOND
    )


class IanaTimeZone(TimeZone):
    """A tz database zone such as ``"America/New_York"``.

    Offsets come from :class:`zoneinfo.ZoneInfo`, which reads the system
    tz database or, where the system has none, the ``tzdata`` package.

    Raises:
        TimezoneError: If the identifier names no known zone.
    """

    __slots__ = ("_zone",)

    def __init__(self, key: str) -> None:
        try:
            self._zone = zoneinfo.ZoneInfo(key)
        except (zoneinfo.ZoneInfoNotFoundError, ValueError, OSError) as exc:
            raise TimezoneError(f"Unknown time zone: {key!r}") from exc

    @property
    def id(self) -> str:
        return self._zone.key

    def get_offset_nanoseconds_for(self, instant: Instant) -> int:
        return self._offset_nanoseconds_at(instant.epoch_nanoseconds)

    def get_possible_instants_for(self, date_time: PlainDateTime) -> list[Instant]:
        return self._instants(
            self._possible_epoch_nanoseconds(date_time._iso_date, date_time._iso_time)
        )

    def _utc_offset(self, moment: _datetime.datetime) -> int:
        offset = moment.utcoffset()
        if offset is None:
            raise TimezoneError(f"time zone {self.id!r} gave no UTC offset for {moment}")
        return _timedelta_to_nanoseconds(offset)

    def _offset_nanoseconds_at(self, epoch_nanoseconds: int) -> int:
        moment = _UTC_EPOCH + _datetime.timedelta(seconds=_clamped_seconds(epoch_nanoseconds))
        return self._utc_offset(moment.astimezone(self._zone))

    def _possible_epoch_nanoseconds(self, date: ISODate, time: ISOTime) -> list[int]:
        local_ns = iso_date_time_to_epoch_nanoseconds(date, time)
        wall = _NAIVE_EPOCH + _datetime.timedelta(seconds=_clamped_seconds(local_ns))

        candidates = set()
        for fold in (0, 1):
            offset_ns = self._utc_offset(wall.replace(tzinfo=self._zone, fold=fold))
            candidate = local_ns - offset_ns
            if self._offset_nanoseconds_at(candidate) == offset_ns:
                candidates.add(candidate)
        return [check_epoch_nanoseconds(ns) for ns in sorted(candidates)]


@memoize
def _time_zone_from_id(identifier: str) -> TimeZone:
    logger.debug("Resolving time zone identifier %r", identifier)
    if identifier.upper() == "UTC":
        return FixedOffsetTimeZone.utc()
    if identifier[:1] in ("+", "-"):
        return FixedOffsetTimeZone(parse_offset_string(identifier))
    return IanaTimeZone(identifier)


def get_time_zone(value: TimeZone | str) -> TimeZone:
    """Return the time zone for an identifier, or ``value`` itself.

    Identifiers are ``"UTC"``, an offset string, or an IANA name.
    Lookups are cached.

    Raises:
        TemporalTypeError: If value is neither a TimeZone nor a string.
        TimezoneError: If the identifier is unknown.

    Examples:
        >>> get_time_zone("+01:00").id
        '+01:00'
        >>> get_time_zone("utc") is FixedOffsetTimeZone.utc()
        True
    """
    if isinstance(value, TimeZone):
        return value
    if not isinstance(value, str):
        raise TemporalTypeError(
            f"time zone must be a TimeZone or an identifier, got {type(value).__name__}"
        )
    return _time_zone_from_id(value)


# Instant <-> wall-clock resolution


def epoch_nanoseconds_to_local(
    time_zone: TimeZone, epoch_nanoseconds: int
) -> tuple[ISODate, ISOTime]:
    """Return the wall-clock fields ``time_zone`` shows at an instant."""
    offset = time_zone._offset_nanoseconds_at(epoch_nanoseconds)
    return epoch_nanoseconds_to_iso_date_time(epoch_nanoseconds + offset)


def disambiguate_possible_instants(
    possible: list[int],
    time_zone: TimeZone,
    date: ISODate,
    time: ISOTime,
    disambiguation: Disambiguation,
) -> int:
    """Pick one instant for a wall-clock time.

    With one candidate it is returned whatever the policy. In a fold
    (two candidates) EARLIER takes the first, LATER and COMPATIBLE the
    second. In a gap (no candidates) the local time is moved by the
    width of the gap, measured as the difference between the offsets a
    day after and a day before: EARLIER moves it back and takes the
    first result, LATER and COMPATIBLE move it forward and take the last.

    Raises:
        TimezoneError: Under REJECT for a gap or a fold.
    """
    if len(possible) == 1:
        return possible[0]

    if possible:
        logger.debug(
            "%s is repeated in %s, resolving with %s",
            _format_local(date, time), time_zone.id, disambiguation.value,
        )
        if disambiguation is Disambiguation.EARLIER:
            return possible[0]
        if disambiguation in (Disambiguation.LATER, Disambiguation.COMPATIBLE):
            return possible[-1]
        raise TimezoneError(
            f"{_format_local(date, time)} is ambiguous in time zone {time_zone.id!r}"
        )

    if disambiguation is Disambiguation.REJECT:
        raise TimezoneError(
            f"{_format_local(date, time)} does not exist in time zone {time_zone.id!r}"
        )

    local_ns = iso_date_time_to_epoch_nanoseconds(date, time)
    day_before = check_epoch_nanoseconds(local_ns - NANOS_PER_DAY)
    day_after = check_epoch_nanoseconds(local_ns + NANOS_PER_DAY)
    gap = time_zone._offset_nanoseconds_at(day_after) - time_zone._offset_nanoseconds_at(
        day_before
    )
    logger.debug(
        "%s is skipped in %s (gap of %d ns), resolving with %s",
        _format_local(date, time), time_zone.id, gap, disambiguation.value,
    )

    if disambiguation is Disambiguation.EARLIER:
        shifted = time_zone._possible_epoch_nanoseconds(
            *epoch_nanoseconds_to_iso_date_time(local_ns - gap)
        )
        if shifted:
            return shifted[0]
    else:
        shifted = time_zone._possible_epoch_nanoseconds(
            *epoch_nanoseconds_to_iso_date_time(local_ns + gap)
        )
        if shifted:
            return shifted[-1]
    raise TimezoneError(
        f"cannot resolve {_format_local(date, time)} in time zone {time_zone.id!r}"
    )


def get_epoch_nanoseconds_for(
    time_zone: TimeZone,
    date: ISODate,
    time: ISOTime,
    disambiguation: Disambiguation,
) -> int:
    """Resolve wall-clock fields to epoch nanoseconds under a policy."""
    possible = time_zone._possible_epoch_nanoseconds(date, time)
    return disambiguate_possible_instants(possible, time_zone, date, time, disambiguation)


def resolve_local_date_time(
    time_zone: TimeZone,
    date: ISODate,
    time: ISOTime,
    *,
    offset_nanoseconds: int | None,
    disambiguation: Disambiguation,
    offset_option: OffsetOption,
) -> int:
    """Resolve wall-clock fields plus an optional explicit offset.

    Args:
        time_zone: The zone to resolve in.
        date: Local date.
        time: Local time.
        offset_nanoseconds: Offset supplied alongside the fields, or None
            to resolve by wall-clock time alone.
        disambiguation: Policy used when the offset does not decide.
        offset_option: USE trusts the offset outright, IGNORE drops it,
            PREFER picks the candidate whose offset matches (falling back
            to ``disambiguation``), REJECT raises when none matches.

    Returns:
        The resolved epoch nanoseconds.

    Raises:
        TimezoneError: Under offset REJECT when no candidate matches, or
            when disambiguation rejects the local time.
    """
    if offset_nanoseconds is None or offset_option is OffsetOption.IGNORE:
        return get_epoch_nanoseconds_for(time_zone, date, time, disambiguation)

    if offset_option is OffsetOption.USE:
        return check_epoch_nanoseconds(
            iso_date_time_to_epoch_nanoseconds(date, time) - offset_nanoseconds
        )

    possible = time_zone._possible_epoch_nanoseconds(date, time)
    for candidate in possible:
        if time_zone._offset_nanoseconds_at(candidate) == offset_nanoseconds:
            return candidate

    if offset_option is OffsetOption.REJECT:
        raise TimezoneError(
            f"offset {format_offset_nanoseconds(offset_nanoseconds)} is not valid for "
            f"{_format_local(date, time)} in time zone {time_zone.id!r}"
        )
    return disambiguate_possible_instants(possible, time_zone, date, time, disambiguation)


def _format_local(date: ISODate, time: ISOTime) -> str:
    return (
        f"{date.year:04d}-{date.month:02d}-{date.day:02d}"
        f"T{time.hour:02d}:{time.minute:02d}:{time.second:02d}"
    )


__all__ = [
    "TimeZone",
    "FixedOffsetTimeZone",
    "IanaTimeZone",
    "get_time_zone",
    "parse_offset_string",
    "format_offset_nanoseconds",
    "epoch_nanoseconds_to_local",
    "disambiguate_possible_instants",
    "get_epoch_nanoseconds_for",
    "resolve_local_date_time",
]

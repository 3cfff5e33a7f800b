"""Tests for time zones and wall-clock resolution.

America/New_York is used for the DST cases: clocks skip from 02:00 to
03:00 on 2021-03-14 and repeat 01:00-02:00 on 2021-11-07.
"""

from __future__ import annotations

import datetime

import pytest

from temporalkit._internal.calendar import ISODate, ISOTime
from temporalkit._internal.constants import NANOS_PER_HOUR
from temporalkit.errors import ParseError, TemporalTypeError, TimezoneError
from temporalkit.units.options import Disambiguation, OffsetOption
from temporalkit.units.timezone import (
    FixedOffsetTimeZone,
    IanaTimeZone,
    epoch_nanoseconds_to_local,
    format_offset_nanoseconds,
    get_epoch_nanoseconds_for,
    get_time_zone,
    parse_offset_string,
    resolve_local_date_time,
)

# 2021-03-14T07:00:00Z, the moment New York springs forward
SPRING_FORWARD = 1_615_705_200 * 1_000_000_000
# 2021-11-07T06:00:00Z, the moment New York falls back
FALL_BACK = 1_636_264_800 * 1_000_000_000


class TestParseOffset:
    """Tests for parse_offset_string and format_offset_nanoseconds."""

    def test_hours_minutes(self) -> None:
        """+HH:MM parses to nanoseconds."""
        assert parse_offset_string("+05:30") == 5 * NANOS_PER_HOUR + 30 * 60 * 10**9

    def test_compact_negative(self) -> None:
        """-HHMM parses with a negative sign."""
        assert parse_offset_string("-0800") == -8 * NANOS_PER_HOUR

    def test_hours_only(self) -> None:
        """+HH parses."""
        assert parse_offset_string("+01") == NANOS_PER_HOUR

    def test_seconds_and_fraction(self) -> None:
        """Seconds and a fraction are accepted."""
        assert parse_offset_string("+00:00:01.5") == 1_500_000_000

    def test_malformed(self) -> None:
        """Malformed strings raise ParseError."""
        with pytest.raises(ParseError, match="Cannot parse UTC offset"):
            parse_offset_string("+5:3")

    def test_hours_out_of_range(self) -> None:
        """Hours above 23 raise ParseError."""
        with pytest.raises(ParseError, match="hours out of range"):
            parse_offset_string("+25:00")

    def test_not_a_string(self) -> None:
        """Non-strings raise TemporalTypeError."""
        with pytest.raises(TemporalTypeError):
            parse_offset_string(5)  # type: ignore[arg-type]

    def test_format(self) -> None:
        """Offsets format as +HH:MM with seconds only when present."""
        assert format_offset_nanoseconds(-5 * NANOS_PER_HOUR) == "-05:00"
        assert format_offset_nanoseconds(0) == "+00:00"
        assert format_offset_nanoseconds(1_000_000_000) == "+00:00:01"


class TestFixedOffsetTimeZone:
    """Tests for FixedOffsetTimeZone."""

    def test_utc_singleton(self) -> None:
        """utc() always returns the same instance."""
        assert FixedOffsetTimeZone.utc() is FixedOffsetTimeZone.utc()
        assert FixedOffsetTimeZone.utc().id == "UTC"

    def test_from_hours(self) -> None:
        """from_hours applies the sign to the minutes."""
        tz = FixedOffsetTimeZone.from_hours(-3, 30)
        assert tz.id == "-03:30"
        assert tz.offset_nanoseconds == -(3 * NANOS_PER_HOUR + 30 * 60 * 10**9)

    def test_offset_of_a_day_rejected(self) -> None:
        """Offsets of a full day or more are rejected."""
        with pytest.raises(TimezoneError):
            FixedOffsetTimeZone(24 * NANOS_PER_HOUR)

    def test_single_candidate(self) -> None:
        """Every wall-clock time has exactly one instant."""
        tz = FixedOffsetTimeZone.from_hours(2)
        assert tz._possible_epoch_nanoseconds(ISODate(1970, 1, 1), ISOTime(2)) == [0]

    def test_utc_differs_from_zero_offset(self) -> None:
        """'UTC' and '+00:00' are different zones."""
        assert FixedOffsetTimeZone.utc() != FixedOffsetTimeZone(0)


class TestGetTimeZone:
    """Tests for get_time_zone."""

    def test_utc_identifier(self) -> None:
        """'utc' in any case is the UTC singleton."""
        assert get_time_zone("utc") is FixedOffsetTimeZone.utc()

    def test_offset_identifier(self) -> None:
        """Offset strings give fixed-offset zones."""
        tz = get_time_zone("+01:00")
        assert isinstance(tz, FixedOffsetTimeZone)
        assert tz.id == "+01:00"

    def test_iana_identifier(self) -> None:
        """IANA names give IanaTimeZone."""
        tz = get_time_zone("America/New_York")
        assert isinstance(tz, IanaTimeZone)
        assert tz.id == "America/New_York"

    def test_passthrough(self) -> None:
        """A TimeZone is returned unchanged."""
        tz = FixedOffsetTimeZone.from_hours(3)
        assert get_time_zone(tz) is tz

    def test_unknown(self) -> None:
        """Unknown names raise TimezoneError."""
        with pytest.raises(TimezoneError, match="Unknown time zone"):
            get_time_zone("Mars/Olympus_Mons")

    def test_wrong_type(self) -> None:
        """Non-strings raise TemporalTypeError."""
        with pytest.raises(TemporalTypeError):
            get_time_zone(42)  # type: ignore[arg-type]


class TestIanaOffsets:
    """Tests for offsets and local fields from the tz database."""

    def test_offset_before_and_after_spring_forward(self, new_york) -> None:
        """The offset changes from -05:00 to -04:00 at the transition."""
        assert new_york._offset_nanoseconds_at(SPRING_FORWARD - 1) == -5 * NANOS_PER_HOUR
        assert new_york._offset_nanoseconds_at(SPRING_FORWARD) == -4 * NANOS_PER_HOUR

    def test_local_fields_at_transition(self, new_york) -> None:
        """The transition instant shows 03:00 local time."""
        date, time = epoch_nanoseconds_to_local(new_york, SPRING_FORWARD)
        assert date == ISODate(2021, 3, 14)
        assert time == ISOTime(3)

    def test_gap_has_no_candidates(self, new_york) -> None:
        """02:30 on the spring-forward day does not exist."""
        assert new_york._possible_epoch_nanoseconds(ISODate(2021, 3, 14), ISOTime(2, 30)) == []

    def test_fold_has_two_candidates(self, new_york) -> None:
        """01:30 on the fall-back day happens twice, an hour apart."""
        candidates = new_york._possible_epoch_nanoseconds(ISODate(2021, 11, 7), ISOTime(1, 30))
        assert len(candidates) == 2
        assert candidates[1] - candidates[0] == NANOS_PER_HOUR
        assert candidates[0] == FALL_BACK - NANOS_PER_HOUR // 2

    def test_missing_utc_offset(self) -> None:
        """A tzinfo that reports no offset raises TimezoneError."""

        class NoOffset(datetime.tzinfo):
            key = "Test/NoOffset"

            def utcoffset(self, dt):
                return None

            def dst(self, dt):
                return None

            def fromutc(self, dt):
                return dt

        zone = object.__new__(IanaTimeZone)
        zone._zone = NoOffset()
        with pytest.raises(TimezoneError, match="no UTC offset"):
            zone._offset_nanoseconds_at(0)
        with pytest.raises(TimezoneError, match="no UTC offset"):
            zone._possible_epoch_nanoseconds(ISODate(2021, 1, 1), ISOTime(12))


class TestDisambiguation:
    """Tests for resolving skipped and repeated wall-clock times."""

    GAP = (ISODate(2021, 3, 14), ISOTime(2, 30))
    FOLD = (ISODate(2021, 11, 7), ISOTime(1, 30))

    def local(self, tz, ns: int) -> tuple[ISODate, ISOTime]:
        return epoch_nanoseconds_to_local(tz, ns)

    def test_gap_compatible_moves_forward(self, new_york) -> None:
        """compatible resolves 02:30 to 03:30 EDT."""
        ns = get_epoch_nanoseconds_for(new_york, *self.GAP, Disambiguation.COMPATIBLE)
        assert self.local(new_york, ns) == (ISODate(2021, 3, 14), ISOTime(3, 30))

    def test_gap_later_moves_forward(self, new_york) -> None:
        """later resolves 02:30 to 03:30 EDT."""
        ns = get_epoch_nanoseconds_for(new_york, *self.GAP, Disambiguation.LATER)
        assert self.local(new_york, ns) == (ISODate(2021, 3, 14), ISOTime(3, 30))

    def test_gap_earlier_moves_back(self, new_york) -> None:
        """earlier resolves 02:30 to 01:30 EST."""
        ns = get_epoch_nanoseconds_for(new_york, *self.GAP, Disambiguation.EARLIER)
        assert self.local(new_york, ns) == (ISODate(2021, 3, 14), ISOTime(1, 30))

    def test_gap_reject(self, new_york) -> None:
        """reject raises in a gap."""
        with pytest.raises(TimezoneError, match="does not exist"):
            get_epoch_nanoseconds_for(new_york, *self.GAP, Disambiguation.REJECT)

    def test_fold_earlier(self, new_york) -> None:
        """earlier picks the first (EDT) occurrence."""
        ns = get_epoch_nanoseconds_for(new_york, *self.FOLD, Disambiguation.EARLIER)
        assert ns == FALL_BACK - NANOS_PER_HOUR // 2

    def test_fold_compatible_and_later(self, new_york) -> None:
        """compatible and later pick the second (EST) occurrence."""
        for policy in (Disambiguation.COMPATIBLE, Disambiguation.LATER):
            ns = get_epoch_nanoseconds_for(new_york, *self.FOLD, policy)
            assert ns == FALL_BACK + NANOS_PER_HOUR // 2

    def test_fold_reject(self, new_york) -> None:
        """reject raises in a fold."""
        with pytest.raises(TimezoneError, match="is ambiguous"):
            get_epoch_nanoseconds_for(new_york, *self.FOLD, Disambiguation.REJECT)


class TestOffsetResolution:
    """Tests for resolve_local_date_time with an explicit offset."""

    FOLD = (ISODate(2021, 11, 7), ISOTime(1, 30))

    def resolve(self, tz, offset_hours, disambiguation, offset_option) -> int:
        return resolve_local_date_time(
            tz,
            *self.FOLD,
            offset_nanoseconds=None if offset_hours is None else offset_hours * NANOS_PER_HOUR,
            disambiguation=disambiguation,
            offset_option=offset_option,
        )

    def test_prefer_picks_matching_occurrence(self, new_york) -> None:
        """prefer uses the offset to choose within a fold."""
        ns = self.resolve(new_york, -4, Disambiguation.LATER, OffsetOption.PREFER)
        assert ns == FALL_BACK - NANOS_PER_HOUR // 2

    def test_prefer_falls_back_to_disambiguation(self, new_york) -> None:
        """prefer with a non-matching offset uses the disambiguation policy."""
        ns = self.resolve(new_york, -7, Disambiguation.EARLIER, OffsetOption.PREFER)
        assert ns == FALL_BACK - NANOS_PER_HOUR // 2

    def test_use_trusts_offset(self, new_york) -> None:
        """use computes the instant from the offset alone."""
        ns = self.resolve(new_york, -7, Disambiguation.COMPATIBLE, OffsetOption.USE)
        assert ns == FALL_BACK + NANOS_PER_HOUR * 5 // 2

    def test_ignore_drops_offset(self, new_york) -> None:
        """ignore resolves by wall-clock time only."""
        ns = self.resolve(new_york, -4, Disambiguation.LATER, OffsetOption.IGNORE)
        assert ns == FALL_BACK + NANOS_PER_HOUR // 2

    def test_reject_mismatch(self, new_york) -> None:
        """reject raises when no occurrence has the offset."""
        with pytest.raises(TimezoneError, match="is not valid for"):
            self.resolve(new_york, -7, Disambiguation.COMPATIBLE, OffsetOption.REJECT)

    def test_no_offset(self, new_york) -> None:
        """Without an offset the disambiguation policy decides."""
        ns = self.resolve(new_york, None, Disambiguation.EARLIER, OffsetOption.REJECT)
        assert ns == FALL_BACK - NANOS_PER_HOUR // 2

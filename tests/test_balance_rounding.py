"""Tests for duration balancing and rounding helpers."""

from __future__ import annotations

from fractions import Fraction

import pytest

from temporalkit import Instant, PlainDate, TimeZone, ZonedDateTime
from temporalkit._internal.calendar import MIDNIGHT, ISOTime, iso_date_time_to_epoch_nanoseconds
from temporalkit._internal.constants import NANOS_PER_DAY, NANOS_PER_HOUR
from temporalkit.arithmetic.balance import (
    DateDurationRecord,
    DurationRecord,
    add_duration,
    balance_date_duration_relative,
    balance_duration,
    balance_time_duration,
    default_largest_unit,
    duration_sign,
    is_valid_duration,
    nanoseconds_to_days,
    unbalance_duration_relative,
)
from temporalkit.arithmetic.rounding import (
    adjust_rounded_duration_days,
    round_duration,
    round_number_to_increment,
    round_temporal_instant,
    round_time,
)
from temporalkit.errors import ValidationError
from temporalkit.units.options import RoundingMode
from temporalkit.units.unit import Unit


@pytest.fixture
def short_day():
    """Midnight on 2021-03-14 in New York, a 23-hour day."""
    return PlainDate(2021, 3, 14).to_zoned_date_time("America/New_York")


class ShortDaysTimeZone(TimeZone):
    """Jumps from +00:00 to +12:00 six hours after the epoch and back 24 hours later.

    Seen from midnight on 1970-01-01 the first day lasts 12 hours and the
    second 36.
    """

    JUMP = 6 * NANOS_PER_HOUR
    RETURN = 30 * NANOS_PER_HOUR

    @property
    def id(self) -> str:
        return "Test/ShortDays"

    def get_offset_nanoseconds_for(self, instant: Instant) -> int:
        if self.JUMP <= instant.epoch_nanoseconds < self.RETURN:
            return 12 * NANOS_PER_HOUR
        return 0

    def get_possible_instants_for(self, date_time) -> list[Instant]:
        local_ns = iso_date_time_to_epoch_nanoseconds(date_time._iso_date, date_time._iso_time)
        return [
            Instant(local_ns - offset)
            for offset in (12 * NANOS_PER_HOUR, 0)
            if self.get_offset_nanoseconds_for(Instant(local_ns - offset)) == offset
        ]


class SkewedTimeZone(TimeZone):
    """Always +00:00, but resolves wall-clock times on 1970-01-02 two hours early."""

    @property
    def id(self) -> str:
        return "Test/Skewed"

    def get_offset_nanoseconds_for(self, instant: Instant) -> int:
        return 0

    def get_possible_instants_for(self, date_time) -> list[Instant]:
        local_ns = iso_date_time_to_epoch_nanoseconds(date_time._iso_date, date_time._iso_time)
        if (date_time.year, date_time.month, date_time.day) == (1970, 1, 2):
            local_ns -= 2 * NANOS_PER_HOUR
        return [Instant(local_ns)]


class TestRoundNumberToIncrement:
    """Tests for round_number_to_increment."""

    @pytest.mark.parametrize(
        "value,increment,mode,expected",
        [
            (Fraction(5, 2), 1, RoundingMode.HALF_EVEN, 2),
            (Fraction(7, 2), 1, RoundingMode.HALF_EVEN, 4),
            (-7, 5, RoundingMode.CEIL, -5),
            (-7, 5, RoundingMode.FLOOR, -10),
            (-7, 5, RoundingMode.EXPAND, -10),
            (-7, 5, RoundingMode.TRUNC, -5),
            (Fraction(-5, 2), 1, RoundingMode.HALF_CEIL, -2),
            (Fraction(-5, 2), 1, RoundingMode.HALF_FLOOR, -3),
            (Fraction(-5, 2), 1, RoundingMode.HALF_EXPAND, -3),
            (Fraction(-5, 2), 1, RoundingMode.HALF_TRUNC, -2),
            (15, 10, RoundingMode.HALF_EXPAND, 20),
            (14, 10, RoundingMode.HALF_EXPAND, 10),
            (10, 5, RoundingMode.CEIL, 10),
        ],
    )
    def test_modes(self, value, increment, mode, expected) -> None:
        """Each mode rounds the way its name says."""
        assert round_number_to_increment(value, increment, mode) == expected

    def test_huge_half_way(self) -> None:
        """Half-way cases are exact at any magnitude."""
        value = Fraction(2 * 10**30 + 1, 2)
        assert round_number_to_increment(value, 1, RoundingMode.HALF_TRUNC) == 10**30

    def test_instant(self) -> None:
        """Instants round to multiples of the unit."""
        assert round_temporal_instant(1_500, 1, Unit.MICROSECOND, RoundingMode.HALF_EVEN) == 2_000
        assert round_temporal_instant(-1, 1, Unit.SECOND, RoundingMode.FLOOR) == -1_000_000_000


class TestRoundTime:
    """Tests for round_time."""

    def test_carry_into_next_day(self) -> None:
        """Rounding up at the end of the day carries one day."""
        assert round_time(ISOTime(23, 59, 30), 1, Unit.MINUTE, RoundingMode.HALF_EXPAND) == (
            1,
            MIDNIGHT,
        )

    def test_truncate(self) -> None:
        """Smaller fields are cleared."""
        assert round_time(ISOTime(12, 30, 15), 1, Unit.HOUR, RoundingMode.TRUNC) == (0, ISOTime(12))

    def test_day_uses_day_length(self) -> None:
        """Noon is before the middle of a 25-hour day."""
        long_day = 25 * NANOS_PER_HOUR
        assert round_time(ISOTime(12), 1, Unit.DAY, RoundingMode.HALF_EXPAND, long_day) == (
            0,
            MIDNIGHT,
        )
        assert round_time(ISOTime(12), 1, Unit.DAY, RoundingMode.HALF_EXPAND) == (1, MIDNIGHT)


class TestSignAndValidity:
    """Tests for duration_sign, is_valid_duration and default_largest_unit."""

    def test_sign(self) -> None:
        """The sign is that of the nonzero components."""
        assert duration_sign(0, 0, 0, -2, -3) == -1
        assert duration_sign(0, 1) == 1
        assert duration_sign(0, 0) == 0

    def test_mixed_sign(self) -> None:
        """Mixed signs are rejected."""
        with pytest.raises(ValidationError, match="mixed signs"):
            duration_sign(1, -1)

    def test_validity(self) -> None:
        """Mixed signs and unsafe magnitudes are invalid."""
        assert is_valid_duration(1, 2, 3)
        assert not is_valid_duration(1, -1)
        assert not is_valid_duration(2**53)
        assert is_valid_duration(2**53 - 1)

    def test_default_largest_unit(self) -> None:
        """The largest nonzero component, or nanoseconds."""
        assert default_largest_unit(DurationRecord(hours=1, seconds=5)) is Unit.HOUR
        assert default_largest_unit(DurationRecord(weeks=-1)) is Unit.WEEK
        assert default_largest_unit(DurationRecord()) is Unit.NANOSECOND


class TestBalanceTimeDuration:
    """Tests for balance_time_duration and balance_duration."""

    def test_carry_into_days(self) -> None:
        """25 hours are one day and one hour."""
        record = balance_time_duration(0, 25, 0, 0, 0, 0, 0, Unit.DAY)
        assert (record.days, record.hours) == (1, 1)

    def test_largest_unit_caps(self) -> None:
        """Nothing is carried above the largest unit."""
        assert balance_time_duration(1, 0, 0, 0, 0, 0, 0, Unit.MINUTE).minutes == 1440

    def test_negative(self) -> None:
        """The result has the sign of the total."""
        record = balance_time_duration(0, 0, 0, 0, 0, 0, -NANOS_PER_HOUR - 1, Unit.HOUR)
        assert (record.hours, record.nanoseconds) == (-1, -1)

    def test_mixed_input_signs(self) -> None:
        """Components of opposite sign cancel out."""
        record = balance_time_duration(0, 1, -30, 0, 0, 0, 0, Unit.HOUR)
        assert (record.hours, record.minutes) == (0, 30)

    def test_date_unit_balances_to_days(self) -> None:
        """Units above days stop at days."""
        record = balance_time_duration(0, 49, 0, 0, 0, 0, 0, Unit.YEAR)
        assert (record.days, record.hours) == (2, 1)

    def test_zoned_day(self, short_day) -> None:
        """With a zoned anchor days are as long as the zone makes them."""
        record = balance_duration(0, 24, 0, 0, 0, 0, 0, Unit.DAY, short_day)
        assert (record.days, record.hours) == (1, 1)


class TestNanosecondsToDays:
    """Tests for nanoseconds_to_days."""

    def test_without_anchor(self) -> None:
        """Days are 24 hours and share the sign of the input."""
        assert nanoseconds_to_days(-2 * NANOS_PER_DAY - 5) == (-2, -5, NANOS_PER_DAY)
        assert nanoseconds_to_days(0) == (0, 0, NANOS_PER_DAY)

    def test_short_day(self, short_day) -> None:
        """24 hours from the start of a 23-hour day are a day and an hour."""
        assert nanoseconds_to_days(24 * NANOS_PER_HOUR, short_day) == (
            1,
            NANOS_PER_HOUR,
            NANOS_PER_DAY,
        )

    def test_exact_short_day(self, short_day) -> None:
        """23 hours are exactly that day."""
        assert nanoseconds_to_days(23 * NANOS_PER_HOUR, short_day)[:2] == (1, 0)

    def test_inconsistent_zone(self) -> None:
        """A zone that resolves wall-clock times past its own offsets is rejected."""
        anchor = ZonedDateTime(2 * NANOS_PER_DAY, SkewedTimeZone())
        with pytest.raises(ValidationError, match="inconsistent day lengths"):
            nanoseconds_to_days(-25 * NANOS_PER_HOUR, anchor)


class TestUnbalanceDurationRelative:
    """Tests for unbalance_duration_relative."""

    def test_years_to_months(self) -> None:
        """A year of the ISO calendar is twelve months."""
        record = unbalance_duration_relative(1, 2, 0, 0, Unit.MONTH, PlainDate(2021, 1, 1))
        assert record == DateDurationRecord(0, 14, 0, 0)

    def test_clamped_anniversary(self) -> None:
        """A year from February 29 is still twelve months."""
        record = unbalance_duration_relative(1, 0, 0, 0, Unit.MONTH, PlainDate(2020, 2, 29))
        assert record == DateDurationRecord(0, 12, 0, 0)

    def test_months_to_days_keeping_weeks(self) -> None:
        """For weeks the months become days, the weeks stay."""
        record = unbalance_duration_relative(0, 1, 2, 1, Unit.WEEK, PlainDate(2021, 2, 1))
        assert record == DateDurationRecord(0, 0, 2, 29)

    def test_everything_to_days(self) -> None:
        """For days all calendar units become days."""
        record = unbalance_duration_relative(0, 1, 1, 0, Unit.DAY, PlainDate(2021, 1, 1))
        assert record == DateDurationRecord(0, 0, 0, 38)

    def test_requires_anchor(self) -> None:
        """Calendar units cannot be converted without a date."""
        with pytest.raises(ValidationError, match="relative_to is required"):
            unbalance_duration_relative(1, 0, 0, 0, Unit.MONTH, None)

    def test_no_anchor_needed(self) -> None:
        """Nothing to convert needs no date."""
        record = unbalance_duration_relative(0, 3, 0, 5, Unit.MONTH, None)
        assert record == DateDurationRecord(0, 3, 0, 5)


class TestBalanceDateDurationRelative:
    """Tests for balance_date_duration_relative."""

    def test_days_to_months(self) -> None:
        """Days fold into whole months."""
        record = balance_date_duration_relative(0, 0, 0, 40, Unit.MONTH, PlainDate(2021, 1, 1))
        assert record == DateDurationRecord(0, 1, 0, 9)

    def test_days_to_years(self) -> None:
        """Days fold into months, and twelve months into a year."""
        record = balance_date_duration_relative(0, 0, 0, 400, Unit.YEAR, PlainDate(2021, 1, 1))
        assert record == DateDurationRecord(1, 1, 0, 4)

    def test_days_to_weeks(self) -> None:
        """Existing weeks are kept and days added to them."""
        record = balance_date_duration_relative(0, 0, 1, 8, Unit.WEEK, PlainDate(2021, 1, 1))
        assert record == DateDurationRecord(0, 0, 2, 1)

    def test_negative(self) -> None:
        """Negative days fold backwards from the anchor."""
        record = balance_date_duration_relative(0, 0, 0, -40, Unit.MONTH, PlainDate(2021, 3, 1))
        assert record == DateDurationRecord(0, -1, 0, -12)

    def test_existing_month_kept(self) -> None:
        """A month starting on January 31 is not measured again."""
        record = balance_date_duration_relative(0, 1, 0, 3, Unit.MONTH, PlainDate(2021, 1, 31))
        assert record == DateDurationRecord(0, 1, 0, 3)

    def test_day_unit_unchanged(self) -> None:
        """Non-calendar largest units leave the record alone."""
        record = balance_date_duration_relative(0, 0, 0, 400, Unit.DAY, None)
        assert record == DateDurationRecord(0, 0, 0, 400)

    def test_requires_anchor(self) -> None:
        """Folding days into months needs a date."""
        with pytest.raises(ValidationError, match="relative_to is required"):
            balance_date_duration_relative(0, 0, 0, 40, Unit.MONTH, None)


class TestAddDuration:
    """Tests for add_duration."""

    def test_time_only(self) -> None:
        """Without an anchor days are 24 hours."""
        record = add_duration(DurationRecord(days=1, hours=20), DurationRecord(hours=5))
        assert record == DurationRecord(days=2, hours=1)

    def test_calendar_units_need_anchor(self) -> None:
        """Months cannot be added without a date."""
        with pytest.raises(ValidationError, match="relative_to is required"):
            add_duration(DurationRecord(months=1), DurationRecord(days=1))

    def test_plain_anchor(self) -> None:
        """With a date the total is measured again."""
        record = add_duration(
            DurationRecord(months=1), DurationRecord(days=3), PlainDate(2021, 1, 1)
        )
        assert record == DurationRecord(months=1, days=3)

    def test_plain_anchor_opposite_signs(self) -> None:
        """Time of the other sign borrows whole days from the date part."""
        anchor = PlainDate(2021, 1, 1)
        assert add_duration(
            DurationRecord(months=1), DurationRecord(hours=-1), anchor
        ) == DurationRecord(days=30, hours=23)
        assert add_duration(
            DurationRecord(months=1), DurationRecord(hours=-50), anchor
        ) == DurationRecord(days=28, hours=22)

    def test_zoned_anchor(self, short_day) -> None:
        """With a zoned anchor time units stay exact."""
        record = add_duration(
            DurationRecord(hours=20), DurationRecord(hours=4), zoned_relative_to=short_day
        )
        assert record == DurationRecord(hours=24)


class TestRoundDuration:
    """Tests for round_duration and adjust_rounded_duration_days."""

    def test_time_unit(self) -> None:
        """Smaller components fold into the unit."""
        result = round_duration(
            DurationRecord(hours=1, minutes=30), 1, Unit.HOUR, RoundingMode.HALF_EXPAND
        )
        assert result.duration == DurationRecord(hours=2)
        assert result.total == Fraction(3, 2)

    def test_larger_components_kept(self) -> None:
        """Components above the unit are untouched."""
        result = round_duration(
            DurationRecord(hours=5, minutes=7, seconds=40), 5, Unit.MINUTE, RoundingMode.TRUNC
        )
        assert result.duration == DurationRecord(hours=5, minutes=5)

    def test_days(self) -> None:
        """Time folds into 24-hour days."""
        record = DurationRecord(days=1, hours=12)
        assert round_duration(record, 1, Unit.DAY, RoundingMode.HALF_EVEN).duration == (
            DurationRecord(days=2)
        )
        assert round_duration(record, 1, Unit.DAY, RoundingMode.TRUNC).duration == (
            DurationRecord(days=1)
        )

    def test_months(self) -> None:
        """Leftover days are a fraction of the next month."""
        result = round_duration(
            DurationRecord(days=45), 1, Unit.MONTH, RoundingMode.HALF_EXPAND, PlainDate(2021, 1, 1)
        )
        assert result.duration == DurationRecord(months=2)
        assert result.total == Fraction(3, 2)

    def test_calendar_unit_needs_anchor(self) -> None:
        """Rounding to months needs a date."""
        with pytest.raises(ValidationError, match="relative_to is required to round to months"):
            round_duration(DurationRecord(days=45), 1, Unit.MONTH, RoundingMode.TRUNC)

    def test_adjust_full_short_day(self, short_day) -> None:
        """23 rounded hours on a 23-hour day become a day."""
        record = adjust_rounded_duration_days(
            DurationRecord(hours=23), 1, Unit.HOUR, RoundingMode.HALF_EXPAND, short_day
        )
        assert record == DurationRecord(days=1)

    def test_adjust_without_zone(self) -> None:
        """Without a zoned anchor nothing moves."""
        record = DurationRecord(hours=30)
        assert adjust_rounded_duration_days(
            record, 1, Unit.HOUR, RoundingMode.HALF_EXPAND, None
        ) == record

    def test_adjust_rejects_more_than_one_day(self) -> None:
        """Rounded time covering a day and the next is rejected."""
        anchor = ZonedDateTime(0, ShortDaysTimeZone())
        with pytest.raises(ValidationError, match="more than one day"):
            adjust_rounded_duration_days(
                DurationRecord(hours=48), 1, Unit.HOUR, RoundingMode.HALF_EXPAND, anchor
            )

"""Tests for the PlainTime class."""

from __future__ import annotations

import pytest

from temporalkit import (
    Duration,
    PlainDate,
    PlainDateTime,
    PlainTime,
    TemporalTypeError,
    ValidationError,
)


class TestPlainTimeConstruction:
    """Tests for PlainTime construction."""

    def test_defaults(self) -> None:
        """Unspecified fields are zero."""
        t = PlainTime(14, 30)
        assert (t.hour, t.minute, t.second, t.nanosecond) == (14, 30, 0, 0)

    def test_out_of_range(self) -> None:
        """Fields outside their range are rejected."""
        with pytest.raises(ValidationError, match="hour must be between 0 and 23, got 24"):
            PlainTime(24)
        with pytest.raises(ValidationError, match="nanosecond"):
            PlainTime(0, 0, 0, 0, 0, 1000)

    def test_from_fields_constrain(self) -> None:
        """constrain clamps out-of-range fields."""
        assert PlainTime.from_fields({"hour": 25, "minute": 30}) == PlainTime(23, 30)

    def test_from_fields_reject(self) -> None:
        """reject refuses out-of-range fields."""
        with pytest.raises(ValidationError, match="minute"):
            PlainTime.from_fields({"hour": 1, "minute": 60}, overflow="reject")

    def test_from_fields_defaults(self) -> None:
        """Missing fields default to zero."""
        assert PlainTime.from_fields({"second": 5}) == PlainTime(0, 0, 5)

    def test_get_iso_fields(self) -> None:
        """ISO fields carry the iso_ prefix."""
        fields = PlainTime(1, 2, 3, 4, 5, 6).get_iso_fields()
        assert fields["iso_hour"] == 1
        assert fields["iso_nanosecond"] == 6


class TestPlainTimeReplace:
    """Tests for PlainTime.replace."""

    def test_replace_field(self) -> None:
        """replace changes the named field only."""
        assert PlainTime(9, 15).replace(minute=45) == PlainTime(9, 45)

    def test_replace_constrains(self) -> None:
        """replace clamps by default."""
        assert PlainTime(9, 15).replace(second=75) == PlainTime(9, 15, 59)

    def test_replace_needs_a_field(self) -> None:
        """replace with nothing to change is a type error."""
        with pytest.raises(TemporalTypeError):
            PlainTime(9).replace()

    def test_replace_rejects_calendar(self) -> None:
        """A calendar cannot be replaced on a time."""
        with pytest.raises(TemporalTypeError):
            PlainTime(9).replace(calendar="iso8601")


class TestPlainTimeArithmetic:
    """Tests for PlainTime add and subtract."""

    def test_add_wraps(self) -> None:
        """Adding past midnight wraps around."""
        assert str(PlainTime(14, 30).add(Duration(hours=10))) == "00:30:00"

    def test_subtract_wraps(self) -> None:
        """Subtracting past midnight wraps backwards."""
        assert PlainTime(0, 15).subtract(Duration(minutes=30)) == PlainTime(23, 45)

    def test_days_ignored(self) -> None:
        """Day components do not change the time."""
        assert PlainTime(8).add(Duration(days=3, hours=1)) == PlainTime(9)

    def test_calendar_units_rejected(self) -> None:
        """Years, months and weeks are rejected."""
        with pytest.raises(ValidationError):
            PlainTime(8).add(Duration(weeks=1))

    def test_operators(self) -> None:
        """+ and - accept durations."""
        assert PlainTime(8) + Duration(minutes=5) == PlainTime(8, 5)
        assert PlainTime(8) - Duration(minutes=5) == PlainTime(7, 55)


class TestPlainTimeDifference:
    """Tests for PlainTime until and since."""

    def test_until(self) -> None:
        """until balances up to hours by default."""
        assert PlainTime(14, 30).until(PlainTime(16, 45)) == Duration(hours=2, minutes=15)

    def test_until_backwards(self) -> None:
        """An earlier time gives a negative duration."""
        assert PlainTime(16).until(PlainTime(14, 30)) == Duration(hours=-1, minutes=-30)

    def test_since(self) -> None:
        """since measures from the other time."""
        assert PlainTime(16, 45).since(PlainTime(14, 30)) == Duration(hours=2, minutes=15)

    def test_largest_unit(self) -> None:
        """A smaller largest unit keeps larger values in it."""
        d = PlainTime(14, 30).until(PlainTime(16, 45), largest_unit="minute")
        assert d == Duration(minutes=135)

    def test_smallest_unit(self) -> None:
        """Differences round to the smallest unit."""
        d = PlainTime(14, 30).until(PlainTime(16, 45), smallest_unit="hour")
        assert d == Duration(hours=2)
        d = PlainTime(14, 30).until(
            PlainTime(16, 45), smallest_unit="hour", rounding_mode="halfExpand"
        )
        assert d == Duration(hours=2)
        d = PlainTime(14, 30).until(PlainTime(16, 45), smallest_unit="hour", rounding_mode="ceil")
        assert d == Duration(hours=3)

    def test_date_unit_rejected(self) -> None:
        """Date units are not allowed."""
        with pytest.raises(ValidationError, match="not allowed"):
            PlainTime(1).until(PlainTime(2), largest_unit="day")

    def test_wrong_type(self) -> None:
        """The other operand must be a PlainTime."""
        with pytest.raises(TemporalTypeError):
            PlainTime(1).until(PlainDate(2021, 1, 1))


class TestPlainTimeRound:
    """Tests for PlainTime.round."""

    def test_round_increment(self) -> None:
        """Rounding to fifteen minutes."""
        assert PlainTime(11, 52).round("minute", rounding_increment=15) == PlainTime(11, 45)

    def test_round_wraps(self) -> None:
        """Rounding up at the end of the day wraps to midnight."""
        assert PlainTime(23, 59, 30).round("minute") == PlainTime(0, 0)

    def test_round_hour_modes(self) -> None:
        """The rounding mode applies to the time of day."""
        assert PlainTime(10, 30).round("hour") == PlainTime(11)
        assert PlainTime(10, 30).round("hour", rounding_mode="trunc") == PlainTime(10)

    def test_increment_must_divide(self) -> None:
        """The increment must divide the next larger unit."""
        with pytest.raises(ValidationError):
            PlainTime(10).round("hour", rounding_increment=5)
        with pytest.raises(ValidationError):
            PlainTime(10).round("hour", rounding_increment=24)

    def test_date_unit_rejected(self) -> None:
        """Only time units are allowed."""
        with pytest.raises(ValidationError):
            PlainTime(10).round("day")


class TestPlainTimeConversionAndComparison:
    """Tests for conversion, comparison and representation."""

    def test_to_plain_date_time(self) -> None:
        """A time combines with a date."""
        dt = PlainTime(9, 30).to_plain_date_time(PlainDate(2021, 5, 1))
        assert dt == PlainDateTime(2021, 5, 1, 9, 30)

    def test_to_zoned_date_time(self, new_york) -> None:
        """A time combines with a date and a zone."""
        zdt = PlainTime(9, 30).to_zoned_date_time(PlainDate(2021, 7, 1), new_york)
        assert zdt.offset == "-04:00"
        assert zdt.hour == 9

    def test_compare(self) -> None:
        """compare orders times within a day."""
        assert PlainTime.compare(PlainTime(1), PlainTime(2)) == -1
        assert PlainTime.compare(PlainTime(2, 0, 0, 0, 0, 1), PlainTime(2)) == 1
        assert PlainTime.compare(PlainTime(2), PlainTime(2)) == 0

    def test_equality(self) -> None:
        """Equal times compare equal and hash alike."""
        assert PlainTime(5, 6) == PlainTime(5, 6)
        assert PlainTime(5, 6).equals(PlainTime(5, 6))
        assert hash(PlainTime(5, 6)) == hash(PlainTime(5, 6))

    def test_repr_and_str(self) -> None:
        """repr shows fields and str the ISO form."""
        assert repr(PlainTime(9, 45)) == "PlainTime(9, 45, 0)"
        assert repr(PlainTime(9, 45, 0, 1)) == "PlainTime(9, 45, 0, 1, 0, 0)"
        assert str(PlainTime(14, 30, 0, 250)) == "14:30:00.25"

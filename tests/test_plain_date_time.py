"""Tests for the PlainDateTime class."""

from __future__ import annotations

import pytest

from temporalkit import (
    Duration,
    PlainDate,
    PlainDateTime,
    PlainTime,
    TemporalTypeError,
    TimezoneError,
    ValidationError,
)


class TestPlainDateTimeConstruction:
    """Tests for PlainDateTime construction."""

    def test_fields(self) -> None:
        """Date and time fields are read back."""
        dt = PlainDateTime(2021, 3, 14, 1, 30, 15, 1, 2, 3)
        assert (dt.year, dt.month, dt.day) == (2021, 3, 14)
        assert (dt.hour, dt.minute, dt.second) == (1, 30, 15)
        assert (dt.millisecond, dt.microsecond, dt.nanosecond) == (1, 2, 3)
        assert dt.day_of_week == 7

    def test_invalid_time(self) -> None:
        """Time fields are range checked."""
        with pytest.raises(ValidationError):
            PlainDateTime(2021, 3, 14, 24)

    def test_invalid_date(self) -> None:
        """Date fields are range checked."""
        with pytest.raises(ValidationError):
            PlainDateTime(2021, 2, 29)

    def test_from_fields(self) -> None:
        """from_fields clamps the day and defaults the time."""
        dt = PlainDateTime.from_fields({"year": 2021, "month": 2, "day": 30, "hour": 9})
        assert dt == PlainDateTime(2021, 2, 28, 9)

    def test_from_fields_reject(self) -> None:
        """With reject an out-of-range time raises."""
        with pytest.raises(ValidationError):
            PlainDateTime.from_fields(
                {"year": 2021, "month": 2, "day": 1, "hour": 24}, overflow="reject"
            )

    def test_get_iso_fields(self) -> None:
        """ISO fields cover both date and time."""
        fields = PlainDateTime(2021, 3, 14, 1, 30).get_iso_fields()
        assert fields["iso_day"] == 14
        assert fields["iso_minute"] == 30
        assert fields["calendar"].id == "iso8601"


class TestPlainDateTimeReplace:
    """Tests for replace and the with_ methods."""

    def test_replace(self) -> None:
        """Date and time fields can be replaced together."""
        dt = PlainDateTime(2021, 1, 31, 12).replace(month=4, minute=5)
        assert dt == PlainDateTime(2021, 4, 30, 12, 5)

    def test_replace_needs_a_field(self) -> None:
        """replace with no fields is a type error."""
        with pytest.raises(TemporalTypeError):
            PlainDateTime(2021, 1, 31, 12).replace()

    def test_with_plain_time(self) -> None:
        """with_plain_time swaps the time, midnight by default."""
        dt = PlainDateTime(2021, 1, 31, 12)
        assert dt.with_plain_time(PlainTime(8, 15)) == PlainDateTime(2021, 1, 31, 8, 15)
        assert dt.with_plain_time() == PlainDateTime(2021, 1, 31)

    def test_with_plain_date(self) -> None:
        """with_plain_date swaps the date."""
        dt = PlainDateTime(2021, 1, 31, 12).with_plain_date(PlainDate(2022, 6, 1))
        assert dt == PlainDateTime(2022, 6, 1, 12)


class TestPlainDateTimeArithmetic:
    """Tests for PlainDateTime add and subtract."""

    def test_add_hours(self) -> None:
        """Hours carry into the date."""
        dt = PlainDateTime(2021, 3, 14, 1, 30).add(Duration(hours=23))
        assert dt == PlainDateTime(2021, 3, 15, 0, 30)

    def test_time_carries_before_months(self) -> None:
        """Carried days are added after the months."""
        dt = PlainDateTime(2021, 1, 31, 23).add(Duration(months=1, hours=2))
        assert dt == PlainDateTime(2021, 3, 1, 1)

    def test_subtract(self) -> None:
        """Subtracting time borrows from the date."""
        dt = PlainDateTime(2021, 3, 1, 0, 30).subtract(Duration(hours=1))
        assert dt == PlainDateTime(2021, 2, 28, 23, 30)

    def test_reject_overflow(self) -> None:
        """With reject, a clamped day raises."""
        with pytest.raises(ValidationError):
            PlainDateTime(2021, 1, 31, 12).add(Duration(months=1), overflow="reject")


class TestPlainDateTimeDifference:
    """Tests for PlainDateTime until and since."""

    def test_until_days(self) -> None:
        """The largest unit defaults to days."""
        d = PlainDateTime(2021, 1, 1, 12).until(PlainDateTime(2021, 1, 3, 6))
        assert d == Duration(days=1, hours=18)

    def test_until_hours(self) -> None:
        """Days fold into hours with largest_unit hour."""
        d = PlainDateTime(2021, 1, 1, 12).until(PlainDateTime(2021, 1, 3, 6), largest_unit="hour")
        assert d == Duration(hours=42)

    def test_until_backwards(self) -> None:
        """An earlier end gives a negative duration."""
        d = PlainDateTime(2021, 1, 3, 6).until(PlainDateTime(2021, 1, 1, 12))
        assert d == Duration(days=-1, hours=-18)

    def test_since(self) -> None:
        """since is measured from the other date-time."""
        d = PlainDateTime(2021, 1, 3, 6).since(PlainDateTime(2021, 1, 1, 12))
        assert d == Duration(days=1, hours=18)

    def test_until_months_borrows_day(self) -> None:
        """An earlier time of day borrows a day before months are counted."""
        d = PlainDateTime(2021, 1, 31, 12).until(PlainDateTime(2021, 3, 1), largest_unit="month")
        assert d == Duration(months=1, hours=12)

    def test_smallest_unit(self) -> None:
        """Differences round to the smallest unit."""
        start = PlainDateTime(2021, 1, 1)
        end = PlainDateTime(2021, 1, 1, 10, 40)
        assert start.until(end, smallest_unit="hour") == Duration(hours=10)
        assert start.until(end, smallest_unit="hour", rounding_mode="halfExpand") == Duration(
            hours=11
        )

    def test_round_up_to_day(self) -> None:
        """Rounding to days can carry a full day."""
        d = PlainDateTime(2021, 1, 1).until(
            PlainDateTime(2021, 1, 2, 18), smallest_unit="day", rounding_mode="halfExpand"
        )
        assert d == Duration(days=2)

    def test_wrong_type(self) -> None:
        """The other operand must be a PlainDateTime."""
        with pytest.raises(TemporalTypeError):
            PlainDateTime(2021, 1, 1).until(PlainDate(2021, 1, 2))


class TestPlainDateTimeRound:
    """Tests for PlainDateTime.round."""

    def test_round_minute_carries_into_year(self) -> None:
        """Rounding up at the end of the year moves to January 1."""
        dt = PlainDateTime(2021, 12, 31, 23, 59, 30).round("minute")
        assert dt == PlainDateTime(2022, 1, 1)

    def test_round_day(self) -> None:
        """Rounding to days uses 24-hour days."""
        assert PlainDateTime(2021, 3, 14, 1, 30).round("day") == PlainDateTime(2021, 3, 14)
        assert PlainDateTime(2021, 3, 14, 12).round("day") == PlainDateTime(2021, 3, 15)

    def test_day_increment_must_be_one(self) -> None:
        """Only a one-day increment is allowed."""
        with pytest.raises(ValidationError):
            PlainDateTime(2021, 3, 14, 12).round("day", rounding_increment=2)

    def test_calendar_unit_rejected(self) -> None:
        """Months cannot be rounded to."""
        with pytest.raises(ValidationError, match="not allowed"):
            PlainDateTime(2021, 3, 14).round("month")


class TestPlainDateTimeConversion:
    """Tests for conversions to other kinds."""

    def test_parts(self) -> None:
        """The date and time parts can be taken apart."""
        dt = PlainDateTime(2021, 7, 4, 9, 15)
        assert dt.to_plain_date() == PlainDate(2021, 7, 4)
        assert dt.to_plain_time() == PlainTime(9, 15)
        assert str(dt.to_plain_year_month()) == "2021-07"
        assert str(dt.to_plain_month_day()) == "07-04"

    def test_to_zoned_in_fold(self, new_york) -> None:
        """A repeated time resolves according to disambiguation."""
        dt = PlainDateTime(2021, 11, 7, 1, 30)
        assert dt.to_zoned_date_time(new_york).offset == "-05:00"
        assert dt.to_zoned_date_time(new_york, "earlier").offset == "-04:00"
        assert dt.to_zoned_date_time(new_york, "later").offset == "-05:00"
        with pytest.raises(TimezoneError, match="ambiguous"):
            dt.to_zoned_date_time(new_york, "reject")

    def test_to_zoned_in_gap(self, new_york) -> None:
        """A skipped time moves by the gap width."""
        dt = PlainDateTime(2021, 3, 14, 2, 30)
        assert dt.to_zoned_date_time(new_york).hour == 3
        assert dt.to_zoned_date_time(new_york, "earlier").hour == 1
        with pytest.raises(TimezoneError, match="does not exist"):
            dt.to_zoned_date_time(new_york, "reject")


class TestPlainDateTimeComparison:
    """Tests for comparison and representation."""

    def test_compare(self) -> None:
        """compare orders by date, then time."""
        a = PlainDateTime(2021, 1, 1, 23)
        b = PlainDateTime(2021, 1, 2, 1)
        assert PlainDateTime.compare(a, b) == -1
        assert PlainDateTime.compare(b, a) == 1
        assert PlainDateTime.compare(a, a) == 0

    def test_equality(self) -> None:
        """Equal date-times compare equal and hash alike."""
        assert PlainDateTime(2021, 1, 1, 1) == PlainDateTime(2021, 1, 1, 1)
        assert PlainDateTime(2021, 1, 1, 1).equals(PlainDateTime(2021, 1, 1, 1))
        assert hash(PlainDateTime(2021, 1, 1, 1)) == hash(PlainDateTime(2021, 1, 1, 1))

    def test_repr_and_str(self) -> None:
        """repr shows fields and str the ISO form."""
        dt = PlainDateTime(2021, 3, 14, 1, 30)
        assert repr(dt) == "PlainDateTime(2021, 3, 14, 1, 30, 0)"
        assert str(dt) == "2021-03-14T01:30:00"

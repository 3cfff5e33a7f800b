"""Tests for the PlainYearMonth class."""

from __future__ import annotations

import pytest

from temporalkit import (
    Duration,
    OverflowError,
    PlainDate,
    PlainYearMonth,
    TemporalTypeError,
    ValidationError,
)


class TestPlainYearMonthConstruction:
    """Tests for construction and fields."""

    def test_fields(self) -> None:
        """Year, month and month-level properties."""
        ym = PlainYearMonth(2024, 2)
        assert (ym.year, ym.month, ym.month_code) == (2024, 2, "M02")
        assert ym.days_in_month == 29
        assert ym.days_in_year == 366
        assert ym.months_in_year == 12
        assert ym.in_leap_year

    def test_reference_day(self) -> None:
        """The ISO reference day is the 1st."""
        assert PlainYearMonth(2021, 7).get_iso_fields()["iso_day"] == 1

    def test_invalid_month(self) -> None:
        """Month 0 is rejected."""
        with pytest.raises(ValidationError):
            PlainYearMonth(2021, 0)

    def test_limits(self) -> None:
        """Year-months outside the range are rejected."""
        assert PlainYearMonth(-271821, 4).year == -271821
        assert PlainYearMonth(275760, 9).month == 9
        with pytest.raises(OverflowError):
            PlainYearMonth(-271821, 3)
        with pytest.raises(OverflowError):
            PlainYearMonth(275760, 10)

    def test_from_fields(self) -> None:
        """month_code identifies the month."""
        assert PlainYearMonth.from_fields({"year": 2021, "month_code": "M07"}) == PlainYearMonth(
            2021, 7
        )

    def test_from_fields_constrain_and_reject(self) -> None:
        """Month 13 clamps to December or is rejected."""
        assert PlainYearMonth.from_fields({"year": 2021, "month": 13}) == PlainYearMonth(2021, 12)
        with pytest.raises(ValidationError):
            PlainYearMonth.from_fields({"year": 2021, "month": 13}, overflow="reject")

    def test_from_fields_missing_year(self) -> None:
        """year is required."""
        with pytest.raises(TemporalTypeError, match="year"):
            PlainYearMonth.from_fields({"month": 3})

    def test_replace(self) -> None:
        """replace swaps the month."""
        assert PlainYearMonth(2021, 7).replace(month=12) == PlainYearMonth(2021, 12)
        assert PlainYearMonth(2021, 7).replace(year=2000) == PlainYearMonth(2000, 7)


class TestPlainYearMonthArithmetic:
    """Tests for add and subtract."""

    def test_add_months(self) -> None:
        """Months carry into years."""
        assert PlainYearMonth(2021, 1).add(Duration(months=13)) == PlainYearMonth(2022, 2)

    def test_subtract_years(self) -> None:
        """subtract goes backwards."""
        assert PlainYearMonth(2021, 1).subtract({"years": 2, "months": 1}) == PlainYearMonth(
            2018, 12
        )

    def test_add_days_stays_within_month(self) -> None:
        """Days move forward from the first of the month."""
        assert PlainYearMonth(2021, 3).add(Duration(days=30)) == PlainYearMonth(2021, 3)
        assert PlainYearMonth(2021, 3).add(Duration(days=31)) == PlainYearMonth(2021, 4)

    def test_subtract_days_from_month_end(self) -> None:
        """Negative days move back from the last day of the month."""
        assert PlainYearMonth(2021, 3).add(Duration(days=-30)) == PlainYearMonth(2021, 3)
        assert PlainYearMonth(2021, 3).add(Duration(days=-31)) == PlainYearMonth(2021, 2)


class TestPlainYearMonthDifference:
    """Tests for until and since."""

    def test_until_defaults_to_years(self) -> None:
        """The largest unit defaults to years."""
        d = PlainYearMonth(2021, 1).until(PlainYearMonth(2023, 4))
        assert d == Duration(years=2, months=3)

    def test_until_months(self) -> None:
        """largest_unit month keeps everything in months."""
        d = PlainYearMonth(2021, 1).until(PlainYearMonth(2023, 4), largest_unit="month")
        assert d == Duration(months=27)

    def test_since(self) -> None:
        """since is measured from the other month."""
        d = PlainYearMonth(2021, 1).since(PlainYearMonth(2023, 4))
        assert d == Duration(years=-2, months=-3)

    def test_round_to_years(self) -> None:
        """Rounding to years uses the rounding mode."""
        start, end = PlainYearMonth(2021, 1), PlainYearMonth(2023, 4)
        assert start.until(end, smallest_unit="year") == Duration(years=2)
        assert start.until(end, smallest_unit="year", rounding_mode="ceil") == Duration(years=3)

    def test_month_increment(self) -> None:
        """Months round to the increment."""
        d = PlainYearMonth(2021, 1).until(
            PlainYearMonth(2021, 8), largest_unit="month", rounding_increment=3
        )
        assert d == Duration(months=6)

    def test_day_unit_rejected(self) -> None:
        """Units below months are not allowed."""
        with pytest.raises(ValidationError, match="not allowed"):
            PlainYearMonth(2021, 1).until(PlainYearMonth(2021, 2), smallest_unit="day")

    def test_wrong_type(self) -> None:
        """The other operand must be a PlainYearMonth."""
        with pytest.raises(TemporalTypeError):
            PlainYearMonth(2021, 1).until(PlainDate(2021, 2, 1))


class TestPlainYearMonthConversionAndComparison:
    """Tests for conversion, comparison and representation."""

    def test_to_plain_date(self) -> None:
        """A day of the month gives a date."""
        assert PlainYearMonth(2021, 1).to_plain_date(day=31) == PlainDate(2021, 1, 31)

    def test_to_plain_date_rejects_missing_day(self) -> None:
        """A day the month does not have is rejected."""
        with pytest.raises(ValidationError, match="between 1 and 28"):
            PlainYearMonth(2021, 2).to_plain_date(day=29)

    def test_compare(self) -> None:
        """compare orders months."""
        assert PlainYearMonth.compare(PlainYearMonth(2021, 1), PlainYearMonth(2020, 12)) == 1
        assert PlainYearMonth.compare(PlainYearMonth(2021, 1), PlainYearMonth(2021, 1)) == 0

    def test_equality(self) -> None:
        """Equal year-months compare equal and hash alike."""
        assert PlainYearMonth(2021, 1) == PlainYearMonth(2021, 1)
        assert PlainYearMonth(2021, 1).equals(PlainYearMonth(2021, 1))
        assert hash(PlainYearMonth(2021, 1)) == hash(PlainYearMonth(2021, 1))

    def test_repr_and_str(self) -> None:
        """repr shows the fields and str the ISO form."""
        assert repr(PlainYearMonth(2021, 7)) == "PlainYearMonth(2021, 7)"
        assert str(PlainYearMonth(2021, 7)) == "2021-07"
        assert str(PlainYearMonth(-5, 7)) == "-000005-07"

"""Tests for temporalkit public API and exports.

This module verifies:
- All expected exports are available from the top-level package
- __all__ lists match actual exports in all modules
"""

from __future__ import annotations

import importlib

import pytest


class TestPublicAPIExports:
    """Test that all expected exports are available from temporalkit."""

    def test_core_types_exported(self) -> None:
        """All value kinds should be importable from temporalkit."""
        from temporalkit import (
            Duration,
            Instant,
            PlainDate,
            PlainDateTime,
            PlainMonthDay,
            PlainTime,
            PlainYearMonth,
            ZonedDateTime,
        )

        for cls in (
            Duration, Instant, PlainDate, PlainDateTime,
            PlainMonthDay, PlainTime, PlainYearMonth, ZonedDateTime,
        ):
            assert isinstance(cls, type)

    def test_exception_hierarchy(self) -> None:
        """Range errors are ValueErrors, type errors are TypeErrors."""
        from temporalkit import (
            CalendarError,
            OverflowError,
            ParseError,
            TemporalError,
            TemporalRangeError,
            TemporalTypeError,
            TimezoneError,
            ValidationError,
        )

        for error in (ValidationError, ParseError, OverflowError, TimezoneError, CalendarError):
            assert issubclass(error, TemporalRangeError)
        assert issubclass(TemporalRangeError, ValueError)
        assert issubclass(TemporalTypeError, TypeError)
        assert issubclass(TemporalRangeError, TemporalError)
        assert issubclass(TemporalTypeError, TemporalError)

    def test_version_exported(self) -> None:
        """__version__ should be available."""
        import temporalkit

        assert temporalkit.__version__ == "0.1.0"

    def test_doc_example(self) -> None:
        """The package docstring example holds."""
        from temporalkit import Duration, PlainDate

        assert PlainDate(2021, 1, 31).add(Duration(months=1)) == PlainDate(2021, 2, 28)


class TestAllListsMatchExports:
    """Test that __all__ lists accurately reflect module contents."""

    @pytest.mark.parametrize(
        "module_name",
        [
            "temporalkit",
            "temporalkit.core",
            "temporalkit.units",
            "temporalkit.calendars",
            "temporalkit.arithmetic",
            "temporalkit.format",
            "temporalkit._internal",
            "temporalkit._internal.validation",
        ],
    )
    def test_all_matches_actual(self, module_name: str) -> None:
        """Every name in __all__ should be accessible."""
        module = importlib.import_module(module_name)
        for name in module.__all__:
            assert hasattr(module, name), f"{name!r} is in {module_name}.__all__ but not accessible"

    def test_no_private_exports(self) -> None:
        """No private names in the top-level __all__."""
        import temporalkit

        private = [n for n in temporalkit.__all__ if n.startswith("_") and n != "__version__"]
        assert private == []

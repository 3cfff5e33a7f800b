"""temporalkit exception hierarchy.

All temporalkit-specific exceptions inherit from TemporalError. Errors
fall into two classes mirroring the temporal value model:

    - TemporalRangeError (a ValueError): a value is out of the supported
      range, a field combination is invalid, or two operands disagree on
      calendar or time zone.
    - TemporalTypeError (a TypeError): a required field is missing, a
      field has the wrong type, or the wrong kind of value was supplied.
"""

from __future__ import annotations


class TemporalError(Exception):
    """Base exception for all temporalkit errors."""

    pass


class TemporalRangeError(TemporalError, ValueError):
    """A value or option lies outside what the operation accepts."""

    pass


class TemporalTypeError(TemporalError, TypeError):
    """An argument has the wrong kind, or a required field is missing.

    Examples:
        - A fields record without a ``year`` passed to date_from_fields
        - A partial record that tries to override ``calendar``
        - A PlainTime passed where a PlainDate is required
    """

    pass


class ValidationError(TemporalRangeError):
    """Invalid input values.

    Raised when a temporal value is out of range or invalid.

    Examples:
        - Month value outside 1-12 under the ``reject`` overflow policy
        - Duration components with mixed signs
        - A rounding increment that does not divide the unit's maximum
    """

    pass


class ParseError(TemporalRangeError):
    """Failed to parse a UTC offset string.

    Examples:
        - "+5:3" (malformed minutes)
        - "+25:00" (hours out of range)
    """

    pass


class OverflowError(TemporalRangeError):
    """Arithmetic operation exceeded the representable range.

    Raised when a calculation produces an instant beyond 8.64e21
    nanoseconds from the epoch, or a date outside the supported years.

    Examples:
        - Adding 300000 years to a date
        - Rounding an instant up past the last representable instant
    """

    pass


class TimezoneError(TemporalRangeError):
    """Invalid time zone or unresolvable local time.

    Examples:
        - Unknown IANA identifier
        - A skipped or repeated wall-clock time under ``reject``
        - An offset that does not match the zone under offset ``reject``
        - Differencing zoned values in two different zones
    """

    pass


class CalendarError(TemporalRangeError):
    """Invalid calendar or calendar field combination.

    Examples:
        - Unknown calendar identifier
        - ``month`` and ``month_code`` disagree
        - Differencing values in two different calendars
    """

    pass


__all__ = [
    "TemporalError",
    "TemporalRangeError",
    "TemporalTypeError",
    "ValidationError",
    "ParseError",
    "OverflowError",
    "TimezoneError",
    "CalendarError",
]

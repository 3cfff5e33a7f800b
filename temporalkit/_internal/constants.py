"""Internal constants for temporalkit.

These constants define the limits and magic numbers used throughout
the library. This module is not part of the public API.
"""

from __future__ import annotations

# Time unit conversions
NANOS_PER_MICROSECOND: int = 1_000
NANOS_PER_MILLISECOND: int = 1_000_000
NANOS_PER_SECOND: int = 1_000_000_000
NANOS_PER_MINUTE: int = 60 * NANOS_PER_SECOND
NANOS_PER_HOUR: int = 60 * NANOS_PER_MINUTE
NANOS_PER_DAY: int = 24 * NANOS_PER_HOUR  # 86_400_000_000_000

SECONDS_PER_MINUTE: int = 60
SECONDS_PER_HOUR: int = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY: int = 24 * SECONDS_PER_HOUR  # 86_400

DAYS_PER_WEEK: int = 7
MONTHS_PER_YEAR: int = 12

# Instants are limited to 10**8 days either side of the epoch
MAX_EPOCH_DAYS: int = 100_000_000
MAX_EPOCH_NANOSECONDS: int = MAX_EPOCH_DAYS * NANOS_PER_DAY  # 8.64e21
MIN_EPOCH_NANOSECONDS: int = -MAX_EPOCH_NANOSECONDS

# Plain date-times may extend one day past the instant range
MAX_DATE_TIME_NANOSECONDS: int = MAX_EPOCH_NANOSECONDS + NANOS_PER_DAY
MIN_DATE_TIME_NANOSECONDS: int = MIN_EPOCH_NANOSECONDS - NANOS_PER_DAY

# Year limits implied by the instant range
MIN_YEAR: int = -271821
MAX_YEAR: int = 275760

# Year-month limits: -271821-04 .. 275760-09
MIN_YEAR_MONTH: tuple[int, int] = (MIN_YEAR, 4)
MAX_YEAR_MONTH: tuple[int, int] = (MAX_YEAR, 9)

# Largest integer a duration component may hold
MAX_SAFE_INTEGER: int = 2**53 - 1

# Days in each month (non-leap year)
DAYS_IN_MONTH: tuple[int, ...] = (
    0,   # Placeholder for 1-indexed access
    31,  # January
    28,  # February (non-leap)
    31,  # March
    30,  # April
    31,  # May
    30,  # June
    31,  # July
    31,  # August
    30,  # September
    31,  # October
    30,  # November
    31,  # December
)

# Reference fields for the partial ISO value kinds
ISO_REFERENCE_DAY: int = 1
ISO_REFERENCE_YEAR: int = 1972  # leap year, so --02-29 is representable

DEFAULT_CALENDAR_ID: str = "iso8601"

# Time zone offsets must stay strictly below one day
MAX_UTC_OFFSET_NANOSECONDS: int = NANOS_PER_DAY - 1


__all__ = [
    "NANOS_PER_MICROSECOND",
    "NANOS_PER_MILLISECOND",
    "NANOS_PER_SECOND",
    "NANOS_PER_MINUTE",
    "NANOS_PER_HOUR",
    "NANOS_PER_DAY",
    "SECONDS_PER_MINUTE",
    "SECONDS_PER_HOUR",
    "SECONDS_PER_DAY",
    "DAYS_PER_WEEK",
    "MONTHS_PER_YEAR",
    "MAX_EPOCH_DAYS",
    "MAX_EPOCH_NANOSECONDS",
    "MIN_EPOCH_NANOSECONDS",
    "MAX_DATE_TIME_NANOSECONDS",
    "MIN_DATE_TIME_NANOSECONDS",
    "MIN_YEAR",
    "MAX_YEAR",
    "MIN_YEAR_MONTH",
    "MAX_YEAR_MONTH",
    "MAX_SAFE_INTEGER",
    "DAYS_IN_MONTH",
    "ISO_REFERENCE_DAY",
    "ISO_REFERENCE_YEAR",
    "DEFAULT_CALENDAR_ID",
    "MAX_UTC_OFFSET_NANOSECONDS",
]

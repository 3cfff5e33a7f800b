"""Duration engine and value arithmetic.

This module provides:
    - balance: duration records, balancing and duration addition
    - rounding: exact rounding of numbers, times and durations
    - ops: addition and difference of instants and date-times
"""

from __future__ import annotations

from temporalkit.arithmetic.balance import (
    DateDurationRecord,
    DurationRecord,
    TimeDurationRecord,
    add_duration,
    balance_duration,
    balance_time_duration,
)
from temporalkit.arithmetic.rounding import (
    RoundResult,
    round_duration,
    round_number_to_increment,
)

__all__: list[str] = [
    "DateDurationRecord",
    "DurationRecord",
    "TimeDurationRecord",
    "RoundResult",
    "add_duration",
    "balance_duration",
    "balance_time_duration",
    "round_duration",
    "round_number_to_increment",
]

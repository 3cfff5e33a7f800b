"""Temporal units and option enumerations.

This module provides:
    - Unit: Duration components (YEAR, MONTH, ... NANOSECOND)
    - Overflow, Disambiguation, OffsetOption, RoundingMode: option enums

Time zones live in temporalkit.units.timezone.
"""

from __future__ import annotations

from temporalkit.units.options import (
    Disambiguation,
    OffsetOption,
    Overflow,
    RoundingMode,
)
from temporalkit.units.unit import Unit

__all__: list[str] = [
    "Unit",
    "Overflow",
    "Disambiguation",
    "OffsetOption",
    "RoundingMode",
]

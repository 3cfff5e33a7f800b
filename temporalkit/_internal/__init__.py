"""Internal utilities for temporalkit.

This module contains private implementation details:
    - ISO calendar arithmetic
    - Validation decorators and range checks
    - Constants and magic numbers
    - Custom decorators (@memoize)

Note: This module is not part of the public API.
"""

from __future__ import annotations

from temporalkit._internal.decorators import memoize
from temporalkit._internal.validation import (
    validate_day,
    validate_month,
    validate_range,
)

__all__: list[str] = [
    "memoize",
    "validate_day",
    "validate_month",
    "validate_range",
]

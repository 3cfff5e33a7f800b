"""Text output for temporal values.

This module provides ISO 8601 formatting of the ISO records that back
every value kind. Parsing is not provided.
"""

from __future__ import annotations

from temporalkit.format.iso8601 import (
    format_calendar_annotation,
    format_iso_date,
    format_iso_date_time,
    format_iso_time,
)

__all__: list[str] = [
    "format_calendar_annotation",
    "format_iso_date",
    "format_iso_date_time",
    "format_iso_time",
]

"""Calendar systems.

This module provides:
    - Calendar: the capability interface calendars implement
    - ISO8601Calendar: the default calendar
    - get_calendar / register_calendar / list_calendars: the registry
"""

from __future__ import annotations

from temporalkit.calendars.base import Calendar
from temporalkit.calendars.iso8601 import ISO8601Calendar
from temporalkit.calendars.registry import (
    get_calendar,
    list_calendars,
    register_calendar,
)

__all__: list[str] = [
    "Calendar",
    "ISO8601Calendar",
    "get_calendar",
    "list_calendars",
    "register_calendar",
]

"""Calendar registry.

Maps calendar identifiers to calendar objects. The ISO 8601 calendar is
registered on import; further calendars can be plugged in with
register_calendar.
"""

from __future__ import annotations

import logging

from temporalkit._internal.constants import DEFAULT_CALENDAR_ID
from temporalkit.calendars.base import Calendar
from temporalkit.calendars.iso8601 import ISO8601Calendar
from temporalkit.errors import CalendarError, TemporalTypeError

logger = logging.getLogger(__name__)

_calendars: dict[str, Calendar] = {}


def register_calendar(calendar: Calendar, *, overwrite: bool = False) -> None:
    """Make ``calendar`` available under its identifier.

    Raises:
        TemporalTypeError: If ``calendar`` is not a Calendar.
        CalendarError: If the identifier is taken and ``overwrite`` is False.
    """
    if not isinstance(calendar, Calendar):
        raise TemporalTypeError(f"expected a Calendar, got {type(calendar).__name__}")
    key = calendar.id.lower()
    if not overwrite and key in _calendars:
        raise CalendarError(
            f"Calendar {calendar.id!r} already exists. Use overwrite=True to replace."
        )
    _calendars[key] = calendar
    logger.debug("Registered calendar %r (%s)", calendar.id, type(calendar).__name__)


def list_calendars() -> list[str]:
    """Return the registered calendar identifiers, sorted."""
    return sorted(calendar.id for calendar in _calendars.values())


def get_calendar(value: Calendar | str | None = None) -> Calendar:
    """Return the calendar for an identifier, or ``value`` itself.

    None selects the ISO 8601 calendar. Identifiers are case-insensitive.

    Raises:
        TemporalTypeError: If ``value`` is neither a Calendar nor a string.
        CalendarError: If no calendar is registered under the identifier.

    Examples:
        >>> get_calendar("ISO8601").id
        'iso8601'
    """
    if value is None:
        value = DEFAULT_CALENDAR_ID
    if isinstance(value, Calendar):
        return value
    if not isinstance(value, str):
        raise TemporalTypeError(
            f"calendar must be a Calendar or an identifier, got {type(value).__name__}"
        )
    try:
        return _calendars[value.lower()]
    except KeyError:
        raise CalendarError(
            f"Unknown calendar {value!r}. Available: {list_calendars()}"
        ) from None


register_calendar(ISO8601Calendar())


__all__ = ["register_calendar", "list_calendars", "get_calendar"]

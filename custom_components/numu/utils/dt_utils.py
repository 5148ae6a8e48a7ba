# File: utils/dt_utils.py
"""Calendar utilities for Numu.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.
   Uses standard library: datetime, zoneinfo, dateutil.

Every engine works on calendar days (`datetime.date`). Timestamps are
converted to a calendar day exactly once, in the configured local timezone,
through `start_of_day`.

Functions:
    - set_default_timezone / get_default_timezone: Local timezone configuration
    - dt_now_utc: Current UTC datetime (the only clock read)
    - dt_today_local: Today's date in local timezone
    - as_utc / as_local: Timezone conversion
    - start_of_day: Normalize date/datetime to its local calendar day
    - dt_parse_day / dt_parse_datetime: Parse ISO strings
    - days_between: Signed whole-day difference
    - iter_days: Inclusive ascending day iterator
    - iso_weekday: ISO weekday number (1=Monday ... 7=Sunday)
    - week_start_for / week_bounds / same_week / week_key: Calendar week helpers
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
import logging
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil.relativedelta import MO, SU, relativedelta

if TYPE_CHECKING:
    from collections.abc import Iterator

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# These mirror const.py values but are defined locally for purity.
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

WEEK_START_MONDAY = "monday"
WEEK_START_SUNDAY = "sunday"

_WEEK_START_ANCHORS = {
    WEEK_START_MONDAY: MO(-1),
    WEEK_START_SUNDAY: SU(-1),
}


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware).

    Managers call this once at the top of an operation and pass the value
    down. Engines never call it.
    """
    return datetime.now(UTC)


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Example:
        datetime.date(2025, 4, 7)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).date()


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_utc(dt_obj: datetime) -> datetime:
    """Convert a datetime to UTC timezone.

    Naive datetimes are assumed to be in the default timezone.
    """
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=DEFAULT_TIME_ZONE)
    return dt_obj.astimezone(UTC)


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone.

    Args:
        dt_obj: Datetime object. Naive values are assumed to be UTC.
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        # Assume it's in UTC if naive
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(tz_info)


def start_of_day(value: date | datetime, tz: ZoneInfo | None = None) -> date:
    """Normalize a date or datetime to its local calendar day.

    Datetimes are converted to the local timezone before truncation, so an
    event at 23:30 local time belongs to that local day even if its UTC
    timestamp has already rolled over.

    Args:
        value: A `date` (returned unchanged) or `datetime`
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        The calendar day as `datetime.date`
    """
    if isinstance(value, datetime):
        return as_local(value, tz).date()
    return value


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse_day(value: str | date | datetime | None) -> date | None:
    """Safely parse a calendar day.

    Accepts an ISO date ("2025-04-07"), an ISO datetime (converted to its
    local day), or an existing date/datetime.

    Returns:
        datetime.date or None if parsing fails.
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return start_of_day(value)
    if not isinstance(value, str) or not value:
        return None

    try:
        return date.fromisoformat(value)
    except ValueError:
        pass

    parsed = dt_parse_datetime(value)
    if parsed is None:
        _LOGGER.debug("DEBUG: Could not parse calendar day from '%s'", value)
        return None
    return start_of_day(parsed)


def dt_parse_datetime(value: str | datetime | None) -> datetime | None:
    """Parse an ISO datetime string into a timezone-aware UTC datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    try:
        return as_utc(datetime.fromisoformat(value))
    except (TypeError, ValueError):
        return None


# ==============================================================================
# Day Arithmetic
# ==============================================================================


def days_between(start: date, end: date) -> int:
    """Return the signed number of whole calendar days from start to end."""
    return (end - start).days


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end inclusive (ascending).

    Yields nothing when end precedes start.
    """
    current = start
    step = timedelta(days=1)
    while current <= end:
        yield current
        current += step


def iso_weekday(day: date) -> int:
    """Return the ISO weekday number (1=Monday ... 7=Sunday)."""
    return day.isoweekday()


# ==============================================================================
# Calendar Weeks
# ==============================================================================


def week_start_for(day: date, week_start: str = WEEK_START_MONDAY) -> date:
    """Return the first day of the calendar week containing `day`.

    Args:
        day: Any calendar day
        week_start: "monday" (ISO weeks) or "sunday"

    Raises:
        ValueError: If week_start is not a known convention
    """
    try:
        anchor = _WEEK_START_ANCHORS[week_start]
    except KeyError as err:
        raise ValueError(f"Unknown week start convention: {week_start}") from err
    return day + relativedelta(weekday=anchor)


def week_bounds(day: date, week_start: str = WEEK_START_MONDAY) -> tuple[date, date]:
    """Return (first_day, last_day) of the calendar week containing `day`."""
    first = week_start_for(day, week_start)
    return first, first + timedelta(days=6)


def same_week(first: date, second: date, week_start: str = WEEK_START_MONDAY) -> bool:
    """Return True when both days fall in the same calendar week."""
    return week_start_for(first, week_start) == week_start_for(second, week_start)


def week_key(day: date, week_start: str = WEEK_START_MONDAY) -> str:
    """Return a stable storage key for the week containing `day`.

    The key is the ISO date of the week's first day, e.g. "2025-04-07".
    """
    return week_start_for(day, week_start).isoformat()

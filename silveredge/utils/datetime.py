# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for the Silver Edge progress service.

Design Decisions:
-----------------
1. All timestamps are stored in UTC
2. All Python datetimes are timezone-aware (with timezone.utc)
3. Calendar days (streaks, attendance windows) are derived in one
   configurable timezone via local_day()

Usage:
------
    from silveredge.utils.datetime import utc_now, local_day

    now = utc_now()
    today = local_day(now, "Europe/London")
"""

from datetime import date, datetime, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


@lru_cache(maxsize=16)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def local_day(dt: datetime, tz_name: str = "UTC") -> date:
    """Get the calendar day of a moment in the given timezone.

    Args:
        dt: The moment (naive values are treated as UTC).
        tz_name: IANA timezone name.

    Returns:
        The calendar date in that timezone.
    """
    return ensure_utc(dt).astimezone(_zone(tz_name)).date()


def format_iso(dt: datetime | None) -> str | None:
    """Format a datetime as ISO 8601 string.

    Args:
        dt: Datetime to format.

    Returns:
        ISO 8601 formatted string or None.
    """
    if dt is None:
        return None

    return ensure_utc(dt).isoformat()

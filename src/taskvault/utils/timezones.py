"""Time zone lookups."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import tzlocal


def get_system_timezone() -> str:
    """Detect the IANA name of the system time zone (e.g. "Europe/Berlin")."""
    tz = tzlocal.get_localzone()
    return str(tz.key) if hasattr(tz, "key") else str(tz)


def get_zone(name: str | None) -> ZoneInfo | None:
    """Resolve an IANA zone name; None for a missing name."""
    if not name:
        return None
    return ZoneInfo(name)


def is_valid_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def utc_offset_millis(zone: ZoneInfo | None, millis: int) -> int:
    """Return the UTC offset of *zone* at the instant *millis*, in milliseconds."""
    if zone is None:
        return 0
    offset = datetime.fromtimestamp(millis / 1000, zone).utcoffset()
    return int(offset.total_seconds() * 1000) if offset else 0

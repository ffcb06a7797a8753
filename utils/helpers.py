"""Helper utilities for Pressbox."""

import time
from datetime import datetime, time as dt_time
from typing import Optional
from zoneinfo import ZoneInfo


def start_of_local_day(tz: Optional[str] = None, now: Optional[datetime] = None) -> int:
    """
    Epoch seconds of today's local midnight.

    Uses the named IANA zone when given, the host's local zone otherwise.
    """
    zone = ZoneInfo(tz) if tz else None
    if now is None:
        now = datetime.now(zone)
    elif zone:
        now = now.astimezone(zone)
    elif now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)

    # Offset is resolved for midnight itself, not carried over from `now`
    midnight = datetime.combine(now.date(), dt_time(), tzinfo=zone)
    return int(midnight.timestamp())


def format_relative_time(created_utc: int, now: Optional[float] = None) -> str:
    """Compact age of a post: 'just now', '5m', '3h', '2d'."""
    now = time.time() if now is None else now
    diff = max(0, now - created_utc)
    minutes = int(diff // 60)
    hours = int(diff // 3600)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m"
    if hours < 24:
        return f"{hours}h"
    return f"{int(diff // 86400)}d"

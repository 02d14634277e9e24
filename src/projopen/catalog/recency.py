"""Time-window rules built on a project's last-opened timestamp."""

from __future__ import annotations

import time
from typing import Literal, Optional

MINUTE = 60 * 1000
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
MONTH = 30 * DAY

RECENT_DAYS = 7
STALE_DAYS = 90


def now_ms() -> int:
    """Return the current time in epoch milliseconds."""
    return int(time.time() * 1000)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def format_relative_time(timestamp: Optional[int], now: Optional[int] = None) -> Optional[str]:
    """Describe how long ago ``timestamp`` was, e.g. ``"3 hours ago"``.

    Weeks are 7 days and months 30 days. A missing timestamp yields None.
    """
    if timestamp is None:
        return None

    diff = (now if now is not None else now_ms()) - timestamp
    if diff < MINUTE:
        return "just now"
    if diff < HOUR:
        return _plural(diff // MINUTE, "minute")
    if diff < DAY:
        return _plural(diff // HOUR, "hour")
    if diff < WEEK:
        return _plural(diff // DAY, "day")
    if diff < MONTH:
        return _plural(diff // WEEK, "week")
    return _plural(diff // MONTH, "month")


def get_recency_indicator(
    timestamp: Optional[int], now: Optional[int] = None
) -> Optional[Literal["blue", "red"]]:
    """Return ``blue`` for projects opened within a day, ``red`` for stale ones."""
    if timestamp is None:
        return None

    diff = (now if now is not None else now_ms()) - timestamp
    if diff < DAY:
        return "blue"
    if diff >= STALE_DAYS * DAY:
        return "red"
    return None


def is_recent_project(timestamp: Optional[int], now: Optional[int] = None) -> bool:
    """Return whether a project was opened within the recent window.

    Args:
        timestamp: Last-opened time in epoch milliseconds, if any.
        now: Reference time in epoch milliseconds; defaults to the current time.

    Returns:
        bool: True when opened less than ``RECENT_DAYS`` ago.
    """
    if timestamp is None:
        return False
    return (now if now is not None else now_ms()) - timestamp < RECENT_DAYS * DAY


def is_stale_project(timestamp: Optional[int], now: Optional[int] = None) -> bool:
    """Return whether a project has gone unopened for at least ``STALE_DAYS``.

    Args:
        timestamp: Last-opened time in epoch milliseconds, if any.
        now: Reference time in epoch milliseconds; defaults to the current time.

    Returns:
        bool: False for projects that were never opened.
    """
    if timestamp is None:
        return False
    return (now if now is not None else now_ms()) - timestamp >= STALE_DAYS * DAY


__all__ = [
    "MINUTE",
    "HOUR",
    "DAY",
    "WEEK",
    "MONTH",
    "RECENT_DAYS",
    "STALE_DAYS",
    "now_ms",
    "format_relative_time",
    "get_recency_indicator",
    "is_recent_project",
    "is_stale_project",
]

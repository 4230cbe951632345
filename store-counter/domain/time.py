"""
Domain time utilities (pure).

Centralized timestamp validation and local-calendar boundary helpers.

Sale timestamps are stored in UTC. Reporting windows (day, week, month) are
computed against the store's local calendar, so boundaries are built in a
local zone and then compared as aware instants.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces the requirement that stored timestamps are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def require_aware_timestamp(name: str, value: datetime) -> None:
    """Reference instants may carry any offset, but must carry one."""

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_utc_datetime(value: object) -> datetime:
    """
    Parse a persisted timestamp into a timezone-aware UTC datetime.

    Accepts ISO-8601 strings, including the trailing 'Z' form written by
    JavaScript's Date.toISOString(). Naive values are assumed to be UTC.
    """

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def local_midnight(day: date, tz: Optional[tzinfo] = None) -> datetime:
    """
    Aware datetime for 00:00 of `day` in `tz`.

    With no explicit zone the system zone resolves the offset for that wall
    time, so a DST change between `day` and today does not shift the result.
    """

    if tz is None:
        return datetime.combine(day, time(0, 0)).astimezone()
    return datetime.combine(day, time(0, 0), tzinfo=tz)


def to_local(now: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """
    Express `now` in the store's local zone.

    With no explicit zone, the system local zone is used (the same zone a
    browser's Date object works in).
    """

    require_aware_timestamp("now", now)
    if tz is None:
        return now.astimezone()
    return now.astimezone(tz)


def start_of_day(now: datetime, tz: Optional[tzinfo] = None) -> datetime:
    local = to_local(now, tz)
    return local_midnight(local.date(), tz)


def start_of_week(now: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """
    Local midnight of the most recent Sunday (day-of-week index 0).

    Python numbers Monday as 0, so Sunday-based index = (weekday + 1) % 7.
    """

    local = to_local(now, tz)
    days_since_sunday = (local.weekday() + 1) % 7
    return local_midnight(local.date() - timedelta(days=days_since_sunday), tz)


def start_of_month(now: datetime, tz: Optional[tzinfo] = None) -> datetime:
    local = to_local(now, tz)
    return local_midnight(local.date().replace(day=1), tz)

"""
Domain: Reporting periods and their windows.

Window rules (all boundaries are local midnights):
- DAILY:   start = midnight of `now`'s day
- WEEKLY:  start = midnight of the most recent Sunday (day index 0)
- MONTHLY: start = midnight of the 1st of `now`'s month

A window is the half-open interval [start, +inf): an event belongs to it iff
event.timestamp >= start. There is no upper bound.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from enum import Enum
from typing import Optional

from .time import start_of_day, start_of_month, start_of_week


class Period(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    def window_start(self, now: datetime, tz: Optional[tzinfo] = None) -> datetime:
        """
        Resolve the inclusive start of this period's window for `now`.

        Deterministic given (`now`, `tz`); `now` must be timezone-aware.
        """

        if self is Period.DAILY:
            return start_of_day(now, tz)
        if self is Period.WEEKLY:
            return start_of_week(now, tz)
        return start_of_month(now, tz)

    @staticmethod
    def parse(value: str) -> "Period":
        """
        Resolve a Period from user input (case-insensitive).

        Raises ValueError for anything outside {daily, weekly, monthly}.
        """

        try:
            return Period(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Invalid period {value!r}. Must be one of: daily, weekly, monthly"
            ) from None

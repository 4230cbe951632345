"""
Stats service for windowed sales summaries.

summarize() is a pure function of (log, period, now, tz): it never mutates
the log and returns identical output for identical input. Totals are
recomputed from the full log on every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Optional, Sequence, Tuple

from domain.money import format_currency
from domain.period import Period
from domain.sale import SaleEvent

RECENT_SALES_LIMIT: int = 20


@dataclass(frozen=True, slots=True)
class Summary:
    """
    Totals over the sales whose timestamp falls in [window_start, +inf).

    recent: up to 20 of the included sales, most recent first.
    """

    period: Period
    window_start: datetime
    item_count: int
    revenue: Decimal
    cost: Decimal
    recent: Tuple[SaleEvent, ...]

    @property
    def profit(self) -> Decimal:
        return self.revenue - self.cost

    @property
    def is_profitable(self) -> bool:
        return self.profit >= 0

    def formatted(self) -> dict[str, str]:
        """Display strings, rounded to cents."""

        return {
            "revenue": format_currency(self.revenue),
            "cost": format_currency(self.cost),
            "profit": format_currency(self.profit),
        }


def summarize(
    log: Sequence[SaleEvent],
    period: Period,
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> Summary:
    """
    Summarize the sales in `period`'s window as of `now`.

    Args:
        log: Full sale log in append order (read-only)
        period: DAILY, WEEKLY or MONTHLY
        now: Timezone-aware reference instant
        tz: Store-local zone for window boundaries (default: system local)

    Returns:
        Summary with item count, revenue, cost (profit derived) and recent sales

    Raises:
        ValueError: If `now` is naive

    Example:
        summary = summarize(state.sales, Period.DAILY, datetime.now(timezone.utc))
        print(f"{summary.item_count} items, profit {format_currency(summary.profit)}")
    """
    start = period.window_start(now, tz)

    included = [sale for sale in log if sale.timestamp >= start]

    item_count = 0
    revenue = Decimal("0")
    cost = Decimal("0")

    for sale in included:
        item_count += sale.quantity
        revenue += sale.revenue
        cost += sale.total_cost

    # Last N in log order, newest first
    recent = tuple(reversed(included[-RECENT_SALES_LIMIT:]))

    return Summary(
        period=period,
        window_start=start,
        item_count=item_count,
        revenue=revenue,
        cost=cost,
        recent=recent,
    )


__all__ = ["RECENT_SALES_LIMIT", "Summary", "summarize"]

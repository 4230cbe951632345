#!/usr/bin/env python3
"""
Sales Report Script

Prints revenue, cost and profit for the current day, week or month, followed
by the most recent sales in that window.

Usage:
    python sales_report.py
    python sales_report.py --period weekly
    python sales_report.py --period monthly --verbose
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.money import format_currency
from domain.period import Period
from repositories.settings import load_settings
from repositories.store import build_store
from services.counter_service import StoreCounter
from services.stats_service import Summary


def print_summary(summary: Summary) -> None:
    """Print a Summary as a fixed-width report."""
    print("=" * 60)
    print(f"{summary.period.value.upper()} SUMMARY (since {summary.window_start:%Y-%m-%d %H:%M %Z})")
    print("=" * 60)
    print(f"Items sold: {summary.item_count}")
    print(f"Revenue:    {format_currency(summary.revenue)}")
    print(f"Cost:       {format_currency(summary.cost)}")
    print(f"Profit:     {format_currency(summary.profit)}")
    print()

    if not summary.recent:
        print("No sales recorded")
        return

    print("Recent sales:")
    for sale in summary.recent:
        local = sale.timestamp.astimezone(summary.window_start.tzinfo)
        print(f"  {local:%Y-%m-%d %H:%M}  {sale.product_name:<24} {format_currency(sale.price):>10}")


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Print a sales summary for the current day, week or month",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Today's totals
  python sales_report.py

  # This week's totals (weeks start on Sunday)
  python sales_report.py --period weekly
        """
    )

    parser.add_argument(
        "--period",
        "-p",
        choices=[p.value for p in Period],
        default=Period.DAILY.value,
        help="Reporting window (default: daily)"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        settings = load_settings()
        counter = StoreCounter.open(build_store(settings), tz=settings.timezone, seed_defaults=False)
        print_summary(counter.summary(Period.parse(args.period)))
        return 0

    except KeyboardInterrupt:
        print("\n\nReport interrupted by user")
        return 130

    except Exception as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

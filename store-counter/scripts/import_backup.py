#!/usr/bin/env python3
"""
Backup Import Script

Replaces the product catalog and/or the sale log from a JSON backup file.

- A `products` key replaces the catalog; a `sales` key replaces the sale log.
- A missing key leaves that collection unchanged.
- The undo history is always cleared.
- A malformed file is rejected and nothing changes.

Usage:
    python import_backup.py store-counter-backup-2025-01-01.json
    python import_backup.py backup.json --yes
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.errors import MalformedImport
from repositories.settings import load_settings
from repositories.store import build_store
from services.counter_service import StoreCounter


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Import products and sales from a JSON backup file",
    )

    parser.add_argument(
        "file",
        help="Path to the backup JSON file"
    )

    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Do not ask for confirmation"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    path = Path(args.file)
    if not path.is_file():
        print(f"ERROR: File not found: {path}", file=sys.stderr)
        return 1

    if not args.yes:
        answer = input("Importing replaces current data and clears undo history. Continue? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Import cancelled")
            return 1

    try:
        settings = load_settings()
        counter = StoreCounter.open(build_store(settings), tz=settings.timezone, seed_defaults=False)
        result = counter.import_backup(path.read_bytes())

    except MalformedImport as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\n\nImport interrupted by user")
        return 130

    except Exception as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        return 1

    print("✓ Data imported successfully")
    print(f"  Products: {result.product_count}" + ("" if result.products_replaced else " (unchanged)"))
    print(f"  Sales:    {result.sale_count}" + ("" if result.sales_replaced else " (unchanged)"))
    if counter.state.persistence_degraded:
        print("WARNING: storage unavailable; imported data was not saved", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Backup Export Script

Writes the product catalog and the sale log to a JSON backup file in the
same format as the API's export endpoint.

Usage:
    python export_backup.py
    python export_backup.py --output backups/today.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from repositories.settings import load_settings
from repositories.store import build_store
from services.backup_service import backup_filename
from services.counter_service import StoreCounter


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Export products and sales to a JSON backup file",
    )

    parser.add_argument(
        "--output",
        "-o",
        help="Path to output JSON file (default: store-counter-backup-<date>.json)"
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

        now = counter.now()
        output = Path(args.output or backup_filename(now))
        data = counter.export(now)

        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

        print(f"✓ Exported {len(data['products'])} products and {len(data['sales'])} sales")
        print(f"Output file: {output}")
        return 0

    except KeyboardInterrupt:
        print("\n\nExport interrupted by user")
        return 130

    except Exception as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

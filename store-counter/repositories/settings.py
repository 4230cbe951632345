"""
Store settings (configuration).

Reads configuration from the environment, loading `store-counter/.env` first
if present. Nothing here touches storage; `repositories.store.build_store`
turns a StoreSettings into a PersistentStore.

Environment variables:
- STORE_COUNTER_DATA_DIR: primary storage directory (default: store-counter/data)
- STORE_COUNTER_BACKUP_DIR: secondary storage directory (default: <data dir>/backup)
- STORE_COUNTER_BACKUP_TTL_DAYS: secondary copy expiry in days (default: 365)
- STORE_COUNTER_TIMEZONE: IANA zone for day/week/month boundaries (default: system local)
- SUPABASE_URL / SUPABASE_KEY: when both are set, backups go to Supabase instead
- SUPABASE_BACKUP_TABLE: Supabase table for backups (default: store_documents)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_BACKUP_TTL_DAYS: int = 365
DEFAULT_BACKUP_TABLE: str = "store_documents"


@dataclass(frozen=True, slots=True)
class StoreSettings:
    data_dir: Path
    backup_dir: Path
    backup_ttl: timedelta
    timezone: Optional[ZoneInfo] = None
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    supabase_table: str = DEFAULT_BACKUP_TABLE

    @property
    def uses_supabase_backup(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def _parse_timezone(name: Optional[str]) -> Optional[ZoneInfo]:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise RuntimeError(
            f"Invalid STORE_COUNTER_TIMEZONE: {name!r}. "
            "Use an IANA zone name such as 'America/Chicago'."
        ) from None


def _parse_ttl_days(raw: Optional[str]) -> timedelta:
    if not raw:
        return timedelta(days=DEFAULT_BACKUP_TTL_DAYS)
    try:
        days = int(raw)
    except ValueError:
        raise RuntimeError(f"STORE_COUNTER_BACKUP_TTL_DAYS must be an integer, got {raw!r}") from None
    if days < 1:
        raise RuntimeError("STORE_COUNTER_BACKUP_TTL_DAYS must be >= 1")
    return timedelta(days=days)


def load_settings(env_file: Optional[Path] = None) -> StoreSettings:
    """
    Build StoreSettings from the environment.

    Raises:
        RuntimeError: If a variable is set to an invalid value.
    """

    load_dotenv(dotenv_path=env_file or PROJECT_ROOT / ".env")

    data_dir = Path(os.getenv("STORE_COUNTER_DATA_DIR") or PROJECT_ROOT / "data")
    backup_dir = Path(os.getenv("STORE_COUNTER_BACKUP_DIR") or data_dir / "backup")

    return StoreSettings(
        data_dir=data_dir,
        backup_dir=backup_dir,
        backup_ttl=_parse_ttl_days(os.getenv("STORE_COUNTER_BACKUP_TTL_DAYS")),
        timezone=_parse_timezone(os.getenv("STORE_COUNTER_TIMEZONE")),
        supabase_url=os.getenv("SUPABASE_URL") or None,
        supabase_key=os.getenv("SUPABASE_KEY") or None,
        supabase_table=os.getenv("SUPABASE_BACKUP_TABLE") or DEFAULT_BACKUP_TABLE,
    )


__all__ = ["StoreSettings", "load_settings"]

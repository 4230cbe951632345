"""
Persistent store (persistence).

Durable key-value storage for the three logical documents (products, sales,
undo). Every document is written to a primary medium and replicated, best
effort, to a secondary medium whose copies expire after a fixed, long TTL.

Contract:
- put(key, document): JSON-encode and write to primary, then secondary. A
  failing medium is logged; only when *both* fail is PersistenceUnavailable
  raised. No atomicity across media is attempted.
- get(key): primary value if present and parseable, else secondary value if
  present and parseable, else None. Read errors and corrupt JSON count as
  "absent" at that layer.

Known limitation: two processes sharing the same media are not coordinated;
the last write wins.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, List, Optional, Protocol

from domain.errors import PersistenceUnavailable
from repositories.settings import StoreSettings

logger = logging.getLogger(__name__)

PRODUCTS_KEY: str = "products"
SALES_KEY: str = "sales"
UNDO_KEY: str = "undo"


class StorageMedium(Protocol):
    """A place documents can be written to and read back from as text."""

    name: str

    def read(self, key: str) -> Optional[str]:
        ...

    def write(self, key: str, text: str) -> None:
        ...


class FileMedium:
    """
    One `<key>.json` file per key inside `directory`.

    Writes are atomic (temp file + os.replace). With a ttl, an entry whose
    file was last written more than ttl ago reads as absent.
    """

    def __init__(self, directory: Path, ttl: Optional[timedelta] = None, name: str = "file") -> None:
        self.directory = Path(directory)
        self.ttl = ttl
        self.name = name

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        if self.ttl is not None:
            age = time.time() - path.stat().st_mtime
            if age > self.ttl.total_seconds():
                return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, text: str) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class SupabaseMedium:
    """
    Documents stored as rows of a Supabase table.

    Expected schema:
        key text primary key,
        value text not null,
        expires_at_utc timestamptz not null
    """

    def __init__(self, client: Any, table: str, ttl: timedelta, name: str = "supabase") -> None:
        self.client = client
        self.table = table
        self.ttl = ttl
        self.name = name

    def read(self, key: str) -> Optional[str]:
        now = datetime.now(timezone.utc).isoformat()
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .gt("expires_at_utc", now)
            .limit(1)
            .execute()
        )
        error = getattr(response, "error", None)
        if error:
            raise RuntimeError(f"Failed to read {key!r}: {error}")

        rows = getattr(response, "data", None) or []
        if not rows:
            return None
        return str(rows[0]["value"])

    def write(self, key: str, text: str) -> None:
        expires_at = datetime.now(timezone.utc) + self.ttl
        payload: dict[str, Any] = {
            "key": key,
            "value": text,
            "expires_at_utc": expires_at.isoformat(),
        }
        response = self.client.table(self.table).upsert(payload).execute()
        error = getattr(response, "error", None)
        if error:
            raise RuntimeError(f"Failed to write {key!r}: {error}")


class PersistentStore:
    """Primary medium plus a best-effort secondary replica."""

    def __init__(self, primary: StorageMedium, secondary: Optional[StorageMedium] = None) -> None:
        self.primary = primary
        self.secondary = secondary

    @property
    def media(self) -> List[StorageMedium]:
        return [m for m in (self.primary, self.secondary) if m is not None]

    def put(self, key: str, document: Any) -> None:
        """
        Store `document` under `key` on every medium.

        Raises:
            PersistenceUnavailable: If no medium accepted the write.
            TypeError: If `document` is not JSON-serializable.
        """

        text = json.dumps(document, ensure_ascii=False)
        errors: List[str] = []

        for medium in self.media:
            try:
                medium.write(key, text)
            except Exception as e:
                errors.append(f"{medium.name}: {e}")
                logger.warning(
                    f"Storage medium '{medium.name}' rejected write for '{key}'",
                    extra={"medium": medium.name, "key": key, "error": str(e)},
                )

        if len(errors) == len(self.media):
            raise PersistenceUnavailable(key, errors)

    def get(self, key: str) -> Optional[Any]:
        """Return the first present, parseable copy of `key`, or None."""

        for medium in self.media:
            try:
                text = medium.read(key)
            except Exception as e:
                logger.warning(
                    f"Storage medium '{medium.name}' failed to read '{key}'",
                    extra={"medium": medium.name, "key": key, "error": str(e)},
                )
                continue

            if text is None:
                continue

            try:
                document = json.loads(text)
            except json.JSONDecodeError:
                logger.warning(
                    f"Discarding unparseable '{key}' on medium '{medium.name}'",
                    extra={"medium": medium.name, "key": key, "preview": text[:100]},
                )
                continue

            if medium is not self.primary:
                logger.debug(f"Recovered '{key}' from secondary medium '{medium.name}'")
            return document

        return None


def build_store(settings: StoreSettings) -> PersistentStore:
    """Assemble the PersistentStore described by `settings`."""

    primary = FileMedium(settings.data_dir, name="primary")

    secondary: StorageMedium
    if settings.uses_supabase_backup:
        from repositories.client import get_supabase

        client = get_supabase(settings.supabase_url or "", settings.supabase_key or "")
        secondary = SupabaseMedium(client, settings.supabase_table, settings.backup_ttl)
    else:
        secondary = FileMedium(settings.backup_dir, ttl=settings.backup_ttl, name="backup")

    return PersistentStore(primary, secondary)


__all__ = [
    "PRODUCTS_KEY",
    "SALES_KEY",
    "UNDO_KEY",
    "StorageMedium",
    "FileMedium",
    "SupabaseMedium",
    "PersistentStore",
    "build_store",
]

"""
Tests for `repositories/store.py`.

Covers contract rules:
- put writes every medium; get prefers primary.
- get falls back to the secondary medium when the primary copy is missing,
  unreadable or corrupt.
- A single failing medium is tolerated; both failing raises PersistenceUnavailable.
- File media write atomically and honour their ttl.
"""

from __future__ import annotations

import json
import os
import time
from datetime import timedelta
from pathlib import Path

import pytest

from conftest import MemoryMedium
from domain.errors import PersistenceUnavailable
from repositories.settings import StoreSettings
from repositories.store import FileMedium, PersistentStore, SupabaseMedium, build_store


def test_put_writes_both_media_and_get_reads_primary(
    memory_store: PersistentStore, primary: MemoryMedium, secondary: MemoryMedium
) -> None:
    memory_store.put("sales", [{"id": "a"}])

    assert json.loads(primary.data["sales"]) == [{"id": "a"}]
    assert json.loads(secondary.data["sales"]) == [{"id": "a"}]

    secondary.data["sales"] = json.dumps([{"id": "stale"}])
    assert memory_store.get("sales") == [{"id": "a"}]


def test_get_falls_back_when_primary_cleared(
    memory_store: PersistentStore, primary: MemoryMedium
) -> None:
    memory_store.put("products", [{"id": "1"}])
    primary.data.clear()

    assert memory_store.get("products") == [{"id": "1"}]


def test_corrupt_primary_is_treated_as_absent(
    memory_store: PersistentStore, primary: MemoryMedium
) -> None:
    memory_store.put("undo", ["a", "b"])
    primary.data["undo"] = "{not json"

    assert memory_store.get("undo") == ["a", "b"]


def test_unreadable_primary_falls_back(memory_store: PersistentStore, primary: MemoryMedium) -> None:
    memory_store.put("undo", ["a"])
    primary.fail_reads = True

    assert memory_store.get("undo") == ["a"]


def test_corrupt_everywhere_reads_as_absent(
    memory_store: PersistentStore, primary: MemoryMedium, secondary: MemoryMedium
) -> None:
    primary.data["sales"] = "garbage"
    secondary.data["sales"] = "also garbage"

    assert memory_store.get("sales") is None
    assert memory_store.get("never-written") is None


def test_one_failing_medium_is_tolerated(
    memory_store: PersistentStore, primary: MemoryMedium, secondary: MemoryMedium
) -> None:
    primary.fail_writes = True
    memory_store.put("sales", [])

    assert "sales" not in primary.data
    assert secondary.data["sales"] == "[]"


def test_both_media_failing_raises(
    memory_store: PersistentStore, primary: MemoryMedium, secondary: MemoryMedium
) -> None:
    primary.fail_writes = True
    secondary.fail_writes = True

    with pytest.raises(PersistenceUnavailable) as excinfo:
        memory_store.put("sales", [])

    assert excinfo.value.key == "sales"
    assert len(excinfo.value.errors) == 2


def test_store_without_secondary() -> None:
    only = MemoryMedium("only")
    store = PersistentStore(only)
    store.put("k", {"a": 1})

    assert store.get("k") == {"a": 1}
    only.fail_writes = True
    with pytest.raises(PersistenceUnavailable):
        store.put("k", {})


def test_file_medium_round_trip_leaves_no_temp_files(tmp_path: Path) -> None:
    medium = FileMedium(tmp_path / "data")
    medium.write("sales", "[1, 2]")
    medium.write("sales", "[3]")

    assert medium.read("sales") == "[3]"
    assert sorted(p.name for p in (tmp_path / "data").iterdir()) == ["sales.json"]


def test_file_medium_ttl_expires_old_entries(tmp_path: Path) -> None:
    medium = FileMedium(tmp_path, ttl=timedelta(days=365))
    medium.write("products", "[]")
    assert medium.read("products") == "[]"

    old = time.time() - timedelta(days=366).total_seconds()
    os.utime(tmp_path / "products.json", (old, old))
    assert medium.read("products") is None


def test_file_medium_rejects_path_like_keys(tmp_path: Path) -> None:
    medium = FileMedium(tmp_path)
    for key in ("../x", "a/b", ".hidden", ""):
        with pytest.raises(ValueError):
            medium.write(key, "[]")


def test_build_store_uses_backup_directory_without_supabase(tmp_path: Path) -> None:
    settings = StoreSettings(
        data_dir=tmp_path / "data",
        backup_dir=tmp_path / "backup",
        backup_ttl=timedelta(days=30),
    )
    store = build_store(settings)
    store.put("sales", [])

    assert (tmp_path / "data" / "sales.json").read_text() == "[]"
    assert (tmp_path / "backup" / "sales.json").read_text() == "[]"
    assert store.secondary.ttl == timedelta(days=30)


class _FakeResponse:
    def __init__(self, data=None, error=None) -> None:
        self.data = data
        self.error = error


class _FakeTable:
    """Records the query chain and answers from an in-memory row dict."""

    def __init__(self, rows: dict) -> None:
        self.rows = rows
        self.filters: dict = {}
        self.pending = None

    def select(self, _columns: str) -> "_FakeTable":
        return self

    def eq(self, column: str, value: str) -> "_FakeTable":
        self.filters[column] = value
        return self

    def gt(self, column: str, value: str) -> "_FakeTable":
        self.filters[f"{column}>"] = value
        return self

    def limit(self, _n: int) -> "_FakeTable":
        return self

    def upsert(self, payload: dict) -> "_FakeTable":
        self.pending = payload
        return self

    def execute(self) -> _FakeResponse:
        if self.pending is not None:
            self.rows[self.pending["key"]] = self.pending
            return _FakeResponse(data=[self.pending])
        row = self.rows.get(self.filters["key"])
        if row is None or row["expires_at_utc"] <= self.filters["expires_at_utc>"]:
            return _FakeResponse(data=[])
        return _FakeResponse(data=[{"value": row["value"]}])


class _FakeSupabase:
    def __init__(self) -> None:
        self.rows: dict = {}
        self.tables: list = []

    def table(self, name: str) -> _FakeTable:
        self.tables.append(name)
        return _FakeTable(self.rows)


def test_supabase_medium_round_trip_and_expiry() -> None:
    client = _FakeSupabase()
    medium = SupabaseMedium(client, "store_documents", ttl=timedelta(days=365))

    medium.write("sales", "[1]")
    assert medium.read("sales") == "[1]"
    assert medium.read("undo") is None
    assert set(client.tables) == {"store_documents"}

    client.rows["sales"]["expires_at_utc"] = "2000-01-01T00:00:00+00:00"
    assert medium.read("sales") is None


def test_supabase_medium_as_secondary_backs_up_primary() -> None:
    primary = MemoryMedium("primary")
    store = PersistentStore(primary, SupabaseMedium(_FakeSupabase(), "store_documents", ttl=timedelta(days=365)))

    store.put("products", [{"id": "1"}])
    primary.data.clear()

    assert store.get("products") == [{"id": "1"}]


def test_supabase_medium_surfaces_api_errors() -> None:
    class _ErrorTable(_FakeTable):
        def execute(self) -> _FakeResponse:
            return _FakeResponse(error="permission denied")

    class _ErrorClient:
        def table(self, _name: str) -> _ErrorTable:
            return _ErrorTable({})

    medium = SupabaseMedium(_ErrorClient(), "store_documents", ttl=timedelta(days=1))
    with pytest.raises(RuntimeError):
        medium.write("sales", "[]")
    with pytest.raises(RuntimeError):
        medium.read("sales")


def test_get_supabase_requires_credentials() -> None:
    from repositories.client import get_supabase

    with pytest.raises(RuntimeError):
        get_supabase("", "key")
    with pytest.raises(RuntimeError):
        get_supabase("https://example.supabase.co", "")

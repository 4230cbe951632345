"""
Tests for the command-line scripts in `scripts/`.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from scripts import import_backup

_VARS = (
    "STORE_COUNTER_DATA_DIR",
    "STORE_COUNTER_BACKUP_DIR",
    "STORE_COUNTER_BACKUP_TTL_DAYS",
    "STORE_COUNTER_TIMEZONE",
    "SUPABASE_URL",
    "SUPABASE_KEY",
    "SUPABASE_BACKUP_TABLE",
)


@pytest.fixture
def backup_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for name in _VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("STORE_COUNTER_DATA_DIR", str(tmp_path / "data"))

    path = tmp_path / "store-counter-backup-2025-01-15.json"
    path.write_text(json.dumps({"sales": []}))
    return path


def test_import_script_imports_backup(
    backup_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    monkeypatch.setattr(sys, "argv", ["import_backup.py", str(backup_file), "--yes"])

    assert import_backup.main() == 0
    assert "Data imported successfully" in capsys.readouterr().out
    assert json.loads((tmp_path / "data" / "sales.json").read_text()) == []


def test_import_script_reports_bad_configuration(
    backup_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    monkeypatch.setenv("STORE_COUNTER_TIMEZONE", "Not/AZone")
    monkeypatch.setattr(sys, "argv", ["import_backup.py", str(backup_file), "--yes"])

    assert import_backup.main() == 1
    assert "ERROR" in capsys.readouterr().err


def test_import_script_rejects_malformed_file(
    backup_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    backup_file.write_text("{broken")
    monkeypatch.setattr(sys, "argv", ["import_backup.py", str(backup_file), "--yes"])

    assert import_backup.main() == 1
    assert "ERROR" in capsys.readouterr().err

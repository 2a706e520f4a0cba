import json
from pathlib import Path

import pytest

from settings_store import DashboardSettings, load_settings, save_settings
from sheet_source import DEFAULT_EXPENSE_SHEET


def test_settings_roundtrip(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "settings.json"
    saved = save_settings(DashboardSettings("sheet-id-123", "Expenses"), path=str(target))

    assert saved == target
    loaded = load_settings(str(target))
    assert loaded == DashboardSettings("sheet-id-123", "Expenses")
    assert loaded.is_configured


def test_missing_settings_file_returns_defaults(tmp_path: Path) -> None:
    loaded = load_settings(str(tmp_path / "missing.json"))

    assert loaded.spreadsheet_id == ""
    assert loaded.expense_sheet_name == DEFAULT_EXPENSE_SHEET
    assert not loaded.is_configured


def test_settings_accept_camel_case_blob(tmp_path: Path) -> None:
    target = tmp_path / "settings.json"
    target.write_text(json.dumps({"spreadsheetId": " abc ", "expenseSheetName": ""}), encoding="utf-8")

    loaded = load_settings(str(target))
    assert loaded.spreadsheet_id == "abc"
    assert loaded.expense_sheet_name == DEFAULT_EXPENSE_SHEET


def test_settings_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "env_settings.json"
    monkeypatch.setenv("LEDGER_SETTINGS_PATH", str(target))

    save_settings(DashboardSettings("from-env", "Sheet1"))
    assert target.exists()
    assert load_settings().spreadsheet_id == "from-env"


def test_corrupt_settings_file_raises(tmp_path: Path) -> None:
    target = tmp_path / "settings.json"
    target.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError):
        load_settings(str(target))

"""Local persistence for the dashboard connection settings."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from sheet_source import DEFAULT_EXPENSE_SHEET

DEFAULT_SETTINGS_PATH = "data/dashboard_settings.json"
SETTINGS_PATH_ENV = "LEDGER_SETTINGS_PATH"


@dataclass(frozen=True)
class DashboardSettings:
    spreadsheet_id: str = ""
    expense_sheet_name: str = DEFAULT_EXPENSE_SHEET

    @property
    def is_configured(self) -> bool:
        return bool(self.spreadsheet_id)


def default_settings_path() -> str:
    return os.getenv(SETTINGS_PATH_ENV) or DEFAULT_SETTINGS_PATH


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def settings_from_dict(raw: Any) -> DashboardSettings:
    """Build settings from a decoded JSON object, ignoring unknown keys."""
    if not isinstance(raw, dict):
        return DashboardSettings()
    return DashboardSettings(
        spreadsheet_id=_clean_text(raw.get("spreadsheet_id", raw.get("spreadsheetId"))),
        expense_sheet_name=_clean_text(raw.get("expense_sheet_name", raw.get("expenseSheetName")))
        or DEFAULT_EXPENSE_SHEET,
    )


def load_settings(path: str | None = None) -> DashboardSettings:
    """Load settings from disk; a missing file gives the defaults."""
    target = Path(path or default_settings_path()).expanduser()
    if not target.exists():
        return DashboardSettings()
    return settings_from_dict(json.loads(target.read_text(encoding="utf-8")))


def save_settings(settings: DashboardSettings, path: str | None = None) -> Path:
    """Save settings to disk and return the written path."""
    target = Path(path or default_settings_path()).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(settings_from_dict(asdict(settings)))
    target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return target

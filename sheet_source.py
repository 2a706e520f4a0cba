"""Published Google Sheet reader for the expense form responses."""

from __future__ import annotations

import json
import re
from typing import Any
from urllib.parse import quote

import pandas as pd
import requests

from logging_setup import get_logger
from parsing import TRANSACTION_COLUMNS, coerce_transactions

logger = get_logger("ledger.sheet_source")

GVIZ_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/gviz/tq?tqx=out:json&sheet={sheet}"
DEFAULT_EXPENSE_SHEET = "家計簿【支出】（回答）"

_SPREADSHEET_URL_RE = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")
_BARE_ID_RE = re.compile(r"[a-zA-Z0-9-_]{20,}")
_GVIZ_WRAPPER_RE = re.compile(r"google\.visualization\.Query\.setResponse\((.+)\);?\s*$", re.DOTALL)
_GVIZ_DATE_RE = re.compile(r"Date\((\d+),(\d+),(\d+)")


class SheetFetchError(RuntimeError):
    """The sheet could not be downloaded or understood."""


class SheetResponseError(SheetFetchError):
    """The export endpoint answered with something other than a gviz payload."""


def extract_spreadsheet_id(url_or_id: str) -> str | None:
    """Spreadsheet id from a sharing URL, or the input itself when it is a bare id."""
    text = str(url_or_id or "").strip()
    if not text:
        return None
    match = _SPREADSHEET_URL_RE.search(text)
    if match:
        return match.group(1)
    if _BARE_ID_RE.fullmatch(text):
        return text
    return None


def build_sheet_url(spreadsheet_id: str, sheet_name: str = DEFAULT_EXPENSE_SHEET) -> str:
    return GVIZ_URL.format(spreadsheet_id=spreadsheet_id, sheet=quote(sheet_name, safe=""))


def parse_gviz_response(text: str) -> list[list[Any]]:
    """Cell values of every row in a gviz JSON response."""
    match = _GVIZ_WRAPPER_RE.search(str(text or "").strip())
    if not match:
        raise SheetResponseError("Invalid response format from Google Sheets")
    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError as exc:
        raise SheetResponseError(f"Could not decode Google Sheets payload: {exc}") from exc

    rows: list[list[Any]] = []
    for row in (payload.get("table") or {}).get("rows") or []:
        cells = row.get("c") or []
        rows.append([cell.get("v") if isinstance(cell, dict) else None for cell in cells])
    return rows


def parse_sheet_date_value(value: Any) -> str:
    """Normalise a gviz cell into a date string; ``Date(2024,0,5)`` is 2024/01/05."""
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        match = _GVIZ_DATE_RE.search(value)
        if match:
            year, month, day = (int(part) for part in match.groups())
            return f"{year}/{month + 1:02d}/{day:02d}"
        return value
    return str(value)


def _cell(row: list[Any], index: int) -> Any:
    return row[index] if index < len(row) else None


def _to_amount(value: Any) -> float:
    try:
        if value is None:
            return 0.0
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def rows_to_transactions(rows: list[list[Any]]) -> pd.DataFrame:
    """Map form-response rows to transactions, dropping the header and non-positive amounts."""
    records = []
    for row in rows[1:]:
        custom = _cell(row, 2)
        records.append(
            {
                "Timestamp": parse_sheet_date_value(_cell(row, 0)),
                "Item": str(_cell(row, 1) or ""),
                "CustomDate": parse_sheet_date_value(custom) if custom else None,
                "Category": str(_cell(row, 3) or ""),
                "Amount": _to_amount(_cell(row, 4)),
                "IndividualBurden": str(_cell(row, 5) or ""),
                "ExpenseDate": parse_sheet_date_value(_cell(row, 6)),
            }
        )
    df = coerce_transactions(pd.DataFrame(records, columns=TRANSACTION_COLUMNS))
    return df[df["Amount"] > 0].reset_index(drop=True)


def fetch_expense_transactions(
    spreadsheet: str,
    sheet_name: str = DEFAULT_EXPENSE_SHEET,
    timeout: float = 10.0,
    session: requests.Session | None = None,
) -> pd.DataFrame:
    """Download and normalise the expense sheet of a published spreadsheet."""
    spreadsheet_id = extract_spreadsheet_id(spreadsheet) or str(spreadsheet or "").strip()
    if not spreadsheet_id:
        raise SheetFetchError("Spreadsheet ID is not configured.")

    url = build_sheet_url(spreadsheet_id, sheet_name or DEFAULT_EXPENSE_SHEET)
    http = session or requests
    logger.info("Fetching sheet %r from spreadsheet %s", sheet_name, spreadsheet_id)
    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Sheet fetch failed: %s", exc)
        raise SheetFetchError(f"Failed to fetch expense data: {exc}") from exc

    try:
        rows = parse_gviz_response(response.text)
    except SheetResponseError as exc:
        logger.warning("Sheet response rejected: %s", exc)
        raise

    transactions = rows_to_transactions(rows)
    logger.info("Loaded %d expense row(s)", len(transactions))
    return transactions

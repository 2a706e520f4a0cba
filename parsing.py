"""Transaction normalisation and date resolution helpers."""

from __future__ import annotations

import datetime
import warnings
from typing import Any, Iterable, Mapping

import pandas as pd

# strptime accepts unpadded fields, so "%Y/%m/%d" also covers yyyy/M/d.
DATE_FORMATS = ("%Y/%m/%d", "%Y-%m-%d")

TRANSACTION_COLUMNS = [
    "Timestamp",
    "Item",
    "CustomDate",
    "Category",
    "Amount",
    "IndividualBurden",
    "ExpenseDate",
]

COLUMN_ALIASES = {
    "timestamp": "Timestamp",
    "item": "Item",
    "customDate": "CustomDate",
    "custom_date": "CustomDate",
    "category": "Category",
    "amount": "Amount",
    "individualBurden": "IndividualBurden",
    "individual_burden": "IndividualBurden",
    "expenseDate": "ExpenseDate",
    "expense_date": "ExpenseDate",
    "incomeDate": "IncomeDate",
    "income_date": "IncomeDate",
}

# Primary date first, then the manual override, then the form submission time.
DATE_PRIORITY = ("ExpenseDate", "IncomeDate", "CustomDate", "Timestamp")


def _free_form_date(text: str) -> datetime.date | None:
    # Words such as "today" or "now" are not dates here.
    if not any(ch.isdigit() for ch in text):
        return None
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(text, errors="coerce")
        except Exception:
            return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.date()


def _within_timestamp_range(day: datetime.date | None) -> datetime.date | None:
    if day is None:
        return None
    if not pd.Timestamp.min.date() < day <= pd.Timestamp.max.date():
        return None
    return day


def parse_date(value: Any) -> datetime.date | None:
    """Parse one raw date value; malformed input yields ``None``.

    Dates pandas cannot hold (roughly before 1677 or after 2262) count as
    unparseable so the next candidate gets a chance.
    """
    return _within_timestamp_range(_parse_raw_date(value))


def _parse_raw_date(value: Any) -> datetime.date | None:
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.date()
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, float) and pd.isna(value):
        return None

    text = str(value).strip()
    if not text:
        return None

    for fmt in DATE_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return _free_form_date(text)


def resolve_date(candidates: Iterable[Any]) -> datetime.date | None:
    """Return the first candidate that parses, in priority order."""
    for candidate in candidates:
        parsed = parse_date(candidate)
        if parsed is not None:
            return parsed
    return None


def record_date(record: Mapping[str, Any]) -> datetime.date | None:
    """Effective date of a transaction row or record mapping."""
    return resolve_date(record.get(field) for field in DATE_PRIORITY)


def coerce_transactions(records: Any) -> pd.DataFrame:
    """Return a transaction frame with the canonical columns present.

    Accepts a frame or any iterable of record mappings, with either the
    canonical column names or the camelCase sheet record keys.
    """
    if isinstance(records, pd.DataFrame):
        df = records.copy()
    elif records is None:
        df = pd.DataFrame()
    else:
        df = pd.DataFrame([dict(record) for record in records])

    df = df.rename(columns={k: v for k, v in COLUMN_ALIASES.items() if k in df.columns})
    for col in TRANSACTION_COLUMNS:
        if col not in df.columns:
            df[col] = 0 if col == "Amount" else ""

    df["Amount"] = pd.to_numeric(df["Amount"], errors="coerce").fillna(0)
    df["Category"] = df["Category"].fillna("").astype(str)
    df["Item"] = df["Item"].fillna("").astype(str)
    return df.reset_index(drop=True)


def resolve_transaction_dates(records: Any) -> pd.DataFrame:
    """Coerce records and attach a ``Date`` column (NaT where unresolvable)."""
    df = coerce_transactions(records)
    if df.empty:
        df["Date"] = pd.Series(dtype="datetime64[ns]")
        return df
    resolved = [record_date(row) for row in df.to_dict(orient="records")]
    df["Date"] = pd.to_datetime(pd.Series(resolved, index=df.index, dtype=object), errors="coerce")
    return df

"""Aggregations behind the household ledger dashboard.

Every function takes the full record set (a frame or an iterable of record
mappings) and recomputes from scratch. Records whose date cannot be resolved
or whose category is outside the taxonomy are skipped for the aggregate that
needs them; nothing here raises for a malformed record.
"""

from __future__ import annotations

import datetime
from typing import Any

import pandas as pd

from categorization import DEFAULT_TAXONOMY, CategoryTaxonomy
from logging_setup import get_logger
from parsing import parse_date, resolve_transaction_dates

logger = get_logger("ledger.analytics")

MONTH_LABEL_FORMAT = "%Y/%m"
RECENT_DATE_FORMAT = "%m/%d"
_EPOCH = pd.Timestamp(0)


def _as_date(value: Any = None) -> datetime.date:
    if value is None:
        return datetime.date.today()
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Not a date: {value!r}")
    return parsed


def month_start(value: Any = None) -> datetime.date:
    """First day of the month containing ``value`` (today when omitted)."""
    return _as_date(value).replace(day=1)


def shift_month(value: Any, months: int) -> datetime.date:
    """First day of the month ``months`` away from the month of ``value``."""
    start = month_start(value)
    index = start.year * 12 + (start.month - 1) + int(months)
    return datetime.date(index // 12, index % 12 + 1, 1)


def month_window(reference_date: Any = None, window_months: int = 12) -> list[datetime.date]:
    """Trailing window of month starts ending at the reference month, oldest first."""
    count = max(int(window_months), 0)
    anchor = month_start(reference_date)
    return [shift_month(anchor, offset) for offset in range(-(count - 1), 1)] if count else []


def selectable_months(reference_date: Any = None, count: int = 24) -> list[datetime.date]:
    """Months a user can pick, newest first, never past the reference month."""
    anchor = month_start(reference_date)
    return [shift_month(anchor, -offset) for offset in range(max(int(count), 0))]


def _month_key(value: datetime.date) -> str:
    return value.strftime(MONTH_LABEL_FORMAT)


def _target_year(year: int | None) -> int:
    return int(year) if year else datetime.date.today().year


def _dated(records: Any) -> pd.DataFrame:
    df = resolve_transaction_dates(records)
    undated = int(df["Date"].isna().sum())
    if undated:
        logger.debug("Skipping %d record(s) without a resolvable date", undated)
    return df[df["Date"].notna()]


def _in_month(df: pd.DataFrame, month: datetime.date) -> pd.Series:
    return (df["Date"].dt.year == month.year) & (df["Date"].dt.month == month.month)


def _category_amounts(df: pd.DataFrame, taxonomy: CategoryTaxonomy) -> pd.Series:
    categories = list(taxonomy.categories)
    known = df[df["Category"].isin(categories)]
    summed = known.groupby("Category")["Amount"].sum()
    return summed.reindex(categories, fill_value=0).astype(float)


def _category_table(amounts: pd.Series, taxonomy: CategoryTaxonomy) -> pd.DataFrame:
    total = float(amounts.sum())
    out = pd.DataFrame({"Category": list(amounts.index), "Amount": amounts.to_numpy(dtype=float)})
    out["Percentage"] = out["Amount"].apply(lambda x: (x / total * 100.0) if total else 0.0)
    out["Color"] = out["Category"].map(taxonomy.color)
    return out


def monthly_totals(records: Any, window_months: int = 12, reference_date: Any = None) -> pd.DataFrame:
    """Total spending per month over a trailing window, empty months included."""
    keys = [_month_key(month) for month in month_window(reference_date, window_months)]
    df = _dated(records)
    summed = df.groupby(df["Date"].dt.strftime(MONTH_LABEL_FORMAT))["Amount"].sum()
    amounts = summed.reindex(keys, fill_value=0).astype(float)
    return pd.DataFrame({"Month": keys, "Amount": amounts.to_numpy(dtype=float)})


def month_total(records: Any, target_month: Any = None) -> float:
    """All spending in one month, regardless of category."""
    df = _dated(records)
    return float(df.loc[_in_month(df, month_start(target_month)), "Amount"].sum())


def category_totals(
    records: Any,
    target_month: Any = None,
    taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
) -> pd.DataFrame:
    """Amount, share and colour for every taxonomy category in one month."""
    df = _dated(records)
    scope = df[_in_month(df, month_start(target_month))]
    return _category_table(_category_amounts(scope, taxonomy), taxonomy)


def yearly_category_totals(
    records: Any,
    year: int | None = None,
    taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
) -> pd.DataFrame:
    """Same as ``category_totals`` over a whole calendar year."""
    df = _dated(records)
    scope = df[df["Date"].dt.year == _target_year(year)]
    return _category_table(_category_amounts(scope, taxonomy), taxonomy)


def _percent_change(current: float, previous: float) -> float:
    if previous > 0:
        return (current - previous) / previous * 100.0
    # Zero baseline: any new spending counts as a full 100% rise.
    return 100.0 if current > 0 else 0.0


def month_comparison(
    records: Any,
    target_month: Any = None,
    taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
) -> pd.DataFrame:
    """Per-category change against the previous month, largest swings first.

    Categories with nothing in either month are left out. Equal swings keep
    taxonomy order.
    """
    current_month = month_start(target_month)
    previous_month = shift_month(current_month, -1)
    df = _dated(records)
    current = _category_amounts(df[_in_month(df, current_month)], taxonomy)
    previous = _category_amounts(df[_in_month(df, previous_month)], taxonomy)

    out = pd.DataFrame(
        {
            "Category": list(current.index),
            "CurrentAmount": current.to_numpy(dtype=float),
            "PreviousAmount": previous.to_numpy(dtype=float),
        }
    )
    out = out[(out["CurrentAmount"] != 0) | (out["PreviousAmount"] != 0)].copy()
    out["Delta"] = out["CurrentAmount"] - out["PreviousAmount"]
    out["PercentChange"] = [
        _percent_change(curr, prev) for curr, prev in zip(out["CurrentAmount"], out["PreviousAmount"])
    ]
    out["Swing"] = out["Delta"].abs()
    out = out.sort_values("Swing", ascending=False, kind="stable")
    return out.drop(columns=["Swing"]).reset_index(drop=True)


def spending_ranking(
    records: Any,
    target_month: Any = None,
    top_n: int = 5,
    taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
) -> pd.DataFrame:
    """Top categories of a month by amount; ties keep taxonomy order."""
    table = category_totals(records, target_month, taxonomy)
    ranked = (
        table.sort_values("Amount", ascending=False, kind="stable")
        .head(max(int(top_n), 0))
        .reset_index(drop=True)
    )
    ranked.insert(0, "Rank", range(1, len(ranked) + 1))
    return ranked


def monthly_trend(
    records: Any,
    window_months: int = 6,
    reference_date: Any = None,
    taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
) -> pd.DataFrame:
    """Month x category spending matrix over a trailing window.

    Columns are the taxonomy categories seen at least once in the window, in
    taxonomy order; each month is zero-filled for those columns.
    """
    keys = [_month_key(month) for month in month_window(reference_date, window_months)]
    df = _dated(records)
    df = df.assign(Month=df["Date"].dt.strftime(MONTH_LABEL_FORMAT))
    scope = df[df["Month"].isin(keys) & df["Category"].isin(list(taxonomy.categories))]

    seen = set(scope["Category"])
    observed = [category for category in taxonomy if category in seen]
    if scope.empty:
        matrix = pd.DataFrame(index=keys, columns=observed, dtype=float)
    else:
        matrix = scope.groupby(["Month", "Category"])["Amount"].sum().unstack(fill_value=0)
    matrix = matrix.reindex(index=keys, columns=observed, fill_value=0).fillna(0).astype(float)
    matrix.index.name = "Month"
    matrix.columns.name = None
    return matrix


def monthly_trend_mapping(
    records: Any,
    window_months: int = 6,
    reference_date: Any = None,
    taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
) -> dict[str, dict[str, float]]:
    """``monthly_trend`` as an explicit month -> category -> amount mapping."""
    matrix = monthly_trend(records, window_months, reference_date, taxonomy)
    return {
        month: {category: float(matrix.at[month, category]) for category in matrix.columns}
        for month in matrix.index
    }


def year_category_pivot(
    records: Any,
    year: int | None = None,
    taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
    include_totals: bool = True,
) -> pd.DataFrame:
    """Taxonomy rows x 12 month columns with a row total.

    With ``include_totals`` a trailing ``Total`` row carries the per-month
    column totals and the grand total.
    """
    target_year = _target_year(year)
    df = _dated(records)
    in_year = df[df["Date"].dt.year == target_year]

    columns = {}
    for month in range(1, 13):
        scope = in_year[in_year["Date"].dt.month == month]
        columns[f"{target_year}/{month:02d}"] = _category_amounts(scope, taxonomy)

    pivot = pd.DataFrame(columns, index=list(taxonomy.categories))
    pivot.index.name = "Category"
    pivot["Total"] = pivot.sum(axis=1)
    if include_totals:
        pivot.loc["Total"] = pivot.sum(axis=0)
    return pivot


def yearly_summary(records: Any, year: int | None = None) -> dict[str, float]:
    """Year total and monthly average; every dated record counts."""
    target_year = _target_year(year)
    df = _dated(records)
    in_year = df[df["Date"].dt.year == target_year]

    total_expense = float(in_year["Amount"].sum())
    months_with_data = max(int(in_year["Date"].dt.month.nunique()), 1)
    return {
        "year": target_year,
        "total_expense": total_expense,
        "months_with_data": months_with_data,
        "average_monthly_expense": total_expense / months_with_data,
    }


def recent_transactions(records: Any, limit: int = 10) -> pd.DataFrame:
    """Newest transactions first; undated ones sort as oldest with a blank date."""
    df = resolve_transaction_dates(records)
    df = df.assign(SortDate=df["Date"].fillna(_EPOCH))
    latest = df.sort_values("SortDate", ascending=False, kind="stable").head(max(int(limit), 0))
    return pd.DataFrame(
        {
            "Date": latest["Date"].dt.strftime(RECENT_DATE_FORMAT).fillna("").to_numpy(),
            "Item": latest["Item"].to_numpy(),
            "Category": latest["Category"].to_numpy(),
            "Amount": latest["Amount"].astype(float).to_numpy(),
        }
    )


def format_currency(amount: float) -> str:
    """Whole-yen amount with thousands separators, e.g. ``¥12,345``."""
    if amount is None or pd.isna(amount):
        amount = 0
    value = int(round(float(amount)))
    sign = "-" if value < 0 else ""
    return f"{sign}¥{abs(value):,}"


def format_percentage(value: float) -> str:
    """Signed percentage with one decimal, e.g. ``+12.5%``."""
    return f"{'+' if value >= 0 else ''}{value:.1f}%"

"""Household ledger Streamlit entrypoint."""

from __future__ import annotations

import datetime

import pandas as pd
import streamlit as st

from analytics import (
    category_totals,
    month_comparison,
    month_total,
    monthly_totals,
    monthly_trend,
    recent_transactions,
    selectable_months,
    spending_ranking,
    year_category_pivot,
    yearly_category_totals,
    yearly_summary,
)
from dashboard_views import (
    render_metric_guide,
    render_month_headline,
    render_overview,
    render_transactions,
    render_year,
)
from logging_setup import configure_logging, get_logger
from parsing import resolve_transaction_dates
from settings_store import DashboardSettings, load_settings, save_settings
from sheet_source import SheetFetchError, extract_spreadsheet_id, fetch_expense_transactions

st.set_page_config(page_title="Household Ledger", page_icon="\U0001f4b4", layout="wide")

logger = get_logger("ledger.app")


@st.cache_data(show_spinner="Loading sheet...")
def _load_transactions(spreadsheet_id: str, sheet_name: str) -> pd.DataFrame:
    return fetch_expense_transactions(spreadsheet_id, sheet_name)


def _settings_sidebar(settings: DashboardSettings) -> DashboardSettings:
    with st.sidebar.expander("Spreadsheet connection", expanded=not settings.is_configured):
        with st.form(key="settings_form"):
            raw_id = st.text_input("Spreadsheet URL or ID", value=settings.spreadsheet_id)
            sheet_name = st.text_input("Expense sheet name", value=settings.expense_sheet_name)
            submit = st.form_submit_button("Save")
        st.caption("Publish the spreadsheet to the web before connecting.")

    if not submit:
        return settings

    spreadsheet_id = extract_spreadsheet_id(raw_id) or raw_id.strip()
    updated = DashboardSettings(spreadsheet_id=spreadsheet_id, expense_sheet_name=sheet_name.strip())
    path = save_settings(updated)
    logger.info("Saved settings to %s", path)
    _load_transactions.clear()
    return load_settings()


def _read_settings() -> DashboardSettings:
    try:
        return load_settings()
    except ValueError as exc:
        logger.warning("Settings file is unreadable: %s", exc)
        st.error(f"Could not read saved settings ({exc}). Save the connection again to replace them.")
        return DashboardSettings()


def _month_selector(today: datetime.date) -> datetime.date:
    months = selectable_months(today, count=36)
    return st.sidebar.selectbox(
        "Month",
        months,
        index=0,
        format_func=lambda m: m.strftime("%Y/%m"),
    )


def _year_selector(today: datetime.date, transactions: pd.DataFrame) -> int:
    dated = resolve_transaction_dates(transactions)["Date"].dropna()
    years = sorted({today.year, *dated.dt.year.astype(int).tolist()}, reverse=True)
    return st.sidebar.selectbox("Year", years, index=0)


def main() -> None:
    configure_logging()
    st.title("Household Ledger")

    settings = _settings_sidebar(_read_settings())
    if not settings.is_configured:
        st.info("Connect a published Google Sheet from the sidebar to start.")
        return

    if st.sidebar.button("Refresh data"):
        _load_transactions.clear()

    try:
        transactions = _load_transactions(settings.spreadsheet_id, settings.expense_sheet_name)
    except SheetFetchError as exc:
        st.error(str(exc))
        return

    today = datetime.date.today()
    view = st.sidebar.radio("Navigate", ["Overview", "Year", "Transactions", "Metric Guide"])
    selected_month = _month_selector(today)
    selected_year = _year_selector(today, transactions)
    month_label = selected_month.strftime("%Y/%m")

    st.sidebar.caption(f"{len(transactions):,} transaction(s) loaded.")

    summary = yearly_summary(transactions, selected_year)
    render_month_headline(month_label, month_total(transactions, selected_month), summary)

    if view == "Overview":
        render_overview(
            month_label,
            monthly_totals(transactions, 12, today),
            category_totals(transactions, selected_month),
            spending_ranking(transactions, selected_month),
            month_comparison(transactions, selected_month),
            monthly_trend(transactions, 6, today),
        )
    elif view == "Year":
        render_year(
            selected_year,
            summary,
            yearly_category_totals(transactions, selected_year),
            year_category_pivot(transactions, selected_year),
        )
    elif view == "Transactions":
        render_transactions(recent_transactions(transactions, limit=50))
    elif view == "Metric Guide":
        render_metric_guide()


if __name__ == "__main__":
    main()

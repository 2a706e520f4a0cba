"""Streamlit page renderers."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from analytics import format_currency, format_percentage
from categorization import DEFAULT_TAXONOMY, CategoryTaxonomy
from metric_guide import METRIC_GUIDE


def _currency_frame(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    out = df.copy()
    for col in columns:
        if col in out.columns:
            out[col] = out[col].apply(format_currency)
    return out


def _category_bar_chart(categories: pd.DataFrame) -> None:
    # One series per category so each bar takes its taxonomy colour.
    st.bar_chart(categories, x="Category", y="Amount", color="Color")


def render_month_headline(month_label: str, month_spending: float, summary: dict[str, float]) -> None:
    cols = st.columns(3)
    cols[0].metric(f"Spending in {month_label}", format_currency(month_spending))
    cols[1].metric(f"{summary['year']} total", format_currency(summary["total_expense"]))
    cols[2].metric(
        "Monthly average",
        format_currency(summary["average_monthly_expense"]),
        help=f"Over {summary['months_with_data']} month(s) with data.",
    )


def render_overview(
    month_label: str,
    monthly: pd.DataFrame,
    categories: pd.DataFrame,
    ranking: pd.DataFrame,
    comparison: pd.DataFrame,
    trend: pd.DataFrame,
    taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
) -> None:
    st.header("Overview")

    st.markdown("### Monthly spending")
    st.bar_chart(monthly.set_index("Month")[["Amount"]])

    left, right = st.columns(2)
    with left:
        st.markdown(f"### Categories in {month_label}")
        spent = categories[categories["Amount"] > 0]
        if spent.empty:
            st.info("No categorised spending in this month.")
        else:
            _category_bar_chart(spent)
            table = spent.assign(Share=spent["Percentage"].map(lambda v: f"{v:.1f}%"))
            st.dataframe(
                _currency_frame(table[["Category", "Amount", "Share"]], ["Amount"]),
                use_container_width=True,
                hide_index=True,
            )
    with right:
        st.markdown("### Top categories")
        st.dataframe(
            _currency_frame(ranking[["Rank", "Category", "Amount"]], ["Amount"]),
            use_container_width=True,
            hide_index=True,
        )

    st.markdown("### Change vs previous month")
    if comparison.empty:
        st.info("No spending in this month or the one before.")
    else:
        view = _currency_frame(comparison, ["CurrentAmount", "PreviousAmount", "Delta"])
        view["PercentChange"] = comparison["PercentChange"].map(format_percentage)
        st.dataframe(view, use_container_width=True, hide_index=True)

    st.markdown("### Category trend")
    if trend.columns.empty:
        st.info("No categorised spending in the trend window.")
    else:
        st.line_chart(trend, color=[taxonomy.color(category) for category in trend.columns])


def render_year(year: int, summary: dict[str, float], categories: pd.DataFrame, pivot: pd.DataFrame) -> None:
    st.header(f"{year} summary")

    cols = st.columns(3)
    cols[0].metric("Total spending", format_currency(summary["total_expense"]))
    cols[1].metric("Monthly average", format_currency(summary["average_monthly_expense"]))
    cols[2].metric("Months with data", f"{int(summary['months_with_data'])}")

    st.markdown("### Spending by category")
    spent = categories[categories["Amount"] > 0]
    if spent.empty:
        st.info("No categorised spending in this year.")
    else:
        _category_bar_chart(spent)

    st.markdown("### Category x month")
    st.dataframe(pivot.apply(lambda col: col.map(format_currency)), use_container_width=True, height=600)


def render_transactions(recent: pd.DataFrame) -> None:
    st.header("Recent transactions")
    if recent.empty:
        st.info("No transactions loaded.")
        return
    st.dataframe(_currency_frame(recent, ["Amount"]), use_container_width=True, hide_index=True)


def render_metric_guide() -> None:
    st.header("Metric Guide")
    st.caption("Definitions behind each figure on the dashboard.")
    st.dataframe(pd.DataFrame(METRIC_GUIDE), use_container_width=True, hide_index=True)

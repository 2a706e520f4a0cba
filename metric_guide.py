"""Human-readable metric definitions for the app."""

METRIC_GUIDE = [
    {
        "Metric": "Month spending",
        "Meaning": "Everything spent in the selected month, whatever the category.",
        "Formula": "sum(Amount) for records dated in the month",
    },
    {
        "Metric": "Monthly totals",
        "Meaning": "Spending per month over the trailing window; empty months show as zero.",
        "Formula": "sum(Amount) grouped by YYYY/MM",
    },
    {
        "Metric": "Category share",
        "Meaning": "Portion of the month's categorised spending that went to a category.",
        "Formula": "Category amount / sum(category amounts) * 100",
    },
    {
        "Metric": "Change vs last month",
        "Meaning": "How a category moved against the previous calendar month.",
        "Formula": "(Current - Previous) / Previous * 100; 100% when Previous is 0",
    },
    {
        "Metric": "Ranking",
        "Meaning": "Categories of the selected month ordered by amount; ties keep the category list order.",
        "Formula": "sort(category amounts, descending)",
    },
    {
        "Metric": "Category trend",
        "Meaning": "Month by month spending for every category seen in the window.",
        "Formula": "sum(Amount) grouped by month and category",
    },
    {
        "Metric": "Year total",
        "Meaning": "All spending dated in the selected year, including uncategorised rows.",
        "Formula": "sum(Amount) for records dated in the year",
    },
    {
        "Metric": "Monthly average",
        "Meaning": "Year total spread over the months that actually have spending.",
        "Formula": "Year total / max(months with data, 1)",
    },
    {
        "Metric": "Transaction date",
        "Meaning": "Expense date if filled in, else the custom date, else the form timestamp.",
        "Formula": "first parseable of ExpenseDate, CustomDate, Timestamp",
    },
]

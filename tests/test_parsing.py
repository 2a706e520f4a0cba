import datetime

import pandas as pd

from parsing import coerce_transactions, parse_date, record_date, resolve_date, resolve_transaction_dates


def test_parse_date_supports_known_formats() -> None:
    assert parse_date("2024/01/05") == datetime.date(2024, 1, 5)
    assert parse_date("2024-01-05") == datetime.date(2024, 1, 5)
    assert parse_date("2024/1/5") == datetime.date(2024, 1, 5)


def test_parse_date_falls_back_to_free_form() -> None:
    assert parse_date("2024/01/05 12:30:00") == datetime.date(2024, 1, 5)
    assert parse_date(datetime.datetime(2024, 2, 1, 8, 0)) == datetime.date(2024, 2, 1)
    assert parse_date(pd.Timestamp("2024-03-04")) == datetime.date(2024, 3, 4)


def test_parse_date_returns_none_for_malformed_input() -> None:
    assert parse_date(None) is None
    assert parse_date("") is None
    assert parse_date("   ") is None
    assert parse_date("not-a-date") is None
    assert parse_date(float("nan")) is None
    assert parse_date(pd.NaT) is None


def test_resolve_date_takes_first_parseable_candidate() -> None:
    assert resolve_date(["", "garbage", "2024-02-03", "2024-05-06"]) == datetime.date(2024, 2, 3)
    assert resolve_date(["", None, "nope"]) is None
    assert resolve_date([]) is None


def test_record_date_priority_chain() -> None:
    assert record_date(
        {"ExpenseDate": "2024/01/01", "CustomDate": "2024/02/02", "Timestamp": "2024/03/03"}
    ) == datetime.date(2024, 1, 1)
    assert record_date(
        {"ExpenseDate": "", "CustomDate": "2024/02/02", "Timestamp": "2024/03/03"}
    ) == datetime.date(2024, 2, 2)
    assert record_date(
        {"ExpenseDate": "bad", "CustomDate": None, "Timestamp": "2024/03/03 09:15:00"}
    ) == datetime.date(2024, 3, 3)


def test_coerce_transactions_maps_record_keys_and_fills_columns() -> None:
    out = coerce_transactions(
        [
            {"item": "Milk", "category": "01 Food", "amount": "250", "expenseDate": "2024/01/01"},
            {"item": None, "category": None, "amount": "n/a"},
        ]
    )

    for col in ["Timestamp", "Item", "CustomDate", "Category", "Amount", "IndividualBurden", "ExpenseDate"]:
        assert col in out.columns
    assert list(out["Amount"]) == [250, 0]
    assert list(out["Category"]) == ["01 Food", ""]
    assert list(out["Item"]) == ["Milk", ""]


def test_resolve_transaction_dates_marks_unresolvable_rows() -> None:
    out = resolve_transaction_dates(
        [
            {"expenseDate": "2024/01/05", "amount": 1},
            {"expenseDate": "not-a-date", "timestamp": "", "amount": 1},
        ]
    )

    assert out.loc[0, "Date"] == pd.Timestamp("2024-01-05")
    assert pd.isna(out.loc[1, "Date"])


def test_resolve_transaction_dates_handles_empty_input() -> None:
    out = resolve_transaction_dates([])

    assert out.empty
    assert "Date" in out.columns


def test_parse_date_rejects_relative_keywords() -> None:
    assert parse_date("today") is None
    assert parse_date("now") is None
    assert resolve_date(["today", "2024/02/03"]) == datetime.date(2024, 2, 3)


def test_parse_date_rejects_dates_pandas_cannot_hold() -> None:
    assert parse_date("2999/01/05") is None
    assert parse_date("0001/01/05") is None
    assert parse_date(datetime.date(1500, 1, 1)) is None
    assert resolve_date(["2999/01/05", "2024/02/03"]) == datetime.date(2024, 2, 3)


def test_out_of_range_expense_date_falls_back_to_next_candidate() -> None:
    out = resolve_transaction_dates(
        [{"expenseDate": "2999/01/05", "customDate": "2024/04/01", "amount": 1}]
    )

    assert out.loc[0, "Date"] == pd.Timestamp("2024-04-01")

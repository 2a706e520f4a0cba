import json

import pytest
import requests

from sheet_source import (
    SheetFetchError,
    SheetResponseError,
    build_sheet_url,
    extract_spreadsheet_id,
    fetch_expense_transactions,
    parse_gviz_response,
    parse_sheet_date_value,
    rows_to_transactions,
)

SHEET_ID = "1AbC_def-GHIjklMNOpqrSTUvwxyz012345"


def _gviz_text(rows: list[list]) -> str:
    payload = {
        "version": "0.6",
        "status": "ok",
        "table": {"rows": [{"c": [None if v is None else {"v": v} for v in row]} for row in rows]},
    }
    return "/*O_o*/\ngoogle.visualization.Query.setResponse(" + json.dumps(payload) + ");"


SAMPLE_ROWS = [
    ["Timestamp", "Item", "Custom date", "Category", "Amount", "Burden", "Expense date"],
    ["Date(2024,0,5,12,30,0)", "Rice", None, "01 Food", 1200, "", "Date(2024,0,5)"],
    ["Date(2024,1,1,9,0,0)", "Train", "Date(2024,0,31)", "03 Transport", 480, "me", None],
    ["Date(2024,1,2,9,0,0)", "Refund", None, "01 Food", 0, "", "Date(2024,1,2)"],
]


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[str] = []

    def get(self, url: str, timeout: float = 0.0) -> FakeResponse:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


def test_extract_spreadsheet_id_from_url_and_bare_id() -> None:
    url = f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/edit#gid=0"
    assert extract_spreadsheet_id(url) == SHEET_ID
    assert extract_spreadsheet_id(f"  {SHEET_ID}  ") == SHEET_ID
    assert extract_spreadsheet_id("hello") is None
    assert extract_spreadsheet_id("") is None


def test_build_sheet_url_quotes_sheet_name() -> None:
    url = build_sheet_url(SHEET_ID, "Expenses 2024")

    assert url.startswith(f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/gviz/tq?tqx=out:json")
    assert url.endswith("sheet=Expenses%202024")


def test_parse_gviz_response_extracts_cell_values() -> None:
    rows = parse_gviz_response(_gviz_text(SAMPLE_ROWS))

    assert len(rows) == 4
    assert rows[1][1] == "Rice"
    assert rows[1][2] is None


def test_parse_gviz_response_rejects_unexpected_payload() -> None:
    with pytest.raises(SheetResponseError):
        parse_gviz_response("<html>Sign in</html>")
    with pytest.raises(SheetResponseError):
        parse_gviz_response("google.visualization.Query.setResponse({broken);")


def test_parse_sheet_date_value_handles_zero_based_months() -> None:
    assert parse_sheet_date_value("Date(2024,0,5)") == "2024/01/05"
    assert parse_sheet_date_value("Date(2024,11,31,10,20,30)") == "2024/12/31"
    assert parse_sheet_date_value("2024/02/03") == "2024/02/03"
    assert parse_sheet_date_value(None) == ""


def test_rows_to_transactions_skips_header_and_non_positive_amounts() -> None:
    out = rows_to_transactions(SAMPLE_ROWS)

    assert list(out["Item"]) == ["Rice", "Train"]
    assert out.loc[0, "ExpenseDate"] == "2024/01/05"
    assert out.loc[0, "Timestamp"] == "2024/01/05"
    assert out.loc[1, "CustomDate"] == "2024/01/31"
    assert out.loc[1, "ExpenseDate"] == ""
    assert list(out["Amount"]) == [1200.0, 480.0]


def test_fetch_expense_transactions_uses_session() -> None:
    session = FakeSession(FakeResponse(_gviz_text(SAMPLE_ROWS)))
    out = fetch_expense_transactions(SHEET_ID, "Expenses", session=session)

    assert len(out) == 2
    assert session.calls == [build_sheet_url(SHEET_ID, "Expenses")]


def test_fetch_expense_transactions_wraps_http_errors() -> None:
    with pytest.raises(SheetFetchError):
        fetch_expense_transactions(SHEET_ID, session=FakeSession(FakeResponse("", status_code=404)))
    with pytest.raises(SheetFetchError):
        fetch_expense_transactions(SHEET_ID, session=FakeSession(error=requests.ConnectionError("down")))
    with pytest.raises(SheetFetchError):
        fetch_expense_transactions(SHEET_ID, session=FakeSession(FakeResponse("not gviz")))


def test_fetch_expense_transactions_requires_spreadsheet_id() -> None:
    with pytest.raises(SheetFetchError):
        fetch_expense_transactions("   ")

from __future__ import annotations

import pytest

from stmt_cli.stmt_normalize.classifier import classify_headers, header_text, resolve_unknown
from stmt_cli.stmt_normalize.types import TableCategory


@pytest.mark.parametrize(
    "headers, expected",
    [
        (["Date", "Description", "Amount"], TableCategory.TRANSACTIONS),
        (["Symbol", "Quantity", "Price", "Market Value"], TableCategory.POSITIONS),
        (["Commission"], TableCategory.FEES),
        (["Foo", "Bar"], TableCategory.UNKNOWN),
        (["QUANTITY", "MARKET VALUE"], TableCategory.POSITIONS),
        (["Trade Date", "Amount"], TableCategory.TRANSACTIONS),
        (["Fund", "Expense Ratio"], TableCategory.FEES),
        (["Advisory Fees"], TableCategory.FEES),
        ([], TableCategory.UNKNOWN),
    ],
)
def test_classify_headers(headers: list[str], expected: TableCategory) -> None:
    assert classify_headers(headers) is expected


def test_positions_take_priority_over_transactions() -> None:
    headers = ["Date", "Description", "Quantity", "Price"]

    assert classify_headers(headers) is TableCategory.POSITIONS


def test_transactions_take_priority_over_fees() -> None:
    headers = ["Date", "Amount", "Fee"]

    assert classify_headers(headers) is TableCategory.TRANSACTIONS


def test_quantity_alone_is_not_positions() -> None:
    assert classify_headers(["Symbol", "Quantity"]) is TableCategory.UNKNOWN


def test_matching_is_substring_based() -> None:
    # "Coffee" contains "fee"; the vocabulary match is deliberately naive.
    assert classify_headers(["Coffee Shop"]) is TableCategory.FEES


def test_keywords_may_span_adjacent_headers() -> None:
    assert header_text(["Market", "Value", "Quantity"]) == "market value quantity"
    assert classify_headers(["Market", "Value", "Quantity"]) is TableCategory.POSITIONS


def test_classification_is_deterministic() -> None:
    headers = ("Symbol", "Quantity", "Price")

    assert {classify_headers(headers) for _ in range(5)} == {TableCategory.POSITIONS}


def test_resolve_unknown_keeps_currency_tables_as_positions() -> None:
    rows = [("Cash Sweep", "$1,204.10"), ("Other", "12")]

    assert resolve_unknown(rows) is TableCategory.POSITIONS


def test_resolve_unknown_only_inspects_first_row() -> None:
    rows = [("Cash Sweep", "1,204.10"), ("Other", "$12.00")]

    assert resolve_unknown(rows) is TableCategory.UNKNOWN


def test_resolve_unknown_without_rows() -> None:
    assert resolve_unknown([]) is TableCategory.UNKNOWN

"""Best-effort statement summary for display.

This module is intentionally separate from the normalization pipeline. It
reads the raw extraction payload, sniffs for structured rows and account
numbers with its own loose rules, and fills gaps with placeholder rows so a UI
always has something to show. Nothing downstream should depend on its output
being correct.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .types import Provenance, StatementHeader, StatementView

_ACCOUNT_RE = re.compile(r"account[:\s]*(\d+)", re.IGNORECASE)
_HEADER_ROW_KEYWORDS = ("symbol", "ticker", "security")
_MIN_POSITION_CELLS = 4

PLACEHOLDER_TRANSACTION_DATE = "2024-03-31"


@dataclass(frozen=True, slots=True)
class HtmlTable:
    """A ``processed_tables`` entry delivered as an HTML string."""

    page_index: int
    table_index: int
    html: str


@dataclass(frozen=True, slots=True)
class StructuredTable:
    """A ``processed_tables`` entry delivered as a row/cell object."""

    page_index: int
    table_index: int
    rows: tuple[tuple[str, ...], ...] = ()
    title: str = ""
    caption: str = ""


RawTable = HtmlTable | StructuredTable


@dataclass(slots=True)
class _Accumulator:
    header: StatementHeader = field(default_factory=StatementHeader)
    positions: list[dict[str, str]] = field(default_factory=list)
    transactions: list[dict[str, str]] = field(default_factory=list)
    fees: list[dict[str, str]] = field(default_factory=list)


def project_statement(payload: Mapping[str, Any]) -> StatementView:
    """Build a :class:`StatementView` from a raw extraction payload."""

    pages = _as_list(payload.get("pages")) if isinstance(payload, Mapping) else []
    tables = collect_raw_tables(payload)
    acc = _Accumulator()

    for table in tables:
        if isinstance(table, StructuredTable):
            _scan_structured(table, acc)
        elif isinstance(table, HtmlTable):
            # HTML tables go through the normalization pipeline, not here.
            continue
        else:  # pragma: no cover - RawTable has two variants
            raise TypeError(f"Unhandled raw table variant: {type(table).__name__}")

    if not acc.positions:
        acc.positions.append(
            {
                "symbol": "PARSED_DATA",
                "description": f"Found {len(tables)} tables in PDF",
                "quantity": str(len(pages)),
                "price": "$0.00",
                "value": "$0.00",
                "assetClass": "Data",
            }
        )
    if tables:
        acc.transactions.append(
            {
                "date": PLACEHOLDER_TRANSACTION_DATE,
                "type": "Data Extract",
                "symbol": "EXTRACT",
                "quantity": str(len(tables)),
                "price": "$0.00",
                "amount": "$0.00",
                "fee": "$0.00",
            }
        )

    first = tables[0] if tables else None
    return StatementView(
        header=acc.header,
        positions=acc.positions,
        transactions=acc.transactions,
        fees=acc.fees,
        provenance=Provenance(
            page_index=first.page_index if first else 0,
            table_index=first.table_index if first else 0,
            row_index=0,
            source_html=f"Processed {len(tables)} tables from extraction service",
        ),
    )


def collect_raw_tables(payload: Mapping[str, Any]) -> list[RawTable]:
    """Lift every ``processed_tables`` entry into a :data:`RawTable`.

    Entries that are neither strings nor mappings are ignored.
    """

    tables: list[RawTable] = []
    if not isinstance(payload, Mapping):
        return tables
    for page_index, page in enumerate(_as_list(payload.get("pages"))):
        if not isinstance(page, Mapping):
            continue
        for table_index, entry in enumerate(_as_list(page.get("processed_tables"))):
            table = lift_raw_table(entry, page_index, table_index)
            if table is not None:
                tables.append(table)
    return tables


def lift_raw_table(entry: Any, page_index: int, table_index: int) -> RawTable | None:
    """Wrap one raw table entry in its variant, or ``None`` if unrecognised."""

    if isinstance(entry, str):
        return HtmlTable(page_index=page_index, table_index=table_index, html=entry)
    if isinstance(entry, Mapping):
        rows: list[tuple[str, ...]] = []
        for row in _as_list(entry.get("rows")):
            cells = row.get("cells") if isinstance(row, Mapping) else None
            if isinstance(cells, (list, tuple)):
                rows.append(tuple(_cell_text(cell) for cell in cells))
        return StructuredTable(
            page_index=page_index,
            table_index=table_index,
            rows=tuple(rows),
            title=_text_or_empty(entry.get("title")),
            caption=_text_or_empty(entry.get("caption")),
        )
    return None


def _scan_structured(table: StructuredTable, acc: _Accumulator) -> None:
    for cells in table.rows:
        row_text = " ".join(cells).lower()
        if any(keyword in row_text for keyword in _HEADER_ROW_KEYWORDS):
            continue
        if len(cells) >= _MIN_POSITION_CELLS and any("$" in cell for cell in cells):
            acc.positions.append(
                {
                    "symbol": _cell_at(cells, 0, "Unknown"),
                    "description": _cell_at(cells, 1, "Unknown Security"),
                    "quantity": _cell_at(cells, 2, "0"),
                    "price": _cell_at(cells, 3, "$0.00"),
                    "value": _cell_at(cells, 4, "$0.00"),
                    "assetClass": "Equity",
                }
            )

    title_text = (table.title or table.caption).lower()
    if "account" in title_text:
        match = _ACCOUNT_RE.search(title_text)
        if match:
            acc.header.account_number = f"****{match.group(1)[-4:]}"


def _cell_text(cell: Any) -> str:
    if isinstance(cell, str):
        return cell
    if isinstance(cell, Mapping):
        return _text_or_empty(cell.get("text")) or _text_or_empty(cell.get("value"))
    return ""


def _cell_at(cells: Sequence[str], index: int, default: str) -> str:
    return cells[index] if index < len(cells) and cells[index] else default


def _text_or_empty(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []

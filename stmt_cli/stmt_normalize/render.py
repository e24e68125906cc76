"""Output rendering helpers for stmt-normalize."""

from __future__ import annotations

import json
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .aggregator import ClassifiedTable
from .types import NormalizedRow, StatementView


def render_statement(view: StatementView, *, output_format: str, stream=None) -> None:
    """Render a statement summary as Rich tables or JSON."""
    output_stream = stream or sys.stdout
    fmt = (output_format or "table").lower()

    if fmt == "json":
        _render_json(view.to_dict(), stream=output_stream)
    elif fmt == "table":
        console = _console(output_stream)
        header = view.header
        summary = Table(box=box.SIMPLE, show_header=False, title="Statement")
        summary.add_column("Field", style="bold")
        summary.add_column("Value")
        summary.add_row("Account", Text(header.account_number))
        summary.add_row("Period", f"{header.period_start} - {header.period_end}")
        summary.add_row("Ending value", f"{header.ending_value:,.2f}")
        summary.add_row("Total fees", f"{header.total_fees:,.2f}")
        console.print(summary)
        for title, records in (
            ("Positions", view.positions),
            ("Transactions", view.transactions),
            ("Fees", view.fees),
        ):
            if records:
                console.print(_records_table(title, records))
        provenance = view.provenance
        console.print(
            f"Source: page {provenance.page_index}, table {provenance.table_index} "
            f"({provenance.source_html})",
            markup=False,
        )
    else:  # pragma: no cover - Click validation should prevent this
        raise ValueError(f"Unsupported output format '{output_format}'.")


def render_classification(tables: Sequence[ClassifiedTable], *, stream=None) -> None:
    """Print one line per non-empty table with the category it resolved to."""
    output_stream = stream or sys.stdout
    if not tables:
        print("No tables found.", file=output_stream)
        return

    console = _console(output_stream)
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Page", justify="right")
    table.add_column("Table", justify="right")
    table.add_column("Category")
    table.add_column("Rows", justify="right")
    table.add_column("Headers")
    for item in tables:
        category = item.category.value
        if item.fallback:
            category = f"{category} (fallback)"
        table.add_row(
            str(item.page_index),
            str(item.table_index),
            category,
            str(len(item.table.rows)),
            Text(", ".join(item.table.headers)),
        )
    console.print(table)


def render_provenance(row: NormalizedRow, *, stream=None) -> None:
    """Print a row's coordinate, fields and reconstructed source snippet."""
    output_stream = stream or sys.stdout
    coordinate = row.provenance
    print(
        f"page {coordinate.page_index}, table {coordinate.table_index}, row {coordinate.row_index}",
        file=output_stream,
    )
    for name, value in row.fields.items():
        print(f"  {name}: {value}", file=output_stream)
    print(coordinate.source_html, file=output_stream)


def _records_table(title: str, records: Sequence[Mapping[str, str]]) -> Table:
    columns: list[str] = []
    for record in records:
        for key in record:
            if key not in columns:
                columns.append(key)
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold", title=title)
    for column in columns:
        table.add_column(column)
    for record in records:
        table.add_row(*(Text(record.get(column, "")) for column in columns))
    return table


def _render_json(payload: Mapping[str, Any], *, stream) -> None:
    json.dump(payload, stream, indent=2)
    stream.write("\n")


def _console(stream) -> Console:
    return Console(file=stream, highlight=False, force_terminal=False, width=160)

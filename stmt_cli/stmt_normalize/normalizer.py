"""Map table rows onto their headers and attach provenance."""

from __future__ import annotations

from collections.abc import Sequence

from .types import NormalizedRow, Provenance


def normalize_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    page_index: int,
    table_index: int,
) -> list[NormalizedRow]:
    """Return one :class:`NormalizedRow` per input row, in row order.

    Cells are matched to headers by position. Missing cells become empty
    strings and cells past the last header are dropped. A header name that
    repeats keeps its first position and takes the value of its last cell.
    """

    normalized: list[NormalizedRow] = []
    for row_index, row in enumerate(rows):
        fields: dict[str, str] = {}
        for position, header in enumerate(headers):
            fields[header] = row[position] if position < len(row) and row[position] else ""
        normalized.append(
            NormalizedRow(
                fields=fields,
                provenance=Provenance(
                    page_index=page_index,
                    table_index=table_index,
                    row_index=row_index,
                    source_html=render_source_html(headers, row),
                ),
            )
        )
    return normalized


def render_source_html(headers: Sequence[str], row: Sequence[str]) -> str:
    """Rebuild a one-row table snippet from header and cell text.

    The snippet is derived rather than copied from the fragment, so the same
    headers and row always produce the same bytes. Text is inserted as-is.
    """

    header_cells = "".join(f"<th>{header}</th>" for header in headers)
    data_cells = "".join(f"<td>{cell}</td>" for cell in row)
    return f"<table><tr>{header_cells}</tr><tr>{data_cells}</tr></table>"

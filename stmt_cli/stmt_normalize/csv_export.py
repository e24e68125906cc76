"""CSV rendering for normalized buckets."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .types import NormalizedBuckets, NormalizedRow

PROVENANCE_COLUMNS: tuple[str, ...] = ("page_index", "table_index", "row_index")

_QUOTE_TRIGGERS = (",", '"', "\n")


def escape_csv_value(value: str) -> str:
    """Quote ``value`` only when it holds a comma, double quote or newline."""

    if any(trigger in value for trigger in _QUOTE_TRIGGERS):
        return '"' + value.replace('"', '""') + '"'
    return value


def export_to_csv(rows: Sequence[NormalizedRow]) -> str:
    """Render one bucket as CSV, or ``""`` for an empty bucket.

    Columns come from the first row's fields followed by the provenance
    coordinate. Later rows are projected onto that schema, so fields missing
    from a row render empty and fields the first row lacks are dropped. Lines
    are joined with ``\\n`` and there is no trailing newline.

    Header names go through :func:`escape_csv_value` too, so a header such as
    ``Price, USD`` stays one column instead of shifting every column after it.
    """

    if not rows:
        return ""
    schema = list(rows[0].fields)
    lines = [",".join(escape_csv_value(name) for name in [*schema, *PROVENANCE_COLUMNS])]
    for row in rows:
        coordinate = row.provenance
        cells = [escape_csv_value(row.fields.get(name) or "") for name in schema]
        cells.extend(
            str(index)
            for index in (coordinate.page_index, coordinate.table_index, coordinate.row_index)
        )
        lines.append(",".join(cells))
    return "\n".join(lines)


def export_buckets_to_csv(
    buckets: NormalizedBuckets,
    names: Iterable[str] | None = None,
) -> dict[str, str]:
    """Render the requested buckets (all three by default) keyed by name."""

    wanted = set(names) if names is not None else None
    return {
        name: export_to_csv(rows)
        for name, rows in buckets.items()
        if wanted is None or name in wanted
    }


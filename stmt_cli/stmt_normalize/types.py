"""Dataclasses describing extraction payloads and normalized statement rows."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TableCategory(str, Enum):
    """Semantic category assigned to a tokenized table."""

    POSITIONS = "positions"
    TRANSACTIONS = "transactions"
    FEES = "fees"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class ExtractionPage:
    """One page of the extraction service output."""

    page_index: int
    raw_tables: tuple[str, ...] = ()
    text: str = ""


@dataclass(frozen=True, slots=True)
class ExtractionResponse:
    """Full extraction service response for a single document."""

    pages: tuple[ExtractionPage, ...] = ()
    status: str = ""
    message: str | None = None

    def table_count(self) -> int:
        return sum(len(page.raw_tables) for page in self.pages)


@dataclass(slots=True)
class ParsedTable:
    """Header cells and data rows scraped from one HTML table fragment."""

    headers: tuple[str, ...] = ()
    rows: list[tuple[str, ...]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.headers or not self.rows


@dataclass(frozen=True, slots=True)
class Provenance:
    """Coordinate plus reconstructed markup tying a row back to its source."""

    page_index: int
    table_index: int
    row_index: int
    source_html: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "pageIndex": self.page_index,
            "tableIndex": self.table_index,
            "rowIndex": self.row_index,
            "html": self.source_html,
        }


@dataclass(slots=True)
class NormalizedRow:
    """A table row keyed by header name."""

    fields: dict[str, str]
    provenance: Provenance

    def to_dict(self) -> dict[str, Any]:
        return {"data": dict(self.fields), "provenance": self.provenance.to_dict()}


@dataclass(slots=True)
class NormalizedBuckets:
    """Category buckets produced by the aggregator."""

    positions: list[NormalizedRow] = field(default_factory=list)
    transactions: list[NormalizedRow] = field(default_factory=list)
    fees: list[NormalizedRow] = field(default_factory=list)

    def bucket(self, category: TableCategory | str) -> list[NormalizedRow]:
        """Return the bucket for ``category``; ``unknown`` has no bucket."""

        name = TableCategory(category).value
        if name == TableCategory.UNKNOWN.value:
            raise KeyError("Unknown tables do not have a bucket")
        return getattr(self, name)

    def items(self) -> Iterator[tuple[str, list[NormalizedRow]]]:
        yield TableCategory.POSITIONS.value, self.positions
        yield TableCategory.TRANSACTIONS.value, self.transactions
        yield TableCategory.FEES.value, self.fees

    def counts(self) -> dict[str, int]:
        return {name: len(rows) for name, rows in self.items()}

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {name: [row.to_dict() for row in rows] for name, rows in self.items()}


@dataclass(slots=True)
class StatementHeader:
    """Account summary shown above the statement tables."""

    account_number: str = "Unknown"
    period_start: str = "Unknown"
    period_end: str = "Unknown"
    ending_value: float = 0.0
    total_fees: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "accountNumber": self.account_number,
            "periodStart": self.period_start,
            "periodEnd": self.period_end,
            "endingValue": self.ending_value,
            "totalFees": self.total_fees,
        }


@dataclass(slots=True)
class StatementView:
    """Presentation-ready statement summary. Display only."""

    header: StatementHeader
    positions: list[dict[str, str]]
    transactions: list[dict[str, str]]
    fees: list[dict[str, str]]
    provenance: Provenance

    def to_dict(self) -> dict[str, Any]:
        return {
            "header": self.header.to_dict(),
            "positions": [dict(item) for item in self.positions],
            "transactions": [dict(item) for item in self.transactions],
            "fees": [dict(item) for item in self.fees],
            "provenance": self.provenance.to_dict(),
        }


def load_extraction_response(payload: Mapping[str, Any]) -> ExtractionResponse:
    """Lift the extraction service JSON into an :class:`ExtractionResponse`.

    Lenient by construction: missing keys become empty values. Pages and table
    entries of the wrong shape are kept as empty placeholders so page and table
    positions still match the raw payload.
    """

    pages: list[ExtractionPage] = []
    raw_pages = payload.get("pages") if isinstance(payload, Mapping) else None
    if not isinstance(raw_pages, (list, tuple)):
        raw_pages = []
    for position, raw_page in enumerate(raw_pages):
        if not isinstance(raw_page, Mapping):
            pages.append(ExtractionPage(page_index=position))
            continue
        raw_tables = raw_page.get("processed_tables")
        if not isinstance(raw_tables, (list, tuple)):
            raw_tables = []
        tables = tuple(table if isinstance(table, str) else "" for table in raw_tables)
        page_index = raw_page.get("pageIndex")
        pages.append(
            ExtractionPage(
                page_index=page_index if isinstance(page_index, int) else position,
                raw_tables=tables,
                text=str(raw_page.get("text") or ""),
            )
        )
    status = payload.get("status", "") if isinstance(payload, Mapping) else ""
    message = payload.get("message") if isinstance(payload, Mapping) else None
    return ExtractionResponse(
        pages=tuple(pages),
        status=str(status or ""),
        message=str(message) if message is not None else None,
    )

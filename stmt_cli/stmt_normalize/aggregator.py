"""Walk an extraction response and merge its tables into category buckets."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from .classifier import classify_headers, resolve_unknown
from .hooks import NO_HOOKS, PipelineHooks
from .normalizer import normalize_table
from .tokenizer import parse_html_table
from .types import ExtractionResponse, NormalizedBuckets, ParsedTable, TableCategory


@dataclass(frozen=True, slots=True)
class ClassifiedTable:
    """A tokenized table with the category the pipeline settled on."""

    page_index: int
    table_index: int
    table: ParsedTable
    category: TableCategory
    fallback: bool


def iter_classified_tables(
    response: ExtractionResponse,
    hooks: PipelineHooks | None = None,
) -> Iterator[ClassifiedTable]:
    """Yield every non-empty table in (page, table) order with its category.

    ``category`` already has the unknown-table fallback applied and
    ``fallback`` records whether that rule decided it. Tables the fallback
    rejects come out as ``TableCategory.UNKNOWN``. Empty tables are never
    classified; they only fire ``hooks.on_table_skipped``.
    """

    hooks = hooks or NO_HOOKS
    for page_index, page in enumerate(response.pages):
        for table_index, fragment in enumerate(page.raw_tables):
            table = parse_html_table(fragment)
            if table.is_empty:
                hooks.table_skipped(page_index, table_index)
                continue
            category = classify_headers(table.headers)
            fallback = category is TableCategory.UNKNOWN
            if fallback:
                category = resolve_unknown(table.rows)
            yield ClassifiedTable(
                page_index=page_index,
                table_index=table_index,
                table=table,
                category=category,
                fallback=fallback,
            )


def aggregate_response(
    response: ExtractionResponse,
    hooks: PipelineHooks | None = None,
) -> NormalizedBuckets:
    """Classify and normalize every table of ``response`` into buckets.

    Rows land in (page, table, row) order. Duplicate source rows stay
    duplicated.
    """

    hooks = hooks or NO_HOOKS
    buckets = NormalizedBuckets()
    for item in iter_classified_tables(response, hooks):
        if item.category is TableCategory.UNKNOWN:
            hooks.table_discarded(item.page_index, item.table_index, len(item.table.rows))
            continue
        rows = normalize_table(
            item.table.headers, item.table.rows, item.page_index, item.table_index
        )
        buckets.bucket(item.category).extend(rows)
        hooks.table_classified(item.page_index, item.table_index, item.category, len(rows))
    return buckets

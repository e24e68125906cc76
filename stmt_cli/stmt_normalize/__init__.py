"""Public exports for the statement normalization pipeline."""

from .aggregator import ClassifiedTable, aggregate_response, iter_classified_tables
from .classifier import classify_headers, resolve_unknown
from .csv_export import PROVENANCE_COLUMNS, escape_csv_value, export_buckets_to_csv, export_to_csv
from .hooks import PipelineHooks
from .normalizer import normalize_table, render_source_html
from .projector import HtmlTable, RawTable, StructuredTable, project_statement
from .tokenizer import parse_html_table
from .types import (
    ExtractionPage,
    ExtractionResponse,
    NormalizedBuckets,
    NormalizedRow,
    ParsedTable,
    Provenance,
    StatementHeader,
    StatementView,
    TableCategory,
    load_extraction_response,
)

__all__ = [
    "PROVENANCE_COLUMNS",
    "ClassifiedTable",
    "ExtractionPage",
    "ExtractionResponse",
    "HtmlTable",
    "NormalizedBuckets",
    "NormalizedRow",
    "ParsedTable",
    "PipelineHooks",
    "Provenance",
    "RawTable",
    "StatementHeader",
    "StatementView",
    "StructuredTable",
    "TableCategory",
    "aggregate_response",
    "classify_headers",
    "escape_csv_value",
    "export_buckets_to_csv",
    "export_to_csv",
    "iter_classified_tables",
    "load_extraction_response",
    "normalize_table",
    "parse_html_table",
    "project_statement",
    "render_source_html",
    "resolve_unknown",
]

"""stmt-normalize CLI entrypoint."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

import click

from stmt_cli.shared.cli import CLIContext, common_cli_options, handle_cli_errors, pass_cli_context
from stmt_cli.shared.config import KNOWN_BUCKETS
from stmt_cli.shared.logging import Logger

from .aggregator import aggregate_response, iter_classified_tables
from .csv_export import export_to_csv
from .hooks import PipelineHooks
from .loader import load_response_file
from .projector import project_statement
from .render import render_classification, render_provenance, render_statement
from .types import NormalizedBuckets, TableCategory


def build_logging_hooks(logger: Logger) -> PipelineHooks:
    """Route pipeline callbacks to the logger's debug channel."""

    def _skipped(page_index: int, table_index: int) -> None:
        logger.debug(f"Page {page_index} table {table_index}: no headers or rows, skipped")

    def _classified(
        page_index: int, table_index: int, category: TableCategory, row_count: int
    ) -> None:
        logger.debug(
            f"Page {page_index} table {table_index}: {category.value} ({row_count} rows)"
        )

    def _discarded(page_index: int, table_index: int, row_count: int) -> None:
        logger.debug(
            f"Page {page_index} table {table_index}: unrecognised headers, "
            f"dropped {row_count} rows"
        )

    return PipelineHooks(
        on_table_skipped=_skipped,
        on_table_classified=_classified,
        on_table_discarded=_discarded,
    )


@click.group(help="Normalize brokerage statement tables from extraction service output.")
@common_cli_options
def main(cli_ctx: CLIContext) -> None:
    return


@main.command("normalize")
@click.argument("response_files", nargs=-1, required=True, type=click.Path(path_type=str))
@click.option(
    "--output-dir",
    type=click.Path(path_type=str),
    help="Directory for CSV files (default: from config).",
)
@click.option(
    "--bucket",
    "buckets",
    multiple=True,
    type=click.Choice(KNOWN_BUCKETS, case_sensitive=False),
    help="Bucket to export; repeat for several (default: from config).",
)
@click.option("--stdout", is_flag=True, help="Write output to stdout instead of files.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["csv", "json"], case_sensitive=False),
    default="csv",
    show_default=True,
    help="Output format.",
)
@handle_cli_errors
@pass_cli_context
def normalize_command(
    cli_ctx: CLIContext,
    response_files: tuple[str, ...],
    output_dir: str | None,
    buckets: tuple[str, ...],
    stdout: bool,
    output_format: str,
) -> None:
    """Classify, normalize and export the tables of one or more responses."""

    selected = _selected_buckets(buckets, cli_ctx)
    hooks = build_logging_hooks(cli_ctx.logger)
    fmt = output_format.lower()

    input_paths = [Path(response_file).expanduser() for response_file in response_files]
    if fmt == "json" or not stdout:
        _ensure_distinct_outputs(input_paths, by_name=fmt == "json")

    results: list[tuple[Path, NormalizedBuckets]] = []
    for path in input_paths:
        _, response = load_response_file(path)
        cli_ctx.logger.debug(
            f"{path.name}: {len(response.pages)} pages, {response.table_count()} tables "
            f"(status: {response.status or 'n/a'})"
        )
        normalized = aggregate_response(response, hooks)
        counts = normalized.counts()
        cli_ctx.logger.info(
            f"{path.name}: "
            + ", ".join(f"{counts[name]} {name}" for name in KNOWN_BUCKETS)
        )
        results.append((path, normalized))

    if fmt == "json":
        document = {
            path.name: {
                name: [row.to_dict() for row in rows]
                for name, rows in normalized.items()
                if name in selected
            }
            for path, normalized in results
        }
        rendered = json.dumps(document, indent=2)
        if stdout:
            click.echo(rendered)
            return
        target_dir = _output_dir(output_dir, cli_ctx)
        target = target_dir / "normalized.json"
        _write_output(rendered + "\n", target)
        cli_ctx.logger.success(f"Wrote {target}")
        return

    emitted = 0
    written = 0
    for path, normalized in results:
        for name, rows in normalized.items():
            if name not in selected:
                continue
            content = export_to_csv(rows)
            if stdout:
                if content:
                    cli_ctx.logger.info(f"== {name}: {path}")
                    if emitted:
                        click.echo("")
                    click.echo(content)
                    emitted += 1
                continue
            if not content and not cli_ctx.config.export.include_empty:
                cli_ctx.logger.debug(f"{path.name}: {name} bucket empty, no file written")
                continue
            target = _output_dir(output_dir, cli_ctx) / f"{path.stem}.{name}.csv"
            _write_output(content, target)
            written += 1
            cli_ctx.logger.debug(f"Wrote {target}")

    if stdout:
        if not emitted:
            cli_ctx.logger.warning("No rows matched the selected buckets.")
        return
    if written:
        cli_ctx.logger.success(
            f"Wrote {written} CSV file(s) to {_output_dir(output_dir, cli_ctx)}"
        )
    else:
        cli_ctx.logger.warning("No rows matched the selected buckets; nothing written.")


@main.command("summary")
@click.argument("response_file", type=click.Path(path_type=str))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    help="Output format (default: from config).",
)
@handle_cli_errors
@pass_cli_context
def summary_command(cli_ctx: CLIContext, response_file: str, output_format: str | None) -> None:
    """Show a best-effort statement summary."""

    payload, _ = load_response_file(response_file)
    view = project_statement(payload)
    render_statement(
        view,
        output_format=output_format or cli_ctx.config.display.format,
        stream=None,
    )


@main.command("provenance")
@click.argument("response_file", type=click.Path(path_type=str))
@click.option(
    "--bucket",
    required=True,
    type=click.Choice(KNOWN_BUCKETS, case_sensitive=False),
    help="Bucket holding the row.",
)
@click.option("--row", "row_number", required=True, type=int, help="Zero-based row in the bucket.")
@handle_cli_errors
@pass_cli_context
def provenance_command(
    cli_ctx: CLIContext, response_file: str, bucket: str, row_number: int
) -> None:
    """Trace one normalized row back to its page, table and source row."""

    _, response = load_response_file(response_file)
    normalized = aggregate_response(response, build_logging_hooks(cli_ctx.logger))
    rows = normalized.bucket(bucket.lower())
    if row_number < 0 or row_number >= len(rows):
        raise click.ClickException(
            f"Row {row_number} is out of range; {bucket.lower()} has {len(rows)} rows."
        )
    render_provenance(rows[row_number], stream=None)


@main.command("classify")
@click.argument("response_file", type=click.Path(path_type=str))
@handle_cli_errors
@pass_cli_context
def classify_command(cli_ctx: CLIContext, response_file: str) -> None:
    """List each table with the category the classifier assigns."""

    _, response = load_response_file(response_file)
    tables = list(iter_classified_tables(response, build_logging_hooks(cli_ctx.logger)))
    render_classification(tables, stream=None)


def _selected_buckets(buckets: Sequence[str], cli_ctx: CLIContext) -> tuple[str, ...]:
    if buckets:
        return tuple(dict.fromkeys(name.lower() for name in buckets))
    return cli_ctx.config.export.buckets


def _ensure_distinct_outputs(input_paths: Sequence[Path], *, by_name: bool) -> None:
    # Output files are named after the input stem (CSV) or keyed by file name (JSON).
    seen: dict[str, Path] = {}
    for path in input_paths:
        key = path.name if by_name else path.stem
        if key in seen:
            raise click.ClickException(
                f"{seen[key]} and {path} would both write output for '{key}'; "
                "rename one of them or normalize them separately."
            )
        seen[key] = path


def _output_dir(output_dir: str | None, cli_ctx: CLIContext) -> Path:
    if output_dir:
        return Path(output_dir).expanduser()
    return cli_ctx.config.export.output_dir


def _write_output(content: str, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


if __name__ == "__main__":  # pragma: no cover
    main()

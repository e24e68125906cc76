from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from stmt_cli.stmt_normalize.main import main

EXPECTED_POSITIONS_CSV = (
    "Symbol,Quantity,Price,page_index,table_index,row_index\nAAPL,100,$150.00,0,0,0"
)


def _invoke(args: list[str]):
    runner = CliRunner()
    return runner.invoke(main, args)


def test_normalize_writes_csv_per_bucket(statement_file: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "out"

    result = _invoke(["normalize", str(statement_file), "--output-dir", str(out_dir)])

    assert result.exit_code == 0, result.output
    assert (out_dir / "statement.positions.csv").read_text(encoding="utf-8") == EXPECTED_POSITIONS_CSV
    assert (out_dir / "statement.transactions.csv").read_text(encoding="utf-8").startswith(
        "Date,Description,Amount,page_index,table_index,row_index\n"
    )
    assert not (out_dir / "statement.fees.csv").exists()


def test_normalize_defaults_to_configured_export_dir(
    statement_file: Path, isolated_env: Path
) -> None:
    result = _invoke(["normalize", str(statement_file), "--bucket", "positions"])

    assert result.exit_code == 0, result.output
    exports = isolated_env / "exports"
    assert sorted(path.name for path in exports.iterdir()) == ["statement.positions.csv"]


def test_normalize_include_empty_from_config(
    statement_file: Path, tmp_path: Path, monkeypatch
) -> None:
    monkeypatch.setenv("STMTNORM_EXPORT_INCLUDE_EMPTY", "true")
    out_dir = tmp_path / "out"

    result = _invoke(["normalize", str(statement_file), "--output-dir", str(out_dir)])

    assert result.exit_code == 0, result.output
    assert (out_dir / "statement.fees.csv").read_text(encoding="utf-8") == ""


def test_normalize_stdout_csv(statement_file: Path) -> None:
    result = _invoke(["normalize", str(statement_file), "--stdout", "--bucket", "positions"])

    assert result.exit_code == 0, result.output
    assert result.stdout == EXPECTED_POSITIONS_CSV + "\n"


def test_normalize_stdout_json(statement_file: Path) -> None:
    result = _invoke(
        ["normalize", str(statement_file), "--stdout", "--format", "json", "--bucket", "transactions"]
    )

    assert result.exit_code == 0, result.output
    document = json.loads(result.stdout)
    rows = document["statement.json"]["transactions"]
    assert rows[0]["data"]["Description"] == "Buy AAPL"
    assert rows[0]["provenance"]["tableIndex"] == 1
    assert "positions" not in document["statement.json"]


def test_normalize_handles_multiple_statements(statement_file: Path, tmp_path: Path) -> None:
    second = tmp_path / "second.json"
    second.write_text(statement_file.read_text(encoding="utf-8"), encoding="utf-8")
    out_dir = tmp_path / "out"

    result = _invoke(
        ["normalize", str(statement_file), str(second), "--output-dir", str(out_dir), "--bucket", "positions"]
    )

    assert result.exit_code == 0, result.output
    assert sorted(path.name for path in out_dir.iterdir()) == [
        "second.positions.csv",
        "statement.positions.csv",
    ]


def test_normalize_missing_file_reports_error(tmp_path: Path) -> None:
    result = _invoke(["normalize", str(tmp_path / "absent.json"), "--stdout"])

    assert result.exit_code != 0
    assert "does not exist" in result.output


def test_verbose_logs_table_decisions(statement_file: Path) -> None:
    result = _invoke(["--verbose", "normalize", str(statement_file), "--stdout"])

    assert result.exit_code == 0, result.output
    assert "Page 0 table 0: positions (1 rows)" in result.stderr
    assert "statement.json: 1 positions, 1 transactions, 0 fees" in result.stderr


def _same_name_statements(statement_file: Path, tmp_path: Path) -> tuple[Path, Path]:
    first = tmp_path / "a" / "statement.json"
    second = tmp_path / "b" / "statement.json"
    for path in (first, second):
        path.parent.mkdir()
        path.write_text(statement_file.read_text(encoding="utf-8"), encoding="utf-8")
    return first, second


def test_normalize_rejects_inputs_sharing_a_stem(statement_file: Path, tmp_path: Path) -> None:
    first, second = _same_name_statements(statement_file, tmp_path)
    out_dir = tmp_path / "out"

    result = _invoke(["normalize", str(first), str(second), "--output-dir", str(out_dir)])

    assert result.exit_code != 0
    assert "would both write output for 'statement'" in result.output
    assert not out_dir.exists()


def test_normalize_json_rejects_duplicate_file_names(statement_file: Path, tmp_path: Path) -> None:
    first, second = _same_name_statements(statement_file, tmp_path)

    result = _invoke(["normalize", str(first), str(second), "--stdout", "--format", "json"])

    assert result.exit_code != 0
    assert "would both write output for 'statement.json'" in result.output


def test_normalize_stdout_labels_each_block(statement_file: Path, tmp_path: Path) -> None:
    first, second = _same_name_statements(statement_file, tmp_path)

    result = _invoke(["normalize", str(first), str(second), "--stdout", "--bucket", "positions"])

    assert result.exit_code == 0, result.output
    assert result.stdout == EXPECTED_POSITIONS_CSV + "\n\n" + EXPECTED_POSITIONS_CSV + "\n"
    assert result.stderr.count("== positions: ") == 2

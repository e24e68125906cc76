from __future__ import annotations

import json
from pathlib import Path

import pytest

from stmt_cli.shared import paths

POSITIONS_HTML = (
    "<table><tr><th>Symbol</th><th>Quantity</th><th>Price</th></tr>"
    "<tr><td>AAPL</td><td>100</td><td>$150.00</td></tr></table>"
)
TRANSACTIONS_HTML = (
    "<table><tr><th>Date</th><th>Description</th><th>Amount</th></tr>"
    "<tr><td>2024-01-15</td><td>Buy AAPL</td><td>$1500.00</td></tr></table>"
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config and export lookups at a scratch directory."""

    monkeypatch.setenv(paths.CONFIG_DIR_ENV, str(tmp_path / "config"))
    monkeypatch.setenv(paths.EXPORT_DIR_ENV, str(tmp_path / "exports"))
    for name in (
        paths.CONFIG_FILE_ENV,
        "STMTNORM_EXPORT_BUCKETS",
        "STMTNORM_EXPORT_INCLUDE_EMPTY",
        "STMTNORM_DISPLAY_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def statement_file(tmp_path: Path) -> Path:
    """Write a one-page extraction response with a positions and a transactions table."""

    payload = {
        "pages": [
            {
                "pageIndex": 0,
                "processed_tables": [POSITIONS_HTML, TRANSACTIONS_HTML],
                "text": "Account statement",
            }
        ],
        "status": "success",
    }
    path = tmp_path / "statement.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path

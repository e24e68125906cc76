from __future__ import annotations

import json
from pathlib import Path

import pytest

from stmt_cli.shared.exceptions import PayloadError
from stmt_cli.stmt_normalize.loader import load_response_file, read_payload


def test_load_response_file_returns_payload_and_response(tmp_path: Path) -> None:
    path = tmp_path / "statement.json"
    payload = {"pages": [{"pageIndex": 0, "processed_tables": ["<table></table>"], "text": ""}]}
    path.write_text(json.dumps(payload), encoding="utf-8")

    raw, response = load_response_file(path)

    assert raw == payload
    assert response.pages[0].raw_tables == ("<table></table>",)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(PayloadError) as excinfo:
        read_payload(tmp_path / "absent.json")
    assert "does not exist" in str(excinfo.value)


def test_invalid_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PayloadError) as excinfo:
        read_payload(path)
    assert "not valid JSON" in str(excinfo.value)


def test_non_object_root_raises(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.raises(PayloadError):
        read_payload(path)

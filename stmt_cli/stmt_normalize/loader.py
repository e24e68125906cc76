"""Read extraction service responses saved to disk."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from stmt_cli.shared.exceptions import PayloadError

from .types import ExtractionResponse, load_extraction_response


def read_payload(path: str | Path) -> dict[str, Any]:
    """Return the raw JSON mapping stored at ``path``."""

    payload_path = Path(path).expanduser()
    if not payload_path.exists():
        raise PayloadError(f"Extraction response does not exist: {payload_path}")
    try:
        data = json.loads(payload_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise PayloadError(f"Failed to read extraction response {payload_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise PayloadError(f"Extraction response {payload_path} is not valid JSON: {exc}") from exc
    if not isinstance(data, Mapping):
        raise PayloadError(f"Extraction response {payload_path} must be a JSON object.")
    return dict(data)


def load_response_file(path: str | Path) -> tuple[dict[str, Any], ExtractionResponse]:
    """Read ``path`` and return both the raw payload and the typed response."""

    payload = read_payload(path)
    return payload, load_extraction_response(payload)

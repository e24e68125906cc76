"""Header-vocabulary heuristics that assign a category to a table.

Rules run in a fixed order over the case-folded header text:

1. ``quantity`` with ``price`` or ``market value`` -> positions
2. ``date`` with ``description`` or ``amount`` -> transactions
3. ``fee``, ``commission`` or ``expense ratio`` -> fees
4. anything else -> unknown

Unknown tables are not dropped outright. :func:`resolve_unknown` keeps them as
positions when the first data row mentions a dollar amount.
"""

from __future__ import annotations

from collections.abc import Sequence

from .types import TableCategory

_POSITION_ANCHOR = "quantity"
_POSITION_KEYWORDS = ("price", "market value")
_TRANSACTION_ANCHOR = "date"
_TRANSACTION_KEYWORDS = ("description", "amount")
_FEE_KEYWORDS = ("fee", "commission", "expense ratio")
_CURRENCY_MARKER = "$"


def header_text(headers: Sequence[str]) -> str:
    """Return the case-folded, space-joined header text used for matching."""

    return " ".join(headers).casefold()


def classify_headers(headers: Sequence[str]) -> TableCategory:
    """Classify a table from its header cells."""

    text = header_text(headers)
    if _POSITION_ANCHOR in text and _contains_any(text, _POSITION_KEYWORDS):
        return TableCategory.POSITIONS
    if _TRANSACTION_ANCHOR in text and _contains_any(text, _TRANSACTION_KEYWORDS):
        return TableCategory.TRANSACTIONS
    if _contains_any(text, _FEE_KEYWORDS):
        return TableCategory.FEES
    return TableCategory.UNKNOWN


def resolve_unknown(rows: Sequence[Sequence[str]]) -> TableCategory:
    """Fallback for unknown tables: positions if the first row holds a ``$``."""

    if rows and any(_CURRENCY_MARKER in cell for cell in rows[0]):
        return TableCategory.POSITIONS
    return TableCategory.UNKNOWN


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)

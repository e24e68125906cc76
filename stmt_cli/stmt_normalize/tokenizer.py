"""Header and row extraction for HTML table fragments.

The extraction service hands back each table as a small HTML string. We only
care about three element kinds: header cells (``<th>``), rows (``<tr>``) and
the cells inside a row (``<th>``/``<td>``). Everything else is ignored.

The tokenizer is deliberately forgiving. Fragments are often truncated at page
boundaries or missing closing tags, and the worst outcome of bad markup is an
empty :class:`ParsedTable`, which callers treat as "no table here".
"""

from __future__ import annotations

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import NavigableString, PreformattedString, Tag

from .types import ParsedTable

_PARSER = "html.parser"
_CELL_TAGS = ("th", "td")


def parse_html_table(html: str | None) -> ParsedTable:
    """Tokenize one HTML table fragment into headers and data rows.

    ``headers`` lists every ``<th>`` in document order. ``rows`` lists the
    cells of each ``<tr>`` in document order, skipping rows that carry no
    cells and header rows made only of ``<th>`` cells.
    """

    if not html or not html.strip():
        return ParsedTable()
    try:
        soup = BeautifulSoup(html, _PARSER)
    except ParserRejectedMarkup:
        return ParsedTable()

    headers = tuple(_cell_text(cell) for cell in soup.find_all("th"))

    rows: list[tuple[str, ...]] = []
    for row in soup.find_all("tr"):
        cells = _row_cells(row)
        if not cells:
            continue
        if all(cell.name == "th" for cell in cells):
            continue
        rows.append(tuple(_cell_text(cell) for cell in cells))

    return ParsedTable(headers=headers, rows=rows)


def _row_cells(row: Tag) -> list[Tag]:
    # Unclosed <tr> tags nest following rows inside this one; keep only our own cells.
    return [cell for cell in row.find_all(_CELL_TAGS) if cell.find_parent("tr") is row]


def _cell_text(cell: Tag) -> str:
    parts = [
        str(node)
        for node in cell.find_all(string=True)
        if isinstance(node, NavigableString)
        and not isinstance(node, PreformattedString)
        and node.find_parent(_CELL_TAGS) is cell
    ]
    return "".join(parts).strip()

"""Optional instrumentation callbacks for the normalization pipeline.

The pipeline never logs on its own. Callers that want diagnostics pass a
:class:`PipelineHooks` whose callbacks receive the table coordinate and
whatever the pipeline decided about it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .types import TableCategory

TableSkippedHook = Callable[[int, int], None]
TableClassifiedHook = Callable[[int, int, TableCategory, int], None]
TableDiscardedHook = Callable[[int, int, int], None]


@dataclass(frozen=True, slots=True)
class PipelineHooks:
    """Callbacks fired while the aggregator walks an extraction response.

    ``on_table_skipped(page, table)``
        the fragment produced no headers or no rows.
    ``on_table_classified(page, table, category, row_count)``
        rows were appended to ``category``'s bucket. For unknown tables this
        fires with the fallback category.
    ``on_table_discarded(page, table, row_count)``
        an unknown table failed the currency fallback and was dropped.
    """

    on_table_skipped: TableSkippedHook | None = None
    on_table_classified: TableClassifiedHook | None = None
    on_table_discarded: TableDiscardedHook | None = None

    def table_skipped(self, page_index: int, table_index: int) -> None:
        if self.on_table_skipped is not None:
            self.on_table_skipped(page_index, table_index)

    def table_classified(
        self, page_index: int, table_index: int, category: TableCategory, row_count: int
    ) -> None:
        if self.on_table_classified is not None:
            self.on_table_classified(page_index, table_index, category, row_count)

    def table_discarded(self, page_index: int, table_index: int, row_count: int) -> None:
        if self.on_table_discarded is not None:
            self.on_table_discarded(page_index, table_index, row_count)


NO_HOOKS = PipelineHooks()

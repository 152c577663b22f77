from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..models.column_mapping import ColumnMapping
from ..models.processing_stats import ProcessingStats, StatsAccumulator
from ..models.tabular_data import CellValue, TabularData
from .hasher import hash_cell

"""Chunked, cooperative hashing of target columns.

Rows are walked through a resumable ChunkCursor in fixed-size batches. Between
batches the driver awaits ``asyncio.sleep(0)`` so the event loop can service
progress output and other tasks; that is the only suspension point. Rows are
visited top to bottom and target columns left to right, so progress and
statistics are reproducible for identical input.

A failure anywhere aborts the run: no partial rows or stats are returned.
"""

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "ProcessingError",
    "RowShapeError",
    "ProcessingCancelledError",
    "ProcessedTable",
    "ChunkCursor",
    "process_table",
    "process_table_sync",
]

DEFAULT_CHUNK_SIZE = 100

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class ProcessingError(Exception):
    """Fatal failure while hashing or assembling a table."""

    def __init__(self, message: str, row: int = -1, column: str | None = None) -> None:
        super().__init__(message)
        self.row = row  # 1-based data row, -1 when not row specific
        self.column = column


class RowShapeError(ProcessingError):
    """Raised before hashing when rows do not match the header width."""

    def __init__(self, row_numbers: Sequence[int], expected: int) -> None:
        shown = ", ".join(str(n) for n in row_numbers[:10])
        if len(row_numbers) > 10:
            shown += ", ..."
        super().__init__(
            f"{len(row_numbers)} row(s) do not have {expected} cells: rows {shown}",
            row=row_numbers[0] if row_numbers else -1,
        )
        self.row_numbers = list(row_numbers)
        self.expected = expected


class ProcessingCancelledError(ProcessingError):
    """Raised at a chunk boundary when cancellation was requested."""


@dataclass(frozen=True)
class ProcessedTable:
    rows: list[list[CellValue]]
    stats: ProcessingStats


class ChunkCursor:
    """Resumable position over a table's rows.

    Each ``step()`` hashes the next ``chunk_size`` rows in place on the
    cursor's private copy of the rows and advances ``position``.
    """

    def __init__(
        self,
        rows: Sequence[Sequence[CellValue]],
        target_columns: Sequence[ColumnMapping],
        chunk_size: int,
        stats: StatsAccumulator,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        self.rows: list[list[CellValue]] = [list(r) for r in rows]
        self.target_columns = list(target_columns)
        self.chunk_size = chunk_size
        self.stats = stats
        self.position = 0
        self.non_text_cells = 0  # numbers and booleans left unhashed

    @property
    def total(self) -> int:
        return len(self.rows)

    @property
    def done(self) -> bool:
        return self.position >= self.total

    def percent(self) -> int:
        """Integer progress for the rows handled so far, capped at 99.

        100 is reserved for the driver to report once the run has succeeded.
        """
        if self.total == 0:
            return 0
        return min(99, (self.position * 100) // self.total)

    def step(self) -> int:
        """Process one chunk and return the number of rows handled."""
        start = self.position
        end = min(start + self.chunk_size, self.total)
        for row_index in range(start, end):
            row = self.rows[row_index]
            for mapping in self.target_columns:
                self._hash_cell_at(row, row_index, mapping)
        self.position = end
        self.stats.add_rows(end - start)
        return end - start

    def _hash_cell_at(self, row: list[CellValue], row_index: int, mapping: ColumnMapping) -> None:
        value = row[mapping.column_index]
        # Only string cells are re-typed; numbers and booleans stay as they are
        if not isinstance(value, str):
            if value is not None:
                self.non_text_cells += 1
            self.stats.add_skipped()
            return
        try:
            hashed = hash_cell(value)
        except Exception as e:
            raise ProcessingError(
                f"failed to hash row {row_index + 1} column '{mapping.original_name}': {e}",
                row=row_index + 1,
                column=mapping.original_name,
            ) from e
        if hashed is None:
            self.stats.add_skipped()
            return
        row[mapping.column_index] = hashed
        self.stats.add_encrypted()


async def process_table(
    table: TabularData,
    mappings: Sequence[ColumnMapping],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    on_progress: ProgressCallback | None = None,
    cancel_event: asyncio.Event | None = None,
) -> ProcessedTable:
    """Hash every target cell of ``table`` in cooperative chunks.

    Args:
        table: Parsed input; never mutated
        mappings: Column classification for ``table.headers``
        chunk_size: Rows per batch between yields
        on_progress: Called after each batch with an integer percent; values
            never decrease and 100 is reported exactly once, on success
        cancel_event: Checked at every chunk boundary

    Returns:
        ProcessedTable with the hashed rows and finalized stats

    Raises:
        RowShapeError: If any row length differs from the header width
        ProcessingCancelledError: If ``cancel_event`` was set
        ProcessingError: On any hashing failure
    """
    started = time.perf_counter()

    violations = table.find_shape_violations()
    if violations:
        raise RowShapeError(violations, table.column_count)

    targets = [m for m in mappings if m.is_target]
    stats = StatsAccumulator(target_columns_found=[m.original_name for m in targets])
    cursor = ChunkCursor(table.rows, targets, chunk_size, stats)
    logger.debug(
        "processing rows=%d targets=%s chunk_size=%d",
        cursor.total, stats.target_columns_found, chunk_size,
    )

    last_percent = 0
    while not cursor.done:
        if cancel_event is not None and cancel_event.is_set():
            raise ProcessingCancelledError(
                f"processing cancelled at row {cursor.position + 1}", row=cursor.position + 1
            )
        batch_start = time.perf_counter()
        cursor.step()
        stats.add_batch_time((time.perf_counter() - batch_start) * 1000)

        percent = max(last_percent, cursor.percent())
        if on_progress is not None and not cursor.done:
            on_progress(percent)
        last_percent = percent

        # Hand control back to the event loop between chunks
        await asyncio.sleep(0)

    if cursor.non_text_cells:
        logger.warning(
            f"{cursor.non_text_cells} non-text cell(s) in target columns were left unhashed; "
            "store numeric phone numbers as text to hash them"
        )

    elapsed_ms = (time.perf_counter() - started) * 1000
    result = ProcessedTable(rows=cursor.rows, stats=stats.finalize(elapsed_ms))
    if on_progress is not None:
        on_progress(100)
    return result


def process_table_sync(
    table: TabularData,
    mappings: Sequence[ColumnMapping],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    on_progress: ProgressCallback | None = None,
) -> ProcessedTable:
    """Run ``process_table`` to completion on a fresh event loop."""
    return asyncio.run(process_table(table, mappings, chunk_size=chunk_size, on_progress=on_progress))

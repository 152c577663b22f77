from __future__ import annotations

import statistics
from dataclasses import dataclass, field

"""Processing statistics for a hashing run.

StatsAccumulator is the mutable counter set owned by an in-flight run; it only
ever grows. ``finalize()`` is called once on success and yields the frozen
ProcessingStats record handed to callers. A failed run simply drops its
accumulator.
"""

__all__ = [
    "ProcessingStats",
    "StatsAccumulator",
]


@dataclass(frozen=True)
class ProcessingStats:
    """User-facing summary of a successful run."""
    total_rows: int  # Data rows processed (header excluded)
    encrypted_cells: int  # Target cells replaced by a digest
    empty_cells_skipped: int  # Target cells left untouched (empty, blank or non-string)
    target_columns_found: list[str]  # Original header names of target columns
    processing_time_ms: float  # Wall-clock duration of the whole processing call
    total_batches: int = 0  # Number of chunks processed
    avg_batch_ms: float = 0.0  # Mean chunk duration
    p95_batch_ms: float = 0.0  # 95th percentile chunk duration


@dataclass
class StatsAccumulator:
    target_columns_found: list[str] = field(default_factory=list)
    total_rows: int = 0
    encrypted_cells: int = 0
    empty_cells_skipped: int = 0
    batch_times_ms: list[float] = field(default_factory=list)

    def add_encrypted(self) -> None:
        self.encrypted_cells += 1

    def add_skipped(self) -> None:
        self.empty_cells_skipped += 1

    def add_rows(self, count: int) -> None:
        if count < 0:
            raise ValueError("row count must not be negative")
        self.total_rows += count

    def add_batch_time(self, elapsed_ms: float) -> None:
        self.batch_times_ms.append(elapsed_ms)

    def batch_stats(self) -> tuple[int, float, float]:
        """Calculate batch statistics.

        Returns:
            tuple: (total_batches, avg_batch_ms, p95_batch_ms)
        """
        if not self.batch_times_ms:
            return (0, 0.0, 0.0)

        total_batches = len(self.batch_times_ms)
        avg_batch_ms = statistics.mean(self.batch_times_ms)

        if total_batches == 1:
            p95_batch_ms = self.batch_times_ms[0]
        else:
            # 19th of 20 inclusive quantiles = 95th percentile
            p95_batch_ms = statistics.quantiles(
                self.batch_times_ms, n=20, method="inclusive"
            )[18]

        return (total_batches, avg_batch_ms, p95_batch_ms)

    def finalize(self, processing_time_ms: float) -> ProcessingStats:
        total_batches, avg_batch_ms, p95_batch_ms = self.batch_stats()
        return ProcessingStats(
            total_rows=self.total_rows,
            encrypted_cells=self.encrypted_cells,
            empty_cells_skipped=self.empty_cells_skipped,
            target_columns_found=list(self.target_columns_found),
            processing_time_ms=processing_time_ms,
            total_batches=total_batches,
            avg_batch_ms=avg_batch_ms,
            p95_batch_ms=p95_batch_ms,
        )

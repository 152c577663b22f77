from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .processing_stats import ProcessingStats
from .run_state import RunState

"""Result models for single-file runs and multi-file batches.

RunResult captures the outcome of one file. BatchResult aggregates the
metrics needed for the SUMMARY output line.
"""

__all__ = [
    "RunResult",
    "BatchResult",
]


@dataclass(frozen=True)
class RunResult:
    source: Path  # Input file
    state: RunState  # COMPLETE or ERROR
    output_path: Path | None = None  # Written file (COMPLETE only)
    stats: ProcessingStats | None = None  # Finalized stats (COMPLETE only)
    error: str | None = None  # Actionable failure message (ERROR only)

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.COMPLETE


@dataclass(frozen=True)
class BatchResult:
    success_files: int
    failed_files: int
    total_rows: int  # Rows across successful files
    encrypted_cells: int
    skipped_cells: int
    start_time: datetime
    end_time: datetime
    elapsed_ms: float
    runs: list[RunResult] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files

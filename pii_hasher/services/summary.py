from __future__ import annotations

from ..models.processing_stats import ProcessingStats
from ..models.run_result import BatchResult

"""SUMMARY line and per-file stats rendering."""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Avoid scientific notation for tiny values
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: BatchResult) -> str:
    """Render the SUMMARY line for a batch.

    Format:
    SUMMARY files={total}/{total} success={success} failed={failed} rows={rows}
    encrypted_cells={encrypted} skipped_cells={skipped} elapsed_ms={elapsed}

    >>> from datetime import datetime, timezone
    >>> t = datetime(2025, 1, 1, tzinfo=timezone.utc)
    >>> render_summary_line(BatchResult(1, 0, 10, 20, 0, t, t, 12.5))
    'SUMMARY files=1/1 success=1 failed=0 rows=10 encrypted_cells=20 skipped_cells=0 elapsed_ms=12.5'
    """
    total = result.total_files
    return (
        f"SUMMARY files={total}/{total} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"encrypted_cells={result.encrypted_cells} "
        f"skipped_cells={result.skipped_cells} "
        f"elapsed_ms={_format_number(result.elapsed_ms)}"
    )


def render_stats_line(name: str, stats: ProcessingStats) -> str:
    columns = ",".join(stats.target_columns_found)
    return (
        f"{name}: rows={stats.total_rows} encrypted_cells={stats.encrypted_cells} "
        f"skipped_cells={stats.empty_cells_skipped} columns=[{columns}] "
        f"batches={stats.total_batches} time_ms={_format_number(stats.processing_time_ms)}"
    )

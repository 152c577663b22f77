from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, date, datetime
from pathlib import Path

from ..config.loader import HasherConfig
from ..excel.reader import FileType, ParseError, detect_file_type, read_table
from ..excel.validation import validate_file
from ..excel.writer import write_table
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.column_mapping import ColumnMapping
from ..models.processing_stats import ProcessingStats
from ..models.run_result import BatchResult, RunResult
from ..models.run_state import RunState, check_transition
from ..models.tabular_data import TabularData
from .chunked_processor import ProcessingError, RowShapeError, process_table_sync
from .column_matcher import ColumnMatcher, NoTargetColumnsError
from .output import assemble, generate_output_filename
from .progress import ProgressTracker
from .summary import render_stats_line

"""Run orchestration.

HashingRun drives one file through the lifecycle
IDLE → PARSING → READY → PROCESSING → COMPLETE, landing in ERROR on any
failure. ``process_files`` runs several files independently (one failure
does not stop the others) and aggregates a BatchResult.
"""

__all__ = [
    "HashingRun",
    "process_file",
    "process_files",
]

logger = logging.getLogger(__name__)


class HashingRun:
    """Lifecycle of a single uploaded file.

    The run exclusively owns its parsed table while PROCESSING; callers must
    not start another run on the same table concurrently.
    """

    def __init__(self, config: HasherConfig | None = None, matcher: ColumnMatcher | None = None) -> None:
        self.config = config or HasherConfig()
        self.matcher = matcher or ColumnMatcher()
        self._clear()

    def _clear(self) -> None:
        self.state = RunState.IDLE
        self.source: Path | None = None
        self.file_type: FileType = "unknown"
        self.table: TabularData | None = None
        self.mappings: list[ColumnMapping] = []
        self.stats: ProcessingStats | None = None
        self.output_path: Path | None = None
        self.error: str | None = None
        self.error_type: str | None = None
        self.error_row = -1
        self.error_column: str | None = None

    def _move(self, target: RunState) -> None:
        self.state = check_transition(self.state, target)
        logger.debug("run %s -> %s", self.source.name if self.source else "<none>", target.value)

    def _fail(self, error_type: str, message: str, row: int = -1, column: str | None = None) -> None:
        self.error_type = error_type
        self.error = message
        self.error_row = row
        self.error_column = column
        self._move(RunState.ERROR)

    def reset(self) -> None:
        """Forget everything and return to IDLE (new upload)."""
        self._clear()

    def load(self, path: Path) -> RunState:
        """Validate, parse and classify ``path``; ends in READY or ERROR."""
        self.source = path
        self._move(RunState.PARSING)

        validation = validate_file(path, self.config.max_file_size_mb)
        if not validation.is_valid:
            self._fail("VALIDATION_ERROR", validation.errors[0] if validation.errors else "File validation failed")
            return self.state

        try:
            self.file_type = detect_file_type(path)
            self.table = read_table(path)
        except ParseError as e:
            self._fail("PARSE_ERROR", str(e))
            return self.state
        except Exception as e:
            self._fail("UNEXPECTED_ERROR", f"unexpected error while reading: {e}")
            return self.state

        self._move(RunState.READY)
        try:
            self.mappings = self.matcher.require_targets(self.table.headers)
        except NoTargetColumnsError as e:
            self.mappings = e.mappings
            self._fail("NO_TARGET_COLUMNS", str(e))
            return self.state

        targets = [m.original_name for m in self.mappings if m.is_target]
        logger.info(f"{path.name}: rows={self.table.row_count} target_columns={targets}")
        return self.state

    def execute(
        self,
        output_dir: Path | None = None,
        today: date | None = None,
        on_progress: Callable[[int], None] | None = None,
    ) -> RunState:
        """Hash, assemble and write the output file; ends in COMPLETE or ERROR.

        ``today`` is the date stamped into the output filename; it defaults to
        the local calendar date.
        """
        check_transition(self.state, RunState.PROCESSING)
        if self.table is None or self.source is None:
            raise ProcessingError("no table loaded")
        self._move(RunState.PROCESSING)
        out_dir = output_dir or Path(self.config.output_directory)
        day = today or date.today()

        try:
            processed = process_table_sync(
                self.table,
                self.mappings,
                chunk_size=self.config.chunk_size,
                on_progress=on_progress,
            )
            assembled = assemble(self.table, processed.rows)
            name = generate_output_filename(self.source.name, day)
            output_path = write_table(assembled, out_dir / name, self.file_type)
        except RowShapeError as e:
            self._fail("ROW_SHAPE_ERROR", str(e), row=e.row)
            return self.state
        except ProcessingError as e:
            self._fail("PROCESSING_ERROR", str(e), row=e.row, column=e.column)
            return self.state
        except OSError as e:
            self._fail("OUTPUT_WRITE_ERROR", f"failed to write output: {e}")
            return self.state
        except Exception as e:
            # e.g. openpyxl IllegalCharacterError on control characters
            self._fail("UNEXPECTED_ERROR", f"failed to build output: {e}")
            return self.state

        self.stats = processed.stats
        self.output_path = output_path
        self._move(RunState.COMPLETE)
        logger.info(render_stats_line(self.source.name, processed.stats))
        return self.state

    def result(self) -> RunResult:
        if self.source is None:
            raise ProcessingError("run has no source file")
        return RunResult(
            source=self.source,
            state=self.state,
            output_path=self.output_path,
            stats=self.stats,
            error=self.error,
        )

    def error_record(self) -> ErrorRecord | None:
        if self.state is not RunState.ERROR or self.source is None:
            return None
        return ErrorRecord.create(
            file=self.source.name,
            error_type=self.error_type or "PROCESSING_ERROR",
            message=self.error or "",
            row=self.error_row,
            column=self.error_column,
        )


def process_file(
    path: Path,
    config: HasherConfig,
    output_dir: Path | None = None,
    today: date | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> RunResult:
    """Run a single file end to end."""
    run = HashingRun(config)
    if run.load(path) is RunState.READY:
        with ProgressTracker(description=f"Hashing {path.name}") as progress:
            run.execute(output_dir=output_dir, today=today, on_progress=progress)

    record = run.error_record()
    if record is not None:
        logger.error(f"{path.name}: {record.message}")
        if error_log is not None:
            error_log.append(record)
    return run.result()


def process_files(
    paths: Sequence[Path],
    config: HasherConfig,
    output_dir: Path | None = None,
    today: date | None = None,
) -> BatchResult:
    """Process each file independently and aggregate the outcome.

    Failures are recorded in the JSON Lines error log under
    ``config.logs_directory`` and flushed once at the end.
    """
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer(Path(config.logs_directory))

    runs: list[RunResult] = []
    for path in paths:
        runs.append(process_file(path, config, output_dir=output_dir, today=today, error_log=error_log))

    log_path = error_log.flush()
    if log_path is not None:
        logger.warning(f"errors written to {log_path}")

    end_time = datetime.now(UTC)
    succeeded = [r for r in runs if r.succeeded and r.stats is not None]
    return BatchResult(
        success_files=len(succeeded),
        failed_files=len(runs) - len(succeeded),
        total_rows=sum(r.stats.total_rows for r in succeeded if r.stats),
        encrypted_cells=sum(r.stats.encrypted_cells for r in succeeded if r.stats),
        skipped_cells=sum(r.stats.empty_cells_skipped for r in succeeded if r.stats),
        start_time=start_time,
        end_time=end_time,
        elapsed_ms=(end_time - start_time).total_seconds() * 1000,
        runs=runs,
    )

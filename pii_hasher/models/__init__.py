"""Domain models for the PII column hasher.

Column classification, table, statistics and run lifecycle models shared by
the services, the parsers and the CLI.
"""

from .column_mapping import AliasTable, ColumnMapping, TargetColumnType
from .error_record import ErrorRecord
from .processing_stats import ProcessingStats, StatsAccumulator
from .run_result import BatchResult, RunResult
from .run_state import InvalidTransitionError, RunState
from .tabular_data import CellValue, TabularData

__all__ = [
    # Classification models
    "AliasTable",
    "ColumnMapping",
    "TargetColumnType",
    # Table models
    "CellValue",
    "TabularData",
    # Processing models
    "ProcessingStats",
    "StatsAccumulator",
    "ErrorRecord",
    # Lifecycle models
    "BatchResult",
    "InvalidTransitionError",
    "RunResult",
    "RunState",
]

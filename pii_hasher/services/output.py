from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from ..models.tabular_data import CellValue, TabularData
from .chunked_processor import ProcessingError

"""Output assembly and download filename generation."""

__all__ = [
    "assemble",
    "format_date",
    "generate_output_filename",
]


def assemble(original: TabularData, processed_rows: Sequence[Sequence[CellValue]]) -> TabularData:
    """Rebuild a table with the original headers and the processed rows.

    Raises:
        ProcessingError: If the processed rows do not line up with ``original``
    """
    if len(processed_rows) != original.row_count:
        raise ProcessingError(
            f"processed row count {len(processed_rows)} does not match original {original.row_count}"
        )
    rows: list[list[CellValue]] = []
    for i, row in enumerate(processed_rows):
        if len(row) != original.column_count:
            raise ProcessingError(
                f"processed row {i + 1} has {len(row)} cells, expected {original.column_count}",
                row=i + 1,
            )
        rows.append(list(row))
    return TabularData(headers=list(original.headers), rows=rows, sheet_name=original.sheet_name)


def format_date(day: date) -> str:
    # strftime does not zero pad years below 1000 on every platform
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def generate_output_filename(original_name: str, day: date) -> str:
    """Build ``{stem}_{YYYY-MM-DD}_encrypted{.ext}``.

    The name is split on the last dot; a name without a dot has no extension.

    >>> generate_output_filename("my.data.xlsx", date(2025, 10, 2))
    'my.data_2025-10-02_encrypted.xlsx'
    >>> generate_output_filename("README", date(2025, 10, 2))
    'README_2025-10-02_encrypted'
    """
    stem, dot, ext = original_name.rpartition(".")
    if not dot:
        stem, ext = original_name, ""
    suffix = f".{ext}" if dot else ""
    return f"{stem}_{format_date(day)}_encrypted{suffix}"

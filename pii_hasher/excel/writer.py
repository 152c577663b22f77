from __future__ import annotations

import csv
import io
from pathlib import Path

import pandas as pd

from ..models.tabular_data import TabularData
from .reader import FileType

"""Serialization of TabularData back into CSV or xlsx bytes.

Headers are written as the first data row (``header=False``) so duplicate
header names survive untouched. Excel output is always an xlsx workbook, also
when the input was a legacy .xls file.
"""

__all__ = [
    "serialize_table",
    "write_table",
]

DEFAULT_SHEET_NAME = "Sheet1"


def _frame(table: TabularData) -> pd.DataFrame:
    return pd.DataFrame([list(table.headers), *table.rows], dtype=object)


def serialize_table(table: TabularData, file_type: FileType) -> bytes:
    frame = _frame(table)
    if file_type == "csv":
        text = frame.to_csv(
            header=False,
            index=False,
            quoting=csv.QUOTE_ALL,
            lineterminator="\r\n",
        )
        return text.encode("utf-8")
    if file_type == "excel":
        buf = io.BytesIO()
        with pd.ExcelWriter(buf, engine="openpyxl") as writer:
            frame.to_excel(
                writer,
                sheet_name=table.sheet_name or DEFAULT_SHEET_NAME,
                header=False,
                index=False,
            )
        return buf.getvalue()
    raise ValueError(f"cannot serialize file type: {file_type}")


def write_table(table: TabularData, path: Path, file_type: FileType) -> Path:
    data = serialize_table(table, file_type)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path

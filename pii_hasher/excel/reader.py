from __future__ import annotations

import csv
import io
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Literal

import numpy as np
import pandas as pd

from ..models.tabular_data import CellValue, TabularData

"""Spreadsheet / CSV parsing into TabularData.

- CSV: delimiter sniffed from the first 4 KiB (, ; tab |), every cell kept as
  text so leading zeros in phone numbers survive, trailing blank rows dropped.
- Excel: first sheet only, raw cell types kept (numbers stay numbers), empty
  cells become None, dates become ISO strings.

The first row is always the header row.
"""

__all__ = [
    "FileType",
    "ParseError",
    "detect_file_type",
    "read_csv_file",
    "read_excel_file",
    "read_table",
]

FileType = Literal["excel", "csv", "unknown"]

EXCEL_EXTENSIONS = (".xlsx", ".xls")
CSV_EXTENSIONS = (".csv",)
SNIFF_DELIMITERS = ",;\t|"
SNIFF_SAMPLE_SIZE = 4096


class ParseError(Exception):
    """Raised when an input file cannot be turned into a table."""


def detect_file_type(path: Path) -> FileType:
    suffix = path.suffix.lower()
    if suffix in EXCEL_EXTENSIONS:
        return "excel"
    if suffix in CSV_EXTENSIONS:
        return "csv"
    return "unknown"


def _sniff_delimiter(sample: str) -> str:
    try:
        return csv.Sniffer().sniff(sample, delimiters=SNIFF_DELIMITERS).delimiter
    except csv.Error:
        return ","


def _is_blank_row(row: list[Any]) -> bool:
    return all(cell is None or cell == "" for cell in row)


def _split_header(records: list[list[CellValue]], sheet_name: str | None) -> TabularData:
    # Drop trailing blank rows (editors often leave a final empty line)
    while records and _is_blank_row(records[-1]):
        records.pop()
    if not records:
        raise ParseError("File is empty or contains no data rows.")
    headers = ["" if h is None else str(h) for h in records[0]]
    return TabularData(headers=headers, rows=records[1:], sheet_name=sheet_name)


def read_csv_file(path: Path) -> TabularData:
    try:
        text = path.read_bytes().decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"Failed to parse CSV: file is not valid UTF-8 ({e.reason})") from e
    if not text.strip():
        raise ParseError("File is empty or contains no data rows.")

    delimiter = _sniff_delimiter(text[:SNIFF_SAMPLE_SIZE])
    try:
        df = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
        )
    except pd.errors.EmptyDataError as e:
        raise ParseError("File is empty or contains no data rows.") from e
    except pd.errors.ParserError as e:
        raise ParseError(f"Failed to parse CSV: {e}") from e

    # Short rows are padded by pandas with NaN
    df = df.fillna("")
    records: list[list[CellValue]] = [list(r) for r in df.itertuples(index=False, name=None)]
    return _split_header(records, sheet_name=None)


def _to_cell(value: Any) -> CellValue:
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, (str, bool, int, float)):
        return value
    return str(value)


def read_excel_file(path: Path) -> TabularData:
    """Read the first worksheet of an Excel workbook."""
    try:
        xls = pd.ExcelFile(path)
        if not xls.sheet_names:
            raise ParseError("No sheets found in Excel file")
        sheet_name = str(xls.sheet_names[0])
        df = xls.parse(xls.sheet_names[0], header=None, dtype=object)
    except ParseError:
        raise
    except Exception as e:
        raise ParseError("Unable to read file. The file may be corrupted or password-protected.") from e

    records: list[list[CellValue]] = [
        [_to_cell(v) for v in row] for row in df.itertuples(index=False, name=None)
    ]
    return _split_header(records, sheet_name=sheet_name)


def read_table(path: Path) -> TabularData:
    """Parse ``path`` according to its extension.

    Raises:
        ParseError: If the type is unsupported or the content unreadable
    """
    file_type = detect_file_type(path)
    if file_type == "excel":
        return read_excel_file(path)
    if file_type == "csv":
        return read_csv_file(path)
    raise ParseError("Unsupported file format")

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

"""TabularData model: a parsed sheet (or CSV) as headers plus rows of cells.

Cells form a closed union of str / int / float / bool / None. Parsers are
responsible for coercing anything else (dates etc.) into one of these.
"""

__all__ = [
    "CellValue",
    "TabularData",
]

CellValue = Union[str, int, float, bool, None]


@dataclass
class TabularData:
    """Headers and rows of a single table.

    Invariant: every row has exactly ``column_count`` cells. Parsers in
    ``pii_hasher.excel.reader`` always produce rectangular tables; tables built
    by hand can be checked with ``find_shape_violations``.
    """
    headers: list[str]
    rows: list[list[CellValue]]
    sheet_name: str | None = None  # Source sheet for Excel input, None for CSV

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def find_shape_violations(self) -> list[int]:
        """Return 1-based data row numbers whose length differs from column_count."""
        width = self.column_count
        return [i + 1 for i, row in enumerate(self.rows) if len(row) != width]

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .cell_value import EMPTY, CellValue

"""In-memory workbook model.

A Workbook is an ordered mapping of sheet name -> Sheet, a Sheet is a grid of
CellValue rows. Rows may be ragged; reading past the end of a row yields EMPTY.
Row numbers are 1-based to match what a spreadsheet user sees.
"""

__all__ = [
    "RowRecord",
    "Sheet",
    "Workbook",
    "MergedWorkbook",
]


@dataclass(frozen=True)
class RowRecord:
    """One physical row of a sheet together with its 1-based row number."""
    sheet_name: str
    row_number: int
    cells: tuple[CellValue, ...]

    def value_at(self, column: int | None) -> CellValue:
        if column is None or column < 0 or column >= len(self.cells):
            return EMPTY
        return self.cells[column]

    def __len__(self) -> int:
        return len(self.cells)

    def to_python(self) -> list[Any]:
        return [c.to_python() for c in self.cells]


@dataclass(frozen=True)
class Sheet:
    name: str
    rows: tuple[tuple[CellValue, ...], ...]

    @staticmethod
    def from_rows(name: str, rows: Iterable[Sequence[Any]]) -> Sheet:
        """Build a sheet from plain Python values (None -> EMPTY)."""
        return Sheet(name=name, rows=tuple(tuple(CellValue.of(v) for v in row) for row in rows))

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def record(self, row_number: int) -> RowRecord:
        """Return the RowRecord for a 1-based row number."""
        if row_number < 1 or row_number > len(self.rows):
            raise IndexError(f"sheet '{self.name}' has no row {row_number}")
        return RowRecord(self.name, row_number, self.rows[row_number - 1])

    def records_below(self, header_row_number: int) -> Iterator[RowRecord]:
        """Yield every row strictly below the header row."""
        for idx in range(header_row_number, len(self.rows)):
            yield RowRecord(self.name, idx + 1, self.rows[idx])


@dataclass(frozen=True)
class Workbook:
    name: str
    sheets: Mapping[str, Sheet]

    @staticmethod
    def from_rows(name: str, sheets: Mapping[str, Iterable[Sequence[Any]]]) -> Workbook:
        return Workbook(
            name=name,
            sheets={sheet_name: Sheet.from_rows(sheet_name, rows) for sheet_name, rows in sheets.items()},
        )

    @property
    def sheet_names(self) -> list[str]:
        return list(self.sheets.keys())

    def get(self, sheet_name: str) -> Sheet | None:
        return self.sheets.get(sheet_name)

    def __contains__(self, sheet_name: object) -> bool:
        return sheet_name in self.sheets


# Reconciliation output is an ordinary workbook
MergedWorkbook = Workbook

from __future__ import annotations

import logging

from ..models.cell_value import EMPTY, CellValue
from ..models.comparison import ComparisonReport, SheetComparisonResult, Side
from ..models.workbook import RowRecord, Sheet, Workbook
from .columns import header_labels
from .diff_engine import align_columns

"""Reconciliation of two workbooks into one, favoring a target side.

Policy:
- the merged workbook starts as a copy of the target's sheets
- modified rows absorb the other side's value for every differing column
- rows that only the other side has are appended
- rows that only the target has are never removed

Rows are located through the row numbers stored in the ComparisonReport; the
grids are only read for values and headers, never re-matched.
"""

__all__ = [
    "MergeInvariantViolation",
    "reconcile_sheet",
    "reconcile_workbooks",
]

logger = logging.getLogger(__name__)


class MergeInvariantViolation(Exception):
    """Programming defect: the merge would shrink the target or the report does
    not describe the target grid."""


class _Grid:
    """Mutable working copy of a target sheet."""

    def __init__(self, sheet: Sheet, header_row_number: int) -> None:
        self.name = sheet.name
        self.rows: list[list[CellValue]] = [list(r) for r in sheet.rows]
        self.header_idx = header_row_number - 1
        # a target shorter than the header row still gets one to add columns to
        while len(self.rows) <= self.header_idx:
            self.rows.append([])
        self.labels = header_labels(self.header_record(), self.width())

    def header_record(self) -> RowRecord:
        return RowRecord(self.name, self.header_idx + 1, tuple(self.rows[self.header_idx]))

    def width(self) -> int:
        return max((len(r) for r in self.rows[self.header_idx:]), default=0)

    def add_column(self, label: str) -> int:
        """Append a column labelled ``label`` after every existing column."""
        header = self.rows[self.header_idx]
        while len(header) < len(self.labels):
            header.append(EMPTY)
        header.append(CellValue.string(label))
        self.labels.append(label)
        logger.debug(f"sheet '{self.name}': added column '{label}' at index {len(self.labels) - 1}")
        return len(self.labels) - 1

    def set(self, row_number: int, column: int, value: CellValue) -> None:
        if row_number < 1 or row_number > len(self.rows):
            raise MergeInvariantViolation(
                f"sheet '{self.name}': row {row_number} referenced by the report does not exist"
            )
        row = self.rows[row_number - 1]
        while len(row) <= column:
            row.append(EMPTY)
        row[column] = value

    def append(self, cells: dict[int, CellValue]) -> None:
        width = max(cells) + 1 if cells else 0
        row = [EMPTY] * width
        for column, value in cells.items():
            row[column] = value
        self.rows.append(row)

    def freeze(self) -> Sheet:
        return Sheet(name=self.name, rows=tuple(tuple(r) for r in self.rows))


def _width_from(sheet: Sheet, header_row_number: int) -> int:
    return max((len(r) for r in sheet.rows[header_row_number - 1:]), default=0)


def reconcile_sheet(
    target_sheet: Sheet,
    other_sheet: Sheet,
    result: SheetComparisonResult,
    target: Side,
    header_row_number: int,
) -> Sheet:
    """Merge one compared sheet into the target side's copy.

    Columns are placed through one alignment of the target header against the
    other side's header, taken before anything is written. A column the target
    lacks gets its own new column the first time a value lands in it, so
    repeated labels never collapse into one column.
    """
    grid = _Grid(target_sheet, header_row_number)
    source = target.other

    # the target plays side A of the alignment
    columns = align_columns(
        grid.header_record(),
        other_sheet.record(header_row_number) if other_sheet.row_count >= header_row_number else None,
        width_a=grid.width(),
        width_b=_width_from(other_sheet, header_row_number),
    )
    by_other = {col.index_b: col for col in columns if col.index_b is not None}
    added: dict[int, int] = {}

    def target_column(other_index: int, label: str) -> int:
        col = by_other.get(other_index)
        if col is not None and col.index_a is not None:
            return col.index_a
        if other_index not in added:
            added[other_index] = grid.add_column(col.label if col is not None else label)
        return added[other_index]

    for mod in result.modified:
        row_number = mod.row_number(target)
        for diff in mod.diffs:
            if target is Side.A:
                own, theirs, value = diff.column_index_a, diff.column_index_b, diff.value_b
            else:
                own, theirs, value = diff.column_index_b, diff.column_index_a, diff.value_a
            if own is None:
                if theirs is None:
                    raise MergeInvariantViolation(
                        f"sheet '{target_sheet.name}': column '{diff.column_name}' has no position on either side"
                    )
                own = target_column(theirs, diff.column_name)
            grid.set(row_number, own, value)

    # rows the other side has and the target lacks
    incoming = result.new_rows if target is Side.A else result.deleted_rows
    for record in incoming:
        cells: dict[int, CellValue] = {}
        for other_index, value in enumerate(record.cells):
            if value.is_empty:
                continue
            cells[target_column(other_index, f"Column {other_index + 1}")] = value
        grid.append(cells)

    merged = grid.freeze()
    if merged.row_count < target_sheet.row_count:
        raise MergeInvariantViolation(
            f"sheet '{target_sheet.name}': merged rows {merged.row_count} < target rows {target_sheet.row_count}"
        )
    logger.info(
        f"reconciled sheet '{target_sheet.name}' into {target.value}: "
        f"updated={len(result.modified)} appended={len(incoming)} from {source.value}"
    )
    return merged


def reconcile_workbooks(
    workbook_a: Workbook,
    workbook_b: Workbook,
    report: ComparisonReport,
    target: Side,
) -> Workbook:
    """Build a merged workbook from ``report``, favoring ``target``.

    Sheets that failed comparison, had no differences, or are missing on the
    non-target side are copied unchanged. Sheets the target lacks are not
    created.
    """
    base = workbook_a if target is Side.A else workbook_b
    other = workbook_b if target is Side.A else workbook_a

    sheets: dict[str, Sheet] = {}
    for name, sheet in base.sheets.items():
        result = report.results.get(name)
        other_sheet = other.get(name)
        if result is None or other_sheet is None or not result.summary.has_differences:
            sheets[name] = sheet
            continue
        sheets[name] = reconcile_sheet(sheet, other_sheet, result, target, report.header_row)

    return Workbook(name=f"{base.name}_reconciled", sheets=sheets)

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..models.comparison import (
    CellDiff,
    CompositeKey,
    DuplicateKeyWarning,
    ModifiedRowDiff,
    SheetComparisonResult,
    Side,
)
from ..models.workbook import RowRecord
from .columns import header_labels
from .sheet_index import SheetIndex

"""Row matching and cell-level classification for one sheet.

Rows are matched on composite key. Matched pairs are compared column by
column, with columns paired by header label so that A and B may order their
columns differently. Values compare exactly and case-sensitively; only keys are
case-folded.
"""

__all__ = [
    "ColumnPair",
    "align_columns",
    "compare_rows",
    "compare_sheets",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnPair:
    """A column as seen from both sides; an index is None when that side lacks it."""
    label: str
    index_a: int | None
    index_b: int | None


def align_columns(
    header_a: RowRecord | None,
    header_b: RowRecord | None,
    *,
    width_a: int = 0,
    width_b: int = 0,
) -> list[ColumnPair]:
    """Pair the columns of two headers by label.

    Order is A's columns left to right, then the columns only B has, in B's
    order. Labels match case-insensitively, like key labels; repeated labels
    are paired in order of appearance. The label shown is A's when both have it.
    """
    labels_a = header_labels(header_a, width_a)
    labels_b = header_labels(header_b, width_b)

    b_positions: dict[str, list[int]] = {}
    for idx, label in enumerate(labels_b):
        b_positions.setdefault(label.casefold(), []).append(idx)

    pairs: list[ColumnPair] = []
    used_b: set[int] = set()
    for idx, label in enumerate(labels_a):
        candidates = b_positions.get(label.casefold())
        if candidates:
            idx_b = candidates.pop(0)
            used_b.add(idx_b)
            pairs.append(ColumnPair(label, idx, idx_b))
        else:
            pairs.append(ColumnPair(label, idx, None))
    for idx, label in enumerate(labels_b):
        if idx not in used_b:
            pairs.append(ColumnPair(label, None, idx))
    return pairs


def compare_rows(row_a: RowRecord, row_b: RowRecord, columns: list[ColumnPair]) -> list[CellDiff]:
    """Return one CellDiff per column whose values differ, in column order."""
    diffs: list[CellDiff] = []
    for col in columns:
        value_a = row_a.value_at(col.index_a)
        value_b = row_b.value_at(col.index_b)
        if value_a != value_b:
            diffs.append(
                CellDiff(
                    column_name=col.label,
                    value_a=value_a,
                    value_b=value_b,
                    column_index_a=col.index_a,
                    column_index_b=col.index_b,
                )
            )
    return diffs


def _grid_width(index: SheetIndex, header: RowRecord | None) -> int:
    width = len(header) if header is not None else 0
    for rows in index.buckets.values():
        for row in rows:
            width = max(width, len(row))
    return width


def compare_sheets(
    sheet_name: str,
    index_a: SheetIndex,
    index_b: SheetIndex,
    header_a: RowRecord | None,
    header_b: RowRecord | None,
    *,
    duplicate_warnings: list[DuplicateKeyWarning] | None = None,
    missing_side: Side | None = None,
) -> SheetComparisonResult:
    """Match two sheet indexes on key and classify every key.

    - key only in B: first B row is new
    - key only in A: first A row is deleted
    - key in both: first rows compared; any differing column makes the key modified

    New rows are ordered by B row number, deleted and modified rows by A row
    number.
    """
    columns = align_columns(
        header_a,
        header_b,
        width_a=_grid_width(index_a, header_a),
        width_b=_grid_width(index_b, header_b),
    )

    new_rows: list[RowRecord] = []
    deleted_rows: list[RowRecord] = []
    modified: list[ModifiedRowDiff] = []

    keys: list[CompositeKey] = list(index_a.keys())
    keys.extend(k for k in index_b.keys() if k not in index_a)

    for key in keys:
        in_a = key in index_a
        in_b = key in index_b
        if in_a and not in_b:
            deleted_rows.append(index_a.first(key))
        elif in_b and not in_a:
            new_rows.append(index_b.first(key))
        else:
            row_a = index_a.first(key)
            row_b = index_b.first(key)
            diffs = compare_rows(row_a, row_b, columns)
            if diffs:
                modified.append(
                    ModifiedRowDiff(
                        key=key,
                        row_number_a=row_a.row_number,
                        row_number_b=row_b.row_number,
                        diffs=tuple(diffs),
                    )
                )

    new_rows.sort(key=lambda r: r.row_number)
    deleted_rows.sort(key=lambda r: r.row_number)
    modified.sort(key=lambda m: m.row_number_a)

    logger.debug(
        f"sheet={sheet_name} keys_a={len(index_a)} keys_b={len(index_b)} "
        f"new={len(new_rows)} deleted={len(deleted_rows)} modified={len(modified)}"
    )

    return SheetComparisonResult(
        sheet_name=sheet_name,
        new_rows=tuple(new_rows),
        deleted_rows=tuple(deleted_rows),
        modified=tuple(modified),
        header_a=header_a,
        header_b=header_b,
        duplicate_warnings=tuple(duplicate_warnings or ()),
        missing_side=missing_side,
    )

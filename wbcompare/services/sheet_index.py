from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from ..models.comparison import CompositeKey, DuplicateKeyWarning, Side
from ..models.workbook import RowRecord, Sheet
from .columns import HeaderRowNotFound
from .row_key import build_row_key

"""Key -> rows index for one sheet of one workbook side.

Keys are kept as buckets (a key may occur on several rows). Matching always
uses the first row of a bucket; further rows are reported as duplicates.
"""

__all__ = [
    "MatchOutcome",
    "SheetIndex",
    "build_sheet_index",
    "header_record",
]


@dataclass(frozen=True)
class MatchOutcome:
    """Rows sharing one key: unique when there is exactly one."""
    rows: tuple[RowRecord, ...]

    @property
    def primary(self) -> RowRecord:
        return self.rows[0]

    @property
    def is_duplicate(self) -> bool:
        return len(self.rows) > 1

    @property
    def duplicates(self) -> tuple[RowRecord, ...]:
        return self.rows[1:]


@dataclass(frozen=True)
class SheetIndex:
    sheet_name: str
    side: Side
    buckets: dict[CompositeKey, tuple[RowRecord, ...]]
    skipped_rows: tuple[int, ...] = ()  # data rows whose key cells are all blank

    @staticmethod
    def empty(sheet_name: str, side: Side) -> SheetIndex:
        return SheetIndex(sheet_name=sheet_name, side=side, buckets={})

    def __contains__(self, key: object) -> bool:
        return key in self.buckets

    def __len__(self) -> int:
        return len(self.buckets)

    def keys(self) -> Iterator[CompositeKey]:
        return iter(self.buckets)

    def first(self, key: CompositeKey) -> RowRecord:
        return self.buckets[key][0]

    def outcome(self, key: CompositeKey) -> MatchOutcome:
        return MatchOutcome(self.buckets[key])

    def row_numbers(self) -> set[int]:
        """Every data row number covered by this index, skipped rows included."""
        numbers = {r.row_number for rows in self.buckets.values() for r in rows}
        numbers.update(self.skipped_rows)
        return numbers


def header_record(sheet: Sheet, header_row_number: int) -> RowRecord:
    """Return the header row of ``sheet``.

    Raises:
        ValueError: header_row_number < 1
        HeaderRowNotFound: the sheet is shorter than the header row number
    """
    if header_row_number < 1:
        raise ValueError(f"header row must be >= 1: {header_row_number}")
    if sheet.row_count < header_row_number:
        raise HeaderRowNotFound(sheet.name, header_row_number)
    return sheet.record(header_row_number)


def build_sheet_index(
    sheet: Sheet,
    header_row_number: int,
    key_columns: Sequence[int],
    *,
    side: Side = Side.A,
    case_sensitive: bool = False,
) -> tuple[SheetIndex, list[DuplicateKeyWarning]]:
    """Index every row strictly below the header row by composite key.

    Returns the index and one DuplicateKeyWarning per key found on more than
    one row (row numbers ascending, the first one is used for matching).
    """
    header_record(sheet, header_row_number)

    buckets: dict[CompositeKey, list[RowRecord]] = {}
    skipped: list[int] = []
    for record in sheet.records_below(header_row_number):
        key = build_row_key(record, key_columns, case_sensitive=case_sensitive)
        if key.is_empty:
            skipped.append(record.row_number)
            continue
        buckets.setdefault(key, []).append(record)

    warnings = [
        DuplicateKeyWarning(
            sheet_name=sheet.name,
            key=key,
            row_numbers=tuple(r.row_number for r in rows),
            side=side,
        )
        for key, rows in buckets.items()
        if len(rows) > 1
    ]
    index = SheetIndex(
        sheet_name=sheet.name,
        side=side,
        buckets={key: tuple(rows) for key, rows in buckets.items()},
        skipped_rows=tuple(skipped),
    )
    return index, warnings

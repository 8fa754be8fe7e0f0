from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .cell_value import CellValue
from .workbook import RowRecord

"""Comparison result models.

These are produced by the diff engine and consumed by the report renderer and
the reconciliation merger. All of them are frozen; a new set is built for every
comparison run.
"""

__all__ = [
    "Side",
    "CompositeKey",
    "EMPTY_KEY",
    "KEY_SEPARATOR",
    "CellDiff",
    "ModifiedRowDiff",
    "SheetSummary",
    "SheetComparisonResult",
    "DuplicateKeyWarning",
    "EmptyWorkbookSide",
    "ComparisonError",
    "ReportSummary",
    "ComparisonReport",
]

# ASCII unit separator, not expected inside cell text
KEY_SEPARATOR = "\x1f"


class Side(Enum):
    """Which of the two workbooks a value or row comes from."""
    A = "A"
    B = "B"

    @property
    def other(self) -> Side:
        return Side.B if self is Side.A else Side.A


@dataclass(frozen=True)
class CompositeKey:
    """Row identity across two sheets.

    Equality and hashing use ``text`` only (the normalized, separator-joined
    form). ``parts`` keeps the trimmed original-case values for display.
    """
    text: str
    parts: tuple[str, ...] = field(default=(), compare=False)

    @property
    def is_empty(self) -> bool:
        return self.text == ""

    def __str__(self) -> str:
        return " | ".join(self.parts)


EMPTY_KEY = CompositeKey("", ())


@dataclass(frozen=True)
class CellDiff:
    """One differing column of a matched row pair.

    ``column_index_a`` / ``column_index_b`` are None when the column does not
    exist in that side's header; the value on that side is then EMPTY.
    """
    column_name: str
    value_a: CellValue
    value_b: CellValue
    column_index_a: int | None = None
    column_index_b: int | None = None

    def swapped(self) -> CellDiff:
        return CellDiff(
            column_name=self.column_name,
            value_a=self.value_b,
            value_b=self.value_a,
            column_index_a=self.column_index_b,
            column_index_b=self.column_index_a,
        )


@dataclass(frozen=True)
class ModifiedRowDiff:
    key: CompositeKey
    row_number_a: int
    row_number_b: int
    diffs: tuple[CellDiff, ...]

    def row_number(self, side: Side) -> int:
        return self.row_number_a if side is Side.A else self.row_number_b


@dataclass(frozen=True)
class DuplicateKeyWarning:
    """A key that occurs on more than one row of the same sheet side.

    Matching uses ``row_numbers[0]``; the remaining rows are ignored for
    matching and reported here.
    """
    sheet_name: str
    key: CompositeKey
    row_numbers: tuple[int, ...]
    side: Side

    @property
    def ignored_rows(self) -> tuple[int, ...]:
        return self.row_numbers[1:]


@dataclass(frozen=True)
class EmptyWorkbookSide:
    """Notice that a requested sheet exists in only one workbook."""
    sheet_name: str
    missing_side: Side


@dataclass(frozen=True)
class ComparisonError:
    """Per-sheet failure; the sheet is excluded from the diff data."""
    sheet_name: str
    reason: str

    def describe(self) -> str:
        return f"could not compare sheet {self.sheet_name}: {self.reason}"


@dataclass(frozen=True)
class SheetSummary:
    new_rows: int = 0
    deleted_rows: int = 0
    modified_rows: int = 0

    @property
    def differing_rows(self) -> int:
        return self.new_rows + self.deleted_rows + self.modified_rows

    @property
    def has_differences(self) -> bool:
        return self.differing_rows > 0


@dataclass(frozen=True)
class SheetComparisonResult:
    sheet_name: str
    new_rows: tuple[RowRecord, ...]
    deleted_rows: tuple[RowRecord, ...]
    modified: tuple[ModifiedRowDiff, ...]
    header_a: RowRecord | None = None
    header_b: RowRecord | None = None
    duplicate_warnings: tuple[DuplicateKeyWarning, ...] = ()
    missing_side: Side | None = None

    @property
    def summary(self) -> SheetSummary:
        return SheetSummary(
            new_rows=len(self.new_rows),
            deleted_rows=len(self.deleted_rows),
            modified_rows=len(self.modified),
        )

    @property
    def empty_side_notice(self) -> EmptyWorkbookSide | None:
        if self.missing_side is None:
            return None
        return EmptyWorkbookSide(self.sheet_name, self.missing_side)

    def header(self, side: Side) -> RowRecord | None:
        return self.header_a if side is Side.A else self.header_b


@dataclass(frozen=True)
class ReportSummary:
    sheets_requested: int
    sheets_compared: int
    sheets_failed: int
    sheets_with_differences: tuple[str, ...]
    total_new_rows: int
    total_deleted_rows: int
    total_modified_rows: int
    duplicate_warnings: int

    @property
    def total_differing_rows(self) -> int:
        return self.total_new_rows + self.total_deleted_rows + self.total_modified_rows


@dataclass(frozen=True)
class ComparisonReport:
    """Outcome of one comparison run.

    ``results`` and ``errors`` are disjoint and keyed by sheet name, both in
    request order. ``sheet_names`` is the de-duplicated request.
    """
    header_row: int
    key_spec: str
    sheet_names: tuple[str, ...]
    results: dict[str, SheetComparisonResult]
    errors: dict[str, ComparisonError]
    case_sensitive_keys: bool = False

    @property
    def summary(self) -> ReportSummary:
        results = list(self.results.values())
        return ReportSummary(
            sheets_requested=len(self.sheet_names),
            sheets_compared=len(results),
            sheets_failed=len(self.errors),
            sheets_with_differences=tuple(r.sheet_name for r in results if r.summary.has_differences),
            total_new_rows=sum(len(r.new_rows) for r in results),
            total_deleted_rows=sum(len(r.deleted_rows) for r in results),
            total_modified_rows=sum(len(r.modified) for r in results),
            duplicate_warnings=sum(len(r.duplicate_warnings) for r in results),
        )

    @property
    def sheets_with_differences(self) -> list[str]:
        return list(self.summary.sheets_with_differences)

    @property
    def duplicate_warnings(self) -> list[DuplicateKeyWarning]:
        return [w for r in self.results.values() for w in r.duplicate_warnings]

    @property
    def empty_sides(self) -> list[EmptyWorkbookSide]:
        notices = [r.empty_side_notice for r in self.results.values()]
        return [n for n in notices if n is not None]

from __future__ import annotations

import re
from typing import Any

from ..models.comparison import ComparisonReport, SheetComparisonResult, Side
from ..models.workbook import RowRecord, Sheet, Workbook
from .columns import header_labels

"""Comparison report rendering.

Turns a ComparisonReport into a plain Workbook: a Summary sheet followed by one
``Compare_<sheet>`` sheet per sheet with differences. Serialization is left to
``wbcompare.excel.writer``.
"""

__all__ = [
    "SUMMARY_SHEET",
    "build_report_workbook",
    "sanitize_sheet_name",
    "unique_sheet_name",
]

SUMMARY_SHEET = "Summary"
MAX_SHEET_NAME_LENGTH = 31
_INVALID_SHEET_NAME_CHARS = re.compile(r"[\\/?*\[\]:]")


def sanitize_sheet_name(name: str) -> str:
    """Make ``name`` a valid Excel sheet name (no \\ / ? * [ ] :, max 31 chars)."""
    if not isinstance(name, str) or name.strip() == "":
        return "Sheet"
    sanitized = _INVALID_SHEET_NAME_CHARS.sub("", name)[:MAX_SHEET_NAME_LENGTH]
    if sanitized.strip() == "":
        return "Sheet"
    return sanitized


def unique_sheet_name(existing: list[str], desired: str) -> str:
    """Sanitized ``desired`` made unique (case-insensitive) with a ``_<n>`` suffix."""
    base = sanitize_sheet_name(desired)
    taken = {n.lower() for n in existing}
    if base.lower() not in taken:
        return base
    counter = 1
    while True:
        suffix = f"_{counter}"
        attempt = f"{base[:MAX_SHEET_NAME_LENGTH - len(suffix)]}{suffix}"
        if attempt.lower() not in taken:
            return attempt
        counter += 1


def _summary_rows(report: ComparisonReport, name_a: str, name_b: str) -> list[list[Any]]:
    rows: list[list[Any]] = [
        ["File Comparison Report"],
        [],
        ["File A:", name_a],
        ["File B:", name_b],
        ["Key columns:", report.key_spec],
        ["Header row:", report.header_row],
        [],
        ["Summary of Differences"],
        ["Sheet Name", "New Rows", "Deleted Rows", "Modified Rows"],
    ]
    for name in report.sheets_with_differences:
        s = report.results[name].summary
        rows.append([name, s.new_rows, s.deleted_rows, s.modified_rows])

    if report.errors:
        rows.extend([[], ["Errors"]])
        rows.extend([[err.describe()] for err in report.errors.values()])

    notices = report.empty_sides
    if notices:
        rows.extend([[], ["Missing Sheets"]])
        for n in notices:
            present = name_b if n.missing_side is Side.A else name_a
            missing = name_a if n.missing_side is Side.A else name_b
            rows.append([n.sheet_name, f"only in {present}, missing from {missing}"])

    warnings = report.duplicate_warnings
    if warnings:
        rows.extend([[], ["Duplicate Keys"], ["Sheet Name", "File", "Key", "Rows", "Row Used"]])
        for w in warnings:
            file_name = name_a if w.side is Side.A else name_b
            rows.append([
                w.sheet_name,
                file_name,
                str(w.key),
                ", ".join(str(n) for n in w.row_numbers),
                w.row_numbers[0],
            ])
    return rows


def _row_block(title: str, records: tuple[RowRecord, ...], header: RowRecord | None) -> list[list[Any]]:
    width = max([len(header) if header is not None else 0] + [len(r) for r in records])
    block: list[list[Any]] = [[f"{title} ({len(records)})"], header_labels(header, width)]
    block.extend(r.to_python() for r in records)
    return block


def _detail_rows(result: SheetComparisonResult, name_a: str, name_b: str) -> list[list[Any]]:
    rows: list[list[Any]] = []
    if result.modified:
        rows.append([f"Modified Rows ({len(result.modified)})"])
        rows.append(["Key", "Column Changed", f"Value in {name_a} (Old)", f"Value in {name_b} (New)"])
        for mod in result.modified:
            for i, diff in enumerate(mod.diffs):
                rows.append([
                    str(mod.key) if i == 0 else "",
                    diff.column_name,
                    diff.value_a.to_python(),
                    diff.value_b.to_python(),
                ])
            rows.append([])

    if result.new_rows:
        if rows:
            rows.append([])
        rows.extend(_row_block("New Rows", result.new_rows, result.header_b))

    if result.deleted_rows:
        if rows:
            rows.append([])
        rows.extend(_row_block("Deleted Rows", result.deleted_rows, result.header_a))
    return rows


def build_report_workbook(report: ComparisonReport, name_a: str, name_b: str) -> Workbook:
    """Render ``report`` as a workbook (Summary + one detail sheet per differing sheet)."""
    sheets: dict[str, Sheet] = {
        SUMMARY_SHEET: Sheet.from_rows(SUMMARY_SHEET, _summary_rows(report, name_a, name_b)),
    }
    for sheet_name in report.sheets_with_differences:
        detail_name = unique_sheet_name(list(sheets), f"Compare_{sheet_name}")
        sheets[detail_name] = Sheet.from_rows(
            detail_name, _detail_rows(report.results[sheet_name], name_a, name_b)
        )
    return Workbook(name="comparison_report", sheets=sheets)

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from ..models.comparison import (
    ComparisonError,
    ComparisonReport,
    DuplicateKeyWarning,
    SheetComparisonResult,
    Side,
)
from ..models.workbook import RowRecord, Sheet, Workbook
from .columns import (
    InvalidComparisonRequest,
    SheetComparisonFailure,
    parse_key_spec,
    resolve_key_columns,
)
from .diff_engine import compare_sheets
from .sheet_index import SheetIndex, build_sheet_index, header_record

"""Comparison orchestration across sheets.

Runs the per-sheet pipeline (resolve key columns -> index both sides -> diff)
for every requested sheet and aggregates the results into a ComparisonReport.

Failure isolation: a sheet whose key columns or header row cannot be resolved
is recorded as a ComparisonError and the remaining sheets are still compared.
Invalid requests (no sheets, empty key, bad header row) are rejected before
any sheet is indexed.
"""

__all__ = [
    "CancelToken",
    "ComparisonCancelled",
    "ProgressCallback",
    "compare_workbooks",
    "default_sheet_order",
]

logger = logging.getLogger(__name__)


class ProgressCallback(Protocol):
    def start_sheet(self, sheet_name: str) -> None: ...

    def finish_sheet(self, success: bool = True, rows_processed: int = 0) -> None: ...


class CancelToken(Protocol):
    """Anything with ``is_set()``, e.g. threading.Event."""

    def is_set(self) -> bool: ...


class ComparisonCancelled(Exception):
    """Raised between sheets when the cancel token is set.

    ``partial`` holds the results of the sheets completed before cancellation.
    """

    def __init__(self, partial: ComparisonReport) -> None:
        super().__init__(f"comparison cancelled after {len(partial.results) + len(partial.errors)} sheet(s)")
        self.partial = partial


def default_sheet_order(workbook_a: Workbook, workbook_b: Workbook) -> list[str]:
    """Every sheet of A in order, then the sheets that only B has."""
    names = workbook_a.sheet_names
    names.extend(n for n in workbook_b.sheet_names if n not in workbook_a)
    return names


def _validate_request(sheet_names: list[str], key_spec: str, header_row_number: int) -> None:
    if not sheet_names:
        raise InvalidComparisonRequest("no sheets selected for comparison")
    if not parse_key_spec(key_spec):
        raise InvalidComparisonRequest("key specification is empty")
    if header_row_number < 1:
        raise InvalidComparisonRequest(f"header row must be >= 1: {header_row_number}")


def _index_side(
    sheet: Sheet,
    side: Side,
    key_spec: str,
    header_row_number: int,
    case_sensitive: bool,
) -> tuple[SheetIndex, RowRecord, list[DuplicateKeyWarning]]:
    header = header_record(sheet, header_row_number)
    key_columns = resolve_key_columns(key_spec, header, sheet_name=sheet.name)
    logger.debug(f"sheet={sheet.name} side={side.value} key_columns={key_columns}")
    index, warnings = build_sheet_index(
        sheet, header_row_number, key_columns, side=side, case_sensitive=case_sensitive
    )
    return index, header, warnings


def _compare_single_sheet(
    sheet_name: str,
    workbook_a: Workbook,
    workbook_b: Workbook,
    key_spec: str,
    header_row_number: int,
    case_sensitive: bool,
) -> SheetComparisonResult:
    sheet_a = workbook_a.get(sheet_name)
    sheet_b = workbook_b.get(sheet_name)
    if sheet_a is None and sheet_b is None:
        raise SheetComparisonFailure(sheet_name, "sheet not found in either workbook")

    missing_side: Side | None = None
    warnings: list[DuplicateKeyWarning] = []

    if sheet_a is not None:
        index_a, header_a, warns = _index_side(sheet_a, Side.A, key_spec, header_row_number, case_sensitive)
        warnings.extend(warns)
    else:
        index_a, header_a, missing_side = SheetIndex.empty(sheet_name, Side.A), None, Side.A

    if sheet_b is not None:
        index_b, header_b, warns = _index_side(sheet_b, Side.B, key_spec, header_row_number, case_sensitive)
        warnings.extend(warns)
    else:
        index_b, header_b, missing_side = SheetIndex.empty(sheet_name, Side.B), None, Side.B

    return compare_sheets(
        sheet_name,
        index_a,
        index_b,
        header_a,
        header_b,
        duplicate_warnings=warnings,
        missing_side=missing_side,
    )


def compare_workbooks(
    workbook_a: Workbook,
    workbook_b: Workbook,
    sheet_names: Iterable[str],
    key_spec: str,
    header_row_number: int = 1,
    *,
    case_sensitive: bool = False,
    progress: ProgressCallback | None = None,
    cancel_event: CancelToken | None = None,
) -> ComparisonReport:
    """Compare the requested sheets of two workbooks.

    Args:
        workbook_a: original workbook
        workbook_b: updated workbook
        sheet_names: sheets to compare, in report order (duplicates ignored)
        key_spec: comma separated column letters and/or header labels
        header_row_number: 1-based header row; data rows are the rows below it
        case_sensitive: match keys case-sensitively (values always are)
        progress: optional per-sheet progress callback
        cancel_event: optional token checked before each sheet

    Returns:
        ComparisonReport mixing per-sheet results and per-sheet errors

    Raises:
        InvalidComparisonRequest: nothing to compare
        ComparisonCancelled: cancel_event was set; carries the partial report
    """
    requested = list(dict.fromkeys(sheet_names))
    _validate_request(requested, key_spec, header_row_number)

    results: dict[str, SheetComparisonResult] = {}
    errors: dict[str, ComparisonError] = {}

    def _report() -> ComparisonReport:
        return ComparisonReport(
            header_row=header_row_number,
            key_spec=key_spec,
            sheet_names=tuple(requested),
            results=dict(results),
            errors=dict(errors),
            case_sensitive_keys=case_sensitive,
        )

    for sheet_name in requested:
        if cancel_event is not None and cancel_event.is_set():
            logger.warning(f"comparison cancelled before sheet '{sheet_name}'")
            raise ComparisonCancelled(_report())

        if progress is not None:
            progress.start_sheet(sheet_name)
        try:
            result = _compare_single_sheet(
                sheet_name, workbook_a, workbook_b, key_spec, header_row_number, case_sensitive
            )
        except SheetComparisonFailure as e:
            errors[sheet_name] = ComparisonError(sheet_name, e.reason)
            logger.error(errors[sheet_name].describe())
            if progress is not None:
                progress.finish_sheet(success=False)
            continue

        results[sheet_name] = result
        summary = result.summary
        if result.missing_side is not None:
            logger.warning(
                f"sheet '{sheet_name}' missing from workbook {result.missing_side.value}; "
                f"all rows reported as {'new' if result.missing_side is Side.A else 'deleted'}"
            )
        for w in result.duplicate_warnings:
            logger.warning(
                f"sheet '{sheet_name}' side={w.side.value} duplicate key '{w.key}' on rows "
                f"{list(w.row_numbers)}; using row {w.row_numbers[0]}"
            )
        logger.info(
            f"sheet '{sheet_name}': new={summary.new_rows} deleted={summary.deleted_rows} "
            f"modified={summary.modified_rows}"
        )
        if progress is not None:
            progress.finish_sheet(success=True, rows_processed=summary.differing_rows)

    return _report()

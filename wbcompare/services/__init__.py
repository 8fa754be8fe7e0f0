"""Comparison services: key resolution, indexing, diffing, reconciliation, reporting."""

from .columns import ColumnNotFound, HeaderRowNotFound, InvalidComparisonRequest, resolve_key_columns
from .diff_engine import compare_sheets
from .orchestrator import ComparisonCancelled, compare_workbooks
from .reconcile import MergeInvariantViolation, reconcile_workbooks
from .report import build_report_workbook
from .sheet_index import build_sheet_index

__all__ = [
    "ColumnNotFound",
    "ComparisonCancelled",
    "HeaderRowNotFound",
    "InvalidComparisonRequest",
    "MergeInvariantViolation",
    "build_report_workbook",
    "build_sheet_index",
    "compare_sheets",
    "compare_workbooks",
    "reconcile_workbooks",
    "resolve_key_columns",
]

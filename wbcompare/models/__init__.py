"""Domain models for the workbook comparison tool.

Cell values, workbook grids, comparison results and configuration.
"""

from .cell_value import EMPTY, CellKind, CellValue
from .comparison import (
    EMPTY_KEY,
    CellDiff,
    ComparisonError,
    ComparisonReport,
    CompositeKey,
    DuplicateKeyWarning,
    EmptyWorkbookSide,
    ModifiedRowDiff,
    SheetComparisonResult,
    SheetSummary,
    Side,
)
from .config_models import CompareConfig, ReconcileConfig
from .workbook import MergedWorkbook, RowRecord, Sheet, Workbook

__all__ = [
    # Cell values
    "CellKind",
    "CellValue",
    "EMPTY",
    # Grids
    "MergedWorkbook",
    "RowRecord",
    "Sheet",
    "Workbook",
    # Comparison
    "CellDiff",
    "ComparisonError",
    "ComparisonReport",
    "CompositeKey",
    "DuplicateKeyWarning",
    "EMPTY_KEY",
    "EmptyWorkbookSide",
    "ModifiedRowDiff",
    "SheetComparisonResult",
    "SheetSummary",
    "Side",
    # Configuration
    "CompareConfig",
    "ReconcileConfig",
]

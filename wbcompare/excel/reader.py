from __future__ import annotations

import zipfile
from collections.abc import Iterable
from datetime import time
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.cell_value import EMPTY, CellValue
from ..models.workbook import Sheet, Workbook

"""Workbook loader.

Sheets are read with ``header=None`` so that the header row stays part of the
grid; the header row number is decided later by the comparison. Default NA
string conversion is disabled: "NA" or "null" typed into a cell is data and
must survive for an accurate diff. Only blank cells and the configured
``na_strings`` become EMPTY. Blank rows are kept so row numbers match what
the spreadsheet shows.
"""

__all__ = [
    "WorkbookReadError",
    "frame_to_sheet",
    "list_sheet_names",
    "read_excel_file",
    "read_workbook",
    "to_cell_value",
]


class WorkbookReadError(Exception):
    """Raised when a workbook file cannot be opened or parsed."""


def to_cell_value(raw: Any) -> CellValue:
    """Convert one pandas cell into a CellValue.

    NaN/NaT -> EMPTY, Timestamp -> DATE, numpy scalars -> Python scalars.
    Anything else that has no CellValue kind (e.g. a time of day) is kept as
    its text.
    """
    if raw is None:
        return EMPTY
    if not isinstance(raw, str) and pd.api.types.is_scalar(raw) and pd.isna(raw):
        return EMPTY
    if isinstance(raw, pd.Timestamp):
        return CellValue.date(raw.to_pydatetime())
    if hasattr(raw, "item") and not isinstance(raw, (str, bytes)):
        raw = raw.item()  # numpy scalar
    if isinstance(raw, time):
        return CellValue.string(raw.isoformat())
    try:
        return CellValue.of(raw)
    except TypeError:
        return CellValue.string(str(raw))


def frame_to_sheet(df: pd.DataFrame, sheet_name: str) -> Sheet:
    """Convert a raw (``header=None``) DataFrame into a Sheet grid."""
    rows = []
    for values in df.to_numpy(dtype=object).tolist():
        cells = [to_cell_value(v) for v in values]
        # pandas pads ragged rows to the frame width
        while cells and cells[-1].is_empty:
            cells.pop()
        rows.append(tuple(cells))
    return Sheet(name=sheet_name, rows=tuple(rows))


def read_excel_file(
    path: Path, target_sheets: Iterable[str] | None = None, na_strings: list[str] | None = None
) -> dict[str, pd.DataFrame]:
    """Read an Excel file returning raw DataFrames keyed by sheet name.

    Parameters
    ----------
    path: Excel file path
    target_sheets: restrict to these sheets (None reads all)
    na_strings: cell texts to read as empty, in addition to blank cells
    """
    wanted = set(target_sheets) if target_sheets is not None else None
    na_values = [""] + list(na_strings or [])
    dfs: dict[str, pd.DataFrame] = {}
    try:
        with pd.ExcelFile(path) as xls:
            for name in xls.sheet_names:
                if wanted is not None and str(name) not in wanted:
                    continue
                dfs[str(name)] = xls.parse(
                    name,
                    header=None,
                    keep_default_na=False,
                    na_values=na_values,
                )
    except FileNotFoundError as e:
        raise WorkbookReadError(f"workbook not found: {path}") from e
    except (ValueError, OSError, KeyError, zipfile.BadZipFile) as e:
        raise WorkbookReadError(f"cannot read workbook {path}: {e}") from e
    return dfs


def read_workbook(
    path: Path, target_sheets: Iterable[str] | None = None, na_strings: list[str] | None = None
) -> Workbook:
    """Load an xlsx file into a Workbook (sheet order preserved)."""
    path = Path(path)
    dfs = read_excel_file(path, target_sheets=target_sheets, na_strings=na_strings)
    return Workbook(
        name=path.stem,
        sheets={name: frame_to_sheet(df, name) for name, df in dfs.items()},
    )


def list_sheet_names(path: Path) -> list[str]:
    try:
        with pd.ExcelFile(path) as xls:
            return [str(n) for n in xls.sheet_names]
    except FileNotFoundError as e:
        raise WorkbookReadError(f"workbook not found: {path}") from e
    except (ValueError, OSError, zipfile.BadZipFile) as e:
        raise WorkbookReadError(f"cannot read workbook {path}: {e}") from e

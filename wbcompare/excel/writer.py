from __future__ import annotations

from pathlib import Path

import pandas as pd

from ..models.workbook import Workbook

"""Workbook writer: serializes a Workbook to xlsx through pandas + openpyxl.

Every row is written as-is (no header inference, no index column), so a
workbook read with ``read_workbook`` and written back keeps its grid.
"""

__all__ = [
    "write_workbook",
]


def write_workbook(workbook: Workbook, path: Path) -> Path:
    """Write every sheet of ``workbook`` to ``path`` and return the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name, sheet in workbook.sheets.items():
            df = pd.DataFrame([[c.to_python() for c in row] for row in sheet.rows])
            df.to_excel(writer, sheet_name=name, header=False, index=False)
    return path

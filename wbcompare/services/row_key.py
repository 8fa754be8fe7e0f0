from __future__ import annotations

from collections.abc import Sequence

from ..models.comparison import EMPTY_KEY, KEY_SEPARATOR, CompositeKey
from ..models.workbook import RowRecord

"""Composite key construction for one row."""

__all__ = [
    "build_row_key",
]


def build_row_key(row: RowRecord, key_columns: Sequence[int], *, case_sensitive: bool = False) -> CompositeKey:
    """Build the composite key of ``row`` from the resolved key columns.

    Each key cell contributes its trimmed text form. Rows whose key cells are
    all blank get EMPTY_KEY and are left out of matching.
    """
    parts = tuple(row.value_at(col).as_text().strip() for col in key_columns)
    if not any(parts):
        return EMPTY_KEY
    text = KEY_SEPARATOR.join(parts)
    if not case_sensitive:
        text = text.casefold()
    return CompositeKey(text=text, parts=parts)

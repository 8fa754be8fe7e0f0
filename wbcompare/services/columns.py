from __future__ import annotations

import re

from ..models.workbook import RowRecord

"""Key column resolution.

A key specification is a comma separated list of tokens. A token made only of
uppercase letters ("A", "AB") is a spreadsheet column letter; anything else is
a header label matched case-insensitively against the header row.
"""

__all__ = [
    "ColumnNotFound",
    "HeaderRowNotFound",
    "InvalidComparisonRequest",
    "SheetComparisonFailure",
    "column_index_to_letter",
    "column_letter_to_index",
    "header_labels",
    "parse_key_spec",
    "resolve_key_columns",
]

_COLUMN_LETTERS = re.compile(r"^[A-Z]+$")


class InvalidComparisonRequest(ValueError):
    """Raised before any indexing when the request itself cannot be run."""


class SheetComparisonFailure(Exception):
    """Base for failures that only invalidate a single sheet."""

    def __init__(self, sheet_name: str | None, reason: str) -> None:
        super().__init__(reason)
        self.sheet_name = sheet_name
        self.reason = reason


class ColumnNotFound(SheetComparisonFailure):
    """A key token is neither a column letter nor a header label of the sheet."""

    def __init__(self, sheet_name: str | None, token: str) -> None:
        super().__init__(sheet_name, f"key column '{token}' not found in header")
        self.token = token


class HeaderRowNotFound(SheetComparisonFailure):
    """The sheet has fewer rows than the configured header row number."""

    def __init__(self, sheet_name: str | None, header_row_number: int) -> None:
        super().__init__(sheet_name, f"header row {header_row_number} not found")
        self.header_row_number = header_row_number


def column_letter_to_index(letters: str) -> int:
    """Convert a column letter to a zero-based index (A=0, Z=25, AA=26)."""
    if not _COLUMN_LETTERS.match(letters):
        raise ValueError(f"not a column letter: {letters!r}")
    index = 0
    for ch in letters:
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


def column_index_to_letter(index: int) -> str:
    if index < 0:
        raise ValueError(f"column index must be >= 0: {index}")
    letters = ""
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def parse_key_spec(key_spec: str) -> list[str]:
    """Split a key specification into trimmed, non-empty tokens."""
    if not key_spec:
        return []
    return [t.strip() for t in key_spec.split(",") if t.strip()]


def header_labels(header: RowRecord | None, width: int = 0) -> list[str]:
    """Display labels for a header row.

    Blank header cells are labelled ``Column <n>`` (1-based). The result is
    padded to ``width`` the same way.
    """
    cells = list(header.cells) if header is not None else []
    labels = []
    for idx in range(max(len(cells), width)):
        text = cells[idx].as_text().strip() if idx < len(cells) else ""
        labels.append(text or f"Column {idx + 1}")
    return labels


def resolve_key_columns(key_spec: str, header: RowRecord, *, sheet_name: str | None = None) -> list[int]:
    """Resolve a key specification against one sheet's header row.

    Returns one zero-based column index per token, in token order.

    Raises:
        InvalidComparisonRequest: key_spec has no tokens
        ColumnNotFound: a label token matches no header cell
    """
    tokens = parse_key_spec(key_spec)
    if not tokens:
        raise InvalidComparisonRequest("key specification is empty")
    if sheet_name is None:
        sheet_name = header.sheet_name

    folded = [c.as_text().strip().casefold() for c in header.cells]
    indices: list[int] = []
    for token in tokens:
        if _COLUMN_LETTERS.match(token):
            indices.append(column_letter_to_index(token))
            continue
        try:
            indices.append(folded.index(token.casefold()))
        except ValueError:
            raise ColumnNotFound(sheet_name, token) from None
    return indices

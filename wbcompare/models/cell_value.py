from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any

"""CellValue tagged union for workbook grids.

Every cell read from a workbook is normalized into one of five kinds so that
equality and text conversion are decided by the kind, never by runtime
inspection of whatever object the spreadsheet library happened to return.
"""

__all__ = [
    "CellKind",
    "CellValue",
    "EMPTY",
]


class CellKind(Enum):
    """Closed set of cell value kinds."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    EMPTY = "empty"


@dataclass(frozen=True)
class CellValue:
    """A single typed cell value.

    Two values are equal iff they share the same kind and the same underlying
    value. Numbers compare exactly (1 == 1.0, no tolerance) and dates compare
    by instant.
    """
    kind: CellKind
    value: Any = None

    @staticmethod
    def string(text: str) -> CellValue:
        return CellValue(CellKind.STRING, text)

    @staticmethod
    def number(number: int | float) -> CellValue:
        return CellValue(CellKind.NUMBER, number)

    @staticmethod
    def boolean(flag: bool) -> CellValue:
        return CellValue(CellKind.BOOLEAN, bool(flag))

    @staticmethod
    def date(moment: date | datetime) -> CellValue:
        if not isinstance(moment, datetime):
            moment = datetime.combine(moment, time.min)
        return CellValue(CellKind.DATE, moment)

    @staticmethod
    def of(raw: Any) -> CellValue:
        """Build a CellValue from a plain Python value.

        None and float NaN become EMPTY. bool is checked before int because
        bool is an int subclass.
        """
        if raw is None:
            return EMPTY
        if isinstance(raw, CellValue):
            return raw
        if isinstance(raw, bool):
            return CellValue.boolean(raw)
        if isinstance(raw, (int, float)):
            if isinstance(raw, float) and math.isnan(raw):
                return EMPTY
            return CellValue.number(raw)
        if isinstance(raw, (datetime, date)):
            return CellValue.date(raw)
        if isinstance(raw, str):
            return CellValue.string(raw)
        raise TypeError(f"unsupported cell value type: {type(raw).__name__}")

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY

    def is_blank(self) -> bool:
        """True for EMPTY and for strings that are only whitespace."""
        if self.kind is CellKind.EMPTY:
            return True
        return self.kind is CellKind.STRING and self.value.strip() == ""

    def as_text(self) -> str:
        """Canonical text form used for composite keys and reports."""
        if self.kind is CellKind.EMPTY:
            return ""
        if self.kind is CellKind.STRING:
            return self.value
        if self.kind is CellKind.BOOLEAN:
            return "TRUE" if self.value else "FALSE"
        if self.kind is CellKind.NUMBER:
            if isinstance(self.value, float) and self.value.is_integer():
                return str(int(self.value))
            return str(self.value)
        # DATE
        if self.value.time() == time.min and self.value.tzinfo is None:
            return self.value.date().isoformat()
        return self.value.isoformat()

    def to_python(self) -> Any:
        """Plain Python value for writers (EMPTY -> None)."""
        return self.value

    def __str__(self) -> str:
        return self.as_text()


EMPTY = CellValue(CellKind.EMPTY)

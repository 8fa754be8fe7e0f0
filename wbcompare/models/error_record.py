from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the findings log.

Each record is one JSON line. It covers sheet-level comparison errors,
duplicate key rows and sheets missing from one workbook. row=-1 is the
sentinel for findings that are not tied to a single row.
"""

__all__ = [
    "ErrorRecord",
    "COMPARISON_ERROR",
    "DUPLICATE_KEY",
    "MISSING_SHEET",
]

COMPARISON_ERROR = "COMPARISON_ERROR"
DUPLICATE_KEY = "DUPLICATE_KEY"
MISSING_SHEET = "MISSING_SHEET"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured finding for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: workbook file name the finding refers to
        sheet: sheet name
        row: 1-based row number, -1 when not row specific
        error_type: classification in UPPER_SNAKE_CASE
        message: human readable description
    """
    timestamp: str
    file: str
    sheet: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)

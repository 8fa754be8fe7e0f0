from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.comparison import ComparisonReport, Side
from ..models.error_record import COMPARISON_ERROR, DUPLICATE_KEY, MISSING_SHEET, ErrorRecord

"""Findings log: buffered JSON Lines output.

- fixed schema per line (see ErrorRecord), no extra keys
- one ``findings-YYYYMMDD-HHMMSS.log`` (UTC) per run, created on first flush
- records are buffered and written in one go by ``flush()``
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "records_from_report",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer of findings; ``flush()`` appends them as JSON Lines.

    The file path is fixed on first access. Not thread safe (one buffer per run).
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = Path(logs_dir) if logs_dir is not None else LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"findings-{stamp}.log"
        return self._file_path

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def extend(self, records: list[ErrorRecord]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the file path, or None if nothing was buffered."""
        if not self._records:
            return None
        target = self.file_path
        lines = "".join(f"{record.to_json_line()}\n" for record in self._records)
        with target.open("a", encoding="utf-8") as fh:
            fh.write(lines)
        self._records.clear()
        return target


def records_from_report(report: ComparisonReport, file_a: str, file_b: str) -> list[ErrorRecord]:
    """Findings of a report: sheet errors, missing sheets, one record per ignored duplicate row."""
    files = {Side.A: file_a, Side.B: file_b}
    records: list[ErrorRecord] = []
    for err in report.errors.values():
        records.append(
            ErrorRecord.create(f"{file_a}|{file_b}", err.sheet_name, -1, COMPARISON_ERROR, err.reason)
        )
    for notice in report.empty_sides:
        records.append(
            ErrorRecord.create(
                files[notice.missing_side],
                notice.sheet_name,
                -1,
                MISSING_SHEET,
                f"sheet missing from workbook {notice.missing_side.value}",
            )
        )
    for w in report.duplicate_warnings:
        for row in w.ignored_rows:
            records.append(
                ErrorRecord.create(
                    files[w.side],
                    w.sheet_name,
                    row,
                    DUPLICATE_KEY,
                    f"key '{w.key}' already used by row {w.row_numbers[0]}",
                )
            )
    return records

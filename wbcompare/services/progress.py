from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Sheet progress bar (tqdm, terminals only).

A comparison advances the bar once per requested sheet. When stdout is not a
terminal (CI, output piped to a file) no bar is created, so logs stay free of
carriage returns and ANSI sequences; the counters are still kept. The tracker
is passed to ``compare_workbooks`` as its ``progress`` callback.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Counts compared / failed sheets and drives the optional bar."""

    def __init__(self, total_sheets: int, *, description: str = "Comparing sheets") -> None:
        self.total_sheets = total_sheets
        self.description = description
        self.current_sheet = 0
        self.failed_sheets = 0
        self.differing_rows = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_sheets,
                desc=description,
                unit="sheet",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    @property
    def _bar(self) -> TqdmType[Any] | None:
        return self.pbar if self.enabled else None

    def start_sheet(self, sheet_name: str) -> None:
        self.current_sheet += 1
        bar = self._bar
        if bar is not None:
            bar.set_description(f"{self.description} ({sheet_name})")

    def finish_sheet(self, success: bool = True, rows_processed: int = 0) -> None:
        """Count one sheet as done; ``rows_processed`` is its differing row count."""
        self.failed_sheets += 0 if success else 1
        self.differing_rows += rows_processed
        bar = self._bar
        if bar is None:
            return
        bar.update(1)
        bar.set_description(self.description)
        bar.set_postfix(failed=self.failed_sheets, diffs=self.differing_rows)

    def close(self) -> None:
        bar = self._bar
        if bar is not None:
            bar.close()
        self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

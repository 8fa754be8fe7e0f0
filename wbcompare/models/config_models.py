from __future__ import annotations

from dataclasses import dataclass, field

from .comparison import Side

"""Config dataclasses for the workbook comparison tool.

Built by ``wbcompare.config.loader.load_config`` after schema validation;
defaults here mirror the defaults documented in the JSON schema.
"""

DEFAULT_HEADER_ROW = 1
DEFAULT_MAX_SHEETS = 15
DEFAULT_REPORT_PATH = "./out/comparison_report.xlsx"
DEFAULT_LOG_DIRECTORY = "./logs"


@dataclass(frozen=True)
class ReconcileConfig:
    """Optional merge step run after the comparison."""
    target: Side  # side whose sheets form the base of the merged workbook
    output_path: str


@dataclass(frozen=True)
class CompareConfig:
    """Root configuration object for one comparison run.

    ``sheets`` of None means every sheet of A followed by the sheets that only
    B has.
    """
    file_a: str
    file_b: str
    key_columns: str  # "A,C" or "CustomerId,Email"
    sheets: list[str] | None = None
    header_row: int = DEFAULT_HEADER_ROW  # 1-based
    case_sensitive_keys: bool = False
    max_sheets: int = DEFAULT_MAX_SHEETS  # operational guard, not a core rule
    na_strings: list[str] = field(default_factory=list)  # text read as empty cells
    report_path: str = DEFAULT_REPORT_PATH
    log_directory: str = DEFAULT_LOG_DIRECTORY
    reconcile: ReconcileConfig | None = None

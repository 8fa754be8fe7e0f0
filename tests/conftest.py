# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from wbcompare.logging.init import reset_logging
from wbcompare.models.workbook import Workbook


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """file_a: ./data/original.xlsx
file_b: ./data/updated.xlsx
key_columns: CustomerId
header_row: 1
report_path: ./out/comparison_report.xlsx
log_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "compare.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def customers_a() -> list[list[object]]:
    return [
        ["CustomerId", "Name", "Email"],
        [1, "Alice", "a@x.com"],
        [2, "Bob", "b@x.com"],
    ]


@pytest.fixture()
def customers_b() -> list[list[object]]:
    return [
        ["CustomerId", "Name", "Email"],
        [1, "Alice", "alice@x.com"],
        [3, "Cara", "c@x.com"],
    ]


@pytest.fixture()
def customer_workbooks(customers_a, customers_b) -> tuple[Workbook, Workbook]:
    wb_a = Workbook.from_rows("original", {"Customers": customers_a})
    wb_b = Workbook.from_rows("updated", {"Customers": customers_b})
    return wb_a, wb_b


@pytest.fixture()
def make_excel():
    """Factory writing a real xlsx file (one grid per sheet, no header inference)."""
    def _make(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
        return path
    return _make


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()

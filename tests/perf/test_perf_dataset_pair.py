from __future__ import annotations

import time
from pathlib import Path

from scripts.gen_perf_dataset import create_workbook_pair
from wbcompare.excel.reader import read_workbook
from wbcompare.services.orchestrator import compare_workbooks


def test_generated_pair_matches_expected_counts(tmp_path: Path):
    path_a, path_b, expected = create_workbook_pair(
        tmp_path, rows=500, cols=8, sheets=["Customers", "Orders"], title="Perf run", seed=7,
        modify_rate=0.1, delete_rate=0.02, insert_rate=0.04,
    )

    start = time.perf_counter()
    wb_a = read_workbook(path_a)
    wb_b = read_workbook(path_b)
    report = compare_workbooks(wb_a, wb_b, wb_a.sheet_names, "id", header_row_number=2)
    elapsed = time.perf_counter() - start

    s = report.summary
    assert s.sheets_failed == 0
    assert s.total_new_rows == expected["new"] == 2 * 20
    assert s.total_deleted_rows == expected["deleted"] == 2 * 10
    assert s.total_modified_rows == expected["modified"] == 2 * 50
    assert elapsed < 30.0, f"read + compare too slow: {elapsed:.3f}s"

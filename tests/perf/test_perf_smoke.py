from __future__ import annotations

import time

from wbcompare.models.comparison import Side
from wbcompare.models.workbook import Workbook
from wbcompare.services.orchestrator import compare_workbooks
from wbcompare.services.reconcile import reconcile_workbooks

"""Performance smoke test: 20k keyed rows per side in memory.

The budget is lenient so CI stays stable; it only catches accidental
quadratic behavior in indexing, matching or merging.
"""

ROWS = 20_000
BUDGET_SEC = 20.0


def _pair() -> tuple[Workbook, Workbook]:
    header = ["id", "name", "amount", "active"]
    rows_a = [header] + [[i, f"Item_{i}", i * 1.5, i % 2 == 0] for i in range(1, ROWS + 1)]
    rows_b = [header]
    for i in range(1, ROWS + 1):
        if i % 100 == 0:
            continue  # deleted
        amount = i * 1.5 + (1 if i % 20 == 0 else 0)  # modified
        rows_b.append([i, f"Item_{i}", amount, i % 2 == 0])
    rows_b.extend([i, f"Item_{i}", 0.0, False] for i in range(ROWS + 1, ROWS + 201))  # new
    return (
        Workbook.from_rows("a", {"Data": rows_a}),
        Workbook.from_rows("b", {"Data": rows_b}),
    )


def test_compare_and_reconcile_within_budget():
    wb_a, wb_b = _pair()

    start = time.perf_counter()
    report = compare_workbooks(wb_a, wb_b, ["Data"], "id")
    merged = reconcile_workbooks(wb_a, wb_b, report, Side.A)
    elapsed = time.perf_counter() - start

    s = report.summary
    assert s.total_deleted_rows == ROWS // 100
    assert s.total_new_rows == 200
    # every 20th row is modified, except the ones that were deleted
    assert s.total_modified_rows == ROWS // 20 - ROWS // 100
    assert merged.sheets["Data"].row_count == ROWS + 1 + 200
    assert elapsed < BUDGET_SEC, f"comparison too slow: {elapsed:.3f}s"
    throughput = ROWS / elapsed
    assert throughput > 1_000  # extremely lenient

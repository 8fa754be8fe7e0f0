from __future__ import annotations

import pytest

from wbcompare.models.cell_value import CellValue
from wbcompare.models.comparison import CellDiff, ModifiedRowDiff, SheetComparisonResult, Side
from wbcompare.models.workbook import Sheet, Workbook
from wbcompare.services.orchestrator import compare_workbooks
from wbcompare.services.reconcile import MergeInvariantViolation, reconcile_sheet, reconcile_workbooks
from wbcompare.services.row_key import build_row_key


def _grid(workbook: Workbook, sheet: str) -> list[list[object]]:
    return [[c.to_python() for c in row] for row in workbook.sheets[sheet].rows]


def test_customers_reconciled_into_a(customer_workbooks):
    wb_a, wb_b = customer_workbooks
    report = compare_workbooks(wb_a, wb_b, ["Customers"], "CustomerId")

    merged = reconcile_workbooks(wb_a, wb_b, report, Side.A)

    assert merged.name == "original_reconciled"
    assert _grid(merged, "Customers") == [
        ["CustomerId", "Name", "Email"],
        [1, "Alice", "alice@x.com"],
        [2, "Bob", "b@x.com"],
        [3, "Cara", "c@x.com"],
    ]


def test_customers_reconciled_into_b(customer_workbooks):
    wb_a, wb_b = customer_workbooks
    report = compare_workbooks(wb_a, wb_b, ["Customers"], "CustomerId")

    merged = reconcile_workbooks(wb_a, wb_b, report, Side.B)

    assert merged.name == "updated_reconciled"
    assert _grid(merged, "Customers") == [
        ["CustomerId", "Name", "Email"],
        [1, "Alice", "a@x.com"],
        [3, "Cara", "c@x.com"],
        [2, "Bob", "b@x.com"],
    ]


def test_inputs_are_not_mutated(customer_workbooks):
    wb_a, wb_b = customer_workbooks
    before = _grid(wb_a, "Customers")
    report = compare_workbooks(wb_a, wb_b, ["Customers"], "CustomerId")

    reconcile_workbooks(wb_a, wb_b, report, Side.A)

    assert _grid(wb_a, "Customers") == before


@pytest.mark.parametrize("target", [Side.A, Side.B])
def test_merge_never_shrinks_target(customer_workbooks, target):
    wb_a, wb_b = customer_workbooks
    report = compare_workbooks(wb_a, wb_b, ["Customers"], "CustomerId")

    merged = reconcile_workbooks(wb_a, wb_b, report, target)

    base = wb_a if target is Side.A else wb_b
    assert merged.sheets["Customers"].row_count >= base.sheets["Customers"].row_count


def test_convergence_after_reconcile_into_a(customer_workbooks):
    wb_a, wb_b = customer_workbooks
    report = compare_workbooks(wb_a, wb_b, ["Customers"], "CustomerId")
    merged = reconcile_workbooks(wb_a, wb_b, report, Side.A)

    again = compare_workbooks(merged, wb_b, ["Customers"], "CustomerId").results["Customers"]

    assert again.modified == ()
    assert again.new_rows == ()
    # deleted rows are kept in the target, so they still show as deleted
    assert [r.to_python() for r in again.deleted_rows] == [[2, "Bob", "b@x.com"]]


def test_reordered_and_extra_columns_are_placed_by_label():
    wb_a = Workbook.from_rows("a", {"S": [["id", "name"], [1, "Alice"]]})
    wb_b = Workbook.from_rows(
        "b", {"S": [["name", "id", "phone"], ["Alicia", 1, "555"], ["Cara", 3, "777"]]}
    )
    report = compare_workbooks(wb_a, wb_b, ["S"], "id")

    merged = reconcile_workbooks(wb_a, wb_b, report, Side.A)

    assert _grid(merged, "S") == [
        ["id", "name", "phone"],
        [1, "Alicia", "555"],
        [3, "Cara", "777"],
    ]
    again = compare_workbooks(merged, wb_b, ["S"], "id").results["S"]
    assert not again.summary.has_differences


def test_column_only_in_a_is_added_when_reconciling_into_b():
    wb_a = Workbook.from_rows(
        "a", {"S": [["name", "id", "phone"], ["Alicia", 1, "555"], ["Cara", 3, "777"]]}
    )
    wb_b = Workbook.from_rows("b", {"S": [["id", "name"], [1, "Alice"]]})
    report = compare_workbooks(wb_a, wb_b, ["S"], "id")

    merged = reconcile_workbooks(wb_a, wb_b, report, Side.B)

    assert _grid(merged, "S") == [
        ["id", "name", "phone"],
        [1, "Alicia", "555"],
        [3, "Cara", "777"],
    ]
    again = compare_workbooks(wb_a, merged, ["S"], "id").results["S"]
    assert not again.summary.has_differences


def test_added_column_goes_past_unlabelled_data_columns():
    wb_a = Workbook.from_rows("a", {"S": [["id", "name"], [1, "Al", "x1"], [2, "Bo", "x2"]]})
    wb_b = Workbook.from_rows("b", {"S": [["id", "name", "phone"], [1, "Al", "555"]]})
    report = compare_workbooks(wb_a, wb_b, ["S"], "id")

    merged = reconcile_workbooks(wb_a, wb_b, report, Side.A)

    # column 3 has no header label, so it never pairs with B's phone column
    assert _grid(merged, "S") == [
        ["id", "name", None, "phone"],
        [1, "Al", None, "555"],
        [2, "Bo", "x2"],
    ]
    again = compare_workbooks(merged, wb_b, ["S"], "id").results["S"]
    assert again.modified == ()
    assert again.new_rows == ()


def test_repeated_label_only_in_other_side_gets_its_own_column():
    wb_a = Workbook.from_rows("a", {"S": [["id", "v"], [1, "x"]]})
    wb_b = Workbook.from_rows("b", {"S": [["id", "v", "v"], [1, "x", "y"], [2, "p", "q"]]})
    report = compare_workbooks(wb_a, wb_b, ["S"], "id")

    merged = reconcile_workbooks(wb_a, wb_b, report, Side.A)

    assert _grid(merged, "S") == [
        ["id", "v", "v"],
        [1, "x", "y"],
        [2, "p", "q"],
    ]
    again = compare_workbooks(merged, wb_b, ["S"], "id").results["S"]
    assert not again.summary.has_differences


def test_unchanged_failed_and_one_sided_sheets_pass_through():
    wb_a = Workbook.from_rows(
        "a",
        {
            "Same": [["id"], [1]],
            "Broken": [["x"], [1]],
            "OnlyA": [["id"], [5]],
        },
    )
    wb_b = Workbook.from_rows("b", {"Same": [["id"], [1]], "Broken": [["x"], [2]], "OnlyB": [["id"], [9]]})
    report = compare_workbooks(wb_a, wb_b, ["Same", "Broken", "OnlyA", "OnlyB"], "id")
    assert "Broken" in report.errors

    merged = reconcile_workbooks(wb_a, wb_b, report, Side.A)

    assert merged.sheet_names == ["Same", "Broken", "OnlyA"]
    for name in merged.sheet_names:
        assert merged.sheets[name] is wb_a.sheets[name]


def test_report_row_missing_from_target_raises():
    target = Sheet.from_rows("S", [["id", "v"], [1, "a"]])
    other = Sheet.from_rows("S", [["id", "v"], [1, "b"]])
    key = build_row_key(other.record(2), [0])
    bogus = SheetComparisonResult(
        sheet_name="S",
        new_rows=(),
        deleted_rows=(),
        modified=(
            ModifiedRowDiff(
                key=key,
                row_number_a=9,
                row_number_b=2,
                diffs=(CellDiff("v", CellValue.string("a"), CellValue.string("b"), 1, 1),),
            ),
        ),
    )

    with pytest.raises(MergeInvariantViolation, match="row 9"):
        reconcile_sheet(target, other, bogus, Side.A, 1)

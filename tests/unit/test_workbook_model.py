from __future__ import annotations

import pytest

from wbcompare.models.cell_value import EMPTY, CellValue
from wbcompare.models.workbook import RowRecord, Sheet, Workbook


def test_sheet_from_rows_and_records():
    sheet = Sheet.from_rows("S", [["id", "name"], [1, None], [2, "b"]])

    assert sheet.row_count == 3
    assert sheet.record(2).cells == (CellValue.number(1), EMPTY)
    assert [r.row_number for r in sheet.records_below(1)] == [2, 3]


def test_record_out_of_range():
    sheet = Sheet.from_rows("S", [["id"]])
    with pytest.raises(IndexError):
        sheet.record(2)
    with pytest.raises(IndexError):
        sheet.record(0)


def test_value_at_past_row_end_is_empty():
    row = RowRecord("S", 2, (CellValue.string("a"),))
    assert row.value_at(0) == CellValue.string("a")
    assert row.value_at(5) is EMPTY
    assert row.value_at(None) is EMPTY


def test_workbook_lookup_and_order():
    wb = Workbook.from_rows("wb", {"B": [["x"]], "A": [["y"]]})

    assert wb.sheet_names == ["B", "A"]
    assert "A" in wb
    assert wb.get("missing") is None
    # sheet_names is a copy
    wb.sheet_names.append("C")
    assert wb.sheet_names == ["B", "A"]

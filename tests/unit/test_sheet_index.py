from __future__ import annotations

import pytest

from wbcompare.models.comparison import EMPTY_KEY, Side
from wbcompare.models.workbook import Sheet
from wbcompare.services.columns import HeaderRowNotFound
from wbcompare.services.row_key import build_row_key
from wbcompare.services.sheet_index import build_sheet_index, header_record


def test_row_key_trims_and_casefolds():
    sheet = Sheet.from_rows("S", [[" Alice ", 1], ["ALICE", 1.0]])
    k1 = build_row_key(sheet.record(1), [0, 1])
    k2 = build_row_key(sheet.record(2), [0, 1])

    assert k1 == k2
    assert k1.parts == ("Alice", "1")
    assert str(k1) == "Alice | 1"


def test_row_key_case_sensitive():
    sheet = Sheet.from_rows("S", [["Alice"], ["ALICE"]])
    k1 = build_row_key(sheet.record(1), [0], case_sensitive=True)
    k2 = build_row_key(sheet.record(2), [0], case_sensitive=True)
    assert k1 != k2


def test_row_key_separator_keeps_parts_apart():
    sheet = Sheet.from_rows("S", [["ab", "c"], ["a", "bc"]])
    assert build_row_key(sheet.record(1), [0, 1]) != build_row_key(sheet.record(2), [0, 1])


def test_blank_key_cells_give_empty_key():
    sheet = Sheet.from_rows("S", [[None, "  ", "x"]])
    assert build_row_key(sheet.record(1), [0, 1]) is EMPTY_KEY


def test_index_skips_header_and_empty_keys():
    sheet = Sheet.from_rows("S", [["Title"], ["id", "v"], [1, "a"], [None, "b"], [2, "c"]])

    index, warnings = build_sheet_index(sheet, 2, [0])

    assert len(index) == 2
    assert index.skipped_rows == (4,)
    assert warnings == []
    assert index.row_numbers() == {3, 4, 5}


def test_duplicate_keys_are_bucketed_and_warned():
    sheet = Sheet.from_rows("S", [["id", "v"], [1, "a"], [2, "b"], [1, "c"], [1, "d"]])

    index, warnings = build_sheet_index(sheet, 1, [0], side=Side.B)

    assert len(warnings) == 1
    w = warnings[0]
    assert w.row_numbers == (2, 4, 5)
    assert w.ignored_rows == (4, 5)
    assert w.side is Side.B

    key = w.key
    outcome = index.outcome(key)
    assert outcome.is_duplicate
    assert outcome.primary.row_number == 2
    assert index.first(key).row_number == 2
    assert [r.row_number for r in outcome.duplicates] == [4, 5]


def test_header_row_beyond_sheet():
    sheet = Sheet.from_rows("S", [["id"]])
    with pytest.raises(HeaderRowNotFound) as exc:
        build_sheet_index(sheet, 3, [0])
    assert exc.value.header_row_number == 3


def test_header_row_below_one():
    with pytest.raises(ValueError):
        header_record(Sheet.from_rows("S", [["id"]]), 0)

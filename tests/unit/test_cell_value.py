from __future__ import annotations

from datetime import date, datetime

import pytest

from wbcompare.models.cell_value import EMPTY, CellKind, CellValue


def test_of_maps_python_values_to_kinds():
    assert CellValue.of(None) is EMPTY
    assert CellValue.of(float("nan")) is EMPTY
    assert CellValue.of("x").kind is CellKind.STRING
    assert CellValue.of(3).kind is CellKind.NUMBER
    assert CellValue.of(3.5).kind is CellKind.NUMBER
    assert CellValue.of(datetime(2024, 1, 2)).kind is CellKind.DATE


def test_bool_is_boolean_not_number():
    """bool subclasses int; it must still be a BOOLEAN cell."""
    v = CellValue.of(True)
    assert v.kind is CellKind.BOOLEAN
    assert v != CellValue.number(1)


def test_of_rejects_unknown_types():
    with pytest.raises(TypeError, match="unsupported cell value type"):
        CellValue.of(object())


def test_numbers_compare_exactly():
    assert CellValue.number(1) == CellValue.number(1.0)
    assert CellValue.number(1.0) != CellValue.number(1.0000001)
    assert hash(CellValue.number(1)) == hash(CellValue.number(1.0))


def test_string_vs_number_never_equal():
    assert CellValue.string("1") != CellValue.number(1)


def test_string_equality_is_case_sensitive():
    assert CellValue.string("Alice") != CellValue.string("alice")


def test_date_promotes_plain_date_to_midnight():
    assert CellValue.date(date(2024, 5, 1)) == CellValue.date(datetime(2024, 5, 1, 0, 0))


@pytest.mark.parametrize(
    "value, text",
    [
        (CellValue.string("  hi "), "  hi "),
        (CellValue.number(42.0), "42"),
        (CellValue.number(2.5), "2.5"),
        (CellValue.number(7), "7"),
        (CellValue.boolean(True), "TRUE"),
        (CellValue.boolean(False), "FALSE"),
        (CellValue.date(date(2024, 5, 1)), "2024-05-01"),
        (CellValue.date(datetime(2024, 5, 1, 13, 30)), "2024-05-01T13:30:00"),
        (EMPTY, ""),
    ],
)
def test_as_text(value: CellValue, text: str):
    assert value.as_text() == text
    assert str(value) == text


def test_is_blank():
    assert EMPTY.is_blank()
    assert CellValue.string("   ").is_blank()
    assert not CellValue.string("x").is_blank()
    assert not CellValue.number(0).is_blank()


def test_to_python():
    assert EMPTY.to_python() is None
    assert CellValue.string("a").to_python() == "a"
    assert CellValue.number(3).to_python() == 3

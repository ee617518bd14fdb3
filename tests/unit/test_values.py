from __future__ import annotations

from datetime import date, datetime

import pytest

from orgchart.core.values import as_cell, as_code, as_date_text, as_int, as_text, is_explicit_false, is_truthy


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        ("  Sarah  ", "Sarah"),
        (3.0, "3"),
        (2.5, "2.5"),
        (42, "42"),
    ],
)
def test_as_text(value, expected):
    assert as_text(value) == expected


def test_as_date_text_formats_dates_as_iso():
    assert as_date_text(date(2025, 2, 15)) == "2025-02-15"
    assert as_date_text(datetime(2025, 2, 15, 9, 30)) == "2025-02-15T09:30:00"
    assert as_date_text("2025-02-15") == "2025-02-15"


def test_as_code_restores_leading_zeros():
    assert as_code(3) == "003"
    assert as_code(3.0) == "003"
    assert as_code("003") == "003"
    assert as_code(310) == "310"
    assert as_code(None) == ""


def test_as_int_falls_back_to_default():
    assert as_int("5") == 5
    assert as_int(5.0) == 5
    assert as_int("") == 0
    assert as_int("abc", default=7) == 7


def test_is_truthy_accepts_sheet_spellings():
    assert is_truthy(True)
    assert is_truthy("TRUE")
    assert is_truthy("Yes")
    assert not is_truthy("no")
    assert not is_truthy("")
    assert not is_truthy(None)


def test_is_explicit_false_only_for_false_values():
    assert is_explicit_false(False)
    assert is_explicit_false("FALSE")
    assert is_explicit_false("false")
    assert not is_explicit_false("")
    assert not is_explicit_false(None)
    assert not is_explicit_false("TRUE")


def test_as_cell_writes_booleans_as_text():
    assert as_cell(True) == "TRUE"
    assert as_cell(False) == "FALSE"
    assert as_cell(None) == ""
    assert as_cell("x") == "x"

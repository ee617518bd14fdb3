from __future__ import annotations

import pytest
from openpyxl import Workbook

from orgchart.core.errors import StoreUnavailableError
from orgchart.core.row_store import WorkbookRowStore, build_row, cell, header_index


@pytest.fixture
def workbook_path(tmp_path):
    path = tmp_path / "org.xlsx"
    wb = Workbook()
    sheet = wb.active
    sheet.title = "Team Mappings"
    sheet.append(["Contract", "Task ID", "Team ID", "Is Active"])
    sheet.append(["SQuAT", "TASK-001", "TEAM-001", True])
    sheet.append(["SQuAT", "TASK-002", "TEAM-002", False])
    wb.save(path)
    return path


def test_header_index_trims_and_skips_blank_headers():
    assert header_index([" Contract ", None, "", "Task ID"]) == {"Contract": 0, "Task ID": 3}


def test_cell_returns_none_for_missing_column_or_short_row():
    columns = {"A": 0, "B": 5}
    assert cell(["x"], columns, "A") == "x"
    assert cell(["x"], columns, "B") is None
    assert cell(["x"], columns, "C") is None


def test_build_row_follows_sheet_column_order():
    columns = {"Task ID": 1, "Contract": 0, "Is Active": 3}
    assert build_row(columns, {"Is Active": True, "Contract": "SQuAT", "Unknown": 1}) == ["SQuAT", "", "", True]


def test_get_rows_returns_header_first(workbook_path):
    rows = WorkbookRowStore(workbook_path).get_rows("Team Mappings")
    assert rows[0] == ["Contract", "Task ID", "Team ID", "Is Active"]
    assert rows[1] == ["SQuAT", "TASK-001", "TEAM-001", True]
    assert len(rows) == 3


def test_unconfigured_store_raises():
    store = WorkbookRowStore(None)
    assert not store.is_configured
    with pytest.raises(StoreUnavailableError):
        store.get_rows("Team Mappings")


def test_missing_file_and_sheet_raise(workbook_path, tmp_path):
    with pytest.raises(StoreUnavailableError):
        WorkbookRowStore(tmp_path / "missing.xlsx").get_rows("Team Mappings")
    with pytest.raises(StoreUnavailableError):
        WorkbookRowStore(workbook_path).get_rows("Nope")


def test_append_and_set_cells(workbook_path):
    store = WorkbookRowStore(workbook_path)
    row_number = store.append_row("Team Mappings", ["Forward", "TASK-011", "", True])
    assert row_number == 4

    store.set_cell_value("Team Mappings", 2, 4, False)
    store.set_cell_values("Team Mappings", 3, {3: "TEAM-099", 4: True})

    rows = store.get_rows("Team Mappings")
    assert rows[1][3] is False
    assert rows[2][2:] == ["TEAM-099", True]
    assert rows[3][:2] == ["Forward", "TASK-011"]


def test_delete_row(workbook_path):
    store = WorkbookRowStore(workbook_path)
    store.delete_row("Team Mappings", 2)
    rows = store.get_rows("Team Mappings")
    assert len(rows) == 2
    assert rows[1][1] == "TASK-002"


def test_ensure_sheet_creates_workbook_and_appends_missing_headers(tmp_path):
    path = tmp_path / "nested" / "roster.xlsx"
    store = WorkbookRowStore(path)

    assert store.ensure_sheet("Team List", ["Email", "Task"]) is True
    assert store.ensure_sheet("Team List", ["Email", "Task", "Node Type"]) is False

    assert store.get_rows("Team List") == [["Email", "Task", "Node Type"]]


def test_replace_rows_keeps_header(workbook_path):
    store = WorkbookRowStore(workbook_path)
    store.replace_rows("Team Mappings", [["Forward", "TASK-011", None, True]])

    rows = store.get_rows("Team Mappings")
    assert rows == [
        ["Contract", "Task ID", "Team ID", "Is Active"],
        ["Forward", "TASK-011", None, True],
    ]


def test_check_connection(workbook_path, tmp_path):
    assert WorkbookRowStore(workbook_path).check_connection() is True
    assert WorkbookRowStore(tmp_path / "missing.xlsx").check_connection() is False

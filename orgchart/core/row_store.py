"""Header-addressed row access to sheets inside an .xlsx workbook."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from orgchart.core.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


class RowStore(Protocol):
    """Row-oriented sheet access. Row and column numbers are 1-based."""

    @property
    def is_configured(self) -> bool: ...

    def get_rows(self, sheet_name: str) -> list[list[Any]]: ...

    def append_row(self, sheet_name: str, values: list[Any]) -> int: ...

    def set_cell_value(self, sheet_name: str, row: int, col: int, value: Any) -> None: ...

    def set_cell_values(self, sheet_name: str, row: int, values: dict[int, Any]) -> None: ...

    def delete_row(self, sheet_name: str, row: int) -> None: ...

    def ensure_sheet(self, sheet_name: str, headers: list[str]) -> bool: ...

    def replace_rows(self, sheet_name: str, rows: list[list[Any]]) -> None: ...

    def check_connection(self) -> bool: ...


def header_index(header_row: list[Any]) -> dict[str, int]:
    """Map trimmed header names to 0-based column positions."""
    return {str(h).strip(): i for i, h in enumerate(header_row) if h is not None and str(h).strip()}


def cell(row: list[Any], columns: dict[str, int], header: str) -> Any:
    idx = columns.get(header)
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def build_row(columns: dict[str, int], values: dict[str, Any]) -> list[Any]:
    """Lay out header -> value pairs in the sheet's own column order."""
    width = max(columns.values(), default=-1) + 1
    row: list[Any] = [""] * width
    for header, value in values.items():
        idx = columns.get(header)
        if idx is not None:
            row[idx] = value
    return row


def _is_blank_row(values: list[Any]) -> bool:
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in values)


class WorkbookRowStore:
    """RowStore over a single workbook file.

    Every call opens the file afresh; callers are expected to cache reads.
    """

    def __init__(self, path: str | Path | None) -> None:
        self.path = Path(path) if path else None

    @property
    def is_configured(self) -> bool:
        return self.path is not None

    def _require_path(self) -> Path:
        if self.path is None:
            raise StoreUnavailableError("Workbook path is not configured")
        return self.path

    def _open(self, *, read_only: bool) -> Any:
        path = self._require_path()
        if not path.exists():
            raise StoreUnavailableError(f"Workbook not found: {path}")
        try:
            return load_workbook(path, read_only=read_only, data_only=read_only)
        except (InvalidFileException, OSError, KeyError) as e:
            raise StoreUnavailableError(f"Could not open workbook {path}: {e}") from e

    @staticmethod
    def _sheet(workbook: Any, sheet_name: str) -> Any:
        if sheet_name not in workbook.sheetnames:
            raise StoreUnavailableError(f"Sheet not found: {sheet_name}")
        return workbook[sheet_name]

    def get_rows(self, sheet_name: str) -> list[list[Any]]:
        workbook = self._open(read_only=True)
        try:
            sheet = self._sheet(workbook, sheet_name)
            rows = [list(values) for values in sheet.iter_rows(values_only=True)]
        finally:
            workbook.close()

        while rows and _is_blank_row(rows[-1]):
            rows.pop()
        return rows

    def append_row(self, sheet_name: str, values: list[Any]) -> int:
        workbook = self._open(read_only=False)
        sheet = self._sheet(workbook, sheet_name)
        sheet.append(values)
        row_number = sheet.max_row
        workbook.save(self._require_path())
        return row_number

    def set_cell_value(self, sheet_name: str, row: int, col: int, value: Any) -> None:
        workbook = self._open(read_only=False)
        sheet = self._sheet(workbook, sheet_name)
        sheet.cell(row=row, column=col, value=value)
        workbook.save(self._require_path())

    def set_cell_values(self, sheet_name: str, row: int, values: dict[int, Any]) -> None:
        """Write several cells of one row with a single save."""
        workbook = self._open(read_only=False)
        sheet = self._sheet(workbook, sheet_name)
        for col, value in values.items():
            sheet.cell(row=row, column=col, value=value)
        workbook.save(self._require_path())

    def delete_row(self, sheet_name: str, row: int) -> None:
        workbook = self._open(read_only=False)
        sheet = self._sheet(workbook, sheet_name)
        sheet.delete_rows(row, 1)
        workbook.save(self._require_path())

    def ensure_sheet(self, sheet_name: str, headers: list[str]) -> bool:
        """Create the workbook/sheet if needed and make sure every header exists.

        Existing headers keep their position; missing ones are appended to the
        right. Returns True if the sheet had to be created.
        """
        path = self._require_path()
        created = False
        if path.exists():
            workbook = self._open(read_only=False)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            workbook = Workbook()
            workbook.active.title = sheet_name
            created = True
            logger.info("Created workbook %s", path)

        if sheet_name in workbook.sheetnames:
            sheet = workbook[sheet_name]
        else:
            sheet = workbook.create_sheet(sheet_name)
            created = True
            logger.info("Created sheet %s in %s", sheet_name, path)

        existing = [c.value for c in sheet[1]] if sheet.max_row >= 1 else []
        present = header_index(existing)
        next_col = max((i + 1 for i, v in enumerate(existing) if v is not None), default=0) + 1
        for header in headers:
            if header not in present:
                sheet.cell(row=1, column=next_col, value=header)
                next_col += 1

        workbook.save(path)
        return created

    def replace_rows(self, sheet_name: str, rows: list[list[Any]]) -> None:
        workbook = self._open(read_only=False)
        sheet = self._sheet(workbook, sheet_name)
        if sheet.max_row > 1:
            sheet.delete_rows(2, sheet.max_row - 1)
        # Explicit cell writes: append() would resume after the pre-delete max row.
        for offset, values in enumerate(rows):
            for col, value in enumerate(values, start=1):
                sheet.cell(row=offset + 2, column=col, value=value)
        workbook.save(self._require_path())

    def check_connection(self) -> bool:
        if self.path is None or not self.path.exists():
            return False
        try:
            workbook = self._open(read_only=True)
            workbook.close()
            return True
        except StoreUnavailableError:
            logger.exception("Workbook connection check failed")
            return False

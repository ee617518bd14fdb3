"""Normalization of raw spreadsheet cell values."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

_TRUTHY = {"TRUE", "Yes"}
_FALSY = {"FALSE", "false"}


def as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime | date):
        return value.isoformat()
    return str(value).strip()


def as_date_text(value: Any) -> str:
    """Dates become ISO-8601 strings; anything else is kept as trimmed text."""
    if isinstance(value, datetime | date):
        return value.isoformat()
    return as_text(value)


def as_code(value: Any, width: int = 3) -> str:
    """CPC/HID cells typed as numbers lose their leading zeros; restore them."""
    if isinstance(value, bool):
        return as_text(value)
    if isinstance(value, int) or (isinstance(value, float) and value.is_integer()):
        return str(int(value)).zfill(width)
    return as_text(value)


def as_int(value: Any, default: int = 0) -> int:
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def is_truthy(value: Any) -> bool:
    if value is True:
        return True
    return isinstance(value, str) and value.strip() in _TRUTHY


def is_explicit_false(value: Any) -> bool:
    if value is False:
        return True
    return isinstance(value, str) and value.strip() in _FALSY


def as_cell(value: Any) -> Any:
    """Value as written back to a sheet: None -> '', bool -> 'TRUE'/'FALSE'."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return value

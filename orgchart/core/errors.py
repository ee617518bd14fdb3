"""Exception types shared by the org chart services."""

from __future__ import annotations


class OrgChartError(Exception):
    pass


class NotFoundError(OrgChartError):
    """A person, team or vacancy id did not match any row."""


class StoreUnavailableError(OrgChartError):
    """The backing workbook or sheet could not be opened."""


class PermissionDeniedError(OrgChartError):
    def __init__(self, action: str, detail: str | None = None) -> None:
        self.action = action
        super().__init__(detail or f"Permission denied for action: {action}")


class ValidationError(OrgChartError):
    """A write payload carried a value that cannot be stored."""

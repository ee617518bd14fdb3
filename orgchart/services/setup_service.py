"""Workbook initialization, health check and sample data for the org module."""

from __future__ import annotations

import logging
from typing import Any

from orgchart.core.cache import TTLCache
from orgchart.core.errors import StoreUnavailableError
from orgchart.core.row_store import RowStore, build_row, header_index
from orgchart.services import sample_data
from orgchart.services.personnel_reader import TEAM_LIST_HEADERS
from orgchart.services.teams_service import TEAM_MAPPINGS_HEADERS, VACANT_HEADERS

logger = logging.getLogger(__name__)

MODULE_NAME = "org"


class OrgSetupService:
    def __init__(
        self,
        org_store: RowStore,
        team_list_store: RowStore,
        cache: TTLCache,
        *,
        team_list_sheet: str = "Team List",
        teams_sheet: str = "Team Mappings",
        vacant_sheet: str = "Vacant Positions",
    ) -> None:
        self.org_store = org_store
        self.team_list_store = team_list_store
        self.cache = cache
        self.team_list_sheet = team_list_sheet
        self.teams_sheet = teams_sheet
        self.vacant_sheet = vacant_sheet

    def _invalidate_cache(self) -> None:
        self.cache.invalidate("org:")
        self.cache.invalidate("teams:")

    def setup(self, include_sample_data: bool = False) -> dict[str, Any]:
        """Make sure every sheet exists with its headers, then optionally seed it."""
        logger.info("Starting org setup (sample data: %s)", include_sample_data)
        try:
            self.org_store.ensure_sheet(self.teams_sheet, TEAM_MAPPINGS_HEADERS)
            self.org_store.ensure_sheet(self.vacant_sheet, VACANT_HEADERS)
            team_list_created = self.team_list_store.ensure_sheet(self.team_list_sheet, TEAM_LIST_HEADERS)
        except StoreUnavailableError as e:
            logger.exception("Org setup failed")
            return {"success": False, "error": str(e)}

        result: dict[str, Any] = {
            "success": True,
            "message": "Organization module initialized successfully",
            "team_list_accessible": self.team_list_store.check_connection(),
            "team_list_created": team_list_created,
        }
        if include_sample_data:
            result["sample_data"] = self.generate_sample_data()

        self._invalidate_cache()
        logger.info("Org setup complete")
        return result

    def health_check(self) -> dict[str, Any]:
        issues: list[str] = []

        try:
            team_rows = self.org_store.get_rows(self.teams_sheet)
            if len(team_rows) < 2:
                issues.append("Team Mappings sheet has no data (no tasks/teams defined)")
        except StoreUnavailableError as e:
            issues.append(f"Team Mappings sheet not available: {e}")

        try:
            self.org_store.get_rows(self.vacant_sheet)
        except StoreUnavailableError as e:
            issues.append(f"Vacant Positions sheet not available: {e}")

        try:
            self.team_list_store.get_rows(self.team_list_sheet)
        except StoreUnavailableError as e:
            issues.append(f"Cannot connect to Team List: {e}")

        return {"healthy": not issues, "issues": issues, "module": MODULE_NAME}

    def generate_sample_data(self) -> dict[str, Any]:
        counts = {"team_mappings": 0, "vacant_positions": 0, "personnel": 0}
        try:
            self.org_store.ensure_sheet(self.teams_sheet, TEAM_MAPPINGS_HEADERS)
            self.org_store.replace_rows(self.teams_sheet, sample_data.TEAM_MAPPINGS)
            counts["team_mappings"] = len(sample_data.TEAM_MAPPINGS)

            self.org_store.ensure_sheet(self.vacant_sheet, VACANT_HEADERS)
            self.org_store.replace_rows(self.vacant_sheet, sample_data.VACANT_POSITIONS)
            counts["vacant_positions"] = len(sample_data.VACANT_POSITIONS)
        except StoreUnavailableError as e:
            logger.exception("Sample data generation failed")
            return {"success": False, "error": str(e)}

        try:
            self.team_list_store.ensure_sheet(self.team_list_sheet, TEAM_LIST_HEADERS)
            header = self.team_list_store.get_rows(self.team_list_sheet)[0]
            columns = header_index(header)
            people = [build_row(columns, record) for record in sample_data.personnel_records()]
            self.team_list_store.replace_rows(self.team_list_sheet, people)
            counts["personnel"] = len(people)
        except StoreUnavailableError:
            logger.warning("Team List not writable, skipping sample personnel", exc_info=True)

        self._invalidate_cache()
        logger.info(
            "Generated %d team mappings, %d vacant positions, %d personnel",
            counts["team_mappings"],
            counts["vacant_positions"],
            counts["personnel"],
        )
        return {
            "success": True,
            "counts": counts,
            "message": (
                f"Generated {counts['team_mappings']} team mappings, "
                f"{counts['vacant_positions']} vacant positions, {counts['personnel']} personnel"
            ),
        }

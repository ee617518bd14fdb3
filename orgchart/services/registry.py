"""Process-wide wiring of stores, cache and services from Settings."""

from __future__ import annotations

import logging

from orgchart.core.cache import TTLCache
from orgchart.core.config import Settings
from orgchart.core.row_store import WorkbookRowStore
from orgchart.services.org_service import OrgService
from orgchart.services.personnel_reader import PersonnelReader
from orgchart.services.setup_service import OrgSetupService
from orgchart.services.teams_service import TeamsService

logger = logging.getLogger(__name__)


class ServiceRegistry:
    def __init__(self) -> None:
        self.cache: TTLCache | None = None
        self.team_list_store: WorkbookRowStore | None = None
        self.org_store: WorkbookRowStore | None = None
        self.teams: TeamsService | None = None
        self.org: OrgService | None = None
        self.setup: OrgSetupService | None = None
        self.initialized: bool = False

    def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.TEAM_LIST_WORKBOOK or not settings.ORG_WORKBOOK:
            logger.warning("Workbook paths missing; org reads will be empty until configured")

        self.cache = TTLCache(default_ttl=settings.ORG_CACHE_TTL_SECONDS)
        self.team_list_store = WorkbookRowStore(settings.TEAM_LIST_WORKBOOK or None)
        self.org_store = WorkbookRowStore(settings.ORG_WORKBOOK or None)

        self.teams = TeamsService(
            self.org_store,
            self.cache,
            teams_sheet=settings.TEAM_MAPPINGS_SHEET,
            vacant_sheet=settings.VACANT_POSITIONS_SHEET,
            default_contract=settings.DEFAULT_CONTRACT,
            cache_ttl=settings.TEAMS_CACHE_TTL_SECONDS,
        )
        reader = PersonnelReader(
            self.team_list_store,
            self.cache,
            sheet_name=settings.TEAM_LIST_SHEET,
            level_map=settings.CPC_LEVEL_MAP,
            raw_cache_ttl=settings.TEAM_LIST_RAW_CACHE_TTL_SECONDS,
        )
        self.org = OrgService(reader, self.teams, self.cache, cache_ttl=settings.ORG_CACHE_TTL_SECONDS)
        self.setup = OrgSetupService(
            self.org_store,
            self.team_list_store,
            self.cache,
            team_list_sheet=settings.TEAM_LIST_SHEET,
            teams_sheet=settings.TEAM_MAPPINGS_SHEET,
            vacant_sheet=settings.VACANT_POSITIONS_SHEET,
        )
        self.initialized = True
        logger.info(
            "Org services initialized (team list=%s, org=%s)",
            settings.TEAM_LIST_WORKBOOK or "-",
            settings.ORG_WORKBOOK or "-",
        )

    def close(self) -> None:
        if self.cache is not None:
            self.cache.clear()
        self.cache = None
        self.team_list_store = None
        self.org_store = None
        self.teams = None
        self.org = None
        self.setup = None
        self.initialized = False


services = ServiceRegistry()

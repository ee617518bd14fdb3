"""Team List roster reader.

Turns raw roster rows into PersonnelRecords: blank rows are skipped, departed
people are either dropped or turned into vacancy placeholders, and each row
gets a node type (explicit column, else the CPC level digit, else "person").
"""

from __future__ import annotations

import logging
from typing import Any

from orgchart.core.cache import TTLCache
from orgchart.core.errors import StoreUnavailableError
from orgchart.core.row_store import RowStore, cell, header_index
from orgchart.core.values import as_code, as_date_text, as_text, is_explicit_false, is_truthy
from orgchart.models.org import PLACEMENT_TABLE, PersonnelLifecycle, PersonnelRecord, Placement

logger = logging.getLogger(__name__)

CACHE_KEY_TEAM_LIST_RAW = "org:teamlist_raw"

COL_EMPLOYEE_CODE = "Employee Code"
COL_COMPANY = "Company"
COL_CONTRACT = "Contract"
COL_TASK = "Task"
COL_PRIMARY_WORKSTREAM = "Primary Workstream"
COL_SECONDARY_WORKSTREAM = "Secondary Workstream"
COL_FIRST_NAME = "First Name"
COL_LAST_NAME = "Last Name"
COL_EMAIL = "Email"
COL_PRIMARY_ROLE = "Primary Role"
COL_SECONDARY_ROLE = "Secondary Role"
COL_PRIMARY_ROLE_START = "Primary Role Start Date"
COL_CPC = "Contract Personnel Code (CPC)"
COL_HID = "Heirarchy Identifier (HID)"
COL_UPID = "Unique Personnel ID (UPID)"
COL_SUPERVISOR_EMAIL = "Supervisor Email"
COL_SUPERVISOR_UPID = "Supervisor UPID"
COL_PORTFOLIO_LEADERSHIP = "Portfolio Leadership?"
COL_PROFILE_PICTURE = "Profile Picture"
COL_EOD = "EOD"
COL_STATUS = "Personnel Contract Status"
COL_DEPARTURE_DATE = "Departure Date"
COL_DEPARTURE_MEETING_DATE = "Departure Meeting Date"
COL_CONTRACT_LCAT = "Contract LCAT"
COL_LOCATION = "Location (City, ST)"
COL_TENURE = "Tenure (Days)"
COL_NODE_TYPE = "Node Type"
COL_ACTIVE_IN_ORG = "Active In Org"

# "Heirarchy" is the spelling used by the roster workbook itself.
TEAM_LIST_HEADERS = [
    COL_EMPLOYEE_CODE,
    COL_COMPANY,
    COL_CONTRACT,
    COL_TASK,
    COL_PRIMARY_WORKSTREAM,
    COL_SECONDARY_WORKSTREAM,
    COL_FIRST_NAME,
    COL_LAST_NAME,
    COL_EMAIL,
    COL_PRIMARY_ROLE,
    COL_SECONDARY_ROLE,
    COL_PRIMARY_ROLE_START,
    COL_CPC,
    COL_HID,
    COL_UPID,
    COL_SUPERVISOR_EMAIL,
    COL_SUPERVISOR_UPID,
    COL_PORTFOLIO_LEADERSHIP,
    COL_PROFILE_PICTURE,
    COL_EOD,
    COL_STATUS,
    COL_DEPARTURE_DATE,
    COL_DEPARTURE_MEETING_DATE,
    COL_CONTRACT_LCAT,
    COL_LOCATION,
    COL_TENURE,
    COL_NODE_TYPE,
    COL_ACTIVE_IN_ORG,
]

DEFAULT_CPC_LEVEL_MAP = {"1": "director", "2": "deputy", "3": "lead", "4": "person"}


def derive_node_type(
    explicit_type: str,
    cpc: str,
    portfolio_leadership: bool,
    level_map: dict[str, str],
) -> str:
    if explicit_type:
        return explicit_type.lower()

    node_type = level_map.get(cpc[:1], "person") if cpc else "person"
    if portfolio_leadership and node_type == "person":
        node_type = "director"
    return node_type


def classify(status: str, active_in_org: bool) -> Placement:
    return PLACEMENT_TABLE[(PersonnelLifecycle.from_status(status), active_in_org)]


class PersonnelReader:
    def __init__(
        self,
        store: RowStore,
        cache: TTLCache,
        *,
        sheet_name: str = "Team List",
        level_map: dict[str, str] | None = None,
        raw_cache_ttl: int = 600,
    ) -> None:
        self.store = store
        self.cache = cache
        self.sheet_name = sheet_name
        self.level_map = level_map or DEFAULT_CPC_LEVEL_MAP
        self.raw_cache_ttl = raw_cache_ttl

    def read_rows(self) -> list[list[Any]]:
        """Raw sheet rows, header first. Raises StoreUnavailableError."""
        return self.store.get_rows(self.sheet_name)

    def load(self) -> list[PersonnelRecord]:
        cached = self.cache.get(CACHE_KEY_TEAM_LIST_RAW)
        if cached is not None:
            logger.debug("Returning cached Team List (%d records)", len(cached))
            return cached

        records = self.parse_rows(self.read_rows())
        self.cache.set(CACHE_KEY_TEAM_LIST_RAW, records, self.raw_cache_ttl)
        logger.info("Team List loaded: %d records", len(records))
        return records

    def read_all(self) -> list[PersonnelRecord]:
        try:
            return self.load()
        except StoreUnavailableError:
            logger.exception("Team List unavailable, returning no personnel")
            return []

    def parse_rows(self, rows: list[list[Any]]) -> list[PersonnelRecord]:
        if len(rows) < 2:
            return []

        columns = header_index(rows[0])
        records: list[PersonnelRecord] = []
        seen_upids: set[str] = set()

        for i, row in enumerate(rows[1:], start=2):
            record = self._parse_row(row, columns, i)
            if record is None:
                continue
            if record.upid:
                if record.upid in seen_upids:
                    logger.warning("Duplicate UPID %s on row %d ignored", record.upid, i)
                    continue
                seen_upids.add(record.upid)
            records.append(record)

        return records

    def _parse_row(self, row: list[Any], columns: dict[str, int], row_index: int) -> PersonnelRecord | None:
        def text(header: str) -> str:
            return as_text(cell(row, columns, header))

        def date_text(header: str) -> str:
            return as_date_text(cell(row, columns, header))

        upid = text(COL_UPID)
        email = text(COL_EMAIL)
        if not upid and not email:
            return None

        status = text(COL_STATUS)
        active_in_org = not is_explicit_false(cell(row, columns, COL_ACTIVE_IN_ORG))
        placement = classify(status, active_in_org)
        if placement is Placement.EXCLUDED:
            return None

        cpc = as_code(cell(row, columns, COL_CPC))
        leadership = is_truthy(cell(row, columns, COL_PORTFOLIO_LEADERSHIP))
        node_type = derive_node_type(text(COL_NODE_TYPE), cpc, leadership, self.level_map)
        if placement is Placement.VACANCY:
            node_type = "vacant"

        first_name = text(COL_FIRST_NAME)
        last_name = text(COL_LAST_NAME)

        return PersonnelRecord(
            employee_code=text(COL_EMPLOYEE_CODE),
            upid=upid,
            cpc=cpc,
            hid=as_code(cell(row, columns, COL_HID)),
            supervisor_email=text(COL_SUPERVISOR_EMAIL),
            supervisor_upid=text(COL_SUPERVISOR_UPID),
            company=text(COL_COMPANY),
            contract=text(COL_CONTRACT),
            task=text(COL_TASK),
            primary_workstream=text(COL_PRIMARY_WORKSTREAM),
            secondary_workstream=text(COL_SECONDARY_WORKSTREAM),
            first_name=first_name,
            last_name=last_name,
            name=" ".join(p for p in (first_name, last_name) if p),
            email=email,
            primary_role=text(COL_PRIMARY_ROLE),
            secondary_role=text(COL_SECONDARY_ROLE),
            primary_role_start_date=date_text(COL_PRIMARY_ROLE_START),
            profile_picture=text(COL_PROFILE_PICTURE),
            eod=date_text(COL_EOD),
            personnel_contract_status=status,
            lifecycle=PersonnelLifecycle.from_status(status),
            departure_date=date_text(COL_DEPARTURE_DATE),
            departure_meeting_date=date_text(COL_DEPARTURE_MEETING_DATE),
            contract_lcat=text(COL_CONTRACT_LCAT),
            location=text(COL_LOCATION),
            tenure=text(COL_TENURE),
            node_type=node_type,
            portfolio_leadership=leadership,
            active_in_org=active_in_org,
            row_index=row_index,
        )

"""Unified org tree over the Team List roster plus Team Mappings structure."""

from __future__ import annotations

import logging
import re
from typing import Any

from orgchart.core.cache import TTLCache
from orgchart.core.errors import NotFoundError, ValidationError
from orgchart.core.permissions import ACTION_ORG_EDIT, PermissionGate
from orgchart.core.row_store import build_row, cell, header_index
from orgchart.core.values import as_cell, as_code, as_text
from orgchart.models.org import (
    NODE_TYPE_LABELS,
    NODE_TYPES,
    VACANCY_PREFIX,
    ManagementEmails,
    NodeTypeConfig,
    OrgSummary,
    PersonCreate,
    PersonnelRecord,
    UnifiedNode,
    UserProfile,
    WriteResult,
    is_structural_id,
)
from orgchart.models.teams import VacantPosition
from orgchart.services import personnel_reader as cols
from orgchart.services.parent_resolver import (
    build_team_index,
    build_upid_index,
    resolve_person_parent,
    resolve_vacancy_parent,
)
from orgchart.services.personnel_reader import PersonnelReader
from orgchart.services.structure import MetadataProvider, StructureDeriver

logger = logging.getLogger(__name__)

CACHE_KEY_ALL_DATA = "org:all_data"
DEFAULT_CPC = "400"

_CODE_PATTERN = re.compile(r"\d{3}")
_UPID_PATTERN = re.compile(r"\d{3}-\d{3}")

# update field name -> Team List header
_FIELD_TO_HEADER = {
    "employee_code": cols.COL_EMPLOYEE_CODE,
    "company": cols.COL_COMPANY,
    "contract": cols.COL_CONTRACT,
    "task": cols.COL_TASK,
    "primary_workstream": cols.COL_PRIMARY_WORKSTREAM,
    "team": cols.COL_PRIMARY_WORKSTREAM,
    "secondary_workstream": cols.COL_SECONDARY_WORKSTREAM,
    "first_name": cols.COL_FIRST_NAME,
    "last_name": cols.COL_LAST_NAME,
    "email": cols.COL_EMAIL,
    "title": cols.COL_PRIMARY_ROLE,
    "primary_role": cols.COL_PRIMARY_ROLE,
    "secondary_role": cols.COL_SECONDARY_ROLE,
    "secondary_roles": cols.COL_SECONDARY_ROLE,
    "primary_role_start_date": cols.COL_PRIMARY_ROLE_START,
    "cpc": cols.COL_CPC,
    "hid": cols.COL_HID,
    "upid": cols.COL_UPID,
    "supervisor_email": cols.COL_SUPERVISOR_EMAIL,
    "supervisor_upid": cols.COL_SUPERVISOR_UPID,
    "reports_to": cols.COL_SUPERVISOR_UPID,
    "portfolio_leadership": cols.COL_PORTFOLIO_LEADERSHIP,
    "profile_picture": cols.COL_PROFILE_PICTURE,
    "eod": cols.COL_EOD,
    "personnel_contract_status": cols.COL_STATUS,
    "departure_date": cols.COL_DEPARTURE_DATE,
    "departure_meeting_date": cols.COL_DEPARTURE_MEETING_DATE,
    "contract_lcat": cols.COL_CONTRACT_LCAT,
    "location": cols.COL_LOCATION,
    "tenure": cols.COL_TENURE,
    "node_type": cols.COL_NODE_TYPE,
    "type": cols.COL_NODE_TYPE,
    "active_in_org": cols.COL_ACTIVE_IN_ORG,
}


def split_name(name: str) -> tuple[str, str]:
    parts = name.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def person_node(person: PersonnelRecord, parent_id: str) -> UnifiedNode:
    vacant = person.node_type == "vacant"
    return UnifiedNode(
        id=person.upid or person.email or person.employee_code,
        parent_id=parent_id,
        type=person.node_type,
        name=f"VACANT - {person.name or 'Position'}" if vacant else person.name,
        email=person.email,
        title=person.primary_role,
        company=person.company,
        contract=person.contract,
        task=person.task or None,
        team=person.primary_workstream or None,
        employee_code=person.employee_code,
        first_name=person.first_name,
        last_name=person.last_name,
        upid=person.upid,
        cpc=person.cpc,
        hid=person.hid,
        supervisor_upid=person.supervisor_upid,
        supervisor_email=person.supervisor_email,
        primary_workstream=person.primary_workstream,
        secondary_workstream=person.secondary_workstream,
        primary_role=person.primary_role or None,
        secondary_roles=person.secondary_role or None,
        profile_picture=person.profile_picture or None,
        eod=person.eod or None,
        personnel_contract_status=person.personnel_contract_status or None,
        primary_role_start_date=person.primary_role_start_date or None,
        departure_date=person.departure_date or None,
        departure_meeting_date=person.departure_meeting_date or None,
        contract_lcat=person.contract_lcat or None,
        location=person.location or None,
        tenure=person.tenure or None,
        portfolio_leadership=person.portfolio_leadership or None,
        target_hire_date="" if vacant else None,
        requirements="" if vacant else None,
    )


def vacancy_node(vacancy: VacantPosition, parent_id: str) -> UnifiedNode:
    return UnifiedNode(
        id=vacancy.vacant_id,
        parent_id=parent_id,
        type="vacant",
        name="VACANT",
        title=vacancy.title or "Vacant Position",
        contract=vacancy.contract,
        task=vacancy.task or None,
        team=vacancy.team or None,
        vacant_position=True,
        target_hire_date=vacancy.target_hire_date,
        requirements=vacancy.requirements,
    )


class OrgService:
    def __init__(
        self,
        reader: PersonnelReader,
        provider: MetadataProvider,
        cache: TTLCache,
        *,
        cache_ttl: int = 300,
    ) -> None:
        self.reader = reader
        self.provider = provider
        self.deriver = StructureDeriver(provider)
        self.cache = cache
        self.cache_ttl = cache_ttl

    def invalidate_cache(self) -> None:
        removed = self.cache.invalidate("org:")
        logger.info("Org cache invalidated (%d entries)", removed)

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    def _build_nodes(self) -> list[UnifiedNode]:
        personnel = self.reader.load()
        structure = self.deriver.derive(personnel)

        upid_index = build_upid_index(personnel)
        team_index = build_team_index(structure.teams)
        team_node_ids = {t.id for t in structure.team_nodes}
        task_node_ids = {t.id for t in structure.task_nodes}

        people = [
            person_node(p, resolve_person_parent(p, upid_index, team_index, task_node_ids))
            for p in personnel
        ]
        vacancies = [
            vacancy_node(v, resolve_vacancy_parent(v, upid_index, team_node_ids, task_node_ids))
            for v in self.provider.get_all_vacant_positions()
        ]

        nodes: list[UnifiedNode] = []
        seen: set[str] = set()
        for node in [structure.root_node, *structure.task_nodes, *structure.team_nodes, *people, *vacancies]:
            if node.id in seen:
                logger.warning("Duplicate node id %s dropped", node.id)
                continue
            seen.add(node.id)
            nodes.append(node)
        return nodes

    def get_all_nodes(self) -> list[UnifiedNode]:
        cached = self.cache.get(CACHE_KEY_ALL_DATA)
        if cached is not None:
            logger.debug("Returning cached org data")
            return cached

        try:
            nodes = self._build_nodes()
        except Exception:
            logger.exception("Failed to build org tree")
            return []

        self.cache.set(CACHE_KEY_ALL_DATA, nodes, self.cache_ttl)
        logger.info("Org data cached: %d total nodes", len(nodes))
        return nodes

    def get_node_by_id(self, node_id: str) -> UnifiedNode | None:
        return next((n for n in self.get_all_nodes() if n.id == node_id), None)

    def get_nodes_by_email(self, email: str) -> list[UnifiedNode]:
        wanted = email.strip().lower()
        if not wanted:
            return []
        return [n for n in self.get_all_nodes() if n.email and n.email.strip().lower() == wanted]

    def get_user_profile(self, email: str) -> UserProfile | None:
        """Aggregate every entry for an email; the first entry supplies identity fields."""
        entries = self.get_nodes_by_email(email)
        if not entries:
            return None

        primary = entries[0]
        tasks = list(dict.fromkeys(e.task for e in entries if e.task))
        teams = list(dict.fromkeys(e.team for e in entries if e.team))
        contracts = list(dict.fromkeys(e.contract for e in entries if e.contract))
        return UserProfile(
            id=primary.id,
            name=primary.name,
            email=primary.email,
            title=primary.title,
            type=primary.type,
            company=primary.company,
            profile_picture=primary.profile_picture,
            upid=primary.upid or None,
            tasks=tasks,
            teams=teams,
            contracts=contracts,
            primary_task=tasks[0] if tasks else None,
            primary_team=teams[0] if teams else None,
            entries=entries,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_tasks(self) -> list[str]:
        return sorted({n.task for n in self.get_all_nodes() if n.task})

    def get_node_type_config(self) -> NodeTypeConfig:
        return NodeTypeConfig(types=list(NODE_TYPES), labels=dict(NODE_TYPE_LABELS))

    def get_task_colors(self) -> dict[str, str]:
        return self.provider.get_task_colors()

    def get_task_friendly_names(self) -> dict[str, str]:
        try:
            return self.provider.get_task_friendly_names()
        except Exception:
            logger.exception("Failed to load task friendly names")
            return {}

    def get_management_emails(self) -> dict[str, ManagementEmails]:
        """Per task: contract director/deputy emails and the first lead on the task."""
        nodes = self.get_all_nodes()

        directors: dict[str, str] = {}
        deputies: dict[str, str] = {}
        for node in nodes:
            if not node.contract or not node.email:
                continue
            if node.type == "director":
                directors[node.contract] = node.email
            elif node.type == "deputy":
                deputies[node.contract] = node.email

        task_contracts = {n.task: n.contract for n in nodes if n.type == "task" and n.task}
        emails: dict[str, ManagementEmails] = {}
        for task in self.get_tasks():
            contract = task_contracts.get(task, "")
            emails[task] = ManagementEmails(
                contract_manager_email=directors.get(contract, ""),
                deputy_manager_email=deputies.get(contract, ""),
            )

        for node in nodes:
            if node.type != "lead" or not node.task or not node.email:
                continue
            entry = emails.get(node.task)
            if entry is not None and not entry.team_lead_email:
                entry.team_lead_email = node.email

        return emails

    def get_module_summary(self) -> OrgSummary:
        people = [n for n in self.get_all_nodes() if not n.structural]
        by_type: dict[str, int] = {}
        for node in people:
            by_type[node.type] = by_type.get(node.type, 0) + 1
        return OrgSummary(
            total=len(people),
            by_type=by_type,
            vacant_count=by_type.get("vacant", 0),
            task_count=len(self.get_tasks()),
        )

    def get_total_count(self) -> int:
        return sum(1 for n in self.get_all_nodes() if not n.structural and n.type != "hidden")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _roster(self) -> tuple[dict[str, int], list[list[Any]]]:
        rows = self.reader.read_rows()
        if not rows:
            raise NotFoundError(f"Sheet {self.reader.sheet_name} has no header row")
        return header_index(rows[0]), rows[1:]

    @staticmethod
    def _find_row(columns: dict[str, int], rows: list[list[Any]], upid: str) -> int:
        """1-based sheet row of the given UPID."""
        wanted = upid.strip()
        for i, row in enumerate(rows, start=2):
            if as_text(cell(row, columns, cols.COL_UPID)) == wanted:
                return i
        raise NotFoundError(f"Person not found with UPID: {upid}")

    @staticmethod
    def _next_hid(columns: dict[str, int], rows: list[list[Any]]) -> str:
        highest = 0
        for row in rows:
            hid = as_code(cell(row, columns, cols.COL_HID))
            if hid.isdigit():
                highest = max(highest, int(hid))
        return f"{highest + 1:03d}"

    def add_person(self, person: PersonCreate, gate: PermissionGate) -> WriteResult:
        gate.require_permission(ACTION_ORG_EDIT)

        try:
            columns, rows = self._roster()

            upid = person.upid
            if upid and not _UPID_PATTERN.fullmatch(upid):
                raise ValidationError(f"UPID must be CPC-HID with 3 digits each (got {upid!r})")
            cpc = person.cpc or (upid.split("-", 1)[0] if upid else DEFAULT_CPC)
            hid = person.hid or (upid.split("-", 1)[1] if upid else self._next_hid(columns, rows))
            if not _CODE_PATTERN.fullmatch(cpc) or not _CODE_PATTERN.fullmatch(hid):
                raise ValidationError(f"CPC and HID must be 3 digits (got {cpc!r}, {hid!r})")
            if upid and upid != f"{cpc}-{hid}":
                raise ValidationError(f"UPID {upid} does not match CPC {cpc} and HID {hid}")
            upid = upid or f"{cpc}-{hid}"

            existing = {as_text(cell(row, columns, cols.COL_UPID)) for row in rows}
            if upid in existing:
                raise ValidationError(f"UPID already exists: {upid}")

            first_name, last_name = person.first_name, person.last_name
            if person.name and (not first_name or not last_name):
                split_first, split_last = split_name(person.name)
                first_name = first_name or split_first
                last_name = last_name or split_last

            values = {
                cols.COL_EMPLOYEE_CODE: person.employee_code,
                cols.COL_COMPANY: person.company,
                cols.COL_CONTRACT: person.contract,
                cols.COL_TASK: person.task,
                cols.COL_PRIMARY_WORKSTREAM: person.primary_workstream or person.team,
                cols.COL_SECONDARY_WORKSTREAM: person.secondary_workstream,
                cols.COL_FIRST_NAME: first_name,
                cols.COL_LAST_NAME: last_name,
                cols.COL_EMAIL: person.email,
                cols.COL_PRIMARY_ROLE: person.primary_role or person.title,
                cols.COL_SECONDARY_ROLE: person.secondary_role,
                cols.COL_PRIMARY_ROLE_START: person.primary_role_start_date,
                cols.COL_CPC: cpc,
                cols.COL_HID: hid,
                cols.COL_UPID: upid,
                cols.COL_SUPERVISOR_EMAIL: person.supervisor_email,
                cols.COL_SUPERVISOR_UPID: person.supervisor_upid or person.reports_to,
                cols.COL_PORTFOLIO_LEADERSHIP: "TRUE" if person.portfolio_leadership else "",
                cols.COL_PROFILE_PICTURE: person.profile_picture,
                cols.COL_EOD: person.eod,
                cols.COL_STATUS: person.personnel_contract_status or "Active",
                cols.COL_DEPARTURE_DATE: person.departure_date,
                cols.COL_DEPARTURE_MEETING_DATE: person.departure_meeting_date,
                cols.COL_CONTRACT_LCAT: person.contract_lcat,
                cols.COL_LOCATION: person.location,
                cols.COL_TENURE: person.tenure,
                cols.COL_NODE_TYPE: person.node_type,
                cols.COL_ACTIVE_IN_ORG: as_cell(person.active_in_org),
            }
            self.reader.store.append_row(self.reader.sheet_name, build_row(columns, values))
        except (NotFoundError, ValidationError) as e:
            return WriteResult(success=False, error=str(e))
        except Exception as e:
            logger.exception("Failed to add person")
            return WriteResult(success=False, error=str(e))

        self.invalidate_cache()
        logger.info("Added person %s", upid)
        return WriteResult(success=True, id=upid)

    def update_person(self, upid: str, updates: dict[str, Any], gate: PermissionGate) -> WriteResult:
        gate.require_permission(ACTION_ORG_EDIT)

        try:
            changes = dict(updates)
            if "name" in changes:
                changes["first_name"], changes["last_name"] = split_name(as_text(changes.pop("name")))
            parent_id = as_text(changes.pop("parent_id", None))
            if parent_id and not is_structural_id(parent_id):
                changes["supervisor_upid"] = parent_id

            columns, rows = self._roster()
            row_index = self._find_row(columns, rows, upid)
            cells = {
                columns[header] + 1: as_cell(value)
                for field, value in changes.items()
                if (header := _FIELD_TO_HEADER.get(field)) and header in columns
            }
            if cells:
                self.reader.store.set_cell_values(self.reader.sheet_name, row_index, cells)
        except NotFoundError as e:
            return WriteResult(success=False, error=str(e))
        except Exception as e:
            logger.exception("Failed to update person %s", upid)
            return WriteResult(success=False, error=str(e))

        self.invalidate_cache()
        logger.info("Updated person %s", upid)
        return WriteResult(success=True, id=upid)

    def delete_person(self, node_id: str, gate: PermissionGate) -> WriteResult:
        gate.require_permission(ACTION_ORG_EDIT)

        if node_id.startswith(VACANCY_PREFIX):
            return self.provider.delete_vacant_position(node_id, gate)

        try:
            columns, rows = self._roster()
            row_index = self._find_row(columns, rows, node_id)
            self.reader.store.set_cell_values(
                self.reader.sheet_name,
                row_index,
                {
                    columns[cols.COL_ACTIVE_IN_ORG] + 1: "FALSE",
                    columns[cols.COL_STATUS] + 1: "Departed",
                },
            )
        except NotFoundError as e:
            return WriteResult(success=False, error=str(e))
        except Exception as e:
            logger.exception("Failed to delete person %s", node_id)
            return WriteResult(success=False, error=str(e))

        self.invalidate_cache()
        logger.info("Soft-deleted person %s", node_id)
        return WriteResult(success=True, id=node_id)

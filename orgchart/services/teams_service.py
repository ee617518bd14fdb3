"""Team Mappings and Vacant Positions: task/team taxonomy and open positions.

Team Mappings columns: Contract, Task ID, Task Name, Team ID, Team Name,
Is Active, Color, Description, Default SLA Threshold, Notify On Escalation,
Display Order. Contracts organised as flat workstreams leave Team ID empty.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from orgchart.core.cache import TTLCache
from orgchart.core.errors import NotFoundError, StoreUnavailableError
from orgchart.core.permissions import ACTION_ORG_EDIT, PermissionGate
from orgchart.core.row_store import RowStore, build_row, cell, header_index
from orgchart.core.values import as_date_text, as_int, as_text, is_explicit_false, is_truthy
from orgchart.models.org import VACANCY_PREFIX, WriteResult
from orgchart.models.teams import (
    BulkCreateError,
    BulkCreateResult,
    TaskMeta,
    TaskSummary,
    TeamCreate,
    TeamMapping,
    TeamsSummary,
    TeamUpdate,
    VacancyCreate,
    VacantPosition,
)

logger = logging.getLogger(__name__)

CACHE_KEY_ALL_TEAMS = "teams:all"
CACHE_KEY_VACANTS = "teams:vacants"
DEFAULT_TASK_COLOR = "#95a5a6"

TEAM_MAPPINGS_HEADERS = [
    "Contract",
    "Task ID",
    "Task Name",
    "Team ID",
    "Team Name",
    "Is Active",
    "Color",
    "Description",
    "Default SLA Threshold",
    "Notify On Escalation",
    "Display Order",
]

VACANT_HEADERS = [
    "Vacant ID",
    "Contract",
    "Task ID",
    "Team ID",
    "Title",
    "Supervisor UPID",
    "Target Hire Date",
    "Requirements",
    "Is Active",
]

# TeamMapping attribute -> Team Mappings header
_TEAM_FIELDS = {
    "contract": "Contract",
    "task": "Task ID",
    "task_name": "Task Name",
    "team_id": "Team ID",
    "team_name": "Team Name",
    "is_active": "Is Active",
    "color": "Color",
    "description": "Description",
    "default_sla_threshold": "Default SLA Threshold",
    "notify_on_escalation": "Notify On Escalation",
    "display_order": "Display Order",
}

_TEAM_ID_PATTERN = re.compile(r"TEAM-(\d+)")
_NUMBER_PATTERN = re.compile(r"(\d+)")


def _task_number(task: str) -> int:
    match = _NUMBER_PATTERN.search(task)
    return int(match.group(1)) if match else 0


def next_team_id(teams: list[TeamMapping]) -> str:
    highest = 0
    for team in teams:
        match = _TEAM_ID_PATTERN.fullmatch(team.team_id)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"TEAM-{highest + 1:03d}"


def next_vacant_id(task: str, existing_ids: list[str]) -> str:
    suffix = (task or "UNKNOWN").replace("TASK-", "")
    prefix = f"{VACANCY_PREFIX}{suffix}-"
    highest = 0
    for vacant_id in existing_ids:
        if vacant_id.startswith(prefix):
            tail = vacant_id[len(prefix):]
            if tail.isdigit():
                highest = max(highest, int(tail))
    return f"{prefix}{highest + 1}"


class TeamsService:
    def __init__(
        self,
        store: RowStore,
        cache: TTLCache,
        *,
        teams_sheet: str = "Team Mappings",
        vacant_sheet: str = "Vacant Positions",
        default_contract: str = "SQuAT",
        cache_ttl: int = 300,
    ) -> None:
        self.store = store
        self.cache = cache
        self.teams_sheet = teams_sheet
        self.vacant_sheet = vacant_sheet
        self.default_contract = default_contract
        self.cache_ttl = cache_ttl

    def _invalidate_cache(self) -> None:
        # The org tree is derived from teams and vacancies, so it goes too.
        self.cache.invalidate("teams:")
        self.cache.invalidate("org:")
        logger.info("Teams and org caches invalidated")

    def clear_cache(self) -> WriteResult:
        self._invalidate_cache()
        return WriteResult(success=True, message="Cache cleared")

    def _read_sheet(self, sheet_name: str) -> tuple[dict[str, int], list[list[Any]]]:
        rows = self.store.get_rows(sheet_name)
        if not rows:
            raise StoreUnavailableError(f"Sheet {sheet_name} has no header row")
        return header_index(rows[0]), rows[1:]

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    def _parse_team(self, row: list[Any], columns: dict[str, int], row_index: int) -> TeamMapping | None:
        team_id = as_text(cell(row, columns, "Team ID"))
        task = as_text(cell(row, columns, "Task ID"))
        if not team_id and not task:
            return None
        return TeamMapping(
            contract=as_text(cell(row, columns, "Contract")) or self.default_contract,
            task=task,
            task_name=as_text(cell(row, columns, "Task Name")),
            team_id=team_id,
            team_name=as_text(cell(row, columns, "Team Name")),
            is_active=not is_explicit_false(cell(row, columns, "Is Active")),
            color=as_text(cell(row, columns, "Color")),
            description=as_text(cell(row, columns, "Description")),
            default_sla_threshold=as_text(cell(row, columns, "Default SLA Threshold")),
            notify_on_escalation=is_truthy(cell(row, columns, "Notify On Escalation")),
            display_order=as_int(cell(row, columns, "Display Order")),
            row_index=row_index,
        )

    def _load_teams(self) -> list[TeamMapping]:
        cached = self.cache.get(CACHE_KEY_ALL_TEAMS)
        if cached is not None:
            return cached

        columns, rows = self._read_sheet(self.teams_sheet)
        teams = [
            team
            for i, row in enumerate(rows, start=2)
            if (team := self._parse_team(row, columns, i)) is not None
        ]
        self.cache.set(CACHE_KEY_ALL_TEAMS, teams, self.cache_ttl)
        logger.info("Loaded %d team mappings", len(teams))
        return teams

    def get_all_teams(self) -> list[TeamMapping]:
        try:
            return self._load_teams()
        except StoreUnavailableError:
            logger.exception("Team Mappings unavailable, returning no teams")
            return []

    def get_team_by_id(self, team_id: str) -> TeamMapping | None:
        return next((t for t in self.get_all_teams() if t.team_id == team_id), None)

    def get_teams_by_task(self, task: str) -> list[TeamMapping]:
        return [t for t in self.get_all_teams() if t.task == task and t.is_active]

    def get_all_tasks(self) -> list[TaskSummary]:
        tasks: dict[str, TaskSummary] = {}
        for team in self.get_all_teams():
            if team.task and team.task not in tasks:
                tasks[team.task] = TaskSummary(task=team.task, task_name=team.task_name or team.task)
        return sorted(tasks.values(), key=lambda t: _task_number(t.task))

    def create_team(self, data: TeamCreate, gate: PermissionGate) -> WriteResult:
        gate.require_permission(ACTION_ORG_EDIT)

        try:
            teams = self._load_teams()
            team_id = data.team_id or next_team_id(teams)
            if any(t.team_id == team_id for t in teams):
                return WriteResult(success=False, error=f"Team ID already exists: {team_id}")

            values = data.model_dump()
            values["team_id"] = team_id
            values["contract"] = data.contract or self.default_contract
            columns, _ = self._read_sheet(self.teams_sheet)
            row = build_row(columns, {_TEAM_FIELDS[k]: v for k, v in values.items() if k in _TEAM_FIELDS})
            self.store.append_row(self.teams_sheet, row)
        except Exception as e:
            logger.exception("Failed to create team %s", data.team_name)
            return WriteResult(success=False, error=str(e))

        self._invalidate_cache()
        logger.info("Created team %s", team_id)
        return WriteResult(success=True, id=team_id, message="Team created successfully")

    def update_team(self, team_id: str, updates: TeamUpdate, gate: PermissionGate) -> WriteResult:
        gate.require_permission(ACTION_ORG_EDIT)

        try:
            team = next((t for t in self._load_teams() if t.team_id == team_id), None)
            if team is None or team.row_index is None:
                raise NotFoundError(f"Team not found: {team_id}")

            columns, _ = self._read_sheet(self.teams_sheet)
            changes = updates.model_dump(exclude_none=True)
            cells = {
                columns[_TEAM_FIELDS[field]] + 1: value
                for field, value in changes.items()
                if field in _TEAM_FIELDS and _TEAM_FIELDS[field] in columns
            }
            if cells:
                self.store.set_cell_values(self.teams_sheet, team.row_index, cells)
        except NotFoundError as e:
            return WriteResult(success=False, error=str(e))
        except Exception as e:
            logger.exception("Failed to update team %s", team_id)
            return WriteResult(success=False, error=str(e))

        self._invalidate_cache()
        logger.info("Updated team %s", team_id)
        return WriteResult(success=True, id=team_id, message="Team updated successfully")

    def delete_team(self, team_id: str, gate: PermissionGate, *, hard: bool = False) -> WriteResult:
        gate.require_permission(ACTION_ORG_EDIT)

        try:
            team = next((t for t in self._load_teams() if t.team_id == team_id), None)
            if team is None or team.row_index is None:
                raise NotFoundError(f"Team not found: {team_id}")

            if hard:
                self.store.delete_row(self.teams_sheet, team.row_index)
            else:
                columns, _ = self._read_sheet(self.teams_sheet)
                self.store.set_cell_value(self.teams_sheet, team.row_index, columns["Is Active"] + 1, False)
        except NotFoundError as e:
            return WriteResult(success=False, error=str(e))
        except Exception as e:
            logger.exception("Failed to delete team %s", team_id)
            return WriteResult(success=False, error=str(e))

        self._invalidate_cache()
        logger.info("Deleted team %s (%s)", team_id, "hard" if hard else "soft")
        return WriteResult(
            success=True,
            id=team_id,
            message="Team permanently deleted" if hard else "Team deactivated",
        )

    def reactivate_team(self, team_id: str, gate: PermissionGate) -> WriteResult:
        return self.update_team(team_id, TeamUpdate(is_active=True), gate)

    def bulk_create_teams(self, teams: list[TeamCreate], gate: PermissionGate) -> BulkCreateResult:
        gate.require_permission(ACTION_ORG_EDIT)

        created = 0
        errors: list[BulkCreateError] = []
        for index, data in enumerate(teams):
            result = self.create_team(data, gate)
            if result.success:
                created += 1
            else:
                errors.append(BulkCreateError(index=index, error=result.error or "unknown error"))

        return BulkCreateResult(
            success=not errors,
            created=created,
            failed=len(errors),
            errors=errors,
            message=f"Created {created} teams, {len(errors)} failed",
        )

    def get_module_summary(self) -> TeamsSummary:
        teams = self.get_all_teams()
        active = sum(1 for t in teams if t.is_active)
        return TeamsSummary(
            total_teams=len(teams),
            active_teams=active,
            inactive_teams=len(teams) - active,
            total_tasks=len(self.get_all_tasks()),
        )

    # ------------------------------------------------------------------
    # Task metadata
    # ------------------------------------------------------------------

    def get_task_metadata(self) -> dict[str, TaskMeta]:
        """Per-task metadata; the first row of a task wins, later rows fill blanks."""
        meta: dict[str, TaskMeta] = {}
        for team in self.get_all_teams():
            if not team.task:
                continue
            current = meta.get(team.task)
            if current is None:
                meta[team.task] = TaskMeta(
                    task_id=team.task,
                    task_name=team.task_name or team.task,
                    contract=team.contract,
                    color=team.color,
                    description=team.description,
                    default_sla_threshold=team.default_sla_threshold,
                    notify_on_escalation=team.notify_on_escalation,
                    display_order=team.display_order,
                )
                continue
            if not current.color and team.color:
                current.color = team.color
            if not current.description and team.description:
                current.description = team.description
            if not current.default_sla_threshold and team.default_sla_threshold:
                current.default_sla_threshold = team.default_sla_threshold
            if not current.notify_on_escalation and team.notify_on_escalation:
                current.notify_on_escalation = True
        return meta

    def get_task_colors(self) -> dict[str, str]:
        colors = {"default": DEFAULT_TASK_COLOR}
        for task_id, meta in self.get_task_metadata().items():
            if meta.color:
                colors[task_id] = meta.color
        return colors

    def get_task_friendly_names(self) -> dict[str, str]:
        return {task_id: meta.task_name or task_id for task_id, meta in self.get_task_metadata().items()}

    # ------------------------------------------------------------------
    # Vacant positions
    # ------------------------------------------------------------------

    def _load_vacancy_rows(self) -> list[VacantPosition]:
        """Every vacancy row, open or closed."""
        columns, rows = self._read_sheet(self.vacant_sheet)
        vacancies: list[VacantPosition] = []
        for i, row in enumerate(rows, start=2):
            vacant_id = as_text(cell(row, columns, "Vacant ID"))
            if not vacant_id:
                continue
            vacancies.append(
                VacantPosition(
                    vacant_id=vacant_id,
                    contract=as_text(cell(row, columns, "Contract")),
                    task=as_text(cell(row, columns, "Task ID")),
                    team=as_text(cell(row, columns, "Team ID")),
                    title=as_text(cell(row, columns, "Title")) or "Vacant Position",
                    supervisor_upid=as_text(cell(row, columns, "Supervisor UPID")),
                    target_hire_date=as_date_text(cell(row, columns, "Target Hire Date")),
                    requirements=as_text(cell(row, columns, "Requirements")),
                    is_active=not is_explicit_false(cell(row, columns, "Is Active")),
                    row_index=i,
                )
            )
        return vacancies

    def _load_open_vacancies(self) -> list[VacantPosition]:
        cached = self.cache.get(CACHE_KEY_VACANTS)
        if cached is not None:
            return cached
        vacancies = [v for v in self._load_vacancy_rows() if v.is_active]
        self.cache.set(CACHE_KEY_VACANTS, vacancies, self.cache_ttl)
        return vacancies

    def get_all_vacant_positions(self) -> list[VacantPosition]:
        try:
            return self._load_open_vacancies()
        except StoreUnavailableError:
            logger.exception("Vacant Positions unavailable, returning no vacancies")
            return []

    def create_vacant_position(self, data: VacancyCreate, gate: PermissionGate) -> WriteResult:
        gate.require_permission(ACTION_ORG_EDIT)

        try:
            existing_ids = [v.vacant_id for v in self._load_vacancy_rows()]
            vacant_id = data.vacant_id or next_vacant_id(data.task, existing_ids)
            if vacant_id in existing_ids:
                return WriteResult(success=False, error=f"Vacant position already exists: {vacant_id}")

            columns, _ = self._read_sheet(self.vacant_sheet)
            row = build_row(
                columns,
                {
                    "Vacant ID": vacant_id,
                    "Contract": data.contract,
                    "Task ID": data.task,
                    "Team ID": data.team,
                    "Title": data.title or "Vacant Position",
                    "Supervisor UPID": data.supervisor_upid,
                    "Target Hire Date": data.target_hire_date,
                    "Requirements": data.requirements,
                    "Is Active": True,
                },
            )
            self.store.append_row(self.vacant_sheet, row)
        except Exception as e:
            logger.exception("Failed to create vacant position for task %s", data.task)
            return WriteResult(success=False, error=str(e))

        self._invalidate_cache()
        logger.info("Created vacant position %s", vacant_id)
        return WriteResult(success=True, id=vacant_id)

    def delete_vacant_position(self, vacant_id: str, gate: PermissionGate) -> WriteResult:
        gate.require_permission(ACTION_ORG_EDIT)

        try:
            vacancy = next((v for v in self._load_open_vacancies() if v.vacant_id == vacant_id), None)
            if vacancy is None or vacancy.row_index is None:
                raise NotFoundError(f"Vacant position not found: {vacant_id}")
            columns, _ = self._read_sheet(self.vacant_sheet)
            self.store.set_cell_value(self.vacant_sheet, vacancy.row_index, columns["Is Active"] + 1, False)
        except NotFoundError as e:
            return WriteResult(success=False, error=str(e))
        except Exception as e:
            logger.exception("Failed to delete vacant position %s", vacant_id)
            return WriteResult(success=False, error=str(e))

        self._invalidate_cache()
        logger.info("Closed vacant position %s", vacant_id)
        return WriteResult(success=True, id=vacant_id)

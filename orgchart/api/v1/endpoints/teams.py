from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from orgchart.api.v1.endpoints.org import raise_for_failure
from orgchart.core.dependencies import get_current_user, get_permission_gate, get_teams_service
from orgchart.core.permissions import PermissionGate
from orgchart.models.auth import UserInfo
from orgchart.models.org import WriteResult
from orgchart.models.teams import (
    BulkCreateResult,
    TaskSummary,
    TeamCreate,
    TeamMapping,
    TeamsSummary,
    TeamUpdate,
    VacancyCreate,
    VacantPosition,
)
from orgchart.services.teams_service import TeamsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams", tags=["teams"])
vacancies_router = APIRouter(prefix="/vacancies", tags=["vacancies"])


@router.get("", response_model=list[TeamMapping])
async def list_teams(
    task: str | None = None,
    teams: TeamsService = Depends(get_teams_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    if task:
        return teams.get_teams_by_task(task)
    return teams.get_all_teams()


@router.get("/tasks", response_model=list[TaskSummary])
async def list_tasks(
    teams: TeamsService = Depends(get_teams_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    return teams.get_all_tasks()


@router.get("/summary", response_model=TeamsSummary)
async def summary(
    teams: TeamsService = Depends(get_teams_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    return teams.get_module_summary()


@router.post("", response_model=WriteResult, status_code=status.HTTP_201_CREATED)
async def create_team(
    data: TeamCreate,
    teams: TeamsService = Depends(get_teams_service),  # noqa: B008
    gate: PermissionGate = Depends(get_permission_gate),  # noqa: B008
):
    return raise_for_failure(teams.create_team(data, gate))


@router.post("/bulk", response_model=BulkCreateResult)
async def bulk_create_teams(
    data: list[TeamCreate],
    teams: TeamsService = Depends(get_teams_service),  # noqa: B008
    gate: PermissionGate = Depends(get_permission_gate),  # noqa: B008
):
    return teams.bulk_create_teams(data, gate)


@router.get("/{team_id}", response_model=TeamMapping)
async def get_team(
    team_id: str,
    teams: TeamsService = Depends(get_teams_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    team = teams.get_team_by_id(team_id)
    if team is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Team '{team_id}' not found",
        )
    return team


@router.patch("/{team_id}", response_model=WriteResult)
async def update_team(
    team_id: str,
    updates: TeamUpdate,
    teams: TeamsService = Depends(get_teams_service),  # noqa: B008
    gate: PermissionGate = Depends(get_permission_gate),  # noqa: B008
):
    return raise_for_failure(teams.update_team(team_id, updates, gate))


@router.delete("/{team_id}", response_model=WriteResult)
async def delete_team(
    team_id: str,
    hard: bool = False,
    teams: TeamsService = Depends(get_teams_service),  # noqa: B008
    gate: PermissionGate = Depends(get_permission_gate),  # noqa: B008
):
    return raise_for_failure(teams.delete_team(team_id, gate, hard=hard))


@router.post("/{team_id}/reactivate", response_model=WriteResult)
async def reactivate_team(
    team_id: str,
    teams: TeamsService = Depends(get_teams_service),  # noqa: B008
    gate: PermissionGate = Depends(get_permission_gate),  # noqa: B008
):
    return raise_for_failure(teams.reactivate_team(team_id, gate))


@vacancies_router.get("", response_model=list[VacantPosition])
async def list_vacancies(
    teams: TeamsService = Depends(get_teams_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    return teams.get_all_vacant_positions()


@vacancies_router.post("", response_model=WriteResult, status_code=status.HTTP_201_CREATED)
async def create_vacancy(
    data: VacancyCreate,
    teams: TeamsService = Depends(get_teams_service),  # noqa: B008
    gate: PermissionGate = Depends(get_permission_gate),  # noqa: B008
):
    return raise_for_failure(teams.create_vacant_position(data, gate))


@vacancies_router.delete("/{vacant_id}", response_model=WriteResult)
async def delete_vacancy(
    vacant_id: str,
    teams: TeamsService = Depends(get_teams_service),  # noqa: B008
    gate: PermissionGate = Depends(get_permission_gate),  # noqa: B008
):
    return raise_for_failure(teams.delete_vacant_position(vacant_id, gate))

"""Task/team taxonomy and never-filled vacancy models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TeamMapping(BaseModel):
    """One Team Mappings row. Contracts without team subdivisions leave team_id empty."""

    contract: str = ""
    task: str = ""
    task_name: str = ""
    team_id: str = ""
    team_name: str = ""
    is_active: bool = True
    color: str = ""
    description: str = ""
    default_sla_threshold: str = ""
    notify_on_escalation: bool = False
    display_order: int = 0
    row_index: int | None = None


class TaskMeta(BaseModel):
    task_id: str
    task_name: str
    contract: str = ""
    color: str = ""
    description: str = ""
    default_sla_threshold: str = ""
    notify_on_escalation: bool = False
    display_order: int = 0


class TaskSummary(BaseModel):
    task: str
    task_name: str


class VacantPosition(BaseModel):
    vacant_id: str
    contract: str = ""
    task: str = ""
    team: str = ""
    title: str = "Vacant Position"
    supervisor_upid: str = ""
    target_hire_date: str = ""
    requirements: str = ""
    is_active: bool = True
    row_index: int | None = None


class TeamCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    contract: str = ""
    task: str = ""
    task_name: str = ""
    team_id: str = ""
    team_name: str = ""
    is_active: bool = True
    color: str = ""
    description: str = ""
    default_sla_threshold: str = ""
    notify_on_escalation: bool = False
    display_order: int = 0


class TeamUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    contract: str | None = None
    task: str | None = None
    task_name: str | None = None
    team_name: str | None = None
    is_active: bool | None = None
    color: str | None = None
    description: str | None = None
    default_sla_threshold: str | None = None
    notify_on_escalation: bool | None = None
    display_order: int | None = None


class VacancyCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    vacant_id: str = ""
    contract: str = ""
    task: str = ""
    team: str = ""
    title: str = "Vacant Position"
    supervisor_upid: str = ""
    target_hire_date: str = ""
    requirements: str = ""


class TeamsSummary(BaseModel):
    total_teams: int = 0
    active_teams: int = 0
    inactive_teams: int = 0
    total_tasks: int = 0


class BulkCreateError(BaseModel):
    index: int
    error: str


class BulkCreateResult(BaseModel):
    success: bool
    created: int = 0
    failed: int = 0
    errors: list[BulkCreateError] = []
    message: str = ""

"""Org chart models: roster records, unified tree nodes, write payloads."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

ROOT_ID = "root"
TASK_PREFIX = "task:"
TEAM_PREFIX = "team:"
VACANCY_PREFIX = "VAC-"

PERSON_NODE_TYPES = ("director", "deputy", "lead", "person", "vacant")
STRUCTURAL_NODE_TYPES = ("hidden", "task", "team")
NODE_TYPES = ("hidden", "director", "deputy", "task", "team", "lead", "person", "vacant")
NODE_TYPE_LABELS = {
    "hidden": "Hidden Root",
    "director": "Director",
    "deputy": "Deputy",
    "task": "Task",
    "team": "Team",
    "lead": "Team Lead",
    "person": "Person",
    "vacant": "Vacant",
}


def task_node_id(task_id: str) -> str:
    return TASK_PREFIX + task_id


def team_node_id(team_id: str) -> str:
    return TEAM_PREFIX + team_id


def is_structural_id(node_id: str) -> bool:
    return node_id == ROOT_ID or node_id.startswith((TASK_PREFIX, TEAM_PREFIX))


class PersonnelLifecycle(str, Enum):
    ACTIVE = "Active"
    PENDING = "Pending EOD"
    DEPARTED = "Departed"

    @classmethod
    def from_status(cls, status: str) -> PersonnelLifecycle:
        if status == cls.DEPARTED.value:
            return cls.DEPARTED
        if status.startswith("Pending"):
            return cls.PENDING
        return cls.ACTIVE


class Placement(str, Enum):
    INCUMBENT = "incumbent"
    VACANCY = "vacancy"
    EXCLUDED = "excluded"


# (lifecycle, active_in_org) -> how the row shows up in the tree
PLACEMENT_TABLE: dict[tuple[PersonnelLifecycle, bool], Placement] = {
    (PersonnelLifecycle.ACTIVE, True): Placement.INCUMBENT,
    (PersonnelLifecycle.ACTIVE, False): Placement.INCUMBENT,
    (PersonnelLifecycle.PENDING, True): Placement.INCUMBENT,
    (PersonnelLifecycle.PENDING, False): Placement.INCUMBENT,
    (PersonnelLifecycle.DEPARTED, True): Placement.VACANCY,
    (PersonnelLifecycle.DEPARTED, False): Placement.EXCLUDED,
}


class PersonnelRecord(BaseModel):
    """One Team List row after normalization."""

    employee_code: str = ""
    upid: str = ""
    cpc: str = ""
    hid: str = ""

    supervisor_email: str = ""
    supervisor_upid: str = ""

    company: str = ""
    contract: str = ""
    task: str = ""
    primary_workstream: str = ""
    secondary_workstream: str = ""

    first_name: str = ""
    last_name: str = ""
    name: str = ""
    email: str = ""
    primary_role: str = ""
    secondary_role: str = ""
    primary_role_start_date: str = ""
    profile_picture: str = ""
    eod: str = ""
    personnel_contract_status: str = ""
    lifecycle: PersonnelLifecycle = PersonnelLifecycle.ACTIVE
    departure_date: str = ""
    departure_meeting_date: str = ""
    contract_lcat: str = ""
    location: str = ""
    tenure: str = ""

    node_type: str = "person"
    portfolio_leadership: bool = False
    active_in_org: bool = True

    row_index: int | None = None


class UnifiedNode(BaseModel):
    """A single node of the org tree, whatever its kind."""

    model_config = ConfigDict(frozen=True)

    id: str
    parent_id: str | None
    type: str
    name: str = ""
    email: str = ""
    title: str = ""
    company: str = ""
    contract: str = ""
    task: str | None = None
    team: str | None = None
    active: bool = True
    structural: bool = False
    vacant_position: bool = False

    # people
    employee_code: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    upid: str | None = None
    cpc: str | None = None
    hid: str | None = None
    supervisor_upid: str | None = None
    supervisor_email: str | None = None
    primary_workstream: str | None = None
    secondary_workstream: str | None = None
    primary_role: str | None = None
    secondary_roles: str | None = None
    profile_picture: str | None = None
    eod: str | None = None
    personnel_contract_status: str | None = None
    primary_role_start_date: str | None = None
    departure_date: str | None = None
    departure_meeting_date: str | None = None
    contract_lcat: str | None = None
    location: str | None = None
    tenure: str | None = None
    portfolio_leadership: bool | None = None

    # tasks and teams
    color: str | None = None
    description: str | None = None
    display_order: int | None = None
    notify_on_escalation: bool | None = None
    default_sla_threshold: str | None = None

    # vacancies
    target_hire_date: str | None = None
    requirements: str | None = None


class WriteResult(BaseModel):
    success: bool
    id: str | None = None
    error: str | None = None
    message: str | None = None


class PersonCreate(BaseModel):
    """Payload for adding a person to the Team List.

    ``name``, ``title`` and ``reports_to`` are accepted as shorthands for
    first/last name, primary role and supervisor UPID.
    """

    model_config = ConfigDict(extra="ignore")

    employee_code: str = ""
    company: str = ""
    contract: str = ""
    task: str = ""
    primary_workstream: str = ""
    team: str = ""
    secondary_workstream: str = ""
    first_name: str = ""
    last_name: str = ""
    name: str = ""
    email: str = ""
    title: str = ""
    primary_role: str = ""
    secondary_role: str = ""
    primary_role_start_date: str = ""
    cpc: str = ""
    hid: str = ""
    upid: str = ""
    supervisor_email: str = ""
    supervisor_upid: str = ""
    reports_to: str = ""
    portfolio_leadership: bool = False
    profile_picture: str = ""
    eod: str = ""
    personnel_contract_status: str = "Active"
    departure_date: str = ""
    departure_meeting_date: str = ""
    contract_lcat: str = ""
    location: str = ""
    tenure: str = ""
    node_type: str = ""
    active_in_org: bool = True


class NodeTypeConfig(BaseModel):
    types: list[str]
    labels: dict[str, str]


class ManagementEmails(BaseModel):
    contract_manager_email: str = ""
    deputy_manager_email: str = ""
    task_lead_email: str = ""
    team_lead_email: str = ""


class OrgSummary(BaseModel):
    total: int = 0
    by_type: dict[str, int] = {}
    vacant_count: int = 0
    task_count: int = 0


class UserProfile(BaseModel):
    id: str
    name: str
    email: str
    title: str
    type: str
    company: str
    profile_picture: str | None = None
    upid: str | None = None
    tasks: list[str] = []
    teams: list[str] = []
    contracts: list[str] = []
    primary_task: str | None = None
    primary_team: str | None = None
    entries: list[UnifiedNode] = []

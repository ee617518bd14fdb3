"""Synthetic task, team and root nodes derived from Team Mappings + roster."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from orgchart.core.permissions import PermissionGate
from orgchart.models.org import ROOT_ID, PersonnelRecord, UnifiedNode, WriteResult, task_node_id, team_node_id
from orgchart.models.teams import TaskMeta, TeamMapping, VacantPosition

logger = logging.getLogger(__name__)


class MetadataProvider(Protocol):
    def get_all_teams(self) -> list[TeamMapping]: ...

    def get_task_metadata(self) -> dict[str, TaskMeta]: ...

    def get_all_vacant_positions(self) -> list[VacantPosition]: ...

    def get_task_colors(self) -> dict[str, str]: ...

    def get_task_friendly_names(self) -> dict[str, str]: ...

    def delete_vacant_position(self, vacant_id: str, gate: PermissionGate) -> WriteResult: ...


@dataclass
class StructureResult:
    root_node: UnifiedNode
    task_nodes: list[UnifiedNode] = field(default_factory=list)
    team_nodes: list[UnifiedNode] = field(default_factory=list)
    task_meta: dict[str, TaskMeta] = field(default_factory=dict)
    team_to_task: dict[str, str] = field(default_factory=dict)
    teams: list[TeamMapping] = field(default_factory=list)


def build_root_node() -> UnifiedNode:
    return UnifiedNode(id=ROOT_ID, parent_id=None, type="hidden", structural=True)


def contract_directors(personnel: list[PersonnelRecord]) -> dict[str, str]:
    """Contract -> director UPID. With several directors on a contract the last one wins."""
    directors: dict[str, str] = {}
    for person in personnel:
        if person.node_type == "director" and person.contract and person.upid:
            directors[person.contract] = person.upid
    return directors


def build_structure(
    personnel: list[PersonnelRecord],
    teams: list[TeamMapping],
    task_meta: dict[str, TaskMeta],
) -> StructureResult:
    # dicts keep first-seen order: mapped tasks first, then roster-only tasks
    task_ids: dict[str, None] = {}
    for team in teams:
        if team.task and team.is_active:
            task_ids[team.task] = None
    for person in personnel:
        if person.task:
            task_ids[person.task] = None

    directors = contract_directors(personnel)

    task_nodes: list[UnifiedNode] = []
    for task_id in task_ids:
        meta = task_meta.get(task_id)
        contract = meta.contract if meta else ""
        task_nodes.append(
            UnifiedNode(
                id=task_node_id(task_id),
                parent_id=directors.get(contract) or ROOT_ID,
                type="task",
                name=(meta.task_name if meta else "") or task_id,
                title=meta.description if meta else "",
                contract=contract,
                task=task_id,
                structural=True,
                color=meta.color if meta else "",
                description=meta.description if meta else "",
                display_order=meta.display_order if meta else 0,
                notify_on_escalation=meta.notify_on_escalation if meta else False,
                default_sla_threshold=meta.default_sla_threshold if meta else "",
            )
        )

    team_nodes: list[UnifiedNode] = []
    team_to_task: dict[str, str] = {}
    for team in teams:
        if not team.team_id or not team.is_active:
            continue
        if team.team_id in team_to_task:
            logger.warning("Duplicate active team id %s ignored", team.team_id)
            continue
        team_to_task[team.team_id] = team.task
        team_nodes.append(
            UnifiedNode(
                id=team_node_id(team.team_id),
                parent_id=task_node_id(team.task) if team.task else ROOT_ID,
                type="team",
                name=team.team_name or team.team_id,
                contract=team.contract,
                task=team.task or None,
                team=team.team_id,
                structural=True,
                color=team.color,
                description=team.description,
                display_order=team.display_order,
            )
        )

    return StructureResult(
        root_node=build_root_node(),
        task_nodes=task_nodes,
        team_nodes=team_nodes,
        task_meta=task_meta,
        team_to_task=team_to_task,
        teams=teams,
    )


class StructureDeriver:
    def __init__(self, provider: MetadataProvider) -> None:
        self.provider = provider

    def derive(self, personnel: list[PersonnelRecord]) -> StructureResult:
        return build_structure(
            personnel,
            self.provider.get_all_teams(),
            self.provider.get_task_metadata(),
        )

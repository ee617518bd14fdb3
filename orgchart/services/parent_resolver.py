"""Parent placement for roster people and never-filled vacancies.

Person cascade, first match wins:

1. director / deputy -> root
2. person with a task:
   a. workstream names an active team of the same task -> that team node
   b. supervisor is on the same task -> the supervisor
   c. otherwise -> the task node
3. no task, supervisor exists on any task -> the supervisor
4. otherwise -> root

A supervisor is only used if the supervisor's own placement does not itself
go through a supervisor, so every placement is at most one supervisor hop
away from a structural node and no chain can loop back on itself.
"""

from __future__ import annotations

from orgchart.models.org import ROOT_ID, PersonnelRecord, task_node_id, team_node_id
from orgchart.models.teams import TeamMapping, VacantPosition

TOP_LEVEL_TYPES = frozenset({"director", "deputy"})

# (task id, team name) -> team node id
TeamIndex = dict[tuple[str, str], str]
UpidIndex = dict[str, PersonnelRecord]


def build_upid_index(personnel: list[PersonnelRecord]) -> UpidIndex:
    index: UpidIndex = {}
    for person in personnel:
        if person.upid and person.upid not in index:
            index[person.upid] = person
    return index


def build_team_index(teams: list[TeamMapping]) -> TeamIndex:
    """Index active teams by (task, name). The first row for a team id defines it."""
    index: TeamIndex = {}
    seen: set[str] = set()
    for team in teams:
        if not team.team_id or not team.is_active or team.team_id in seen:
            continue
        seen.add(team.team_id)
        if team.team_name:
            index.setdefault((team.task, team.team_name), team_node_id(team.team_id))
    return index


def _team_match(person: PersonnelRecord, team_index: TeamIndex) -> str | None:
    if not person.task or not person.primary_workstream:
        return None
    return team_index.get((person.task, person.primary_workstream))


def _supervisor_step(
    person: PersonnelRecord,
    upid_index: UpidIndex,
    team_index: TeamIndex,
    task_node_ids: set[str],
) -> PersonnelRecord | None:
    """The supervisor the cascade would link this person to, ignoring anchoring."""
    if person.node_type in TOP_LEVEL_TYPES:
        return None

    supervisor = upid_index.get(person.supervisor_upid) if person.supervisor_upid else None
    if person.task:
        if _team_match(person, team_index):
            return None
        if supervisor is not None and supervisor.task == person.task:
            return supervisor
        if task_node_id(person.task) in task_node_ids:
            return None
    return supervisor


def resolve_person_parent(
    person: PersonnelRecord,
    upid_index: UpidIndex,
    team_index: TeamIndex,
    task_node_ids: set[str],
) -> str:
    if person.node_type in TOP_LEVEL_TYPES:
        return ROOT_ID

    team_id = _team_match(person, team_index)
    if team_id:
        return team_id

    supervisor = _supervisor_step(person, upid_index, team_index, task_node_ids)
    if supervisor is not None and _supervisor_step(supervisor, upid_index, team_index, task_node_ids) is None:
        return supervisor.upid

    if person.task and task_node_id(person.task) in task_node_ids:
        return task_node_id(person.task)

    return ROOT_ID


def resolve_vacancy_parent(
    vacancy: VacantPosition,
    upid_index: UpidIndex,
    team_node_ids: set[str],
    task_node_ids: set[str],
) -> str:
    if vacancy.supervisor_upid and vacancy.supervisor_upid in upid_index:
        return vacancy.supervisor_upid
    if vacancy.team and team_node_id(vacancy.team) in team_node_ids:
        return team_node_id(vacancy.team)
    if vacancy.task and task_node_id(vacancy.task) in task_node_ids:
        return task_node_id(vacancy.task)
    return ROOT_ID

from __future__ import annotations

from orgchart.models.org import ROOT_ID, PersonnelRecord
from orgchart.models.teams import TeamMapping, VacantPosition
from orgchart.services.parent_resolver import (
    build_team_index,
    build_upid_index,
    resolve_person_parent,
    resolve_vacancy_parent,
)

PM_TEAM = TeamMapping(contract="SQuAT", task="TASK-001", team_id="TEAM-001", team_name="Program Management Team")
TASK_IDS = {"task:TASK-001", "task:TASK-002", "task:TASK-003"}

DIRECTOR = PersonnelRecord(upid="100-001", contract="SQuAT", node_type="director", cpc="100")
SARAH = PersonnelRecord(
    upid="310-003",
    cpc="310",
    hid="003",
    task="TASK-001",
    primary_workstream="Program Management Team",
    supervisor_upid="100-001",
    node_type="lead",
)


def _resolve(person: PersonnelRecord, personnel: list[PersonnelRecord], teams: list[TeamMapping] | None = None) -> str:
    return resolve_person_parent(
        person,
        build_upid_index(personnel),
        build_team_index(teams or []),
        TASK_IDS,
    )


def test_workstream_matching_active_team_wins_over_supervisor():
    assert _resolve(SARAH, [DIRECTOR, SARAH], [PM_TEAM]) == "team:TEAM-001"


def test_without_team_falls_back_to_task_when_supervisor_on_other_task():
    assert _resolve(SARAH, [DIRECTOR, SARAH]) == "task:TASK-001"

    inactive = PM_TEAM.model_copy(update={"is_active": False})
    assert _resolve(SARAH, [DIRECTOR, SARAH], [inactive]) == "task:TASK-001"


def test_director_always_hangs_from_root():
    director = DIRECTOR.model_copy(update={"supervisor_upid": "310-003", "task": "TASK-001"})
    assert _resolve(director, [director, SARAH], [PM_TEAM]) == ROOT_ID


def test_deputy_hangs_from_root():
    deputy = PersonnelRecord(upid="200-002", node_type="deputy", supervisor_upid="100-001")
    assert _resolve(deputy, [DIRECTOR, deputy]) == ROOT_ID


def test_departed_placeholder_keeps_original_placement():
    departed = PersonnelRecord(
        upid="410-007",
        task="TASK-001",
        primary_workstream="Program Management Team",
        supervisor_upid="999-999",
        node_type="vacant",
    )
    assert _resolve(departed, [DIRECTOR, departed], [PM_TEAM]) == "team:TEAM-001"
    assert _resolve(departed, [DIRECTOR, departed]) == "task:TASK-001"


def test_same_task_supervisor_anchored_on_team_is_used():
    team_lead = PersonnelRecord(
        upid="310-010", task="TASK-002", primary_workstream="APM Team", supervisor_upid="100-001", node_type="lead"
    )
    member = PersonnelRecord(upid="420-011", task="TASK-002", primary_workstream="Other", supervisor_upid="310-010")
    apm = TeamMapping(task="TASK-002", team_id="TEAM-002", team_name="APM Team")

    assert _resolve(member, [DIRECTOR, team_lead, member], [apm]) == "310-010"


def test_supervisor_chain_is_cut_after_one_hop():
    lead = PersonnelRecord(upid="310-020", task="TASK-002", supervisor_upid="100-001", node_type="lead")
    senior = PersonnelRecord(upid="420-021", task="TASK-002", supervisor_upid="310-020")
    junior = PersonnelRecord(upid="420-022", task="TASK-002", supervisor_upid="420-021")
    personnel = [DIRECTOR, lead, senior, junior]

    # lead's supervisor is on another task, so lead anchors on the task node
    assert _resolve(lead, personnel) == "task:TASK-002"
    assert _resolve(senior, personnel) == "310-020"
    assert _resolve(junior, personnel) == "task:TASK-002"


def test_mutual_supervisors_do_not_form_a_cycle():
    a = PersonnelRecord(upid="410-001", task="TASK-003", supervisor_upid="410-002")
    b = PersonnelRecord(upid="410-002", task="TASK-003", supervisor_upid="410-001")
    personnel = [a, b]

    assert _resolve(a, personnel) == "task:TASK-003"
    assert _resolve(b, personnel) == "task:TASK-003"


def test_no_task_uses_supervisor_on_any_task():
    floater = PersonnelRecord(upid="410-050", supervisor_upid="100-001")
    assert _resolve(floater, [DIRECTOR, floater]) == "100-001"


def test_no_task_and_unknown_supervisor_goes_to_root():
    floater = PersonnelRecord(upid="410-050", supervisor_upid="999-999")
    assert _resolve(floater, [floater]) == ROOT_ID


def test_task_without_node_goes_to_root():
    stray = PersonnelRecord(upid="410-060", task="TASK-404")
    assert _resolve(stray, [stray]) == ROOT_ID


def test_team_match_requires_same_task():
    wrong_task = SARAH.model_copy(update={"task": "TASK-002", "supervisor_upid": ""})
    assert _resolve(wrong_task, [wrong_task], [PM_TEAM]) == "task:TASK-002"


def test_build_team_index_first_row_per_team_wins():
    index = build_team_index(
        [
            PM_TEAM,
            TeamMapping(task="TASK-009", team_id="TEAM-001", team_name="Program Management Team"),
            TeamMapping(task="TASK-002", team_id="TEAM-002", team_name=""),
        ]
    )
    assert index == {("TASK-001", "Program Management Team"): "team:TEAM-001"}


def test_build_upid_index_first_record_wins():
    first = PersonnelRecord(upid="410-001", name="First")
    second = PersonnelRecord(upid="410-001", name="Second")
    assert build_upid_index([first, second])["410-001"].name == "First"


def test_vacancy_with_known_supervisor():
    upids = build_upid_index([DIRECTOR, PersonnelRecord(upid="330-012", task="TASK-003")])
    vacancy = VacantPosition(vacant_id="VAC-TASK003-1", task="TASK-003", supervisor_upid="330-012")

    assert resolve_vacancy_parent(vacancy, upids, set(), TASK_IDS) == "330-012"


def test_vacancy_fallbacks_require_existing_nodes():
    upids = build_upid_index([DIRECTOR])
    team_ids = {"team:TEAM-004"}

    on_team = VacantPosition(vacant_id="VAC-1", task="TASK-004", team="TEAM-004", supervisor_upid="999-999")
    assert resolve_vacancy_parent(on_team, upids, team_ids, TASK_IDS) == "team:TEAM-004"

    missing_team = VacantPosition(vacant_id="VAC-2", task="TASK-003", team="TEAM-404")
    assert resolve_vacancy_parent(missing_team, upids, team_ids, TASK_IDS) == "task:TASK-003"

    nothing = VacantPosition(vacant_id="VAC-3", task="TASK-404", team="TEAM-404")
    assert resolve_vacancy_parent(nothing, upids, team_ids, TASK_IDS) == ROOT_ID

"""Demo organisation used by setup: two contracts, five tasks with teams, two flat workstreams."""

from __future__ import annotations

from typing import Any

from orgchart.services import personnel_reader as cols

# Contract, Task ID, Task Name, Team ID, Team Name, Is Active, Color, Description,
# Default SLA Threshold, Notify On Escalation, Display Order
TEAM_MAPPINGS = [
    ["SQuAT", "TASK-001", "Task 1 - Program Management", "TEAM-001", "Program Management Team", True, "#9b59b6", "Core program management", 85, True, 1],
    ["SQuAT", "TASK-002", "Task 2 - Acquisition Support", "TEAM-002", "APM Team", True, "#3498db", "Acquisition and procurement management", 90, True, 2],
    ["SQuAT", "TASK-003", "Task 3 - Portfolio Management", "TEAM-003", "PPM Team", True, "#1abc9c", "Portfolio and project management", 85, True, 3],
    ["SQuAT", "TASK-004", "Task 4 - Technical Evaluation", "TEAM-004", "Technical Evaluation Team", True, "#e74c3c", "Technical evaluation and QA", 95, True, 4],
    ["SQuAT", "TASK-005", "Task 5 - Training Support", "TEAM-005", "Training Support Team", True, "#f39c12", "Training and documentation", 80, False, 5],
    ["Forward", "TASK-011", "Workstream 1 - Strategic Planning", "", "", True, "#2ecc71", "Strategic planning workstream", 85, True, 1],
    ["Forward", "TASK-012", "Workstream 2 - Implementation", "", "", True, "#e67e22", "Implementation workstream", 90, True, 2],
]

# Vacant ID, Contract, Task ID, Team ID, Title, Supervisor UPID, Target Hire Date, Requirements, Is Active
VACANT_POSITIONS = [
    ["VAC-TASK001-1", "SQuAT", "TASK-001", "TEAM-001", "Jr. Program Manager", "310-003", "2025-04-01", "2+ years PM experience", True],
    ["VAC-TASK003-1", "SQuAT", "TASK-003", "TEAM-003", "Developer", "330-012", "2025-05-01", "3+ years development experience", True],
    ["VAC-TASK004-1", "SQuAT", "TASK-004", "TEAM-004", "Team Lead", "", "2025-03-15", "QA Lead with 5+ years experience", True],
]

_PEOPLE: list[dict[str, Any]] = [
    # SQuAT leadership, no task
    {"code": "EMP-001", "contract": "SQuAT", "first": "John", "last": "Richardson", "email": "j.richardson@hive.com",
     "role": "Executive Leadership", "upid": "100-001", "leadership": True},
    {"code": "EMP-002", "contract": "SQuAT", "first": "Maria", "last": "Santos", "email": "m.santos@hive.com",
     "role": "Executive Leadership", "secondary": "Quality Oversight", "upid": "200-002",
     "supervisor": "100-001", "supervisor_email": "j.richardson@hive.com", "leadership": True},
    # TASK-001
    {"code": "EMP-003", "contract": "SQuAT", "task": "TASK-001", "team": "Program Management Team",
     "first": "Sarah", "last": "Johnson", "email": "s.johnson@hive.com", "role": "Program Manager",
     "secondary": "Scheduling", "upid": "310-003", "supervisor": "100-001", "supervisor_email": "j.richardson@hive.com"},
    {"code": "EMP-004", "contract": "SQuAT", "task": "TASK-001", "team": "Program Management Team",
     "first": "Michael", "last": "Chen", "email": "m.chen@hive.com", "role": "Deputy PM",
     "upid": "410-004", "supervisor": "310-003", "supervisor_email": "s.johnson@hive.com"},
    {"code": "EMP-005", "contract": "SQuAT", "task": "TASK-001", "team": "Program Management Team",
     "first": "Alex", "last": "Rivera", "email": "a.rivera@hive.com", "role": "Junior PM",
     "secondary": "Documentation", "upid": "410-005", "supervisor": "410-004", "supervisor_email": "m.chen@hive.com",
     "eod": "2025-02-15", "status": "Pending EOD"},
    {"code": "EMP-006", "contract": "SQuAT", "task": "TASK-001", "team": "Program Management Team",
     "first": "Emily", "last": "Davis", "email": "e.davis@hive.com", "role": "Program Analyst",
     "secondary": "Metrics Reporting", "upid": "410-006", "supervisor": "310-003", "supervisor_email": "s.johnson@hive.com"},
    {"code": "EMP-007", "contract": "SQuAT", "task": "TASK-001", "team": "Program Management Team",
     "first": "Jason", "last": "Park", "email": "j.park@hive.com", "role": "Program Analyst",
     "upid": "410-007", "supervisor": "410-006", "supervisor_email": "e.davis@hive.com", "status": "Departed"},
    # TASK-002
    {"code": "EMP-008", "contract": "SQuAT", "task": "TASK-002", "team": "APM Team",
     "first": "Robert", "last": "Wilson", "email": "r.wilson@hive.com", "role": "Acquisition Lead",
     "secondary": "Contract Writing", "upid": "320-008", "supervisor": "100-001", "supervisor_email": "j.richardson@hive.com"},
    {"code": "EMP-009", "contract": "SQuAT", "task": "TASK-002", "team": "APM Team",
     "first": "Jennifer", "last": "Martinez", "email": "j.martinez@hive.com", "role": "Acquisition Specialist",
     "upid": "420-009", "supervisor": "320-008", "supervisor_email": "r.wilson@hive.com"},
    {"code": "EMP-010", "contract": "SQuAT", "task": "TASK-002", "team": "APM Team",
     "first": "Tyler", "last": "Morris", "email": "t.morris@hive.com", "role": "Acquisition Specialist",
     "upid": "420-010", "supervisor": "420-009", "supervisor_email": "j.martinez@hive.com",
     "eod": "2025-03-01", "status": "Pending EOD"},
    {"code": "EMP-011", "contract": "SQuAT", "task": "TASK-002", "team": "APM Team",
     "first": "Kevin", "last": "Brooks", "email": "k.brooks@hive.com", "role": "Contract Specialist",
     "secondary": "Legal Review", "upid": "420-011", "supervisor": "320-008", "supervisor_email": "r.wilson@hive.com"},
    # TASK-003
    {"code": "EMP-012", "contract": "SQuAT", "task": "TASK-003", "team": "PPM Team",
     "first": "James", "last": "Anderson", "email": "j.anderson@hive.com", "role": "Technical Lead",
     "secondary": "Architecture", "upid": "330-012", "supervisor": "100-001", "supervisor_email": "j.richardson@hive.com"},
    {"code": "EMP-013", "contract": "SQuAT", "task": "TASK-003", "team": "PPM Team",
     "first": "Patricia", "last": "White", "email": "p.white@hive.com", "role": "Developer",
     "secondary": "Code Review", "upid": "430-013", "supervisor": "330-012", "supervisor_email": "j.anderson@hive.com"},
    # TASK-004
    {"code": "EMP-014", "contract": "SQuAT", "task": "TASK-004", "team": "Technical Evaluation Team",
     "first": "William", "last": "Thompson", "email": "w.thompson@hive.com", "role": "QA Analyst",
     "secondary": "Test Automation", "upid": "440-014", "supervisor": "100-001", "supervisor_email": "j.richardson@hive.com"},
    {"code": "EMP-015", "contract": "SQuAT", "task": "TASK-004", "team": "Technical Evaluation Team",
     "first": "Rachel", "last": "Adams", "email": "r.adams@hive.com", "role": "QA Analyst",
     "upid": "440-015", "supervisor": "440-014", "supervisor_email": "w.thompson@hive.com"},
    # Forward leadership
    {"code": "EMP-016", "contract": "Forward", "first": "David", "last": "Kim", "email": "d.kim@hive.com",
     "role": "Program Management", "upid": "100-016", "leadership": True},
    # TASK-011
    {"code": "EMP-017", "contract": "Forward", "task": "TASK-011", "team": "Strategic Planning",
     "first": "Lisa", "last": "Chen", "email": "l.chen@hive.com", "role": "Strategic Planning",
     "secondary": "Roadmap Development", "upid": "310-017", "supervisor": "100-016", "supervisor_email": "d.kim@hive.com"},
    {"code": "EMP-018", "contract": "Forward", "task": "TASK-011", "team": "Strategic Planning",
     "first": "Marcus", "last": "Johnson", "email": "m.johnson@hive.com", "role": "Planning Analyst",
     "upid": "410-018", "supervisor": "310-017", "supervisor_email": "l.chen@hive.com"},
    {"code": "EMP-019", "contract": "Forward", "task": "TASK-011", "team": "Strategic Planning",
     "first": "Amanda", "last": "Foster", "email": "a.foster@hive.com", "role": "Planning Analyst",
     "upid": "410-019", "supervisor": "310-017", "supervisor_email": "l.chen@hive.com",
     "eod": "2025-01-20", "status": "Pending EOD"},
    # TASK-012
    {"code": "EMP-020", "contract": "Forward", "task": "TASK-012", "team": "Implementation",
     "first": "Brian", "last": "Taylor", "email": "b.taylor@hive.com", "role": "Implementation",
     "secondary": "Change Management", "upid": "320-020", "supervisor": "100-016", "supervisor_email": "d.kim@hive.com"},
    {"code": "EMP-021", "contract": "Forward", "task": "TASK-012", "team": "Implementation",
     "first": "Nicole", "last": "Brown", "email": "n.brown@hive.com", "role": "Implementation Specialist",
     "upid": "420-021", "supervisor": "320-020", "supervisor_email": "b.taylor@hive.com", "status": "Departed"},
    {"code": "EMP-022", "contract": "Forward", "task": "TASK-012", "team": "Implementation",
     "first": "Carlos", "last": "Rodriguez", "email": "c.rodriguez@hive.com", "role": "Implementation Specialist",
     "secondary": "Training", "upid": "420-022", "supervisor": "320-020", "supervisor_email": "b.taylor@hive.com"},
]


def personnel_records() -> list[dict[str, Any]]:
    """Sample roster rows keyed by Team List header."""
    records = []
    for p in _PEOPLE:
        cpc, hid = p["upid"].split("-")
        values = {
            cols.COL_EMPLOYEE_CODE: p["code"],
            cols.COL_COMPANY: "Hive",
            cols.COL_CONTRACT: p["contract"],
            cols.COL_TASK: p.get("task", ""),
            cols.COL_PRIMARY_WORKSTREAM: p.get("team", ""),
            cols.COL_FIRST_NAME: p["first"],
            cols.COL_LAST_NAME: p["last"],
            cols.COL_EMAIL: p["email"],
            cols.COL_PRIMARY_ROLE: p["role"],
            cols.COL_SECONDARY_ROLE: p.get("secondary", ""),
            cols.COL_CPC: cpc,
            cols.COL_HID: hid,
            cols.COL_UPID: p["upid"],
            cols.COL_SUPERVISOR_EMAIL: p.get("supervisor_email", ""),
            cols.COL_SUPERVISOR_UPID: p.get("supervisor", ""),
            cols.COL_PORTFOLIO_LEADERSHIP: p.get("leadership", False),
            cols.COL_EOD: p.get("eod", ""),
            cols.COL_STATUS: p.get("status", "Active"),
            cols.COL_ACTIVE_IN_ORG: True,
        }
        records.append(values)
    return records

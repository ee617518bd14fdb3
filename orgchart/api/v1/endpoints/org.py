from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from orgchart.core.dependencies import (
    get_current_user,
    get_org_service,
    get_permission_gate,
    get_setup_service,
    require_role,
)
from orgchart.core.permissions import ADMIN_ROLE, PermissionGate
from orgchart.models.auth import UserInfo
from orgchart.models.org import (
    ManagementEmails,
    NodeTypeConfig,
    OrgSummary,
    PersonCreate,
    UnifiedNode,
    UserProfile,
    WriteResult,
)
from orgchart.services.org_service import OrgService
from orgchart.services.setup_service import OrgSetupService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/org", tags=["org"])


def raise_for_failure(result: WriteResult) -> WriteResult:
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.error or "Write failed",
        )
    return result


@router.get("/nodes", response_model=list[UnifiedNode])
async def list_nodes(
    org: OrgService = Depends(get_org_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    return org.get_all_nodes()


@router.get("/nodes/{node_id}", response_model=UnifiedNode)
async def get_node(
    node_id: str,
    org: OrgService = Depends(get_org_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    node = org.get_node_by_id(node_id)
    if node is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Node '{node_id}' not found",
        )
    return node


@router.get("/people", response_model=list[UnifiedNode])
async def find_people(
    email: str,
    org: OrgService = Depends(get_org_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    return org.get_nodes_by_email(email)


@router.get("/profile", response_model=UserProfile)
async def get_profile(
    email: str,
    org: OrgService = Depends(get_org_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    profile = org.get_user_profile(email)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No org entry for '{email}'",
        )
    return profile


@router.get("/tasks", response_model=list[str])
async def list_tasks(
    org: OrgService = Depends(get_org_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    return org.get_tasks()


@router.get("/node-types", response_model=NodeTypeConfig)
async def node_types(
    org: OrgService = Depends(get_org_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    return org.get_node_type_config()


@router.get("/task-colors", response_model=dict[str, str])
async def task_colors(
    org: OrgService = Depends(get_org_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    return org.get_task_colors()


@router.get("/task-names", response_model=dict[str, str])
async def task_names(
    org: OrgService = Depends(get_org_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    return org.get_task_friendly_names()


@router.get("/management-emails", response_model=dict[str, ManagementEmails])
async def management_emails(
    org: OrgService = Depends(get_org_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    return org.get_management_emails()


@router.get("/summary", response_model=OrgSummary)
async def summary(
    org: OrgService = Depends(get_org_service),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    return org.get_module_summary()


@router.post("/people", response_model=WriteResult, status_code=status.HTTP_201_CREATED)
async def add_person(
    person: PersonCreate,
    org: OrgService = Depends(get_org_service),  # noqa: B008
    gate: PermissionGate = Depends(get_permission_gate),  # noqa: B008
):
    return raise_for_failure(org.add_person(person, gate))


@router.patch("/people/{upid}", response_model=WriteResult)
async def update_person(
    upid: str,
    updates: dict[str, Any] = Body(...),  # noqa: B008
    org: OrgService = Depends(get_org_service),  # noqa: B008
    gate: PermissionGate = Depends(get_permission_gate),  # noqa: B008
):
    return raise_for_failure(org.update_person(upid, updates, gate))


@router.delete("/people/{node_id}", response_model=WriteResult)
async def delete_person(
    node_id: str,
    org: OrgService = Depends(get_org_service),  # noqa: B008
    gate: PermissionGate = Depends(get_permission_gate),  # noqa: B008
):
    return raise_for_failure(org.delete_person(node_id, gate))


@router.post("/setup")
async def run_setup(
    include_sample_data: bool = False,
    setup: OrgSetupService = Depends(get_setup_service),  # noqa: B008
    user: UserInfo = Depends(require_role(ADMIN_ROLE)),  # noqa: B008
):
    logger.info("Org setup requested by %s (sample data: %s)", user.email, include_sample_data)
    result = setup.setup(include_sample_data=include_sample_data)
    if not result["success"]:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=result.get("error", "Setup failed"),
        )
    return result

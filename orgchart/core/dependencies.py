from __future__ import annotations

import logging

from fastapi import Depends, Header, HTTPException, status

from orgchart.core.auth import TokenValidator, user_from_claims
from orgchart.core.config import settings
from orgchart.core.permissions import PermissionGate, RolePermissionGate
from orgchart.models.auth import UserInfo
from orgchart.services.org_service import OrgService
from orgchart.services.registry import services
from orgchart.services.setup_service import OrgSetupService
from orgchart.services.teams_service import TeamsService

logger = logging.getLogger(__name__)


async def get_current_user(authorization: str | None = Header(None)) -> UserInfo:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization.split(" ", 1)[1]
    validator = TokenValidator(settings.AZURE_AD_TENANT_ID, settings.AZURE_AD_CLIENT_ID)

    try:
        claims = validator.validate(token)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Token validation error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    return user_from_claims(claims)


def require_role(*roles: str):
    async def _check_role(user: UserInfo = Depends(get_current_user)) -> UserInfo:
        if not any(r in user.roles for r in roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {', '.join(roles)}",
            )
        return user

    return _check_role


async def get_permission_gate(user: UserInfo = Depends(get_current_user)) -> PermissionGate:
    return RolePermissionGate(user, settings.PERMISSION_ROLES)


def _unavailable(name: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"{name} not initialized",
    )


async def get_org_service() -> OrgService:
    if services.org is None:
        raise _unavailable("Org service")
    return services.org


async def get_teams_service() -> TeamsService:
    if services.teams is None:
        raise _unavailable("Teams service")
    return services.teams


async def get_setup_service() -> OrgSetupService:
    if services.setup is None:
        raise _unavailable("Setup service")
    return services.setup

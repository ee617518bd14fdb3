from __future__ import annotations

import logging
from typing import Protocol

from orgchart.core.errors import PermissionDeniedError
from orgchart.models.auth import UserInfo

logger = logging.getLogger(__name__)

ACTION_ORG_EDIT = "org.edit"
ACTION_ORG_ADMIN = "org.admin"

ADMIN_ROLE = "admin"


class PermissionGate(Protocol):
    def require_permission(self, action: str) -> None: ...


class RolePermissionGate:
    """Grants an action when the caller holds one of the roles mapped to it."""

    def __init__(self, user: UserInfo, role_map: dict[str, list[str]]) -> None:
        self.user = user
        self.role_map = role_map

    def allows(self, action: str) -> bool:
        if ADMIN_ROLE in self.user.roles:
            return True
        allowed = self.role_map.get(action, [])
        return any(r in allowed for r in self.user.roles)

    def require_permission(self, action: str) -> None:
        if self.allows(action):
            return
        logger.warning("Denied %s for user=%s roles=%s", action, self.user.email, self.user.roles)
        required = ", ".join(self.role_map.get(action, [])) or ADMIN_ROLE
        raise PermissionDeniedError(action, f"Insufficient permissions for {action}. Required: {required}")

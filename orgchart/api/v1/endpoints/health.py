from __future__ import annotations

from fastapi import APIRouter, Depends

from orgchart.core.config import settings
from orgchart.core.dependencies import get_current_user
from orgchart.models.auth import UserInfo
from orgchart.services.registry import services

router = APIRouter(prefix="/health", tags=["health"])


def _store_status(store) -> str:
    if store is None or not store.is_configured:
        return "not_configured"
    return "ok" if store.check_connection() else "error"


@router.get("")
async def health_check():
    stores = {
        "team_list_workbook": _store_status(services.team_list_store),
        "org_workbook": _store_status(services.org_store),
    }
    all_ok = all(v in ("ok", "not_configured") for v in stores.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": stores,
    }


@router.get("/protected")
async def health_protected(user: UserInfo = Depends(get_current_user)):
    return {"status": "ok", "user": user.model_dump()}


@router.get("/ready")
async def readiness_probe():
    return {"ready": services.initialized}

from fastapi import APIRouter

from orgchart.api.v1.endpoints import health, org, teams

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router)
api_router.include_router(org.router)
api_router.include_router(teams.router)
api_router.include_router(teams.vacancies_router)

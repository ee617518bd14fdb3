from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from orgchart.api.v1.router import api_router
from orgchart.core.config import settings
from orgchart.core.errors import PermissionDeniedError
from orgchart.services.registry import services

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    try:
        services.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize org services, continuing without workbooks")
    yield
    services.close()


app = FastAPI(
    title="Org Chart API",
    description="Org chart tree over the Team List roster and Team Mappings",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.exception_handler(PermissionDeniedError)
async def permission_denied_handler(request: Request, exc: PermissionDeniedError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})


@app.get("/")
async def root():
    return {"message": "Org Chart API"}

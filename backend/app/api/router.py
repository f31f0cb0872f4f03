"""Master API router. Mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from app.api import flows, health, sessions

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(flows.router)
api_router.include_router(sessions.router)

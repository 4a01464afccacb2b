"""System-level routes for diagnostics."""
from __future__ import annotations

from fastapi import APIRouter

from ..config import get_settings

router = APIRouter(tags=["system"])


@router.get("/api")
def api_info() -> dict[str, str]:
    settings = get_settings()
    return {"service": settings.app_name, "version": settings.api_version}


@router.get("/health")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}

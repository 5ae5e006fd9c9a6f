"""Liveness endpoint: ``GET /health`` (no upstream calls)."""

from __future__ import annotations

from fastapi import APIRouter, Request

from skinface import __version__
from skinface.server.models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    sync = getattr(request.app.state, "catalog_sync", None)
    return HealthResponse(
        status="ok",
        version=__version__,
        catalog_sync_running=bool(sync and sync.running),
    )

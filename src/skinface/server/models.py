"""Pydantic response models for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    version: str
    catalog_sync_running: bool = False


class ErrorResponse(BaseModel):
    error: str
    detail: str

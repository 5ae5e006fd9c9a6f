"""SQLModel table definitions for the signed-texture catalog."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, func
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SignedTexture(SQLModel, table=True):
    """A managed player's texture as signed by the texture-signing service.

    ``properties`` mirrors the game-profile property list::

        [{"name": "textures", "value": "<base64>", "signature": "<base64>"}]
    """

    __tablename__ = "signed_textures"

    id: str = Field(primary_key=True)  # 32-hex UUID, no dashes
    name: str
    url: str
    properties: list = Field(default_factory=list, sa_type=JSON)
    created_at: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True), sa_column_kwargs={"server_default": func.now()})
    updated_at: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True), sa_column_kwargs={"server_default": func.now(), "onupdate": func.now()})

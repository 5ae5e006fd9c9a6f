"""CRUD operations for SignedTexture catalog records.

Every function takes ``session: AsyncSession`` as its first parameter.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from skinface.db.models import SignedTexture
from skinface.db.retry import db_retry


async def get_signed_texture(session: AsyncSession, player_id: str) -> SignedTexture | None:
    """Look up a catalog record by undashed UUID."""
    stmt = select(SignedTexture).where(SignedTexture.id == player_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


@db_retry()
async def upsert_signed_texture(
    session: AsyncSession,
    player_id: str,
    *,
    name: str,
    url: str,
    properties: list[dict[str, Any]],
) -> SignedTexture:
    """Insert or replace the catalog record for *player_id*."""
    record = await get_signed_texture(session, player_id)
    if record is None:
        record = SignedTexture(id=player_id, name=name, url=url, properties=properties)
        session.add(record)
    else:
        record.name = name
        record.url = url
        record.properties = properties
        record.updated_at = datetime.now(timezone.utc)
    try:
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        raise
    await session.refresh(record)
    return record


def to_document(record: SignedTexture) -> dict[str, Any]:
    """Serialize a record into the game-profile style texture document."""
    return {
        "id": record.id,
        "name": record.name,
        "url": record.url,
        "properties": list(record.properties or []),
    }

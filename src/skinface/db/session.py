"""AsyncSession factory and table bootstrap for the catalog."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

import skinface.db.models  # noqa: F401 -- registers tables with SQLModel.metadata

logger = logging.getLogger(__name__)


def async_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a new ``async_sessionmaker`` bound to *engine*.

    Sessions use ``expire_on_commit=False`` so rows stay readable after
    commit.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Create all catalog tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Catalog tables ensured")

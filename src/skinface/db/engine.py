"""Async engine factory for the signed-texture catalog.

Creates SQLAlchemy ``AsyncEngine`` instances from a database URL that may
point to either **PostgreSQL** (via ``asyncpg``) or **SQLite** (via
``aiosqlite``).  Backend-specific connection defaults are applied
automatically.

Usage::

    from skinface.db.engine import create_async_engine_from_url

    engine = create_async_engine_from_url("sqlite+aiosqlite:///skinface.db")
    ...
    await engine.dispose()
"""

from __future__ import annotations

import logging
import os
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine as _create_async_engine,
)

logger = logging.getLogger(__name__)


def create_async_engine_from_url(url: str, **kwargs: Any) -> AsyncEngine:
    """Create an ``AsyncEngine`` from a database URL.

    - **PostgreSQL** (``postgresql://`` or ``postgres://``): asyncpg with
      connection-pool tuning from ``DB_POOL_*`` env vars.
    - **SQLite** (``sqlite://``): aiosqlite with ``check_same_thread=False``.

    Extra *kwargs* are forwarded to ``create_async_engine`` and override
    the defaults.

    Raises
    ------
    ValueError
        If the URL scheme is not supported.
    """
    merged: dict[str, Any] = {"echo": False}

    if url.startswith("postgresql") or url.startswith("postgres://"):
        # Hosted Postgres providers hand out postgres:// which asyncpg rejects
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif "+" not in url.split("://")[0]:
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)

        merged.update(
            pool_size=int(os.environ.get("DB_POOL_SIZE", "5")),
            max_overflow=int(os.environ.get("DB_MAX_OVERFLOW", "10")),
            pool_timeout=int(os.environ.get("DB_POOL_TIMEOUT", "30")),
            pool_recycle=int(os.environ.get("DB_POOL_RECYCLE", "1800")),
            pool_pre_ping=True,
        )
        backend = "postgresql (asyncpg)"

    elif url.startswith("sqlite"):
        if "+aiosqlite" not in url:
            url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)

        merged.setdefault("connect_args", {})
        merged["connect_args"]["check_same_thread"] = False
        # Concurrent writers wait instead of failing immediately
        merged["connect_args"].setdefault("timeout", 30)
        backend = "sqlite (aiosqlite)"

    else:
        raise ValueError(f"Unsupported database URL scheme: {url}")

    merged.update(kwargs)

    logger.info("Creating async engine for %s backend", backend)
    return _create_async_engine(url, **merged)

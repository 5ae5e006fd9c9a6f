"""Shared fixtures for skinface server tests.

The app is built around an injected :class:`AppContext` whose HTTP client
talks to the fake upstream, whose cache is in-process and whose catalog
lives in a temporary SQLite file.
"""

from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

from fakes import DRASL, MINESKIN
from skinface.cache.backends import MemoryCacheBackend
from skinface.db.crud.signed_textures import upsert_signed_texture
from skinface.db.engine import create_async_engine_from_url
from skinface.db.session import async_session_factory, create_tables
from skinface.server.app import create_app
from skinface.server.config import Settings
from skinface.server.context import AppContext, build_context, close_context


def _engine(url: str):
    # Connections are opened on whichever event loop runs the test
    return create_async_engine_from_url(url, poolclass=NullPool)


@pytest.fixture()
def settings(monkeypatch, tmp_path) -> Settings:
    monkeypatch.setenv("SKINFACE_DRASL_URL", DRASL)
    monkeypatch.setenv("SKINFACE_DRASL_TOKEN", "s3cret")
    monkeypatch.setenv("SKINFACE_MINESKIN_URL", MINESKIN)
    monkeypatch.setenv("SKINFACE_MINESKIN_TOKEN", "mineskin-token")
    monkeypatch.setenv("SKINFACE_CACHE_URL", "memory://")
    monkeypatch.setenv("SKINFACE_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    monkeypatch.setenv("SKINFACE_CATALOG_SYNC_ENABLED", "false")
    monkeypatch.setenv("SKINFACE_UPSTREAM_TIMEOUT", "2")
    return Settings()


def _build(settings: Settings, upstream) -> AppContext:
    return build_context(
        settings,
        http=upstream.client(),
        cache_backend=MemoryCacheBackend(),
        engine=_engine(settings.database_url),
    )


@pytest.fixture()
def context(settings, upstream):
    """An AppContext wired to the fake upstream with an empty catalog.

    For synchronous tests driving the app through TestClient.
    """
    ctx = _build(settings, upstream)
    asyncio.run(create_tables(ctx.engine))
    yield ctx
    asyncio.run(close_context(ctx))


@pytest.fixture()
async def acontext(settings, upstream):
    """Same as ``context``, for async tests."""
    ctx = _build(settings, upstream)
    await create_tables(ctx.engine)
    yield ctx
    await close_context(ctx)


@pytest.fixture()
def app(context):
    return create_app(context)


@pytest.fixture()
def client(app):
    """Return a TestClient for the app with lifespan triggered."""
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def seed_catalog(settings, context):
    """Return a function that stores a signed texture in the catalog."""

    def seed(player_id: str, **fields) -> None:
        async def run() -> None:
            engine = _engine(settings.database_url)
            try:
                async with async_session_factory(engine)() as session:
                    await upsert_signed_texture(session, player_id, **fields)
            finally:
                await engine.dispose()

        asyncio.run(run())

    return seed

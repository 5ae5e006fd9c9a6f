"""Explicit dependency context shared by every request.

Everything long-lived -- the pooled HTTP client, the cache, the catalog
session factory and the provider strategies -- is built once at startup
and bundled into an :class:`AppContext`.  Routes reach it through the
:func:`get_context` dependency; tests construct their own with fakes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from skinface.cache.backends import CacheBackend, create_cache_backend
from skinface.cache.layer import AvatarCache
from skinface.db.engine import create_async_engine_from_url
from skinface.db.session import async_session_factory, create_tables
from skinface.identity.types import SkinSource
from skinface.providers.base import TextureProvider
from skinface.providers.drasl import DraslProvider
from skinface.providers.ely import ElyProvider
from skinface.providers.mojang import MojangProvider
from skinface.server.config import Settings
from skinface.server.mineskin import MineSkinClient

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Process-wide collaborators, constructed once and never mutated."""

    settings: Settings
    http: httpx.AsyncClient
    cache: AvatarCache
    engine: AsyncEngine
    sessions: async_sessionmaker[AsyncSession]
    providers: dict[SkinSource, TextureProvider]
    signer: MineSkinClient

    @property
    def drasl(self) -> DraslProvider:
        return self.providers[SkinSource.DRASL]  # type: ignore[return-value]

    @property
    def ely(self) -> ElyProvider:
        return self.providers[SkinSource.ELY]  # type: ignore[return-value]


def create_http_client(settings: Settings, **kwargs: object) -> httpx.AsyncClient:
    """Create the shared upstream client (pooled, bounded timeout).

    Skin hosts answer with redirects to CDN URLs, so redirects are followed.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.upstream_timeout),
        follow_redirects=True,
        headers={"User-Agent": "skinface"},
        **kwargs,
    )


def build_providers(
    http: httpx.AsyncClient, settings: Settings
) -> dict[SkinSource, TextureProvider]:
    """Instantiate one provider per :class:`SkinSource`, in priority order."""
    timeout = settings.upstream_timeout
    providers: dict[SkinSource, TextureProvider] = {
        SkinSource.DRASL: DraslProvider(
            http, settings.drasl_url, settings.drasl_token, timeout=timeout
        ),
        SkinSource.MOJANG: MojangProvider(
            http, settings.mojang_session_url, timeout=timeout
        ),
        SkinSource.ELY: ElyProvider(
            http, settings.ely_auth_url, settings.ely_skinsystem_url, timeout=timeout
        ),
    }
    return {source: providers[source] for source in SkinSource}


def build_context(
    settings: Settings,
    *,
    http: httpx.AsyncClient,
    cache_backend: CacheBackend,
    engine: AsyncEngine,
) -> AppContext:
    """Wire an :class:`AppContext` from already-created clients."""
    return AppContext(
        settings=settings,
        http=http,
        cache=AvatarCache(cache_backend),
        engine=engine,
        sessions=async_session_factory(engine),
        providers=build_providers(http, settings),
        signer=MineSkinClient(http, settings.mineskin_url, settings.mineskin_token),
    )


async def open_context(settings: Settings) -> AppContext:
    """Create every long-lived client from *settings*."""
    engine = create_async_engine_from_url(settings.database_url)
    await create_tables(engine)
    context = build_context(
        settings,
        http=create_http_client(settings),
        cache_backend=create_cache_backend(settings.cache_url, timeout=settings.cache_timeout),
        engine=engine,
    )
    logger.info(
        "Context ready (drasl %s, catalog sync %s)",
        "configured" if context.drasl.configured else "not configured",
        "configured" if settings.catalog_sync_configured else "not configured",
    )
    return context


async def close_context(context: AppContext) -> None:
    """Release every client held by *context*."""
    await context.http.aclose()
    await context.cache.close()
    await context.engine.dispose()


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the app's :class:`AppContext`."""
    return request.app.state.context

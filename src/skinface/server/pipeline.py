"""The resolve -> render -> cache pipeline, parametrized by provider.

One generic flow serves every avatar route: normalize (done by the
caller), cache lookup, ordered provider fallback, texture download, face
render, cache write.  The aggregation route chains whole single-provider
pipelines with the same first-success policy the orchestrator uses for
providers.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError

from skinface.cache.layer import avatar_key, texture_data_key
from skinface.db.crud.signed_textures import get_signed_texture, to_document
from skinface.identity.errors import SkinFaceError
from skinface.identity.identifier import PlayerIdentifier
from skinface.identity.types import RenderedAvatar, SkinSource
from skinface.providers.fallback import first_success, resolve_texture
from skinface.render.face import render_face
from skinface.render.textures import fetch_texture_bytes
from skinface.server.context import AppContext

logger = logging.getLogger(__name__)


class AvatarPipeline:
    """Request-scoped facade over the shared :class:`AppContext`."""

    def __init__(self, context: AppContext) -> None:
        self._ctx = context

    async def render(
        self,
        identifier: PlayerIdentifier,
        sources: Sequence[SkinSource],
        overlay: bool = True,
    ) -> RenderedAvatar:
        """Resolve through *sources* in order and render the face (no cache).

        Raises:
            AllProvidersFailedError: No provider produced a texture reference.
            ProviderUnavailableError: The texture download failed.
            RenderError: The texture could not be rendered.
        """
        providers = [self._ctx.providers[source] for source in sources]
        reference = await resolve_texture(identifier, providers)
        texture = await fetch_texture_bytes(
            self._ctx.http, reference, timeout=self._ctx.settings.upstream_timeout
        )
        avatar = render_face(texture, overlay=overlay)
        logger.info(
            "Rendered %s avatar for %s from %s",
            "overlay" if overlay else "bare",
            identifier,
            reference.source.value,
        )
        return avatar

    async def avatar(
        self,
        source: SkinSource,
        identifier: PlayerIdentifier,
        overlay: bool = True,
    ) -> bytes:
        """Cached PNG avatar for *identifier* from a single provider."""

        async def compute() -> bytes:
            return (await self.render(identifier, [source], overlay=overlay)).data

        return await self._ctx.cache.get_or_compute(
            avatar_key(source, identifier, overlay), compute
        )

    async def any_avatar(
        self,
        identifier: PlayerIdentifier,
        username: PlayerIdentifier | None = None,
        overlay: bool = True,
    ) -> tuple[SkinSource, bytes]:
        """First successful single-provider avatar, in :class:`SkinSource` order.

        *username*, when given, replaces *identifier* for the Ely step so the
        name-history lookup is skipped.

        Raises:
            AllProvidersFailedError: Every single-provider pipeline failed.
        """

        def attempt(source: SkinSource, who: PlayerIdentifier):
            async def run() -> tuple[SkinSource, bytes]:
                return source, await self.avatar(source, who, overlay=overlay)

            return run

        return await first_success(
            (
                (
                    source.value,
                    attempt(source, username if source is SkinSource.ELY and username else identifier),
                )
                for source in SkinSource
            ),
            absorb=(SkinFaceError,),
        )

    async def signed_textures(self, identifier: PlayerIdentifier) -> bytes:
        """Cached raw signed-texture JSON for a UUID.

        The catalog is consulted first; players it does not know are looked
        up on the alternate auth service.
        """
        return await self._ctx.cache.get_or_compute(
            texture_data_key(identifier),
            lambda: self._load_signed_textures(identifier),
        )

    async def _load_signed_textures(self, identifier: PlayerIdentifier) -> bytes:
        try:
            async with self._ctx.sessions() as session:
                record = await get_signed_texture(session, identifier.canonical)
        except SQLAlchemyError as exc:
            logger.warning("Catalog lookup for %s failed, falling back upstream: %s", identifier, exc)
            record = None

        if record is not None:
            logger.debug("Signed textures for %s served from catalog", identifier)
            return json.dumps(to_document(record), separators=(",", ":")).encode("utf-8")

        return await self._ctx.ely.fetch_signed_textures(identifier)

"""Cache-aside layer around the resolve/render pipeline.

Owns the TTL and the key scheme.  Keys are namespaced by purpose so
rendered avatars and raw texture metadata never collide::

    avatar:<source>:<uuid|username>:<canonical>[:bare]
    texture-data:<hex-uuid>

``:bare`` marks avatars rendered without the overlay layer.

Cache failures are soft: a failed read behaves like a miss and a failed
write is logged and skipped.  Neither ever reaches the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta

from skinface.cache.backends import CacheBackend
from skinface.identity.errors import CacheUnavailableError
from skinface.identity.identifier import PlayerIdentifier
from skinface.identity.types import SkinSource

logger = logging.getLogger(__name__)

# Uniform lifetime of every cached artifact
CACHE_TTL = timedelta(hours=48)

AVATAR_NAMESPACE = "avatar"
TEXTURE_DATA_NAMESPACE = "texture-data"


def avatar_key(source: SkinSource, identifier: PlayerIdentifier, overlay: bool = True) -> str:
    key = f"{AVATAR_NAMESPACE}:{source.value}:{identifier.kind.value}:{identifier.canonical}"
    return key if overlay else f"{key}:bare"


def texture_data_key(identifier: PlayerIdentifier) -> str:
    return f"{TEXTURE_DATA_NAMESPACE}:{identifier.canonical}"


class AvatarCache:
    """Cache-aside wrapper over a :class:`CacheBackend`."""

    def __init__(self, backend: CacheBackend, ttl: timedelta = CACHE_TTL) -> None:
        self._backend = backend
        self._ttl_seconds = int(ttl.total_seconds())

    @property
    def backend(self) -> CacheBackend:
        return self._backend

    async def read(self, key: str) -> bytes | None:
        """Return cached bytes, treating backend failures as a miss."""
        try:
            return await self._backend.get(key)
        except CacheUnavailableError as exc:
            logger.warning("Cache read failed, recomputing: %s", exc)
            return None

    async def write(self, key: str, value: bytes) -> None:
        """Store bytes; failures are logged and swallowed."""
        try:
            await self._backend.set(key, value, self._ttl_seconds)
        except CacheUnavailableError as exc:
            logger.warning("Failed to cache %s: %s", key, exc)

    async def get_or_compute(self, key: str, compute: Callable[[], Awaitable[bytes]]) -> bytes:
        """Return the bytes under *key*, computing and storing them on a miss.

        *compute* is not called on a hit.  If it raises (or the calling task
        is cancelled) nothing is written.
        """
        cached = await self.read(key)
        if cached is not None:
            logger.debug("Cache hit: %s", key)
            return cached

        logger.debug("Cache miss: %s", key)
        value = await compute()
        await self.write(key, value)
        return value

    async def close(self) -> None:
        await self._backend.close()

"""Byte-value cache backends with per-entry TTL.

Two implementations:

- :class:`RedisCacheBackend` -- shared, connection-pooled Redis client
  (``redis://``, ``rediss://`` or ``unix://`` URLs).
- :class:`MemoryCacheBackend` -- in-process dict (``memory://``), for
  development and tests.

Backends raise :class:`CacheUnavailableError` for any failure other than a
clean miss; deciding what to do about it is the cache layer's job.
"""

from __future__ import annotations

import abc
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import redis.asyncio as redis
from redis.exceptions import RedisError

from skinface.identity.errors import CacheUnavailableError

logger = logging.getLogger(__name__)

# Socket timeout for cache round trips (seconds)
DEFAULT_CACHE_TIMEOUT: float = 2.0


class CacheBackend(abc.ABC):
    """Minimal async key/value store for bytes."""

    @abc.abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the value under *key*, or ``None`` on a miss."""

    @abc.abstractmethod
    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """Store *value* under *key* for *ttl_seconds*."""

    async def close(self) -> None:
        """Release backend resources."""


@dataclass
class _Entry:
    value: bytes
    expires_at: float


class MemoryCacheBackend(CacheBackend):
    """In-process TTL dict.

    Expired entries are dropped on read, and every write sweeps whatever
    has expired so keys that are never read again do not accumulate.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    async def get(self, key: str) -> bytes | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        now = self._clock()
        for stale in [k for k, e in self._entries.items() if e.expires_at <= now]:
            del self._entries[stale]
        self._entries[key] = _Entry(value=value, expires_at=now + ttl_seconds)

    def __len__(self) -> int:
        return len(self._entries)


class RedisCacheBackend(CacheBackend):
    """Redis-backed cache using the ``redis.asyncio`` client.

    The client keeps its own connection pool and is safe to share across
    concurrent requests.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, timeout: float = DEFAULT_CACHE_TIMEOUT) -> RedisCacheBackend:
        return cls(
            redis.Redis.from_url(
                url,
                socket_timeout=timeout,
                socket_connect_timeout=timeout,
            )
        )

    async def get(self, key: str) -> bytes | None:
        try:
            return await self._client.get(key)
        except RedisError as exc:
            raise CacheUnavailableError(f"Redis GET {key} failed: {exc}") from exc

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as exc:
            raise CacheUnavailableError(f"Redis SET {key} failed: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()


def create_cache_backend(url: str, timeout: float = DEFAULT_CACHE_TIMEOUT) -> CacheBackend:
    """Create a backend from a cache URL.

    Raises:
        ValueError: If the URL scheme is not supported.
    """
    if url.startswith("memory://"):
        logger.info("Using in-process memory cache")
        return MemoryCacheBackend()
    if url.startswith(("redis://", "rediss://", "unix://")):
        logger.info("Using Redis cache")
        return RedisCacheBackend.from_url(url, timeout=timeout)
    raise ValueError(f"Unsupported cache URL scheme: {url}")

"""Tests for the cache backends and the URL factory."""

from __future__ import annotations

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from skinface.cache.backends import (
    MemoryCacheBackend,
    RedisCacheBackend,
    create_cache_backend,
)
from skinface.identity import CacheUnavailableError


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestMemoryCacheBackend:
    async def test_get_set(self):
        backend = MemoryCacheBackend()
        await backend.set("k", b"v", 60)
        assert await backend.get("k") == b"v"

    async def test_miss(self):
        assert await MemoryCacheBackend().get("missing") is None

    async def test_expiry(self):
        clock = FakeClock()
        backend = MemoryCacheBackend(clock=clock)
        await backend.set("k", b"v", 60)
        clock.now += 59
        assert await backend.get("k") == b"v"
        clock.now += 1
        assert await backend.get("k") is None
        assert len(backend) == 0

    async def test_set_sweeps_expired_entries(self):
        clock = FakeClock()
        backend = MemoryCacheBackend(clock=clock)
        await backend.set("old", b"v", 60)
        await backend.set("fresh", b"v", 600)
        clock.now += 60
        await backend.set("new", b"v", 60)
        assert len(backend) == 2
        assert await backend.get("fresh") == b"v"


class FakeRedis:
    """Stands in for ``redis.asyncio.Redis`` with get/set/aclose."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.data: dict[str, bytes] = {}
        self.expiry: dict[str, int] = {}
        self.closed = False

    async def get(self, key):
        if self.fail:
            raise RedisConnectionError("refused")
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        if self.fail:
            raise RedisConnectionError("refused")
        self.data[key] = value
        self.expiry[key] = ex

    async def aclose(self):
        self.closed = True


class TestRedisCacheBackend:
    async def test_set_passes_ttl(self):
        client = FakeRedis()
        backend = RedisCacheBackend(client)
        await backend.set("k", b"v", 172800)
        assert client.expiry["k"] == 172800
        assert await backend.get("k") == b"v"

    async def test_get_error_is_wrapped(self):
        with pytest.raises(CacheUnavailableError):
            await RedisCacheBackend(FakeRedis(fail=True)).get("k")

    async def test_set_error_is_wrapped(self):
        with pytest.raises(CacheUnavailableError):
            await RedisCacheBackend(FakeRedis(fail=True)).set("k", b"v", 1)

    async def test_close(self):
        client = FakeRedis()
        await RedisCacheBackend(client).close()
        assert client.closed


class TestCreateCacheBackend:
    def test_memory(self):
        assert isinstance(create_cache_backend("memory://"), MemoryCacheBackend)

    async def test_redis(self):
        backend = create_cache_backend("redis://localhost:6379/0")
        assert isinstance(backend, RedisCacheBackend)
        await backend.close()

    def test_unsupported(self):
        with pytest.raises(ValueError):
            create_cache_backend("memcached://localhost")

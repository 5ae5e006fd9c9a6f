"""Tests for cancelling in-flight work when the client disconnects."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from skinface.cache.backends import MemoryCacheBackend
from skinface.cache.layer import AvatarCache
from skinface.server.disconnect import ClientDisconnected, cancel_on_disconnect


class FakeRequest:
    """Mimics the parts of ``starlette.requests.Request`` that are used."""

    def __init__(self, disconnect_after: int | None = None):
        self.url = SimpleNamespace(path="/m/test")
        self._disconnect_after = disconnect_after
        self.polls = 0

    async def is_disconnected(self) -> bool:
        self.polls += 1
        return self._disconnect_after is not None and self.polls >= self._disconnect_after


async def test_returns_result_when_client_stays():
    async def work():
        await asyncio.sleep(0.02)
        return b"png"

    assert await cancel_on_disconnect(FakeRequest(), work(), poll_interval=0.005) == b"png"


async def test_fast_work_never_polls():
    async def work():
        return 42

    request = FakeRequest(disconnect_after=1)
    assert await cancel_on_disconnect(request, work(), poll_interval=0.5) == 42
    assert request.polls == 0


async def test_errors_propagate():
    async def work():
        raise ValueError("boom")

    with pytest.raises(ValueError):
        await cancel_on_disconnect(FakeRequest(), work(), poll_interval=0.005)


async def test_disconnect_cancels_work_and_skips_cache_write():
    backend = MemoryCacheBackend()
    cache = AvatarCache(backend)
    cancelled = asyncio.Event()

    async def compute() -> bytes:
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return b"never"

    with pytest.raises(ClientDisconnected):
        await cancel_on_disconnect(
            FakeRequest(disconnect_after=2),
            cache.get_or_compute("avatar:mojang:uuid:x", compute),
            poll_interval=0.005,
        )

    assert cancelled.is_set()
    assert len(backend) == 0

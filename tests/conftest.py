"""Shared test fixtures for skinface tests."""

from __future__ import annotations

import pytest

from fakes import HAT_COLOR, PLAYER_DASHED, FakeUpstream, make_skin_png
from skinface.identity.identifier import PlayerIdentifier, normalize


@pytest.fixture()
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture()
async def http(upstream):
    """An ``httpx.AsyncClient`` wired to the fake upstream."""
    client = upstream.client()
    yield client
    await client.aclose()


@pytest.fixture()
def player() -> PlayerIdentifier:
    return normalize(PLAYER_DASHED)


@pytest.fixture()
def skin_png() -> bytes:
    return make_skin_png(hat=HAT_COLOR)

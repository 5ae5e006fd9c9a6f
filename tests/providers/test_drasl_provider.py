"""Tests for the managed identity (Drasl) provider."""

from __future__ import annotations

import httpx
import pytest

from fakes import DRASL, DRASL_SKIN_URL, PLAYER_DASHED, drasl_player_url
from skinface.identity import (
    ProfileNotFoundError,
    ProviderUnavailableError,
    SkinSource,
    normalize,
)
from skinface.providers.drasl import DraslProvider


@pytest.fixture()
def provider(http):
    return DraslProvider(http, DRASL, "s3cret", timeout=1.0)


class TestFetchTexture:
    async def test_resolves_skin_url(self, provider, upstream, player):
        upstream.add_json(drasl_player_url(), {"uuid": PLAYER_DASHED, "skinUrl": DRASL_SKIN_URL})
        ref = await provider.fetch_texture(player)
        assert ref.source is SkinSource.DRASL
        assert ref.location == DRASL_SKIN_URL

    async def test_sends_bearer_token_and_dashed_uuid(self, provider, upstream, player):
        upstream.add_json(drasl_player_url(), {"skinUrl": DRASL_SKIN_URL})
        await provider.fetch_texture(player)
        request = upstream.calls[0]
        assert request.headers["Authorization"] == "Bearer s3cret"
        assert request.url.path.endswith(PLAYER_DASHED)

    async def test_no_skin_is_not_found(self, provider, upstream, player):
        upstream.add_json(drasl_player_url(), {"uuid": PLAYER_DASHED, "skinUrl": None})
        with pytest.raises(ProfileNotFoundError):
            await provider.fetch_texture(player)

    async def test_non_string_skin_url_is_unavailable(self, provider, upstream, player):
        upstream.add_json(drasl_player_url(), {"uuid": PLAYER_DASHED, "skinUrl": 12345})
        with pytest.raises(ProviderUnavailableError):
            await provider.fetch_texture(player)

    async def test_unknown_player_is_not_found(self, provider, player):
        with pytest.raises(ProfileNotFoundError):
            await provider.fetch_texture(player)

    async def test_unauthorized_is_unavailable(self, provider, upstream, player):
        upstream.add(drasl_player_url(), httpx.Response(401))
        with pytest.raises(ProviderUnavailableError):
            await provider.fetch_texture(player)

    async def test_unconfigured_is_unavailable_without_network(self, http, upstream, player):
        provider = DraslProvider(http, None, None)
        assert not provider.configured
        with pytest.raises(ProviderUnavailableError):
            await provider.fetch_texture(player)
        assert upstream.calls == []

    async def test_username_is_not_found(self, provider):
        with pytest.raises(ProfileNotFoundError):
            await provider.fetch_texture(normalize("Steve", allow_username=True))


class TestListPlayers:
    async def test_lists_players(self, provider, upstream):
        upstream.add_json(
            f"{DRASL}/drasl/api/v2/players",
            [{"uuid": PLAYER_DASHED, "name": "Steve"}, "garbage"],
        )
        players = await provider.list_players()
        assert players == [{"uuid": PLAYER_DASHED, "name": "Steve"}]

    async def test_non_list_is_unavailable(self, provider, upstream):
        upstream.add_json(f"{DRASL}/drasl/api/v2/players", {"players": []})
        with pytest.raises(ProviderUnavailableError):
            await provider.list_players()

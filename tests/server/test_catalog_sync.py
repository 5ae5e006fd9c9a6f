"""Tests for the catalog sync job and the texture-signing client."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from fakes import DRASL, MINESKIN, PLAYER_DASHED, PLAYER_HEX
from skinface.db.crud.signed_textures import get_signed_texture, upsert_signed_texture
from skinface.identity import TextureSigningError
from skinface.server.catalog_sync import CatalogSync, SyncReport
from skinface.server.mineskin import MineSkinClient

PLAYERS_URL = f"{DRASL}/drasl/api/v2/players"
GENERATE_URL = f"{MINESKIN}/v2/generate"
SKIN_URL = f"{DRASL}/drasl/web/texture/skin/abc.png"


def _signed(value: str = "dmFsdWU=", signature: str = "c2ln") -> dict:
    return {"skin": {"texture": {"data": {"value": value, "signature": signature}}}}


@pytest.fixture()
def sync(acontext):
    return CatalogSync(acontext.drasl, acontext.signer, acontext.sessions, interval=3600)


class TestRunOnce:
    async def test_signs_and_stores_new_player(self, sync, acontext, upstream):
        upstream.add_json(PLAYERS_URL, [{"uuid": PLAYER_DASHED, "name": "Steve", "skinUrl": SKIN_URL}])
        upstream.add_json(GENERATE_URL, _signed())

        report = await sync.run_once()

        assert report == SyncReport(checked=1, updated=1, skipped=0, failed=0)
        async with acontext.sessions() as session:
            record = await get_signed_texture(session, PLAYER_HEX)
        assert record.url == SKIN_URL
        assert record.properties == [
            {"name": "textures", "value": "dmFsdWU=", "signature": "c2ln"},
            {"name": "drasl", "value": "we do not want to be drasl!"},
        ]

    async def test_unchanged_url_is_skipped(self, sync, acontext, upstream):
        async with acontext.sessions() as session:
            await upsert_signed_texture(session, PLAYER_HEX, name="Steve", url=SKIN_URL, properties=[])
        upstream.add_json(PLAYERS_URL, [{"uuid": PLAYER_DASHED, "name": "Steve", "skinUrl": SKIN_URL}])

        report = await sync.run_once()

        assert report.skipped == 1
        assert upstream.hits(GENERATE_URL) == 0

    async def test_changed_url_is_resigned(self, sync, acontext, upstream):
        async with acontext.sessions() as session:
            await upsert_signed_texture(
                session, PLAYER_HEX, name="Steve", url="http://old.test/s.png", properties=[]
            )
        upstream.add_json(PLAYERS_URL, [{"uuid": PLAYER_DASHED, "name": "Steve", "skinUrl": SKIN_URL}])
        upstream.add_json(GENERATE_URL, _signed(value="bmV3"))

        report = await sync.run_once()

        assert report.updated == 1
        async with acontext.sessions() as session:
            record = await get_signed_texture(session, PLAYER_HEX)
        assert record.url == SKIN_URL
        assert record.properties[0]["value"] == "bmV3"

    async def test_per_player_failures_do_not_stop_the_run(self, sync, upstream):
        upstream.add_json(
            PLAYERS_URL,
            [
                {"uuid": "garbage", "name": "Broken", "skinUrl": SKIN_URL},
                {"uuid": PLAYER_DASHED, "name": "Skinless", "skinUrl": None},
                {"uuid": "00000000-0000-0000-0000-000000000001", "name": "Rejected", "skinUrl": SKIN_URL},
            ],
        )
        upstream.add(GENERATE_URL, httpx.Response(429, json={"error": "slow down"}))

        report = await sync.run_once()

        assert report == SyncReport(checked=3, updated=0, skipped=1, failed=2)

    async def test_list_failure_aborts(self, sync, upstream):
        upstream.add(PLAYERS_URL, httpx.Response(500))
        assert await sync.run_once() == SyncReport()

    async def test_overlapping_run_is_skipped(self, sync, upstream):
        release = asyncio.Event()

        async def slow_list(request):
            await release.wait()
            return httpx.Response(200, json=[])

        upstream.add(PLAYERS_URL, slow_list)
        first = asyncio.create_task(sync.run_once())
        while not upstream.calls:
            await asyncio.sleep(0.01)

        assert sync.running
        assert await sync.run_once() is None

        release.set()
        assert await first == SyncReport()
        assert not sync.running


class TestScheduler:
    async def test_first_run_fires_immediately(self, sync, upstream):
        upstream.add_json(PLAYERS_URL, [])
        await sync.start()
        for _ in range(100):
            if upstream.hits(PLAYERS_URL):
                break
            await asyncio.sleep(0.01)
        await sync.stop()
        assert upstream.hits(PLAYERS_URL) == 1
        assert not sync.running


class TestMineSkinClient:
    async def test_sign(self, http, upstream):
        upstream.add_json(GENERATE_URL, _signed())
        client = MineSkinClient(http, MINESKIN, "tok")

        signed = await client.sign(name="Steve", url=SKIN_URL, variant="slim")

        assert (signed.value, signed.signature) == ("dmFsdWU=", "c2ln")
        request = upstream.calls[0]
        assert request.headers["Authorization"] == "Bearer tok"
        assert json.loads(request.content) == {
            "variant": "slim",
            "name": "Steve",
            "visibility": "public",
            "url": SKIN_URL,
        }

    async def test_http_error(self, http, upstream):
        upstream.add(GENERATE_URL, httpx.Response(400, json={"errors": ["bad url"]}))
        with pytest.raises(TextureSigningError, match="HTTP 400"):
            await MineSkinClient(http, MINESKIN, "tok").sign(name="Steve", url=SKIN_URL)

    async def test_missing_signature(self, http, upstream):
        upstream.add_json(GENERATE_URL, _signed(signature=""))
        with pytest.raises(TextureSigningError):
            await MineSkinClient(http, MINESKIN, "tok").sign(name="Steve", url=SKIN_URL)

    async def test_unexpected_shape(self, http, upstream):
        upstream.add_json(GENERATE_URL, {"skin": {}})
        with pytest.raises(TextureSigningError):
            await MineSkinClient(http, MINESKIN, "tok").sign(name="Steve", url=SKIN_URL)

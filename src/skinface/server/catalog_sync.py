"""Periodic reconciliation of the managed roster against the signing service.

Every tick lists all players in the managed directory and, for each player
whose skin URL changed since the last run (or who has no catalog record),
asks the texture signer for a fresh ``(value, signature)`` pair and stores
it in the catalog.

Runs must never overlap: a tick that finds a previous run still active is
skipped, even though the nominal interval is far longer than a run.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from skinface.db.crud.signed_textures import get_signed_texture, upsert_signed_texture
from skinface.identity.errors import InvalidIdentifierError, ProviderError, TextureSigningError
from skinface.identity.identifier import normalize
from skinface.providers.drasl import DraslProvider
from skinface.server.mineskin import MineSkinClient

logger = logging.getLogger(__name__)

# Default interval between runs (seconds)
DEFAULT_SYNC_INTERVAL: float = 86400.0  # daily

# Marker property stored after the signed textures of every synced player
DRASL_MARKER_PROPERTY: dict[str, str] = {"name": "drasl", "value": "we do not want to be drasl!"}


@dataclass
class SyncReport:
    """Outcome counters for one sync run."""

    checked: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0


class CatalogSync:
    """Keeps the signed-texture catalog in step with the managed directory.

    Parameters
    ----------
    drasl:
        Provider used to list the managed roster.
    signer:
        Texture-signing client.
    sessions:
        Catalog session factory.
    interval:
        Seconds between scheduled runs.
    """

    def __init__(
        self,
        drasl: DraslProvider,
        signer: MineSkinClient,
        sessions: async_sessionmaker[AsyncSession],
        interval: float = DEFAULT_SYNC_INTERVAL,
    ) -> None:
        self._drasl = drasl
        self._signer = signer
        self._sessions = sessions
        self._interval = interval
        self._lock = asyncio.Lock()
        self._task: asyncio.Task | None = None
        self._runs: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    # -- public lifecycle --------------------------------------------------

    async def start(self) -> None:
        """Start the scheduler loop (first run fires immediately)."""
        self._task = asyncio.create_task(self._schedule_loop())

    async def stop(self) -> None:
        """Cancel the scheduler and any in-flight run."""
        tasks = list(self._runs)
        if self._task is not None:
            tasks.append(self._task)
            self._task = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    # -- runs --------------------------------------------------------------

    async def run_once(self) -> SyncReport | None:
        """Run one reconciliation pass.

        Returns ``None`` without doing anything if a run is already active.
        """
        if self._lock.locked():
            logger.warning("Catalog sync still running, skipping this tick")
            return None
        async with self._lock:
            report = await self._sync()
        logger.info(
            "Catalog sync done: checked=%d updated=%d skipped=%d failed=%d",
            report.checked,
            report.updated,
            report.skipped,
            report.failed,
        )
        return report

    async def _sync(self) -> SyncReport:
        report = SyncReport()
        try:
            players = await self._drasl.list_players()
        except ProviderError as exc:
            logger.warning("Catalog sync aborted, cannot list players: %s", exc)
            return report

        async with self._sessions() as session:
            for player in players:
                report.checked += 1
                await self._sync_player(session, player, report)
        return report

    async def _sync_player(
        self, session: AsyncSession, player: dict[str, Any], report: SyncReport
    ) -> None:
        name = player.get("name") or "<unnamed>"
        logger.info("Checking %s", name)

        try:
            player_id = normalize(str(player.get("uuid") or "")).canonical
        except InvalidIdentifierError:
            logger.warning("Player %s has an invalid UUID %r", name, player.get("uuid"))
            report.failed += 1
            return

        url = player.get("skinUrl")
        if not url:
            logger.info("Skipping %s - no skin", name)
            report.skipped += 1
            return

        try:
            existing = await get_signed_texture(session, player_id)
        except SQLAlchemyError as exc:
            logger.warning("Catalog lookup failed for %s: %s", name, exc)
            report.failed += 1
            return

        if existing is not None and existing.url == url:
            logger.info("Skipping %s - URL unchanged", name)
            report.skipped += 1
            return

        try:
            signed = await self._signer.sign(
                name=name, url=url, variant=player.get("skinModel") or "classic"
            )
        except TextureSigningError as exc:
            logger.warning("Failed to sign skin for %s: %s", name, exc)
            report.failed += 1
            return

        try:
            await upsert_signed_texture(
                session,
                player_id,
                name=name,
                url=url,
                properties=[
                    {"name": "textures", "value": signed.value, "signature": signed.signature},
                    dict(DRASL_MARKER_PROPERTY),
                ],
            )
        except SQLAlchemyError as exc:
            logger.warning("Failed to store signed texture for %s: %s", name, exc)
            report.failed += 1
            return

        logger.info("%s %s in catalog", "Updated" if existing else "Inserted", name)
        report.updated += 1

    # -- background loop ---------------------------------------------------

    async def _guarded_run(self) -> None:
        try:
            await self.run_once()
        except Exception:
            logger.exception("Error in catalog sync run")

    async def _schedule_loop(self) -> None:
        """Spawn a run every interval; overlap is prevented by the guard."""
        while True:
            run = asyncio.create_task(self._guarded_run())
            self._runs.add(run)
            run.add_done_callback(self._runs.discard)
            await asyncio.sleep(self._interval)

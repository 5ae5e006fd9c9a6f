"""skinface CLI -- render avatars and maintain the catalog from a shell.

Thin wrapper around the server pipeline using click.  Every command reads
the same ``SKINFACE_*`` environment as the server.
"""

from __future__ import annotations

import asyncio
import functools
from pathlib import Path

import click

from skinface.cache.backends import MemoryCacheBackend
from skinface.db.engine import create_async_engine_from_url
from skinface.identity import PlayerIdentifier, SkinFaceError, SkinSource, normalize
from skinface.providers.fallback import first_success
from skinface.server.catalog_sync import CatalogSync, SyncReport
from skinface.server.config import Settings
from skinface.server.context import (
    AppContext,
    build_context,
    close_context,
    create_http_client,
    open_context,
)
from skinface.server.pipeline import AvatarPipeline

_SOURCE_CHOICES = [source.value for source in SkinSource] + ["all"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _error(msg: str) -> None:
    """Print an error message to stderr and exit 1."""
    click.echo(msg, err=True)
    raise SystemExit(1)


def _offline_context(settings: Settings) -> AppContext:
    """Context for one-shot renders: throwaway cache, lazily connected catalog."""
    return build_context(
        settings,
        http=create_http_client(settings),
        cache_backend=MemoryCacheBackend(),
        engine=create_async_engine_from_url(settings.database_url),
    )


async def _render(player_id: str, source: str, overlay: bool) -> tuple[SkinSource, bytes]:
    settings = Settings()
    context = _offline_context(settings)
    pipeline = AvatarPipeline(context)

    async def one(chosen: SkinSource, identifier: PlayerIdentifier) -> tuple[SkinSource, bytes]:
        avatar = await pipeline.render(identifier, [chosen], overlay=overlay)
        return chosen, avatar.data

    try:
        if source == "all":
            identifier = normalize(player_id)
            return await first_success(
                ((s.value, functools.partial(one, s, identifier)) for s in SkinSource),
                absorb=(SkinFaceError,),
            )
        chosen = SkinSource(source)
        return await one(chosen, normalize(player_id, allow_username=chosen is SkinSource.ELY))
    finally:
        await close_context(context)


async def _sync_catalog() -> SyncReport | None:
    settings = Settings()
    context = await open_context(settings)
    try:
        sync = CatalogSync(context.drasl, context.signer, context.sessions)
        return await sync.run_once()
    finally:
        await close_context(context)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="skinface")
def cli() -> None:
    """skinface -- Minecraft face avatars."""


@cli.command()
@click.argument("player_id")
@click.option(
    "--source",
    "-s",
    type=click.Choice(_SOURCE_CHOICES),
    default="all",
    show_default=True,
    help="Provider to render from ('all' tries each in priority order).",
)
@click.option("--no-overlay", is_flag=True, help="Render the bare face without the hat layer.")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Where to write the PNG.",
)
def face(player_id: str, source: str, no_overlay: bool, output: Path) -> None:
    """Render the 96x96 face avatar of PLAYER_ID to a PNG file."""
    try:
        served_by, data = asyncio.run(_render(player_id, source, not no_overlay))
    except SkinFaceError as exc:
        _error(f"Error: {exc}")
        return
    output.write_bytes(data)
    click.echo(f"Wrote {output} ({len(data)} bytes, from {served_by.value})")


@cli.command("sync-catalog")
def sync_catalog() -> None:
    """Run one catalog reconciliation pass against the managed directory."""
    if not Settings().catalog_sync_configured:
        _error(
            "Error: catalog sync needs SKINFACE_DRASL_URL, SKINFACE_DRASL_TOKEN "
            "and SKINFACE_MINESKIN_TOKEN"
        )
        return
    report = asyncio.run(_sync_catalog())
    if report is None:
        _error("Error: a sync run is already in progress")
        return
    click.echo(
        f"checked={report.checked} updated={report.updated} "
        f"skipped={report.skipped} failed={report.failed}"
    )


@cli.command("normalize")
@click.argument("player_id")
@click.option("--allow-username", is_flag=True, help="Accept non-UUID input as a username.")
def normalize_cmd(player_id: str, allow_username: bool) -> None:
    """Print the canonical form of PLAYER_ID."""
    try:
        identifier = normalize(player_id, allow_username=allow_username)
    except SkinFaceError as exc:
        _error(f"Error: {exc}")
        return
    click.echo(f"{identifier.kind.value}\t{identifier.canonical}")
    if identifier.is_uuid:
        click.echo(f"dashed\t{identifier.dashed}")


if __name__ == "__main__":
    cli()

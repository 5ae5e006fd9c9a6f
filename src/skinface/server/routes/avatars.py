"""Face avatar endpoints.

- ``GET /d/{id}`` -- managed identity (Drasl) only
- ``GET /m/{id}`` -- official session service (Mojang) only
- ``GET /e/{id}`` -- alternate auth (Ely.by) only; UUID or username
- ``GET /a/{id}`` -- first success across all three, in that priority order

All return a 96x96 ``image/png``.  ``?overlay=false`` renders without the
hat layer.  Error statuses are assigned by the app-level exception
handlers, except for the aggregation route's 502.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.responses import Response

from skinface.cache.layer import CACHE_TTL
from skinface.identity.errors import AllProvidersFailedError
from skinface.identity.identifier import normalize
from skinface.identity.types import SkinSource
from skinface.server.context import AppContext, get_context
from skinface.server.disconnect import ClientDisconnected, cancel_on_disconnect
from skinface.server.models import ErrorResponse
from skinface.server.pipeline import AvatarPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["avatars"])

_PNG_RESPONSES = {
    200: {"content": {"image/png": {}}},
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

# Non-standard "client closed request" status, as nginx logs it
_CLIENT_CLOSED = 499


def _png(data: bytes) -> Response:
    return Response(
        content=data,
        media_type="image/png",
        headers={"Cache-Control": f"public, max-age={int(CACHE_TTL.total_seconds())}"},
    )


async def _single_provider(
    request: Request,
    context: AppContext,
    source: SkinSource,
    player_id: str,
    overlay: bool,
    *,
    allow_username: bool = False,
) -> Response:
    identifier = normalize(player_id, allow_username=allow_username)
    pipeline = AvatarPipeline(context)
    try:
        data = await cancel_on_disconnect(request, pipeline.avatar(source, identifier, overlay))
    except ClientDisconnected:
        return Response(status_code=_CLIENT_CLOSED)
    return _png(data)


@router.get("/d/{player_id}", responses=_PNG_RESPONSES)
async def drasl_avatar(
    player_id: str,
    request: Request,
    overlay: bool = True,
    context: AppContext = Depends(get_context),
) -> Response:
    """Face avatar from the managed identity directory (UUID only)."""
    return await _single_provider(request, context, SkinSource.DRASL, player_id, overlay)


@router.get("/m/{player_id}", responses=_PNG_RESPONSES)
async def mojang_avatar(
    player_id: str,
    request: Request,
    overlay: bool = True,
    context: AppContext = Depends(get_context),
) -> Response:
    """Face avatar from the official session service (UUID only)."""
    return await _single_provider(request, context, SkinSource.MOJANG, player_id, overlay)


@router.get("/e/{player_id}", responses=_PNG_RESPONSES)
async def ely_avatar(
    player_id: str,
    request: Request,
    overlay: bool = True,
    context: AppContext = Depends(get_context),
) -> Response:
    """Face avatar from the alternate auth service (UUID or username)."""
    return await _single_provider(
        request, context, SkinSource.ELY, player_id, overlay, allow_username=True
    )


@router.get(
    "/a/{player_id}",
    responses={**_PNG_RESPONSES, 502: {"model": ErrorResponse}},
)
async def any_avatar(
    player_id: str,
    request: Request,
    username: str | None = None,
    overlay: bool = True,
    context: AppContext = Depends(get_context),
) -> Response:
    """Face avatar from the first provider that has one.

    *username*, if given, is used for the alternate auth step instead of
    the UUID.
    """
    identifier = normalize(player_id)
    alias = normalize(username, allow_username=True) if username else None
    pipeline = AvatarPipeline(context)
    try:
        source, data = await cancel_on_disconnect(
            request, pipeline.any_avatar(identifier, username=alias, overlay=overlay)
        )
    except ClientDisconnected:
        return Response(status_code=_CLIENT_CLOSED)
    except AllProvidersFailedError as exc:
        logger.info("No provider could serve %s: %s", identifier, exc)
        raise HTTPException(status_code=502, detail="Failed to fetch avatar from any provider")
    logger.debug("Aggregated avatar for %s served by %s", identifier, source.value)
    return _png(data)

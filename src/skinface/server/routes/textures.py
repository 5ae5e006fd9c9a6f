"""Raw signed-texture metadata endpoint.

``GET /textures/signed/{id}`` returns the texture property document that
game clients need to display an authenticated skin.  Managed players are
served from the catalog; everyone else is looked up on the alternate auth
service.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from skinface.identity.identifier import normalize
from skinface.server.context import AppContext, get_context
from skinface.server.disconnect import ClientDisconnected, cancel_on_disconnect
from skinface.server.models import ErrorResponse
from skinface.server.pipeline import AvatarPipeline

router = APIRouter(tags=["textures"])


@router.get(
    "/textures/signed/{player_id}",
    responses={
        200: {"content": {"application/json": {}}},
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def signed_textures(
    player_id: str,
    request: Request,
    context: AppContext = Depends(get_context),
) -> Response:
    identifier = normalize(player_id)
    try:
        body = await cancel_on_disconnect(
            request, AvatarPipeline(context).signed_textures(identifier)
        )
    except ClientDisconnected:
        return Response(status_code=499)
    return Response(content=body, media_type="application/json")

"""Managed identity provider (self-hosted Drasl directory).

Authenticated with a bearer token against the Drasl admin API.  Player
lookups use the dashed UUID form; the profile embeds a direct skin URL
plus model/visibility metadata::

    {"uuid": "...", "name": "...", "skinUrl": "...", "skinModel": "classic", ...}
"""

from __future__ import annotations

from typing import Any

import httpx

from skinface.identity.identifier import PlayerIdentifier
from skinface.identity.types import SkinSource, TextureReference
from skinface.providers.base import DEFAULT_TIMEOUT, TextureProvider


class DraslProvider(TextureProvider):
    """Resolve skins from a private Drasl instance.

    Parameters
    ----------
    client:
        Shared HTTP client.
    base_url:
        Root of the Drasl deployment.  ``None`` or empty means the provider
        is not configured and every lookup reports unavailable.
    token:
        Admin API bearer token.
    """

    source = SkinSource.DRASL

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str | None,
        token: str | None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(client, timeout)
        self._base_url = (base_url or "").rstrip("/")
        self._token = token or ""

    @property
    def configured(self) -> bool:
        return bool(self._base_url)

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}

    def _require_configured(self) -> None:
        if not self.configured:
            raise self._unavailable("no Drasl base URL configured")

    async def fetch_profile(self, identifier: PlayerIdentifier) -> dict[str, Any]:
        self._require_configured()
        if not identifier.is_uuid:
            raise self._not_found("lookups require a UUID")

        resp = await self._get(
            f"{self._base_url}/drasl/api/v2/players/{identifier.dashed}",
            headers=self._headers(),
        )
        profile = self._json(resp)
        if not isinstance(profile, dict):
            raise self._unavailable("player response is not a JSON object")
        return profile

    async def fetch_texture(self, identifier: PlayerIdentifier) -> TextureReference:
        profile = await self.fetch_profile(identifier)
        url = profile.get("skinUrl")
        if not url:
            raise self._not_found(f"player {identifier.dashed} has no skin")
        if not isinstance(url, str):
            raise self._unavailable("skinUrl is not a string")
        return TextureReference(source=self.source, location=url)

    async def list_players(self) -> list[dict[str, Any]]:
        """Return every player in the directory (used by the catalog sync)."""
        self._require_configured()
        resp = await self._get(
            f"{self._base_url}/drasl/api/v2/players", headers=self._headers()
        )
        players = self._json(resp)
        if not isinstance(players, list):
            raise self._unavailable("player list is not a JSON array")
        return [p for p in players if isinstance(p, dict)]

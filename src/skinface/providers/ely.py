"""Alternate auth service provider (Ely.by).

UUID lookups first resolve the player's *current* username from the name
history endpoint (the last entry wins), then derive the skin URL from a
fixed template.  Username lookups skip the history call entirely.
"""

from __future__ import annotations

from urllib.parse import quote

import httpx

from skinface.identity.identifier import PlayerIdentifier
from skinface.identity.types import SkinSource, TextureReference
from skinface.providers.base import DEFAULT_TIMEOUT, TextureProvider

DEFAULT_AUTH_URL = "https://authserver.ely.by"
DEFAULT_SKINSYSTEM_URL = "http://skinsystem.ely.by"


class ElyProvider(TextureProvider):
    """Resolve skins through the Ely.by auth server and skin system."""

    source = SkinSource.ELY

    def __init__(
        self,
        client: httpx.AsyncClient,
        auth_url: str = DEFAULT_AUTH_URL,
        skinsystem_url: str = DEFAULT_SKINSYSTEM_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(client, timeout)
        self._auth_url = auth_url.rstrip("/")
        self._skinsystem_url = skinsystem_url.rstrip("/")

    async def current_username(self, identifier: PlayerIdentifier) -> str:
        """Return the active username for *identifier*.

        Usernames are returned as-is; UUIDs go through the name history.
        """
        if not identifier.is_uuid:
            return identifier.canonical

        resp = await self._get(
            f"{self._auth_url}/api/user/profiles/{identifier.canonical}/names"
        )
        history = self._json(resp)
        if not isinstance(history, list):
            raise self._unavailable("name history is not a JSON array")
        if not history:
            raise self._not_found(f"empty name history for {identifier.canonical}")

        latest = history[-1]
        name = latest.get("name") if isinstance(latest, dict) else None
        if not name:
            raise self._not_found(f"no current name for {identifier.canonical}")
        if not isinstance(name, str):
            raise self._unavailable("name history entry has a non-string name")
        return name

    def skin_url(self, username: str) -> str:
        return f"{self._skinsystem_url}/skins/{quote(username, safe='')}.png"

    async def fetch_texture(self, identifier: PlayerIdentifier) -> TextureReference:
        username = await self.current_username(identifier)
        return TextureReference(source=self.source, location=self.skin_url(username))

    async def fetch_signed_textures(self, identifier: PlayerIdentifier) -> bytes:
        """Return the raw signed-texture JSON document for *identifier*."""
        username = await self.current_username(identifier)
        resp = await self._get(
            f"{self._skinsystem_url}/textures/signed/{quote(username, safe='')}"
        )
        # Validate shape, but hand back the upstream bytes untouched
        self._json(resp)
        return resp.content

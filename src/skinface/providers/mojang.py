"""Official session service provider.

Looks up ``/session/minecraft/profile/{hex}`` and digs the skin URL out of
the base64-encoded ``textures`` property::

    {"id": "...", "name": "...",
     "properties": [{"name": "textures", "value": "<base64 JSON>", "signature": "..."}]}

The decoded property holds ``{"textures": {"SKIN": {"url": "..."}}}``.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

import httpx

from skinface.identity.identifier import PlayerIdentifier
from skinface.identity.types import SignedPayload, SkinSource, TextureReference
from skinface.providers.base import DEFAULT_TIMEOUT, TextureProvider

DEFAULT_SESSION_URL = "https://sessionserver.mojang.com"


def decode_textures_property(value: str) -> dict[str, Any]:
    """Decode a base64 ``textures`` property value into its JSON document.

    Raises:
        ValueError: If *value* is not base64-encoded JSON object text.
    """
    try:
        raw = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("textures property is not valid base64") from exc
    doc = json.loads(raw)
    if not isinstance(doc, dict):
        raise ValueError("textures property is not a JSON object")
    return doc


class MojangProvider(TextureProvider):
    """Resolve skins through the official session server."""

    source = SkinSource.MOJANG

    def __init__(
        self,
        client: httpx.AsyncClient,
        session_url: str = DEFAULT_SESSION_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(client, timeout)
        self._session_url = session_url.rstrip("/")

    async def fetch_texture(self, identifier: PlayerIdentifier) -> TextureReference:
        if not identifier.is_uuid:
            raise self._not_found("lookups require a UUID")

        resp = await self._get(
            f"{self._session_url}/session/minecraft/profile/{identifier.canonical}"
        )
        profile = self._json(resp)
        if not isinstance(profile, dict):
            raise self._unavailable("profile response is not a JSON object")

        properties = profile.get("properties") or []
        if not isinstance(properties, list):
            raise self._unavailable("profile properties is not a JSON array")

        prop = next(
            (
                p
                for p in properties
                if isinstance(p, dict) and p.get("name") == "textures"
            ),
            None,
        )
        if prop is None or not prop.get("value"):
            raise self._not_found(f"profile {identifier.canonical} has no textures property")
        if not isinstance(prop["value"], str):
            raise self._unavailable("textures property value is not a string")

        try:
            textures = decode_textures_property(prop["value"])
        except ValueError as exc:
            raise self._unavailable(f"undecodable textures property: {exc}") from exc

        entries = textures.get("textures") or {}
        if not isinstance(entries, dict):
            raise self._unavailable("decoded textures is not a JSON object")
        skin = entries.get("SKIN") or {}
        if not isinstance(skin, dict):
            raise self._unavailable("decoded SKIN entry is not a JSON object")
        url = skin.get("url")
        if not url:
            raise self._not_found(f"profile {identifier.canonical} has no skin URL")
        if not isinstance(url, str):
            raise self._unavailable("skin URL is not a string")

        return TextureReference(
            source=self.source,
            location=url,
            signed=SignedPayload(value=prop["value"], signature=prop.get("signature")),
        )

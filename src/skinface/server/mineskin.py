"""Texture-signing client for the MineSkin API.

Uploads a skin URL and gets back a ``(value, signature)`` texture property
that game clients accept as authentic.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from skinface.identity.errors import TextureSigningError
from skinface.identity.types import SignedPayload

logger = logging.getLogger(__name__)

# Signing involves a server-side render; allow more time than lookups
SIGNING_TIMEOUT: float = 60.0


class MineSkinClient:
    """Thin wrapper over ``POST /v2/generate``."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        token: str | None,
        timeout: float = SIGNING_TIMEOUT,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._token = token or ""
        self._timeout = timeout

    async def sign(self, *, name: str, url: str, variant: str = "classic") -> SignedPayload:
        """Sign the skin at *url*.

        Raises:
            TextureSigningError: On transport failure, non-2xx, or a response
                without both value and signature.
        """
        payload = {
            "variant": variant or "classic",
            "name": name,
            "visibility": "public",
            "url": url,
        }
        logger.info("Uploading %s to texture signer", name)
        try:
            resp = await asyncio.wait_for(
                self._client.post(
                    f"{self._base_url}/v2/generate",
                    json=payload,
                    headers={
                        "Accept": "application/json",
                        "Authorization": f"Bearer {self._token}",
                    },
                ),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, httpx.HTTPError) as exc:
            raise TextureSigningError(f"Signing request for {name} failed: {exc!r}") from exc

        if not resp.is_success:
            raise TextureSigningError(
                f"Signing request for {name} returned HTTP {resp.status_code}: {resp.text[:200]}"
            )

        try:
            data = resp.json()["skin"]["texture"]["data"]
            value = data["value"]
            signature = data["signature"]
        except (ValueError, KeyError, TypeError) as exc:
            raise TextureSigningError(f"Unexpected signing response for {name}") from exc

        if not value or not signature:
            raise TextureSigningError(f"Signing response for {name} is missing value or signature")
        return SignedPayload(value=value, signature=signature)

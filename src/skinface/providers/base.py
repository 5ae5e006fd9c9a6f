"""Pluggable texture provider interface.

Each upstream identity service gets one :class:`TextureProvider`
subclass that turns a :class:`PlayerIdentifier` into a
:class:`TextureReference`.  Providers hold no mutable state beyond the
shared, connection-pooled ``httpx.AsyncClient`` they are handed, so a
single instance is safe to use from concurrent requests.
"""

from __future__ import annotations

import abc
import asyncio
import logging
from typing import Any

import httpx

from skinface.identity.errors import ProfileNotFoundError, ProviderUnavailableError
from skinface.identity.identifier import PlayerIdentifier
from skinface.identity.types import SkinSource, TextureReference

logger = logging.getLogger(__name__)

# Upper bound for one whole upstream exchange (seconds)
DEFAULT_TIMEOUT: float = 5.0

# Statuses that mean "this provider has no such player" rather than an outage.
# Mojang's session server answers 204 No Content for unknown UUIDs.
_NOT_FOUND_STATUSES = frozenset({204, 404})


class TextureProvider(abc.ABC):
    """Resolve a player to the location of their skin sheet.

    Implementations raise :class:`ProfileNotFoundError` when the upstream
    has no usable skin and :class:`ProviderUnavailableError` for transport
    errors, timeouts, unexpected statuses or malformed bodies.
    """

    source: SkinSource

    def __init__(self, client: httpx.AsyncClient, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._client = client
        self._timeout = timeout

    @abc.abstractmethod
    async def fetch_texture(self, identifier: PlayerIdentifier) -> TextureReference:
        """Return the texture reference for *identifier*.

        Raises:
            ProfileNotFoundError: The provider has no skin for this player.
            ProviderUnavailableError: The provider could not be reached or
                answered with something unusable.
        """

    # -- helpers shared by subclasses ---------------------------------------

    def _not_found(self, message: str) -> ProfileNotFoundError:
        return ProfileNotFoundError(self.source, f"{self.source.value}: {message}")

    def _unavailable(self, message: str) -> ProviderUnavailableError:
        return ProviderUnavailableError(self.source, f"{self.source.value}: {message}")

    async def _get(self, url: str, *, headers: dict[str, str] | None = None) -> httpx.Response:
        """GET *url* with a hard deadline, mapping every failure to an error kind."""
        try:
            resp = await asyncio.wait_for(
                self._client.get(url, headers=headers), timeout=self._timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise self._unavailable(f"timed out after {self._timeout:.1f}s fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise self._unavailable(f"transport error fetching {url}: {exc}") from exc

        if resp.status_code in _NOT_FOUND_STATUSES:
            raise self._not_found(f"no record at {url} (HTTP {resp.status_code})")
        if not resp.is_success:
            raise self._unavailable(f"HTTP {resp.status_code} from {url}")
        logger.debug("%s answered %d for %s", self.source.value, resp.status_code, url)
        return resp

    def _json(self, resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise self._unavailable(f"malformed JSON from {resp.request.url}") from exc

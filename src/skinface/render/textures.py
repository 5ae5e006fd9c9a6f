"""Skin sheet download.

Fetches the bytes behind a :class:`TextureReference` with the shared
HTTP client and a hard deadline.  Any failure is reported as the owning
provider being unavailable, so the caller can treat it like any other
upstream outage.
"""

from __future__ import annotations

import asyncio

import httpx

from skinface.identity.errors import ProviderUnavailableError
from skinface.identity.types import TextureReference
from skinface.providers.base import DEFAULT_TIMEOUT


async def fetch_texture_bytes(
    client: httpx.AsyncClient,
    reference: TextureReference,
    timeout: float = DEFAULT_TIMEOUT,
) -> bytes:
    """Download the skin sheet at ``reference.location``.

    Raises:
        ProviderUnavailableError: On timeout, transport error or non-2xx.
    """
    source = reference.source
    url = reference.location
    try:
        resp = await asyncio.wait_for(client.get(url), timeout=timeout)
        resp.raise_for_status()
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise ProviderUnavailableError(
            source, f"{source.value}: timed out downloading texture {url}"
        ) from exc
    except httpx.HTTPStatusError as exc:
        raise ProviderUnavailableError(
            source, f"{source.value}: HTTP {exc.response.status_code} downloading texture {url}"
        ) from exc
    except httpx.HTTPError as exc:
        raise ProviderUnavailableError(
            source, f"{source.value}: transport error downloading texture {url}: {exc}"
        ) from exc
    return resp.content

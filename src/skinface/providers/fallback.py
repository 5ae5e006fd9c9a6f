"""Ordered fallback across providers.

Providers are tried strictly one after another in the order given.  The
first success wins and later providers are never invoked; a provider
failure (not found or unavailable) moves on to the next one.  There is no
fan-out: every attempt is a rate-sensitive network round trip.

The same first-success policy is reused one level up by the aggregation
route, which chains whole resolve+render pipelines instead of providers.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import TypeVar

from skinface.identity.errors import AllProvidersFailedError, ProviderError, SkinFaceError
from skinface.identity.identifier import PlayerIdentifier
from skinface.identity.types import TextureReference
from skinface.providers.base import TextureProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def first_success(
    attempts: Iterable[tuple[str, Callable[[], Awaitable[T]]]],
    *,
    absorb: tuple[type[SkinFaceError], ...] = (ProviderError,),
) -> T:
    """Run *attempts* in order and return the first result.

    Each attempt is a ``(label, factory)`` pair; the factory is only called
    when its turn comes.  Exceptions listed in *absorb* are collected and
    the next attempt runs; anything else propagates immediately.

    Raises:
        AllProvidersFailedError: Every attempt raised an absorbed error.
    """
    errors: list[SkinFaceError] = []
    for label, factory in attempts:
        try:
            result = await factory()
        except absorb as exc:
            logger.info("Fallback: %s failed (%s), trying next", label, exc)
            errors.append(exc)
            continue
        if errors:
            logger.debug("Fallback: %s succeeded after %d failure(s)", label, len(errors))
        return result
    raise AllProvidersFailedError(errors)


async def resolve_texture(
    identifier: PlayerIdentifier,
    providers: Sequence[TextureProvider],
) -> TextureReference:
    """Return the first texture reference any of *providers* yields.

    A single-provider route calls this with a one-element list.

    Raises:
        AllProvidersFailedError: Every provider reported not-found or
            unavailable; ``last_error`` carries the final provider's error.
    """
    return await first_success(
        (
            (provider.source.value, lambda p=provider: p.fetch_texture(identifier))
            for provider in providers
        ),
    )

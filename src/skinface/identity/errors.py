"""skinface exception hierarchy.

All pipeline exceptions inherit from :class:`SkinFaceError`.  Fallback
decisions are made on the exception *type*, never on its message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from skinface.identity.types import SkinSource


class SkinFaceError(Exception):
    """Base exception for all skinface errors."""


class InvalidIdentifierError(SkinFaceError):
    """Raised when a raw identifier is neither a UUID nor an accepted username."""


class ProviderError(SkinFaceError):
    """Base for failures reported by a single upstream provider."""

    def __init__(self, source: SkinSource, message: str = "") -> None:
        super().__init__(message)
        self.source = source


class ProfileNotFoundError(ProviderError):
    """The provider answered cleanly but has no usable skin for the player."""


class ProviderUnavailableError(ProviderError):
    """Transport failure, timeout, non-2xx status or malformed upstream body."""


class AllProvidersFailedError(SkinFaceError):
    """Raised when every provider in a fallback chain failed.

    ``errors`` holds one entry per attempt in trial order; ``last_error``
    is the final one and drives the HTTP status of single-provider routes.
    """

    def __init__(self, errors: list[SkinFaceError]) -> None:
        self.errors = list(errors)
        self.last_error: SkinFaceError | None = self.errors[-1] if self.errors else None
        summary = "; ".join(str(e) for e in self.errors) or "no providers configured"
        super().__init__(f"All providers failed: {summary}")


class RenderError(SkinFaceError):
    """Base for image processing failures (never retried)."""


class TextureDecodeError(RenderError):
    """The texture bytes are not a decodable skin sheet."""


class TextureEncodeError(RenderError):
    """The rendered avatar could not be encoded as PNG."""


class CacheUnavailableError(SkinFaceError):
    """A cache read or write failed (soft failure, never surfaced to callers)."""


class TextureSigningError(SkinFaceError):
    """The texture-signing service rejected or failed a signing request."""

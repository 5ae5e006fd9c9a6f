"""skinface identity layer -- identifiers, value types and the error taxonomy.

Public API re-exports for ``skinface.identity``.
"""

from skinface.identity.types import (
    AVATAR_SIZE,
    IdentifierKind,
    RenderedAvatar,
    SignedPayload,
    SkinSource,
    TextureReference,
)

from skinface.identity.errors import (
    SkinFaceError,
    InvalidIdentifierError,
    ProviderError,
    ProfileNotFoundError,
    ProviderUnavailableError,
    AllProvidersFailedError,
    RenderError,
    TextureDecodeError,
    TextureEncodeError,
    CacheUnavailableError,
    TextureSigningError,
)

from skinface.identity.identifier import PlayerIdentifier, normalize, undash

__all__ = [
    # Types
    "AVATAR_SIZE",
    "IdentifierKind",
    "RenderedAvatar",
    "SignedPayload",
    "SkinSource",
    "TextureReference",
    # Errors
    "SkinFaceError",
    "InvalidIdentifierError",
    "ProviderError",
    "ProfileNotFoundError",
    "ProviderUnavailableError",
    "AllProvidersFailedError",
    "RenderError",
    "TextureDecodeError",
    "TextureEncodeError",
    "CacheUnavailableError",
    "TextureSigningError",
    # Identifiers
    "PlayerIdentifier",
    "normalize",
    "undash",
]

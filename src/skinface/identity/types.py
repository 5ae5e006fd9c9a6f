"""Core value types shared across the resolve/render pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Output edge length of every rendered face, in pixels
AVATAR_SIZE = 96


class SkinSource(str, Enum):
    """Upstream identity providers.

    Declaration order is the aggregation priority: managed identity first,
    then the official session service, then the alternate auth service.
    Using ``str, Enum`` so that ``SkinSource.MOJANG == "mojang"`` is True.
    """

    DRASL = "drasl"
    MOJANG = "mojang"
    ELY = "ely"


class IdentifierKind(str, Enum):
    UUID = "uuid"
    USERNAME = "username"


@dataclass(frozen=True)
class SignedPayload:
    """An upstream-issued ``(value, signature)`` texture property.

    Opaque to rendering; only the catalog and the raw metadata route care.
    """

    value: str
    signature: str | None = None


@dataclass(frozen=True)
class TextureReference:
    """Where a player's skin sheet lives, as reported by one provider."""

    source: SkinSource
    location: str
    signed: SignedPayload | None = None


@dataclass(frozen=True)
class RenderedAvatar:
    """A finished face avatar (PNG bytes)."""

    data: bytes
    width: int = AVATAR_SIZE
    height: int = AVATAR_SIZE
    overlay: bool = True

"""Player identifier parsing and canonicalization.

A player is addressed either by UUID (dashed or undashed, any case) or,
for providers that support it, by username.  UUIDs are canonicalized to
32 lowercase hex characters; the dashed ``8-4-4-4-12`` form is derived on
demand and never stored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from skinface.identity.errors import InvalidIdentifierError
from skinface.identity.types import IdentifierKind

_HEX_UUID_RE = re.compile(r"^[0-9a-f]{32}$")

# Dashed UUID group boundaries
_GROUPS = ((0, 8), (8, 12), (12, 16), (16, 20), (20, 32))


@dataclass(frozen=True)
class PlayerIdentifier:
    """A validated player identifier.

    ``raw`` is kept for diagnostics only and does not take part in
    equality, so re-normalizing the canonical form yields an equal value.
    """

    kind: IdentifierKind
    canonical: str
    raw: str = field(default="", compare=False)

    @property
    def is_uuid(self) -> bool:
        return self.kind is IdentifierKind.UUID

    @property
    def dashed(self) -> str:
        """Return the ``xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx`` form.

        Raises:
            InvalidIdentifierError: If this identifier is a username.
        """
        if not self.is_uuid:
            raise InvalidIdentifierError(
                f"Username {self.canonical!r} has no UUID form"
            )
        return "-".join(self.canonical[a:b] for a, b in _GROUPS)

    def __str__(self) -> str:
        return self.canonical


def undash(dashed: str) -> str:
    """Inverse of :attr:`PlayerIdentifier.dashed` (pure, no validation)."""
    return dashed.replace("-", "").lower()


def normalize(raw: str, *, allow_username: bool = False) -> PlayerIdentifier:
    """Parse and canonicalize a raw player identifier.

    Strips whitespace and hyphens, then requires exactly 32 hex characters
    (case-insensitive).  When *allow_username* is set, anything that is not
    UUID-shaped is accepted verbatim (after trimming) as a username.

    Raises:
        InvalidIdentifierError: If *raw* is empty, or is not a UUID and
            usernames are not allowed.
    """
    trimmed = raw.strip()
    if not trimmed:
        raise InvalidIdentifierError("Empty player identifier")

    candidate = trimmed.replace("-", "").lower()
    if _HEX_UUID_RE.match(candidate):
        return PlayerIdentifier(kind=IdentifierKind.UUID, canonical=candidate, raw=raw)

    if allow_username:
        return PlayerIdentifier(kind=IdentifierKind.USERNAME, canonical=trimmed, raw=raw)

    raise InvalidIdentifierError(f"Invalid UUID: {raw!r}")

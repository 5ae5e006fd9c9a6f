"""skinface provider strategies -- one per upstream identity service."""

from skinface.providers.base import DEFAULT_TIMEOUT, TextureProvider
from skinface.providers.drasl import DraslProvider
from skinface.providers.ely import ElyProvider
from skinface.providers.fallback import first_success, resolve_texture
from skinface.providers.mojang import MojangProvider

__all__ = [
    "DEFAULT_TIMEOUT",
    "TextureProvider",
    "DraslProvider",
    "ElyProvider",
    "MojangProvider",
    "first_success",
    "resolve_texture",
]

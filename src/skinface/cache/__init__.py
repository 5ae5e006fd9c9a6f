"""skinface cache -- TTL backends and the cache-aside layer."""

from skinface.cache.backends import (
    DEFAULT_CACHE_TIMEOUT,
    CacheBackend,
    MemoryCacheBackend,
    RedisCacheBackend,
    create_cache_backend,
)
from skinface.cache.layer import (
    AVATAR_NAMESPACE,
    CACHE_TTL,
    TEXTURE_DATA_NAMESPACE,
    AvatarCache,
    avatar_key,
    texture_data_key,
)

__all__ = [
    "DEFAULT_CACHE_TIMEOUT",
    "CacheBackend",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "create_cache_backend",
    "AVATAR_NAMESPACE",
    "CACHE_TTL",
    "TEXTURE_DATA_NAMESPACE",
    "AvatarCache",
    "avatar_key",
    "texture_data_key",
]

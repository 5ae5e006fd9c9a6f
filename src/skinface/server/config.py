"""Server configuration from environment variables."""

from __future__ import annotations

import os


def _flag(name: str, default: str = "") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings:
    """Server settings, read from environment variables with defaults.

    Read once at process start and treated as immutable afterwards.
    """

    def __init__(self) -> None:
        # Upstream identity services
        self.mojang_session_url: str = os.getenv(
            "SKINFACE_MOJANG_SESSION_URL", "https://sessionserver.mojang.com"
        )
        self.ely_auth_url: str = os.getenv(
            "SKINFACE_ELY_AUTH_URL", "https://authserver.ely.by"
        )
        self.ely_skinsystem_url: str = os.getenv(
            "SKINFACE_ELY_SKINSYSTEM_URL", "http://skinsystem.ely.by"
        )
        self.drasl_url: str | None = os.getenv("SKINFACE_DRASL_URL") or None
        self.drasl_token: str | None = os.getenv("SKINFACE_DRASL_TOKEN") or None
        # Texture signing service
        self.mineskin_url: str = os.getenv(
            "SKINFACE_MINESKIN_URL", "https://api.mineskin.org"
        )
        self.mineskin_token: str | None = os.getenv("SKINFACE_MINESKIN_TOKEN") or None
        # Storage
        self.cache_url: str = os.getenv("SKINFACE_CACHE_URL", "redis://localhost:6379/0")
        self.database_url: str = os.getenv(
            "SKINFACE_DATABASE_URL", "sqlite+aiosqlite:///skinface.db"
        )
        # Timeouts (seconds)
        self.upstream_timeout: float = float(os.getenv("SKINFACE_UPSTREAM_TIMEOUT", "5.0"))
        self.cache_timeout: float = float(os.getenv("SKINFACE_CACHE_TIMEOUT", "2.0"))
        # Catalog sync
        self.catalog_sync_enabled: bool = _flag("SKINFACE_CATALOG_SYNC_ENABLED", "true")
        self.catalog_sync_interval: float = float(
            os.getenv("SKINFACE_CATALOG_SYNC_INTERVAL", "86400")
        )
        # Logging
        self.log_level: str = os.getenv("SKINFACE_LOG_LEVEL", "INFO").upper()
        self.debug: bool = _flag("SKINFACE_DEBUG")

    @property
    def catalog_sync_configured(self) -> bool:
        """True when both the managed directory and the signer are reachable."""
        return bool(self.drasl_url and self.drasl_token and self.mineskin_token)

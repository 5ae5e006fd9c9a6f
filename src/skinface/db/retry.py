"""Retry logic for transient catalog database errors.

Catches SQLAlchemy operational errors that indicate a dropped connection
or lock contention and retries with exponential backoff.  Everything else
(constraint violations, programming errors) is re-raised immediately.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_RETRIES: int = 3
BASE_DELAY: float = 0.1  # 100ms
MAX_DELAY: float = 2.0
BACKOFF_FACTOR: float = 2.0

_TRANSIENT_PATTERNS = (
    "connection refused",
    "connection reset",
    "connection lost",
    "deadlock",
    "database is locked",
    "timeout",
    "server closed",
    "broken pipe",
)


def is_transient_error(exc: Exception) -> bool:
    """Return True if *exc* is a database error worth retrying."""
    if isinstance(exc, OperationalError):
        msg = str(exc).lower()
        return any(p in msg for p in _TRANSIENT_PATTERNS)
    if isinstance(exc, DBAPIError):
        return bool(exc.connection_invalidated)
    return False


def db_retry(
    max_retries: int = MAX_RETRIES,
    base_delay: float = BASE_DELAY,
    max_delay: float = MAX_DELAY,
    backoff_factor: float = BACKOFF_FACTOR,
) -> Callable:
    """Decorator that retries an async catalog operation on transient errors.

    Usage::

        @db_retry()
        async def upsert(session: AsyncSession, ...) -> SignedTexture:
            ...
    """

    def decorator(
        func: Callable[..., Coroutine[Any, Any, T]],
    ) -> Callable[..., Coroutine[Any, Any, T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except (OperationalError, DBAPIError) as exc:
                    if not is_transient_error(exc) or attempt >= max_retries:
                        raise
                    delay = min(base_delay * (backoff_factor**attempt), max_delay)
                    attempt += 1
                    logger.warning(
                        "Transient DB error in %s (attempt %d/%d), retrying in %.2fs: %s",
                        func.__name__,
                        attempt,
                        max_retries + 1,
                        delay,
                        exc,
                    )
                    await asyncio.sleep(delay)

        return wrapper

    return decorator

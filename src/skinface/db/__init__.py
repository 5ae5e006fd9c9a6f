"""skinface catalog database package.

Re-exports the table model, engine factory and session helpers::

    from skinface.db import SignedTexture, async_session_factory, create_tables
"""

from skinface.db.engine import create_async_engine_from_url
from skinface.db.models import SignedTexture
from skinface.db.retry import db_retry, is_transient_error
from skinface.db.session import async_session_factory, create_tables

__all__ = [
    "create_async_engine_from_url",
    "SignedTexture",
    "db_retry",
    "is_transient_error",
    "async_session_factory",
    "create_tables",
]

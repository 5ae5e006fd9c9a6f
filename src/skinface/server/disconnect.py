"""Abandon in-flight work when the HTTP client goes away.

The pipeline runs as its own task while the request watches the ASGI
receive channel.  If the client disconnects first, the task is cancelled;
since cache writes only happen after a successful compute, an abandoned
request never leaves a partial entry behind.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from starlette.requests import Request

logger = logging.getLogger(__name__)

T = TypeVar("T")

# How often to check for a disconnect while work is pending (seconds)
POLL_INTERVAL: float = 0.25


class ClientDisconnected(Exception):
    """The client hung up before the response was ready."""


async def cancel_on_disconnect(
    request: Request,
    work: Awaitable[T],
    poll_interval: float = POLL_INTERVAL,
) -> T:
    """Await *work*, cancelling it if *request*'s client disconnects.

    Raises:
        ClientDisconnected: The client left and *work* was cancelled.
    """
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info("Client disconnected from %s, abandoning work", request.url.path)
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
                raise ClientDisconnected(request.url.path)
    finally:
        if not task.done():
            task.cancel()

"""
Stop request work when the client goes away.

The wrapped coroutine runs as its own task while the request is polled for
`http.disconnect`. On disconnect the task is cancelled: asyncpg cancels the
running statement and the pooled connection goes back to the pool.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from fastapi import HTTPException, Request

# nginx's "client closed request"; nobody is left to read it.
CLIENT_CLOSED_REQUEST = 499
DISCONNECT_POLL_S = 0.1

T = TypeVar("T")

logger = logging.getLogger(__name__)


async def run_until_disconnect(request: Request, work: Awaitable[T]) -> T:
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_S)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info("client_disconnected path=%s", request.url.path)
                raise HTTPException(status_code=CLIENT_CLOSED_REQUEST, detail="Client closed request")
    finally:
        if not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

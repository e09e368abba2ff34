"""
Bounded-wait acquisition for asyncio locks.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from .errors import LockTimeoutError

logger = logging.getLogger("tools5e-taglinks")


@asynccontextmanager
async def bounded_lock(
    lock: asyncio.Lock, timeout: float, name: str
) -> AsyncIterator[None]:
    """Hold ``lock`` for the duration of the block.

    Waits at most ``timeout`` seconds for the lock and raises
    LockTimeoutError instead of blocking forever. The lock is released on
    every exit path once acquired.

    Raises:
        LockTimeoutError: If the lock was not acquired in time.
    """
    try:
        await asyncio.wait_for(lock.acquire(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Lock '{name}' not acquired within {timeout}s")
        raise LockTimeoutError(name, timeout) from None
    try:
        yield
    finally:
        lock.release()

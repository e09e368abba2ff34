"""
Memoized entity resolutions keyed by tag hash.

Only successful resolutions are stored; a hash that failed to resolve is
recomputed on every call.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .locking import bounded_lock
from .matcher import EntityMatcher
from .models import EntityKind, ResolvedEntity

logger = logging.getLogger("tools5e-taglinks")

RESOLUTION_CACHE_LOCK_TIMEOUT = 0.1


class EntityResolutionCache:
    """Caches EntityMatcher results under caller-supplied hashes."""

    def __init__(
        self,
        matcher: EntityMatcher | None = None,
        lock_timeout: float = RESOLUTION_CACHE_LOCK_TIMEOUT,
    ):
        self._matcher = matcher or EntityMatcher()
        self.lock_timeout = lock_timeout
        self._entries: dict[str, ResolvedEntity] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, hash: str) -> bool:
        return hash in self._entries

    async def resolve(
        self,
        hash: str,
        kind: EntityKind | str,
        documents: list[Any],
        name: str,
        source: str,
    ) -> ResolvedEntity | None:
        """
        Return the cached resolution for ``hash`` or compute and store it.

        Raises:
            LockTimeoutError: If the cache lock is not acquired in time.
            UnsupportedKindError: Propagated from the matcher.
        """
        async with bounded_lock(self._lock, self.lock_timeout, "resolution cache"):
            cached = self._entries.get(hash)
            if cached is not None:
                logger.debug(f"Resolution cache hit: {hash}")
                return cached

            result = self._matcher.match(kind, documents, name, source)
            if result is not None:
                self._entries[hash] = result
            return result

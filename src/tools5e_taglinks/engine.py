"""
Tag resolution engine.

One engine instance owns a session's homebrew index, file cache and
resolution cache. Nothing is shared between instances, so separate
sessions (or tests) never see each other's data.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

import httpx

from .config import TagLinkSettings
from .errors import EntityNotFoundError
from .fetcher import JsonFetcher
from .file_cache import FILE_CACHE_LOCK_TIMEOUT, RemoteFileCache
from .homebrew import HomebrewIndexLoader
from .matcher import EntityMatcher
from .models import ResolvedEntity
from .resolution_cache import RESOLUTION_CACHE_LOCK_TIMEOUT, EntityResolutionCache

logger = logging.getLogger("tools5e-taglinks")

# Fetches run under the file cache lock and must finish within FILE_CACHE_LOCK_TIMEOUT
CACHE_FETCH_RETRIES = 1
CACHE_FETCH_TIMEOUT = 1.5


def log_notice(message: str) -> None:
    """Default notifier: user notices go to the log."""
    logger.info(f"Notice: {message}")


class TagResolutionEngine:
    """
    Resolves tags to game-data entities, caching fetched files and results.

    Usage:
        async with TagResolutionEngine(settings) as engine:
            engine.start()
            resolved = await engine.resolve_tag("@spell", "PHB", "fireball_phb", "Fireball")
    """

    def __init__(
        self,
        settings: TagLinkSettings | None = None,
        client: httpx.AsyncClient | None = None,
        notify: Callable[[str], None] | None = None,
        matcher: EntityMatcher | None = None,
        fetcher: JsonFetcher | None = None,
        file_lock_timeout: float = FILE_CACHE_LOCK_TIMEOUT,
        resolution_lock_timeout: float = RESOLUTION_CACHE_LOCK_TIMEOUT,
    ):
        self.settings = settings or TagLinkSettings()
        self.notify = notify or log_notice
        self.matcher = matcher or EntityMatcher()
        self.file_lock_timeout = file_lock_timeout
        self.resolution_lock_timeout = resolution_lock_timeout
        self._fetcher = fetcher or JsonFetcher(
            client, max_retries=CACHE_FETCH_RETRIES, timeout=CACHE_FETCH_TIMEOUT
        )
        self._start_task: asyncio.Task | None = None

        self.homebrew = HomebrewIndexLoader(self._fetcher, self.settings, self.notify)
        self.file_cache = self._new_file_cache()
        self.resolution_cache = self._new_resolution_cache()

    def _new_file_cache(self) -> RemoteFileCache:
        return RemoteFileCache(
            self._fetcher,
            self.settings,
            self.homebrew,
            self.notify,
            lock_timeout=self.file_lock_timeout,
        )

    def _new_resolution_cache(self) -> EntityResolutionCache:
        return EntityResolutionCache(
            self.matcher, lock_timeout=self.resolution_lock_timeout
        )

    def start(self) -> asyncio.Task:
        """Begin loading the homebrew index in the background.

        Only the first call starts a load; later calls return the same task.
        """
        if self._start_task is None:
            self._start_task = self.homebrew.start()
        return self._start_task

    async def reset(self) -> bool:
        """
        Drop all cached data and reload the homebrew index.

        A pending initial index load is awaited first so it cannot overwrite
        the reloaded index afterwards. Both caches are then swapped for empty
        instances; resolutions already holding the old caches finish against
        them.

        Returns:
            True if the homebrew index was reloaded.
        """
        self.notify("Clearing cached data...")
        await self.homebrew.wait_started()
        self.file_cache = self._new_file_cache()
        self.resolution_cache = self._new_resolution_cache()
        self.homebrew.clear()

        loaded = await self.homebrew.load()
        if loaded:
            self.notify("Cached data cleared")
        else:
            self.notify("Cached data cleared, but the homebrew index could not be reloaded")
        logger.info(f"Engine reset (homebrew index loaded: {loaded})")
        return loaded

    async def resolve_tag(
        self, kind: str, source: str, hash: str, name: str
    ) -> ResolvedEntity | None:
        """
        Resolve one tag to its entity and source metadata.

        Returns:
            The resolved entity, or None when the kind has no data files
            (the caller renders a plain link).

        Raises:
            EntityNotFoundError: No loaded file holds a matching entry, or
                every candidate file failed to load.
            UnsupportedKindError: Files were found (e.g. a homebrew override)
                but the kind cannot be searched.
            LockTimeoutError: A cache lock was not acquired in time.
        """
        kind = kind.lstrip("@").lower()
        source = source.lower()
        file_cache = self.file_cache
        resolution_cache = self.resolution_cache

        files = await file_cache.load_files(kind, source)
        if not files:
            logger.debug(f"No data files for kind '{kind}'")
            return None

        documents = [f.content for f in files if f.is_loaded]
        if not documents:
            raise EntityNotFoundError(kind, name, source)

        result = await resolution_cache.resolve(hash, kind, documents, name, source)
        if result is None:
            raise EntityNotFoundError(kind, name, source)
        return result

    async def aclose(self) -> None:
        await self._fetcher.aclose()

    async def __aenter__(self) -> TagResolutionEngine:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

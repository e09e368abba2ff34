"""
Session cache of raw data files.

Each remote JSON file is fetched at most once per cache instance. Failed
fetches are remembered as FETCH_FAILED so they are not retried until the
cache is replaced by a reset.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from .config import TagLinkSettings
from .errors import NetworkFetchError
from .fetcher import JsonFetcher
from .homebrew import HomebrewIndexLoader
from .locking import bounded_lock
from .models import FileState, LoadedFile
from .sources import candidate_paths

logger = logging.getLogger("tools5e-taglinks")

FILE_CACHE_LOCK_TIMEOUT = 2.0


class RemoteFileCache:
    """
    Memoizes fetched data files by path.

    A single lock guards the whole cache: one load_files() call holds it
    across every miss it finds, so concurrent first requests for the same
    file collapse into one fetch. Unrelated fetches are serialized as well.
    """

    def __init__(
        self,
        fetcher: JsonFetcher,
        settings: TagLinkSettings,
        homebrew: HomebrewIndexLoader,
        notify: Callable[[str], None],
        lock_timeout: float = FILE_CACHE_LOCK_TIMEOUT,
    ):
        self._fetcher = fetcher
        self._settings = settings
        self._homebrew = homebrew
        self._notify = notify
        self.lock_timeout = lock_timeout
        self._files: dict[str, LoadedFile] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._files)

    def state_of(self, path: str) -> FileState:
        entry = self._files.get(path)
        return entry.state if entry else FileState.NOT_FETCHED

    def _targets(self, kind: str, source: str) -> list[tuple[str, str]]:
        """(path, url) pairs to load for a kind and lowercased source."""
        override = self._homebrew.lookup(source)
        if override:
            return [(override, self._settings.homebrew_file_url(override))]
        return [
            (path, self._settings.tools_data_url(path))
            for path in candidate_paths(kind, source)
        ]

    async def load_files(self, kind: str, source: str) -> list[LoadedFile]:
        """
        Return the candidate files for ``kind`` and ``source``, fetching misses.

        A homebrew override for the source replaces the official file list
        entirely. An empty result means the kind has no data files.

        Raises:
            LockTimeoutError: If the cache lock is not acquired in time.
        """
        source = source.lower()
        targets = self._targets(kind, source)
        if not targets:
            return []

        async with bounded_lock(self._lock, self.lock_timeout, "file cache"):
            for path, url in targets:
                if path in self._files:
                    logger.debug(f"File cache hit: {path} ({self._files[path].state.value})")
                    continue
                self._files[path] = await self._fetch(path, url)
            return [self._files[path] for path, _ in targets]

    async def _fetch(self, path: str, url: str) -> LoadedFile:
        try:
            content = await self._fetcher.fetch_json(url)
        except NetworkFetchError as e:
            logger.warning(f"Caching failed fetch for {path}: {e}")
            self._notify(f"Could not get json '{path}'")
            return LoadedFile(path=path, state=FileState.FETCH_FAILED)

        logger.info(f"Fetched {path}")
        return LoadedFile(path=path, state=FileState.LOADED, content=content)

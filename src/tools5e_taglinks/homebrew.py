"""
Homebrew source index.

The homebrew repository publishes an index mapping each homebrew source
code to the file that defines it. Sources present in the index are loaded
from that file instead of the official data files.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from .config import TagLinkSettings
from .errors import NetworkFetchError
from .fetcher import JsonFetcher

logger = logging.getLogger("tools5e-taglinks")


class HomebrewIndexLoader:
    """Holds the session's homebrew index and (re)loads it on demand.

    The index is replaced wholesale on each successful load, never merged.
    A failed load leaves the current index untouched.
    """

    def __init__(
        self,
        fetcher: JsonFetcher,
        settings: TagLinkSettings,
        notify: Callable[[str], None],
    ):
        self._fetcher = fetcher
        self._settings = settings
        self._notify = notify
        self._index: dict[str, str] = {}
        self._task: asyncio.Task | None = None

    @property
    def index(self) -> dict[str, str]:
        return dict(self._index)

    def lookup(self, source: str) -> str | None:
        """Override file path for ``source``, if the index has one."""
        return self._index.get(source.lower())

    def clear(self) -> None:
        self._index = {}

    async def load(self) -> bool:
        """Fetch the index and replace the in-memory copy.

        Returns:
            True if the index was loaded, False if the fetch failed.
        """
        url = self._settings.homebrew_index_url
        try:
            data = await self._fetcher.fetch_json(url)
        except NetworkFetchError as e:
            logger.warning(f"Homebrew index load failed: {e}")
            self._notify(f"Could not get homebrew index from url '{url}'. Check your settings")
            return False

        if not isinstance(data, dict):
            logger.warning(f"Homebrew index at {url} is not a JSON object")
            self._notify(f"Could not get homebrew index from url '{url}'. Check your settings")
            return False

        self._index = {
            str(code).lower(): path
            for code, path in data.items()
            if isinstance(path, str)
        }
        logger.info(f"Loaded homebrew index: {len(self._index)} sources")
        return True

    def start(self) -> asyncio.Task:
        """Schedule a load in the background without waiting for it."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.load())
        return self._task

    async def wait_started(self) -> None:
        """Wait for a background load started by start(), if any."""
        if self._task is not None:
            await self._task

"""
HTTP JSON fetching with retry.

Retries timeouts, 5xx responses and rate limiting with exponential backoff.
Any other failure, including a body that is not valid JSON, surfaces as
NetworkFetchError.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from .errors import NetworkFetchError

logger = logging.getLogger("tools5e-taglinks")

DEFAULT_TIMEOUT = 10.0
MAX_RETRIES = 3
RETRY_BACKOFF = 2.0


class JsonFetcher:
    """Fetches JSON documents over HTTP using a shared httpx.AsyncClient."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        max_retries: int = MAX_RETRIES,
        retry_backoff: float = RETRY_BACKOFF,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout, follow_redirects=True
        )
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff

    async def fetch_json(self, url: str) -> Any:
        """
        Fetch and parse a JSON document.

        Raises:
            NetworkFetchError: If the fetch fails after all retries, the
                server answers with a 4xx status, or the body is not JSON.
        """
        last_error: Exception | str | None = None

        for attempt in range(self.max_retries):
            try:
                response = await self._client.get(url)

                if response.status_code == 429:
                    logger.warning(
                        f"Rate limited fetching {url}, "
                        f"attempt {attempt + 1}/{self.max_retries}"
                    )
                    last_error = "rate limited (HTTP 429)"
                    await self._backoff(attempt)
                    continue

                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                logger.warning(
                    f"Timeout fetching {url}, attempt {attempt + 1}/{self.max_retries}"
                )
                last_error = e
                await self._backoff(attempt)

            except httpx.HTTPStatusError as e:
                if e.response.status_code >= 500:
                    logger.warning(
                        f"Server error {e.response.status_code} fetching {url}, "
                        f"attempt {attempt + 1}/{self.max_retries}"
                    )
                    last_error = e
                    await self._backoff(attempt)
                else:
                    raise NetworkFetchError(
                        url, f"HTTP {e.response.status_code}"
                    ) from e

            except httpx.RequestError as e:
                raise NetworkFetchError(url, str(e) or type(e).__name__) from e

            except ValueError as e:
                raise NetworkFetchError(url, f"invalid JSON: {e}") from e

        raise NetworkFetchError(
            url, f"failed after {self.max_retries} attempts: {last_error}"
        )

    async def _backoff(self, attempt: int) -> None:
        """Wait before the next attempt; there is nothing to wait for after the last."""
        if attempt + 1 < self.max_retries:
            await asyncio.sleep(self.retry_backoff ** attempt)

    async def aclose(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

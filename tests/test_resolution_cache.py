"""Tests for EntityResolutionCache."""

import asyncio
from unittest.mock import MagicMock

import pytest

from tools5e_taglinks.errors import LockTimeoutError
from tools5e_taglinks.matcher import EntityMatcher
from tools5e_taglinks.resolution_cache import EntityResolutionCache


SPELLS = {"spell": [{"name": "Fireball", "source": "PHB"}]}


def _counting_matcher() -> MagicMock:
    return MagicMock(wraps=EntityMatcher())


class TestMemoization:
    """Test that successes are memoized and failures are not."""

    @pytest.mark.asyncio
    async def test_success_is_memoized(self):
        matcher = _counting_matcher()
        cache = EntityResolutionCache(matcher)

        first = await cache.resolve("fireball_phb", "spell", [SPELLS], "Fireball", "phb")
        second = await cache.resolve("fireball_phb", "spell", [SPELLS], "Fireball", "phb")

        assert first is second
        assert matcher.match.call_count == 1
        assert "fireball_phb" in cache

    @pytest.mark.asyncio
    async def test_failure_is_recomputed(self):
        matcher = _counting_matcher()
        cache = EntityResolutionCache(matcher)

        assert await cache.resolve("nope_phb", "spell", [SPELLS], "Nope", "phb") is None
        assert await cache.resolve("nope_phb", "spell", [SPELLS], "Nope", "phb") is None

        assert matcher.match.call_count == 2
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_failing_hash_resolves_once_data_matches(self):
        cache = EntityResolutionCache()

        assert await cache.resolve("shield_phb", "spell", [SPELLS], "Shield", "phb") is None

        more = {"spell": [{"name": "Shield", "source": "PHB"}]}
        resolved = await cache.resolve("shield_phb", "spell", [more], "Shield", "phb")
        assert resolved.entity["name"] == "Shield"

    @pytest.mark.asyncio
    async def test_cached_hash_skips_documents(self):
        """A cached hash is answered even with no documents passed."""
        cache = EntityResolutionCache()
        await cache.resolve("fireball_phb", "spell", [SPELLS], "Fireball", "phb")

        resolved = await cache.resolve("fireball_phb", "spell", [], "Fireball", "phb")

        assert resolved.entity["name"] == "Fireball"


class TestLocking:
    """Test the resolution cache lock bound."""

    @pytest.mark.asyncio
    async def test_times_out_when_lock_held(self):
        cache = EntityResolutionCache(lock_timeout=0.01)
        await cache._lock.acquire()
        try:
            with pytest.raises(LockTimeoutError):
                await cache.resolve("h", "spell", [SPELLS], "Fireball", "phb")
        finally:
            cache._lock.release()

    @pytest.mark.asyncio
    async def test_concurrent_resolutions_compute_once(self):
        matcher = _counting_matcher()
        cache = EntityResolutionCache(matcher)

        results = await asyncio.gather(
            *(cache.resolve("fireball_phb", "spell", [SPELLS], "Fireball", "phb") for _ in range(10))
        )

        assert matcher.match.call_count == 1
        assert all(r is results[0] for r in results)

from unittest.mock import AsyncMock, patch

import pytest

from opsdash.utils.cache import TTLCache


class TestTTLCache:
    """Test the in-memory picker cache."""

    def test_set_and_get(self):
        cache = TTLCache(default_ttl_seconds=60)
        cache.set("categories", [1, 2])

        assert cache.get("categories") == [1, 2]
        assert cache.get("projects") is None

    def test_expiry(self):
        cache = TTLCache(default_ttl_seconds=60)
        with patch("opsdash.utils.cache.time.time", return_value=1000.0):
            cache.set("categories", ["Design"])

        with patch("opsdash.utils.cache.time.time", return_value=1061.0):
            assert cache.get("categories") is None
        assert cache.size() == 0

    def test_cleanup_expired(self):
        cache = TTLCache(default_ttl_seconds=60)
        with patch("opsdash.utils.cache.time.time", return_value=1000.0):
            cache.set("a", 1)
            cache.set("b", 2, ttl_seconds=600)

        with patch("opsdash.utils.cache.time.time", return_value=1100.0):
            assert cache.cleanup_expired() == 1
            assert cache.get("b") == 2

    def test_size(self):
        cache = TTLCache()
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.size() == 2

    @pytest.mark.asyncio
    async def test_get_or_fetch_hits_backend_once(self):
        cache = TTLCache()
        fetch = AsyncMock(return_value=["Design"])

        assert await cache.get_or_fetch("categories", fetch) == ["Design"]
        assert await cache.get_or_fetch("categories", fetch) == ["Design"]
        fetch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_zero_ttl_disables_caching(self):
        cache = TTLCache(default_ttl_seconds=0)
        fetch = AsyncMock(return_value=["Design"])

        await cache.get_or_fetch("categories", fetch)
        await cache.get_or_fetch("categories", fetch)

        assert fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_failed_fetch_not_cached(self):
        cache = TTLCache()
        fetch = AsyncMock(side_effect=[RuntimeError("down"), ["Design"]])

        with pytest.raises(RuntimeError):
            await cache.get_or_fetch("categories", fetch)

        assert await cache.get_or_fetch("categories", fetch) == ["Design"]

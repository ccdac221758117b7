"""
Unit tests for counter store adapters.
"""
import pytest
from django.core.cache import cache

from core.infrastructure.counter_store_adapters import (
    DjangoCacheCounterStore,
    InMemoryCounterStore,
    get_counter_store,
    memory_counter_store,
)


class FakeMonotonic:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestInMemoryCounterStore:
    """Tests for InMemoryCounterStore."""

    @pytest.mark.asyncio
    async def test_missing_counter_is_zero(self):
        """Test unknown keys read as zero."""
        assert await InMemoryCounterStore().get("k") == 0

    @pytest.mark.asyncio
    async def test_increment(self):
        """Test increments return the new value."""
        store = InMemoryCounterStore()
        assert await store.increment("k") == 1
        assert await store.increment("k") == 2
        assert await store.get("k") == 2

    @pytest.mark.asyncio
    async def test_expiry(self):
        """Test counters vanish once their expiry passes."""
        clock = FakeMonotonic()
        store = InMemoryCounterStore(clock=clock)
        await store.increment("k")
        await store.expire("k", 60)

        clock.now += 59
        assert await store.get("k") == 1

        clock.now += 2
        assert await store.get("k") == 0
        assert await store.increment("k") == 1

    @pytest.mark.asyncio
    async def test_expire_unknown_key_is_noop(self):
        """Test expiring a missing counter does not create it."""
        store = InMemoryCounterStore()
        await store.expire("missing", 10)
        assert await store.get("missing") == 0

    @pytest.mark.asyncio
    async def test_past_days_are_evicted(self):
        """Test counters from earlier days do not pile up in memory."""
        clock = FakeMonotonic()
        store = InMemoryCounterStore(clock=clock)
        day_seconds = 24 * 60 * 60

        for day in range(30):
            for device in range(10):
                key = f"advisor:KEY:device-{device}:day-{day}"
                if await store.increment(key) == 1:
                    await store.expire(key, day_seconds + 60)
            clock.now += day_seconds + 61

        assert len(store._counters) <= 10
        assert await store.get("advisor:KEY:device-0:day-29") == 0


class TestDjangoCacheCounterStore:
    """Tests for DjangoCacheCounterStore against the test cache."""

    @pytest.fixture(autouse=True)
    def _clear_cache(self):
        cache.clear()
        yield
        cache.clear()

    @pytest.mark.asyncio
    async def test_increment_and_get(self):
        """Test counters are stored in the Django cache."""
        store = DjangoCacheCounterStore(prefix="test")
        assert await store.get("k") == 0
        assert await store.increment("k") == 1
        assert await store.increment("k") == 2
        assert await store.get("k") == 2
        assert cache.get("test:k") == 2

    @pytest.mark.asyncio
    async def test_expire(self):
        """Test expire with zero seconds removes the counter."""
        store = DjangoCacheCounterStore(prefix="test")
        await store.increment("k")
        await store.expire("k", 0)
        assert await store.get("k") == 0


class TestGetCounterStore:
    """Tests for backend selection."""

    def test_memory_backend(self, settings):
        """Test the memory backend returns the shared store."""
        settings.RATE_LIMIT_BACKEND = "memory"
        assert get_counter_store() is memory_counter_store

    def test_cache_backend(self, settings):
        """Test any other backend uses the cache."""
        settings.RATE_LIMIT_BACKEND = "cache"
        assert isinstance(get_counter_store(), DjangoCacheCounterStore)

"""
Counter store adapter implementations.

Provides in-memory and Django cache implementations of CounterStore.
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from asgiref.sync import sync_to_async
from django.conf import settings
from django.core.cache import cache

from core.infrastructure.counter_store import CounterStore

logger = logging.getLogger(__name__)

# Keys live at least this long until an explicit expire() shortens them
DEFAULT_TTL_SECONDS = 2 * 24 * 60 * 60


class InMemoryCounterStore(CounterStore):
    """
    Process-local counter store.

    Counters are not shared between processes, so quotas only hold for a
    single-instance deployment. Expired counters are swept on every
    increment.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """
        Initialize the store.

        Args:
            clock: Monotonic clock used for expiry
        """
        self._clock = clock
        self._lock = threading.Lock()
        self._counters: Dict[str, Tuple[int, Optional[float]]] = {}

    def _live_value(self, key: str) -> int:
        entry = self._counters.get(key)
        if entry is None:
            return 0
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._counters[key]
            return 0
        return value

    def _sweep(self) -> None:
        now = self._clock()
        expired = [
            key
            for key, (_, expires_at) in self._counters.items()
            if expires_at is not None and expires_at <= now
        ]
        for key in expired:
            del self._counters[key]

    async def get(self, key: str) -> int:
        with self._lock:
            return self._live_value(key)

    async def increment(self, key: str) -> int:
        with self._lock:
            self._sweep()
            value = self._live_value(key) + 1
            expires_at = self._counters.get(key, (0, None))[1]
            self._counters[key] = (value, expires_at)
            return value

    async def expire(self, key: str, seconds: int) -> None:
        with self._lock:
            if key in self._counters:
                value, _ = self._counters[key]
                self._counters[key] = (value, self._clock() + seconds)

    def clear(self) -> None:
        """Drop every counter."""
        with self._lock:
            self._counters.clear()


class DjangoCacheCounterStore(CounterStore):
    """
    Django cache counter store.

    Uses Django's cache framework, so with the Redis backend counters are
    shared by every worker and incremented atomically by Redis.
    """

    def __init__(self, prefix: str = "counter"):
        """
        Initialize the store.

        Args:
            prefix: Namespace prepended to every key
        """
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> int:
        """
        Get the current value of a counter.

        Args:
            key: Counter key

        Returns:
            Counter value, 0 if the counter does not exist or expired
        """
        return await sync_to_async(cache.get)(self._key(key), 0)

    async def increment(self, key: str) -> int:
        """
        Atomically add one to a counter, creating it at zero if absent.

        Args:
            key: Counter key

        Returns:
            Counter value after the increment
        """
        cache_key = self._key(key)

        def _increment() -> int:
            cache.add(cache_key, 0, timeout=DEFAULT_TTL_SECONDS)
            try:
                return cache.incr(cache_key)
            except ValueError:
                # Expired between add() and incr()
                cache.add(cache_key, 1, timeout=DEFAULT_TTL_SECONDS)
                return 1

        return await sync_to_async(_increment)()

    async def expire(self, key: str, seconds: int) -> None:
        """
        Set a counter to expire after a number of seconds.

        Args:
            key: Counter key
            seconds: Time to live in seconds
        """
        touched = await sync_to_async(cache.touch)(self._key(key), seconds)
        if not touched:
            logger.debug("Counter %s vanished before expiry was set", key)


# Process-wide in-memory store
memory_counter_store = InMemoryCounterStore()


def get_counter_store() -> CounterStore:
    """
    Get the counter store selected by ``settings.RATE_LIMIT_BACKEND``.

    Returns:
        The shared in-memory store for "memory", a cache-backed store otherwise
    """
    if settings.RATE_LIMIT_BACKEND == "memory":
        return memory_counter_store
    return DjangoCacheCounterStore(prefix="ratelimit")

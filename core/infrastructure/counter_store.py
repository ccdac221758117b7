"""
Counter store abstraction (port).

Expiring integer counters used by quota enforcement. Implementations can
keep counters in process memory or in a shared cache such as Redis.
"""
from abc import ABC, abstractmethod


class CounterStore(ABC):
    """
    Abstract counter store port.

    Counters start at zero, are incremented atomically and disappear
    once their expiry passes.
    """

    @abstractmethod
    async def get(self, key: str) -> int:
        """
        Get the current value of a counter.

        Args:
            key: Counter key

        Returns:
            Counter value, 0 if the counter does not exist or expired
        """
        pass

    @abstractmethod
    async def increment(self, key: str) -> int:
        """
        Atomically add one to a counter, creating it at zero if absent.

        Args:
            key: Counter key

        Returns:
            Counter value after the increment
        """
        pass

    @abstractmethod
    async def expire(self, key: str, seconds: int) -> None:
        """
        Set a counter to expire after a number of seconds.

        Args:
            key: Counter key
            seconds: Time to live in seconds
        """
        pass

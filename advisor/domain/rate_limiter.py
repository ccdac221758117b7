"""
Daily rate limiter.

Bounds how many metered requests one (license, device) pair can make per
local calendar day. Counters live behind a ``CounterStore`` so the same
limiter runs against process memory or a shared cache.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta, tzinfo
from typing import Callable

from core.infrastructure.counter_store import CounterStore


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a quota check."""

    allowed: bool
    remaining: int
    reset_at: datetime
    limit: int

    def to_dict(self):
        return {
            "remaining": self.remaining,
            "limit": self.limit,
            "reset_at": self.reset_at.isoformat(),
        }


class DailyRateLimiter:
    """
    Fixed-window limiter with one window per local day.

    The window key includes the local date, so a new day always starts a
    fresh counter; store expiry only reclaims old counters. A denied
    request does not consume quota.
    """

    def __init__(
        self,
        store: CounterStore,
        clock: Callable[[], datetime],
        tz: tzinfo,
        namespace: str = "advisor",
    ):
        """
        Initialize limiter.

        Args:
            store: Counter store holding the window counters
            clock: Returns the current aware datetime
            tz: Time zone whose midnight ends a window
            namespace: Prefix separating this limiter's counters
        """
        self.store = store
        self.clock = clock
        self.tz = tz
        self.namespace = namespace

    def _window(self, now: datetime):
        local_now = now.astimezone(self.tz)
        day = local_now.date()
        reset_at = datetime.combine(day + timedelta(days=1), time.min, tzinfo=self.tz)
        return day, reset_at

    def key_for(self, license_key: str, device_id: str, day) -> str:
        return f"{self.namespace}:{license_key}:{device_id}:{day.isoformat()}"

    async def check_and_consume(
        self, license_key: str, device_id: str, quota: int
    ) -> RateLimitDecision:
        """
        Consume one unit of the pair's daily quota if any is left.

        Args:
            license_key: License key
            device_id: Device identifier
            quota: Requests allowed per day

        Returns:
            RateLimitDecision; ``remaining`` counts requests left after this one
        """
        now = self.clock()
        day, reset_at = self._window(now)
        key = self.key_for(license_key, device_id, day)

        count = await self.store.get(key)
        if count >= quota:
            return RateLimitDecision(allowed=False, remaining=0, reset_at=reset_at, limit=quota)

        count = await self.store.increment(key)
        if count == 1:
            ttl = int((reset_at - now).total_seconds()) + 60
            await self.store.expire(key, max(ttl, 1))
        if count > quota:
            # Lost a race for the last unit
            return RateLimitDecision(allowed=False, remaining=0, reset_at=reset_at, limit=quota)

        return RateLimitDecision(
            allowed=True,
            remaining=max(0, quota - count),
            reset_at=reset_at,
            limit=quota,
        )

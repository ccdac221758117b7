"""
Unit tests for the daily advisor rate limiter.
"""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from advisor.domain.rate_limiter import DailyRateLimiter
from core.infrastructure.counter_store_adapters import InMemoryCounterStore


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 6, 1, 22, 30, tzinfo=timezone.utc))


@pytest.fixture
def limiter(clock):
    return DailyRateLimiter(store=InMemoryCounterStore(), clock=clock, tz=ZoneInfo("UTC"))


class TestDailyRateLimiter:
    """Tests for DailyRateLimiter."""

    @pytest.mark.asyncio
    async def test_quota_exhaustion(self, limiter):
        """Test ten requests pass and the eleventh is denied."""
        decisions = [await limiter.check_and_consume("KEY", "dev", 10) for _ in range(10)]

        assert all(d.allowed for d in decisions)
        assert [d.remaining for d in decisions] == list(range(9, -1, -1))

        denied = await limiter.check_and_consume("KEY", "dev", 10)
        assert denied.allowed is False
        assert denied.remaining == 0
        assert denied.limit == 10

    @pytest.mark.asyncio
    async def test_denied_requests_do_not_consume(self, limiter):
        """Test repeated denials leave the counter at the quota."""
        for _ in range(3):
            await limiter.check_and_consume("KEY", "dev", 2)

        key = limiter.key_for("KEY", "dev", datetime(2025, 6, 1).date())
        assert await limiter.store.get(key) == 2

    @pytest.mark.asyncio
    async def test_reset_after_midnight(self, limiter, clock):
        """Test a new local day starts a fresh counter."""
        for _ in range(10):
            await limiter.check_and_consume("KEY", "dev", 10)
        assert (await limiter.check_and_consume("KEY", "dev", 10)).allowed is False

        clock.now += timedelta(hours=2)

        decision = await limiter.check_and_consume("KEY", "dev", 10)
        assert decision.allowed is True
        assert decision.remaining == 9

    @pytest.mark.asyncio
    async def test_reset_at_is_next_local_midnight(self, limiter):
        """Test reset time is the next midnight in the limiter's zone."""
        decision = await limiter.check_and_consume("KEY", "dev", 10)
        assert decision.reset_at == datetime(2025, 6, 2, tzinfo=ZoneInfo("UTC"))

    @pytest.mark.asyncio
    async def test_local_time_zone_window(self, clock):
        """Test windows follow the configured zone, not UTC."""
        tz = ZoneInfo("America/New_York")
        limiter = DailyRateLimiter(store=InMemoryCounterStore(), clock=clock, tz=tz)

        # 22:30 UTC on June 1st is 18:30 in New York
        decision = await limiter.check_and_consume("KEY", "dev", 1)
        assert decision.reset_at == datetime(2025, 6, 2, tzinfo=tz)

        clock.now += timedelta(hours=2)  # 20:30 New York, same local day
        assert (await limiter.check_and_consume("KEY", "dev", 1)).allowed is False

    @pytest.mark.asyncio
    async def test_devices_are_counted_separately(self, limiter):
        """Test each (license, device) pair has its own quota."""
        assert (await limiter.check_and_consume("KEY", "dev-a", 1)).allowed
        assert (await limiter.check_and_consume("KEY", "dev-b", 1)).allowed
        assert not (await limiter.check_and_consume("KEY", "dev-a", 1)).allowed

    @pytest.mark.asyncio
    async def test_usage_dict(self, limiter):
        """Test the usage wire representation."""
        decision = await limiter.check_and_consume("KEY", "dev", 5)
        assert decision.to_dict() == {
            "remaining": 4,
            "limit": 5,
            "reset_at": "2025-06-02T00:00:00+00:00",
        }

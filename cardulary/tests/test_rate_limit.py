"""Tests for SqlRateLimiter."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import select

from cardulary.errors import RateLimitedError
from cardulary.models.rate_limit import RateLimitCounter
from cardulary.rate_limit import RateLimitQuota, SqlRateLimiter

QUOTA = RateLimitQuota(max_requests=3, window_seconds=3600)


async def test_allows_up_to_quota_then_blocks(db_session):
    limiter = SqlRateLimiter(session_overwrite=db_session)

    results = [await limiter.check("submit:203.0.113.7", QUOTA) for _ in range(4)]

    assert [r.allowed for r in results] == [True, True, True, False]
    assert [r.remaining for r in results] == [2, 1, 0, 0]
    assert results[-1].retry_after() > 0


async def test_keys_are_counted_separately(db_session):
    limiter = SqlRateLimiter(session_overwrite=db_session)

    for _ in range(3):
        await limiter.check("submit:203.0.113.7", QUOTA)

    other = await limiter.check("submit:198.51.100.1", QUOTA)
    assert other.allowed is True
    assert other.remaining == 2


async def test_window_resets_after_expiry(db_session):
    limiter = SqlRateLimiter(session_overwrite=db_session)
    for _ in range(3):
        await limiter.check("submit:203.0.113.7", QUOTA)

    counter = (
        await db_session.execute(
            select(RateLimitCounter).where(RateLimitCounter.key == "submit:203.0.113.7")
        )
    ).scalar_one()
    counter.reset_at = datetime.now(UTC) - timedelta(seconds=1)
    await db_session.flush()

    result = await limiter.check("submit:203.0.113.7", QUOTA)
    assert result.allowed is True
    assert result.remaining == 2


async def test_enforce_raises_with_retry_after(db_session):
    limiter = SqlRateLimiter(session_overwrite=db_session)
    quota = RateLimitQuota(max_requests=1, window_seconds=60)

    await limiter.enforce("submit:203.0.113.7", quota)
    with pytest.raises(RateLimitedError) as exc_info:
        await limiter.enforce("submit:203.0.113.7", quota)

    assert exc_info.value.limit == 1
    assert 0 < exc_info.value.retry_after <= 60


async def test_counters_are_shared_between_instances():
    first = SqlRateLimiter()
    second = SqlRateLimiter()
    quota = RateLimitQuota(max_requests=2, window_seconds=60)

    await first.check("submit:203.0.113.7", quota)
    await second.check("submit:203.0.113.7", quota)
    blocked = await first.check("submit:203.0.113.7", quota)

    assert blocked.allowed is False

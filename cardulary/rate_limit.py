"""Request quotas backed by a shared store.

Counters live in the ``rate_limit_counters`` table so every API instance sees
the same numbers. Each key gets a fixed window that starts with its first hit.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import partial

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cardulary.config.database import async_session_manager
from cardulary.config.settings import settings
from cardulary.errors import RateLimitedError
from cardulary.models.rate_limit import RateLimitCounter


@dataclass(frozen=True)
class RateLimitQuota:
    max_requests: int
    window_seconds: int


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_at: datetime

    def retry_after(self, now: datetime | None = None) -> int:
        now = now or datetime.now(UTC)
        return max(0, math.ceil((self.reset_at - now).total_seconds()))


RATE_LIMITS = {
    "submit": RateLimitQuota(
        max_requests=settings.submit_rate_limit_requests,
        window_seconds=settings.submit_rate_limit_window_seconds,
    ),
}


def _as_utc(value: datetime) -> datetime:
    # sqlite hands timestamps back without tzinfo
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class RateLimiter(ABC):
    @abstractmethod
    async def check(self, key: str, quota: RateLimitQuota) -> RateLimitResult:
        """Count one request for ``key`` and report whether it is within quota."""
        raise NotImplementedError

    async def enforce(self, key: str, quota: RateLimitQuota) -> RateLimitResult:
        result = await self.check(key, quota)
        if not result.allowed:
            raise RateLimitedError(
                retry_after=result.retry_after(),
                limit=result.limit,
                reset_at=result.reset_at,
            )
        return result


class SqlRateLimiter(RateLimiter):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def check(self, key: str, quota: RateLimitQuota) -> RateLimitResult:
        now = datetime.now(UTC)
        try:
            return await self._check(key, quota, now)
        except IntegrityError:
            # another instance created the counter first
            return await self._check(key, quota, now)

    async def _check(self, key: str, quota: RateLimitQuota, now: datetime) -> RateLimitResult:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(RateLimitCounter).where(RateLimitCounter.key == key).with_for_update()
            )
            counter = result.scalar_one_or_none()

            if counter is None:
                counter = RateLimitCounter(
                    key=key,
                    count=0,
                    reset_at=now + timedelta(seconds=quota.window_seconds),
                )
                session.add(counter)
            elif _as_utc(counter.reset_at) <= now:
                counter.count = 0
                counter.reset_at = now + timedelta(seconds=quota.window_seconds)

            reset_at = _as_utc(counter.reset_at)
            if counter.count >= quota.max_requests:
                return RateLimitResult(
                    allowed=False, limit=quota.max_requests, remaining=0, reset_at=reset_at
                )

            counter.count += 1
            await session.flush()
            return RateLimitResult(
                allowed=True,
                limit=quota.max_requests,
                remaining=quota.max_requests - counter.count,
                reset_at=reset_at,
            )


def get_rate_limiter() -> RateLimiter:
    return SqlRateLimiter()

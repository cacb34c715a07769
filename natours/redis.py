"""Redis client lifecycle and the shared rate-limit store."""

import math
from typing import Optional
from uuid import uuid4

import redis.asyncio as redis

from natours.config import Settings, settings as default_settings

# One pool per process, created on first use
redis_pool: Optional[redis.ConnectionPool] = None
redis_client: Optional[redis.Redis] = None


async def init_redis(settings: Optional[Settings] = None) -> redis.Redis:
    """Open the connection pool and check the server answers."""
    global redis_pool, redis_client
    settings = settings or default_settings

    redis_pool = redis.ConnectionPool.from_url(
        settings.redis_url,
        password=settings.redis_password or None,
        decode_responses=True,
        max_connections=50,
    )
    redis_client = redis.Redis(connection_pool=redis_pool)
    await redis_client.ping()
    return redis_client


async def get_redis(settings: Optional[Settings] = None) -> redis.Redis:
    """Shared client, connecting on first use."""
    if redis_client is None:
        return await init_redis(settings)
    return redis_client


async def close_redis() -> None:
    """Release the pool; a no-op when Redis was never used."""
    global redis_pool, redis_client

    if redis_client is not None:
        await redis_client.aclose()
    if redis_pool is not None:
        await redis_pool.disconnect()

    redis_client = None
    redis_pool = None


class RedisRateLimiter:
    """
    Sliding window limiter on a Redis sorted set, shared by all workers.

    Every hit is a member scored with the server clock. Hits that end up
    over the limit are removed again, so rejected requests do not extend
    a client's lockout.
    """

    PREFIX = "rate_limit:"

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client

    async def is_allowed(
        self, key: str, max_requests: int, window_seconds: int = 60
    ) -> tuple[bool, int, int]:
        """
        Record a hit for ``key`` if the window has room.

        Returns:
            Tuple of (is_allowed, remaining_requests, retry_after_seconds)
        """
        rate_key = f"{self.PREFIX}{key}"
        seconds, microseconds = await self.redis.time()
        now = seconds + microseconds / 1_000_000
        member = f"{now}:{uuid4().hex}"

        pipe = self.redis.pipeline()
        pipe.zremrangebyscore(rate_key, 0, now - window_seconds)
        pipe.zcard(rate_key)
        pipe.zadd(rate_key, {member: now})
        pipe.expire(rate_key, window_seconds)
        results = await pipe.execute()
        hits_before = results[1]

        if hits_before < max_requests:
            return True, max_requests - hits_before - 1, 0

        await self.redis.zrem(rate_key, member)
        oldest = await self.redis.zrange(rate_key, 0, 0, withscores=True)
        if not oldest:
            return False, 0, window_seconds
        retry_after = math.ceil(oldest[0][1] + window_seconds - now)
        return False, 0, max(retry_after, 1)

    async def reset(self, key: str) -> None:
        """Forget every hit recorded for ``key``."""
        await self.redis.delete(f"{self.PREFIX}{key}")

import time

from fastapi import HTTPException, status
from redis.asyncio import Redis
from redis.exceptions import RedisError

from utils.logger import get_logger

log = get_logger(__name__)


async def check_rate_limit(redis: Redis, uid: str, key: str, limit: int = 60, window_seconds: int = 60):
    """Enforce a simple per-UID rate limit using Redis.

    Args:
        redis: Redis client holding the counters.
        uid: Authenticated user id.
        key: Action key (e.g., "upload", "answer").
        limit: Max number of allowed hits in the window.
        window_seconds: Window duration in seconds.
    Raises:
        HTTPException 429 when over limit.
    """
    if not uid:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unauthorized")

    bucket = f"rate:{uid}:{key}:{int(time.time() // window_seconds)}"
    try:
        current = await redis.incr(bucket)
        if current == 1:
            await redis.expire(bucket, window_seconds)
    except RedisError as e:
        # Fail open on Redis issues to avoid blocking candidates mid-interview.
        log.warning(f"Rate limit check skipped for {uid}/{key}: {e}")
        return
    if current > limit:
        raise HTTPException(status.HTTP_429_TOO_MANY_REQUESTS, "Rate limit exceeded")

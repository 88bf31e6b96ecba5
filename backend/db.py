"""
Redis connection helper (asyncio).
"""
from functools import lru_cache

import redis.asyncio as redis

from config import get_settings
from utils.logger import get_logger

log = get_logger(__name__)


@lru_cache
def get_redis() -> redis.Redis:
    cfg = get_settings()
    return redis.from_url(
        cfg.redis_url,
        decode_responses=True,   # store strings not bytes
        health_check_interval=30,
    )


async def test_connection(client: redis.Redis) -> bool:
    try:
        if await client.ping():
            log.info("✅ Redis connection successful!")
            return True
    except Exception as e:
        log.error(f"❌ Redis connection failed: {e}", exc_info=True)
    return False

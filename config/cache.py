# config/cache.py
import logging
from typing import Optional
from redis.asyncio import Redis
from config.settings import settings

log = logging.getLogger(__name__)

_redis: Optional[Redis] = None


async def get_redis() -> Redis:
    """Process-wide Redis client, created and pinged on first use."""
    global _redis
    if _redis is None:
        client = Redis.from_url(settings.REDIS_URL)
        await client.ping()
        _redis = client
        log.info("Connected to Redis at %s", settings.REDIS_URL)
    return _redis


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        client, _redis = _redis, None
        await client.aclose()

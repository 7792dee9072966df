"""Lazily connected async Redis client, pinged by the health check."""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from motorskills.config import settings

logger = logging.getLogger(__name__)

_redis: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis | None:
    """Return the shared client, or None while Redis does not answer."""
    global _redis
    if _redis is not None:
        return _redis

    client = aioredis.from_url(settings.REDIS_URL, socket_connect_timeout=1)
    try:
        await client.ping()
    except RedisError:
        await client.aclose()
        logger.warning("Redis unavailable (%s)", settings.REDIS_URL)
        return None

    _redis = client
    logger.info("Redis connected at %s", settings.REDIS_URL)
    return _redis


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None

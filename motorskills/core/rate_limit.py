"""Rate limiter for the anonymous token endpoints.

Counters live in Redis when it answers at startup, so they are shared
across instances; otherwise they are kept in process memory.
"""

import logging

import redis as sync_redis
from redis.exceptions import RedisError
from slowapi import Limiter
from slowapi.util import get_remote_address

from motorskills.config import settings

logger = logging.getLogger(__name__)

# Invitation validation and shared-report views, per client address
ANONYMOUS_LIMIT = "30/minute"


def _storage_uri() -> str:
    try:
        client = sync_redis.from_url(settings.REDIS_URL, socket_connect_timeout=1)
        try:
            client.ping()
        finally:
            client.close()
    except RedisError:
        logger.warning("Rate limiter: Redis unavailable, using in-memory storage")
        return "memory://"
    logger.info("Rate limiter: Redis storage (%s)", settings.REDIS_URL)
    return settings.REDIS_URL


limiter = Limiter(key_func=get_remote_address, storage_uri=_storage_uri())

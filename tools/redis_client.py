import os
from typing import Optional

import redis
from loguru import logger


def connect_redis() -> Optional[redis.Redis]:
    """
    Open a Redis connection from REDIS_URL.

    Returns None when the server is unreachable so callers can fall back to
    in-memory storage (not recommended for production).
    """
    try:
        redis_url = os.getenv("REDIS_URL", "redis://localhost:6379")
        client = redis.from_url(redis_url, decode_responses=True)
        # Test connection
        client.ping()
        logger.info("Redis connection established successfully")
        return client
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        return None

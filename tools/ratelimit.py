import os
import time
from typing import Dict, Tuple

from loguru import logger

from tools.redis_client import connect_redis


class RateLimiter:
    """Fixed-window request counter per client, backed by Redis."""

    def __init__(self, client=None, max_requests: int = None, window: int = None):
        self.r = client if client is not None else connect_redis()
        self.max_requests = max_requests or int(os.getenv("RATE_LIMIT_MAX", "100"))
        self.window = window or int(os.getenv("RATE_LIMIT_WINDOW", "900"))
        self._memory: Dict[str, Tuple[int, float]] = {}

    def hit(self, client_id: str) -> bool:
        """
        Count a request for the client.

        Args:
            client_id: Caller identity (usually the remote address)

        Returns:
            True if the request is within the limit, False if it must be rejected
        """
        try:
            if self.r:
                key = f"ratelimit:{client_id}"
                count = self.r.incr(key)
                if count == 1:
                    self.r.expire(key, self.window)
                return count <= self.max_requests

            now = time.time()
            count, started = self._memory.get(client_id, (0, now))
            if now - started >= self.window:
                count, started = 0, now
            count += 1
            self._memory[client_id] = (count, started)
            return count <= self.max_requests

        except Exception as e:
            logger.error(f"Rate limit check failed: {e}")
            # Fail open - allow processing to continue
            return True


# Global rate limiter instance
rate_limiter = RateLimiter()

"""Redis connection factory."""

import os
from typing import Optional

import redis.asyncio as redis

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")


class RedisClient:
    """Wrapper for a Redis client with connection management."""

    def __init__(self, url: str = REDIS_URL):
        self.url = url
        self._client: Optional[redis.Redis] = None

    async def connect(self) -> redis.Redis:
        """Connect to Redis."""
        if self._client is None:
            self._client = redis.from_url(
                self.url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> Optional[redis.Redis]:
        """Get the underlying Redis client."""
        return self._client

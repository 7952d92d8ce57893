"""Redis-backed cache for court search results."""

import logging
from typing import Any

from redis import asyncio as aioredis

from courtscout.config import settings
from courtscout.exceptions import ConfigError
from courtscout.schemas.search import CacheEntry

logger = logging.getLogger(__name__)

KEY_PREFIX = "courts"


def create_redis_client(redis_url: str) -> aioredis.Redis:
    """
    Create an asyncio Redis client.

    Raises:
        ConfigError: if no Redis URL is configured
    """
    if not redis_url:
        raise ConfigError("REDIS_URL is not set")
    return aioredis.from_url(redis_url, decode_responses=True)


class AvailabilityCache:
    """
    Key-value store for search results keyed by ``"{venue}:{date}"``.

    Each search recomputes and overwrites its key, so plain SETEX with
    last-writer-wins is enough. Without a Redis client every lookup is a
    miss and every write is skipped.
    """

    def __init__(self, redis_client: Any | None = None, ttl: int | None = None) -> None:
        """
        Initialize the cache.

        Args:
            redis_client: Async Redis client, or None to disable caching
            ttl: Entry lifetime in seconds (uses settings if not provided)
        """
        self.redis = redis_client
        self.ttl = ttl or settings.cache_ttl

    @classmethod
    def from_url(cls, redis_url: str, ttl: int | None = None) -> "AvailabilityCache":
        """Build a cache for a Redis URL, falling back to a no-op cache."""
        try:
            client = create_redis_client(redis_url)
        except ConfigError as e:
            logger.warning(f"Availability cache disabled: {e}")
            return cls(None, ttl)
        return cls(client, ttl)

    @property
    def enabled(self) -> bool:
        return self.redis is not None

    def _redis_key(self, key: str) -> str:
        return f"{KEY_PREFIX}:{key}"

    async def get(self, key: str) -> CacheEntry | None:
        """Return the cached entry for a key, or None on miss."""
        if not self.redis:
            return None

        try:
            cached = await self.redis.get(self._redis_key(key))
        except Exception as e:
            logger.warning(f"Redis cache get failed: {e}")
            return None

        if not cached:
            return None

        try:
            return CacheEntry.model_validate_json(cached)
        except ValueError as e:
            logger.warning(f"Discarding unreadable cache entry for {key}: {e}")
            return None

    async def put(self, key: str, entry: CacheEntry, ttl: int | None = None) -> None:
        """Store an entry, replacing whatever was cached for the key."""
        if not self.redis:
            return

        try:
            await self.redis.setex(
                self._redis_key(key),
                ttl or self.ttl,
                entry.model_dump_json(by_alias=True, exclude_none=True),
            )
            logger.info(f"Cached results for {key}")
        except Exception as e:
            logger.warning(f"Redis cache set failed: {e}")

    async def close(self) -> None:
        if self.redis:
            await self.redis.aclose()

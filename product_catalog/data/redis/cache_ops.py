import json
from typing import Any

from redis.exceptions import RedisError

from product_catalog.data.redis.connection import RedisConnection
from product_catalog.utils.errors import CacheUnavailable
from product_catalog.utils.logger import get_current_logger


class RedisCache:
    """
    Result cache backed by Redis.

    Values are stored as JSON. Any Redis or socket failure is logged and raised
    as ``CacheUnavailable`` so callers can fall back to the store.
    """

    def __init__(self, connection: RedisConnection):
        self._connection = connection

    async def get(self, key: str) -> Any | None:
        """
        Get value from Redis cache.

        Args:
            key: Cache key

        Returns:
            Decoded value or None if not found
        """
        logger = get_current_logger()
        try:
            redis = await self._connection.get_client()
            value = await redis.get(key)
        except (RedisError, OSError) as e:
            logger.error(f"Failed to get cached value for key '{key}': {e}")
            raise CacheUnavailable(str(e)) from e

        if value is None:
            return None

        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """
        Set value in Redis cache.

        Args:
            key: Cache key
            value: Value to cache (will be JSON-encoded if not string)
            ttl: Time to live in seconds (optional)
        """
        logger = get_current_logger()
        if not isinstance(value, str):
            value = json.dumps(value)

        try:
            redis = await self._connection.get_client()
            if ttl:
                await redis.setex(key, ttl, value)
            else:
                await redis.set(key, value)
        except (RedisError, OSError) as e:
            logger.error(f"Failed to set cached value for key '{key}': {e}")
            raise CacheUnavailable(str(e)) from e

        logger.debug(f"Cached value for key '{key}' (TTL: {ttl}s)")

    async def delete(self, key: str) -> bool:
        """
        Delete value from Redis cache.

        Returns:
            True if deleted, False if not found
        """
        logger = get_current_logger()
        try:
            redis = await self._connection.get_client()
            return await redis.delete(key) > 0
        except (RedisError, OSError) as e:
            logger.error(f"Failed to delete cached value for key '{key}': {e}")
            raise CacheUnavailable(str(e)) from e

    async def scan_keys(self, pattern: str) -> list[str]:
        """
        List keys matching a pattern using SCAN (non-blocking, unlike KEYS).

        Args:
            pattern: Redis key pattern (e.g., "catalog:products:*")
        """
        logger = get_current_logger()
        try:
            redis = await self._connection.get_client()
            return [key async for key in redis.scan_iter(match=pattern, count=100)]
        except (RedisError, OSError) as e:
            logger.error(f"Failed to scan keys matching '{pattern}': {e}")
            raise CacheUnavailable(str(e)) from e

    async def clear_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching a pattern using SCAN.

        Returns:
            Number of keys deleted
        """
        logger = get_current_logger()
        try:
            redis = await self._connection.get_client()
            deleted = 0
            cursor = 0

            # SCAN is cursor-based and works incrementally
            while True:
                cursor, keys = await redis.scan(cursor, match=pattern, count=100)

                if keys:
                    deleted += await redis.delete(*keys)

                if cursor == 0:
                    break
        except (RedisError, OSError) as e:
            logger.error(f"Failed to clear pattern '{pattern}': {e}")
            raise CacheUnavailable(str(e)) from e

        logger.info(f"Deleted {deleted} keys matching pattern '{pattern}'")
        return deleted

    async def health_check(self) -> bool:
        return await self._connection.health_check()

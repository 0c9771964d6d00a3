"""Redis module for the catalog result cache."""

from product_catalog.data.redis.connection import RedisConnection
from product_catalog.data.redis.cache_ops import RedisCache
from product_catalog.data.redis.memory_cache import InMemoryCache
from product_catalog.data.redis.cache_keys import CacheKeys, CachePatterns, TTL, catalog_prefix

__all__ = [
    # Connection
    "RedisConnection",
    # Cache backends
    "RedisCache",
    "InMemoryCache",
    # Cache keys and TTL
    "CacheKeys",
    "CachePatterns",
    "TTL",
    "catalog_prefix",
]

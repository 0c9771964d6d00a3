from __future__ import annotations

from unittest.mock import AsyncMock, call

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from product_catalog.data.redis.cache_keys import CacheKeys, CachePatterns, catalog_prefix
from product_catalog.data.redis.cache_ops import RedisCache
from product_catalog.data.redis.memory_cache import InMemoryCache
from product_catalog.utils.errors import CacheUnavailable


def test_catalog_key_is_deterministic_and_includes_absent_filters() -> None:
    first = CacheKeys.catalog_page(1, 5, {"name": None, "category": "Tools", "min_price": None, "max_price": None})
    second = CacheKeys.catalog_page(1, 5, {"max_price": None, "min_price": None, "category": "Tools", "name": None})

    assert first == second
    assert first.startswith(catalog_prefix())
    assert '"name":null' in first
    assert CacheKeys.catalog_page(2, 5, {"category": "Tools"}) != CacheKeys.catalog_page(1, 5, {"category": "Tools"})
    assert CacheKeys.catalog_page(1, 10, {}) != CacheKeys.catalog_page(1, 5, {})


def test_catalog_pattern_shares_the_key_prefix() -> None:
    assert CachePatterns.catalog_pattern() == f"{catalog_prefix()}*"


@pytest.mark.asyncio
async def test_memory_cache_expires_entries() -> None:
    now = [100.0]
    cache = InMemoryCache(clock=lambda: now[0])
    await cache.set("catalog:products:a", {"x": 1}, ttl=3600)

    now[0] += 3599
    assert await cache.get("catalog:products:a") == {"x": 1}

    now[0] += 1
    assert await cache.get("catalog:products:a") is None
    assert await cache.scan_keys("catalog:products:*") == []


@pytest.mark.asyncio
async def test_memory_cache_returns_copies() -> None:
    cache = InMemoryCache()
    await cache.set("k", {"data": [1, 2]})

    value = await cache.get("k")
    value["data"].append(3)

    assert await cache.get("k") == {"data": [1, 2]}


@pytest.mark.asyncio
async def test_memory_cache_clear_pattern() -> None:
    cache = InMemoryCache()
    await cache.set("catalog:products:1", 1)
    await cache.set("catalog:products:2", 2)
    await cache.set("other", 3)

    assert await cache.clear_pattern("catalog:products:*") == 2
    assert await cache.get("other") == 3


@pytest.mark.asyncio
async def test_redis_cache_round_trips_json_and_uses_setex() -> None:
    client = AsyncMock()
    client.get.return_value = '{"total": 3}'
    connection = AsyncMock()
    connection.get_client.return_value = client
    cache = RedisCache(connection)

    await cache.set("catalog:products:k", {"total": 3}, ttl=3600)
    client.setex.assert_awaited_once_with("catalog:products:k", 3600, '{"total": 3}')

    assert await cache.get("catalog:products:k") == {"total": 3}


@pytest.mark.asyncio
async def test_redis_clear_pattern_follows_scan_cursor_until_zero() -> None:
    client = AsyncMock()
    client.scan.side_effect = [(17, ["catalog:products:a", "catalog:products:b"]), (0, ["catalog:products:c"])]
    client.delete.side_effect = [2, 1]
    connection = AsyncMock()
    connection.get_client.return_value = client
    cache = RedisCache(connection)

    deleted = await cache.clear_pattern("catalog:products:*")

    assert deleted == 3
    assert client.scan.await_args_list == [
        call(0, match="catalog:products:*", count=100),
        call(17, match="catalog:products:*", count=100),
    ]
    assert client.delete.await_args_list == [
        call("catalog:products:a", "catalog:products:b"),
        call("catalog:products:c"),
    ]


@pytest.mark.asyncio
async def test_redis_cache_wraps_connection_errors() -> None:
    connection = AsyncMock()
    connection.get_client.side_effect = RedisConnectionError("refused")
    cache = RedisCache(connection)

    with pytest.raises(CacheUnavailable):
        await cache.get("k")
    with pytest.raises(CacheUnavailable):
        await cache.set("k", {"a": 1}, ttl=10)
    with pytest.raises(CacheUnavailable):
        await cache.scan_keys("catalog:products:*")

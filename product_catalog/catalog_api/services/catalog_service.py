import math
from typing import Any

from product_catalog.catalog_api.schemas.product_schemas import Pagination, ProductFilters
from product_catalog.data.postgres.product_repository import ProductRepository
from product_catalog.data.redis.cache_keys import CacheKeys, CachePatterns, TTL
from product_catalog.utils.errors import CacheUnavailable, ValidationError
from product_catalog.utils.logger import get_current_logger


def build_page(rows: list, total: int, pagination: Pagination) -> dict[str, Any]:
    """Serialize one page of products with its paging metadata."""
    return {
        "data": [row.to_dict() for row in rows],
        "total": total,
        "page": pagination.page,
        "limit": pagination.limit,
        "total_pages": math.ceil(total / pagination.limit) if total else 0,
    }


class CatalogService:
    """
    Cache-aside catalog reads and the writes that must purge them.

    ``cache`` is a ``RedisCache``, an ``InMemoryCache`` or anything with the
    same ``get``/``set``/``delete`` coroutines. ``scan_keys``, ``clear_pattern``
    and ``clear`` are optional and tried in that order when invalidating.
    """

    def __init__(self, repository: ProductRepository, cache, ttl: int = TTL.PRODUCT_LIST):
        self._repository = repository
        self._cache = cache
        self._ttl = ttl

    async def find_products(self, pagination: Pagination, filters: ProductFilters) -> dict[str, Any]:
        """
        One page of live products matching ``filters``.

        A cached page is returned as stored. On a miss the store is queried and
        the page is cached for ``ttl`` seconds.

        Raises:
            ValidationError: If ``min_price`` is greater than ``max_price``
            StoreUnavailable: If the store query fails
        """
        logger = get_current_logger()
        if (
            filters.min_price is not None
            and filters.max_price is not None
            and filters.min_price > filters.max_price
        ):
            raise ValidationError("minPrice must not be greater than maxPrice")

        cache_key = CacheKeys.catalog_page(pagination.page, pagination.limit, filters.model_dump())

        try:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache HIT: {cache_key}")
                return cached
        except CacheUnavailable as e:
            logger.warning(f"Cache read failed for {cache_key}, using DB: {e}")

        logger.debug(f"Cache MISS: {cache_key}")
        rows, total = await self._repository.find_page(
            offset=pagination.offset,
            limit=pagination.limit,
            name=filters.name,
            category=filters.category,
            min_price=filters.min_price,
            max_price=filters.max_price,
        )
        result = build_page(rows, total, pagination)

        try:
            await self._cache.set(cache_key, result, ttl=self._ttl)
            logger.debug(f"Cached products: {cache_key}")
        except CacheUnavailable as e:
            logger.warning(f"Failed to cache products for {cache_key}: {e}")

        return result

    async def soft_delete(self, product_id: str) -> bool:
        """
        Soft-delete a product and purge cached catalog pages.

        Returns:
            True if a live row was marked deleted
        """
        deleted = await self._repository.soft_delete(product_id)
        await self.invalidate_catalog_cache()
        return deleted

    async def invalidate_catalog_cache(self) -> int:
        """
        Drop every cached catalog page. Never raises.

        Returns:
            Number of keys removed, 0 when the backend cannot tell
        """
        logger = get_current_logger()
        pattern = CachePatterns.catalog_pattern()
        logger.info("Invalidating catalog cache...")

        try:
            scan_keys = getattr(self._cache, "scan_keys", None)
            if callable(scan_keys):
                keys = await scan_keys(pattern)
                removed = 0
                for key in keys:
                    try:
                        if await self._cache.delete(key):
                            removed += 1
                    except CacheUnavailable as e:
                        logger.error(f"Failed to delete key {key}: {e}")
                logger.info(f"Invalidated {removed}/{len(keys)} catalog cache entries")
                return removed

            logger.warning("Cache backend cannot list keys, falling back to bulk clear")
            clear_pattern = getattr(self._cache, "clear_pattern", None)
            if callable(clear_pattern):
                return await clear_pattern(pattern)

            clear = getattr(self._cache, "clear", None)
            if callable(clear):
                logger.info("Clearing the whole cache as fallback")
                await clear()
                return 0

            logger.error("Cache backend has no way to invalidate catalog entries")
            return 0
        except Exception as e:
            logger.warning(f"Failed to invalidate catalog cache: {e}")
            return 0

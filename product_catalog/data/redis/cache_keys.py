import json
from decimal import Decimal
from typing import Any, Mapping

from product_catalog.config import CATALOG_CACHE_TTL


class TTL:
    """Time-to-Live constants (seconds)."""
    PRODUCT_LIST = CATALOG_CACHE_TTL  # catalog pages, purged on every product write


CATALOG_NAMESPACE = "catalog:products"


def catalog_prefix() -> str:
    """Prefix shared by every catalog page key and the invalidation sweep."""
    return f"{CATALOG_NAMESPACE}:"


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class CacheKeys:
    """Cache key generators."""

    @staticmethod
    def catalog_page(page: int, limit: int, filters: Mapping[str, Any]) -> str:
        """
        Cache key for one catalog page.

        Absent filters must be passed as ``None`` so they are part of the key;
        keys are sorted so the same filter set always yields the same key.
        """
        encoded = json.dumps(dict(filters), sort_keys=True, separators=(",", ":"), default=_json_default)
        return f"{catalog_prefix()}page:{page}:limit:{limit}:filters:{encoded}"


class CachePatterns:
    """Cache key patterns for bulk operations (invalidation, clearing)."""

    @staticmethod
    def catalog_pattern() -> str:
        """Pattern matching every catalog page key."""
        return f"{catalog_prefix()}*"

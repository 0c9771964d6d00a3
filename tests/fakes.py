"""In-memory stand-ins for the product store and for limited cache backends."""

from __future__ import annotations

import fnmatch
import uuid
from datetime import datetime, timedelta, UTC
from decimal import Decimal
from typing import Any

from product_catalog.data.models.product import Product
from product_catalog.data.postgres.product_repository import MUTABLE_FIELDS
from product_catalog.utils.errors import CacheUnavailable, StoreUnavailable

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


def make_product(name: str, **fields: Any) -> Product:
    fields.setdefault("id", str(uuid.uuid4()))
    fields.setdefault("external_id", f"cf-{fields['id'][:8]}")
    fields.setdefault("stock", 0)
    fields.setdefault("created_at", BASE_TIME)
    fields.setdefault("updated_at", fields["created_at"])
    if fields.get("price") is not None:
        fields["price"] = Decimal(str(fields["price"]))
    return Product(name=name, **fields)


class FakeProductRepository:
    """Implements the ``ProductRepository`` surface over a dict, counting store hits."""

    def __init__(self, products: list[Product] | None = None):
        self.rows: dict[str, Product] = {}
        self.page_queries = 0
        self.fail = False
        self._tick = 0
        for product in products or []:
            self.add(product)

    def add(self, product: Product) -> Product:
        self.rows[product.id] = product
        return product

    def seed(self, name: str, **fields: Any) -> Product:
        self._tick += 1
        fields.setdefault("created_at", BASE_TIME + timedelta(seconds=self._tick))
        return self.add(make_product(name, **fields))

    def _check(self) -> None:
        if self.fail:
            raise StoreUnavailable("store is down")

    def _live(self) -> list[Product]:
        return [row for row in self.rows.values() if row.deleted_at is None]

    async def find_page(self, *, offset, limit, name=None, category=None, min_price=None, max_price=None):
        self._check()
        self.page_queries += 1
        rows = self._live()
        if name:
            rows = [row for row in rows if name.lower() in row.name.lower()]
        if category:
            rows = [row for row in rows if row.category == category]
        if min_price is not None:
            rows = [row for row in rows if row.price is not None and row.price >= Decimal(str(min_price))]
        if max_price is not None:
            rows = [row for row in rows if row.price is not None and row.price <= Decimal(str(max_price))]
        rows.sort(key=lambda row: (row.created_at, row.id))
        return rows[offset:offset + limit], len(rows)

    async def soft_delete(self, product_id: str) -> bool:
        self._check()
        row = self.rows.get(product_id)
        if row is None or row.deleted_at is not None:
            return False
        row.deleted_at = datetime.now(UTC)
        return True

    async def find_by_external_id(self, external_id: str, *, with_deleted: bool = True):
        self._check()
        for row in self.rows.values():
            if row.external_id == external_id and (with_deleted or row.deleted_at is None):
                return row
        return None

    async def update_product(self, product_id: str, values: dict[str, Any], *, restore: bool = False) -> None:
        self._check()
        row = self.rows[product_id]
        for key, value in values.items():
            if key in MUTABLE_FIELDS:
                setattr(row, key, value)
        row.updated_at = datetime.now(UTC)
        if restore:
            row.deleted_at = None

    async def insert_product(self, external_id: str, values: dict[str, Any]) -> Product:
        self._check()
        fields = {key: value for key, value in values.items() if key in MUTABLE_FIELDS}
        name = fields.pop("name")
        return self.seed(name, external_id=external_id, **fields)

    async def count_products(self, *, include_deleted: bool = False) -> int:
        self._check()
        return len(self.rows) if include_deleted else len(self._live())

    async def count_deleted(self) -> int:
        self._check()
        return len(self.rows) - len(self._live())

    async def count_non_deleted(self, *, with_price=None, created_from=None, created_to=None) -> int:
        self._check()
        rows = self._live()
        if with_price is not None:
            rows = [row for row in rows if (row.price is not None) == with_price]
        if created_from is not None:
            rows = [row for row in rows if row.created_at >= created_from]
        if created_to is not None:
            rows = [row for row in rows if row.created_at <= created_to]
        return len(rows)

    async def count_by_category(self):
        self._check()
        counts: dict[str | None, int] = {}
        for row in self._live():
            counts[row.category] = counts.get(row.category, 0) + 1
        return sorted(counts.items(), key=lambda item: (-item[1], item[0] or ""))


class KeylessCache:
    """Cache that can get/set/delete and bulk-clear, but cannot list keys."""

    def __init__(self):
        self.entries: dict[str, Any] = {}
        self.cleared = 0

    async def get(self, key):
        return self.entries.get(key)

    async def set(self, key, value, ttl=None):
        self.entries[key] = value

    async def delete(self, key):
        return self.entries.pop(key, None) is not None

    async def clear(self):
        self.cleared += 1
        self.entries.clear()


class BareCache:
    """Cache with only get/set/delete."""

    def __init__(self):
        self.entries: dict[str, Any] = {}

    async def get(self, key):
        return self.entries.get(key)

    async def set(self, key, value, ttl=None):
        self.entries[key] = value

    async def delete(self, key):
        return self.entries.pop(key, None) is not None


class DownCache:
    """Every call fails the way ``RedisCache`` does when Redis is unreachable."""

    def __init__(self):
        self.calls = 0

    async def _fail(self, *args, **kwargs):
        self.calls += 1
        raise CacheUnavailable("connection refused")

    get = set = delete = scan_keys = _fail


class PatternCache(KeylessCache):
    """Cannot list keys but can drop the ones matching a glob pattern."""

    def __init__(self):
        super().__init__()
        self.patterns: list[str] = []

    async def clear_pattern(self, pattern):
        self.patterns.append(pattern)
        matched = [key for key in self.entries if fnmatch.fnmatchcase(key, pattern)]
        for key in matched:
            del self.entries[key]
        return len(matched)

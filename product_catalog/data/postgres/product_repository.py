from datetime import datetime, UTC
from decimal import Decimal
from typing import Any

from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from product_catalog.data.models.product import Product
from product_catalog.utils.errors import StoreUnavailable
from product_catalog.utils.logger import get_current_logger

# Columns the sync job may write; id, timestamps and deleted_at are system managed
MUTABLE_FIELDS = (
    "sku", "name", "brand", "model", "category", "color", "price", "currency", "stock",
)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_catalog_conditions(
    name: str | None = None,
    category: str | None = None,
    min_price: Decimal | float | None = None,
    max_price: Decimal | float | None = None,
) -> list:
    """
    WHERE clauses for the public catalog: non-deleted rows plus every given filter.

    Args:
        name: Case-insensitive substring of the product name
        category: Exact category
        min_price: Inclusive lower price bound
        max_price: Inclusive upper price bound

    Returns:
        List of SQLAlchemy boolean expressions to AND together
    """
    conditions = [Product.deleted_at.is_(None)]
    if name:
        conditions.append(Product.name.ilike(f"%{_escape_like(name)}%", escape="\\"))
    if category:
        conditions.append(Product.category == category)
    if min_price is not None:
        conditions.append(Product.price >= min_price)
    if max_price is not None:
        conditions.append(Product.price <= max_price)
    return conditions


class ProductRepository:
    """
    Data-access layer for the ``products`` table.

    Every method opens its own session. SQLAlchemy failures are logged and
    re-raised as ``StoreUnavailable``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_page(
        self,
        *,
        offset: int,
        limit: int,
        name: str | None = None,
        category: str | None = None,
        min_price: Decimal | float | None = None,
        max_price: Decimal | float | None = None,
    ) -> tuple[list[Product], int]:
        """
        One page of non-deleted products matching the filters, plus the total match count.

        Rows are ordered by ``created_at`` then ``id`` so pages are stable.
        """
        logger = get_current_logger()
        conditions = build_catalog_conditions(name, category, min_price, max_price)
        try:
            async with self._session_factory() as session:
                rows = await session.execute(
                    select(Product)
                    .where(*conditions)
                    .order_by(Product.created_at.asc(), Product.id.asc())
                    .offset(offset)
                    .limit(limit)
                )
                total = await session.scalar(
                    select(func.count()).select_from(Product).where(*conditions)
                )
                return list(rows.scalars().all()), int(total or 0)
        except SQLAlchemyError as e:
            logger.error(f"Error querying product page (offset={offset}, limit={limit}): {e}")
            raise StoreUnavailable("Product store query failed") from e

    async def soft_delete(self, product_id: str) -> bool:
        """
        Mark a product as deleted.

        Returns:
            True if a live row was marked, False if the id is unknown or already deleted
        """
        logger = get_current_logger()
        now = datetime.now(UTC)
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    update(Product)
                    .where(Product.id == product_id, Product.deleted_at.is_(None))
                    .values(deleted_at=now, updated_at=now)
                )
                await session.commit()
                deleted = result.rowcount > 0
                logger.info(f"Soft delete {product_id}: {'done' if deleted else 'no matching row'}")
                return deleted
        except SQLAlchemyError as e:
            logger.error(f"Failed to soft delete product {product_id}: {e}")
            raise StoreUnavailable(f"Could not delete product '{product_id}'") from e

    async def find_by_external_id(self, external_id: str, *, with_deleted: bool = True) -> Product | None:
        """Find a product by its external source id. Soft-deleted rows are included by default."""
        logger = get_current_logger()
        query = select(Product).where(Product.external_id == external_id)
        if not with_deleted:
            query = query.where(Product.deleted_at.is_(None))
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error finding product by external id {external_id}: {e}")
            raise StoreUnavailable("Product store query failed") from e

    async def update_product(self, product_id: str, values: dict[str, Any], *, restore: bool = False) -> None:
        """
        Overwrite the given mutable fields of a product in place.

        ``deleted_at`` is only cleared when ``restore`` is set.
        """
        logger = get_current_logger()
        changes = {key: value for key, value in values.items() if key in MUTABLE_FIELDS}
        changes["updated_at"] = datetime.now(UTC)
        if restore:
            changes["deleted_at"] = None
        try:
            async with self._session_factory() as session:
                await session.execute(
                    update(Product).where(Product.id == product_id).values(**changes)
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to update product {product_id}: {e}")
            raise StoreUnavailable(f"Could not update product '{product_id}'") from e

    async def insert_product(self, external_id: str, values: dict[str, Any]) -> Product:
        """Insert a new product; id and timestamps are generated."""
        logger = get_current_logger()
        fields = {key: value for key, value in values.items() if key in MUTABLE_FIELDS}
        try:
            async with self._session_factory() as session:
                product = Product(external_id=external_id, **fields)
                session.add(product)
                await session.commit()
                await session.refresh(product)
                return product
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert product {external_id}: {e}")
            raise StoreUnavailable(f"Could not insert product '{external_id}'") from e

    # Report queries

    async def count_products(self, *, include_deleted: bool = False) -> int:
        query = select(func.count()).select_from(Product)
        if not include_deleted:
            query = query.where(Product.deleted_at.is_(None))
        return await self._scalar_count(query)

    async def count_deleted(self) -> int:
        return await self._scalar_count(
            select(func.count()).select_from(Product).where(Product.deleted_at.is_not(None))
        )

    async def count_non_deleted(
        self,
        *,
        with_price: bool | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
    ) -> int:
        """Count live products, optionally by price presence and an inclusive creation window."""
        query = select(func.count()).select_from(Product).where(Product.deleted_at.is_(None))
        if with_price is True:
            query = query.where(Product.price.is_not(None))
        elif with_price is False:
            query = query.where(Product.price.is_(None))
        if created_from is not None:
            query = query.where(Product.created_at >= created_from)
        if created_to is not None:
            query = query.where(Product.created_at <= created_to)
        return await self._scalar_count(query)

    async def count_by_category(self) -> list[tuple[str | None, int]]:
        """``(category, count)`` pairs over live products, largest group first."""
        logger = get_current_logger()
        count = func.count(Product.id).label("count")
        query = (
            select(Product.category, count)
            .where(Product.deleted_at.is_(None))
            .group_by(Product.category)
            .order_by(count.desc(), Product.category.asc())
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return [(category, int(total)) for category, total in result.all()]
        except SQLAlchemyError as e:
            logger.error(f"Error grouping products by category: {e}")
            raise StoreUnavailable("Product store query failed") from e

    async def _scalar_count(self, query) -> int:
        logger = get_current_logger()
        try:
            async with self._session_factory() as session:
                return int(await session.scalar(query) or 0)
        except SQLAlchemyError as e:
            logger.error(f"Error counting products: {e}")
            raise StoreUnavailable("Product store query failed") from e

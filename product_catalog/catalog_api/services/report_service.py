from datetime import date, datetime, time, UTC
from decimal import Decimal, ROUND_HALF_UP

from product_catalog.data.postgres.product_repository import ProductRepository
from product_catalog.utils.logger import get_current_logger


def percentage(part: int, whole: int, digits: int = 2) -> float | int:
    """
    ``part / whole * 100`` rounded half-up to ``digits`` decimals; 0 when ``whole`` is 0.

    With ``digits=0`` the result is an int.
    """
    if whole == 0:
        return 0
    value = Decimal(part) * 100 / Decimal(whole)
    if digits == 0:
        return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return float(value.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP))


def day_bounds(start_date: date | None, end_date: date | None) -> tuple[datetime | None, datetime | None]:
    """UTC datetimes covering ``start_date`` from midnight through the last microsecond of ``end_date``."""
    start = datetime.combine(start_date, time.min, tzinfo=UTC) if start_date else None
    end = datetime.combine(end_date, time.max, tzinfo=UTC) if end_date else None
    return start, end


class ReportService:
    """Aggregate reports computed straight from the product store, never cached."""

    def __init__(self, repository: ProductRepository):
        self._repository = repository

    async def deleted_percentage(self) -> dict:
        total = await self._repository.count_products(include_deleted=True)
        deleted = await self._repository.count_deleted()
        return {
            "total": total,
            "deleted": deleted,
            "percentage": percentage(deleted, total, digits=0),
        }

    async def non_deleted_percentage(
        self,
        with_price: bool | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> dict:
        """
        Share of live products matching the price and creation-date filters.

        The percentage is taken against all products, soft-deleted ones included.
        """
        created_from, created_to = day_bounds(start_date, end_date)
        count = await self._repository.count_non_deleted(
            with_price=with_price,
            created_from=created_from,
            created_to=created_to,
        )
        total = await self._repository.count_products(include_deleted=True)
        get_current_logger().debug(
            f"Non-deleted report (with_price={with_price}, from={created_from}, to={created_to}): {count}/{total}"
        )
        return {"count": count, "percentage": percentage(count, total)}

    async def products_by_category(self) -> list[dict]:
        groups = await self._repository.count_by_category()
        total = sum(count for _, count in groups)
        return [
            {"category": category, "count": count, "percentage": percentage(count, total)}
            for category, count in groups
        ]

from product_catalog.catalog_api.schemas.product_schemas import Pagination, ProductFilters
from product_catalog.catalog_api.schemas.report_schemas import (
    DeletedPercentageReport,
    NonDeletedPercentageReport,
    CategoryShare,
)

__all__ = [
    "Pagination",
    "ProductFilters",
    "DeletedPercentageReport",
    "NonDeletedPercentageReport",
    "CategoryShare",
]

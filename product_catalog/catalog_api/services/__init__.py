from product_catalog.catalog_api.services.catalog_service import CatalogService, build_page
from product_catalog.catalog_api.services.report_service import ReportService, percentage

__all__ = [
    "CatalogService",
    "build_page",
    "ReportService",
    "percentage",
]

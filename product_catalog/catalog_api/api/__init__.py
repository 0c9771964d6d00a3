from product_catalog.catalog_api.api.product_router import router as product_router
from product_catalog.catalog_api.api.report_router import router as report_router
from product_catalog.catalog_api.api.health_router import router as health_router

__all__ = ["product_router", "report_router", "health_router"]

from product_catalog.utils.status import Status
from product_catalog.utils.response_format import ResponseFormat
from product_catalog.utils.errors import (
    CatalogError,
    StoreUnavailable,
    CacheUnavailable,
    ExternalSourceUnavailable,
    ValidationError,
)

__all__ = [
    "Status",
    "ResponseFormat",
    "CatalogError",
    "StoreUnavailable",
    "CacheUnavailable",
    "ExternalSourceUnavailable",
    "ValidationError",
]

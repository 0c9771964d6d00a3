class CatalogError(Exception):
    """Base class for catalog service errors."""


class StoreUnavailable(CatalogError):
    """The product store could not be reached or a query failed."""


class CacheUnavailable(CatalogError):
    """The result cache could not be reached. Never surfaced to API callers."""


class ExternalSourceUnavailable(CatalogError):
    """The external content API could not be fetched or returned garbage."""


class ValidationError(CatalogError):
    """Malformed filter input or source record."""

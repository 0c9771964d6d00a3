"""PostgreSQL product store."""

from product_catalog.data.postgres.connection import PostgresConnection
from product_catalog.data.postgres.product_repository import ProductRepository, MUTABLE_FIELDS

__all__ = ["PostgresConnection", "ProductRepository", "MUTABLE_FIELDS"]

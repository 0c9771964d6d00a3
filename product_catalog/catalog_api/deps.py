"""
Service wiring and FastAPI dependencies.
"""
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, Optional

from fastapi import Header, HTTPException, Request, status

from product_catalog.catalog_api.services.catalog_service import CatalogService
from product_catalog.catalog_api.services.report_service import ReportService
from product_catalog.config import CACHE_BACKEND, DATABASE_URL, DB_AUTO_CREATE
from product_catalog.data.postgres.connection import PostgresConnection
from product_catalog.data.postgres.product_repository import ProductRepository
from product_catalog.data.redis.cache_ops import RedisCache
from product_catalog.data.redis.connection import RedisConnection
from product_catalog.data.redis.memory_cache import InMemoryCache
from product_catalog.sync.contentful_client import ContentfulClient
from product_catalog.sync.sync_job import ProductSyncJob
from product_catalog.utils.logger import get_current_logger


@dataclass
class CatalogServices:
    """Everything the routers need, built once per app."""
    catalog: CatalogService
    reports: ReportService
    sync_job: ProductSyncJob
    health_checks: dict[str, Callable[[], Awaitable[bool]]] = field(default_factory=dict)


def build_cache(backend: str = CACHE_BACKEND):
    """Return ``(cache, redis_connection_or_None)`` for the configured backend."""
    if backend == "memory":
        return InMemoryCache(), None
    connection = RedisConnection()
    return RedisCache(connection), connection


@asynccontextmanager
async def default_services(
    database_url: str = DATABASE_URL,
    cache_backend: str = CACHE_BACKEND,
    auto_create: bool = DB_AUTO_CREATE,
) -> AsyncIterator[CatalogServices]:
    """
    Build the services from configuration and close their connections on exit.
    """
    logger = get_current_logger()
    db = PostgresConnection(database_url)
    cache, redis_connection = build_cache(cache_backend)
    contentful = ContentfulClient()
    try:
        if auto_create:
            await db.create_tables()

        repository = ProductRepository(db.AsyncSessionLocal)
        catalog = CatalogService(repository, cache)
        yield CatalogServices(
            catalog=catalog,
            reports=ReportService(repository),
            sync_job=ProductSyncJob(repository, contentful, catalog),
            health_checks={
                "database": db.health_check,
                "cache": cache.health_check,
            },
        )
    finally:
        await contentful.close()
        if redis_connection is not None:
            await redis_connection.close()
        await db.close()
        logger.info("Catalog services closed")


def get_services(request: Request) -> CatalogServices:
    return request.app.state.services


def get_catalog_service(request: Request) -> CatalogService:
    return get_services(request).catalog


def get_report_service(request: Request) -> ReportService:
    return get_services(request).reports


def get_sync_job(request: Request) -> ProductSyncJob:
    return get_services(request).sync_job


def extract_token_from_header(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token from an Authorization header.

    Args:
        authorization: Authorization header value (e.g., "Bearer <token>")

    Returns:
        Token string if valid Bearer format, None otherwise
    """
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]


async def require_bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    """
    Require a well-formed ``Authorization: Bearer <token>`` header.

    Only presence and format are checked; the token itself is not verified.

    Raises:
        HTTPException: 401 if the header is missing or malformed
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header is missing",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = extract_token_from_header(authorization)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token

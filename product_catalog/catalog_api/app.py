import traceback
from contextlib import asynccontextmanager, AsyncExitStack
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from product_catalog.catalog_api.api import product_router, report_router, health_router
from product_catalog.catalog_api.deps import CatalogServices, default_services
from product_catalog.utils.logger import set_app_context, AppLogger, get_current_logger
from product_catalog.utils.response_format import ResponseFormat
from product_catalog.utils.status import Status


class AppContextMiddleware(BaseHTTPMiddleware):
    """Middleware to set app logger context for all requests."""

    async def dispatch(self, request, call_next):
        with set_app_context(AppLogger.CATALOG_API):
            response = await call_next(request)
        return response


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return ResponseFormat(
        status=Status.FAILURE,
        message=str(exc.detail),
        data=None
    ).to_response(status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ResponseFormat(
        status=Status.VALIDATION_ERROR,
        message="Invalid request parameters",
        data=jsonable_encoder(exc.errors())
    ).to_response(status_code=422)


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log unhandled exceptions and answer 500 in the usual envelope."""
    get_current_logger().error(f"Unhandled exception on {request.url.path}: {exc}\n{traceback.format_exc()}")
    return ResponseFormat(
        status=Status.UNKNOWN_ERROR,
        message="Internal server error",
        data=None
    ).to_response(status_code=500)


def create_app(services: Optional[CatalogServices] = None) -> FastAPI:
    """
    Build the catalog API.

    Args:
        services: Prebuilt services (tests, embedding). When omitted they are
            built from configuration at startup and closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from product_catalog.catalog_api import catalog_api_logger as logger

        async with AsyncExitStack() as stack:
            if services is None:
                with set_app_context(AppLogger.CATALOG_API):
                    app.state.services = await stack.enter_async_context(default_services())
            else:
                app.state.services = services
            logger.info("Catalog API started")
            yield
            logger.info("Catalog API shutting down...")

    app = FastAPI(
        title="Product Catalog API",
        description="Product catalog with Contentful sync and reports",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(AppContextMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(product_router)
    app.include_router(report_router)
    app.include_router(health_router)
    return app


# uvicorn product_catalog.catalog_api.app:app
app = create_app()


if __name__ == "__main__":
    import uvicorn
    from product_catalog.config import API_HOST, API_PORT
    uvicorn.run(app, host=API_HOST, port=API_PORT)

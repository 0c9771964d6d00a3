from typing import Optional

from fastapi import APIRouter, Depends, Query

from product_catalog.catalog_api.deps import get_catalog_service, get_sync_job
from product_catalog.catalog_api.schemas.product_schemas import Pagination, ProductFilters
from product_catalog.catalog_api.services.catalog_service import CatalogService
from product_catalog.sync.sync_job import ProductSyncJob
from product_catalog.utils.errors import StoreUnavailable, ValidationError
from product_catalog.utils.logger import get_current_logger
from product_catalog.utils.response_format import ResponseFormat
from product_catalog.utils.status import Status

router = APIRouter(prefix="/products", tags=["Products"])


def _store_unavailable(e: StoreUnavailable):
    return ResponseFormat(
        status=Status.UNKNOWN_ERROR,
        message=str(e),
        data=None
    ).to_response(status_code=503)


@router.post("/sync")
async def sync_products_endpoint(job: ProductSyncJob = Depends(get_sync_job)):
    """Pull products from Contentful. Answers 201 even when the fetch failed; check ``status``."""
    try:
        result = await job.sync_from_external_source()
    except StoreUnavailable as e:
        return _store_unavailable(e)

    if not result.ok:
        return ResponseFormat(
            status=Status.FAILURE,
            message=f"Sync failed: {result.error}",
            data=result.to_dict()
        ).to_response(status_code=201)

    return ResponseFormat(
        status=Status.SUCCESS,
        message="Products synced successfully",
        data=result.to_dict()
    ).to_response(status_code=201)


@router.get("")
async def list_products_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(5, ge=1),
    name: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """List live products, paginated and filtered."""
    pagination = Pagination(page=page, limit=limit)
    filters = ProductFilters(name=name, category=category, min_price=min_price, max_price=max_price)
    try:
        result = await catalog.find_products(pagination, filters)
    except ValidationError as e:
        return ResponseFormat(
            status=Status.VALIDATION_ERROR,
            message=str(e),
            data=None
        ).to_response(status_code=400)
    except StoreUnavailable as e:
        return _store_unavailable(e)

    return ResponseFormat(
        status=Status.SUCCESS,
        message="SUCCESS",
        data=result
    ).to_response()


@router.delete("/{product_id}")
async def delete_product_endpoint(product_id: str, catalog: CatalogService = Depends(get_catalog_service)):
    """Soft-delete a product. Unknown or already deleted ids are a no-op."""
    try:
        deleted = await catalog.soft_delete(product_id)
    except StoreUnavailable as e:
        return _store_unavailable(e)

    if not deleted:
        get_current_logger().info(f"Delete of {product_id} changed nothing")
    return ResponseFormat(
        status=Status.SUCCESS,
        message="Product deleted successfully" if deleted else "No live product with this id",
        data={"id": product_id, "deleted": deleted}
    ).to_response()

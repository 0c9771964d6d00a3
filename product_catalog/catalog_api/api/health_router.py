from fastapi import APIRouter, Depends

from product_catalog.catalog_api.deps import CatalogServices, get_services
from product_catalog.utils.response_format import ResponseFormat
from product_catalog.utils.status import Status

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_endpoint(services: CatalogServices = Depends(get_services)):
    """Reachability of the store and cache. The cache being down only degrades the service."""
    checks = {name: await check() for name, check in services.health_checks.items()}
    healthy = checks.get("database", True)
    return ResponseFormat(
        status=Status.SUCCESS if healthy else Status.FAILURE,
        message="OK" if healthy else "Product store unreachable",
        data=checks
    ).to_response(status_code=200 if healthy else 503)

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from product_catalog.catalog_api.deps import get_report_service, require_bearer_token
from product_catalog.catalog_api.schemas.report_schemas import (
    CategoryShare,
    DeletedPercentageReport,
    NonDeletedPercentageReport,
)
from product_catalog.catalog_api.services.report_service import ReportService
from product_catalog.utils.errors import StoreUnavailable
from product_catalog.utils.response_format import ResponseFormat
from product_catalog.utils.status import Status

router = APIRouter(prefix="/reports", tags=["Reports"], dependencies=[Depends(require_bearer_token)])


def _ok(data):
    return ResponseFormat(status=Status.SUCCESS, message="SUCCESS", data=data).to_response()


def _store_unavailable(e: StoreUnavailable):
    return ResponseFormat(
        status=Status.UNKNOWN_ERROR,
        message=str(e),
        data=None
    ).to_response(status_code=503)


@router.get("/deleted-percentage")
async def deleted_percentage_endpoint(reports: ReportService = Depends(get_report_service)):
    """Share of soft-deleted products among all products."""
    try:
        report = DeletedPercentageReport(**await reports.deleted_percentage())
    except StoreUnavailable as e:
        return _store_unavailable(e)
    return _ok(report.model_dump())


@router.get("/non-deleted-percentage")
async def non_deleted_percentage_endpoint(
    with_price: Optional[bool] = Query(None, alias="withPrice"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    reports: ReportService = Depends(get_report_service),
):
    """Share of live products, optionally with/without price and created in a date window."""
    try:
        report = NonDeletedPercentageReport(
            **await reports.non_deleted_percentage(with_price, start_date, end_date)
        )
    except StoreUnavailable as e:
        return _store_unavailable(e)
    return _ok(report.model_dump())


@router.get("/products-by-category")
async def products_by_category_endpoint(reports: ReportService = Depends(get_report_service)):
    """Live products per category."""
    try:
        groups = [CategoryShare(**group) for group in await reports.products_by_category()]
    except StoreUnavailable as e:
        return _store_unavailable(e)
    return _ok([group.model_dump() for group in groups])

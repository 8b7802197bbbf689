"""Loans, insurance, savings and mobile-money services per farmer."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.auth.deps import require_permission
from app.config import settings
from app.dependencies import get_services
from app.middleware.exceptions import ResourceNotFoundError
from app.schemas.common import EntityStats, PaginatedResponse
from app.schemas.financial_service import (
    FinancialServiceCreate,
    FinancialServiceFilters,
    FinancialServiceOut,
    FinancialServiceUpdate,
)
from app.services.lifecycle import AppServices
from app.tenancy import OrganizationContext

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[FinancialServiceOut])
async def list_financial_services(
    filters: Annotated[FinancialServiceFilters, Query()],
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("financial_services.read")),
):
    return await services.financial_services.cached_list(ctx, filters, page, page_size)


@router.get("/stats", response_model=EntityStats)
async def financial_service_stats(
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("financial_services.read")),
):
    return await services.financial_services.cached_stats(ctx)


@router.post("/", response_model=FinancialServiceOut, status_code=status.HTTP_201_CREATED)
async def create_financial_service(
    body: FinancialServiceCreate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("financial_services.write")),
):
    return await services.financial_services.create(ctx, body)


@router.get("/{service_id}", response_model=FinancialServiceOut)
async def get_financial_service(
    service_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("financial_services.read")),
):
    record = await services.financial_services.cached_get(ctx, service_id)
    if record is None:
        raise ResourceNotFoundError("Financial service", service_id)
    return record


@router.patch("/{service_id}", response_model=FinancialServiceOut)
async def update_financial_service(
    service_id: str,
    body: FinancialServiceUpdate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("financial_services.write")),
):
    return await services.financial_services.update(ctx, service_id, body)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_financial_service(
    service_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("financial_services.delete")),
):
    await services.financial_services.remove(ctx, service_id)

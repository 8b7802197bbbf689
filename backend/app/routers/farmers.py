"""Farmer registry routes: paginated list, stats and CRUD."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.auth.deps import require_permission
from app.config import settings
from app.dependencies import get_services
from app.middleware.exceptions import ResourceNotFoundError
from app.schemas.common import EntityStats, PaginatedResponse
from app.schemas.farmer import FarmerCreate, FarmerFilters, FarmerOut, FarmerUpdate
from app.services.lifecycle import AppServices
from app.tenancy import OrganizationContext

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[FarmerOut])
async def list_farmers(
    filters: Annotated[FarmerFilters, Query()],
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("farmers.read")),
):
    return await services.farmers.cached_list(ctx, filters, page, page_size)


@router.get("/stats", response_model=EntityStats)
async def farmer_stats(
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("farmers.read")),
):
    return await services.farmers.cached_stats(ctx)


@router.post("/", response_model=FarmerOut, status_code=status.HTTP_201_CREATED)
async def create_farmer(
    body: FarmerCreate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("farmers.write")),
):
    return await services.farmers.create(ctx, body)


@router.get("/{farmer_id}", response_model=FarmerOut)
async def get_farmer(
    farmer_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("farmers.read")),
):
    farmer = await services.farmers.cached_get(ctx, farmer_id)
    if farmer is None:
        raise ResourceNotFoundError("Farmer", farmer_id)
    return farmer


@router.patch("/{farmer_id}", response_model=FarmerOut)
async def update_farmer(
    farmer_id: str,
    body: FarmerUpdate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("farmers.write")),
):
    return await services.farmers.update(ctx, farmer_id, body)


@router.delete("/{farmer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_farmer(
    farmer_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("farmers.delete")),
):
    await services.farmers.remove(ctx, farmer_id)

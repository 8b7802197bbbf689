"""Crop growth timeline routes.

List with `?crop_id=...` for one crop's timeline; records are returned
newest first like every other list.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.auth.deps import require_permission
from app.config import settings
from app.dependencies import get_services
from app.middleware.exceptions import ResourceNotFoundError
from app.schemas.common import EntityStats, PaginatedResponse
from app.schemas.growth_record import (
    GrowthRecordCreate,
    GrowthRecordFilters,
    GrowthRecordOut,
    GrowthRecordUpdate,
)
from app.services.lifecycle import AppServices
from app.tenancy import OrganizationContext

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[GrowthRecordOut])
async def list_growth_records(
    filters: Annotated[GrowthRecordFilters, Query()],
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("growth_records.read")),
):
    return await services.growth_records.cached_list(ctx, filters, page, page_size)


@router.get("/stats", response_model=EntityStats)
async def growth_record_stats(
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("growth_records.read")),
):
    return await services.growth_records.cached_stats(ctx)


@router.post("/", response_model=GrowthRecordOut, status_code=status.HTTP_201_CREATED)
async def create_growth_record(
    body: GrowthRecordCreate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("growth_records.write")),
):
    return await services.growth_records.create(ctx, body)


@router.get("/{record_id}", response_model=GrowthRecordOut)
async def get_growth_record(
    record_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("growth_records.read")),
):
    record = await services.growth_records.cached_get(ctx, record_id)
    if record is None:
        raise ResourceNotFoundError("Growth record", record_id)
    return record


@router.patch("/{record_id}", response_model=GrowthRecordOut)
async def update_growth_record(
    record_id: str,
    body: GrowthRecordUpdate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("growth_records.write")),
):
    return await services.growth_records.update(ctx, record_id, body)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_growth_record(
    record_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("growth_records.delete")),
):
    await services.growth_records.remove(ctx, record_id)

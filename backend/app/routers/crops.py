"""Crop tracking routes, including the crop photo upload."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from app.auth.deps import require_permission
from app.config import settings
from app.dependencies import get_services
from app.middleware.exceptions import ResourceNotFoundError
from app.schemas.common import EntityStats, PaginatedResponse
from app.schemas.crop import CropCreate, CropFilters, CropOut, CropUpdate
from app.services.lifecycle import AppServices
from app.tenancy import OrganizationContext

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[CropOut])
async def list_crops(
    filters: Annotated[CropFilters, Query()],
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("crops.read")),
):
    return await services.crops.cached_list(ctx, filters, page, page_size)


@router.get("/stats", response_model=EntityStats)
async def crop_stats(
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("crops.read")),
):
    return await services.crops.cached_stats(ctx)


@router.post("/", response_model=CropOut, status_code=status.HTTP_201_CREATED)
async def create_crop(
    body: CropCreate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("crops.write")),
):
    return await services.crops.create(ctx, body)


@router.get("/{crop_id}", response_model=CropOut)
async def get_crop(
    crop_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("crops.read")),
):
    crop = await services.crops.cached_get(ctx, crop_id)
    if crop is None:
        raise ResourceNotFoundError("Crop", crop_id)
    return crop


@router.patch("/{crop_id}", response_model=CropOut)
async def update_crop(
    crop_id: str,
    body: CropUpdate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("crops.write")),
):
    return await services.crops.update(ctx, crop_id, body)


@router.delete("/{crop_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_crop(
    crop_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("crops.delete")),
):
    await services.crops.remove(ctx, crop_id)


@router.post("/{crop_id}/image", response_model=CropOut)
async def upload_crop_image(
    crop_id: str,
    file: UploadFile = File(...),
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("crops.write")),
):
    """Store a photo and point the crop's image_url at it."""
    if await services.crops.get_by_id(ctx, crop_id) is None:
        raise ResourceNotFoundError("Crop", crop_id)
    data = await file.read()
    upload = await services.storage.upload_image(
        ctx.organization_id, file.filename, file.content_type, data
    )
    return await services.crops.update(ctx, crop_id, {"image_url": upload.url})

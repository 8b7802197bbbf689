"""Extension content (articles, audio, video) published to farmers."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.auth.deps import require_permission
from app.config import settings
from app.dependencies import get_services
from app.middleware.exceptions import ResourceNotFoundError
from app.schemas.common import EntityStats, PaginatedResponse
from app.schemas.extension_service import (
    ExtensionServiceCreate,
    ExtensionServiceFilters,
    ExtensionServiceOut,
    ExtensionServiceUpdate,
)
from app.services.lifecycle import AppServices
from app.tenancy import OrganizationContext

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[ExtensionServiceOut])
async def list_extension_services(
    filters: Annotated[ExtensionServiceFilters, Query()],
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("extension_services.read")),
):
    return await services.extension_services.cached_list(ctx, filters, page, page_size)


@router.get("/stats", response_model=EntityStats)
async def extension_service_stats(
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("extension_services.read")),
):
    return await services.extension_services.cached_stats(ctx)


@router.post("/", response_model=ExtensionServiceOut, status_code=status.HTTP_201_CREATED)
async def create_extension_service(
    body: ExtensionServiceCreate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("extension_services.write")),
):
    return await services.extension_services.create(ctx, body)


@router.get("/{content_id}", response_model=ExtensionServiceOut)
async def get_extension_service(
    content_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("extension_services.read")),
):
    content = await services.extension_services.cached_get(ctx, content_id)
    if content is None:
        raise ResourceNotFoundError("Extension service", content_id)
    return content


@router.patch("/{content_id}", response_model=ExtensionServiceOut)
async def update_extension_service(
    content_id: str,
    body: ExtensionServiceUpdate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("extension_services.write")),
):
    return await services.extension_services.update(ctx, content_id, body)


@router.delete("/{content_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_extension_service(
    content_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("extension_services.delete")),
):
    await services.extension_services.remove(ctx, content_id)

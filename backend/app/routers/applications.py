"""Fertilizer / pesticide application log routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.auth.deps import require_permission
from app.config import settings
from app.dependencies import get_services
from app.middleware.exceptions import ResourceNotFoundError
from app.schemas.application import (
    ApplicationCreate,
    ApplicationFilters,
    ApplicationOut,
    ApplicationUpdate,
)
from app.schemas.common import EntityStats, PaginatedResponse
from app.services.lifecycle import AppServices
from app.tenancy import OrganizationContext

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[ApplicationOut])
async def list_applications(
    filters: Annotated[ApplicationFilters, Query()],
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("applications.read")),
):
    return await services.applications.cached_list(ctx, filters, page, page_size)


@router.get("/stats", response_model=EntityStats)
async def application_stats(
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("applications.read")),
):
    return await services.applications.cached_stats(ctx)


@router.post("/", response_model=ApplicationOut, status_code=status.HTTP_201_CREATED)
async def create_application(
    body: ApplicationCreate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("applications.write")),
):
    return await services.applications.create(ctx, body)


@router.get("/{application_id}", response_model=ApplicationOut)
async def get_application(
    application_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("applications.read")),
):
    application = await services.applications.cached_get(ctx, application_id)
    if application is None:
        raise ResourceNotFoundError("Application", application_id)
    return application


@router.patch("/{application_id}", response_model=ApplicationOut)
async def update_application(
    application_id: str,
    body: ApplicationUpdate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("applications.write")),
):
    return await services.applications.update(ctx, application_id, body)


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application(
    application_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("applications.delete")),
):
    await services.applications.remove(ctx, application_id)

"""Livestock routes plus health / breeding / feeding record management.

Record routes take the collection name as a path segment:

    POST   /api/livestock/{id}/health_records
    GET    /api/livestock/{id}/breeding_records/{record_id}
    PATCH  /api/livestock/{id}/feeding_records/{record_id}
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, status

from app.auth.deps import require_permission
from app.config import settings
from app.dependencies import get_services
from app.middleware.exceptions import ResourceNotFoundError
from app.repositories.nested import NestedKind
from app.schemas.common import EntityStats, PaginatedResponse
from app.schemas.livestock import LivestockCreate, LivestockFilters, LivestockOut, LivestockUpdate
from app.services.lifecycle import AppServices
from app.tenancy import OrganizationContext

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[LivestockOut])
async def list_livestock(
    filters: Annotated[LivestockFilters, Query()],
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("livestock.read")),
):
    return await services.livestock.cached_list(ctx, filters, page, page_size)


@router.get("/stats", response_model=EntityStats)
async def livestock_stats(
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("livestock.read")),
):
    return await services.livestock.cached_stats(ctx)


@router.post("/", response_model=LivestockOut, status_code=status.HTTP_201_CREATED)
async def create_livestock(
    body: LivestockCreate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("livestock.write")),
):
    return await services.livestock.create(ctx, body)


@router.get("/{livestock_id}", response_model=LivestockOut)
async def get_livestock(
    livestock_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("livestock.read")),
):
    animal = await services.livestock.cached_get(ctx, livestock_id)
    if animal is None:
        raise ResourceNotFoundError("Livestock", livestock_id)
    return animal


@router.patch("/{livestock_id}", response_model=LivestockOut)
async def update_livestock(
    livestock_id: str,
    body: LivestockUpdate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("livestock.write")),
):
    return await services.livestock.update(ctx, livestock_id, body)


@router.delete("/{livestock_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_livestock(
    livestock_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("livestock.delete")),
):
    await services.livestock.remove(ctx, livestock_id)


# ── Nested records ───────────────────────────────────────────
# Bodies are validated against the kind's schema inside the repository.

@router.get("/{livestock_id}/{kind}")
async def list_records(
    livestock_id: str,
    kind: NestedKind,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("livestock.read")),
):
    return await services.livestock.list_records(ctx, livestock_id, kind)


@router.post("/{livestock_id}/{kind}", status_code=status.HTTP_201_CREATED)
async def add_record(
    livestock_id: str,
    kind: NestedKind,
    body: dict[str, Any] = Body(...),
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("livestock.write")),
):
    return await services.livestock.add_record(ctx, livestock_id, kind, body)


@router.get("/{livestock_id}/{kind}/{record_id}")
async def get_record(
    livestock_id: str,
    kind: NestedKind,
    record_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("livestock.read")),
):
    record = await services.livestock.get_record(ctx, livestock_id, kind, record_id)
    if record is None:
        raise ResourceNotFoundError("Record", record_id)
    return record


@router.patch("/{livestock_id}/{kind}/{record_id}")
async def update_record(
    livestock_id: str,
    kind: NestedKind,
    record_id: str,
    body: dict[str, Any] = Body(...),
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("livestock.write")),
):
    record = await services.livestock.update_record(ctx, livestock_id, kind, record_id, body)
    if record is None:
        raise ResourceNotFoundError("Record", record_id)
    return record


@router.delete("/{livestock_id}/{kind}/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    livestock_id: str,
    kind: NestedKind,
    record_id: str,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("livestock.write")),
):
    if not await services.livestock.remove_record(ctx, livestock_id, kind, record_id):
        raise ResourceNotFoundError("Record", record_id)

"""The caller's own organization: profile, settings and farm location."""

from fastapi import APIRouter, Depends

from app.auth.deps import require_permission
from app.dependencies import get_services
from app.middleware.exceptions import ResourceNotFoundError
from app.schemas.organization import FarmLocationOut, OrganizationOut, OrganizationUpdate
from app.services.lifecycle import AppServices
from app.tenancy import OrganizationContext

router = APIRouter()


@router.get("/me", response_model=OrganizationOut)
async def get_my_organization(
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("organization.read")),
):
    org = await services.organizations.cached_get(ctx)
    if org is None:
        raise ResourceNotFoundError("Organization", ctx.organization_id)
    return org


@router.patch("/me", response_model=OrganizationOut)
async def update_my_organization(
    body: OrganizationUpdate,
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("organization.manage")),
):
    return await services.organizations.update(ctx, body)


@router.get("/me/location", response_model=FarmLocationOut)
async def get_farm_location(
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("organization.read")),
):
    return await services.organizations.farm_location(ctx)

"""Organization repository.

Members only ever see their own organization (the one in their context);
creating and listing organizations is reserved for the management CLI.
"""

import logging

from app.middleware.exceptions import PermissionDeniedError, ResourceNotFoundError
from app.auth.permissions import has_permission, resolve_permissions
from app.repositories.base import validate_model
from app.schemas.organization import (
    FarmLocationOut,
    OrganizationCreate,
    OrganizationOut,
    OrganizationUpdate,
)
from app.store.client import StoreClient
from app.tenancy import OrganizationContext
from app.utils.cache import QueryCache
from app.utils.location import is_location_set
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

TABLE = "organizations"


class OrganizationRepository:
    entity = TABLE

    def __init__(self, store: StoreClient, cache: QueryCache | None = None):
        self.store = store
        self.cache = cache

    async def get(self, ctx: OrganizationContext) -> OrganizationOut | None:
        row = await self.store.select_one(self.store.table(TABLE).eq("id", ctx.organization_id))
        return OrganizationOut.model_validate(row) if row is not None else None

    async def cached_get(self, ctx: OrganizationContext) -> OrganizationOut | None:
        if self.cache is None:
            return await self.get(ctx)
        return await self.cache.fetch(
            ctx.organization_id, self.entity, {"op": "get"}, lambda: self.get(ctx)
        )

    async def update(self, ctx: OrganizationContext, partial: OrganizationUpdate | dict) -> OrganizationOut:
        if not has_permission(resolve_permissions(ctx.role.value), "organization.manage"):
            raise PermissionDeniedError("Only organization admins can edit organization settings")
        changes = validate_model(OrganizationUpdate, partial).model_dump(exclude_unset=True)
        changes["updated_at"] = utcnow()
        row = await self.store.update(TABLE, changes, match={"id": ctx.organization_id})
        if self.cache is not None:
            self.cache.invalidate(self.entity, ctx.organization_id)
        return OrganizationOut.model_validate(row)

    async def farm_location(self, ctx: OrganizationContext) -> FarmLocationOut:
        org = await self.cached_get(ctx)
        if org is None:
            raise ResourceNotFoundError("Organization", ctx.organization_id)
        return FarmLocationOut(
            latitude=org.latitude,
            longitude=org.longitude,
            address=org.address,
            is_set=is_location_set(org.latitude, org.longitude),
        )

    # ── Management (no member context) ──────────────────────

    async def create(self, data: OrganizationCreate | dict, id: str | None = None) -> OrganizationOut:
        values = validate_model(OrganizationCreate, data).model_dump()
        now = utcnow()
        values.update(created_at=now, updated_at=now)
        if id is not None:
            values["id"] = id
        row = await self.store.insert(TABLE, values)
        logger.info("Created organization %s (%s)", row["id"], row["name"])
        return OrganizationOut.model_validate(row)

    async def list_all(self) -> list[OrganizationOut]:
        result = await self.store.select(self.store.table(TABLE).order("created_at"))
        return [OrganizationOut.model_validate(row) for row in result.rows]

"""Crop growth record repository.

A growth record always belongs to one of the caller's crops; creating one
against a crop from another organization (or a missing crop) is a
not-found error, same as reading it would be.
"""

from typing import Any

from app.middleware.exceptions import ResourceNotFoundError
from app.repositories.base import EntityRepository
from app.schemas.growth_record import (
    GrowthRecordCreate,
    GrowthRecordFilters,
    GrowthRecordOut,
    GrowthRecordUpdate,
)
from app.tenancy import OrganizationContext


class GrowthRecordRepository(EntityRepository[GrowthRecordOut]):
    table = "growth_records"
    resource = "growth_records"
    label = "Growth record"

    out_schema = GrowthRecordOut
    create_schema = GrowthRecordCreate
    update_schema = GrowthRecordUpdate
    filters_schema = GrowthRecordFilters

    search_columns = ("stage_name", "notes")
    status_column = None
    equality_filters = ("crop_id", "stage_name")

    group_columns = {"stage_name": "unknown"}

    async def _prepare_create(self, ctx: OrganizationContext, values: dict[str, Any]) -> dict[str, Any]:
        crop = await self.store.select_one(
            self.store.table("crops")
            .eq("organization_id", ctx.organization_id)
            .eq("id", values["crop_id"])
        )
        if crop is None:
            raise ResourceNotFoundError("Crop", values["crop_id"])
        values["created_by"] = ctx.user_id
        return values

    def _extra_totals(self, rows: list[dict[str, Any]]) -> dict[str, float]:
        scores = [r["health_score"] for r in rows if r.get("health_score") is not None]
        return {"average_health_score": round(sum(scores) / len(scores), 1) if scores else 0.0}

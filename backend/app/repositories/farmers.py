"""Farmer registry repository."""

from typing import Any

from app.repositories.base import EntityRepository
from app.schemas.farmer import FarmerCreate, FarmerFilters, FarmerOut, FarmerUpdate
from app.tenancy import OrganizationContext
from app.utils.numbering import generate_code


class FarmerRepository(EntityRepository[FarmerOut]):
    table = "farmers"
    resource = "farmers"
    label = "Farmer"

    out_schema = FarmerOut
    create_schema = FarmerCreate
    update_schema = FarmerUpdate
    filters_schema = FarmerFilters

    search_columns = ("first_name", "last_name", "farmer_code")
    equality_filters = ("state", "lga")

    group_columns = {"status": "unknown", "gender": "unspecified", "state": "unspecified"}
    sum_columns = ("farm_size",)

    async def _prepare_create(self, ctx: OrganizationContext, values: dict[str, Any]) -> dict[str, Any]:
        if not values.get("farmer_code"):
            values["farmer_code"] = await generate_code(self.store, "farmer", ctx.organization_id)
        return values

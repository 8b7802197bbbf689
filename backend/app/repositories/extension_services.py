"""Extension (advisory content) repository."""

from typing import Any

from app.repositories.base import EntityRepository
from app.schemas.extension_service import (
    ExtensionServiceCreate,
    ExtensionServiceFilters,
    ExtensionServiceOut,
    ExtensionServiceUpdate,
)


class ExtensionServiceRepository(EntityRepository[ExtensionServiceOut]):
    table = "extension_services"
    resource = "extension_services"
    label = "Extension service"

    out_schema = ExtensionServiceOut
    create_schema = ExtensionServiceCreate
    update_schema = ExtensionServiceUpdate
    filters_schema = ExtensionServiceFilters

    search_columns = ("title", "description")
    # No status column; `is_active` is filtered explicitly
    status_column = None
    equality_filters = ("category", "language", "is_active")

    group_columns = {"category": "uncategorized", "language": "unknown"}
    sum_columns = ("views_count",)

    def _extra_totals(self, rows: list[dict[str, Any]]) -> dict[str, float]:
        return {"active": sum(1 for r in rows if r.get("is_active"))}

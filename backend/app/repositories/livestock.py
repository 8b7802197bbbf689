"""Livestock repository, including health / breeding / feeding records.

Record collections are stored per NESTED_RECORD_STORAGE (see
app.repositories.nested); the detail view always returns all three
collections embedded in the livestock payload regardless of layout.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from app.config import settings
from app.repositories.base import EntityRepository, validate_model
from app.repositories.nested import NestedKind, NestedRecordStore, make_nested_store
from app.schemas.livestock import (
    BreedingRecordCreate,
    BreedingRecordOut,
    BreedingRecordUpdate,
    FeedingRecordCreate,
    FeedingRecordOut,
    FeedingRecordUpdate,
    HealthRecordCreate,
    HealthRecordOut,
    HealthRecordUpdate,
    LivestockCreate,
    LivestockFilters,
    LivestockOut,
    LivestockUpdate,
)
from app.store.client import StoreClient
from app.tenancy import OrganizationContext
from app.utils.cache import QueryCache

# kind -> (create schema, update schema, out schema)
RECORD_SCHEMAS: dict[NestedKind, tuple[type[BaseModel], type[BaseModel], type[BaseModel]]] = {
    NestedKind.HEALTH: (HealthRecordCreate, HealthRecordUpdate, HealthRecordOut),
    NestedKind.BREEDING: (BreedingRecordCreate, BreedingRecordUpdate, BreedingRecordOut),
    NestedKind.FEEDING: (FeedingRecordCreate, FeedingRecordUpdate, FeedingRecordOut),
}


class LivestockRepository(EntityRepository[LivestockOut]):
    table = "livestock"
    resource = "livestock"
    label = "Livestock"

    out_schema = LivestockOut
    create_schema = LivestockCreate
    update_schema = LivestockUpdate
    filters_schema = LivestockFilters

    search_columns = ("name", "livestock_type", "breed", "ear_tag")
    equality_filters = ("livestock_type", "farmer_id")
    substring_filters = ("breed",)

    group_columns = {
        "livestock_type": "Unknown",
        "status": "Unknown",
        "breeding_status": "not_breeding",
    }

    def __init__(
        self,
        store: StoreClient,
        cache: QueryCache | None = None,
        storage: str | None = None,
    ):
        super().__init__(store, cache)
        self.records: NestedRecordStore = make_nested_store(
            storage or settings.nested_record_storage, store
        )

    # ── Shape ────────────────────────────────────────────────

    def _to_out(self, row: dict[str, Any]) -> LivestockOut:
        row = dict(row)
        for kind in NestedKind:
            row[kind.value] = row.get(kind.value) or []
        return LivestockOut.model_validate(row)

    async def _respond(self, ctx: OrganizationContext, row: dict[str, Any]) -> LivestockOut:
        row = dict(row)
        await self.records.attach(ctx, [row])
        return self._to_out(row)

    async def list(self, ctx, filters=None, page=1, page_size=None):
        result = await super().list(ctx, filters, page, page_size)
        if self.records.mode == "table" and result.items:
            rows = [item.model_dump() for item in result.items]
            await self.records.attach(ctx, rows)
            result.items = [self._to_out(row) for row in rows]
        return result

    async def get_by_id(self, ctx: OrganizationContext, id: str) -> LivestockOut | None:
        """Detail view with all three record collections."""
        row = await self.store.select_one(self._scoped(ctx).eq("id", id))
        if row is None:
            return None
        return await self._respond(ctx, row)

    # ── Statistics ───────────────────────────────────────────

    def _weight(self, row: dict[str, Any]) -> int:
        return row.get("quantity") or 0

    def _extra_totals(self, rows: list[dict[str, Any]]) -> dict[str, float]:
        return {"total_livestock": sum(row.get("quantity") or 0 for row in rows)}

    # ── Nested records ───────────────────────────────────────

    async def list_records(self, ctx: OrganizationContext, parent_id: str, kind: NestedKind | str) -> list:
        kind = NestedKind(kind)
        out_schema = RECORD_SCHEMAS[kind][2]
        return [out_schema.model_validate(r) for r in await self.records.list(ctx, parent_id, kind)]

    async def get_record(
        self, ctx: OrganizationContext, parent_id: str, kind: NestedKind | str, record_id: str
    ) -> BaseModel | None:
        kind = NestedKind(kind)
        record = await self.records.get(ctx, parent_id, kind, record_id)
        return RECORD_SCHEMAS[kind][2].model_validate(record) if record is not None else None

    async def add_record(
        self, ctx: OrganizationContext, parent_id: str, kind: NestedKind | str, record: BaseModel | dict
    ) -> BaseModel:
        """Append a record under `parent_id`; the parent must be the caller's."""
        self._require(ctx, "write")
        kind = NestedKind(kind)
        create_schema, _, out_schema = RECORD_SCHEMAS[kind]
        values = validate_model(create_schema, record).model_dump()
        saved = await self.records.add(ctx, parent_id, kind, values)
        self._invalidate(ctx)
        return out_schema.model_validate(saved)

    async def update_record(
        self,
        ctx: OrganizationContext,
        parent_id: str,
        kind: NestedKind | str,
        record_id: str,
        partial: BaseModel | dict,
    ) -> BaseModel | None:
        """Merge fields into one record; None when `record_id` isn't found.

        The merged record must satisfy the create rules (required fields,
        date ordering) before anything is written.
        """
        self._require(ctx, "write")
        kind = NestedKind(kind)
        create_schema, update_schema, out_schema = RECORD_SCHEMAS[kind]
        changes = validate_model(update_schema, partial).model_dump(exclude_unset=True)
        current = await self.records.get(ctx, parent_id, kind, record_id)
        if current is None:
            return None
        create_schema.model_validate({**current, **changes})
        saved = await self.records.update(ctx, parent_id, kind, record_id, changes)
        if saved is None:
            return None
        self._invalidate(ctx)
        return out_schema.model_validate(saved)

    async def remove_record(
        self, ctx: OrganizationContext, parent_id: str, kind: NestedKind | str, record_id: str
    ) -> bool:
        self._require(ctx, "write")
        removed = await self.records.remove(ctx, parent_id, NestedKind(kind), record_id)
        if removed:
            self._invalidate(ctx)
        return removed

    # ── Typed conveniences ───────────────────────────────────

    async def add_health_record(self, ctx, parent_id: str, record) -> HealthRecordOut:
        return await self.add_record(ctx, parent_id, NestedKind.HEALTH, record)

    async def add_breeding_record(self, ctx, parent_id: str, record) -> BreedingRecordOut:
        return await self.add_record(ctx, parent_id, NestedKind.BREEDING, record)

    async def add_feeding_record(self, ctx, parent_id: str, record) -> FeedingRecordOut:
        return await self.add_record(ctx, parent_id, NestedKind.FEEDING, record)

    async def update_health_record(self, ctx, parent_id: str, record_id: str, partial):
        return await self.update_record(ctx, parent_id, NestedKind.HEALTH, record_id, partial)

    async def update_breeding_record(self, ctx, parent_id: str, record_id: str, partial):
        return await self.update_record(ctx, parent_id, NestedKind.BREEDING, record_id, partial)

    async def update_feeding_record(self, ctx, parent_id: str, record_id: str, partial):
        return await self.update_record(ctx, parent_id, NestedKind.FEEDING, record_id, partial)

    async def remove_health_record(self, ctx, parent_id: str, record_id: str) -> bool:
        return await self.remove_record(ctx, parent_id, NestedKind.HEALTH, record_id)

    async def remove_breeding_record(self, ctx, parent_id: str, record_id: str) -> bool:
        return await self.remove_record(ctx, parent_id, NestedKind.BREEDING, record_id)

    async def remove_feeding_record(self, ctx, parent_id: str, record_id: str) -> bool:
        return await self.remove_record(ctx, parent_id, NestedKind.FEEDING, record_id)

"""Generic organization-scoped repository.

Every operation takes an explicit OrganizationContext and filters (or
stamps) `organization_id` on every statement it issues.  Subclasses only
declare their table, schemas and which columns drive search, filtering
and statistics.

    repo = FarmerRepository(store, cache)
    page = await repo.list(ctx, FarmerFilters(search="Adeyemi"), page=1, page_size=10)
    farmer = await repo.get_by_id(ctx, page.items[0].id)      # None when missing

Store errors (integrity, connectivity, missing rows on update / delete)
propagate unchanged.  Successful mutations invalidate the entity's cached
reads for the caller's organization.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from datetime import datetime, time
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from app.auth.permissions import has_permission, resolve_permissions
from app.config import settings
from app.middleware.exceptions import BusinessLogicError, PermissionDeniedError
from app.schemas.common import EntityStats, ListFilters, PaginatedResponse
from app.store.client import StoreClient
from app.store.query import Query
from app.tenancy import OrganizationContext
from app.utils.cache import QueryCache
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

OutT = TypeVar("OutT", bound=BaseModel)

PROTECTED_FIELDS = frozenset({"id", "organization_id", "created_at"})


def validate_model(schema: type[BaseModel], data: Any) -> BaseModel:
    """Coerce a dict (or another model) into `schema`, keeping unset-ness."""
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    return schema.model_validate(data)


class EntityRepository(Generic[OutT]):
    # Table / cache entity name, and the permission resource guarding it
    table: ClassVar[str]
    resource: ClassVar[str]
    label: ClassVar[str] = "Record"

    out_schema: ClassVar[type[BaseModel]]
    create_schema: ClassVar[type[BaseModel]]
    update_schema: ClassVar[type[BaseModel]]
    filters_schema: ClassVar[type[ListFilters]] = ListFilters

    # List predicates
    search_columns: ClassVar[tuple[str, ...]] = ()
    status_column: ClassVar[str | None] = "status"
    equality_filters: ClassVar[tuple[str, ...]] = ()
    substring_filters: ClassVar[tuple[str, ...]] = ()

    # Statistics: {column: label for missing values}
    group_columns: ClassVar[dict[str, str]] = {"status": "unknown"}
    sum_columns: ClassVar[tuple[str, ...]] = ()

    def __init__(self, store: StoreClient, cache: QueryCache | None = None):
        self.store = store
        self.cache = cache

    @property
    def entity(self) -> str:
        return self.table

    # ── Helpers ──────────────────────────────────────────────

    def _scoped(self, ctx: OrganizationContext) -> Query:
        return self.store.table(self.table).eq("organization_id", ctx.organization_id)

    def _require(self, ctx: OrganizationContext, action: str) -> None:
        perm = f"{self.resource}.{action}"
        if not has_permission(resolve_permissions(ctx.role.value), perm):
            raise PermissionDeniedError(f"Role {ctx.role.value!r} lacks {perm}")

    def _invalidate(self, ctx: OrganizationContext) -> None:
        if self.cache is not None:
            self.cache.invalidate(self.entity, ctx.organization_id)

    def _to_out(self, row: dict[str, Any]) -> OutT:
        return self.out_schema.model_validate(row)

    async def _respond(self, ctx: OrganizationContext, row: dict[str, Any]) -> OutT:
        """Shape a freshly written row for the caller."""
        return self._to_out(row)

    def _apply_filters(self, query: Query, filters: ListFilters) -> Query:
        if filters.status and self.status_column:
            query = query.eq(self.status_column, filters.status)

        search = (filters.search or "").strip()
        if search and self.search_columns:
            query = query.or_ilike(list(self.search_columns), search)

        if filters.start_date:
            query = query.gte("created_at", datetime.combine(filters.start_date, time.min))
        if filters.end_date:
            query = query.lte("created_at", datetime.combine(filters.end_date, time.max))

        for name in self.equality_filters:
            value = getattr(filters, name, None)
            if value is not None:
                query = query.eq(name, value)
        for name in self.substring_filters:
            value = getattr(filters, name, None)
            if value:
                query = query.ilike(name, value)
        return query

    async def _prepare_create(self, ctx: OrganizationContext, values: dict[str, Any]) -> dict[str, Any]:
        """Hook for entity-specific defaults before insert."""
        return values

    # ── Reads ────────────────────────────────────────────────

    async def list(
        self,
        ctx: OrganizationContext,
        filters: ListFilters | dict | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> PaginatedResponse[OutT]:
        """One page of the organization's rows, newest first."""
        page_size = settings.default_page_size if page_size is None else page_size
        if page < 1:
            raise BusinessLogicError("Page must be at least 1", error_code="VALIDATION_ERROR")
        if page_size < 1:
            raise BusinessLogicError("Page size must be greater than 0", error_code="VALIDATION_ERROR")

        filters = validate_model(self.filters_schema, filters or {})
        start = (page - 1) * page_size
        query = (
            self._apply_filters(self._scoped(ctx), filters)
            .order("created_at", desc=True)
            .order("id", desc=True)
            .range(start, start + page_size - 1)
        )
        result = await self.store.select(query, count=True)
        return PaginatedResponse[self.out_schema](
            items=[self._to_out(row) for row in result.rows],
            total=result.count or 0,
            page=page,
            page_size=page_size,
        )

    async def get_by_id(self, ctx: OrganizationContext, id: str) -> OutT | None:
        row = await self.store.select_one(self._scoped(ctx).eq("id", id))
        return self._to_out(row) if row is not None else None

    async def aggregate_stats(self, ctx: OrganizationContext) -> EntityStats:
        """Full scan of the organization's rows → grouped counts and sums."""
        result = await self.store.select(self._scoped(ctx))
        return self._compute_stats(result.rows)

    def _weight(self, row: dict[str, Any]) -> int:
        return 1

    def _compute_stats(self, rows: list[dict[str, Any]]) -> EntityStats:
        groups: dict[str, Counter] = defaultdict(Counter)
        totals: dict[str, float] = {column: 0.0 for column in self.sum_columns}
        for row in rows:
            weight = self._weight(row)
            for column, missing in self.group_columns.items():
                groups[column][row.get(column) or missing] += weight
            for column in self.sum_columns:
                totals[column] += float(row.get(column) or 0)
        totals.update(self._extra_totals(rows))
        return EntityStats(
            total_records=len(rows),
            groups={column: dict(groups[column]) for column in self.group_columns},
            totals=totals,
        )

    def _extra_totals(self, rows: list[dict[str, Any]]) -> dict[str, float]:
        return {}

    # ── Cached reads ─────────────────────────────────────────

    async def cached_list(
        self,
        ctx: OrganizationContext,
        filters: ListFilters | dict | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> PaginatedResponse[OutT]:
        if self.cache is None:
            return await self.list(ctx, filters, page, page_size)
        filters = validate_model(self.filters_schema, filters or {})
        params = {
            "op": "list",
            "filters": filters.model_dump(mode="json", exclude_none=True),
            "page": page,
            "page_size": page_size,
        }
        return await self.cache.fetch(
            ctx.organization_id, self.entity, params,
            lambda: self.list(ctx, filters, page, page_size),
        )

    async def cached_get(self, ctx: OrganizationContext, id: str) -> OutT | None:
        if self.cache is None:
            return await self.get_by_id(ctx, id)
        return await self.cache.fetch(
            ctx.organization_id, self.entity, {"op": "get", "id": id},
            lambda: self.get_by_id(ctx, id),
        )

    async def cached_stats(self, ctx: OrganizationContext) -> EntityStats:
        if self.cache is None:
            return await self.aggregate_stats(ctx)
        return await self.cache.fetch(
            ctx.organization_id, self.entity, {"op": "stats"},
            lambda: self.aggregate_stats(ctx),
        )

    # ── Writes ───────────────────────────────────────────────

    async def create(self, ctx: OrganizationContext, data: BaseModel | dict) -> OutT:
        self._require(ctx, "write")
        values = validate_model(self.create_schema, data).model_dump()
        for field in PROTECTED_FIELDS:
            values.pop(field, None)
        values = await self._prepare_create(ctx, values)

        now = utcnow()
        values.update(organization_id=ctx.organization_id, created_at=now, updated_at=now)
        row = await self.store.insert(self.table, values)
        logger.info("Created %s %s (org=%s)", self.table, row["id"], ctx.organization_id)
        self._invalidate(ctx)
        return await self._respond(ctx, row)

    async def update(self, ctx: OrganizationContext, id: str, partial: BaseModel | dict) -> OutT:
        """Merge only the supplied fields; raises ResourceNotFoundError if absent."""
        self._require(ctx, "write")
        changes = validate_model(self.update_schema, partial).model_dump(exclude_unset=True)
        for field in PROTECTED_FIELDS:
            changes.pop(field, None)
        changes["updated_at"] = utcnow()

        row = await self.store.update(
            self.table, changes, match={"id": id, "organization_id": ctx.organization_id}
        )
        self._invalidate(ctx)
        return await self._respond(ctx, row)

    async def remove(self, ctx: OrganizationContext, id: str) -> None:
        """Hard delete; a missing row surfaces as the store's not-found error."""
        self._require(ctx, "delete")
        await self.store.delete(self.table, match={"id": id, "organization_id": ctx.organization_id})
        logger.info("Deleted %s %s (org=%s)", self.table, id, ctx.organization_id)
        self._invalidate(ctx)

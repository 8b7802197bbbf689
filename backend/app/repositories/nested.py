"""Storage strategies for livestock health / breeding / feeding records.

EmbeddedArrayStore (NESTED_RECORD_STORAGE=embedded, default)
    Records live in JSON arrays on the livestock row.  Every mutation reads
    the whole array, edits it in memory and writes the whole array back.
    Record ids are generated here (uuid4) and are unique within the array.
    Not atomic: two concurrent mutations of the same parent race and the
    last write wins, so one of them can be lost.

ChildTableStore (NESTED_RECORD_STORAGE=table)
    Records are rows in health_records / breeding_records / feeding_records
    with a store-generated primary key and a foreign key to livestock.
    Each mutation touches a single row.

Both strategies check that the parent belongs to the caller's
organization (ResourceNotFoundError otherwise).  A record id that doesn't
match returns None / False; it is not an error.
"""

from __future__ import annotations

import enum
import logging
import uuid
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any

from pydantic_core import to_jsonable_python

from app.middleware.exceptions import ResourceNotFoundError
from app.store.client import StoreClient
from app.tenancy import OrganizationContext
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

PARENT_TABLE = "livestock"


class NestedKind(str, enum.Enum):
    HEALTH = "health_records"
    BREEDING = "breeding_records"
    FEEDING = "feeding_records"


class NestedRecordStore(ABC):
    """Add / read / update / remove records of one kind under a parent."""

    mode: str

    def __init__(self, store: StoreClient):
        self.store = store

    async def _parent(self, ctx: OrganizationContext, parent_id: str) -> dict[str, Any]:
        row = await self.store.select_one(
            self.store.table(PARENT_TABLE)
            .eq("organization_id", ctx.organization_id)
            .eq("id", parent_id)
        )
        if row is None:
            raise ResourceNotFoundError("Livestock", parent_id)
        return row

    @abstractmethod
    async def list(self, ctx: OrganizationContext, parent_id: str, kind: NestedKind) -> list[dict]:
        ...

    @abstractmethod
    async def add(self, ctx: OrganizationContext, parent_id: str, kind: NestedKind, values: dict) -> dict:
        ...

    @abstractmethod
    async def update(
        self, ctx: OrganizationContext, parent_id: str, kind: NestedKind, record_id: str, changes: dict
    ) -> dict | None:
        ...

    @abstractmethod
    async def remove(self, ctx: OrganizationContext, parent_id: str, kind: NestedKind, record_id: str) -> bool:
        ...

    async def attach(self, ctx: OrganizationContext, rows: list[dict]) -> None:
        """Fill each parent row's record collections in place."""

    async def get(
        self, ctx: OrganizationContext, parent_id: str, kind: NestedKind, record_id: str
    ) -> dict | None:
        for record in await self.list(ctx, parent_id, kind):
            if record.get("id") == record_id:
                return record
        return None


# ── Embedded JSON arrays ────────────────────────────────────

class EmbeddedArrayStore(NestedRecordStore):
    mode = "embedded"

    async def _write(self, ctx: OrganizationContext, parent_id: str, kind: NestedKind, records: list) -> None:
        await self.store.update(
            PARENT_TABLE,
            {kind.value: records, "updated_at": utcnow()},
            match={"id": parent_id, "organization_id": ctx.organization_id},
        )

    async def list(self, ctx, parent_id, kind):
        parent = await self._parent(ctx, parent_id)
        return list(parent.get(kind.value) or [])

    async def add(self, ctx, parent_id, kind, values):
        parent = await self._parent(ctx, parent_id)
        records = list(parent.get(kind.value) or [])
        now = utcnow().isoformat()
        record = {
            **to_jsonable_python(values),
            "id": str(uuid.uuid4()),
            "livestock_id": parent_id,
            "created_at": now,
            "updated_at": now,
        }
        records.append(record)
        await self._write(ctx, parent_id, kind, records)
        return record

    async def update(self, ctx, parent_id, kind, record_id, changes):
        parent = await self._parent(ctx, parent_id)
        records = list(parent.get(kind.value) or [])
        for index, record in enumerate(records):
            if record.get("id") == record_id:
                break
        else:
            return None

        updated = {
            **record,
            **to_jsonable_python(changes),
            "id": record_id,
            "updated_at": utcnow().isoformat(),
        }
        records[index] = updated
        await self._write(ctx, parent_id, kind, records)
        return updated

    async def remove(self, ctx, parent_id, kind, record_id):
        parent = await self._parent(ctx, parent_id)
        records = list(parent.get(kind.value) or [])
        remaining = [record for record in records if record.get("id") != record_id]
        if len(remaining) == len(records):
            return False
        await self._write(ctx, parent_id, kind, remaining)
        return True


# ── Child tables ────────────────────────────────────────────

class ChildTableStore(NestedRecordStore):
    mode = "table"

    def _scoped(self, ctx: OrganizationContext, kind: NestedKind):
        return self.store.table(kind.value).eq("organization_id", ctx.organization_id)

    async def list(self, ctx, parent_id, kind):
        await self._parent(ctx, parent_id)
        result = await self.store.select(
            self._scoped(ctx, kind).eq("livestock_id", parent_id).order("created_at").order("id")
        )
        return result.rows

    async def get(self, ctx, parent_id, kind, record_id):
        await self._parent(ctx, parent_id)
        return await self.store.select_one(
            self._scoped(ctx, kind).eq("livestock_id", parent_id).eq("id", record_id)
        )

    async def add(self, ctx, parent_id, kind, values):
        await self._parent(ctx, parent_id)
        now = utcnow()
        values = {
            **values,
            "organization_id": ctx.organization_id,
            "livestock_id": parent_id,
            "created_at": now,
            "updated_at": now,
        }
        values.pop("id", None)
        return await self.store.insert(kind.value, values)

    async def update(self, ctx, parent_id, kind, record_id, changes):
        if await self.get(ctx, parent_id, kind, record_id) is None:
            return None
        changes = {key: value for key, value in changes.items() if key not in ("id", "livestock_id")}
        changes["updated_at"] = utcnow()
        return await self.store.update(
            kind.value, changes, match={"id": record_id, "organization_id": ctx.organization_id}
        )

    async def remove(self, ctx, parent_id, kind, record_id):
        if await self.get(ctx, parent_id, kind, record_id) is None:
            return False
        await self.store.delete(kind.value, match={"id": record_id, "organization_id": ctx.organization_id})
        return True

    async def attach(self, ctx, rows):
        if not rows:
            return
        ids = [row["id"] for row in rows]
        for kind in NestedKind:
            result = await self.store.select(
                self._scoped(ctx, kind).in_("livestock_id", ids).order("created_at").order("id")
            )
            by_parent: dict[str, list] = defaultdict(list)
            for record in result.rows:
                by_parent[record["livestock_id"]].append(record)
            for row in rows:
                row[kind.value] = by_parent.get(row["id"], [])


STRATEGIES = {
    EmbeddedArrayStore.mode: EmbeddedArrayStore,
    ChildTableStore.mode: ChildTableStore,
}


def make_nested_store(mode: str, store: StoreClient) -> NestedRecordStore:
    try:
        return STRATEGIES[mode](store)
    except KeyError:
        raise ValueError(
            f"Unknown nested record storage {mode!r} (expected one of {sorted(STRATEGIES)})"
        ) from None

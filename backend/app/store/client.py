"""Table-level adapter over the relational store.

Rows go in and come out as plain dicts keyed by column name.  Each call
runs in its own session and commits before returning; committed
mutations are then published to the ChangeBroker.

    store = StoreClient(async_session, LocalChangeBroker())
    row = await store.insert("farmers", {...})
    result = await store.select(store.table("farmers").eq("id", row["id"]), count=True)

Errors from the database (IntegrityError, OperationalError) propagate
unchanged.  update() / delete() raise ResourceNotFoundError when no row
matches, mirroring a hosted store rejecting a write against a missing row.
"""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic_core import to_jsonable_python
from sqlalchemy import Table, delete, insert, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database import Base
from app.middleware.exceptions import ResourceNotFoundError
from app.store.query import Query
from app.store.realtime import ChangeBroker, ChangeEvent

logger = logging.getLogger(__name__)


@dataclass
class SelectResult:
    rows: list[dict[str, Any]]
    count: int | None = None


def _jsonable(row: dict | None) -> dict:
    return to_jsonable_python(row) if row else {}


class StoreClient:
    """Async CRUD + change publishing for every table on `Base.metadata`."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        broker: ChangeBroker,
        schema: str = "public",
    ):
        self._session_factory = session_factory
        self.broker = broker
        self.schema = schema

    # ── Tables ──────────────────────────────────────────────

    def _table(self, name: str) -> Table:
        import app.models  # noqa: F401  (register all tables)

        table = Base.metadata.tables.get(name)
        if table is None:
            raise ValueError(f"Unknown table: {name!r}")
        return table

    def table(self, name: str) -> Query:
        """Start a query against `name`."""
        return Query(self._table(name))

    def _match(self, table: Table, match: dict[str, Any]):
        if "id" not in match:
            raise ValueError("match must include the primary key 'id'")
        return [table.c[column] == value for column, value in match.items()]

    # ── Reads ───────────────────────────────────────────────

    async def select(self, query: Query, count: bool = False) -> SelectResult:
        async with self._session_factory() as session:
            total = None
            if count:
                total = (await session.execute(query.count_statement())).scalar_one()
            result = await session.execute(query.statement())
            rows = [dict(row) for row in result.mappings().all()]
        return SelectResult(rows=rows, count=total)

    async def count(self, query: Query) -> int:
        async with self._session_factory() as session:
            return (await session.execute(query.count_statement())).scalar_one()

    async def select_one(self, query: Query) -> dict[str, Any] | None:
        """First matching row, or None."""
        result = await self.select(query.range(0, 0))
        return result.rows[0] if result.rows else None

    async def ping(self) -> None:
        """Round-trip to the database; raises if it is unreachable."""
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))

    # ── Writes ──────────────────────────────────────────────

    async def insert(self, table_name: str, values: dict[str, Any]) -> dict[str, Any]:
        table = self._table(table_name)
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(insert(table).values(**values))
                pk = result.inserted_primary_key[0]
                row = (await session.execute(select(table).where(table.c.id == pk))).mappings().one()
                row = dict(row)
        logger.debug("Inserted %s %s", table_name, pk)
        await self._publish("INSERT", table_name, new=row)
        return row

    async def update(
        self,
        table_name: str,
        values: dict[str, Any],
        match: dict[str, Any],
    ) -> dict[str, Any]:
        """Merge `values` into the single row identified by `match`."""
        table = self._table(table_name)
        conditions = self._match(table, match)
        async with self._session_factory() as session:
            async with session.begin():
                old = (await session.execute(select(table).where(*conditions))).mappings().one_or_none()
                if old is None:
                    raise ResourceNotFoundError(table_name, str(match["id"]))
                old = dict(old)
                if values:
                    await session.execute(update(table).where(*conditions).values(**values))
                new = dict(
                    (await session.execute(select(table).where(*conditions))).mappings().one()
                )
        await self._publish("UPDATE", table_name, new=new, old={"id": old["id"]})
        return new

    async def delete(self, table_name: str, match: dict[str, Any]) -> None:
        table = self._table(table_name)
        conditions = self._match(table, match)
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(delete(table).where(*conditions))
                if result.rowcount == 0:
                    raise ResourceNotFoundError(table_name, str(match["id"]))
        # Only the primary key survives a delete in the change payload
        await self._publish("DELETE", table_name, old={"id": match["id"]})

    async def _publish(self, event_type: str, table: str, new=None, old=None) -> None:
        event = ChangeEvent(
            event_type=event_type,
            table=table,
            new=_jsonable(new),
            old=_jsonable(old),
            schema=self.schema,
        )
        await self.broker.publish(event)

"""Chainable, table-level query builder for the store client.

    query = (
        Query(table)
        .eq("organization_id", org_id)
        .or_ilike(["first_name", "last_name"], "adeyemi")
        .order("created_at", desc=True)
        .range(0, 9)
    )
    result = await store.select(query, count=True)

Filters are ANDed together; `or_ilike` ORs across its own columns.
`range()` bounds are inclusive row offsets.  Unknown column names raise
ValueError when the filter is added, never at execution time.
"""

from typing import Any

from sqlalchemy import Table, and_, false, func, or_, select
from sqlalchemy.sql import ColumnElement, Select


class Query:
    """Immutable description of a select against one table."""

    def __init__(self, table: Table):
        self.table = table
        self._where: list[ColumnElement] = []
        self._order: list[tuple[str, bool]] = []
        self._range: tuple[int, int] | None = None

    @property
    def name(self) -> str:
        return self.table.name

    def _column(self, name: str):
        try:
            return self.table.c[name]
        except KeyError:
            raise ValueError(f"Unknown column {name!r} on table {self.table.name!r}") from None

    def _copy(self) -> "Query":
        clone = Query(self.table)
        clone._where = list(self._where)
        clone._order = list(self._order)
        clone._range = self._range
        return clone

    # ── Filters ──────────────────────────────────────────────

    def eq(self, column: str, value: Any) -> "Query":
        clone = self._copy()
        col = self._column(column)
        clone._where.append(col.is_(None) if value is None else col == value)
        return clone

    def in_(self, column: str, values: list) -> "Query":
        clone = self._copy()
        clone._where.append(self._column(column).in_(values) if values else false())
        return clone

    def ilike(self, column: str, text: str) -> "Query":
        """Case-insensitive substring match (`%text%`, wildcards escaped)."""
        clone = self._copy()
        clone._where.append(self._column(column).icontains(text, autoescape=True))
        return clone

    def startswith(self, column: str, prefix: str) -> "Query":
        clone = self._copy()
        clone._where.append(self._column(column).startswith(prefix, autoescape=True))
        return clone

    def or_ilike(self, columns: list[str], text: str) -> "Query":
        """Substring match on ANY of `columns`."""
        clone = self._copy()
        clone._where.append(
            or_(*(self._column(c).icontains(text, autoescape=True) for c in columns))
        )
        return clone

    def gte(self, column: str, value: Any) -> "Query":
        clone = self._copy()
        clone._where.append(self._column(column) >= value)
        return clone

    def lte(self, column: str, value: Any) -> "Query":
        clone = self._copy()
        clone._where.append(self._column(column) <= value)
        return clone

    # ── Ordering / paging ───────────────────────────────────

    def order(self, column: str, desc: bool = False) -> "Query":
        self._column(column)
        clone = self._copy()
        clone._order.append((column, desc))
        return clone

    def range(self, start: int, end: int) -> "Query":
        if start < 0 or end < start:
            raise ValueError(f"Invalid range: {start}..{end}")
        clone = self._copy()
        clone._range = (start, end)
        return clone

    # ── Compilation ─────────────────────────────────────────

    def _filtered(self, stmt: Select) -> Select:
        if self._where:
            stmt = stmt.where(and_(*self._where))
        return stmt

    def statement(self) -> Select:
        stmt = self._filtered(select(self.table))
        for column, desc in self._order:
            col = self.table.c[column]
            stmt = stmt.order_by(col.desc() if desc else col.asc())
        if self._range is not None:
            start, end = self._range
            stmt = stmt.offset(start).limit(end - start + 1)
        return stmt

    def count_statement(self) -> Select:
        """Exact count of matching rows, ignoring order and range."""
        return self._filtered(select(func.count()).select_from(self.table))

"""Data source backed by SQLAlchemy async Core over the declared tables."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Optional

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from nadi.datasource.base import (
    DataSource,
    Filter,
    RemoteError,
    RemoteResult,
    TableQuery,
    referenced_columns,
    shape_rows,
)

logger = logging.getLogger(__name__)


def _condition(column: sa.Column, flt: Filter) -> Any:
    if flt.or_null:
        return sa.or_(column.is_(None), _condition(column, dataclasses.replace(flt, or_null=False)))
    if flt.op == "eq":
        return column.is_(None) if flt.value is None else column == flt.value
    if flt.op == "neq":
        return column.is_not(None) if flt.value is None else column != flt.value
    if flt.op == "gt":
        return column > flt.value
    if flt.op == "gte":
        return column >= flt.value
    if flt.op == "lt":
        return column < flt.value
    if flt.op == "lte":
        return column <= flt.value
    if flt.op == "in":
        return column.in_(flt.value)
    raise ValueError(f"Unsupported filter operator '{flt.op}'")


class SqlDataSource(DataSource):
    """Runs each query in its own transaction on *engine*."""

    def __init__(self, engine: AsyncEngine, metadata: sa.MetaData) -> None:
        self._engine = engine
        self._metadata = metadata

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_all(self) -> None:
        """Create every declared table (local development and tests)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(self._metadata.create_all)

    async def close(self) -> None:
        await self._engine.dispose()

    async def execute(self, query: TableQuery) -> RemoteResult:
        table = self._metadata.tables.get(query.table)
        if table is None:
            return RemoteResult(
                error=RemoteError(
                    message=f'relation "{query.table}" does not exist',
                    code="undefined_table",
                )
            )

        missing = self._missing_column(table, query)
        if missing is not None:
            return RemoteResult(
                error=RemoteError(
                    message=f'column "{missing}" of relation "{table.name}" does not exist',
                    code="undefined_column",
                )
            )

        try:
            async with self._engine.begin() as conn:
                if query.action == "select" and query.count_only:
                    stmt = sa.select(sa.func.count()).select_from(table)
                    stmt = stmt.where(*self._where(table, query))
                    count = (await conn.execute(stmt)).scalar_one()
                    return RemoteResult(data=count)
                stmt = self._statement(table, query)
                rows = [dict(row) for row in (await conn.execute(stmt)).mappings()]
        except SQLAlchemyError as exc:
            orig = getattr(exc, "orig", None)
            logger.debug("Query on %s failed", query.table, exc_info=True)
            return RemoteResult(
                error=RemoteError(
                    message=str(orig or exc),
                    code=type(orig or exc).__name__,
                    details=query.action,
                )
            )
        return shape_rows(query, rows)

    # ── statement builders ──────────────────────────────────────────

    @staticmethod
    def _where(table: sa.Table, query: TableQuery) -> list[Any]:
        return [_condition(table.c[f.column], f) for f in query.filters]

    def _statement(self, table: sa.Table, query: TableQuery) -> Any:
        where = self._where(table, query)

        if query.action == "select":
            stmt = sa.select(table).where(*where)
            for ordering in query.orderings:
                col = table.c[ordering.column]
                stmt = stmt.order_by(col.asc() if ordering.ascending else col.desc())
            if query.row_limit is not None:
                stmt = stmt.limit(query.row_limit)
            return stmt

        if query.action == "insert":
            payload = query.payload
            rows = payload if isinstance(payload, list) else [payload or {}]
            return sa.insert(table).values(rows).returning(*table.c)

        if query.action == "update":
            return (
                sa.update(table)
                .where(*where)
                .values(**(query.payload or {}))
                .returning(*table.c)
            )

        if query.action == "delete":
            return sa.delete(table).where(*where).returning(*table.c)

        raise ValueError(f"Unsupported action '{query.action}'")

    @staticmethod
    def _missing_column(table: sa.Table, query: TableQuery) -> Optional[str]:
        for name in referenced_columns(query):
            if name not in table.c:
                return name
        return None

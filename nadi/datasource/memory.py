"""In-process data source backed by plain dicts.

Shares the table metadata of the SQL models, so rows carry the same columns
and Python-side defaults (generated ids, timestamps) as the real store.
"""

from __future__ import annotations

import asyncio
import copy
import operator
from typing import Any, Callable, Optional

import sqlalchemy as sa

from nadi.datasource.base import (
    DataSource,
    Filter,
    RemoteError,
    RemoteResult,
    Row,
    TableQuery,
    referenced_columns,
    shape_rows,
)

_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": operator.eq,
    "neq": operator.ne,
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
    "in": lambda value, options: value in options,
}


def _column_default(column: sa.Column, attr: str) -> Any:
    default = getattr(column, attr)
    if default is None:
        return None
    if getattr(default, "is_callable", False):
        return default.arg(None)
    if getattr(default, "is_scalar", False):
        return default.arg
    return None


class MemoryDataSource(DataSource):
    """Dict-backed fake of the remote store.

    ``fail_with`` maps a table name to an error message; every operation on
    that table then reports that error, which lets callers exercise their
    failure paths without a broken database.
    """

    def __init__(self, metadata: sa.MetaData) -> None:
        self._metadata = metadata
        self._rows: dict[str, list[Row]] = {name: [] for name in metadata.tables}
        self._lock = asyncio.Lock()
        self.fail_with: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []

    # ── test helpers ────────────────────────────────────────────────

    def seed(self, table: str, *rows: Row) -> list[Row]:
        """Insert *rows* directly, applying column defaults."""
        schema = self._metadata.tables[table]
        created = [self._new_row(schema, row) for row in rows]
        self._rows[table].extend(created)
        return [dict(row) for row in created]

    def rows(self, table: str) -> list[Row]:
        return [dict(row) for row in self._rows.get(table, [])]

    def calls_to(self, table: str) -> int:
        return sum(1 for name, _ in self.calls if name == table)

    # ── DataSource ──────────────────────────────────────────────────

    async def execute(self, query: TableQuery) -> RemoteResult:
        self.calls.append((query.table, query.action))
        # Yield once so concurrent callers interleave like real I/O.
        await asyncio.sleep(0)

        if query.table in self.fail_with:
            return RemoteResult(error=RemoteError(message=self.fail_with[query.table]))

        schema = self._metadata.tables.get(query.table)
        if schema is None:
            return RemoteResult(
                error=RemoteError(
                    message=f'relation "{query.table}" does not exist',
                    code="undefined_table",
                )
            )

        problem = self._check_columns(schema, query)
        if problem is not None:
            return RemoteResult(error=problem)

        async with self._lock:
            handler = getattr(self, f"_{query.action}")
            rows = handler(schema, query)
        return shape_rows(query, [copy.deepcopy(row) for row in rows])

    # ── operations ──────────────────────────────────────────────────

    def _select(self, schema: sa.Table, query: TableQuery) -> list[Row]:
        rows = self._matching(schema.name, query.filters)
        for ordering in reversed(query.orderings):
            rows.sort(
                key=lambda row: _sort_key(row.get(ordering.column)),
                reverse=not ordering.ascending,
            )
        if query.row_limit is not None:
            rows = rows[: query.row_limit]
        return rows

    def _insert(self, schema: sa.Table, query: TableQuery) -> list[Row]:
        payload = query.payload
        items = payload if isinstance(payload, list) else [payload or {}]
        created = [self._new_row(schema, item) for item in items]
        self._rows[schema.name].extend(created)
        return created

    def _update(self, schema: sa.Table, query: TableQuery) -> list[Row]:
        values = dict(query.payload or {})
        for column in schema.columns:
            if column.name not in values and column.onupdate is not None:
                values[column.name] = _column_default(column, "onupdate")
        rows = self._matching(schema.name, query.filters)
        for row in rows:
            row.update(values)
        return rows

    def _delete(self, schema: sa.Table, query: TableQuery) -> list[Row]:
        doomed = self._matching(schema.name, query.filters)
        ids = {id(row) for row in doomed}
        self._rows[schema.name] = [
            row for row in self._rows[schema.name] if id(row) not in ids
        ]
        return doomed

    # ── internals ───────────────────────────────────────────────────

    def _matching(self, table: str, filters: tuple[Filter, ...]) -> list[Row]:
        return [
            row
            for row in self._rows[table]
            if all(_matches(row.get(f.column), f) for f in filters)
        ]

    @staticmethod
    def _new_row(schema: sa.Table, values: Row) -> Row:
        row: Row = {}
        for column in schema.columns:
            if column.name in values:
                row[column.name] = values[column.name]
            else:
                row[column.name] = _column_default(column, "default")
        return row

    @staticmethod
    def _check_columns(schema: sa.Table, query: TableQuery) -> Optional[RemoteError]:
        for name in referenced_columns(query):
            if name not in schema.columns:
                return RemoteError(
                    message=f'column "{name}" of relation "{schema.name}" does not exist',
                    code="undefined_column",
                )
        return None


def _matches(value: Any, flt: Filter) -> bool:
    if value is None and flt.or_null:
        return True
    try:
        return bool(_COMPARATORS[flt.op](value, flt.value))
    except TypeError:
        # None never satisfies a range comparison, as in SQL.
        return False


def _sort_key(value: Any) -> tuple[bool, Any]:
    # NULLs sort last, as PostgreSQL does for ascending order.
    return (value is None, value if value is not None else 0)

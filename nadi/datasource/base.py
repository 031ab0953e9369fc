"""Remote data client contract: table-scoped queries returning result-or-error pairs.

Callers build a query by chaining filters onto a table operation and then
``await query.execute()``.  The result is a :class:`RemoteResult` whose
``error`` is set exactly when the operation failed::

    result = await (
        source.table("nd_off_days")
        .select()
        .eq("site_id", site_id)
        .order("start_date")
        .execute()
    )
"""

from __future__ import annotations

import abc
import dataclasses
from typing import Any, Generic, Optional, Sequence, TypeVar, Union

T = TypeVar("T")

# Error code reported when ``single()`` matched no row.
ROW_NOT_FOUND = "row_not_found"
# Error code reported when ``single()`` matched more than one row.
MULTIPLE_ROWS = "multiple_rows"

Row = dict[str, Any]


@dataclasses.dataclass(frozen=True)
class RemoteError:
    """Error detail reported by the data source."""

    message: str
    code: Optional[str] = None
    details: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class RemoteResult(Generic[T]):
    """``{data, error}`` pair; ``data`` is ``None`` whenever ``error`` is set."""

    data: Optional[T] = None
    error: Optional[RemoteError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclasses.dataclass(frozen=True)
class Filter:
    column: str
    op: str
    value: Any
    # Range filters only: a NULL column value also matches.
    or_null: bool = False


@dataclasses.dataclass(frozen=True)
class Ordering:
    column: str
    ascending: bool = True


@dataclasses.dataclass(frozen=True)
class TableQuery:
    """Immutable description of one table operation.

    Every chaining method returns a new query, so partially built queries
    can be shared and extended safely.
    """

    source: "DataSource"
    table: str
    action: str = "select"
    payload: Union[Row, list[Row], None] = None
    filters: tuple[Filter, ...] = ()
    orderings: tuple[Ordering, ...] = ()
    row_limit: Optional[int] = None
    expect_single: bool = False
    count_only: bool = False

    # ── filters ─────────────────────────────────────────────────────

    def _filter(self, column: str, op: str, value: Any, or_null: bool = False) -> "TableQuery":
        return dataclasses.replace(
            self, filters=self.filters + (Filter(column, op, value, or_null),)
        )

    def eq(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "eq", value)

    def neq(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "neq", value)

    def gt(self, column: str, value: Any, *, or_null: bool = False) -> "TableQuery":
        return self._filter(column, "gt", value, or_null)

    def gte(self, column: str, value: Any, *, or_null: bool = False) -> "TableQuery":
        return self._filter(column, "gte", value, or_null)

    def lt(self, column: str, value: Any, *, or_null: bool = False) -> "TableQuery":
        return self._filter(column, "lt", value, or_null)

    def lte(self, column: str, value: Any, *, or_null: bool = False) -> "TableQuery":
        return self._filter(column, "lte", value, or_null)

    def in_(self, column: str, values: Sequence[Any]) -> "TableQuery":
        return self._filter(column, "in", tuple(values))

    # ── shaping ─────────────────────────────────────────────────────

    def order(self, column: str, *, ascending: bool = True) -> "TableQuery":
        return dataclasses.replace(
            self, orderings=self.orderings + (Ordering(column, ascending),)
        )

    def limit(self, count: int) -> "TableQuery":
        return dataclasses.replace(self, row_limit=count)

    def single(self) -> "TableQuery":
        """Expect exactly one row; ``data`` becomes that row instead of a list."""
        return dataclasses.replace(self, expect_single=True)

    # ── execution ───────────────────────────────────────────────────

    async def execute(self) -> RemoteResult:
        return await self.source.execute(self)


class TableRef:
    """Entry point for operations on one table."""

    def __init__(self, source: "DataSource", name: str) -> None:
        self._source = source
        self.name = name

    def select(self, *, count: bool = False) -> TableQuery:
        """Select whole rows, or only their number when *count* is set."""
        return TableQuery(self._source, self.name, "select", count_only=count)

    def insert(self, rows: Union[Row, list[Row]]) -> TableQuery:
        return TableQuery(self._source, self.name, "insert", payload=rows)

    def update(self, values: Row) -> TableQuery:
        return TableQuery(self._source, self.name, "update", payload=values)

    def delete(self) -> TableQuery:
        return TableQuery(self._source, self.name, "delete")


class DataSource(abc.ABC):
    """Capability interface for the remote tabular store.

    Implementations never raise for backend failures; they report them in
    ``RemoteResult.error``.  Writes return the affected rows.
    """

    def table(self, name: str) -> TableRef:
        return TableRef(self, name)

    @abc.abstractmethod
    async def execute(self, query: TableQuery) -> RemoteResult:
        ...

    async def close(self) -> None:
        """Release connections held by the source."""


def shape_rows(query: TableQuery, rows: list[Row]) -> RemoteResult:
    """Apply ``single()`` semantics to the rows an operation produced."""
    if query.count_only:
        return RemoteResult(data=len(rows))
    if not query.expect_single:
        return RemoteResult(data=rows)
    if not rows:
        return RemoteResult(
            error=RemoteError(
                message=f"No rows found in '{query.table}'",
                code=ROW_NOT_FOUND,
            )
        )
    if len(rows) > 1:
        return RemoteResult(
            error=RemoteError(
                message=f"Expected a single row from '{query.table}', got {len(rows)}",
                code=MULTIPLE_ROWS,
            )
        )
    return RemoteResult(data=rows[0])


def referenced_columns(query: TableQuery) -> list[str]:
    """Every column name a query filters, orders or writes on."""
    names = [f.column for f in query.filters] + [o.column for o in query.orderings]
    payload = query.payload
    if isinstance(payload, dict):
        names.extend(payload)
    elif isinstance(payload, list):
        for item in payload:
            names.extend(item)
    return names

"""Shared plumbing for the per-entity query and mutation wrappers."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from pydantic import BaseModel

from nadi.common.exceptions import RemoteFetchError, RemoteWriteError
from nadi.common.validation import validate_payload
from nadi.datasource.base import ROW_NOT_FOUND, DataSource, Row, TableQuery
from nadi.query.cache import QueryCache
from nadi.query.keys import QueryKey

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")


class DataService:
    """Base for wrappers: one data source for I/O, one cache for invalidation."""

    #: Human-readable entity name used in logs and error messages.
    entity: str = "record"

    def __init__(self, source: DataSource, cache: QueryCache) -> None:
        self.source = source
        self.cache = cache

    # ── reads ───────────────────────────────────────────────────────

    async def _fetch(self, query: TableQuery, entity: Optional[str] = None) -> Any:
        """Run a read; raise ``RemoteFetchError`` on backend failure."""
        result = await query.execute()
        if result.error is not None:
            name = entity or self.entity
            logger.error("Error fetching %s: %s", name, result.error.message)
            raise RemoteFetchError(name, result.error)
        return result.data if result.data is not None else []

    async def _cached(self, key: QueryKey, fetcher: Callable[[], Awaitable[T]]) -> T:
        return await self.cache.fetch(key, fetcher)

    # ── writes ──────────────────────────────────────────────────────

    @staticmethod
    def _validate(schema: type[M], payload: Any) -> M:
        """Validation stage: raises ``ValidationError`` before any dispatch."""
        return validate_payload(schema, payload).unwrap()

    async def _write(self, query: TableQuery, action: str, entity: Optional[str] = None) -> Any:
        """Run exactly one write; raise ``RemoteWriteError`` on failure."""
        result = await query.execute()
        if result.error is not None:
            name = entity or self.entity
            logger.error("Error trying to %s %s: %s", action, name, result.error.message)
            raise RemoteWriteError(name, action, result.error)
        return result.data

    async def _invalidate(self, *prefixes: QueryKey) -> None:
        for prefix in prefixes:
            await self.cache.invalidate(prefix)

    # ── guarded writes ──────────────────────────────────────────────

    @staticmethod
    def _keep_date_order(
        query: TableQuery,
        data: BaseModel,
        start: str = "start_date",
        end: str = "end_date",
    ) -> TableQuery:
        """Make a partial update that moves one end of a range conditional on the other.

        The stored row only matches while ``end >= start`` still holds; an
        open (NULL) end always matches.
        """
        sent = data.model_fields_set
        start_value = getattr(data, start, None)
        end_value = getattr(data, end, None)
        if start in sent and end not in sent and start_value is not None:
            return query.gte(end, start_value, or_null=True)
        if end in sent and start not in sent and end_value is not None:
            return query.lte(start, end_value, or_null=True)
        return query

    async def _current_row(self, table: str, record_id: Any) -> Optional[Row]:
        rows = await self._fetch(self.source.table(table).select().eq("id", record_id).limit(1))
        return rows[0] if rows else None

    async def _write_or_explain(
        self,
        query: TableQuery,
        action: str,
        entity: str,
        *,
        record_id: Any,
        explain: Callable[[Row], Exception],
    ) -> Any:
        """Run a conditional single-row write.

        When nothing matched but the row exists, the condition rejected it and
        ``explain(row)`` is raised instead of the missing-row error.
        """
        try:
            return await self._write(query, action, entity)
        except RemoteWriteError as exc:
            if exc.remote_error.code != ROW_NOT_FOUND:
                raise
            current = await self._current_row(query.table, record_id)
            if current is None:
                raise
            raise explain(current) from exc

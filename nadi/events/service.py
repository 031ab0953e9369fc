"""Takwim event wrappers.

Events are one calendar cached under ``("takwim-events",)``; the category
catalog is read-only and cached per table under ``("takwim-categories", kind)``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional, Union

from nadi.common.exceptions import ValidationError
from nadi.common.service import DataService
from nadi.events.models import Event, EventCategory, EventModule, EventSubcategory
from nadi.events.schemas import (
    DeletedEvent,
    EventCatalog,
    EventCategoryOut,
    EventCreate,
    EventModuleOut,
    EventOut,
    EventSubcategoryOut,
    EventUpdate,
)
from nadi.query import keys

logger = logging.getLogger(__name__)

TABLE = Event.__tablename__


def _ends_before_start(current: dict) -> ValidationError:
    return ValidationError(
        {"end_datetime": ["end_datetime must be on or after start_datetime."]}
    )


class EventService(DataService):
    entity = "events"

    # ── Queries ─────────────────────────────────────────────────────

    async def fetch_events(self) -> list[EventOut]:
        """Every event, latest start first."""
        rows = await self._fetch(
            self.source.table(TABLE).select().order("start_datetime", ascending=False)
        )
        return [EventOut.model_validate(row) for row in rows]

    async def get_events(self) -> list[EventOut]:
        return await self._cached(keys.events(), self.fetch_events)

    async def fetch_categories(self) -> list[EventCategoryOut]:
        rows = await self._active(EventCategory.__tablename__, "categories")
        return [EventCategoryOut.model_validate(row) for row in rows]

    async def fetch_subcategories(self) -> list[EventSubcategoryOut]:
        rows = await self._active(EventSubcategory.__tablename__, "subcategories")
        return [EventSubcategoryOut.model_validate(row) for row in rows]

    async def fetch_modules(self) -> list[EventModuleOut]:
        rows = await self._active(EventModule.__tablename__, "modules")
        return [EventModuleOut.model_validate(row) for row in rows]

    async def get_catalog(self) -> EventCatalog:
        categories, subcategories, modules = await asyncio.gather(
            self._cached(keys.event_catalog("categories"), self.fetch_categories),
            self._cached(keys.event_catalog("subcategories"), self.fetch_subcategories),
            self._cached(keys.event_catalog("modules"), self.fetch_modules),
        )
        return EventCatalog(categories=categories, subcategories=subcategories, modules=modules)

    async def _active(self, table: str, entity: str) -> list[dict]:
        return await self._fetch(self.source.table(table).select().eq("is_active", True), entity)

    # ── Mutations ───────────────────────────────────────────────────

    async def create_event(
        self, payload: Union[EventCreate, Mapping[str, Any]], created_by: Optional[str] = None
    ) -> EventOut:
        data = self._validate(EventCreate, payload)
        values = data.model_dump()
        values.update(total_participant=0, created_by=created_by)
        row = await self._write(
            self.source.table(TABLE).insert(values).single(), "create", "event"
        )
        event = EventOut.model_validate(row)
        logger.info("Event %s created by %s", event.id, created_by)
        await self._invalidate(keys.events())
        return event

    async def update_event(
        self,
        event_id: str,
        payload: Union[EventUpdate, Mapping[str, Any]],
        updated_by: Optional[str] = None,
    ) -> EventOut:
        data = self._validate(EventUpdate, payload)
        values = data.model_dump(exclude_unset=True)
        values["updated_by"] = updated_by
        query = self.source.table(TABLE).update(values).eq("id", event_id)
        row = await self._write_or_explain(
            self._keep_date_order(query, data, "start_datetime", "end_datetime").single(),
            "update",
            "event",
            record_id=event_id,
            explain=_ends_before_start,
        )
        await self._invalidate(keys.events())
        return EventOut.model_validate(row)

    async def delete_event(self, event_id: str) -> DeletedEvent:
        row = await self._write(
            self.source.table(TABLE).delete().eq("id", event_id).single(), "delete", "event"
        )
        logger.info("Event %s deleted", event_id)
        await self._invalidate(keys.events())
        return DeletedEvent(id=row["id"])

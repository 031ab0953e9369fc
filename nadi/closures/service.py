"""Site closure wrappers — off days per site, cached under ``("offDays", site_id)``."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from nadi.closures.models import NadiClosure
from nadi.closures.schemas import (
    DeletedClosure,
    NadiClosureCreate,
    NadiClosureOut,
    NadiClosureUpdate,
)
from nadi.common.exceptions import ValidationError
from nadi.common.service import DataService
from nadi.query import keys

logger = logging.getLogger(__name__)

TABLE = NadiClosure.__tablename__


def _dates_out_of_order(current: dict) -> ValidationError:
    return ValidationError({"end_date": ["end_date must be on or after start_date."]})


class ClosureService(DataService):
    entity = "closures"

    # ── Queries ─────────────────────────────────────────────────────

    async def fetch_closures(self, site_id: Optional[str]) -> list[NadiClosureOut]:
        """Closures for one site, earliest first. No site means no rows."""
        if not site_id:
            return []
        rows = await self._fetch(
            self.source.table(TABLE)
            .select()
            .eq("site_id", site_id)
            .order("start_date", ascending=True)
        )
        return [NadiClosureOut.model_validate(row) for row in rows]

    async def get_closures(self, site_id: Optional[str]) -> list[NadiClosureOut]:
        return await self._cached(
            keys.off_days(site_id), lambda: self.fetch_closures(site_id)
        )

    # ── Mutations ───────────────────────────────────────────────────

    async def create_closure(
        self, payload: Union[NadiClosureCreate, Mapping[str, Any]]
    ) -> NadiClosureOut:
        data = self._validate(NadiClosureCreate, payload)
        row = await self._write(
            self.source.table(TABLE).insert(data.model_dump()).single(),
            "create",
            "closure",
        )
        closure = NadiClosureOut.model_validate(row)
        logger.info("Closure %s created for site %s", closure.id, closure.site_id)
        await self._invalidate(keys.off_days(closure.site_id))
        return closure

    async def update_closure(
        self, closure_id: str, payload: Union[NadiClosureUpdate, Mapping[str, Any]]
    ) -> NadiClosureOut:
        data = self._validate(NadiClosureUpdate, payload)
        query = self.source.table(TABLE).update(data.model_dump(exclude_unset=True)).eq("id", closure_id)
        row = await self._write_or_explain(
            self._keep_date_order(query, data).single(),
            "update",
            "closure",
            record_id=closure_id,
            explain=_dates_out_of_order,
        )
        closure = NadiClosureOut.model_validate(row)
        if "site_id" in data.model_fields_set:
            # The previous site is unknown here; refresh every site.
            await self._invalidate((keys.OFF_DAYS,))
        else:
            await self._invalidate(keys.off_days(closure.site_id))
        return closure

    async def delete_closure(self, closure_id: str) -> DeletedClosure:
        row = await self._write(
            self.source.table(TABLE).delete().eq("id", closure_id).single(),
            "delete",
            "closure",
        )
        deleted = DeletedClosure(id=row["id"], site_id=row["site_id"])
        logger.info("Closure %s deleted for site %s", deleted.id, deleted.site_id)
        await self._invalidate(keys.off_days(deleted.site_id))
        return deleted

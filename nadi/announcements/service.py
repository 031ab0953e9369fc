"""Announcement wrappers.

Everything lives under the ``("announcements",)`` prefix, so any write
refetches both the admin list and the per-audience dashboard views.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from nadi.announcements.models import Announcement
from nadi.announcements.schemas import (
    AnnouncementCreate,
    AnnouncementOut,
    AnnouncementUpdate,
    DeletedAnnouncement,
)
from nadi.common.constants import AnnouncementStatus
from nadi.common.exceptions import ValidationError
from nadi.common.service import DataService
from nadi.database import utcnow
from nadi.query import keys

logger = logging.getLogger(__name__)

TABLE = Announcement.__tablename__


def _in_window(item: AnnouncementOut, at: datetime) -> bool:
    # open-ended on either side when a bound is missing
    if item.start_date is not None and item.start_date > at:
        return False
    if item.end_date is not None and item.end_date <= at:
        return False
    return True


class AnnouncementService(DataService):
    entity = "announcements"

    # ── Queries ─────────────────────────────────────────────────────

    async def fetch_announcements(
        self, status: Optional[str] = None
    ) -> list[AnnouncementOut]:
        query = self.source.table(TABLE).select()
        if status:
            query = query.eq("status", status)
        rows = await self._fetch(query.order("created_at", ascending=False))
        return [AnnouncementOut.model_validate(row) for row in rows]

    async def get_announcements(self, status: Optional[str] = None) -> list[AnnouncementOut]:
        return await self._cached(
            keys.announcements(status), lambda: self.fetch_announcements(status)
        )

    async def fetch_active_announcements(
        self,
        user_type: Optional[str],
        at: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> list[AnnouncementOut]:
        """Active announcements whose window contains *at* and whose audience includes *user_type*."""
        if not user_type:
            return []
        at = at or utcnow()
        rows = await self._fetch(
            self.source.table(TABLE)
            .select()
            .eq("status", AnnouncementStatus.active.value)
            .order("created_at", ascending=False)
        )
        visible = [
            item
            for item in (AnnouncementOut.model_validate(row) for row in rows)
            if _in_window(item, at) and item.visible_to(user_type)
        ]
        return visible[:limit] if limit is not None else visible

    async def get_active_announcements(self, user_type: Optional[str]) -> list[AnnouncementOut]:
        return await self._cached(
            keys.active_announcements(user_type),
            lambda: self.fetch_active_announcements(user_type),
        )

    # ── Mutations ───────────────────────────────────────────────────

    async def create_announcement(
        self, payload: Union[AnnouncementCreate, Mapping[str, Any]]
    ) -> AnnouncementOut:
        data = self._validate(AnnouncementCreate, payload)
        row = await self._write(
            self.source.table(TABLE).insert(data.model_dump()).single(),
            "create",
            "announcement",
        )
        announcement = AnnouncementOut.model_validate(row)
        logger.info("Announcement %s created", announcement.id)
        await self._invalidate((keys.ANNOUNCEMENTS,))
        return announcement

    async def update_announcement(
        self, announcement_id: str, payload: Union[AnnouncementUpdate, Mapping[str, Any]]
    ) -> AnnouncementOut:
        data = self._validate(AnnouncementUpdate, payload)
        query = (
            self.source.table(TABLE)
            .update(data.model_dump(exclude_unset=True))
            .eq("id", announcement_id)
        )
        row = await self._write_or_explain(
            self._keep_date_order(query, data).single(),
            "update",
            "announcement",
            record_id=announcement_id,
            explain=lambda current: ValidationError(
                {"end_date": ["end_date must be on or after start_date."]}
            ),
        )
        await self._invalidate((keys.ANNOUNCEMENTS,))
        return AnnouncementOut.model_validate(row)

    async def delete_announcement(self, announcement_id: str) -> DeletedAnnouncement:
        row = await self._write(
            self.source.table(TABLE).delete().eq("id", announcement_id).single(),
            "delete",
            "announcement",
        )
        logger.info("Announcement %s deleted", announcement_id)
        await self._invalidate((keys.ANNOUNCEMENTS,))
        return DeletedAnnouncement(id=row["id"])

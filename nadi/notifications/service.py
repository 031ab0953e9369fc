"""Notification wrappers — per-user feed with read/type filters and unread counts."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from nadi.common.constants import ALL_TYPES, ReadFilter
from nadi.common.service import DataService
from nadi.notifications.models import Notification
from nadi.notifications.schemas import NotificationCreate, NotificationOut
from nadi.query import keys

logger = logging.getLogger(__name__)

TABLE = Notification.__tablename__


class NotificationService(DataService):
    entity = "notifications"

    # ── Queries ─────────────────────────────────────────────────────

    async def fetch_notifications(
        self,
        user_id: Optional[str],
        read_filter: str = ReadFilter.all.value,
        type_filter: str = ALL_TYPES,
    ) -> list[NotificationOut]:
        if not user_id:
            return []
        query = (
            self.source.table(TABLE)
            .select()
            .eq("user_id", user_id)
            .order("created_at", ascending=False)
        )
        if read_filter == ReadFilter.unread.value:
            query = query.eq("read", False)
        elif read_filter == ReadFilter.read.value:
            query = query.eq("read", True)
        if type_filter != ALL_TYPES:
            query = query.eq("type", type_filter)
        rows = await self._fetch(query)
        return [NotificationOut.model_validate(row) for row in rows]

    async def get_notifications(
        self,
        user_id: Optional[str],
        read_filter: str = ReadFilter.all.value,
        type_filter: str = ALL_TYPES,
    ) -> list[NotificationOut]:
        return await self._cached(
            keys.notifications(user_id, read_filter, type_filter),
            lambda: self.fetch_notifications(user_id, read_filter, type_filter),
        )

    async def count_unread(self, user_id: Optional[str]) -> int:
        if not user_id:
            return 0
        return await self._fetch(
            self.source.table(TABLE)
            .select(count=True)
            .eq("user_id", user_id)
            .eq("read", False)
        )

    async def get_unread_count(self, user_id: Optional[str]) -> int:
        return await self._cached(
            keys.unread_count(user_id), lambda: self.count_unread(user_id)
        )

    # ── Mutations ───────────────────────────────────────────────────

    async def create_notification(
        self, payload: Union[NotificationCreate, Mapping[str, Any]]
    ) -> NotificationOut:
        data = self._validate(NotificationCreate, payload)
        row = await self._write(
            self.source.table(TABLE).insert(data.model_dump()).single(),
            "create",
            "notification",
        )
        notification = NotificationOut.model_validate(row)
        await self._invalidate((keys.NOTIFICATIONS, notification.user_id))
        return notification

    async def mark_as_read(
        self, notification_id: str, user_id: Optional[str] = None
    ) -> NotificationOut:
        """Mark one notification read; *user_id* restricts it to its owner."""
        query = self.source.table(TABLE).update({"read": True}).eq("id", notification_id)
        if user_id is not None:
            query = query.eq("user_id", user_id)
        row = await self._write(query.single(), "mark as read", "notification")
        notification = NotificationOut.model_validate(row)
        await self._invalidate((keys.NOTIFICATIONS, notification.user_id))
        return notification

    async def mark_all_as_read(self, user_id: str) -> int:
        rows = await self._write(
            self.source.table(TABLE)
            .update({"read": True})
            .eq("user_id", user_id)
            .eq("read", False),
            "mark as read",
            "notifications",
        )
        marked = len(rows or [])
        logger.info("Marked %d notifications read for user %s", marked, user_id)
        await self._invalidate((keys.NOTIFICATIONS, user_id))
        return marked

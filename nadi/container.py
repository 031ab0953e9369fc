from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from nadi.announcements.service import AnnouncementService
from nadi.closures.service import ClosureService
from nadi.common.toast import LoggingNotifier, Notifier
from nadi.config import Settings
from nadi.datasource import DataSource, SqlDataSource, create_data_source
from nadi.events.service import EventService
from nadi.functions.service import FunctionHandlers
from nadi.inventory.service import AssetService, InventoryService
from nadi.leave.service import LeaveService
from nadi.notifications.service import NotificationService
from nadi.query import QueryCache
from nadi.sites.service import SiteService
from nadi.staff.service import StaffService
from nadi.usergroups.service import UserGroupService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    settings: Settings
    source: DataSource
    cache: QueryCache
    notifier: Notifier

    closures: ClosureService
    leave: LeaveService
    announcements: AnnouncementService
    staff: StaffService
    notifications: NotificationService
    inventory: InventoryService
    assets: AssetService
    events: EventService
    sites: SiteService
    user_groups: UserGroupService
    functions: FunctionHandlers

    async def start(self) -> None:
        # Schema migrations are not managed here; outside production the
        # declared tables are created on startup.
        if isinstance(self.source, SqlDataSource) and self.settings.ENVIRONMENT != "production":
            await self.source.create_all()

    async def close(self) -> None:
        await self.cache.close()
        await self.source.close()
        logger.info("Container closed")


def build_container(
    settings: Settings,
    *,
    source: Optional[DataSource] = None,
    notifier: Optional[Notifier] = None,
) -> Container:
    source = source if source is not None else create_data_source(settings)
    notifier = notifier if notifier is not None else LoggingNotifier()
    cache = QueryCache(
        stale_time=settings.QUERY_STALE_SECONDS, gc_time=settings.QUERY_GC_SECONDS
    )

    notifications = NotificationService(source, cache)

    return Container(
        settings=settings,
        source=source,
        cache=cache,
        notifier=notifier,
        closures=ClosureService(source, cache),
        leave=LeaveService(source, cache),
        announcements=AnnouncementService(source, cache),
        staff=StaffService(source, cache),
        notifications=notifications,
        inventory=InventoryService(source, cache),
        assets=AssetService(source, cache),
        events=EventService(source, cache),
        sites=SiteService(source, cache),
        user_groups=UserGroupService(source, cache),
        functions=FunctionHandlers(
            source, notifications, settings.MEMBER_VALIDATION_API_KEY
        ),
    )

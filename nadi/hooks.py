"""Per-entity observers bound to a container.

Each ``watch_*`` returns an unstarted ``QueryObserver``; use it as an async
context manager (or call ``start()``/``close()``)::

    async with watch_off_days(container, site_id) as off_days:
        await off_days.wait()
        rows = off_days.data

An observer is enabled only when its scope is present, so a missing site or
user never reaches the data source.
"""

from __future__ import annotations

from typing import Optional

from nadi.common.constants import ALL_TYPES, ReadFilter
from nadi.container import Container
from nadi.query import QueryObserver, keys


def watch_off_days(container: Container, site_id: Optional[str]) -> QueryObserver:
    return QueryObserver(
        container.cache,
        keys.off_days(site_id),
        lambda: container.closures.fetch_closures(site_id),
        container.notifier,
        enabled=bool(site_id),
        error_title="Error loading off days",
        error_description="Could not load off days for this site.",
    )


def watch_leave_balances(container: Container, user_id: Optional[str]) -> QueryObserver:
    return QueryObserver(
        container.cache,
        keys.leave_balances(user_id),
        lambda: container.leave.fetch_leave_balances(user_id),
        container.notifier,
        enabled=bool(user_id),
        error_description="Failed to load leave balances.",
    )


def watch_leave_applications(
    container: Container, user_id: Optional[str], is_admin: bool = False
) -> QueryObserver:
    return QueryObserver(
        container.cache,
        keys.leave_applications(user_id, is_admin),
        lambda: container.leave.fetch_leave_applications(user_id, is_admin),
        container.notifier,
        enabled=bool(user_id) or is_admin,
        error_description="Failed to fetch leave requests",
    )


def watch_announcements(
    container: Container, status: Optional[str] = None
) -> QueryObserver:
    return QueryObserver(
        container.cache,
        keys.announcements(status),
        lambda: container.announcements.fetch_announcements(status),
        container.notifier,
        error_description="Failed to fetch announcements",
    )


def watch_active_announcements(
    container: Container, user_type: Optional[str]
) -> QueryObserver:
    return QueryObserver(
        container.cache,
        keys.active_announcements(user_type),
        lambda: container.announcements.fetch_active_announcements(user_type),
        container.notifier,
        enabled=bool(user_type),
        error_description="Failed to fetch announcements",
    )


def watch_staff(container: Container, organization_id: Optional[str]) -> QueryObserver:
    return QueryObserver(
        container.cache,
        keys.staff(organization_id),
        lambda: container.staff.fetch_staff(organization_id),
        container.notifier,
        enabled=bool(organization_id),
        error_description="Failed to load staff members.",
    )


def watch_notifications(
    container: Container,
    user_id: Optional[str],
    read_filter: str = ReadFilter.all.value,
    type_filter: str = ALL_TYPES,
) -> QueryObserver:
    return QueryObserver(
        container.cache,
        keys.notifications(user_id, read_filter, type_filter),
        lambda: container.notifications.fetch_notifications(user_id, read_filter, type_filter),
        container.notifier,
        enabled=bool(user_id),
        error_description="Failed to load notifications.",
    )


def watch_inventory(container: Container, site_id: Optional[str]) -> QueryObserver:
    return QueryObserver(
        container.cache,
        keys.inventory(site_id),
        lambda: container.inventory.fetch_inventory(site_id),
        container.notifier,
        enabled=bool(site_id),
        error_description="Failed to fetch inventory",
    )


def watch_assets(container: Container, site_id: Optional[str]) -> QueryObserver:
    return QueryObserver(
        container.cache,
        keys.assets(site_id),
        lambda: container.assets.fetch_assets(site_id),
        container.notifier,
        enabled=bool(site_id),
        error_description="Failed to fetch assets",
    )


def watch_events(container: Container) -> QueryObserver:
    return QueryObserver(
        container.cache,
        keys.events(),
        container.events.fetch_events,
        container.notifier,
        error_title="Failed to load events",
        error_description="There was an error loading the event data.",
    )


def watch_event_catalog(container: Container, kind: str) -> QueryObserver:
    """One observer per catalog table: ``categories``, ``subcategories`` or ``modules``."""
    fetchers = {
        "categories": (container.events.fetch_categories, "category"),
        "subcategories": (container.events.fetch_subcategories, "subcategory"),
        "modules": (container.events.fetch_modules, "module"),
    }
    fetcher, noun = fetchers[kind]
    return QueryObserver(
        container.cache,
        keys.event_catalog(kind),
        fetcher,
        container.notifier,
        error_title=f"Failed to load {kind}",
        error_description=f"There was an error loading the {noun} data.",
    )


def watch_sites(container: Container, search_term: Optional[str] = None) -> QueryObserver:
    return QueryObserver(
        container.cache,
        keys.sites(search_term),
        lambda: container.sites.fetch_sites(search_term),
        container.notifier,
        error_description="Failed to load sites.",
    )


def watch_user_groups(container: Container) -> QueryObserver:
    return QueryObserver(
        container.cache,
        keys.user_groups(),
        container.user_groups.fetch_user_groups,
        container.notifier,
        error_description="Failed to load user groups.",
    )

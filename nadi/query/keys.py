"""Query keys: tuples of entity name plus scope, matched by prefix."""

from __future__ import annotations

from typing import Hashable, Optional

QueryKey = tuple[Hashable, ...]


def matches_prefix(key: QueryKey, prefix: QueryKey) -> bool:
    """``("offDays", "s1")`` matches prefixes ``("offDays",)`` and ``("offDays", "s1")``."""
    return key[: len(prefix)] == prefix


# ── Per-entity keys ─────────────────────────────────────────────────

OFF_DAYS = "offDays"
LEAVE_BALANCES = "leave-balances"
LEAVE_APPLICATIONS = "leave-applications"
ANNOUNCEMENTS = "announcements"
STAFF = "staff"
NOTIFICATIONS = "notifications"
INVENTORY = "inventory"
ASSETS = "assets"
EVENTS = "takwim-events"
EVENT_CATALOG = "takwim-categories"
SITES = "sites"
USER_GROUPS = "user-groups"


def off_days(site_id: Optional[str]) -> QueryKey:
    return (OFF_DAYS, site_id)


def leave_balances(user_id: Optional[str]) -> QueryKey:
    return (LEAVE_BALANCES, user_id)


def leave_applications(user_id: Optional[str] = None, is_admin: Optional[bool] = None) -> QueryKey:
    if user_id is None and is_admin is None:
        return (LEAVE_APPLICATIONS,)
    return (LEAVE_APPLICATIONS, user_id, is_admin)


def announcements(status: Optional[str] = None) -> QueryKey:
    return (ANNOUNCEMENTS, status or "all")


def active_announcements(user_type: Optional[str]) -> QueryKey:
    return (ANNOUNCEMENTS, "visible", user_type)


def staff(organization_id: Optional[str]) -> QueryKey:
    return (STAFF, organization_id)


def notifications(user_id: Optional[str], read_filter: str = "all", type_filter: str = "all") -> QueryKey:
    return (NOTIFICATIONS, user_id, read_filter, type_filter)


def unread_count(user_id: Optional[str]) -> QueryKey:
    return (NOTIFICATIONS, user_id, "unread-count")


def inventory(site_id: Optional[str]) -> QueryKey:
    return (INVENTORY, site_id)


def assets(site_id: Optional[str]) -> QueryKey:
    return (ASSETS, site_id)


def events() -> QueryKey:
    return (EVENTS,)


def event_catalog(kind: str) -> QueryKey:
    """``kind`` is one of ``categories``, ``subcategories`` or ``modules``."""
    return (EVENT_CATALOG, kind)


def sites(search_term: Optional[str] = None) -> QueryKey:
    return (SITES, search_term or None)


def user_groups() -> QueryKey:
    return (USER_GROUPS,)

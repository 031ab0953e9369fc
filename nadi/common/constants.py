"""Enums and constants shared by the data-access modules."""

from __future__ import annotations

import enum


# ── Users / access ──────────────────────────────────────────────────

class UserType(str, enum.Enum):
    super_admin = "super_admin"
    tp_admin = "tp_admin"
    tp_hr = "tp_hr"
    tp_site = "tp_site"
    staff_manager = "staff_manager"
    staff_assistant_manager = "staff_assistant_manager"
    member = "member"
    vendor_admin = "vendor_admin"
    vendor_staff = "vendor_staff"


ADMIN_USER_TYPES: frozenset[str] = frozenset(
    {UserType.super_admin.value, UserType.tp_admin.value, UserType.tp_hr.value}
)

STAFF_USER_TYPES: frozenset[str] = frozenset(
    {
        UserType.staff_manager.value,
        UserType.staff_assistant_manager.value,
        UserType.tp_site.value,
    }
)


# ── Leave ───────────────────────────────────────────────────────────

class LeavePeriod(str, enum.Enum):
    full_day = "full_day"
    half_day_am = "half_day_am"
    half_day_pm = "half_day_pm"


class LeaveApplicationStatus(str, enum.Enum):
    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"


# ── Staff ───────────────────────────────────────────────────────────

class StaffStatus(str, enum.Enum):
    active = "Active"
    on_leave = "On Leave"
    inactive = "Inactive"


DEFAULT_STAFF_STATUSES: tuple[str, ...] = tuple(s.value for s in StaffStatus)


# ── Announcements ───────────────────────────────────────────────────

class AnnouncementStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"


# ── Notifications ───────────────────────────────────────────────────

class NotificationType(str, enum.Enum):
    info = "info"
    success = "success"
    warning = "warning"
    error = "error"


class ReadFilter(str, enum.Enum):
    all = "all"
    unread = "unread"
    read = "read"


ALL_TYPES = "all"

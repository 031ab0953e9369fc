"""Imports every ORM model so that all tables are registered on ``Base.metadata``."""

from nadi.announcements.models import Announcement
from nadi.closures.models import NadiClosure
from nadi.common.models import Profile
from nadi.events.models import Event, EventCategory, EventModule, EventSubcategory
from nadi.inventory.models import Asset, InventoryItem
from nadi.leave.models import LeaveApplication, LeaveBalance
from nadi.notifications.models import Notification
from nadi.sites.models import SiteProfile
from nadi.staff.models import StaffMember
from nadi.usergroups.models import UserGroup

__all__ = [
    "Announcement",
    "Asset",
    "Event",
    "EventCategory",
    "EventModule",
    "EventSubcategory",
    "InventoryItem",
    "LeaveApplication",
    "LeaveBalance",
    "NadiClosure",
    "Notification",
    "Profile",
    "SiteProfile",
    "StaffMember",
    "UserGroup",
]

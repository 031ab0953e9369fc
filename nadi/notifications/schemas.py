"""Notification Pydantic v2 schemas — request / response validation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from nadi.common.constants import NotificationType
from nadi.common.types import UtcDateTime


class NotificationCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    user_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.info


class NotificationOut(BaseModel):
    """Single notification in list responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    read: bool
    created_at: UtcDateTime


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    marked_count: int

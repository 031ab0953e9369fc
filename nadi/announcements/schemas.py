"""Announcement Pydantic v2 schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from nadi.common.constants import AnnouncementStatus
from nadi.common.types import UtcDateTime
from nadi.common.validation import reject_null


class Attachment(BaseModel):
    name: str
    path: str
    size: int = Field(..., ge=0)
    type: str


class _AnnouncementFields(BaseModel):
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    @field_validator("title", "message", check_fields=False)
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("must not be blank.")
        return value

    @model_validator(mode="after")
    def validate_dates(self):
        start = getattr(self, "start_date", None)
        end = getattr(self, "end_date", None)
        if start is not None and end is not None and end < start:
            raise ValueError("end_date must be on or after start_date.")
        return self


class AnnouncementCreate(_AnnouncementFields):
    title: str = Field(..., max_length=200)
    message: str
    status: AnnouncementStatus = AnnouncementStatus.active
    user_types: list[str] = Field(default_factory=list)
    start_date: Optional[UtcDateTime] = None
    end_date: Optional[UtcDateTime] = None
    attachments: list[Attachment] = Field(default_factory=list)
    created_by: Optional[str] = None


class AnnouncementUpdate(_AnnouncementFields):
    title: Optional[str] = Field(None, max_length=200)
    message: Optional[str] = None
    status: Optional[AnnouncementStatus] = None
    user_types: Optional[list[str]] = None
    start_date: Optional[UtcDateTime] = None
    end_date: Optional[UtcDateTime] = None
    attachments: Optional[list[Attachment]] = None

    @field_validator("title", "message", "status", "user_types", "attachments")
    @classmethod
    def not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info)


class AnnouncementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    message: str
    status: AnnouncementStatus
    user_types: list[str] = Field(default_factory=list)
    start_date: Optional[UtcDateTime] = None
    end_date: Optional[UtcDateTime] = None
    attachments: list[Attachment] = Field(default_factory=list)
    created_by: Optional[str] = None
    created_at: UtcDateTime
    updated_at: Optional[UtcDateTime] = None

    @field_validator("user_types", "attachments", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return value if isinstance(value, list) else []

    def visible_to(self, user_type: Optional[str]) -> bool:
        return not self.user_types or user_type in self.user_types


class DeletedAnnouncement(BaseModel):
    id: str

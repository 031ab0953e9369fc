"""Takwim event schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from nadi.common.types import UtcDateTime
from nadi.common.validation import reject_null


class _EventDates(BaseModel):
    @model_validator(mode="after")
    def validate_dates(self):
        start = getattr(self, "start_datetime", None)
        end = getattr(self, "end_datetime", None)
        if start is not None and end is not None and end < start:
            raise ValueError("end_datetime must be on or after start_datetime.")
        return self


class EventCreate(_EventDates):
    model_config = ConfigDict(extra="forbid")

    program_name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category_id: Optional[int] = None
    subcategory_id: Optional[int] = None
    module_id: Optional[int] = None
    start_datetime: UtcDateTime
    end_datetime: Optional[UtcDateTime] = None
    location_event: Optional[str] = Field(None, max_length=255)
    capacity: Optional[int] = Field(None, ge=0)

    @field_validator("program_name")
    @classmethod
    def program_name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("program_name must not be blank.")
        return value.strip()


class EventUpdate(_EventDates):
    """Partial update; ``updated_by`` is stamped by the service."""

    model_config = ConfigDict(extra="forbid")

    program_name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category_id: Optional[int] = None
    subcategory_id: Optional[int] = None
    module_id: Optional[int] = None
    start_datetime: Optional[UtcDateTime] = None
    end_datetime: Optional[UtcDateTime] = None
    location_event: Optional[str] = Field(None, max_length=255)
    capacity: Optional[int] = Field(None, ge=0)

    @field_validator("program_name", "start_datetime")
    @classmethod
    def not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info)


class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    program_name: str
    description: Optional[str] = None
    start_datetime: UtcDateTime
    end_datetime: Optional[UtcDateTime] = None
    location_event: Optional[str] = None
    category_id: Optional[int] = None
    subcategory_id: Optional[int] = None
    module_id: Optional[int] = None
    total_participant: int = 0
    capacity: Optional[int] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None


class DeletedEvent(BaseModel):
    id: str


# ── Catalog ─────────────────────────────────────────────────────────


class EventCategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None


class EventSubcategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category_id: Optional[int] = None


class EventModuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    program_id: Optional[int] = None


class EventCatalog(BaseModel):
    """Active categories, subcategories and modules for the event form."""

    categories: list[EventCategoryOut]
    subcategories: list[EventSubcategoryOut]
    modules: list[EventModuleOut]

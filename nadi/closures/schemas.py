"""Closure Pydantic v2 schemas — write payload validation and row shape."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from nadi.common.types import UtcDateTime
from nadi.common.validation import reject_null


class _ClosureDates(BaseModel):
    @model_validator(mode="after")
    def validate_dates(self):
        start = getattr(self, "start_date", None)
        end = getattr(self, "end_date", None)
        if start is not None and end is not None and end < start:
            raise ValueError("end_date must be on or after start_date.")
        return self


class NadiClosureCreate(_ClosureDates):
    """Payload for creating a closure record."""

    model_config = ConfigDict(extra="forbid")

    site_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    start_date: UtcDateTime
    end_date: UtcDateTime
    is_recurring: bool = False
    recurrence_pattern: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank.")
        return value.strip()


class NadiClosureUpdate(_ClosureDates):
    """Partial update; only the fields that were sent are written."""

    model_config = ConfigDict(extra="forbid")

    site_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    start_date: Optional[UtcDateTime] = None
    end_date: Optional[UtcDateTime] = None
    is_recurring: Optional[bool] = None
    recurrence_pattern: Optional[str] = None
    description: Optional[str] = None

    @field_validator("site_id", "title", "start_date", "end_date", "is_recurring")
    @classmethod
    def not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank.")
        return value.strip()


class NadiClosureOut(BaseModel):
    """A closure row as returned by the data source."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    site_id: str
    title: str
    start_date: UtcDateTime
    end_date: UtcDateTime
    is_recurring: bool = False
    recurrence_pattern: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None


class DeletedClosure(BaseModel):
    id: str
    site_id: str

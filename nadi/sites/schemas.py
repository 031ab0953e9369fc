"""Site profile schemas."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from nadi.common.types import UtcDateTime
from nadi.common.validation import reject_null

ActiveStatus = Literal[0, 1]


class SiteCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sitename: str = Field(..., min_length=1, max_length=200)
    standard_code: Optional[str] = Field(None, max_length=50)
    active_status: ActiveStatus = 1

    @field_validator("sitename")
    @classmethod
    def sitename_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("sitename must not be blank.")
        return value.strip()


class SiteUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sitename: Optional[str] = Field(None, min_length=1, max_length=200)
    standard_code: Optional[str] = Field(None, max_length=50)
    active_status: Optional[ActiveStatus] = None

    @field_validator("sitename", "active_status")
    @classmethod
    def not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info)


class SiteActiveToggle(BaseModel):
    """``active`` is the site's state before the toggle."""

    active: bool


class SiteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sitename: str
    standard_code: Optional[str] = None
    active_status: int = 1
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None

    @property
    def is_active(self) -> bool:
        return self.active_status == 1


class DeletedSite(BaseModel):
    id: str

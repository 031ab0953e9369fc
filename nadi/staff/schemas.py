"""Staff Pydantic v2 schemas."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from nadi.common.constants import StaffStatus
from nadi.common.validation import reject_null


class _StaffFields(BaseModel):
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    @field_validator("name", check_fields=False)
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("name must not be blank.")
        return value.strip() if value is not None else value


class StaffMemberCreate(_StaffFields):
    organization_id: str = Field(..., min_length=1)
    name: str = Field(..., max_length=200)
    email: Optional[str] = Field(None, max_length=255)
    user_type: Optional[str] = None
    employ_date: Optional[date] = None
    status: StaffStatus = StaffStatus.active
    phone_number: Optional[str] = Field(None, max_length=30)
    ic_number: Optional[str] = Field(None, max_length=20)
    role: Optional[str] = Field(None, max_length=100)


class StaffMemberUpdate(_StaffFields):
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=255)
    user_type: Optional[str] = None
    employ_date: Optional[date] = None
    status: Optional[StaffStatus] = None
    phone_number: Optional[str] = Field(None, max_length=30)
    ic_number: Optional[str] = Field(None, max_length=20)
    role: Optional[str] = Field(None, max_length=100)

    @field_validator("name", "status")
    @classmethod
    def not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info)


class StaffStatusUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    status: StaffStatus


class StaffMemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    organization_id: str
    name: str
    email: Optional[str] = None
    user_type: Optional[str] = None
    employ_date: Optional[date] = None
    status: str
    phone_number: Optional[str] = None
    ic_number: Optional[str] = None
    role: Optional[str] = None


class StaffRoster(BaseModel):
    """A roster together with the status values present in it."""

    staff: list[StaffMemberOut]
    status_options: list[str]


class DeletedStaffMember(BaseModel):
    id: str
    organization_id: str

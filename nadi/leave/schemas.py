"""Leave Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Create / *Update / *Review → request bodies (write)
  - *Out                        → rows as returned by the data source
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from nadi.common.constants import LeaveApplicationStatus, LeavePeriod
from nadi.common.types import UtcDateTime
from nadi.common.validation import reject_null


# ═════════════════════════════════════════════════════════════════════
# Leave Balance
# ═════════════════════════════════════════════════════════════════════


class LeaveBalanceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    leave_type_id: int
    leave_type: str
    total_days: float
    used_days: float
    pending_days: float
    remaining_days: float


class LeaveBalanceUpdate(BaseModel):
    """Partial balance adjustment. Day counts are taken as given."""

    model_config = ConfigDict(extra="forbid")

    total_days: Optional[float] = Field(None, ge=0)
    used_days: Optional[float] = Field(None, ge=0)
    pending_days: Optional[float] = Field(None, ge=0)
    remaining_days: Optional[float] = None

    @field_validator("total_days", "used_days", "pending_days", "remaining_days")
    @classmethod
    def not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info)


# ═════════════════════════════════════════════════════════════════════
# Leave Application
# ═════════════════════════════════════════════════════════════════════


class LeaveApplicationCreate(BaseModel):
    """Request body for submitting a leave application."""

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    user_id: str = Field(..., min_length=1)
    user_name: Optional[str] = None
    leave_type_id: int
    leave_type: str = Field(..., min_length=1, max_length=50)
    start_date: UtcDateTime
    end_date: UtcDateTime
    period: LeavePeriod = LeavePeriod.full_day
    days: float = Field(..., gt=0)
    reason: str
    attachment_url: Optional[str] = None

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("reason must not be blank.")
        return value.strip()

    @model_validator(mode="after")
    def validate_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date.")
        return self


class LeaveApplicationReview(BaseModel):
    """Approve or reject a pending application."""

    model_config = ConfigDict(extra="forbid")

    status: Literal["Approved", "Rejected"]
    remarks: Optional[str] = Field(None, max_length=1000)


class LeaveApplicationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    user_name: Optional[str] = None
    leave_type_id: int
    leave_type: str
    start_date: UtcDateTime
    end_date: UtcDateTime
    days: float
    period: LeavePeriod
    reason: str
    status: LeaveApplicationStatus
    remarks: Optional[str] = None
    attachment_url: Optional[str] = None
    created_at: UtcDateTime
    updated_at: Optional[UtcDateTime] = None

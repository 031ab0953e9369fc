"""Leave ORM models: LeaveBalance, LeaveApplication."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from nadi.common.constants import LeaveApplicationStatus, LeavePeriod
from nadi.database import Base, new_id, utcnow


# ── LeaveBalance ────────────────────────────────────────────────────

class LeaveBalance(Base):
    """Per-user, per-leave-type entitlement. ``remaining_days`` is maintained by the backend."""

    __tablename__ = "leave_balances"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "leave_type_id", name="uq_leave_balance_user_type"),
    )

    id: Mapped[str] = mapped_column(sa.String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(sa.String(36), nullable=False, index=True)
    leave_type_id: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    leave_type: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    total_days: Mapped[float] = mapped_column(sa.Float, default=0, nullable=False)
    used_days: Mapped[float] = mapped_column(sa.Float, default=0, nullable=False)
    pending_days: Mapped[float] = mapped_column(sa.Float, default=0, nullable=False)
    remaining_days: Mapped[float] = mapped_column(sa.Float, default=0, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


# ── LeaveApplication ────────────────────────────────────────────────

class LeaveApplication(Base):
    __tablename__ = "leave_applications"

    id: Mapped[str] = mapped_column(sa.String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(sa.String(36), nullable=False, index=True)
    user_name: Mapped[Optional[str]] = mapped_column(sa.String(200))
    leave_type_id: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    leave_type: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    start_date: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)
    days: Mapped[float] = mapped_column(sa.Float, nullable=False)
    period: Mapped[str] = mapped_column(
        sa.String(20), default=LeavePeriod.full_day.value, nullable=False
    )
    reason: Mapped[str] = mapped_column(sa.Text, nullable=False)
    status: Mapped[str] = mapped_column(
        sa.String(20), default=LeaveApplicationStatus.pending.value, nullable=False
    )
    remarks: Mapped[Optional[str]] = mapped_column(sa.Text)
    attachment_url: Mapped[Optional[str]] = mapped_column(sa.String(500))
    created_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True), onupdate=utcnow
    )

"""Staff roster ORM model."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from nadi.common.constants import StaffStatus
from nadi.database import Base, new_id, utcnow


class StaffMember(Base):
    __tablename__ = "nd_staff"
    __table_args__ = (sa.Index("ix_nd_staff_org_name", "organization_id", "name"),)

    id: Mapped[str] = mapped_column(sa.String(36), primary_key=True, default=new_id)
    organization_id: Mapped[str] = mapped_column(sa.String(36), nullable=False)
    name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(sa.String(255))
    user_type: Mapped[Optional[str]] = mapped_column(sa.String(50))
    employ_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    status: Mapped[str] = mapped_column(
        sa.String(20), default=StaffStatus.active.value, nullable=False
    )
    phone_number: Mapped[Optional[str]] = mapped_column(sa.String(30))
    ic_number: Mapped[Optional[str]] = mapped_column(sa.String(20))
    role: Mapped[Optional[str]] = mapped_column(sa.String(100))
    created_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

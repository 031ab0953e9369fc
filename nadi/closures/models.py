"""Site closure (off day) ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from nadi.database import Base, new_id, utcnow


class NadiClosure(Base):
    __tablename__ = "nd_off_days"
    __table_args__ = (sa.Index("ix_nd_off_days_site_start", "site_id", "start_date"),)

    id: Mapped[str] = mapped_column(sa.String(36), primary_key=True, default=new_id)
    site_id: Mapped[str] = mapped_column(sa.String(36), nullable=False)
    title: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    start_date: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)
    is_recurring: Mapped[bool] = mapped_column(sa.Boolean, default=False, nullable=False)
    recurrence_pattern: Mapped[Optional[str]] = mapped_column(sa.String(50))
    description: Mapped[Optional[str]] = mapped_column(sa.Text)
    created_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

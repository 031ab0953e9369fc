"""Announcement ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from nadi.common.constants import AnnouncementStatus
from nadi.database import Base, new_id, utcnow


class Announcement(Base):
    __tablename__ = "announcements"

    id: Mapped[str] = mapped_column(sa.String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    message: Mapped[str] = mapped_column(sa.Text, nullable=False)
    status: Mapped[str] = mapped_column(
        sa.String(20), default=AnnouncementStatus.active.value, nullable=False
    )
    # Audience by user type; empty means everyone.
    user_types: Mapped[list[str]] = mapped_column(sa.JSON, default=list, nullable=False)
    start_date: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
    end_date: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
    attachments: Mapped[list[dict[str, Any]]] = mapped_column(sa.JSON, default=list, nullable=False)
    created_by: Mapped[Optional[str]] = mapped_column(sa.String(36))
    created_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

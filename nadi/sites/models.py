"""Site profile ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from nadi.database import Base, new_id, utcnow


class SiteProfile(Base):
    __tablename__ = "nd_site_profile"

    id: Mapped[str] = mapped_column(sa.String(36), primary_key=True, default=new_id)
    sitename: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    standard_code: Mapped[Optional[str]] = mapped_column(sa.String(50))
    # 1 = active, 0 = inactive
    active_status: Mapped[int] = mapped_column(sa.SmallInteger, default=1, nullable=False)
    created_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

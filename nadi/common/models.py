"""Common ORM models: Profile."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from nadi.database import Base, new_id, utcnow


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(sa.String(36), primary_key=True, default=new_id)
    email: Mapped[Optional[str]] = mapped_column(sa.String(255), unique=True)
    full_name: Mapped[Optional[str]] = mapped_column(sa.String(200))
    ic_number: Mapped[Optional[str]] = mapped_column(sa.String(20))
    user_type: Mapped[Optional[str]] = mapped_column(sa.String(50))
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utcnow
    )

"""Site inventory and asset ORM models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from nadi.database import Base, new_id, utcnow


class _SiteItemMixin:
    id: Mapped[str] = mapped_column(sa.String(36), primary_key=True, default=new_id)
    site_id: Mapped[str] = mapped_column(sa.String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text)
    is_active: Mapped[bool] = mapped_column(sa.Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


class InventoryItem(_SiteItemMixin, Base):
    __tablename__ = "nd_inventory"


class Asset(_SiteItemMixin, Base):
    __tablename__ = "nd_asset"

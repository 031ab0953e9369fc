"""Takwim event ORM models: the event calendar and its category catalog."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from nadi.database import Base, new_id, utcnow


class Event(Base):
    __tablename__ = "nd_event"
    __table_args__ = (sa.Index("ix_nd_event_start", "start_datetime"),)

    id: Mapped[str] = mapped_column(sa.String(36), primary_key=True, default=new_id)
    program_name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text)
    start_datetime: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)
    end_datetime: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
    location_event: Mapped[Optional[str]] = mapped_column(sa.String(255))
    category_id: Mapped[Optional[int]] = mapped_column(sa.Integer)
    subcategory_id: Mapped[Optional[int]] = mapped_column(sa.Integer)
    module_id: Mapped[Optional[int]] = mapped_column(sa.Integer)
    total_participant: Mapped[int] = mapped_column(sa.Integer, default=0, nullable=False)
    capacity: Mapped[Optional[int]] = mapped_column(sa.Integer)
    created_by: Mapped[Optional[str]] = mapped_column(sa.String(36))
    updated_by: Mapped[Optional[str]] = mapped_column(sa.String(36))
    created_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


class EventCategory(Base):
    __tablename__ = "nd_event_category"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text)
    is_active: Mapped[bool] = mapped_column(sa.Boolean, default=True, nullable=False)


class EventSubcategory(Base):
    __tablename__ = "nd_event_subcategory"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    category_id: Mapped[Optional[int]] = mapped_column(sa.Integer)
    is_active: Mapped[bool] = mapped_column(sa.Boolean, default=True, nullable=False)


class EventModule(Base):
    __tablename__ = "nd_event_module"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    program_id: Mapped[Optional[int]] = mapped_column(sa.Integer)
    is_active: Mapped[bool] = mapped_column(sa.Boolean, default=True, nullable=False)

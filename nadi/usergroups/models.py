"""User group ORM model."""

from __future__ import annotations

from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from nadi.database import Base


class UserGroup(Base):
    __tablename__ = "nd_user_group"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    group_name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text)
    user_types: Mapped[list[str]] = mapped_column(sa.JSON, default=list, nullable=False)

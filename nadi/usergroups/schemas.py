"""User group schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserGroupOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    group_name: str
    description: Optional[str] = None
    user_types: list[str] = Field(default_factory=list)

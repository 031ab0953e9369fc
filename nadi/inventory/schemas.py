"""Inventory / asset Pydantic v2 schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from nadi.common.types import UtcDateTime


class SiteItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    site_id: str
    name: str
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None


class ToggleActiveRequest(BaseModel):
    """The status the caller currently sees; the stored flag becomes its negation."""

    model_config = ConfigDict(extra="forbid")

    is_active: bool

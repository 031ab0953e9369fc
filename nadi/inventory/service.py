"""Inventory and asset wrappers: per-site listings and the active-status toggle."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from nadi.common.service import DataService
from nadi.inventory.models import Asset, InventoryItem
from nadi.inventory.schemas import SiteItemOut
from nadi.query import keys
from nadi.query.keys import QueryKey

logger = logging.getLogger(__name__)


class _SiteItemService(DataService):
    table: str
    key: Callable[[Optional[str]], QueryKey]

    async def _list(self, site_id: Optional[str]) -> list[SiteItemOut]:
        if not site_id:
            return []
        rows = await self._fetch(
            self.source.table(self.table).select().eq("site_id", site_id).order("name")
        )
        return [SiteItemOut.model_validate(row) for row in rows]

    async def _toggle(self, item_id: str, is_active: bool) -> SiteItemOut:
        """Store ``not is_active``; *is_active* is the status the caller last saw."""
        row = await self._write(
            self.source.table(self.table)
            .update({"is_active": not is_active})
            .eq("id", item_id)
            .single(),
            "update",
        )
        item = SiteItemOut.model_validate(row)
        logger.info("%s %s is_active=%s", self.entity, item.id, item.is_active)
        await self._invalidate(self.key(item.site_id))
        return item


class InventoryService(_SiteItemService):
    entity = "inventory"
    table = InventoryItem.__tablename__
    key = staticmethod(keys.inventory)

    async def fetch_inventory(self, site_id: Optional[str]) -> list[SiteItemOut]:
        return await self._list(site_id)

    async def get_inventory(self, site_id: Optional[str]) -> list[SiteItemOut]:
        return await self._cached(keys.inventory(site_id), lambda: self.fetch_inventory(site_id))

    async def toggle_inventory_active_status(self, item_id: str, is_active: bool) -> SiteItemOut:
        return await self._toggle(item_id, is_active)


class AssetService(_SiteItemService):
    entity = "assets"
    table = Asset.__tablename__
    key = staticmethod(keys.assets)

    async def fetch_assets(self, site_id: Optional[str]) -> list[SiteItemOut]:
        return await self._list(site_id)

    async def get_assets(self, site_id: Optional[str]) -> list[SiteItemOut]:
        return await self._cached(keys.assets(site_id), lambda: self.fetch_assets(site_id))

    async def toggle_asset_active_status(self, asset_id: str, is_active: bool) -> SiteItemOut:
        return await self._toggle(asset_id, is_active)

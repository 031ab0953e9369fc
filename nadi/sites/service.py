"""Site profile wrappers; every listing lives under the ``("sites",)`` prefix."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from nadi.common.service import DataService
from nadi.query import keys
from nadi.sites.models import SiteProfile
from nadi.sites.schemas import DeletedSite, SiteCreate, SiteOut, SiteUpdate

logger = logging.getLogger(__name__)

TABLE = SiteProfile.__tablename__


def matches_search(site: SiteOut, search_term: Optional[str]) -> bool:
    """Case-insensitive substring match on site name or standard code."""
    if not search_term:
        return True
    needle = search_term.lower()
    return needle in site.sitename.lower() or needle in (site.standard_code or "").lower()


class SiteService(DataService):
    entity = "sites"

    async def fetch_sites(self, search_term: Optional[str] = None) -> list[SiteOut]:
        rows = await self._fetch(self.source.table(TABLE).select().order("sitename"))
        sites = [SiteOut.model_validate(row) for row in rows]
        return [site for site in sites if matches_search(site, search_term)]

    async def get_sites(self, search_term: Optional[str] = None) -> list[SiteOut]:
        return await self._cached(
            keys.sites(search_term), lambda: self.fetch_sites(search_term)
        )

    async def create_site(self, payload: Union[SiteCreate, Mapping[str, Any]]) -> SiteOut:
        data = self._validate(SiteCreate, payload)
        row = await self._write(
            self.source.table(TABLE).insert(data.model_dump()).single(), "create", "site"
        )
        site = SiteOut.model_validate(row)
        logger.info("Site %s created", site.id)
        await self._invalidate((keys.SITES,))
        return site

    async def update_site(
        self, site_id: str, payload: Union[SiteUpdate, Mapping[str, Any]]
    ) -> SiteOut:
        data = self._validate(SiteUpdate, payload)
        return await self._update(site_id, data.model_dump(exclude_unset=True))

    async def toggle_site_active_status(self, site_id: str, active: bool) -> SiteOut:
        """Flip a site given its current state: an active site becomes inactive."""
        site = await self._update(site_id, {"active_status": 0 if active else 1})
        logger.info("Site %s %s", site_id, "deactivated" if active else "activated")
        return site

    async def delete_site(self, site_id: str) -> DeletedSite:
        row = await self._write(
            self.source.table(TABLE).delete().eq("id", site_id).single(), "delete", "site"
        )
        logger.info("Site %s deleted", site_id)
        await self._invalidate((keys.SITES,))
        return DeletedSite(id=row["id"])

    async def _update(self, site_id: str, values: dict[str, Any]) -> SiteOut:
        row = await self._write(
            self.source.table(TABLE).update(values).eq("id", site_id).single(),
            "update",
            "site",
        )
        await self._invalidate((keys.SITES,))
        return SiteOut.model_validate(row)

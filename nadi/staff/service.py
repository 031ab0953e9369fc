"""Staff roster wrappers, scoped by organization."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from nadi.common.constants import DEFAULT_STAFF_STATUSES
from nadi.common.service import DataService
from nadi.datasource.base import TableQuery
from nadi.query import keys
from nadi.staff.models import StaffMember
from nadi.staff.schemas import (
    DeletedStaffMember,
    StaffMemberCreate,
    StaffMemberOut,
    StaffMemberUpdate,
    StaffStatusUpdate,
)

logger = logging.getLogger(__name__)

TABLE = StaffMember.__tablename__


def status_options(staff: Iterable[StaffMemberOut]) -> list[str]:
    """Distinct statuses in roster order; the default set for an empty roster."""
    seen: list[str] = []
    for member in staff:
        if member.status not in seen:
            seen.append(member.status)
    return seen or list(DEFAULT_STAFF_STATUSES)


def _scoped(query: TableQuery, organization_id: Optional[str]) -> TableQuery:
    """Restrict a write to one organization; rows elsewhere read as missing."""
    if organization_id is None:
        return query
    return query.eq("organization_id", organization_id)


class StaffService(DataService):
    entity = "staff"

    async def fetch_staff(self, organization_id: Optional[str]) -> list[StaffMemberOut]:
        if not organization_id:
            return []
        rows = await self._fetch(
            self.source.table(TABLE)
            .select()
            .eq("organization_id", organization_id)
            .order("name")
        )
        return [StaffMemberOut.model_validate(row) for row in rows]

    async def get_staff(self, organization_id: Optional[str]) -> list[StaffMemberOut]:
        return await self._cached(
            keys.staff(organization_id), lambda: self.fetch_staff(organization_id)
        )

    async def create_staff_member(
        self, payload: Union[StaffMemberCreate, Mapping[str, Any]]
    ) -> StaffMemberOut:
        data = self._validate(StaffMemberCreate, payload)
        row = await self._write(
            self.source.table(TABLE).insert(data.model_dump()).single(),
            "create",
            "staff member",
        )
        member = StaffMemberOut.model_validate(row)
        logger.info("Staff member %s added to organization %s", member.id, member.organization_id)
        await self._invalidate(keys.staff(member.organization_id))
        return member

    async def update_staff_member(
        self,
        staff_id: str,
        payload: Union[StaffMemberUpdate, Mapping[str, Any]],
        organization_id: Optional[str] = None,
    ) -> StaffMemberOut:
        data = self._validate(StaffMemberUpdate, payload)
        return await self._update(staff_id, data.model_dump(exclude_unset=True), organization_id)

    async def update_staff_status(
        self, staff_id: str, status: str, organization_id: Optional[str] = None
    ) -> StaffMemberOut:
        data = self._validate(StaffStatusUpdate, {"status": status})
        return await self._update(staff_id, data.model_dump(), organization_id)

    async def delete_staff_member(
        self, staff_id: str, organization_id: Optional[str] = None
    ) -> DeletedStaffMember:
        row = await self._write(
            _scoped(self.source.table(TABLE).delete().eq("id", staff_id), organization_id).single(),
            "delete",
            "staff member",
        )
        deleted = DeletedStaffMember(id=row["id"], organization_id=row["organization_id"])
        await self._invalidate(keys.staff(deleted.organization_id))
        return deleted

    async def _update(
        self, staff_id: str, values: dict[str, Any], organization_id: Optional[str]
    ) -> StaffMemberOut:
        query = self.source.table(TABLE).update(values).eq("id", staff_id)
        row = await self._write(
            _scoped(query, organization_id).single(),
            "update",
            "staff member",
        )
        member = StaffMemberOut.model_validate(row)
        await self._invalidate(keys.staff(member.organization_id))
        return member

"""User group lookups and the group classification helpers."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from nadi.common.service import DataService
from nadi.query import keys
from nadi.usergroups.models import UserGroup
from nadi.usergroups.schemas import UserGroupOut

logger = logging.getLogger(__name__)

TABLE = UserGroup.__tablename__


def is_group_type(group: Optional[UserGroupOut], kind: str) -> bool:
    """True when the group name or any of its user types contains *kind*, ignoring case."""
    if group is None:
        return False
    needle = kind.lower()
    if needle in group.group_name.lower():
        return True
    return any(needle in user_type.lower() for user_type in group.user_types)


def get_group_by_id(
    groups: Iterable[UserGroupOut], group_id: Union[int, str]
) -> Optional[UserGroupOut]:
    try:
        wanted = int(group_id)
    except (TypeError, ValueError):
        return None
    return next((group for group in groups if group.id == wanted), None)


def is_mcmc_group(group: Optional[UserGroupOut]) -> bool:
    return is_group_type(group, "mcmc")


def is_tp_group(group: Optional[UserGroupOut]) -> bool:
    """Technology partner groups, by the ``tp`` shorthand or the full name."""
    return is_group_type(group, "tp") or is_group_type(group, "tech partner")


class UserGroupService(DataService):
    entity = "user groups"

    async def fetch_user_groups(self) -> list[UserGroupOut]:
        rows = await self._fetch(self.source.table(TABLE).select().order("group_name"))
        return [UserGroupOut.model_validate(row) for row in rows]

    async def get_user_groups(self) -> list[UserGroupOut]:
        return await self._cached(keys.user_groups(), self.fetch_user_groups)

"""Leave wrappers — balances per user and applications per user (or all, for admins).

Balances and applications share one invalidation story: submitting or
reviewing an application changes pending/used days, so both the application
lists and the owner's balances are refetched.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from nadi.common.constants import LeaveApplicationStatus
from nadi.common.exceptions import ValidationError
from nadi.common.service import DataService
from nadi.leave.models import LeaveApplication, LeaveBalance
from nadi.leave.schemas import (
    LeaveApplicationCreate,
    LeaveApplicationOut,
    LeaveApplicationReview,
    LeaveBalanceOut,
    LeaveBalanceUpdate,
)
from nadi.query import keys

logger = logging.getLogger(__name__)

BALANCES = LeaveBalance.__tablename__
APPLICATIONS = LeaveApplication.__tablename__


def _already_reviewed(current: dict) -> ValidationError:
    return ValidationError(
        {"status": [f"Leave application is already {current['status']}."]}
    )


class LeaveService(DataService):
    entity = "leave"

    # ── Balances ────────────────────────────────────────────────────

    async def fetch_leave_balances(self, user_id: Optional[str]) -> list[LeaveBalanceOut]:
        if not user_id:
            return []
        rows = await self._fetch(
            self.source.table(BALANCES)
            .select()
            .eq("user_id", user_id)
            .order("leave_type_id"),
            "leave balances",
        )
        return [LeaveBalanceOut.model_validate(row) for row in rows]

    async def get_leave_balances(self, user_id: Optional[str]) -> list[LeaveBalanceOut]:
        return await self._cached(
            keys.leave_balances(user_id), lambda: self.fetch_leave_balances(user_id)
        )

    async def update_leave_balance(
        self, balance_id: str, payload: Union[LeaveBalanceUpdate, Mapping[str, Any]]
    ) -> LeaveBalanceOut:
        data = self._validate(LeaveBalanceUpdate, payload)
        row = await self._write(
            self.source.table(BALANCES)
            .update(data.model_dump(exclude_unset=True))
            .eq("id", balance_id)
            .single(),
            "update",
            "leave balance",
        )
        balance = LeaveBalanceOut.model_validate(row)
        await self._invalidate(keys.leave_balances(balance.user_id))
        return balance

    # ── Applications ────────────────────────────────────────────────

    async def fetch_leave_applications(
        self, user_id: Optional[str], is_admin: bool = False
    ) -> list[LeaveApplicationOut]:
        """Admins see every application; everyone else sees their own."""
        if not user_id and not is_admin:
            return []
        query = self.source.table(APPLICATIONS).select()
        if not is_admin:
            query = query.eq("user_id", user_id)
        rows = await self._fetch(
            query.order("created_at", ascending=False), "leave applications"
        )
        return [LeaveApplicationOut.model_validate(row) for row in rows]

    async def get_leave_applications(
        self, user_id: Optional[str], is_admin: bool = False
    ) -> list[LeaveApplicationOut]:
        return await self._cached(
            keys.leave_applications(user_id, is_admin),
            lambda: self.fetch_leave_applications(user_id, is_admin),
        )

    async def submit_leave_application(
        self, payload: Union[LeaveApplicationCreate, Mapping[str, Any]]
    ) -> LeaveApplicationOut:
        data = self._validate(LeaveApplicationCreate, payload)
        row = await self._write(
            self.source.table(APPLICATIONS).insert(data.model_dump()).single(),
            "submit",
            "leave application",
        )
        application = LeaveApplicationOut.model_validate(row)
        logger.info(
            "Leave application %s submitted by %s (%s days)",
            application.id, application.user_id, application.days,
        )
        await self._invalidate(
            keys.leave_applications(), keys.leave_balances(application.user_id)
        )
        return application

    async def review_leave_application(
        self, application_id: str, payload: Union[LeaveApplicationReview, Mapping[str, Any]]
    ) -> LeaveApplicationOut:
        """Set an application to Approved or Rejected, with optional remarks."""
        data = self._validate(LeaveApplicationReview, payload)
        row = await self._write_or_explain(
            self.source.table(APPLICATIONS)
            .update(data.model_dump(exclude_unset=True))
            .eq("id", application_id)
            .eq("status", LeaveApplicationStatus.pending.value)
            .single(),
            "update",
            "leave application",
            record_id=application_id,
            explain=_already_reviewed,
        )
        application = LeaveApplicationOut.model_validate(row)
        logger.info("Leave application %s %s", application.id, data.status.lower())
        await self._invalidate(
            keys.leave_applications(), keys.leave_balances(application.user_id)
        )
        return application

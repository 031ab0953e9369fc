"""Leave router — balances, applications, submit and review.

All endpoints require authentication. Reviews and balance adjustments are
limited to HR admin user types.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from nadi.common.exceptions import AuthorizationError
from nadi.container import Container
from nadi.dependencies import CurrentUser, get_container, get_current_user, require_admin
from nadi.leave.schemas import (
    LeaveApplicationCreate,
    LeaveApplicationOut,
    LeaveApplicationReview,
    LeaveBalanceOut,
    LeaveBalanceUpdate,
)
from nadi.query import MutationObserver

router = APIRouter(prefix="", tags=["leave"])


def _target_user(user: CurrentUser, user_id: Optional[str]) -> str:
    if user_id and user_id != user.id and not user.is_admin:
        raise AuthorizationError(detail="Only administrators can view other users' leave.")
    return user_id or user.id


# ── GET /balances ───────────────────────────────────────────────────

@router.get("/balances", response_model=list[LeaveBalanceOut])
async def list_balances(
    user_id: Optional[str] = Query(None),
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """Leave balances for the caller, or for *user_id* when the caller is an admin."""
    return await container.leave.get_leave_balances(_target_user(user, user_id))


# ── PATCH /balances/{id} ────────────────────────────────────────────

@router.patch("/balances/{balance_id}", response_model=LeaveBalanceOut)
async def update_balance(
    balance_id: str,
    body: LeaveBalanceUpdate,
    user: CurrentUser = Depends(require_admin),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.leave.update_leave_balance,
        container.notifier,
        success_title="Leave balance updated",
        success_description="The leave balance has been successfully updated.",
        error_description="Failed to update leave balance.",
    )
    return await mutation.mutate_async(balance_id, body)


# ── GET /applications ───────────────────────────────────────────────

@router.get("/applications", response_model=list[LeaveApplicationOut])
async def list_applications(
    user_id: Optional[str] = Query(None),
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """Admins without a *user_id* get every application; others get their own."""
    if user.is_admin and user_id is None:
        return await container.leave.get_leave_applications(user.id, is_admin=True)
    return await container.leave.get_leave_applications(_target_user(user, user_id))


# ── POST /applications ──────────────────────────────────────────────

@router.post("/applications", response_model=LeaveApplicationOut, status_code=201)
async def submit_application(
    body: LeaveApplicationCreate,
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    _target_user(user, body.user_id)
    mutation = MutationObserver(
        container.leave.submit_leave_application,
        container.notifier,
        success_title="Leave application submitted",
        success_description="Your leave application has been submitted for approval.",
        error_description="Failed to submit leave application.",
    )
    return await mutation.mutate_async(body)


# ── PUT /applications/{id}/review ───────────────────────────────────

@router.put("/applications/{application_id}/review", response_model=LeaveApplicationOut)
async def review_application(
    application_id: str,
    body: LeaveApplicationReview,
    user: CurrentUser = Depends(require_admin),
    container: Container = Depends(get_container),
):
    """Approve or reject a leave application."""
    verb = body.status.lower()
    mutation = MutationObserver(
        container.leave.review_leave_application,
        container.notifier,
        success_title=f"Leave application {verb}",
        success_description=f"The leave application has been {verb}.",
        error_description="Failed to update leave application status.",
    )
    return await mutation.mutate_async(application_id, body)

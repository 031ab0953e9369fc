"""Staff router — organization roster and staff CRUD."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from nadi.common.constants import ADMIN_USER_TYPES, UserType
from nadi.common.exceptions import AuthorizationError
from nadi.container import Container
from nadi.dependencies import CurrentUser, get_container, get_current_user, require_user_type
from nadi.query import MutationObserver
from nadi.staff.schemas import (
    DeletedStaffMember,
    StaffMemberCreate,
    StaffMemberOut,
    StaffMemberUpdate,
    StaffRoster,
    StaffStatusUpdate,
)
from nadi.staff.service import status_options

router = APIRouter(prefix="", tags=["staff"])

_staff_managers = require_user_type(
    *ADMIN_USER_TYPES,
    UserType.staff_manager,
    UserType.staff_assistant_manager,
)


def _organization(user: CurrentUser, organization_id: Optional[str]) -> Optional[str]:
    if organization_id and organization_id != user.organization_id and not user.is_admin:
        raise AuthorizationError(detail="Cannot access another organization's staff.")
    return organization_id or user.organization_id


def _write_scope(user: CurrentUser) -> Optional[str]:
    """Organization a staff write is limited to; None lets admins reach any row."""
    if user.is_admin:
        return None
    if not user.organization_id:
        raise AuthorizationError(detail="No organization is linked to this account.")
    return user.organization_id


@router.get("", response_model=StaffRoster)
async def list_staff(
    organization_id: Optional[str] = Query(None),
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """Roster sorted by name, with the status filter options it supports."""
    staff = await container.staff.get_staff(_organization(user, organization_id))
    return StaffRoster(staff=staff, status_options=status_options(staff))


@router.post("", response_model=StaffMemberOut, status_code=201)
async def create_staff_member(
    body: StaffMemberCreate,
    user: CurrentUser = Depends(_staff_managers),
    container: Container = Depends(get_container),
):
    _organization(user, body.organization_id)
    mutation = MutationObserver(
        container.staff.create_staff_member,
        container.notifier,
        success_title="Staff member added",
        success_description=f"{body.name} has been added successfully",
        error_title="Error adding staff member",
    )
    return await mutation.mutate_async(body)


@router.patch("/{staff_id}", response_model=StaffMemberOut)
async def update_staff_member(
    staff_id: str,
    body: StaffMemberUpdate,
    user: CurrentUser = Depends(_staff_managers),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.staff.update_staff_member,
        container.notifier,
        success_title="Staff member updated",
        success_description="Staff details have been saved.",
    )
    return await mutation.mutate_async(staff_id, body, _write_scope(user))


@router.put("/{staff_id}/status", response_model=StaffMemberOut)
async def update_staff_status(
    staff_id: str,
    body: StaffStatusUpdate,
    user: CurrentUser = Depends(_staff_managers),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.staff.update_staff_status,
        container.notifier,
        success_title="Status updated",
        success_description=f"Staff status changed to {body.status}.",
    )
    return await mutation.mutate_async(staff_id, body.status, _write_scope(user))


@router.delete("/{staff_id}", response_model=DeletedStaffMember)
async def delete_staff_member(
    staff_id: str,
    user: CurrentUser = Depends(_staff_managers),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.staff.delete_staff_member,
        container.notifier,
        success_title="Staff member removed",
        success_description="The staff member has been removed.",
    )
    return await mutation.mutate_async(staff_id, _write_scope(user))

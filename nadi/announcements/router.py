"""Announcements router — admin list and CRUD, plus the caller's visible feed."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from nadi.announcements.schemas import (
    AnnouncementCreate,
    AnnouncementOut,
    AnnouncementUpdate,
    DeletedAnnouncement,
)
from nadi.common.constants import AnnouncementStatus
from nadi.container import Container
from nadi.dependencies import CurrentUser, get_container, get_current_user, require_admin
from nadi.query import MutationObserver

router = APIRouter(prefix="", tags=["announcements"])


@router.get("", response_model=list[AnnouncementOut])
async def list_announcements(
    status: Optional[AnnouncementStatus] = Query(None),
    user: CurrentUser = Depends(require_admin),
    container: Container = Depends(get_container),
):
    return await container.announcements.get_announcements(status.value if status else None)


@router.get("/visible", response_model=list[AnnouncementOut])
async def visible_announcements(
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """Active announcements addressed to the caller's user type."""
    return await container.announcements.get_active_announcements(user.user_type)


@router.post("", response_model=AnnouncementOut, status_code=201)
async def create_announcement(
    body: AnnouncementCreate,
    user: CurrentUser = Depends(require_admin),
    container: Container = Depends(get_container),
):
    if body.created_by is None:
        body = body.model_copy(update={"created_by": user.id})
    mutation = MutationObserver(
        container.announcements.create_announcement,
        container.notifier,
        success_title="Success",
        success_description="Announcement created successfully",
        error_description="Failed to create announcement",
    )
    return await mutation.mutate_async(body)


@router.patch("/{announcement_id}", response_model=AnnouncementOut)
async def update_announcement(
    announcement_id: str,
    body: AnnouncementUpdate,
    user: CurrentUser = Depends(require_admin),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.announcements.update_announcement,
        container.notifier,
        success_title="Success",
        success_description="Announcement updated successfully",
        error_description="Failed to update announcement",
    )
    return await mutation.mutate_async(announcement_id, body)


@router.delete("/{announcement_id}", response_model=DeletedAnnouncement)
async def delete_announcement(
    announcement_id: str,
    user: CurrentUser = Depends(require_admin),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.announcements.delete_announcement,
        container.notifier,
        success_title="Success",
        success_description="Announcement deleted successfully",
        error_description="Failed to delete announcement",
    )
    return await mutation.mutate_async(announcement_id)

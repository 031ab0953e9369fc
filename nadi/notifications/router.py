"""Notifications router — the caller's feed, unread count and read markers."""

from fastapi import APIRouter, Depends, Query

from nadi.common.constants import ALL_TYPES, ReadFilter
from nadi.container import Container
from nadi.dependencies import CurrentUser, get_container, get_current_user
from nadi.notifications.schemas import (
    MarkAllReadResponse,
    NotificationOut,
    UnreadCountResponse,
)
from nadi.query import MutationObserver

router = APIRouter(prefix="", tags=["notifications"])


@router.get("", response_model=list[NotificationOut])
async def list_notifications(
    filter: ReadFilter = Query(ReadFilter.all),
    type: str = Query(ALL_TYPES),
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    return await container.notifications.get_notifications(user.id, filter.value, type)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    count = await container.notifications.get_unread_count(user.id)
    return UnreadCountResponse(unread_count=count)


@router.put("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.notifications.mark_all_as_read,
        container.notifier,
        success_description="All notifications marked as read",
        error_description="Failed to mark all notifications as read",
    )
    marked = await mutation.mutate_async(user.id)
    return MarkAllReadResponse(marked_count=marked)


@router.put("/{notification_id}/read", response_model=NotificationOut)
async def mark_read(
    notification_id: str,
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.notifications.mark_as_read,
        container.notifier,
        success_description="Notification marked as read",
        error_description="Failed to mark notification as read",
    )
    return await mutation.mutate_async(notification_id, user.id)

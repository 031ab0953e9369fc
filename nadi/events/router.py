"""Takwim router — the event calendar, its CRUD and the category catalog."""

from fastapi import APIRouter, Depends

from nadi.common.constants import ADMIN_USER_TYPES, STAFF_USER_TYPES
from nadi.container import Container
from nadi.dependencies import CurrentUser, get_container, get_current_user, require_user_type
from nadi.events.schemas import DeletedEvent, EventCatalog, EventCreate, EventOut, EventUpdate
from nadi.query import MutationObserver

router = APIRouter(prefix="", tags=["events"])

_organizers = require_user_type(*ADMIN_USER_TYPES, *STAFF_USER_TYPES)


@router.get("", response_model=list[EventOut])
async def list_events(
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """Every event, latest start first."""
    return await container.events.get_events()


@router.get("/catalog", response_model=EventCatalog)
async def event_catalog(
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """Active categories, subcategories and modules."""
    return await container.events.get_catalog()


@router.post("", response_model=EventOut, status_code=201)
async def create_event(
    body: EventCreate,
    user: CurrentUser = Depends(_organizers),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.events.create_event,
        container.notifier,
        success_title="Success",
        success_description="Event created successfully",
        error_description="Failed to create event",
    )
    return await mutation.mutate_async(body, user.id)


@router.patch("/{event_id}", response_model=EventOut)
async def update_event(
    event_id: str,
    body: EventUpdate,
    user: CurrentUser = Depends(_organizers),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.events.update_event,
        container.notifier,
        success_title="Success",
        success_description="Event updated successfully",
        error_description="Failed to update event",
    )
    return await mutation.mutate_async(event_id, body, user.id)


@router.delete("/{event_id}", response_model=DeletedEvent)
async def delete_event(
    event_id: str,
    user: CurrentUser = Depends(_organizers),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.events.delete_event,
        container.notifier,
        success_title="Success",
        success_description="Event deleted successfully",
        error_description="Failed to delete event",
    )
    return await mutation.mutate_async(event_id)

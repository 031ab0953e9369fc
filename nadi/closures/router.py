"""Closures router — list, create, update and delete site off days."""

from fastapi import APIRouter, Depends

from nadi.closures.schemas import (
    DeletedClosure,
    NadiClosureCreate,
    NadiClosureOut,
    NadiClosureUpdate,
)
from nadi.common.constants import ADMIN_USER_TYPES, STAFF_USER_TYPES
from nadi.container import Container
from nadi.dependencies import CurrentUser, get_container, get_current_user, require_user_type
from nadi.query import MutationObserver

router = APIRouter(prefix="", tags=["closures"])

_site_managers = require_user_type(*ADMIN_USER_TYPES, *STAFF_USER_TYPES)


# ── GET /sites/{site_id}/closures ───────────────────────────────────

@router.get("/sites/{site_id}/closures", response_model=list[NadiClosureOut])
async def list_closures(
    site_id: str,
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """Off days for a site, earliest first."""
    return await container.closures.get_closures(site_id)


# ── POST /closures ──────────────────────────────────────────────────

@router.post("/closures", response_model=NadiClosureOut, status_code=201)
async def create_closure(
    body: NadiClosureCreate,
    user: CurrentUser = Depends(_site_managers),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.closures.create_closure,
        container.notifier,
        success_title="Success",
        success_description="Off day has been added successfully.",
    )
    return await mutation.mutate_async(body)


# ── PATCH /closures/{id} ────────────────────────────────────────────

@router.patch("/closures/{closure_id}", response_model=NadiClosureOut)
async def update_closure(
    closure_id: str,
    body: NadiClosureUpdate,
    user: CurrentUser = Depends(_site_managers),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.closures.update_closure,
        container.notifier,
        success_title="Success",
        success_description="Off day has been updated successfully.",
    )
    return await mutation.mutate_async(closure_id, body)


# ── DELETE /closures/{id} ───────────────────────────────────────────

@router.delete("/closures/{closure_id}", response_model=DeletedClosure)
async def delete_closure(
    closure_id: str,
    user: CurrentUser = Depends(_site_managers),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.closures.delete_closure,
        container.notifier,
        success_title="Success",
        success_description="Off day has been deleted successfully.",
    )
    return await mutation.mutate_async(closure_id)

"""Sites router — searchable site list and admin site management."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from nadi.container import Container
from nadi.dependencies import CurrentUser, get_container, get_current_user, require_admin
from nadi.query import MutationObserver
from nadi.sites.schemas import DeletedSite, SiteActiveToggle, SiteCreate, SiteOut, SiteUpdate

router = APIRouter(prefix="", tags=["sites"])

_SAVE_FAILED = "Failed to save site. Please try again."


@router.get("", response_model=list[SiteOut])
async def list_sites(
    search: Optional[str] = Query(None, description="Matches site name or standard code"),
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    return await container.sites.get_sites(search)


@router.post("", response_model=SiteOut, status_code=201)
async def create_site(
    body: SiteCreate,
    user: CurrentUser = Depends(require_admin),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.sites.create_site,
        container.notifier,
        success_title="Success",
        success_description="Site created successfully.",
        error_description=_SAVE_FAILED,
    )
    return await mutation.mutate_async(body)


@router.patch("/{site_id}", response_model=SiteOut)
async def update_site(
    site_id: str,
    body: SiteUpdate,
    user: CurrentUser = Depends(require_admin),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.sites.update_site,
        container.notifier,
        success_title="Success",
        success_description="Site updated successfully.",
        error_description=_SAVE_FAILED,
    )
    return await mutation.mutate_async(site_id, body)


@router.put("/{site_id}/active", response_model=SiteOut)
async def toggle_site_active_status(
    site_id: str,
    body: SiteActiveToggle,
    user: CurrentUser = Depends(require_admin),
    container: Container = Depends(get_container),
):
    """Flip the site's active status; ``active`` is its state before the flip."""
    mutation = MutationObserver(
        container.sites.toggle_site_active_status,
        container.notifier,
        success_title="Success",
        success_description=f"Site {'deactivated' if body.active else 'activated'} successfully.",
        error_description="Failed to toggle active status. Please try again.",
    )
    return await mutation.mutate_async(site_id, body.active)


@router.delete("/{site_id}", response_model=DeletedSite)
async def delete_site(
    site_id: str,
    user: CurrentUser = Depends(require_admin),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.sites.delete_site,
        container.notifier,
        success_title="Success",
        success_description="Site deleted successfully.",
        error_description="Failed to delete site. Please try again.",
    )
    return await mutation.mutate_async(site_id)

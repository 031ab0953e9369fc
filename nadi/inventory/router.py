"""Inventory and asset router — site listings and active-status toggles."""

from fastapi import APIRouter, Depends

from nadi.common.constants import ADMIN_USER_TYPES, STAFF_USER_TYPES
from nadi.container import Container
from nadi.dependencies import CurrentUser, get_container, get_current_user, require_user_type
from nadi.inventory.schemas import SiteItemOut, ToggleActiveRequest
from nadi.query import MutationObserver

router = APIRouter(prefix="", tags=["inventory"])

_site_managers = require_user_type(*ADMIN_USER_TYPES, *STAFF_USER_TYPES)


# ── Inventory ───────────────────────────────────────────────────────

@router.get("/sites/{site_id}/inventory", response_model=list[SiteItemOut])
async def list_inventory(
    site_id: str,
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    return await container.inventory.get_inventory(site_id)


@router.post("/inventory/{item_id}/toggle-active", response_model=SiteItemOut)
async def toggle_inventory(
    item_id: str,
    body: ToggleActiveRequest,
    user: CurrentUser = Depends(_site_managers),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.inventory.toggle_inventory_active_status,
        container.notifier,
        success_title="Success",
        success_description=f"Inventory {'deactivated' if body.is_active else 'activated'} successfully",
        error_description="Failed to update inventory status",
    )
    return await mutation.mutate_async(item_id, body.is_active)


# ── Assets ──────────────────────────────────────────────────────────

@router.get("/sites/{site_id}/assets", response_model=list[SiteItemOut])
async def list_assets(
    site_id: str,
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    return await container.assets.get_assets(site_id)


@router.post("/assets/{asset_id}/toggle-active", response_model=SiteItemOut)
async def toggle_asset(
    asset_id: str,
    body: ToggleActiveRequest,
    user: CurrentUser = Depends(_site_managers),
    container: Container = Depends(get_container),
):
    mutation = MutationObserver(
        container.assets.toggle_asset_active_status,
        container.notifier,
        success_title="Success",
        success_description=f"Asset {'deactivated' if body.is_active else 'activated'} successfully",
        error_description="Failed to update asset status",
    )
    return await mutation.mutate_async(asset_id, body.is_active)

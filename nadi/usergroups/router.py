"""User groups router — read-only group list."""

from fastapi import APIRouter, Depends

from nadi.container import Container
from nadi.dependencies import CurrentUser, get_container, get_current_user
from nadi.usergroups.schemas import UserGroupOut

router = APIRouter(prefix="", tags=["user-groups"])


@router.get("", response_model=list[UserGroupOut])
async def list_user_groups(
    user: CurrentUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """Every user group, by name."""
    return await container.user_groups.get_user_groups()

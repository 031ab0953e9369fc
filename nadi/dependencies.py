"""Shared FastAPI dependencies — container access, JWT claims, user-type checks."""

from __future__ import annotations

import dataclasses
from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.exceptions import HTTPException
from jose import ExpiredSignatureError, JWTError, jwt

from nadi.common.constants import ADMIN_USER_TYPES
from nadi.common.exceptions import AuthorizationError
from nadi.container import Container


@dataclasses.dataclass(frozen=True)
class CurrentUser:
    """Claims carried by the bearer token."""

    id: str
    user_type: str
    organization_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.user_type in ADMIN_USER_TYPES


def get_container(request: Request) -> Container:
    return request.app.state.container


def _extract_bearer(request: Request) -> str:
    """Extract Bearer token from Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid Authorization header.")
    return auth_header[7:]


# ── Core dependency ─────────────────────────────────────────────────

async def get_current_user(
    request: Request,
    container: Container = Depends(get_container),
) -> CurrentUser:
    """Decode the JWT and return the caller's identity and user type."""
    token = _extract_bearer(request)
    settings = container.settings

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired.")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token.")

    user_id = payload.get("sub")
    user_type = payload.get("user_type")
    if not user_id or not user_type:
        raise HTTPException(status_code=401, detail="Token is missing required claims.")

    return CurrentUser(
        id=str(user_id),
        user_type=str(user_type),
        organization_id=payload.get("organization_id"),
    )


# ── User-type dependency ────────────────────────────────────────────

def require_user_type(*allowed: str) -> Callable:
    """Return a FastAPI dependency that rejects callers outside *allowed*."""
    allowed_types = frozenset(str(getattr(t, "value", t)) for t in allowed)

    async def _check(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.user_type not in allowed_types:
            raise AuthorizationError(
                detail=(
                    f"User type '{user.user_type}' is not permitted. "
                    f"Required one of: {sorted(allowed_types)}."
                ),
            )
        return user

    return _check


require_admin = require_user_type(*ADMIN_USER_TYPES)

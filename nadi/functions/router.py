"""Request handler routes under /functions/v1. No bearer token; rate limited per client."""

import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter

from nadi.container import Container
from nadi.dependencies import get_container
from nadi.functions.schemas import FunctionResponse


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def _respond(result: FunctionResponse) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.body)


def build_router(limiter: Limiter, limit: str) -> APIRouter:
    """Handler routes, each limited to *limit* per client on *limiter*."""
    router = APIRouter(prefix="", tags=["functions"])

    @router.post("/send-test-email")
    @limiter.limit(limit)
    async def send_test_email(
        request: Request,
        container: Container = Depends(get_container),
    ):
        """Record a notification standing in for a test email."""
        return _respond(await container.functions.send_test_email(await _json_body(request)))

    @router.post("/send-test-push")
    @limiter.limit(limit)
    async def send_test_push(
        request: Request,
        container: Container = Depends(get_container),
    ):
        """Record a notification standing in for a test push message."""
        return _respond(await container.functions.send_test_push(await _json_body(request)))

    @router.post("/validate-member")
    @limiter.limit(limit)
    async def validate_member(
        request: Request,
        x_api_key: Optional[str] = Header(None),
        container: Container = Depends(get_container),
    ):
        """Check whether a member with the given IC number or email exists."""
        result = await container.functions.validate_member(await _json_body(request), x_api_key)
        return _respond(result)

    return router

"""Custom exceptions and RFC 7807 Problem Detail error handlers."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nadi.datasource.base import ROW_NOT_FOUND, RemoteError

logger = logging.getLogger(__name__)

BASE_ERROR_URI = "https://nadi.example.org/errors"


# ── Exception hierarchy ─────────────────────────────────────────────

class AppException(Exception):
    """Base for all application exceptions → RFC 7807 JSON."""

    def __init__(
        self,
        status_code: int,
        error_type: str,
        title: str,
        detail: str,
        errors: Optional[dict[str, Any]] = None,
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        self.title = title
        self.detail = detail
        self.errors = errors
        super().__init__(detail)


class AuthorizationError(AppException):
    """403 — user type / group check failed."""

    def __init__(
        self,
        detail: str = "You do not have permission to perform this action.",
    ) -> None:
        super().__init__(
            status_code=403,
            error_type="forbidden",
            title="Forbidden",
            detail=detail,
        )


class ValidationError(AppException):
    """422 — payload rejected before it reached the data source."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__(
            status_code=422,
            error_type="validation-error",
            title="Validation Error",
            detail="One or more fields failed validation.",
            errors=errors,
        )


class _RemoteError(AppException):
    """Shared shape of data-source failures: keeps the backend error."""

    def __init__(
        self,
        error_type: str,
        title: str,
        detail: str,
        remote_error: RemoteError,
    ) -> None:
        self.remote_error = remote_error
        super().__init__(
            status_code=404 if remote_error.code == ROW_NOT_FOUND else 502,
            error_type=error_type,
            title=title,
            detail=detail,
            errors={"remote": [remote_error.message]},
        )


class RemoteFetchError(_RemoteError):
    """Read against the data source failed."""

    def __init__(self, entity: str, remote_error: RemoteError) -> None:
        self.entity = entity
        super().__init__(
            error_type="remote-fetch-error",
            title="Fetch Failed",
            detail=f"Failed to fetch {entity}: {remote_error.message}",
            remote_error=remote_error,
        )


class RemoteWriteError(_RemoteError):
    """Create / update / delete against the data source failed."""

    def __init__(self, entity: str, action: str, remote_error: RemoteError) -> None:
        self.entity = entity
        self.action = action
        super().__init__(
            error_type="remote-write-error",
            title="Write Failed",
            detail=f"Failed to {action} {entity}: {remote_error.message}",
            remote_error=remote_error,
        )


# ── Problem detail rendering ────────────────────────────────────────

def problem_response(exc: AppException, path: str) -> JSONResponse:
    """Render *exc* as an RFC 7807 ``application/problem+json`` response."""
    body: dict[str, Any] = {
        "type": f"{BASE_ERROR_URI}/{exc.error_type}",
        "title": exc.title,
        "status": exc.status_code,
        "detail": exc.detail,
        "instance": path,
    }
    if exc.errors:
        body["errors"] = exc.errors
    return JSONResponse(
        status_code=exc.status_code,
        content=body,
        media_type="application/problem+json",
    )


async def _on_app_exception(request: Request, exc: AppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return problem_response(exc, request.url.path)


async def _on_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    # loc[0] is the request part ("body", "query", ...); the rest names the field
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = tuple(err.get("loc", ()))
        name = ".".join(str(p) for p in loc[1:]) or (str(loc[0]) if loc else "__root__")
        errors.setdefault(name, []).append(err.get("msg", "Invalid value"))

    problem = ValidationError(errors)
    problem.detail = "Request validation failed."
    return problem_response(problem, request.url.path)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, _on_app_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _on_request_validation)  # type: ignore[arg-type]

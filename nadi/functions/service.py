"""Serverless-style request handlers: test email/push recording and member validation.

Each handler takes a parsed body and returns a ``FunctionResponse`` with the
HTTP status and JSON body to send back; failures are reported in the body
rather than raised.
"""

from __future__ import annotations

import hmac
import logging
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from nadi.common.exceptions import RemoteWriteError
from nadi.common.models import Profile
from nadi.datasource.base import DataSource
from nadi.functions.schemas import (
    EmailTestRequest,
    FunctionResponse,
    MemberValidationRequest,
    PushTestRequest,
)
from nadi.notifications.service import NotificationService

logger = logging.getLogger(__name__)

PROFILES = Profile.__tablename__


def _error(status_code: int, error: str, details: Optional[str] = None) -> FunctionResponse:
    body: dict[str, Any] = {"error": error}
    if details is not None:
        body["details"] = details
    return FunctionResponse(status_code=status_code, body=body)


class FunctionHandlers:
    def __init__(
        self,
        source: DataSource,
        notifications: NotificationService,
        member_api_key: str = "",
    ) -> None:
        self.source = source
        self.notifications = notifications
        self._member_api_key = member_api_key

    # ── send-test-email ─────────────────────────────────────────────

    async def send_test_email(self, payload: Any) -> FunctionResponse:
        body = _parse(EmailTestRequest, payload)
        if body is None or not (body.email and body.subject and body.message):
            return _error(400, "Missing required fields")

        logger.info('Test email would be sent to %s with subject "%s"', body.email, body.subject)
        result = await self.source.table(PROFILES).select().eq("email", body.email).single().execute()
        if not result.ok:
            return _error(404, "No user found with that email", result.error.message)

        return await self._record(
            user_id=result.data["id"],
            title=f"Email Test: {body.subject}",
            message=f"Email test sent to {body.email}\n\n{body.message}",
            success="Test email notification recorded",
        )

    # ── send-test-push ──────────────────────────────────────────────

    async def send_test_push(self, payload: Any) -> FunctionResponse:
        body = _parse(PushTestRequest, payload)
        if body is None or not (body.user_id and body.title and body.body):
            return _error(400, "Missing required fields")

        logger.info("Test push notification would be sent to user %s", body.user_id)
        result = await self.source.table(PROFILES).select().eq("id", body.user_id).single().execute()
        if not result.ok:
            return _error(404, "No user found with that ID", result.error.message)

        return await self._record(
            user_id=body.user_id,
            title=f"Push Test: {body.title}",
            message=body.body,
            success="Test push notification recorded",
        )

    # ── validate-member ─────────────────────────────────────────────

    async def validate_member(self, payload: Any, api_key: Optional[str]) -> FunctionResponse:
        if not self._api_key_matches(api_key):
            return _error(401, "Invalid or missing API key")

        body = _parse(MemberValidationRequest, payload)
        if body is None or not (body.ic_number or body.email):
            return _error(400, "Either IC number or email is required")

        query = self.source.table(PROFILES).select(count=True)
        query = query.eq("ic_number", body.ic_number) if body.ic_number else query.eq("email", body.email)
        result = await query.execute()
        if not result.ok:
            logger.error("Member validation lookup failed: %s", result.error.message)
            return _error(500, "An unexpected error occurred")

        is_valid = result.data > 0
        return FunctionResponse(
            body={
                "isValid": is_valid,
                "message": (
                    "Member validated successfully"
                    if is_valid
                    else "Member not found or invalid credentials"
                ),
            }
        )

    # ── helpers ─────────────────────────────────────────────────────

    def _api_key_matches(self, api_key: Optional[str]) -> bool:
        if not api_key or not self._member_api_key:
            return False
        return hmac.compare_digest(api_key.encode(), self._member_api_key.encode())

    async def _record(self, *, user_id: str, title: str, message: str, success: str) -> FunctionResponse:
        try:
            await self.notifications.create_notification(
                {"user_id": user_id, "title": title, "message": message, "type": "info"}
            )
        except RemoteWriteError as exc:
            return _error(500, "Failed to create notification record", exc.remote_error.message)
        return FunctionResponse(body={"success": True, "message": success})


def _parse(schema, payload: Any):
    if not isinstance(payload, dict):
        return None
    try:
        return schema.model_validate(payload)
    except PydanticValidationError:
        return None

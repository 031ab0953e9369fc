"""Request handler test suite — send-test-email, send-test-push and
validate-member status codes and bodies, over HTTP.
"""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from nadi.container import build_container
from nadi.main import create_app
from tests.conftest import make_profile

EMAIL_URL = "/functions/v1/send-test-email"
PUSH_URL = "/functions/v1/send-test-push"
VALIDATE_URL = "/functions/v1/validate-member"
API_KEY = {"x-api-key": "test-member-key"}


# ═════════════════════════════════════════════════════════════════════
# 1. SEND TEST EMAIL
# ═════════════════════════════════════════════════════════════════════


class TestSendTestEmail:

    async def test_records_notification(self, client, source):
        profile, = source.seed("profiles", make_profile(email="amir@example.com"))

        resp = await client.post(EMAIL_URL, json={
            "email": "amir@example.com", "subject": "Hello", "message": "Body text",
        })

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Test email notification recorded"}
        (notification,) = source.rows("notifications")
        assert notification["user_id"] == profile["id"]
        assert notification["title"] == "Email Test: Hello"
        assert notification["message"] == "Email test sent to amir@example.com\n\nBody text"
        assert notification["type"] == "info"
        assert notification["read"] is False

    @pytest.mark.parametrize("missing", ["email", "subject", "message"])
    async def test_missing_field_is_400(self, client, source, missing):
        body = {"email": "a@example.com", "subject": "s", "message": "m"}
        body.pop(missing)

        resp = await client.post(EMAIL_URL, json=body)

        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing required fields"}
        assert source.calls == []

    async def test_unparseable_body_is_400(self, client):
        resp = await client.post(EMAIL_URL, content=b"not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400

    async def test_unknown_email_is_404(self, client, source):
        resp = await client.post(EMAIL_URL, json={"email": "ghost@example.com", "subject": "s", "message": "m"})

        assert resp.status_code == 404
        assert resp.json()["error"] == "No user found with that email"
        assert "details" in resp.json()
        assert source.rows("notifications") == []

    async def test_notification_write_failure_is_500(self, client, source):
        source.seed("profiles", make_profile(email="amir@example.com"))
        source.fail_with["notifications"] = "disk full"

        resp = await client.post(EMAIL_URL, json={"email": "amir@example.com", "subject": "s", "message": "m"})

        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to create notification record", "details": "disk full"}


# ═════════════════════════════════════════════════════════════════════
# 2. SEND TEST PUSH
# ═════════════════════════════════════════════════════════════════════


class TestSendTestPush:

    async def test_records_notification(self, client, source):
        profile, = source.seed("profiles", make_profile())

        resp = await client.post(PUSH_URL, json={"userId": profile["id"], "title": "Ping", "body": "Pong"})

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Test push notification recorded"}
        (notification,) = source.rows("notifications")
        assert notification["title"] == "Push Test: Ping"
        assert notification["message"] == "Pong"

    async def test_missing_field_is_400(self, client):
        resp = await client.post(PUSH_URL, json={"userId": "u1", "title": "Ping"})

        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing required fields"}

    async def test_unknown_user_is_404(self, client):
        resp = await client.post(PUSH_URL, json={"userId": "nobody", "title": "t", "body": "b"})

        assert resp.status_code == 404
        assert resp.json()["error"] == "No user found with that ID"


# ═════════════════════════════════════════════════════════════════════
# 3. VALIDATE MEMBER
# ═════════════════════════════════════════════════════════════════════


class TestValidateMember:

    async def test_missing_api_key_is_401(self, client):
        resp = await client.post(VALIDATE_URL, json={"email": "a@example.com"})

        assert resp.status_code == 401
        assert resp.json() == {"error": "Invalid or missing API key"}

    async def test_wrong_api_key_is_401(self, client):
        resp = await client.post(VALIDATE_URL, json={"email": "a@example.com"}, headers={"x-api-key": "nope"})
        assert resp.status_code == 401

    async def test_neither_identifier_is_400(self, client):
        resp = await client.post(VALIDATE_URL, json={}, headers=API_KEY)

        assert resp.status_code == 400
        assert resp.json() == {"error": "Either IC number or email is required"}

    async def test_known_ic_number_is_valid(self, client, source):
        source.seed("profiles", make_profile(ic_number="123456789012"))

        resp = await client.post(VALIDATE_URL, json={"ic_number": "123456789012"}, headers=API_KEY)

        assert resp.status_code == 200
        assert resp.json() == {"isValid": True, "message": "Member validated successfully"}

    async def test_known_email_is_valid(self, client, source):
        source.seed("profiles", make_profile(email="demo@example.com"))

        resp = await client.post(VALIDATE_URL, json={"email": "demo@example.com"}, headers=API_KEY)

        assert resp.json()["isValid"] is True

    async def test_unknown_member(self, client):
        resp = await client.post(VALIDATE_URL, json={"email": "ghost@example.com"}, headers=API_KEY)

        assert resp.status_code == 200
        assert resp.json() == {"isValid": False, "message": "Member not found or invalid credentials"}


class TestRateLimit:

    @staticmethod
    def _client(app) -> AsyncClient:
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    async def test_handlers_are_rate_limited(self, test_settings, source, toasts):
        limited = test_settings.model_copy(update={"FUNCTIONS_RATE_LIMIT": "2/minute"})
        container = build_container(limited, source=source, notifier=toasts)

        async with self._client(create_app(container=container)) as ac:
            statuses = [
                (await ac.post(VALIDATE_URL, json={}, headers=API_KEY)).status_code
                for _ in range(3)
            ]
        await container.close()

        assert statuses == [400, 400, 429]

    async def test_each_app_counts_separately(self, test_settings, source, toasts):
        limited = test_settings.model_copy(update={"FUNCTIONS_RATE_LIMIT": "1/minute"})
        container = build_container(limited, source=source, notifier=toasts)

        statuses = []
        for _ in range(2):
            async with self._client(create_app(container=container)) as ac:
                statuses.append((await ac.post(VALIDATE_URL, json={}, headers=API_KEY)).status_code)
        await container.close()

        assert statuses == [400, 400]

    async def test_limit_comes_from_the_app_settings(self, client):
        statuses = [
            (await client.post(VALIDATE_URL, json={}, headers=API_KEY)).status_code
            for _ in range(3)
        ]

        assert statuses == [400, 400, 400]

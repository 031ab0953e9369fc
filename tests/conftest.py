"""Shared test fixtures — containers, app client, auth helpers, factories.

Services run against the in-memory data source; the SQL data source is
exercised separately over SQLite + aiosqlite.
"""

from __future__ import annotations

import os

# Set test settings before any other import touches pydantic-settings
os.environ.setdefault("JWT_SECRET", "test-secret-for-ci-do-not-use-in-production")
os.environ.setdefault("DATA_SOURCE", "memory")
os.environ.setdefault("MEMBER_VALIDATION_API_KEY", "test-member-key")
os.environ.setdefault("FUNCTIONS_RATE_LIMIT", "1000/minute")

import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt

import nadi.models  # noqa: F401  (registers every table)
from nadi.common.constants import UserType
from nadi.common.toast import ToastRecorder
from nadi.config import Settings, settings
from nadi.container import Container, build_container
from nadi.database import Base
from nadi.datasource import MemoryDataSource
from nadi.main import create_app


# ── Data source / container ─────────────────────────────────────────

@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        DATA_SOURCE="memory",
        QUERY_STALE_SECONDS=30.0,
        MEMBER_VALIDATION_API_KEY="test-member-key",
    )


@pytest.fixture
def source() -> MemoryDataSource:
    return MemoryDataSource(Base.metadata)


@pytest.fixture
def toasts() -> ToastRecorder:
    return ToastRecorder()


@pytest.fixture
async def container(test_settings, source, toasts) -> AsyncGenerator[Container, None]:
    built = build_container(test_settings, source=source, notifier=toasts)
    yield built
    await built.close()


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app(container):
    """Create a fresh app instance wired to the test container."""
    yield create_app(container=container)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Row factories ───────────────────────────────────────────────────

def make_closure(*, site_id: str = "site-1", title: str = "Hari Raya", **overrides) -> dict:
    data = dict(
        site_id=site_id,
        title=title,
        start_date=datetime(2025, 3, 31, tzinfo=timezone.utc),
        end_date=datetime(2025, 4, 1, tzinfo=timezone.utc),
        is_recurring=False,
    )
    data.update(overrides)
    return data


def make_leave_balance(*, user_id: str, leave_type_id: int = 1, leave_type: str = "Annual", **overrides) -> dict:
    data = dict(
        user_id=user_id,
        leave_type_id=leave_type_id,
        leave_type=leave_type,
        total_days=16,
        used_days=5,
        pending_days=2,
        remaining_days=9,
    )
    data.update(overrides)
    return data


def make_leave_application(*, user_id: str, **overrides) -> dict:
    data = dict(
        user_id=user_id,
        leave_type_id=1,
        leave_type="Annual",
        start_date="2025-05-15",
        end_date="2025-05-17",
        days=3,
        period="full_day",
        reason="Family vacation",
    )
    data.update(overrides)
    return data


def make_staff(*, organization_id: str = "org-1", name: str = "John Doe", **overrides) -> dict:
    data = dict(
        organization_id=organization_id,
        name=name,
        email=f"{name.lower().replace(' ', '.')}@example.com",
        user_type=UserType.staff_manager.value,
        status="Active",
        role="Site Manager",
    )
    data.update(overrides)
    return data


def make_profile(*, email: str = "staff@example.com", **overrides) -> dict:
    data = dict(
        id=str(uuid.uuid4()),
        email=email,
        full_name="Staff User",
        ic_number="900101-14-5678",
        user_type=UserType.staff_manager.value,
    )
    data.update(overrides)
    return data


# ── Auth helpers ────────────────────────────────────────────────────

def create_access_token(
    user_id: Optional[str] = None,
    user_type: str = UserType.staff_manager.value,
    *,
    organization_id: Optional[str] = "org-1",
    expired: bool = False,
) -> str:
    """Generate a JWT access token for testing."""
    if expired:
        exp = datetime.now(timezone.utc) - timedelta(hours=1)
    else:
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
    payload = {
        "sub": user_id or str(uuid.uuid4()),
        "user_type": user_type,
        "exp": exp,
    }
    if organization_id is not None:
        payload["organization_id"] = organization_id
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_headers(
    user_id: Optional[str] = None,
    user_type: str = UserType.staff_manager.value,
    **kwargs,
) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id, user_type, **kwargs)}"}

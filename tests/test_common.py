"""Tests for common utilities — validation stage, toasts, field types and
the exception hierarchy.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import BaseModel

from nadi.closures.schemas import NadiClosureCreate
from nadi.common.exceptions import (
    AuthorizationError,
    RemoteFetchError,
    RemoteWriteError,
    ValidationError,
)
from nadi.common.toast import (
    LoggingNotifier,
    Toast,
    ToastRecorder,
    ToastVariant,
    send_toast,
)
from nadi.common.types import UtcDateTime
from nadi.common.validation import validate_payload
from nadi.datasource.base import ROW_NOT_FOUND, RemoteError


class _Stamped(BaseModel):
    at: UtcDateTime


# ── Validation stage ────────────────────────────────────────────────


class TestValidatePayload:

    def test_valid_payload(self):
        result = validate_payload(
            NadiClosureCreate,
            {"site_id": "s1", "title": "  Hari Raya  ", "start_date": "2025-03-31", "end_date": "2025-04-01"},
        )

        assert result.ok
        assert result.unwrap().title == "Hari Raya"

    def test_blank_title_reported_by_field(self):
        result = validate_payload(
            NadiClosureCreate,
            {"site_id": "s1", "title": "   ", "start_date": "2025-03-31", "end_date": "2025-04-01"},
        )

        assert not result.ok
        assert result.error.errors == {"title": ["title must not be blank."]}

    def test_date_order_reported_at_root(self):
        result = validate_payload(
            NadiClosureCreate,
            {"site_id": "s1", "title": "x", "start_date": "2025-04-02", "end_date": "2025-04-01"},
        )

        assert result.error.errors == {"__root__": ["end_date must be on or after start_date."]}

    def test_unknown_field_rejected(self):
        result = validate_payload(
            NadiClosureCreate,
            {"site_id": "s1", "title": "x", "start_date": "2025-04-01", "end_date": "2025-04-01", "colour": "red"},
        )

        assert "colour" in result.error.errors

    def test_unwrap_raises_validation_error(self):
        result = validate_payload(NadiClosureCreate, {})

        with pytest.raises(ValidationError) as exc_info:
            result.unwrap()

        assert exc_info.value.status_code == 422
        assert {"site_id", "title", "start_date", "end_date"} <= set(exc_info.value.errors)

    def test_model_instance_revalidated(self):
        model = NadiClosureCreate(site_id="s1", title="x", start_date="2025-04-01", end_date="2025-04-01")
        assert validate_payload(NadiClosureCreate, model).ok


# ── UtcDateTime ─────────────────────────────────────────────────────


class TestUtcDateTime:

    def test_bare_date_is_midnight_utc(self):
        assert _Stamped(at="2025-01-10").at == datetime(2025, 1, 10, tzinfo=timezone.utc)

    def test_naive_datetime_assumed_utc(self):
        assert _Stamped(at=datetime(2025, 1, 10, 8, 30)).at.tzinfo == timezone.utc

    def test_offset_converted_to_utc(self):
        local = datetime(2025, 1, 10, 8, 0, tzinfo=timezone(timedelta(hours=8)))
        assert _Stamped(at=local).at == datetime(2025, 1, 10, 0, 0, tzinfo=timezone.utc)


# ── Toasts ──────────────────────────────────────────────────────────


class _BrokenNotifier:
    def toast(self, **kwargs):
        raise RuntimeError("display gone")


class TestToasts:

    def test_recorder_keeps_failures_separately(self):
        recorder = ToastRecorder()
        recorder.toast(description="Saved")
        recorder.toast(title="Error", description="Nope", variant=ToastVariant.destructive)

        assert [t.description for t in recorder.toasts] == ["Saved", "Nope"]
        assert [t.description for t in recorder.failures] == ["Nope"]

    def test_recorder_limit(self):
        recorder = ToastRecorder(limit=2)
        for n in range(3):
            recorder.toast(description=str(n))

        assert [t.description for t in recorder.toasts] == ["1", "2"]

    def test_recorder_forwards(self):
        downstream = ToastRecorder()
        ToastRecorder(forward=downstream).toast(description="Saved")

        assert downstream.toasts == [Toast(description="Saved")]

    def test_send_toast_swallows_notifier_failure(self, caplog):
        with caplog.at_level(logging.ERROR, logger="nadi.common.toast"):
            send_toast(_BrokenNotifier(), Toast(title="Success", description="Saved"))

        assert "Notifier failed to deliver toast" in caplog.text

    def test_logging_notifier_levels(self, caplog):
        notifier = LoggingNotifier()
        with caplog.at_level(logging.INFO, logger="nadi.toast"):
            notifier.toast(title="Success", description="Saved")
            notifier.toast(description="Broke", variant=ToastVariant.destructive)

        assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
            (logging.INFO, "Success: Saved"),
            (logging.WARNING, "Broke"),
        ]


# ── Exceptions ──────────────────────────────────────────────────────


class TestExceptions:

    def test_taxonomy(self):
        from nadi.common import exceptions

        problems = {
            name
            for name, value in vars(exceptions).items()
            if isinstance(value, type)
            and issubclass(value, exceptions.AppException)
            and not name.startswith("_")
        }

        assert problems == {
            "AppException", "AuthorizationError", "ValidationError", "RemoteFetchError", "RemoteWriteError",
        }

    def test_authorization_default_detail(self):
        assert AuthorizationError().status_code == 403

    def test_remote_errors_map_to_502(self):
        exc = RemoteFetchError("staff", RemoteError(message="timeout"))

        assert exc.status_code == 502
        assert exc.errors == {"remote": ["timeout"]}

    def test_missing_row_maps_to_404(self):
        exc = RemoteWriteError("closures", "delete", RemoteError(message="no rows", code=ROW_NOT_FOUND))

        assert exc.status_code == 404
        assert str(exc) == "Failed to delete closures: no rows"

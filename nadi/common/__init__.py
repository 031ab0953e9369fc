"""Common module — shared utilities for the NADI data layer."""

from nadi.common.constants import (
    ADMIN_USER_TYPES,
    DEFAULT_STAFF_STATUSES,
    STAFF_USER_TYPES,
    AnnouncementStatus,
    LeaveApplicationStatus,
    LeavePeriod,
    NotificationType,
    ReadFilter,
    StaffStatus,
    UserType,
)
from nadi.common.exceptions import (
    AppException,
    AuthorizationError,
    RemoteFetchError,
    RemoteWriteError,
    ValidationError,
    register_exception_handlers,
)
from nadi.common.toast import (
    LoggingNotifier,
    Notifier,
    Toast,
    ToastRecorder,
    ToastVariant,
)
from nadi.common.validation import ValidationResult, validate_payload

__all__ = [
    # Constants / Enums
    "ADMIN_USER_TYPES",
    "DEFAULT_STAFF_STATUSES",
    "STAFF_USER_TYPES",
    "AnnouncementStatus",
    "LeaveApplicationStatus",
    "LeavePeriod",
    "NotificationType",
    "ReadFilter",
    "StaffStatus",
    "UserType",
    # Exceptions
    "AppException",
    "AuthorizationError",
    "RemoteFetchError",
    "RemoteWriteError",
    "ValidationError",
    "register_exception_handlers",
    # Toasts
    "LoggingNotifier",
    "Notifier",
    "Toast",
    "ToastRecorder",
    "ToastVariant",
    # Validation
    "ValidationResult",
    "validate_payload",
]

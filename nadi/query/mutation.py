"""Presentation adapter for writes: runs a mutation wrapper and reports the outcome."""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar, Union

from nadi.common.exceptions import ValidationError
from nadi.common.toast import Notifier, Toast, ToastVariant, send_toast

logger = logging.getLogger(__name__)

R = TypeVar("R")

ErrorDescription = Union[str, Callable[[BaseException], str], None]


class MutationStatus(str, enum.Enum):
    idle = "idle"
    pending = "pending"
    success = "success"
    error = "error"


def describe_error(error: BaseException) -> str:
    """Human-readable description for a failed mutation."""
    if isinstance(error, ValidationError) and error.errors:
        return "; ".join(
            f"{field}: {', '.join(messages)}" for field, messages in error.errors.items()
        )
    return str(error) or error.__class__.__name__


class MutationObserver(Generic[R]):
    """Wraps one mutation wrapper with status tracking and toasts.

    ``mutate_async`` re-raises failures after reporting them; ``mutate``
    keeps them on ``error`` and returns ``None``.  The invalidation itself
    belongs to the wrapper, which signals the cache before returning.
    """

    def __init__(
        self,
        mutation_fn: Callable[..., Awaitable[R]],
        notifier: Notifier,
        *,
        success_title: Optional[str] = None,
        success_description: Optional[str] = None,
        error_title: str = "Error",
        error_description: ErrorDescription = None,
    ) -> None:
        self._fn = mutation_fn
        self._notifier = notifier
        self._success_title = success_title
        self._success_description = success_description
        self._error_title = error_title
        self._error_description = error_description

        self.status = MutationStatus.idle
        self.data: Optional[R] = None
        self.error: Optional[BaseException] = None

    @property
    def is_pending(self) -> bool:
        return self.status is MutationStatus.pending

    def reset(self) -> None:
        self.status = MutationStatus.idle
        self.data = None
        self.error = None

    async def mutate_async(self, *args: Any, **kwargs: Any) -> R:
        self.status = MutationStatus.pending
        self.error = None
        try:
            result = await self._fn(*args, **kwargs)
        except asyncio.CancelledError:
            self.status = MutationStatus.idle
            raise
        except Exception as exc:
            self.status = MutationStatus.error
            self.error = exc
            logger.error("Mutation %s failed: %s", getattr(self._fn, "__name__", self._fn), exc)
            self._report_failure(exc)
            raise

        self.status = MutationStatus.success
        self.data = result
        if self._success_description is not None:
            send_toast(
                self._notifier,
                Toast(title=self._success_title, description=self._success_description),
            )
        return result

    async def mutate(self, *args: Any, **kwargs: Any) -> Optional[R]:
        try:
            return await self.mutate_async(*args, **kwargs)
        except Exception:
            # Reported and kept on self.error by mutate_async.
            return None

    def _report_failure(self, error: BaseException) -> None:
        if self._error_description is None:
            description = describe_error(error)
        elif callable(self._error_description):
            description = self._error_description(error)
        else:
            description = self._error_description
        send_toast(
            self._notifier,
            Toast(
                title=self._error_title,
                description=description,
                variant=ToastVariant.destructive,
            ),
        )

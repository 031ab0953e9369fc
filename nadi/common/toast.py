"""User-visible notification side channel (toasts).

A notifier is fire-and-forget: callers hand it a title, description and
variant and never consume a return value.
"""

from __future__ import annotations

import collections
import dataclasses
import enum
import logging
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class ToastVariant(str, enum.Enum):
    default = "default"
    destructive = "destructive"


@dataclasses.dataclass(frozen=True)
class Toast:
    description: str
    title: Optional[str] = None
    variant: ToastVariant = ToastVariant.default


class Notifier(Protocol):
    def toast(
        self,
        *,
        description: str,
        title: Optional[str] = None,
        variant: ToastVariant = ToastVariant.default,
    ) -> None:
        ...


class LoggingNotifier:
    """Writes toasts to the application log."""

    def __init__(self, name: str = "nadi.toast") -> None:
        self._logger = logging.getLogger(name)

    def toast(
        self,
        *,
        description: str,
        title: Optional[str] = None,
        variant: ToastVariant = ToastVariant.default,
    ) -> None:
        level = logging.WARNING if variant is ToastVariant.destructive else logging.INFO
        if title:
            self._logger.log(level, "%s: %s", title, description)
        else:
            self._logger.log(level, "%s", description)


class ToastRecorder:
    """Keeps the most recent toasts in memory, optionally forwarding them."""

    def __init__(self, limit: int = 100, forward: Optional[Notifier] = None) -> None:
        self._toasts: collections.deque[Toast] = collections.deque(maxlen=limit)
        self._forward = forward

    @property
    def toasts(self) -> list[Toast]:
        return list(self._toasts)

    @property
    def failures(self) -> list[Toast]:
        return [t for t in self._toasts if t.variant is ToastVariant.destructive]

    def clear(self) -> None:
        self._toasts.clear()

    def toast(
        self,
        *,
        description: str,
        title: Optional[str] = None,
        variant: ToastVariant = ToastVariant.default,
    ) -> None:
        self._toasts.append(Toast(description=description, title=title, variant=variant))
        if self._forward is not None:
            self._forward.toast(description=description, title=title, variant=variant)


def send_toast(notifier: Notifier, toast: Toast) -> None:
    """Deliver *toast* without letting a faulty notifier reach the caller."""
    try:
        notifier.toast(
            description=toast.description, title=toast.title, variant=toast.variant,
        )
    except Exception:
        logger.exception("Notifier failed to deliver toast %r", toast.title)

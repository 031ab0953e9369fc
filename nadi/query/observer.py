"""Presentation adapter for reads: binds one query key to view state."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from nadi.common.toast import Notifier, Toast, ToastVariant, send_toast
from nadi.query.cache import Fetcher, QueryCache, QuerySnapshot, QueryStatus
from nadi.query.keys import QueryKey

logger = logging.getLogger(__name__)

T = TypeVar("T")

ErrorDescription = Union[str, Callable[[BaseException], str]]


class QueryObserver(Generic[T]):
    """Exposes ``data``, ``is_loading`` and ``error`` for one key.

    Every transition into the error state fires one destructive toast.
    Nothing here raises to the caller: fetch failures surface through
    ``error``.  ``close()`` cancels the pending fetch handle and stops all
    further state updates::

        async with QueryObserver(cache, key, fetcher, notifier) as view:
            await view.wait()
            rows = view.data
    """

    def __init__(
        self,
        cache: QueryCache,
        key: QueryKey,
        fetcher: Fetcher,
        notifier: Notifier,
        *,
        enabled: bool = True,
        error_title: str = "Error",
        error_description: ErrorDescription = "Failed to load data.",
    ) -> None:
        self.key = key
        self.enabled = enabled
        self._cache = cache
        self._fetcher = fetcher
        self._notifier = notifier
        self._error_title = error_title
        self._error_description = error_description

        self._status = QueryStatus.idle
        self._data: Optional[T] = None
        self._error: Optional[BaseException] = None
        self._task: Optional[asyncio.Task] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._closed = False

    # ── view state ──────────────────────────────────────────────────

    @property
    def status(self) -> QueryStatus:
        return self._status

    @property
    def data(self) -> Optional[T]:
        return self._data

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._status is QueryStatus.loading

    @property
    def closed(self) -> bool:
        return self._closed

    # ── lifecycle ───────────────────────────────────────────────────

    def start(self) -> "QueryObserver[T]":
        """Subscribe to the key and kick off the initial fetch."""
        if self._closed:
            raise RuntimeError("QueryObserver was closed")
        if self._unsubscribe is None:
            self._unsubscribe = self._cache.subscribe(self.key, self._on_change)
            current = self._cache.get(self.key)
            if current is not None and current.status is QueryStatus.success:
                self._data = current.data
                self._status = current.status
        if self.enabled:
            self._launch(force=False)
        return self

    def refetch(self) -> asyncio.Task:
        """Force a fetch of the key (joins one already in flight)."""
        return self._launch(force=True)

    async def wait(self) -> None:
        """Wait until the pending fetch, if any, has settled."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait({task})

    def close(self) -> None:
        """Cancel the pending fetch handle and detach from the cache."""
        self._closed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def __aenter__(self) -> "QueryObserver[T]":
        return self.start()

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()

    # ── internals ───────────────────────────────────────────────────

    def _launch(self, *, force: bool) -> asyncio.Task:
        if self._task is not None and not self._task.done():
            if not force:
                return self._task
            self._task.cancel()
        self._task = asyncio.get_running_loop().create_task(self._load(force))
        return self._task

    async def _load(self, force: bool) -> None:
        try:
            await self._cache.fetch(self.key, self._fetcher, force=force)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # Already delivered to _on_change through the cache entry.
            logger.debug("Query %r failed: %s", self.key, exc)

    def _on_change(self, snapshot: QuerySnapshot) -> None:
        if self._closed:
            return
        previous = self._status
        self._status = snapshot.status
        if snapshot.status is QueryStatus.success:
            self._data = snapshot.data
            self._error = None
        elif snapshot.status is QueryStatus.error:
            self._error = snapshot.error
            if previous is not QueryStatus.error and snapshot.error is not None:
                self._report(snapshot.error)

    def _report(self, error: BaseException) -> None:
        if callable(self._error_description):
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

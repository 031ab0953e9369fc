"""Keyed query cache and invalidation coordinator.

Each key moves through ``idle → loading → success | error``; any state can
re-enter ``loading`` on invalidation or a forced refetch.  Concurrent fetches
of one key share a single in-flight task, so the fetcher runs once.
Invalidation takes a key prefix, marks every matching entry stale and
refetches the entries somebody is subscribed to.  An entry nobody observes
or fetches is dropped once it has sat idle for ``gc_time`` seconds.
"""

from __future__ import annotations

import asyncio
import dataclasses
import enum
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from nadi.query.keys import QueryKey, matches_prefix

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]
Listener = Callable[["QuerySnapshot"], None]


class QueryStatus(str, enum.Enum):
    idle = "idle"
    loading = "loading"
    success = "success"
    error = "error"


@dataclasses.dataclass(frozen=True)
class QuerySnapshot:
    """Point-in-time view of one cache entry, handed to listeners."""

    key: QueryKey
    status: QueryStatus
    data: Any = None
    error: Optional[BaseException] = None
    updated_at: Optional[float] = None


@dataclasses.dataclass(eq=False)
class QueryEntry:
    key: QueryKey
    status: QueryStatus = QueryStatus.idle
    data: Any = None
    error: Optional[BaseException] = None
    updated_at: Optional[float] = None
    invalidated: bool = False
    fetcher: Optional[Fetcher] = None
    task: Optional[asyncio.Task] = None
    listeners: list[Listener] = dataclasses.field(default_factory=list)
    gc_handle: Optional[asyncio.TimerHandle] = None

    def snapshot(self) -> QuerySnapshot:
        return QuerySnapshot(
            key=self.key,
            status=self.status,
            data=self.data,
            error=self.error,
            updated_at=self.updated_at,
        )

    def is_fresh(self, stale_time: float) -> bool:
        if self.status is not QueryStatus.success or self.invalidated:
            return False
        assert self.updated_at is not None
        return time.monotonic() - self.updated_at < stale_time


class QueryCache:
    """Owns every query entry for one application instance."""

    def __init__(self, *, stale_time: float = 0.0, gc_time: float = 300.0) -> None:
        self.stale_time = stale_time
        self.gc_time = gc_time
        self._entries: dict[QueryKey, QueryEntry] = {}

    # ── inspection ──────────────────────────────────────────────────

    def get(self, key: QueryKey) -> Optional[QuerySnapshot]:
        entry = self._entries.get(key)
        return entry.snapshot() if entry is not None else None

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def is_fetching(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.task is not None

    def is_invalidated(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.invalidated

    # ── fetching ────────────────────────────────────────────────────

    async def fetch(self, key: QueryKey, fetcher: Fetcher, *, force: bool = False) -> Any:
        """Return data for *key*, running *fetcher* only when needed.

        A fetch already in flight for *key* is joined rather than repeated,
        even when *force* is set.  Otherwise a fresh success entry is served
        from cache unless *force* is set.
        """
        entry = self._entry(key)
        entry.fetcher = fetcher
        if entry.task is None:
            if not force and entry.is_fresh(self.stale_time):
                return entry.data
            self._cancel_gc(entry)
            entry.task = asyncio.get_running_loop().create_task(
                self._run(entry, fetcher), name=f"query:{key!r}",
            )
        # Shielded: a cancelled caller must not cancel a fetch others share.
        return await asyncio.shield(entry.task)

    async def _run(self, entry: QueryEntry, fetcher: Fetcher) -> Any:
        entry.status = QueryStatus.loading
        entry.invalidated = False
        self._notify(entry)
        try:
            data = await fetcher()
        except asyncio.CancelledError:
            entry.status = (
                QueryStatus.success if entry.updated_at is not None else QueryStatus.idle
            )
            entry.invalidated = True
            self._notify(entry)
            raise
        except Exception as exc:
            entry.status = QueryStatus.error
            entry.error = exc
            self._notify(entry)
            raise
        else:
            entry.status = QueryStatus.success
            entry.data = data
            entry.error = None
            entry.updated_at = time.monotonic()
            self._notify(entry)
            return data
        finally:
            entry.task = None
            self._schedule_gc(entry)

    # ── invalidation ────────────────────────────────────────────────

    async def invalidate(self, prefix: QueryKey) -> list[QueryKey]:
        """Mark every entry under *prefix* stale and refetch the observed ones.

        Resolves once those refetches have settled.  Fetch failures are not
        raised here; they land in the entries' error state for their
        subscribers.
        """
        affected: list[QueryKey] = []
        refetches = []
        for entry in list(self._entries.values()):
            if not matches_prefix(entry.key, prefix):
                continue
            entry.invalidated = True
            affected.append(entry.key)
            if entry.listeners and entry.fetcher is not None:
                refetches.append(self._refetch(entry))

        logger.debug("Invalidated %d query key(s) under %r", len(affected), prefix)
        if refetches:
            await asyncio.gather(*refetches)
        return affected

    async def _refetch(self, entry: QueryEntry) -> None:
        if entry.task is not None:
            # That fetch started before the invalidation; let it land first.
            await asyncio.wait({entry.task})
        if entry.fetcher is None:
            return
        try:
            await self.fetch(entry.key, entry.fetcher, force=True)
        except Exception as exc:
            logger.debug("Refetch of %r failed: %s", entry.key, exc)

    # ── subscriptions ───────────────────────────────────────────────

    def subscribe(self, key: QueryKey, listener: Listener) -> Callable[[], None]:
        """Call *listener* with a snapshot on every state change of *key*.

        Returns the matching unsubscribe function.
        """
        entry = self._entry(key)
        self._cancel_gc(entry)
        entry.listeners.append(listener)

        def unsubscribe() -> None:
            if listener in entry.listeners:
                entry.listeners.remove(listener)
                self._schedule_gc(entry)

        return unsubscribe

    def _notify(self, entry: QueryEntry) -> None:
        snapshot = entry.snapshot()
        for listener in list(entry.listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Query listener for %r failed", entry.key)

    # ── lifecycle ───────────────────────────────────────────────────

    def set_data(self, key: QueryKey, data: Any) -> None:
        """Store *data* as a successful result for *key* (e.g. after a write)."""
        entry = self._entry(key)
        entry.status = QueryStatus.success
        entry.data = data
        entry.error = None
        entry.updated_at = time.monotonic()
        entry.invalidated = False
        self._notify(entry)
        self._schedule_gc(entry)

    async def close(self) -> None:
        """Cancel every in-flight fetch and drop all entries."""
        tasks = [e.task for e in self._entries.values() if e.task is not None]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        for entry in self._entries.values():
            self._cancel_gc(entry)
        self._entries.clear()

    # ── garbage collection ──────────────────────────────────────────

    def _schedule_gc(self, entry: QueryEntry) -> None:
        if entry.listeners or entry.task is not None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Outside a loop there is nothing to collect on.
            return
        self._cancel_gc(entry)
        entry.gc_handle = loop.call_later(self.gc_time, self._collect, entry)

    @staticmethod
    def _cancel_gc(entry: QueryEntry) -> None:
        if entry.gc_handle is not None:
            entry.gc_handle.cancel()
            entry.gc_handle = None

    def _collect(self, entry: QueryEntry) -> None:
        entry.gc_handle = None
        if self._entries.get(entry.key) is not entry:
            return
        if entry.listeners or entry.task is not None:
            return
        del self._entries[entry.key]
        logger.debug("Collected idle query %r", entry.key)

    def _entry(self, key: QueryKey) -> QueryEntry:
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = QueryEntry(key=key)
        return entry

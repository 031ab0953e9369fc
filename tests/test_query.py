"""Query layer test suite — keyed cache, de-duplication, prefix invalidation,
read observers (view state, toasts, cancellation) and mutation observers.
"""

from __future__ import annotations

import asyncio

import pytest

from nadi.common.exceptions import ValidationError
from nadi.common.toast import ToastRecorder, ToastVariant
from nadi.query import MutationObserver, MutationStatus, QueryCache, QueryObserver, QueryStatus, keys
from nadi.query.keys import matches_prefix


# ── Helpers ─────────────────────────────────────────────────────────


class CountingFetcher:
    """Fetcher that counts calls and can be held open with an event."""

    def __init__(self, result=None, *, error: Exception | None = None):
        self.calls = 0
        self.result = result if result is not None else ["row"]
        self.error = error
        self.release = asyncio.Event()
        self.release.set()

    async def __call__(self):
        self.calls += 1
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return list(self.result)


async def _settle():
    for _ in range(5):
        await asyncio.sleep(0)


# ═════════════════════════════════════════════════════════════════════
# 1. KEYS
# ═════════════════════════════════════════════════════════════════════


class TestQueryKeys:

    def test_prefix_matching(self):
        assert matches_prefix(("offDays", "s1"), ("offDays",))
        assert matches_prefix(("offDays", "s1"), ("offDays", "s1"))
        assert not matches_prefix(("offDays", "s1"), ("offDays", "s2"))
        assert not matches_prefix(("offDays",), ("offDays", "s1"))

    def test_leave_applications_root_key(self):
        assert keys.leave_applications() == ("leave-applications",)
        assert keys.leave_applications("u1", False) == ("leave-applications", "u1", False)

    def test_visible_announcements_do_not_collide_with_status_list(self):
        assert keys.announcements("active") == ("announcements", "active")
        assert keys.active_announcements("tp_site") == ("announcements", "visible", "tp_site")
        assert keys.announcements() == ("announcements", "all")

    def test_unread_count_under_user_prefix(self):
        assert matches_prefix(keys.unread_count("u1"), ("notifications", "u1"))
        assert matches_prefix(keys.notifications("u1", "unread", "info"), ("notifications", "u1"))

    def test_site_search_keys_share_prefix(self):
        assert keys.sites("") == keys.sites() == ("sites", None)
        assert matches_prefix(keys.sites("amp"), ("sites",))
        assert keys.event_catalog("modules") == ("takwim-categories", "modules")


# ═════════════════════════════════════════════════════════════════════
# 2. CACHE
# ═════════════════════════════════════════════════════════════════════


class TestQueryCacheFetch:

    async def test_concurrent_fetches_share_one_call(self):
        cache = QueryCache(stale_time=30)
        fetcher = CountingFetcher()
        fetcher.release.clear()

        first = asyncio.create_task(cache.fetch(("offDays", "s1"), fetcher))
        second = asyncio.create_task(cache.fetch(("offDays", "s1"), fetcher))
        await asyncio.sleep(0)
        assert cache.is_fetching(("offDays", "s1"))
        fetcher.release.set()

        assert await first == ["row"]
        assert await second == ["row"]
        assert fetcher.calls == 1

    async def test_fresh_entry_served_from_cache(self):
        cache = QueryCache(stale_time=30)
        fetcher = CountingFetcher()

        await cache.fetch(("staff", "org-1"), fetcher)
        await cache.fetch(("staff", "org-1"), fetcher)

        assert fetcher.calls == 1
        assert cache.get(("staff", "org-1")).status is QueryStatus.success

    async def test_zero_stale_time_always_refetches(self):
        cache = QueryCache(stale_time=0)
        fetcher = CountingFetcher()

        await cache.fetch(("staff", "org-1"), fetcher)
        await cache.fetch(("staff", "org-1"), fetcher)

        assert fetcher.calls == 2

    async def test_force_bypasses_fresh_entry(self):
        cache = QueryCache(stale_time=30)
        fetcher = CountingFetcher()

        await cache.fetch(("assets", "s1"), fetcher)
        await cache.fetch(("assets", "s1"), fetcher, force=True)

        assert fetcher.calls == 2

    async def test_failure_sets_error_state_and_raises(self):
        cache = QueryCache(stale_time=30)
        boom = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await cache.fetch(("inventory", "s1"), CountingFetcher(error=boom))

        snapshot = cache.get(("inventory", "s1"))
        assert snapshot.status is QueryStatus.error
        assert snapshot.error is boom

    async def test_cancelled_caller_does_not_cancel_shared_fetch(self):
        cache = QueryCache(stale_time=30)
        fetcher = CountingFetcher()
        fetcher.release.clear()

        impatient = asyncio.create_task(cache.fetch(("k",), fetcher))
        patient = asyncio.create_task(cache.fetch(("k",), fetcher))
        await asyncio.sleep(0)
        impatient.cancel()
        await asyncio.sleep(0)
        fetcher.release.set()

        assert await patient == ["row"]
        assert impatient.cancelled()


class TestQueryCacheInvalidation:

    async def test_invalidate_refetches_observed_keys(self):
        cache = QueryCache(stale_time=30)
        fetcher = CountingFetcher()
        seen = []
        cache.subscribe(("offDays", "s1"), lambda snap: seen.append(snap.status))

        await cache.fetch(("offDays", "s1"), fetcher)
        affected = await cache.invalidate(("offDays", "s1"))

        assert affected == [("offDays", "s1")]
        assert fetcher.calls == 2
        assert seen == [
            QueryStatus.loading, QueryStatus.success,
            QueryStatus.loading, QueryStatus.success,
        ]
        assert not cache.is_invalidated(("offDays", "s1"))

    async def test_unobserved_keys_stay_stale_until_next_read(self):
        cache = QueryCache(stale_time=30)
        fetcher = CountingFetcher()

        await cache.fetch(("offDays", "s1"), fetcher)
        await cache.invalidate(("offDays",))

        assert fetcher.calls == 1
        assert cache.is_invalidated(("offDays", "s1"))

        await cache.fetch(("offDays", "s1"), fetcher)
        assert fetcher.calls == 2
        assert not cache.is_invalidated(("offDays", "s1"))

    async def test_prefix_leaves_other_scopes_untouched(self):
        cache = QueryCache(stale_time=30)
        await cache.fetch(("offDays", "s1"), CountingFetcher())
        await cache.fetch(("offDays", "s2"), CountingFetcher())

        await cache.invalidate(("offDays", "s1"))

        assert cache.is_invalidated(("offDays", "s1"))
        assert not cache.is_invalidated(("offDays", "s2"))

    async def test_invalidate_waits_for_in_flight_fetch_then_refetches(self):
        cache = QueryCache(stale_time=30)
        fetcher = CountingFetcher()
        cache.subscribe(("k",), lambda snap: None)
        fetcher.release.clear()

        pending = asyncio.create_task(cache.fetch(("k",), fetcher))
        await asyncio.sleep(0)
        invalidation = asyncio.create_task(cache.invalidate(("k",)))
        await asyncio.sleep(0)
        fetcher.release.set()

        await pending
        await invalidation
        assert fetcher.calls == 2

    async def test_refetch_failure_is_not_raised(self):
        cache = QueryCache(stale_time=30)
        fetcher = CountingFetcher()
        cache.subscribe(("k",), lambda snap: None)
        await cache.fetch(("k",), fetcher)

        fetcher.error = RuntimeError("down")
        await cache.invalidate(("k",))

        assert cache.get(("k",)).status is QueryStatus.error

    async def test_failing_listener_does_not_break_others(self):
        cache = QueryCache()
        seen = []

        def broken(snapshot):
            raise ValueError("listener bug")

        cache.subscribe(("k",), broken)
        cache.subscribe(("k",), lambda snap: seen.append(snap.status))
        await cache.fetch(("k",), CountingFetcher())

        assert seen[-1] is QueryStatus.success

    async def test_close_cancels_in_flight(self):
        cache = QueryCache()
        fetcher = CountingFetcher()
        fetcher.release.clear()

        pending = asyncio.create_task(cache.fetch(("k",), fetcher))
        await asyncio.sleep(0)
        await cache.close()

        with pytest.raises(asyncio.CancelledError):
            await pending
        assert cache.keys() == []


class TestQueryCacheCollection:

    async def test_unobserved_entry_dropped_after_gc_time(self):
        cache = QueryCache(stale_time=30, gc_time=0)
        fetcher = CountingFetcher()

        await cache.fetch(("staff", "org-1"), fetcher)
        await _settle()

        assert cache.keys() == []
        await cache.fetch(("staff", "org-1"), fetcher)
        assert fetcher.calls == 2

    async def test_entry_kept_until_gc_time_passes(self):
        cache = QueryCache(stale_time=30)
        fetcher = CountingFetcher()

        await cache.fetch(("staff", "org-1"), fetcher)
        await _settle()
        await cache.fetch(("staff", "org-1"), fetcher)

        assert cache.keys() == [("staff", "org-1")]
        assert fetcher.calls == 1

    async def test_observed_entry_survives_until_last_unsubscribe(self):
        cache = QueryCache(gc_time=0)
        unsubscribe = cache.subscribe(("k",), lambda snap: None)
        await cache.fetch(("k",), CountingFetcher())
        await _settle()

        assert cache.get(("k",)).status is QueryStatus.success

        unsubscribe()
        await _settle()
        assert cache.get(("k",)) is None

    async def test_in_flight_entry_not_collected(self):
        cache = QueryCache(gc_time=0)
        fetcher = CountingFetcher()
        fetcher.release.clear()

        pending = asyncio.create_task(cache.fetch(("k",), fetcher))
        await _settle()
        assert cache.is_fetching(("k",))

        fetcher.release.set()
        assert await pending == ["row"]
        await _settle()
        assert cache.keys() == []

    async def test_resubscribe_cancels_pending_collection(self):
        cache = QueryCache(gc_time=0)
        cache.set_data(("k",), ["cached"])
        cache.subscribe(("k",), lambda snap: None)
        await _settle()

        assert cache.get(("k",)).data == ["cached"]


# ═════════════════════════════════════════════════════════════════════
# 3. QUERY OBSERVER
# ═════════════════════════════════════════════════════════════════════


class TestQueryObserver:

    async def test_exposes_loading_then_data(self):
        cache = QueryCache(stale_time=30)
        toasts = ToastRecorder()
        fetcher = CountingFetcher(result=["a", "b"])
        fetcher.release.clear()

        observer = QueryObserver(cache, ("k",), fetcher, toasts).start()
        await _settle()
        assert observer.is_loading
        fetcher.release.set()
        await observer.wait()

        assert observer.status is QueryStatus.success
        assert observer.data == ["a", "b"]
        assert observer.error is None
        observer.close()

    async def test_disabled_observer_never_fetches(self):
        cache = QueryCache()
        fetcher = CountingFetcher()

        async with QueryObserver(cache, ("k", None), fetcher, ToastRecorder(), enabled=False) as view:
            await view.wait()
            assert view.status is QueryStatus.idle
            assert view.data is None

        assert fetcher.calls == 0

    async def test_error_fires_exactly_one_toast_and_does_not_raise(self):
        cache = QueryCache()
        toasts = ToastRecorder()
        fetcher = CountingFetcher(error=RuntimeError("down"))

        async with QueryObserver(
            cache, ("k",), fetcher, toasts, error_description="Failed to fetch assets",
        ) as view:
            await view.wait()
            assert view.status is QueryStatus.error
            assert isinstance(view.error, RuntimeError)

        assert len(toasts.failures) == 1
        assert toasts.failures[0].description == "Failed to fetch assets"
        assert toasts.failures[0].variant is ToastVariant.destructive

    async def test_each_new_error_transition_toasts_again(self):
        cache = QueryCache()
        toasts = ToastRecorder()
        fetcher = CountingFetcher(error=RuntimeError("down"))

        async with QueryObserver(cache, ("k",), fetcher, toasts) as view:
            await view.wait()
            await view.refetch()

        assert len(toasts.failures) == 2

    async def test_callable_error_description(self):
        cache = QueryCache()
        toasts = ToastRecorder()

        async with QueryObserver(
            cache, ("k",), CountingFetcher(error=RuntimeError("down")), toasts,
            error_description=lambda exc: f"Problem: {exc}",
        ) as view:
            await view.wait()

        assert toasts.failures[0].description == "Problem: down"

    async def test_invalidation_updates_observer(self):
        cache = QueryCache(stale_time=30)
        fetcher = CountingFetcher(result=["v1"])

        async with QueryObserver(cache, ("offDays", "s1"), fetcher, ToastRecorder()) as view:
            await view.wait()
            fetcher.result = ["v2"]
            await cache.invalidate(("offDays",))
            assert view.data == ["v2"]

    async def test_closed_observer_receives_no_updates(self):
        cache = QueryCache()
        toasts = ToastRecorder()
        fetcher = CountingFetcher()
        fetcher.release.clear()

        observer = QueryObserver(cache, ("k",), fetcher, toasts).start()
        await asyncio.sleep(0)
        observer.close()
        fetcher.release.set()
        await cache.fetch(("k",), fetcher, force=True)

        assert observer.closed
        assert observer.data is None
        assert toasts.toasts == []

    async def test_start_after_close_is_rejected(self):
        observer = QueryObserver(QueryCache(), ("k",), CountingFetcher(), ToastRecorder())
        observer.close()
        with pytest.raises(RuntimeError):
            observer.start()

    async def test_picks_up_cached_success(self):
        cache = QueryCache(stale_time=30)
        cache.set_data(("k",), ["cached"])
        fetcher = CountingFetcher()

        async with QueryObserver(cache, ("k",), fetcher, ToastRecorder()) as view:
            assert view.data == ["cached"]
            await view.wait()

        assert fetcher.calls == 0


# ═════════════════════════════════════════════════════════════════════
# 4. MUTATION OBSERVER
# ═════════════════════════════════════════════════════════════════════


class TestMutationObserver:

    async def test_success_toast_and_data(self):
        toasts = ToastRecorder()

        async def create(value):
            return {"id": value}

        mutation = MutationObserver(
            create, toasts, success_title="Success", success_description="Saved",
        )
        result = await mutation.mutate_async("x")

        assert result == {"id": "x"}
        assert mutation.status is MutationStatus.success
        assert mutation.data == {"id": "x"}
        assert toasts.toasts[0].description == "Saved"

    async def test_no_success_toast_without_description(self):
        toasts = ToastRecorder()

        async def noop():
            return None

        await MutationObserver(noop, toasts).mutate_async()
        assert toasts.toasts == []

    async def test_mutate_async_reraises_after_toast(self):
        toasts = ToastRecorder()

        async def fail():
            raise RuntimeError("write failed")

        mutation = MutationObserver(fail, toasts, error_description="Failed to save")
        with pytest.raises(RuntimeError):
            await mutation.mutate_async()

        assert mutation.status is MutationStatus.error
        assert toasts.failures[0].description == "Failed to save"

    async def test_mutate_keeps_error_and_returns_none(self):
        toasts = ToastRecorder()

        async def fail():
            raise ValidationError({"title": ["must not be blank."]})

        mutation = MutationObserver(fail, toasts)
        assert await mutation.mutate() is None
        assert isinstance(mutation.error, ValidationError)
        assert toasts.failures[0].description == "title: must not be blank."

        mutation.reset()
        assert mutation.status is MutationStatus.idle
        assert mutation.error is None

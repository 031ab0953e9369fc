"""Data source test suite — the query contract against the in-memory fake
and against SQLite through the SQLAlchemy data source.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from nadi.database import Base, create_engine
from nadi.datasource import (
    MULTIPLE_ROWS,
    ROW_NOT_FOUND,
    MemoryDataSource,
    SqlDataSource,
    create_data_source,
)
from nadi.config import Settings


@pytest.fixture(params=["memory", "sqlite"])
async def any_source(request):
    if request.param == "memory":
        yield MemoryDataSource(Base.metadata)
        return
    source = SqlDataSource(create_engine("sqlite+aiosqlite://"), Base.metadata)
    await source.create_all()
    yield source
    await source.close()


def _closure(site_id: str, title: str, day: int) -> dict:
    return {
        "site_id": site_id,
        "title": title,
        "start_date": datetime(2025, 1, day, tzinfo=timezone.utc),
        "end_date": datetime(2025, 1, day, tzinfo=timezone.utc),
    }


# ═════════════════════════════════════════════════════════════════════
# 1. QUERY CONTRACT (both implementations)
# ═════════════════════════════════════════════════════════════════════


class TestQueryContract:

    async def test_insert_applies_column_defaults(self, any_source):
        result = await any_source.table("nd_off_days").insert(_closure("s1", "A", 3)).single().execute()

        assert result.ok
        row = result.data
        assert len(row["id"]) == 36
        assert row["is_recurring"] is False
        assert row["created_at"] is not None

    async def test_select_filters_and_orders(self, any_source):
        table = any_source.table("nd_off_days")
        await table.insert([_closure("s1", "Late", 20), _closure("s1", "Early", 2), _closure("s2", "Other", 5)]).execute()

        result = await table.select().eq("site_id", "s1").order("start_date").execute()

        assert result.error is None
        assert [row["title"] for row in result.data] == ["Early", "Late"]

    async def test_descending_order_and_limit(self, any_source):
        table = any_source.table("nd_off_days")
        await table.insert([_closure("s1", str(day), day) for day in (1, 2, 3)]).execute()

        result = await table.select().order("start_date", ascending=False).limit(2).execute()

        assert [row["title"] for row in result.data] == ["3", "2"]

    async def test_range_and_in_filters(self, any_source):
        table = any_source.table("leave_balances")
        await table.insert([
            {"user_id": "u1", "leave_type_id": t, "leave_type": f"T{t}"} for t in (1, 2, 3, 4)
        ]).execute()

        ranged = await table.select().gte("leave_type_id", 2).lt("leave_type_id", 4).order("leave_type_id").execute()
        listed = await table.select().in_("leave_type_id", [1, 4]).order("leave_type_id").execute()
        other = await table.select().neq("leave_type_id", 1).execute()

        assert [r["leave_type_id"] for r in ranged.data] == [2, 3]
        assert [r["leave_type_id"] for r in listed.data] == [1, 4]
        assert len(other.data) == 3

    async def test_range_filter_or_null_matches_missing_values(self, any_source):
        table = any_source.table("nd_event")
        start = datetime(2025, 1, 1, tzinfo=timezone.utc)
        await table.insert([
            {"program_name": name, "start_datetime": start, "capacity": capacity}
            for name, capacity in (("Small", 10), ("Large", 50), ("Open", None))
        ]).execute()

        strict = await table.select().gte("capacity", 20).execute()
        lenient = await table.select().gte("capacity", 20, or_null=True).order("program_name").execute()

        assert [r["program_name"] for r in strict.data] == ["Large"]
        assert [r["program_name"] for r in lenient.data] == ["Large", "Open"]

    async def test_empty_result_is_empty_list(self, any_source):
        result = await any_source.table("nd_staff").select().eq("organization_id", "nobody").execute()
        assert result.ok
        assert result.data == []

    async def test_count(self, any_source):
        table = any_source.table("notifications")
        await table.insert([
            {"user_id": "u1", "title": "t", "message": "m", "read": read} for read in (True, False, False)
        ]).execute()

        result = await table.select(count=True).eq("user_id", "u1").eq("read", False).execute()

        assert result.data == 2

    async def test_update_returns_rows_and_touches_updated_at(self, any_source):
        table = any_source.table("nd_inventory")
        created = (await table.insert({"site_id": "s1", "name": "Router"}).single().execute()).data

        result = await table.update({"is_active": False}).eq("id", created["id"]).single().execute()

        assert result.data["is_active"] is False
        assert result.data["updated_at"] is not None

    async def test_delete_returns_deleted_row(self, any_source):
        table = any_source.table("nd_asset")
        created = (await table.insert({"site_id": "s1", "name": "Printer"}).single().execute()).data

        result = await table.delete().eq("id", created["id"]).single().execute()
        remaining = await table.select().execute()

        assert result.data["id"] == created["id"]
        assert remaining.data == []

    async def test_single_without_match_reports_row_not_found(self, any_source):
        result = await any_source.table("nd_asset").update({"is_active": True}).eq("id", "missing").single().execute()

        assert not result.ok
        assert result.error.code == ROW_NOT_FOUND
        assert result.data is None

    async def test_single_with_many_rows_reports_error(self, any_source):
        table = any_source.table("nd_asset")
        await table.insert([{"site_id": "s1", "name": "A"}, {"site_id": "s1", "name": "B"}]).execute()

        result = await table.select().eq("site_id", "s1").single().execute()

        assert result.error.code == MULTIPLE_ROWS

    async def test_unknown_table(self, any_source):
        result = await any_source.table("nd_unknown").select().execute()
        assert result.error.code == "undefined_table"

    async def test_unknown_column(self, any_source):
        result = await any_source.table("nd_staff").select().eq("nickname", "x").execute()
        assert result.error.code == "undefined_column"

    async def test_json_columns_round_trip(self, any_source):
        table = any_source.table("announcements")
        await table.insert({
            "title": "Notice",
            "message": "Body",
            "user_types": ["tp_site"],
            "attachments": [{"name": "a.pdf", "path": "/a.pdf", "size": 10, "type": "application/pdf"}],
        }).execute()

        row = (await table.select().single().execute()).data

        assert row["user_types"] == ["tp_site"]
        assert row["attachments"][0]["name"] == "a.pdf"


# ═════════════════════════════════════════════════════════════════════
# 2. IMPLEMENTATION SPECIFICS
# ═════════════════════════════════════════════════════════════════════


class TestMemoryDataSource:

    async def test_fail_with_reports_error(self):
        source = MemoryDataSource(Base.metadata)
        source.fail_with["nd_staff"] = "connection reset"

        result = await source.table("nd_staff").select().execute()

        assert result.error.message == "connection reset"

    async def test_results_are_copies(self):
        source = MemoryDataSource(Base.metadata)
        source.seed("nd_staff", {"organization_id": "o1", "name": "A"})

        result = await source.table("nd_staff").select().execute()
        result.data[0]["name"] = "mutated"

        assert source.rows("nd_staff")[0]["name"] == "A"

    async def test_calls_are_recorded(self):
        source = MemoryDataSource(Base.metadata)
        await source.table("nd_staff").select().execute()
        await source.table("nd_staff").insert({"organization_id": "o1", "name": "A"}).execute()

        assert source.calls == [("nd_staff", "select"), ("nd_staff", "insert")]
        assert source.calls_to("nd_staff") == 2


class TestSqlDataSource:

    async def test_constraint_violation_becomes_remote_error(self):
        source = SqlDataSource(create_engine("sqlite+aiosqlite://"), Base.metadata)
        await source.create_all()
        try:
            row = {"id": "p1", "email": "dup@example.com"}
            await source.table("profiles").insert(row).execute()
            result = await source.table("profiles").insert(row).execute()
        finally:
            await source.close()

        assert not result.ok
        assert result.error.code == "IntegrityError"


class TestCreateDataSource:

    def test_memory(self):
        assert isinstance(create_data_source(Settings(DATA_SOURCE="memory")), MemoryDataSource)

    async def test_sql(self):
        source = create_data_source(Settings(DATA_SOURCE="sql", DATABASE_URL="sqlite+aiosqlite://"))
        assert isinstance(source, SqlDataSource)
        await source.close()

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_data_source(Settings(DATA_SOURCE="redis"))

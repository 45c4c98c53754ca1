"""
Tests for the query layer and design persistence against a real SQLite file.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timedelta

import databases
import pytest
from hotel_design.core.status import ProjectStatus
from hotel_design.db.queries import base_models, costs, projects, sessions
from hotel_design.db.schema import create_tables
from hotel_design.services.design_session import DesignSession
from hotel_design.services.design_store import load_session, save_session


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'test.db'}"


@asynccontextmanager
async def open_db(url: str):
    db = databases.Database(url)
    await db.connect()
    try:
        await create_tables(db)
        yield db
    finally:
        await db.disconnect()


class TestProjectQueries:

    @pytest.mark.asyncio
    async def test_create_and_get(self, database_url):
        async with open_db(database_url) as db:
            created = await projects.create_project(db, name="Hilton Hotel - Austin", user_id="u1")
            fetched = await projects.get_project(db, created["id"])

        assert fetched["name"] == "Hilton Hotel - Austin"
        assert fetched["status"] == "draft"
        assert fetched["statusLabel"] == "Draft"
        assert fetched["nonCompliance"] == []
        assert fetched["totalRooms"] == 0

    @pytest.mark.asyncio
    async def test_get_missing(self, database_url):
        async with open_db(database_url) as db:
            assert await projects.get_project(db, "nope") is None

    @pytest.mark.asyncio
    async def test_list_filters_by_user(self, database_url):
        async with open_db(database_url) as db:
            await projects.create_project(db, name="A", user_id="u1")
            await projects.create_project(db, name="B", user_id="u2")

            mine = await projects.list_projects(db, user_id="u1")
            everything = await projects.list_projects(db)

        assert [p["name"] for p in mine] == ["A"]
        assert len(everything) == 2

    @pytest.mark.asyncio
    async def test_recalculation_overwrites_issues(self, database_url):
        async with open_db(database_url) as db:
            project = await projects.create_project(db, name="A")
            await projects.record_recalculation(
                db, project["id"], ProjectStatus.COSTS_READY,
                issues=[{"type": "error", "message": "old"}], total_rooms=5,
            )
            await projects.record_recalculation(
                db, project["id"], ProjectStatus.COSTS_READY,
                issues=[{"type": "info", "message": "new"}], total_rooms=20,
            )
            fetched = await projects.get_project(db, project["id"])

        assert fetched["status"] == "costs_ready"
        assert fetched["nonCompliance"] == [{"type": "info", "message": "new"}]
        assert fetched["totalRooms"] == 20
        assert fetched["lastRecalcAt"] is not None

    @pytest.mark.asyncio
    async def test_status_updates_are_last_write_wins(self, database_url):
        async with open_db(database_url) as db:
            project = await projects.create_project(db, name="A")
            await projects.record_cost_calculation(db, project["id"], ProjectStatus.COMPLIANT)
            await projects.update_project_status(db, project["id"], ProjectStatus.NEEDS_RECALC)
            fetched = await projects.get_project(db, project["id"])

        assert fetched["status"] == "needs_recalc"
        assert fetched["lastCostCalcAt"] is not None

    @pytest.mark.asyncio
    async def test_delete_removes_children(self, database_url):
        async with open_db(database_url) as db:
            project = await projects.create_project(db, name="A")
            session = DesignSession().add_floor(name="Ground").enable_public_area("lobby")
            await save_session(db, project["id"], session)
            await costs.insert_cost_summary(db, project["id"], 1, 2, 3, 1.0, "standard")

            await projects.delete_project(db, project["id"])

            assert await projects.get_project(db, project["id"]) is None
            assert (await load_session(db, project["id"])).floors == ()
            assert await costs.get_latest_cost(db, project["id"]) is None


class TestCostQueries:

    @pytest.mark.asyncio
    async def test_rows_append_and_latest_wins(self, database_url):
        async with open_db(database_url) as db:
            project = await projects.create_project(db, name="A")
            await costs.insert_cost_summary(db, project["id"], 90, 100, 115, 1.0, "standard")
            await costs.insert_cost_summary(db, project["id"], 180, 200, 230, 2.0, "luxury")

            latest = await costs.get_latest_cost(db, project["id"])
            history = await costs.list_costs(db, project["id"])

        assert latest["mid_cost_per_key"] == 200
        assert latest["brand_tier"] == "luxury"
        assert [row["mid_cost_per_key"] for row in history] == [200, 100]


class TestDesignStore:

    @pytest.mark.asyncio
    async def test_save_and_load_round_trip(self, database_url):
        async with open_db(database_url) as db:
            project = await projects.create_project(db, name="A")
            session = DesignSession()
            session = session.add_floor(name="Ground", floor_id="f0")
            session = session.add_floor(name="Second", floor_id="f1")
            session = session.apply_bulk_rooms(["f0", "f1"], {"standard-king": 10, "accessible": 1})
            session = session.enable_public_area("lobby", size_sqft=900)
            await save_session(db, project["id"], session)

            loaded = await load_session(db, project["id"])

        assert [f.id for f in loaded.sorted_floors()] == ["f0", "f1"]
        assert loaded.get_floor("f1").quantity_of("standard-king") == 10
        assert loaded.get_public_area("lobby").sizeSqft == 900
        assert loaded.get_public_area("lobby").isRequired is True

    @pytest.mark.asyncio
    async def test_save_deletes_removed_items(self, database_url):
        async with open_db(database_url) as db:
            project = await projects.create_project(db, name="A")
            session = DesignSession().add_floor(name="Ground", floor_id="f0")
            session = session.add_floor(name="Second", floor_id="f1").enable_public_area("pool")
            await save_session(db, project["id"], session)

            session = session.remove_floor("f1").disable_public_area("pool")
            await save_session(db, project["id"], session)
            loaded = await load_session(db, project["id"])

        assert [f.id for f in loaded.floors] == ["f0"]
        assert loaded.public_areas == ()

    @pytest.mark.asyncio
    async def test_moved_floors_swap_levels(self, database_url):
        async with open_db(database_url) as db:
            project = await projects.create_project(db, name="A")
            session = DesignSession().add_floor(name="Ground", floor_id="f0")
            session = session.add_floor(name="Second", floor_id="f1")
            await save_session(db, project["id"], session)

            await save_session(db, project["id"], session.move_floor("f1", -1))
            loaded = await load_session(db, project["id"])

        assert [f.id for f in loaded.sorted_floors()] == ["f1", "f0"]


class TestBaseModelAndSessionQueries:

    @pytest.mark.asyncio
    async def test_base_model_round_trip(self, database_url):
        async with open_db(database_url) as db:
            project = await projects.create_project(db, name="A")
            await base_models.create_base_model(db, project["id"], {"siteLocation": "Austin"})
            stored = await base_models.get_base_model(db, project["id"])

        assert stored["data"] == {"siteLocation": "Austin"}

    @pytest.mark.asyncio
    async def test_session_tokens(self, database_url):
        async with open_db(database_url) as db:
            await sessions.create_session(db, "live", "u1", datetime.utcnow() + timedelta(hours=1))
            await sessions.create_session(db, "expired", "u2", datetime.utcnow() - timedelta(hours=1))
            await sessions.create_session(db, "forever", "u3")

            assert await sessions.get_session_user(db, "live") == "u1"
            assert await sessions.get_session_user(db, "expired") is None
            assert await sessions.get_session_user(db, "forever") == "u3"
            assert await sessions.get_session_user(db, "unknown") is None

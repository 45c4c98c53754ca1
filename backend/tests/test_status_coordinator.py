"""
Tests for the project status state machine.

These tests verify that:
1. A design change always moves the project to needs_recalc
2. Recalculation stores issues and moves to costs_ready even with errors
3. The cost stage settles on compliant or back on needs_recalc
4. Stages chain through the dispatcher without calling each other
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from hotel_design.core.errors import ProjectNotFoundError
from hotel_design.core.events import EventType
from hotel_design.core.status import ProjectStatus
from hotel_design.schemas.design import Floor, PublicArea, RoomConfiguration
from hotel_design.services.design_session import DesignSession
from hotel_design.services.stage_dispatcher import InlineDispatcher
from hotel_design.services.status_coordinator import StatusCoordinator


class FakeProjectStore:
    """In-memory stand-in for the project and cost queries."""

    def __init__(self, project_id: str = "p1"):
        self.project = {
            "id": project_id,
            "status": ProjectStatus.DRAFT.value,
            "nonCompliance": [],
            "totalRooms": 0,
        }
        self.status_history = []
        self.cost_rows = []

    def _set_status(self, status: ProjectStatus):
        self.project["status"] = status.value
        self.status_history.append(status)

    async def get_project(self, db, project_id):
        return dict(self.project) if project_id == self.project["id"] else None

    async def update_project_status(self, db, project_id, status):
        self._set_status(status)

    async def record_recalculation(self, db, project_id, status, issues, total_rooms):
        self.project["nonCompliance"] = issues
        self.project["totalRooms"] = total_rooms
        self._set_status(status)

    async def record_cost_calculation(self, db, project_id, status):
        self._set_status(status)

    async def insert_cost_summary(self, db, project_id, **values):
        self.cost_rows.append(values)
        return values


def clean_design() -> DesignSession:
    floor = Floor(
        id="f1",
        name="1",
        level=0,
        rooms=[
            RoomConfiguration(roomTypeId="standard-king", quantity=18),
            RoomConfiguration(roomTypeId="accessible", quantity=2),
        ],
    )
    lobby = PublicArea(id="lobby", areaType="Lobby", sizeSqft=800, isRequired=True)
    return DesignSession(floors=(floor,), public_areas=(lobby,))


def design_without_accessible_rooms() -> DesignSession:
    floor = Floor(
        id="f1",
        name="1",
        level=0,
        rooms=[RoomConfiguration(roomTypeId="standard-king", quantity=20)],
    )
    lobby = PublicArea(id="lobby", areaType="Lobby", sizeSqft=800, isRequired=True)
    return DesignSession(floors=(floor,), public_areas=(lobby,))


@pytest.fixture
def store():
    return FakeProjectStore()


@pytest.fixture
def patched_queries(store):
    with patch('hotel_design.db.queries.projects.get_project', side_effect=store.get_project), \
         patch('hotel_design.db.queries.projects.update_project_status', side_effect=store.update_project_status), \
         patch('hotel_design.db.queries.projects.record_recalculation', side_effect=store.record_recalculation), \
         patch('hotel_design.db.queries.projects.record_cost_calculation', side_effect=store.record_cost_calculation), \
         patch('hotel_design.db.queries.costs.insert_cost_summary', side_effect=store.insert_cost_summary):
        yield store


class TestStatusSequence:
    """End-to-end status transitions through the inline dispatcher."""

    @pytest.mark.asyncio
    async def test_clean_design_reaches_compliant(self, patched_queries):
        store = patched_queries
        coordinator = StatusCoordinator(MagicMock(), InlineDispatcher())

        with patch('hotel_design.services.status_coordinator.load_session',
                   new=AsyncMock(return_value=clean_design())):
            await coordinator.notify_design_change("p1")

        assert store.status_history == [
            ProjectStatus.NEEDS_RECALC,
            ProjectStatus.COSTS_READY,
            ProjectStatus.COMPLIANT,
        ]
        assert store.project["totalRooms"] == 20
        assert len(store.cost_rows) == 1
        assert store.cost_rows[0]["mid_cost_per_key"] == 125000
        assert store.cost_rows[0]["brand_tier"] == "standard"
        assert store.cost_rows[0]["regional_multiplier"] == 1.0

    @pytest.mark.asyncio
    async def test_errors_resolve_back_to_needs_recalc(self, patched_queries):
        """Costs are still appended when the design has errors."""
        store = patched_queries
        coordinator = StatusCoordinator(MagicMock(), InlineDispatcher())

        with patch('hotel_design.services.status_coordinator.load_session',
                   new=AsyncMock(return_value=design_without_accessible_rooms())):
            await coordinator.notify_design_change("p1")

        assert store.status_history == [
            ProjectStatus.NEEDS_RECALC,
            ProjectStatus.COSTS_READY,
            ProjectStatus.NEEDS_RECALC,
        ]
        assert store.project["nonCompliance"][0]["type"] == "error"
        assert len(store.cost_rows) == 1

    @pytest.mark.asyncio
    async def test_repeated_change_appends_another_cost_row(self, patched_queries):
        store = patched_queries
        coordinator = StatusCoordinator(MagicMock(), InlineDispatcher())

        with patch('hotel_design.services.status_coordinator.load_session',
                   new=AsyncMock(return_value=clean_design())):
            await coordinator.notify_design_change("p1")
            await coordinator.notify_design_change("p1")

        assert store.project["status"] == ProjectStatus.COMPLIANT.value
        assert len(store.cost_rows) == 2


class TestStages:
    """Each stage on its own, with a dispatcher that only records."""

    def _coordinator(self, **kwargs):
        dispatcher = MagicMock()
        dispatcher.dispatch = AsyncMock()
        return StatusCoordinator(MagicMock(), dispatcher, **kwargs), dispatcher

    @pytest.mark.asyncio
    async def test_design_change_dispatches_recalc(self, patched_queries):
        coordinator, dispatcher = self._coordinator()

        status = await coordinator.on_design_change("p1")

        assert status == ProjectStatus.NEEDS_RECALC
        event = dispatcher.dispatch.await_args.args[0]
        assert event.type == EventType.RECALC_REQUESTED
        assert event.project_id == "p1"

    @pytest.mark.asyncio
    async def test_design_change_from_compliant_goes_to_needs_recalc(self, patched_queries):
        store = patched_queries
        store.project["status"] = ProjectStatus.COMPLIANT.value
        coordinator, _ = self._coordinator()

        await coordinator.on_design_change("p1")

        assert store.project["status"] == ProjectStatus.NEEDS_RECALC.value

    @pytest.mark.asyncio
    async def test_recalc_dispatches_cost(self, patched_queries):
        coordinator, dispatcher = self._coordinator()

        with patch('hotel_design.services.status_coordinator.load_session',
                   new=AsyncMock(return_value=clean_design())):
            issues = await coordinator.on_recalculate("p1", parent_id="evt-1")

        assert [i.type for i in issues] == ["info"]
        event = dispatcher.dispatch.await_args.args[0]
        assert event.type == EventType.COST_REQUESTED
        assert event.parent_id == "evt-1"

    @pytest.mark.asyncio
    async def test_recalc_replaces_issue_list(self, patched_queries):
        store = patched_queries
        store.project["nonCompliance"] = [{"type": "error", "message": "stale"}]
        coordinator, _ = self._coordinator()

        with patch('hotel_design.services.status_coordinator.load_session',
                   new=AsyncMock(return_value=clean_design())):
            await coordinator.on_recalculate("p1")

        assert all(i["message"] != "stale" for i in store.project["nonCompliance"])

    @pytest.mark.asyncio
    async def test_cost_uses_configured_defaults(self, patched_queries):
        store = patched_queries
        store.project["totalRooms"] = 10
        coordinator, _ = self._coordinator(default_regional_multiplier=1.2, default_brand_tier="upscale")

        await coordinator.on_cost("p1")

        row = store.cost_rows[0]
        assert row["brand_tier"] == "upscale"
        assert row["regional_multiplier"] == 1.2
        assert row["mid_cost_per_key"] == pytest.approx(198000)

    @pytest.mark.asyncio
    async def test_cost_with_explicit_inputs(self, patched_queries):
        store = patched_queries
        coordinator, _ = self._coordinator()

        status = await coordinator.on_cost("p1", regional_multiplier=0.8, brand_tier="luxury")

        assert status == ProjectStatus.COMPLIANT
        assert store.cost_rows[0]["low_cost_per_key"] == pytest.approx(220000 * 0.9 * 0.8)

    @pytest.mark.asyncio
    async def test_unknown_project_raises(self, patched_queries):
        coordinator, dispatcher = self._coordinator()

        with pytest.raises(ProjectNotFoundError):
            await coordinator.on_design_change("missing")

        dispatcher.dispatch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_request_cost_carries_inputs(self, patched_queries):
        coordinator, dispatcher = self._coordinator()

        event = await coordinator.request_cost("p1", regional_multiplier=1.1, brand_tier="luxury")

        assert event.type == EventType.COST_REQUESTED
        assert event.data == {"regionalMultiplier": 1.1, "brandTier": "luxury"}
        dispatcher.dispatch.assert_awaited_once_with(event)

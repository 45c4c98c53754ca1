"""
Project status state machine and the pipeline stages that drive it.

    draft -> needs_recalc -> costs_ready -> compliant
                  ^                            |
                  +---- any design change -----+

Each stage reads the current project state, computes, writes its result
with absolute values and dispatches the next stage. There is no locking
or version check: when two runs overlap, the one that writes last decides
the stored status and issues. Re-running a stage with the same inputs
produces the same state, except that every cost run appends a new
cost summary row.
"""

import logging
from typing import List, Optional
import databases

from hotel_design.core.errors import ProjectNotFoundError
from hotel_design.core.events import EventType, PipelineEvent
from hotel_design.core.status import ProjectStatus
from hotel_design.db.queries import costs, projects
from hotel_design.schemas.design import ComplianceIssue
from hotel_design.services.compliance import (
    evaluate_compliance,
    has_blocking_errors,
    total_room_count,
)
from hotel_design.services.cost_estimator import estimate_cost
from hotel_design.services.design_store import load_session
from hotel_design.services.stage_dispatcher import StageDispatcher

logger = logging.getLogger(__name__)


class StatusCoordinator:
    """Owns the per-project status and chains the recalc and cost stages."""

    def __init__(
        self,
        db: databases.Database,
        dispatcher: StageDispatcher,
        default_regional_multiplier: float = 1.0,
        default_brand_tier: str = "standard",
    ):
        self.db = db
        self.dispatcher = dispatcher
        self.default_regional_multiplier = default_regional_multiplier
        self.default_brand_tier = default_brand_tier

        dispatcher.register(EventType.DESIGN_CHANGED, self._handle_design_changed)
        dispatcher.register(EventType.RECALC_REQUESTED, self._handle_recalc_requested)
        dispatcher.register(EventType.COST_REQUESTED, self._handle_cost_requested)

    async def _require_project(self, project_id: str) -> dict:
        project = await projects.get_project(self.db, project_id)
        if not project:
            raise ProjectNotFoundError(project_id)
        return project

    # Stages

    async def on_design_change(self, project_id: str, parent_id: Optional[str] = None) -> ProjectStatus:
        """Mark the project stale and request a recalculation."""
        await self._require_project(project_id)
        await projects.update_project_status(self.db, project_id, ProjectStatus.NEEDS_RECALC)
        logger.info("Project %s marked %s", project_id, ProjectStatus.NEEDS_RECALC.value)

        await self.dispatcher.dispatch(
            PipelineEvent.create(EventType.RECALC_REQUESTED, project_id, parent_id=parent_id)
        )
        return ProjectStatus.NEEDS_RECALC

    async def on_recalculate(self, project_id: str, parent_id: Optional[str] = None) -> List[ComplianceIssue]:
        """
        Evaluate compliance on the current design and request costs.

        The project always moves to costs_ready; errors stay visible in the
        stored issue list instead of blocking the transition.
        """
        await self._require_project(project_id)
        session = await load_session(self.db, project_id)

        issues = evaluate_compliance(session.floors, session.public_areas)
        total_rooms = total_room_count(session.floors)

        await projects.record_recalculation(
            self.db,
            project_id,
            status=ProjectStatus.COSTS_READY,
            issues=[issue.model_dump(exclude_none=True) for issue in issues],
            total_rooms=total_rooms,
        )
        logger.info(
            "Recalculated project %s: %d rooms, %d issues",
            project_id, total_rooms, len(issues),
        )

        await self.dispatcher.dispatch(
            PipelineEvent.create(EventType.COST_REQUESTED, project_id, parent_id=parent_id)
        )
        return issues

    async def on_cost(
        self,
        project_id: str,
        regional_multiplier: Optional[float] = None,
        brand_tier: Optional[str] = None,
    ) -> ProjectStatus:
        """
        Append a cost summary and settle the status.

        Returns compliant when the latest stored issues contain no error,
        needs_recalc otherwise.
        """
        if regional_multiplier is None:
            regional_multiplier = self.default_regional_multiplier
        if not brand_tier:
            brand_tier = self.default_brand_tier

        project = await self._require_project(project_id)
        estimate = estimate_cost(project["totalRooms"], brand_tier, regional_multiplier)

        await costs.insert_cost_summary(
            self.db,
            project_id,
            low_cost_per_key=estimate.low,
            mid_cost_per_key=estimate.mid,
            high_cost_per_key=estimate.high,
            regional_multiplier=regional_multiplier,
            brand_tier=brand_tier,
        )

        if has_blocking_errors(project["nonCompliance"]):
            status = ProjectStatus.NEEDS_RECALC
        else:
            status = ProjectStatus.COMPLIANT

        await projects.record_cost_calculation(self.db, project_id, status)
        logger.info(
            "Costed project %s (%s x%.2f): mid %.0f per key, status %s",
            project_id, brand_tier, regional_multiplier, estimate.mid, status.value,
        )
        return status

    # Requests from the API

    async def notify_design_change(self, project_id: str) -> PipelineEvent:
        event = PipelineEvent.create(EventType.DESIGN_CHANGED, project_id)
        await self.dispatcher.dispatch(event)
        return event

    async def request_recalculation(self, project_id: str) -> PipelineEvent:
        event = PipelineEvent.create(EventType.RECALC_REQUESTED, project_id)
        await self.dispatcher.dispatch(event)
        return event

    async def request_cost(
        self,
        project_id: str,
        regional_multiplier: Optional[float] = None,
        brand_tier: Optional[str] = None,
    ) -> PipelineEvent:
        event = PipelineEvent.create(
            EventType.COST_REQUESTED,
            project_id,
            data={"regionalMultiplier": regional_multiplier, "brandTier": brand_tier},
        )
        await self.dispatcher.dispatch(event)
        return event

    # Dispatcher handlers

    async def _handle_design_changed(self, event: PipelineEvent) -> None:
        await self.on_design_change(event.project_id, parent_id=event.id)

    async def _handle_recalc_requested(self, event: PipelineEvent) -> None:
        await self.on_recalculate(event.project_id, parent_id=event.id)

    async def _handle_cost_requested(self, event: PipelineEvent) -> None:
        await self.on_cost(
            event.project_id,
            regional_multiplier=event.data.get("regionalMultiplier"),
            brand_tier=event.data.get("brandTier"),
        )

"""
Entry points invoked by external publishers (database change hooks,
retries, the project API). Each returns only an acknowledgement.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from hotel_design.services.status_coordinator import StatusCoordinator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Acknowledgement:
    status_code: int
    message: str


def project_id_from_change(payload: Any) -> Optional[str]:
    """Project id from a row-change payload: the new record, else the old one."""
    if not isinstance(payload, dict):
        return None
    for key in ("record", "old_record"):
        record = payload.get(key)
        if isinstance(record, dict) and record.get("project_id"):
            return str(record["project_id"])
    return None


def _project_id(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict) or not payload.get("projectId"):
        return None
    return str(payload["projectId"])


def _parse_multiplier(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("regionalMultiplier must be a number")
    return float(value)


class PipelineTriggers:
    def __init__(self, coordinator: StatusCoordinator):
        self.coordinator = coordinator

    async def on_design_change(self, payload: Any) -> Acknowledgement:
        project_id = project_id_from_change(payload)
        if not project_id:
            return Acknowledgement(400, "No project_id found")

        try:
            await self.coordinator.on_design_change(project_id)
        except Exception:
            logger.exception("design change listener failed for project %s", project_id)
            return Acknowledgement(500, "Internal error")
        return Acknowledgement(200, "OK")

    async def on_recalculate(self, payload: Any) -> Acknowledgement:
        project_id = _project_id(payload)
        if not project_id:
            return Acknowledgement(400, "No projectId")

        try:
            await self.coordinator.on_recalculate(project_id)
        except Exception:
            logger.exception("recalc worker failed for project %s", project_id)
            return Acknowledgement(500, "recalc error")
        return Acknowledgement(200, "Recalc OK")

    async def on_cost(self, payload: Any) -> Acknowledgement:
        project_id = _project_id(payload)
        if not project_id:
            return Acknowledgement(400, "No projectId")

        try:
            multiplier = _parse_multiplier(payload.get("regionalMultiplier"))
        except (TypeError, ValueError):
            return Acknowledgement(400, "Invalid regionalMultiplier")
        brand_tier = payload.get("brandTier")
        if brand_tier is not None and not isinstance(brand_tier, str):
            return Acknowledgement(400, "Invalid brandTier")

        try:
            await self.coordinator.on_cost(project_id, regional_multiplier=multiplier, brand_tier=brand_tier)
        except Exception:
            logger.exception("cost worker failed for project %s", project_id)
            return Acknowledgement(500, "cost error")
        return Acknowledgement(200, "Cost OK")

"""Process-wide pipeline wiring: dispatcher, coordinator and triggers."""

import logging

from hotel_design.core.config import settings
from hotel_design.db.database import database
from hotel_design.services.pipeline_triggers import PipelineTriggers
from hotel_design.services.stage_dispatcher import (
    InlineDispatcher,
    QueueDispatcher,
    StageDispatcher,
)
from hotel_design.services.status_coordinator import StatusCoordinator

logger = logging.getLogger(__name__)


def build_dispatcher(mode: str) -> StageDispatcher:
    if mode == "inline":
        return InlineDispatcher()
    return QueueDispatcher()


dispatcher = build_dispatcher(settings.pipeline_dispatch_mode)

coordinator = StatusCoordinator(
    database,
    dispatcher,
    default_regional_multiplier=settings.default_regional_multiplier,
    default_brand_tier=settings.default_brand_tier,
)

triggers = PipelineTriggers(coordinator)


async def start_pipeline():
    """Start the background worker when stages are queued."""
    if isinstance(dispatcher, QueueDispatcher):
        await dispatcher.start()
    logger.info("Pipeline dispatch mode: %s", settings.pipeline_dispatch_mode)


async def stop_pipeline():
    if isinstance(dispatcher, QueueDispatcher):
        await dispatcher.stop()

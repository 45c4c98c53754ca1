"""Pipeline trigger endpoints called by change hooks and retries."""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from hotel_design.api.deps import get_triggers
from hotel_design.services.pipeline_triggers import Acknowledgement, PipelineTriggers

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["pipeline"])


async def _read_payload(request: Request):
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def _respond(ack: Acknowledgement) -> PlainTextResponse:
    return PlainTextResponse(ack.message, status_code=ack.status_code)


# TODO: [SECURITY] Verify the change-hook signature before accepting trigger calls
@router.post("/design-change-listener")
async def design_change_listener(request: Request, triggers: PipelineTriggers = Depends(get_triggers)):
    payload = await _read_payload(request)
    logger.info("design_change_listener payload %s", payload)
    return _respond(await triggers.on_design_change(payload))


@router.post("/recalc-worker")
async def recalc_worker(request: Request, triggers: PipelineTriggers = Depends(get_triggers)):
    payload = await _read_payload(request)
    return _respond(await triggers.on_recalculate(payload))


@router.post("/cost-worker")
async def cost_worker(request: Request, triggers: PipelineTriggers = Depends(get_triggers)):
    payload = await _read_payload(request)
    return _respond(await triggers.on_cost(payload))

"""Guided hotel-setup conversation route."""

import logging
from typing import Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from hotel_design.api.deps import require_user
from hotel_design.core.config import settings
from hotel_design.db.database import get_database
from hotel_design.db.queries import base_models, projects
from hotel_design.schemas.conversation import (
    ChatRequest,
    CompletionResponse,
    HotelBaseModel,
    QuestionResponse,
)
from hotel_design.services.conversation_engine import COMPLETE, INVALID, ConversationEngine
from hotel_design.services.design_session import session_from_base_model
from hotel_design.services.design_store import save_session

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/ai", tags=["chat"])

engine = ConversationEngine()

COMPLETION_MESSAGE = "Perfect! I've created your hotel base model. Redirecting to your projects..."


def project_name_for(model: HotelBaseModel) -> str:
    return f"{model.brandFlag} Hotel - {model.siteLocation}"


async def persist_completed_model(user_id: str, model: HotelBaseModel) -> dict:
    """Create the draft project, store the model and seed its design."""
    db = await get_database()

    async with db.transaction():
        project = await projects.create_project(db, name=project_name_for(model), user_id=user_id)
        await base_models.create_base_model(db, project["id"], model.model_dump())
        await save_session(db, project["id"], session_from_base_model(model))

    logger.info("Created project %s from conversation for user %s", project["id"], user_id)
    return project


@router.post(
    "/chat",
    response_model=Union[QuestionResponse, CompletionResponse],
    response_model_exclude_none=True,
)
@limiter.limit(settings.chat_rate_limit)
async def chat(request: Request, req: ChatRequest, user_id: str = Depends(require_user)):
    """Return the next question, or the created project once every slot is filled."""
    state = engine.advance(req.messages)

    if state.status == INVALID:
        violation = state.violation
        return JSONResponse(
            status_code=422,
            content={
                "error": f"Could not build the hotel model: {violation.field} is invalid ({violation.message}). Please try again.",
                "field": violation.field,
                "retry": True,
            },
        )

    if state.status != COMPLETE:
        return QuestionResponse(question=state.question)

    try:
        project = await persist_completed_model(user_id, state.model)
    except Exception as e:
        logger.exception("Failed to save completed model for user %s", user_id)
        return JSONResponse(
            status_code=500,
            content={"error": f"Saving your project failed: {str(e)}", "retry": True},
        )

    return CompletionResponse(model=state.model, projectId=project["id"], message=COMPLETION_MESSAGE)

"""Dependency injection for API routes."""
from typing import Optional

from fastapi import Header, HTTPException

from hotel_design.core import config
from hotel_design.db.database import get_database
from hotel_design.db.queries import sessions
from hotel_design.services import pipeline_runtime


def get_settings():
    """Get application settings, including any reloaded since startup."""
    return config.settings


def get_coordinator():
    """Get the process-wide status coordinator."""
    return pipeline_runtime.coordinator


def get_triggers():
    """Get the pipeline trigger entry points."""
    return pipeline_runtime.triggers


async def require_user(authorization: Optional[str] = Header(None)) -> str:
    """Resolve the bearer session token to a user id, or reject with 401."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Authorization header required")

    token = authorization.removeprefix("Bearer ").strip()
    if not token:
        raise HTTPException(status_code=401, detail="Invalid authorization token")

    db = await get_database()
    try:
        user_id = await sessions.get_session_user(db, token)
    except Exception as e:
        raise HTTPException(status_code=401, detail="Failed to authenticate user") from e

    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid authorization token")
    return user_id

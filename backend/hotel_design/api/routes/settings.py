from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from typing import Optional

from hotel_design.core import config
from hotel_design.core.config import (
    save_settings_to_file,
    reload_settings,
    load_settings_from_file,
)
from hotel_design.services import pipeline_runtime
from hotel_design.services.cost_estimator import BASE_COST_PER_TIER

router = APIRouter(prefix="/settings", tags=["settings"])


class SettingsUpdate(BaseModel):
    pipeline_dispatch_mode: Optional[str] = None
    default_regional_multiplier: Optional[float] = Field(None, gt=0)
    default_brand_tier: Optional[str] = None
    emit_design_change_on_mutation: Optional[bool] = None


class SettingsResponse(BaseModel):
    pipeline_dispatch_mode: str
    default_regional_multiplier: float
    default_brand_tier: str
    emit_design_change_on_mutation: bool
    database_url: str  # masked


# TODO: [SECURITY] Add authentication before exposing settings outside localhost
@router.get("", response_model=SettingsResponse)
async def get_settings():
    """Retrieve current settings with masked sensitive values."""
    return config.settings.get_effective_settings()


@router.post("", response_model=SettingsResponse)
async def update_settings(update: SettingsUpdate):
    """
    Update settings and save to local file.

    The dispatch mode is read once at startup; a change applies after restart.
    """
    current = load_settings_from_file()

    if update.pipeline_dispatch_mode is not None:
        if update.pipeline_dispatch_mode not in ("queue", "inline"):
            raise HTTPException(
                status_code=400,
                detail="pipeline_dispatch_mode must be 'queue' or 'inline'",
            )
        current["pipeline_dispatch_mode"] = update.pipeline_dispatch_mode

    if update.default_brand_tier is not None:
        if update.default_brand_tier not in BASE_COST_PER_TIER:
            raise HTTPException(
                status_code=400,
                detail=f"default_brand_tier must be one of {sorted(BASE_COST_PER_TIER)}",
            )
        current["default_brand_tier"] = update.default_brand_tier

    if update.default_regional_multiplier is not None:
        current["default_regional_multiplier"] = update.default_regional_multiplier

    if update.emit_design_change_on_mutation is not None:
        current["emit_design_change_on_mutation"] = update.emit_design_change_on_mutation

    save_settings_to_file(current)

    new_settings = reload_settings()
    pipeline_runtime.coordinator.default_regional_multiplier = new_settings.default_regional_multiplier
    pipeline_runtime.coordinator.default_brand_tier = new_settings.default_brand_tier

    return new_settings.get_effective_settings()

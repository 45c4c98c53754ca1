"""Project design API routes: floors, rooms, public areas, costs."""

import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Response

from hotel_design.api.deps import get_coordinator, get_settings, require_user
from hotel_design.core.errors import FloorLevelConflictError, FloorNotFoundError
from hotel_design.core.status import ProjectStatus
from hotel_design.db.database import get_database
from hotel_design.db.queries import base_models, costs, projects
from hotel_design.schemas.design import (
    BulkRoomUpdateRequest,
    CostRequest,
    CostSummary,
    CreateFloorRequest,
    EnablePublicAreaRequest,
    MoveFloorRequest,
    ResizePublicAreaRequest,
    RoomQuantityRequest,
    UpdateFloorRequest,
)
from hotel_design.services.catalog import FLOOR_PRESETS
from hotel_design.services.compliance import evaluate_compliance
from hotel_design.services.cost_estimator import CostEstimate
from hotel_design.services.design_session import DesignSession
from hotel_design.services.design_store import load_session, save_session
from hotel_design.services.status_coordinator import StatusCoordinator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])

# TODO: [SECURITY] Scope project and design routes to the session user


async def _get_project_or_404(db, project_id: str) -> dict:
    project = await projects.get_project(db, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


def _design_payload(session: DesignSession) -> dict:
    return {
        "floors": [f.model_dump() for f in session.sorted_floors()],
        "publicAreas": [a.model_dump() for a in session.public_areas],
    }


async def _apply_design_change(
    project_id: str,
    command: Callable[[DesignSession], DesignSession],
    coordinator: StatusCoordinator,
) -> DesignSession:
    """Load the design, apply one command, save it and announce the change."""
    db = await get_database()
    await _get_project_or_404(db, project_id)
    session = await load_session(db, project_id)

    try:
        updated = command(session)
    except FloorNotFoundError:
        raise HTTPException(status_code=404, detail="Floor not found")
    except FloorLevelConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    try:
        await save_session(db, project_id, updated)
    except Exception as e:
        logger.exception("Saving design for project %s failed", project_id)
        raise HTTPException(status_code=500, detail=f"Save failed: {str(e)}")

    if get_settings().emit_design_change_on_mutation:
        await coordinator.notify_design_change(project_id)

    return updated


# ============== Projects ============== #

@router.get("")
async def list_projects(user_id: str = Depends(require_user)):
    """List the current user's projects."""
    db = await get_database()
    project_list = await projects.list_projects(db, user_id=user_id)
    return {"projects": project_list}


@router.get("/{project_id}")
async def get_project(project_id: str):
    db = await get_database()
    return await _get_project_or_404(db, project_id)


@router.delete("/{project_id}")
async def delete_project(project_id: str):
    db = await get_database()
    await _get_project_or_404(db, project_id)
    await projects.delete_project(db, project_id)
    return {"success": True}


@router.get("/{project_id}/design")
async def get_design(project_id: str):
    """Current design with KPIs and a live compliance check."""
    db = await get_database()
    project = await _get_project_or_404(db, project_id)
    session = await load_session(db, project_id)
    base_model = await base_models.get_base_model(db, project_id)
    status = ProjectStatus.parse(project["status"])

    return {
        **_design_payload(session),
        "metrics": session.metrics().model_dump(),
        "issues": [
            i.model_dump(exclude_none=True)
            for i in evaluate_compliance(session.floors, session.public_areas)
        ],
        "status": status.value,
        "statusLabel": status.label,
        "baseModel": base_model["data"] if base_model else None,
    }


# ============== Floors ============== #

@router.get("/{project_id}/floors")
async def list_floors(project_id: str):
    db = await get_database()
    await _get_project_or_404(db, project_id)
    session = await load_session(db, project_id)
    return [f.model_dump() for f in session.sorted_floors()]


@router.post("/{project_id}/floors", status_code=201)
async def create_floor(
    project_id: str,
    req: CreateFloorRequest,
    coordinator: StatusCoordinator = Depends(get_coordinator),
):
    before = set()

    def command(session: DesignSession) -> DesignSession:
        before.update(f.id for f in session.floors)
        return session.add_floor(
            name=req.name,
            level=req.level,
            height=req.height,
            floor_type=req.floorType,
        )

    updated = await _apply_design_change(project_id, command, coordinator)
    created = next(f for f in updated.floors if f.id not in before)
    return created.model_dump()


@router.put("/{project_id}/floors/{floor_id}")
async def update_floor(
    project_id: str,
    floor_id: str,
    req: UpdateFloorRequest,
    coordinator: StatusCoordinator = Depends(get_coordinator),
):
    updated = await _apply_design_change(
        project_id,
        lambda s: s.update_floor(
            floor_id,
            name=req.name,
            level=req.level,
            height=req.height,
            floorType=req.floorType,
        ),
        coordinator,
    )
    return updated.get_floor(floor_id).model_dump()


@router.delete("/{project_id}/floors/{floor_id}", status_code=204)
async def delete_floor(
    project_id: str,
    floor_id: str,
    coordinator: StatusCoordinator = Depends(get_coordinator),
):
    await _apply_design_change(project_id, lambda s: s.remove_floor(floor_id), coordinator)
    return Response(status_code=204)


@router.post("/{project_id}/floors/{floor_id}/move")
async def move_floor(
    project_id: str,
    floor_id: str,
    req: MoveFloorRequest,
    coordinator: StatusCoordinator = Depends(get_coordinator),
):
    updated = await _apply_design_change(
        project_id, lambda s: s.move_floor(floor_id, req.direction), coordinator
    )
    return [f.model_dump() for f in updated.sorted_floors()]


@router.put("/{project_id}/floors/{floor_id}/rooms/{room_type_id}")
async def set_room_quantity(
    project_id: str,
    floor_id: str,
    room_type_id: str,
    req: RoomQuantityRequest,
    coordinator: StatusCoordinator = Depends(get_coordinator),
):
    updated = await _apply_design_change(
        project_id,
        lambda s: s.set_room_quantity(floor_id, room_type_id, req.quantity, req.averageSize),
        coordinator,
    )
    return updated.get_floor(floor_id).model_dump()


@router.post("/{project_id}/floors/bulk-rooms")
async def bulk_update_rooms(
    project_id: str,
    req: BulkRoomUpdateRequest,
    coordinator: StatusCoordinator = Depends(get_coordinator),
):
    """Apply room quantities (explicit or a preset) to several floors at once."""
    if req.roomQuantities is not None:
        quantities = req.roomQuantities
    elif req.preset:
        quantities = FLOOR_PRESETS[req.preset]
    else:
        raise HTTPException(status_code=400, detail="roomQuantities or preset is required")

    if any(q < 0 for q in quantities.values()):
        raise HTTPException(status_code=400, detail="Room quantities must be >= 0")

    def command(session: DesignSession) -> DesignSession:
        floor_ids = req.floorIds if req.floorIds is not None else session.standard_floor_ids()
        return session.apply_bulk_rooms(floor_ids, quantities)

    updated = await _apply_design_change(project_id, command, coordinator)
    return _design_payload(updated)


# ============== Public Areas ============== #

@router.get("/{project_id}/public-areas")
async def list_public_areas(project_id: str):
    db = await get_database()
    await _get_project_or_404(db, project_id)
    session = await load_session(db, project_id)
    return [a.model_dump() for a in session.public_areas]


@router.put("/{project_id}/public-areas/{area_id}")
async def enable_public_area(
    project_id: str,
    area_id: str,
    req: EnablePublicAreaRequest,
    coordinator: StatusCoordinator = Depends(get_coordinator),
):
    """Enable an area (catalogue default size) or resize it if already enabled."""
    updated = await _apply_design_change(
        project_id,
        lambda s: s.enable_public_area(area_id, size_sqft=req.sizeSqft, level=req.level),
        coordinator,
    )
    return updated.get_public_area(area_id).model_dump()


@router.patch("/{project_id}/public-areas/{area_id}")
async def resize_public_area(
    project_id: str,
    area_id: str,
    req: ResizePublicAreaRequest,
    coordinator: StatusCoordinator = Depends(get_coordinator),
):
    def command(session: DesignSession) -> DesignSession:
        if not session.get_public_area(area_id):
            raise HTTPException(status_code=404, detail="Public area not found")
        return session.resize_public_area(area_id, req.sizeSqft)

    updated = await _apply_design_change(project_id, command, coordinator)
    return updated.get_public_area(area_id).model_dump()


@router.delete("/{project_id}/public-areas/{area_id}", status_code=204)
async def disable_public_area(
    project_id: str,
    area_id: str,
    coordinator: StatusCoordinator = Depends(get_coordinator),
):
    await _apply_design_change(project_id, lambda s: s.disable_public_area(area_id), coordinator)
    return Response(status_code=204)


# ============== Pipeline ============== #

@router.post("/{project_id}/recalculate", status_code=202)
async def recalculate(project_id: str, coordinator: StatusCoordinator = Depends(get_coordinator)):
    db = await get_database()
    await _get_project_or_404(db, project_id)
    await coordinator.request_recalculation(project_id)
    return {"ok": True}


@router.post("/{project_id}/costs", status_code=202)
async def request_costs(
    project_id: str,
    req: CostRequest,
    coordinator: StatusCoordinator = Depends(get_coordinator),
):
    db = await get_database()
    await _get_project_or_404(db, project_id)
    await coordinator.request_cost(
        project_id,
        regional_multiplier=req.regionalMultiplier,
        brand_tier=req.brandTier,
    )
    return {"ok": True}


@router.get("/{project_id}/costs/latest", response_model=CostSummary)
async def latest_cost(project_id: str):
    """Latest per-key range, with totals for the project's current room count."""
    db = await get_database()
    project = await _get_project_or_404(db, project_id)
    cost = await costs.get_latest_cost(db, project_id)
    if not cost:
        raise HTTPException(status_code=404, detail="No cost summary yet")

    estimate = CostEstimate(
        low=cost["low_cost_per_key"],
        mid=cost["mid_cost_per_key"],
        high=cost["high_cost_per_key"],
        total_rooms=project["totalRooms"],
        brand_tier=cost["brand_tier"],
        regional_multiplier=cost["regional_multiplier"],
    )
    return {**cost, "estimate": estimate.to_dict()}


@router.get("/{project_id}/costs")
async def cost_history(project_id: str):
    db = await get_database()
    await _get_project_or_404(db, project_id)
    return {"costs": await costs.list_costs(db, project_id)}

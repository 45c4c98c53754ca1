"""Load and persist a project's DesignSession through the row store."""

import logging
import databases

from hotel_design.db.queries import floors as floor_queries
from hotel_design.db.queries import public_areas as area_queries
from hotel_design.schemas.design import Floor, PublicArea
from hotel_design.services.design_session import DesignSession

logger = logging.getLogger(__name__)


async def load_session(db: databases.Database, project_id: str) -> DesignSession:
    """Read the current floors, rooms and public areas of a project."""
    floor_rows = await floor_queries.list_floors(db, project_id)
    area_rows = await area_queries.list_public_areas(db, project_id)

    return DesignSession(
        floors=tuple(Floor.model_validate(row) for row in floor_rows),
        public_areas=tuple(PublicArea.model_validate(row) for row in area_rows),
    )


async def save_session(db: databases.Database, project_id: str, session: DesignSession) -> None:
    """
    Write the whole session back, overwriting what is stored.

    Floors and public areas missing from the session are deleted. Writes
    are absolute, so concurrent saves resolve to whichever finishes last.
    """
    async with db.transaction():
        for floor in session.floors:
            await floor_queries.upsert_floor(
                db,
                project_id=project_id,
                floor_id=floor.id,
                name=floor.name,
                level=floor.level,
                height=floor.height,
                floor_type=floor.floorType,
                total_area=floor.totalArea,
            )
            for room in floor.rooms:
                await floor_queries.upsert_room_configuration(
                    db,
                    floor_id=floor.id,
                    room_type=room.roomTypeId,
                    quantity=room.quantity,
                    average_size=room.averageSize,
                )
        await floor_queries.delete_floors_except(db, project_id, [f.id for f in session.floors])

        for area in session.public_areas:
            await area_queries.upsert_public_area(
                db,
                project_id=project_id,
                area_id=area.id,
                area_type=area.areaType,
                size_sqft=area.sizeSqft,
                is_required=area.isRequired,
                level=area.level,
            )
        await area_queries.delete_public_areas_except(db, project_id, [a.id for a in session.public_areas])

    logger.info(
        "Saved design for project %s: %d floors, %d public areas",
        project_id, len(session.floors), len(session.public_areas),
    )

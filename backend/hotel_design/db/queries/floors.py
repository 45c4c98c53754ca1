"""Floor and room configuration queries."""

from datetime import datetime
from typing import List, Sequence
import databases
import secrets


def _in_clause(prefix: str, values: Sequence[str]) -> tuple[str, dict]:
    """Build ":p_0, :p_1" placeholders and their bound values."""
    params = {f"{prefix}_{i}": value for i, value in enumerate(values)}
    return ", ".join(f":{name}" for name in params), params


async def list_floors(db: databases.Database, project_id: str) -> List[dict]:
    """Floors of a project ordered by level, each with its room configurations."""
    floor_rows = await db.fetch_all(
        "SELECT * FROM floors WHERE project_id = :project_id ORDER BY level",
        {"project_id": project_id}
    )
    room_rows = await db.fetch_all(
        """
        SELECT rc.* FROM room_configurations rc
        JOIN floors f ON f.id = rc.floor_id
        WHERE f.project_id = :project_id
        ORDER BY rc.room_type
        """,
        {"project_id": project_id}
    )

    rooms_by_floor: dict = {}
    for row in room_rows:
        rooms_by_floor.setdefault(row["floor_id"], []).append({
            "roomTypeId": row["room_type"],
            "quantity": row["quantity"],
            "averageSize": row["average_size"]
        })

    return [
        {
            "id": row["id"],
            "name": row["name"],
            "level": row["level"],
            "height": row["height"],
            "floorType": row["floor_type"],
            "totalArea": row["total_area"],
            "rooms": rooms_by_floor.get(row["id"], [])
        }
        for row in floor_rows
    ]


async def upsert_floor(
    db: databases.Database,
    project_id: str,
    floor_id: str,
    name: str,
    level: int,
    height: float,
    floor_type: str,
    total_area: float = 0
) -> None:
    """Insert a floor or overwrite all of its fields."""
    query = """
        INSERT INTO floors (id, project_id, name, level, height, floor_type, total_area, updated_at)
        VALUES (:id, :project_id, :name, :level, :height, :floor_type, :total_area, :updated_at)
        ON CONFLICT(id) DO UPDATE SET
            name = excluded.name,
            level = excluded.level,
            height = excluded.height,
            floor_type = excluded.floor_type,
            total_area = excluded.total_area,
            updated_at = excluded.updated_at
    """
    await db.execute(query, {
        "id": floor_id,
        "project_id": project_id,
        "name": name,
        "level": level,
        "height": height,
        "floor_type": floor_type,
        "total_area": total_area,
        "updated_at": datetime.utcnow().isoformat()
    })


async def delete_floors_except(
    db: databases.Database,
    project_id: str,
    keep_ids: Sequence[str]
) -> None:
    """Delete the project's floors (and their rooms) not listed in keep_ids."""
    values = {"project_id": project_id}
    condition = ""
    if keep_ids:
        placeholders, params = _in_clause("keep", keep_ids)
        values.update(params)
        condition = f" AND id NOT IN ({placeholders})"

    await db.execute(
        f"""
        DELETE FROM room_configurations WHERE floor_id IN (
            SELECT id FROM floors WHERE project_id = :project_id{condition}
        )
        """,
        values
    )
    await db.execute(
        f"DELETE FROM floors WHERE project_id = :project_id{condition}",
        values
    )


async def upsert_room_configuration(
    db: databases.Database,
    floor_id: str,
    room_type: str,
    quantity: int,
    average_size: float
) -> None:
    """Set the quantity and average size of one room type on a floor."""
    query = """
        INSERT INTO room_configurations (id, floor_id, room_type, quantity, average_size)
        VALUES (:id, :floor_id, :room_type, :quantity, :average_size)
        ON CONFLICT(floor_id, room_type) DO UPDATE SET
            quantity = excluded.quantity,
            average_size = excluded.average_size
    """
    await db.execute(query, {
        "id": secrets.token_urlsafe(16),
        "floor_id": floor_id,
        "room_type": room_type,
        "quantity": quantity,
        "average_size": average_size
    })

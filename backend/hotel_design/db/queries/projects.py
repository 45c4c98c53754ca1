"""Project database queries."""

from datetime import datetime
from typing import Optional, List
import databases
import json
import secrets

from hotel_design.core.status import ProjectStatus


def _row_to_project(row) -> dict:
    status = ProjectStatus.parse(row["status"])
    return {
        "id": row["id"],
        "userId": row["user_id"],
        "name": row["name"],
        "status": status.value,
        "statusLabel": status.label,
        "nonCompliance": json.loads(row["non_compliance"]) if row["non_compliance"] else [],
        "totalRooms": row["total_rooms"] or 0,
        "lastRecalcAt": row["last_recalc_at"],
        "lastCostCalcAt": row["last_cost_calc_at"],
        "createdAt": row["created_at"],
        "updatedAt": row["updated_at"]
    }


async def create_project(
    db: databases.Database,
    name: str,
    user_id: Optional[str] = None,
    status: ProjectStatus = ProjectStatus.DRAFT
) -> dict:
    """Create a new project."""
    project_id = secrets.token_urlsafe(16)
    now = datetime.utcnow().isoformat()

    query = """
        INSERT INTO projects (id, user_id, name, status, non_compliance, total_rooms, created_at, updated_at)
        VALUES (:id, :user_id, :name, :status, :non_compliance, 0, :created_at, :updated_at)
    """

    await db.execute(
        query,
        {
            "id": project_id,
            "user_id": user_id,
            "name": name,
            "status": status.value,
            "non_compliance": "[]",
            "created_at": now,
            "updated_at": now
        }
    )

    return {
        "id": project_id,
        "userId": user_id,
        "name": name,
        "status": status.value,
        "statusLabel": status.label,
        "nonCompliance": [],
        "totalRooms": 0,
        "lastRecalcAt": None,
        "lastCostCalcAt": None,
        "createdAt": now,
        "updatedAt": now
    }


async def get_project(db: databases.Database, project_id: str) -> Optional[dict]:
    """Get project by ID."""
    query = "SELECT * FROM projects WHERE id = :project_id"
    row = await db.fetch_one(query, {"project_id": project_id})

    if not row:
        return None

    return _row_to_project(row)


async def list_projects(db: databases.Database, user_id: Optional[str] = None) -> List[dict]:
    """List projects, newest first, optionally only those of one user."""
    if user_id:
        query = "SELECT * FROM projects WHERE user_id = :user_id ORDER BY created_at DESC"
        rows = await db.fetch_all(query, {"user_id": user_id})
    else:
        query = "SELECT * FROM projects ORDER BY created_at DESC"
        rows = await db.fetch_all(query)

    return [_row_to_project(row) for row in rows]


async def update_project_status(
    db: databases.Database,
    project_id: str,
    status: ProjectStatus
) -> None:
    """Overwrite the project status."""
    query = """
        UPDATE projects SET status = :status, updated_at = :updated_at
        WHERE id = :project_id
    """
    await db.execute(query, {
        "project_id": project_id,
        "status": status.value,
        "updated_at": datetime.utcnow().isoformat()
    })


async def record_recalculation(
    db: databases.Database,
    project_id: str,
    status: ProjectStatus,
    issues: List[dict],
    total_rooms: int
) -> None:
    """Replace the issue list and room total and set the status in one write."""
    now = datetime.utcnow().isoformat()
    query = """
        UPDATE projects SET
            status = :status,
            non_compliance = :non_compliance,
            total_rooms = :total_rooms,
            last_recalc_at = :last_recalc_at,
            updated_at = :updated_at
        WHERE id = :project_id
    """
    await db.execute(query, {
        "project_id": project_id,
        "status": status.value,
        "non_compliance": json.dumps(issues),
        "total_rooms": total_rooms,
        "last_recalc_at": now,
        "updated_at": now
    })


async def record_cost_calculation(
    db: databases.Database,
    project_id: str,
    status: ProjectStatus
) -> None:
    """Set the status reached after a cost run."""
    now = datetime.utcnow().isoformat()
    query = """
        UPDATE projects SET
            status = :status,
            last_cost_calc_at = :last_cost_calc_at,
            updated_at = :updated_at
        WHERE id = :project_id
    """
    await db.execute(query, {
        "project_id": project_id,
        "status": status.value,
        "last_cost_calc_at": now,
        "updated_at": now
    })


async def delete_project(db: databases.Database, project_id: str) -> None:
    """Delete project and all related records.

    Child rows are removed explicitly; SQLite only cascades when the
    connection has foreign keys enabled.
    """
    params = {"project_id": project_id}
    async with db.transaction():
        await db.execute(
            "DELETE FROM room_configurations WHERE floor_id IN "
            "(SELECT id FROM floors WHERE project_id = :project_id)",
            params,
        )
        for table in ("floors", "public_areas", "project_costs", "hotel_base_models"):
            await db.execute(f"DELETE FROM {table} WHERE project_id = :project_id", params)
        await db.execute("DELETE FROM projects WHERE id = :project_id", params)

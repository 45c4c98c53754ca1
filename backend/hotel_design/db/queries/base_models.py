"""Hotel base model queries."""

from datetime import datetime
from typing import Optional
import databases
import json
import secrets


async def create_base_model(db: databases.Database, project_id: str, data: dict) -> dict:
    """Store the validated conversation model for a project."""
    model_id = secrets.token_urlsafe(16)
    now = datetime.utcnow().isoformat()

    query = """
        INSERT INTO hotel_base_models (id, project_id, data, created_at)
        VALUES (:id, :project_id, :data, :created_at)
    """
    await db.execute(query, {
        "id": model_id,
        "project_id": project_id,
        "data": json.dumps(data),
        "created_at": now
    })

    return {"id": model_id, "projectId": project_id, "data": data, "createdAt": now}


async def get_base_model(db: databases.Database, project_id: str) -> Optional[dict]:
    """Most recent base model stored for a project."""
    query = """
        SELECT * FROM hotel_base_models WHERE project_id = :project_id
        ORDER BY created_at DESC LIMIT 1
    """
    row = await db.fetch_one(query, {"project_id": project_id})
    if not row:
        return None

    return {
        "id": row["id"],
        "projectId": row["project_id"],
        "data": json.loads(row["data"]),
        "createdAt": row["created_at"]
    }

"""Cost summary queries. Rows are append-only; the latest row is current."""

from datetime import datetime
from typing import List, Optional
import databases
import secrets


def _row_to_cost(row) -> dict:
    return {
        "id": row["id"],
        "project_id": row["project_id"],
        "low_cost_per_key": row["low_cost_per_key"],
        "mid_cost_per_key": row["mid_cost_per_key"],
        "high_cost_per_key": row["high_cost_per_key"],
        "regional_multiplier": row["regional_multiplier"],
        "brand_tier": row["brand_tier"],
        "created_at": row["created_at"]
    }


async def insert_cost_summary(
    db: databases.Database,
    project_id: str,
    low_cost_per_key: float,
    mid_cost_per_key: float,
    high_cost_per_key: float,
    regional_multiplier: float,
    brand_tier: str
) -> dict:
    """Append a cost summary row."""
    values = {
        "id": secrets.token_urlsafe(16),
        "project_id": project_id,
        "low_cost_per_key": low_cost_per_key,
        "mid_cost_per_key": mid_cost_per_key,
        "high_cost_per_key": high_cost_per_key,
        "regional_multiplier": regional_multiplier,
        "brand_tier": brand_tier,
        "created_at": datetime.utcnow().isoformat()
    }

    query = """
        INSERT INTO project_costs (
            id, project_id, low_cost_per_key, mid_cost_per_key, high_cost_per_key,
            regional_multiplier, brand_tier, created_at
        ) VALUES (
            :id, :project_id, :low_cost_per_key, :mid_cost_per_key, :high_cost_per_key,
            :regional_multiplier, :brand_tier, :created_at
        )
    """
    await db.execute(query, values)
    return values


async def get_latest_cost(db: databases.Database, project_id: str) -> Optional[dict]:
    query = """
        SELECT * FROM project_costs WHERE project_id = :project_id
        ORDER BY created_at DESC, rowid DESC LIMIT 1
    """
    row = await db.fetch_one(query, {"project_id": project_id})
    return _row_to_cost(row) if row else None


async def list_costs(db: databases.Database, project_id: str, limit: int = 50) -> List[dict]:
    """Cost history, newest first."""
    query = """
        SELECT * FROM project_costs WHERE project_id = :project_id
        ORDER BY created_at DESC, rowid DESC LIMIT :limit
    """
    rows = await db.fetch_all(query, {"project_id": project_id, "limit": limit})
    return [_row_to_cost(row) for row in rows]

"""Public area queries. The area id is the area-type key, unique per project."""

from typing import List, Sequence
import databases


async def list_public_areas(db: databases.Database, project_id: str) -> List[dict]:
    rows = await db.fetch_all(
        "SELECT * FROM public_areas WHERE project_id = :project_id ORDER BY level, id",
        {"project_id": project_id}
    )
    return [
        {
            "id": row["id"],
            "areaType": row["area_type"],
            "sizeSqft": row["size_sqft"],
            "isRequired": bool(row["is_required"]),
            "level": row["level"]
        }
        for row in rows
    ]


async def upsert_public_area(
    db: databases.Database,
    project_id: str,
    area_id: str,
    area_type: str,
    size_sqft: int,
    is_required: bool,
    level: int
) -> None:
    query = """
        INSERT INTO public_areas (id, project_id, area_type, size_sqft, is_required, level)
        VALUES (:id, :project_id, :area_type, :size_sqft, :is_required, :level)
        ON CONFLICT(project_id, id) DO UPDATE SET
            area_type = excluded.area_type,
            size_sqft = excluded.size_sqft,
            is_required = excluded.is_required,
            level = excluded.level
    """
    await db.execute(query, {
        "id": area_id,
        "project_id": project_id,
        "area_type": area_type,
        "size_sqft": size_sqft,
        "is_required": 1 if is_required else 0,
        "level": level
    })


async def delete_public_areas_except(
    db: databases.Database,
    project_id: str,
    keep_ids: Sequence[str]
) -> None:
    """Remove the project's public areas not listed in keep_ids."""
    values = {"project_id": project_id}
    query = "DELETE FROM public_areas WHERE project_id = :project_id"
    if keep_ids:
        params = {f"keep_{i}": area_id for i, area_id in enumerate(keep_ids)}
        values.update(params)
        query += f" AND id NOT IN ({', '.join(':' + name for name in params)})"

    await db.execute(query, values)

"""Table definitions shared by create_database.py and the test fixtures."""

import databases

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS projects (
    id TEXT PRIMARY KEY,
    user_id TEXT,
    name TEXT NOT NULL,
    status TEXT DEFAULT 'draft' NOT NULL,
    non_compliance TEXT,
    total_rooms INTEGER DEFAULT 0 NOT NULL,
    last_recalc_at TEXT,
    last_cost_calc_at TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_projects_user_id ON projects(user_id);

CREATE TABLE IF NOT EXISTS hotel_base_models (
    id TEXT PRIMARY KEY,
    project_id TEXT NOT NULL,
    data TEXT NOT NULL,
    created_at TEXT NOT NULL,
    FOREIGN KEY (project_id) REFERENCES projects(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS floors (
    id TEXT PRIMARY KEY,
    project_id TEXT NOT NULL,
    name TEXT NOT NULL,
    level INTEGER NOT NULL,
    height REAL DEFAULT 9 NOT NULL,
    floor_type TEXT DEFAULT 'standard' NOT NULL,
    total_area REAL DEFAULT 0 NOT NULL,
    updated_at TEXT,
    FOREIGN KEY (project_id) REFERENCES projects(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_floors_project_id ON floors(project_id);

CREATE TABLE IF NOT EXISTS room_configurations (
    id TEXT PRIMARY KEY,
    floor_id TEXT NOT NULL,
    room_type TEXT NOT NULL,
    quantity INTEGER DEFAULT 0 NOT NULL,
    average_size REAL DEFAULT 0 NOT NULL,
    FOREIGN KEY (floor_id) REFERENCES floors(id) ON DELETE CASCADE,
    UNIQUE (floor_id, room_type)
);

CREATE TABLE IF NOT EXISTS public_areas (
    id TEXT NOT NULL,
    project_id TEXT NOT NULL,
    area_type TEXT NOT NULL,
    size_sqft INTEGER DEFAULT 0 NOT NULL,
    is_required INTEGER DEFAULT 0 NOT NULL,
    level INTEGER DEFAULT 0 NOT NULL,
    PRIMARY KEY (project_id, id),
    FOREIGN KEY (project_id) REFERENCES projects(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS project_costs (
    id TEXT PRIMARY KEY,
    project_id TEXT NOT NULL,
    low_cost_per_key REAL NOT NULL,
    mid_cost_per_key REAL NOT NULL,
    high_cost_per_key REAL NOT NULL,
    regional_multiplier REAL NOT NULL,
    brand_tier TEXT NOT NULL,
    created_at TEXT NOT NULL,
    FOREIGN KEY (project_id) REFERENCES projects(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_project_costs_project_id ON project_costs(project_id, created_at);

CREATE TABLE IF NOT EXISTS user_sessions (
    token TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    expires_at TEXT
);
"""


def schema_statements() -> list[str]:
    return [s.strip() for s in SCHEMA_SQL.split(";") if s.strip()]


async def create_tables(db: databases.Database) -> None:
    """Create all tables on an open connection."""
    for statement in schema_statements():
        await db.execute(statement)

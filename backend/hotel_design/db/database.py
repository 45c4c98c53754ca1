"""Database connection and lifecycle management for hotel design projects."""

import logging

import databases

from hotel_design.core.config import settings
from hotel_design.db.schema import create_tables

logger = logging.getLogger(__name__)

database = databases.Database(settings.database_url)


async def get_database() -> databases.Database:
    """Get database connection."""
    return database


async def connect_db():
    """Connect on startup and make sure every table exists."""
    if not database.is_connected:
        await database.connect()
        await create_tables(database)
        logger.info("Connected to %s", settings.get_effective_settings()["database_url"])


async def disconnect_db():
    """Disconnect from database on shutdown."""
    if database.is_connected:
        await database.disconnect()

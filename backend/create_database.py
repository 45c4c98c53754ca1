"""Create the hotel design SQLite database and optionally a dev session token."""

import secrets
import sqlite3
import sys
from pathlib import Path

from hotel_design.db.schema import SCHEMA_SQL

DB_PATH = Path(__file__).parent / "hotel_design.db"

DEV_USER_ID = "dev-user"


def create_database(db_path: Path = DB_PATH, seed_session: bool = False):
    """Create all tables; with seed_session, add a non-expiring token for DEV_USER_ID."""
    if db_path.exists():
        print(f"Database already exists at: {db_path}")
        response = input("Do you want to recreate it? (y/N): ")
        if response.lower() != 'y':
            print("Skipping database creation.")
            return

        db_path.unlink()
        print("Deleted existing database.")

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.executescript(SCHEMA_SQL)

    if seed_session:
        token = secrets.token_urlsafe(32)
        cursor.execute(
            "INSERT INTO user_sessions (token, user_id, expires_at) VALUES (?, ?, NULL)",
            (token, DEV_USER_ID),
        )
        print(f"Dev session for {DEV_USER_ID}: Authorization: Bearer {token}")

    conn.commit()
    conn.close()

    print(f"Database created successfully at: {db_path}")


if __name__ == "__main__":
    create_database(seed_session="--seed-session" in sys.argv[1:])

"""Session token lookups. Sessions are issued by the auth provider."""

from datetime import datetime
from typing import Optional
import databases


async def get_session_user(db: databases.Database, token: str) -> Optional[str]:
    """User id for a live session token, or None if unknown or expired."""
    row = await db.fetch_one(
        "SELECT user_id, expires_at FROM user_sessions WHERE token = :token",
        {"token": token}
    )
    if not row:
        return None

    expires_at = row["expires_at"]
    if expires_at and datetime.fromisoformat(expires_at) <= datetime.utcnow():
        return None

    return row["user_id"]


async def create_session(
    db: databases.Database,
    token: str,
    user_id: str,
    expires_at: Optional[datetime] = None
) -> None:
    await db.execute(
        "INSERT INTO user_sessions (token, user_id, expires_at) VALUES (:token, :user_id, :expires_at)",
        {
            "token": token,
            "user_id": user_id,
            "expires_at": expires_at.isoformat() if expires_at else None
        }
    )

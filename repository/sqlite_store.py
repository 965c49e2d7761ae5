"""SQLite-based user profile store."""

import sqlite3
import logging
from pathlib import Path
from datetime import datetime
from typing import Optional

from schemas.profile import UserProfile
from .user_repository import UserRepository

logger = logging.getLogger(__name__)


class SQLiteUserRepository(UserRepository):
    """SQLite-based persistent profile store."""

    def __init__(self, db_path: str = "data/users.db"):
        """
        Initialize SQLite profile store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        """Initialize database schema."""
        conn = self._get_connection()
        cursor = conn.cursor()

        # Profiles are stored whole as JSON
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                username TEXT,
                profile TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        conn.commit()
        conn.close()
        logger.info(f"Database initialized at {self.db_path}")

    def _row_to_user(self, row: sqlite3.Row) -> UserProfile:
        return UserProfile.model_validate_json(row["profile"])

    def save(self, user: UserProfile) -> UserProfile:
        """
        Create or update a user profile.

        Args:
            user: Profile to store

        Returns:
            Stored profile with updated_at refreshed
        """
        updated_user = user.model_copy(update={"updated_at": datetime.now()})

        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute(
            """
            INSERT INTO users (id, username, profile, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                username = excluded.username,
                profile = excluded.profile,
                updated_at = excluded.updated_at
            """,
            (
                updated_user.id,
                updated_user.username,
                updated_user.model_dump_json(),
                updated_user.created_at.isoformat(),
                updated_user.updated_at.isoformat(),
            )
        )

        conn.commit()
        conn.close()

        return updated_user

    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        """
        Get a user by ID.

        Args:
            user_id: User ID

        Returns:
            UserProfile or None if not found
        """
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("SELECT profile FROM users WHERE id = ?", (user_id,))
        row = cursor.fetchone()
        conn.close()

        if not row:
            return None
        return self._row_to_user(row)

    def get_all(self) -> list[UserProfile]:
        """Get all users in insertion order."""
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("SELECT profile FROM users ORDER BY rowid")
        rows = cursor.fetchall()
        conn.close()

        return [self._row_to_user(row) for row in rows]

    def get_all_except(self, user_id: str) -> list[UserProfile]:
        """Get all users except the specified one."""
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute(
            "SELECT profile FROM users WHERE id != ? ORDER BY rowid",
            (user_id,)
        )
        rows = cursor.fetchall()
        conn.close()

        return [self._row_to_user(row) for row in rows]

    def exists(self, user_id: str) -> bool:
        """Check if a user exists."""
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("SELECT 1 FROM users WHERE id = ?", (user_id,))
        found = cursor.fetchone() is not None
        conn.close()

        return found

    def delete(self, user_id: str) -> bool:
        """
        Delete a user.

        Args:
            user_id: User ID

        Returns:
            True if a row was deleted
        """
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("DELETE FROM users WHERE id = ?", (user_id,))
        deleted = cursor.rowcount > 0

        conn.commit()
        conn.close()

        if deleted:
            logger.info(f"Deleted user {user_id}")
        return deleted

    def clear(self):
        """Remove all users."""
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("DELETE FROM users")

        conn.commit()
        conn.close()

"""Repository for User persistence."""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from accounts_api.domain.errors import DuplicateEmailError
from accounts_api.domain.models import Subscription, User


class SQLiteUserRepository:
    """Repository for managing User entities in SQLite."""

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = str(db_path)
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._initialize_table()

    def _initialize_table(self) -> None:
        """Create users table if it doesn't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT UNIQUE NOT NULL,
                    password_hash TEXT NOT NULL,
                    subscription TEXT NOT NULL DEFAULT 'starter',
                    avatar_url TEXT NOT NULL DEFAULT '',
                    verify INTEGER NOT NULL DEFAULT 0,
                    verification_token TEXT,
                    token TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_users_verification_token ON users(verification_token)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_users_token ON users(token)"
            )
            conn.commit()

    def create(
        self,
        email: str,
        password_hash: str,
        avatar_url: str,
        verification_token: str,
    ) -> User:
        """Create a new, unverified user."""
        now = datetime.utcnow().isoformat()

        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO users (
                        email, password_hash, subscription, avatar_url, verify,
                        verification_token, token, created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, 0, ?, NULL, ?, ?)
                    """,
                    (
                        email,
                        password_hash,
                        Subscription.STARTER.value,
                        avatar_url,
                        verification_token,
                        now,
                        now,
                    ),
                )
                conn.commit()
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            raise DuplicateEmailError(email) from exc

        return User(
            id=user_id,
            email=email,
            password_hash=password_hash,
            subscription=Subscription.STARTER,
            avatar_url=avatar_url,
            verify=False,
            verification_token=verification_token,
            token=None,
            created_at=datetime.fromisoformat(now),
            updated_at=datetime.fromisoformat(now),
        )

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        return self._fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        return self._fetch_one("SELECT * FROM users WHERE email = ?", (email,))

    def get_by_verification_token(self, token: str) -> Optional[User]:
        """Get user by verification token."""
        return self._fetch_one(
            "SELECT * FROM users WHERE verification_token = ?", (token,)
        )

    def get_by_session_token(self, token: str) -> Optional[User]:
        """Get user by current session token."""
        return self._fetch_one("SELECT * FROM users WHERE token = ?", (token,))

    def mark_verified(self, verification_token: str) -> bool:
        """Mark the user holding this verification token as verified."""
        now = datetime.utcnow().isoformat()
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                """
                UPDATE users
                SET verify = 1, verification_token = NULL, updated_at = ?
                WHERE verification_token = ? AND verify = 0
                """,
                (now, verification_token),
            )
            conn.commit()
        return cursor.rowcount > 0

    def set_session_token(self, user_id: int, token: str) -> None:
        """Store a freshly issued session token, replacing any previous one."""
        now = datetime.utcnow().isoformat()
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "UPDATE users SET token = ?, updated_at = ? WHERE id = ?",
                (token, now, user_id),
            )
            conn.commit()

    def clear_session_token(self, token: str) -> bool:
        """Clear the session token if it is still the current one."""
        now = datetime.utcnow().isoformat()
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "UPDATE users SET token = NULL, updated_at = ? WHERE token = ?",
                (now, token),
            )
            conn.commit()
        return cursor.rowcount > 0

    def update_subscription_by_token(
        self, token: str, subscription: Subscription
    ) -> Optional[User]:
        """Set the subscription of the user signed in with ``token``."""
        return self._update_by_token(token, "subscription", subscription.value)

    def update_avatar_by_token(self, token: str, avatar_url: str) -> Optional[User]:
        """Set the avatar of the user signed in with ``token``."""
        return self._update_by_token(token, "avatar_url", avatar_url)

    def _update_by_token(self, token: str, column: str, value: str) -> Optional[User]:
        now = datetime.utcnow().isoformat()
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute(
                f"UPDATE users SET {column} = ?, updated_at = ? WHERE token = ?",
                (value, now, token),
            )
            if cursor.rowcount == 0:
                return None
            row = conn.execute(
                "SELECT * FROM users WHERE token = ?", (token,)
            ).fetchone()
            conn.commit()

        return self._row_to_user(row) if row else None

    def _fetch_one(self, query: str, params: tuple) -> Optional[User]:
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            row = conn.execute(query, params).fetchone()

        if not row:
            return None

        return self._row_to_user(row)

    def _row_to_user(self, row: sqlite3.Row) -> User:
        """Convert database row to User entity."""
        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            subscription=Subscription(row["subscription"]),
            avatar_url=row["avatar_url"],
            verify=bool(row["verify"]),
            verification_token=row["verification_token"],
            token=row["token"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

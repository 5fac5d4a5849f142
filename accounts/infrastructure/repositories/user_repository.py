"""Repository for User persistence."""

import logging
import sqlite3
from typing import List, Optional
from uuid import UUID

from ...domain.exceptions import UserAlreadyExistsError, UserNotFoundError
from ...domain.models.user import Clock, User, utcnow
from ...domain.ports.persistence import UserRepository
from ..persistence.sqlite import SQLiteDatabase, from_db_datetime, to_db_datetime

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id",
    "email",
    "name",
    "password_hash",
    "role",
    "google_id",
    "avatar_url",
    "is_email_verified",
    "email_verification_token",
    "email_verification_expiry",
    "password_reset_token",
    "password_reset_expiry",
    "is_active",
    "last_login_at",
    "created_at",
    "updated_at",
)

_DATETIME_COLUMNS = {
    "email_verification_expiry",
    "password_reset_expiry",
    "last_login_at",
    "created_at",
    "updated_at",
}


class SQLiteUserRepository(UserRepository):
    """Stores User aggregates as flat rows in the ``users`` table."""

    def __init__(self, database: SQLiteDatabase, clock: Clock = utcnow) -> None:
        self._db = database
        self._clock = clock

    def create(self, user: User) -> User:
        row = self._to_row(user)
        placeholders = ", ".join("?" for _ in _COLUMNS)
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    f"INSERT INTO users ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                    tuple(row[column] for column in _COLUMNS),
                )
        except sqlite3.IntegrityError as exc:
            raise UserAlreadyExistsError(f"User {user.email.value} already exists") from exc
        return user

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        return self._get_one("SELECT * FROM users WHERE id = ?", (str(user_id),))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("SELECT * FROM users WHERE email = ?", (email,))

    def get_by_google_id(self, google_id: str) -> Optional[User]:
        return self._get_one("SELECT * FROM users WHERE google_id = ?", (google_id,))

    def get_by_verification_token(self, token: str) -> Optional[User]:
        return self._get_one(
            "SELECT * FROM users WHERE email_verification_token = ?", (token,)
        )

    def get_by_reset_token(self, token: str) -> Optional[User]:
        return self._get_one("SELECT * FROM users WHERE password_reset_token = ?", (token,))

    def list_all(self) -> List[User]:
        rows = self._db.fetchall("SELECT * FROM users ORDER BY created_at DESC")
        return [self._row_to_user(row) for row in rows]

    def update(self, user: User) -> User:
        row = self._to_row(user)
        columns = [column for column in _COLUMNS if column not in ("id", "created_at")]
        assignments = ", ".join(f"{column} = ?" for column in columns)
        try:
            with self._db.transaction() as conn:
                cur = conn.execute(
                    f"UPDATE users SET {assignments} WHERE id = ?",
                    tuple(row[column] for column in columns) + (row["id"],),
                )
        except sqlite3.IntegrityError as exc:
            raise UserAlreadyExistsError(f"User {user.email.value} already exists") from exc
        if cur.rowcount == 0:
            raise UserNotFoundError(f"User {user.id} not found")
        return user

    def delete(self, user_id: UUID) -> None:
        with self._db.transaction() as conn:
            conn.execute("DELETE FROM users WHERE id = ?", (str(user_id),))

    def _get_one(self, query: str, params: tuple) -> Optional[User]:
        row = self._db.fetchone(query, params)
        if not row:
            return None
        return self._row_to_user(row)

    @staticmethod
    def _to_row(user: User) -> dict:
        record = user.to_primitives()
        for column in _DATETIME_COLUMNS:
            record[column] = to_db_datetime(record[column])
        record["is_email_verified"] = int(record["is_email_verified"])
        record["is_active"] = int(record["is_active"])
        return record

    def _row_to_user(self, row: sqlite3.Row) -> User:
        """Convert database row to User aggregate."""
        record = {column: row[column] for column in _COLUMNS}
        for column in _DATETIME_COLUMNS:
            record[column] = from_db_datetime(record[column])
        record["is_email_verified"] = bool(record["is_email_verified"])
        record["is_active"] = bool(record["is_active"])
        return User.from_primitives(record, clock=self._clock)

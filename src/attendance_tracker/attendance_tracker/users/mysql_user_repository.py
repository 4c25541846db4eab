from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, execute_unique, fetchall, fetchone
from .model import USER_MUTABLE_FIELDS, NewUser, User
from .repository import UserRepository

_COLUMNS = "id, username, password_hash, name, department, language, profile_image, created_at"


def _row_to_user(row: dict) -> User:
    return User(
        id=int(row["id"]),
        username=row["username"],
        password_hash=row["password_hash"],
        name=row["name"],
        department=row.get("department"),
        language=row.get("language") or "en",
        profile_image=row.get("profile_image"),
        created_at=row["created_at"],
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def create(self, new: NewUser) -> User:
        created_at = now_local().replace(microsecond=0)
        with db_cursor(self._conn_factory) as (_, cur):
            execute_unique(
                cur,
                """
                INSERT INTO users(username, password_hash, name, department, language, profile_image, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (new.username, new.password_hash, new.name, new.department, new.language, new.profile_image, created_at),
                conflict_message="Username already exists",
            )
            user_id = int(cur.lastrowid)

        return User(
            id=user_id,
            username=new.username,
            password_hash=new.password_hash,
            name=new.name,
            department=new.department,
            language=new.language,
            profile_image=new.profile_image,
            created_at=created_at,
        )

    def update(self, user_id: int, fields: Mapping[str, Any]) -> Optional[User]:
        changes = {k: v for k, v in fields.items() if k in USER_MUTABLE_FIELDS}
        with db_cursor(self._conn_factory) as (_, cur):
            if changes:
                assignments = ", ".join(f"{column}=%s" for column in changes)
                cur.execute(
                    f"UPDATE users SET {assignments} WHERE id=%s",
                    (*changes.values(), int(user_id)),
                )
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY id ASC")
            return [_row_to_user(r) for r in fetchall(cur)]

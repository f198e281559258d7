from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "id, username, password_hash, role, is_active, created_at, updated_at"
_UPDATABLE = ("username", "password_hash", "role", "is_active")


def _row_to_user(row: dict) -> User:
    return User(
        id=int(row["id"]),
        username=row["username"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (user_id,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY id")
            return [_row_to_user(r) for r in fetchall(cur)]

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY id", (role.value,))
            return [_row_to_user(r) for r in fetchall(cur)]

    def create(self, *, username: str, password_hash: str, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO users(username, password_hash, role, is_active) VALUES(%s,%s,%s,1)",
                (username, password_hash, role.value),
            )
            return int(cur.lastrowid)

    def update(self, user_id: int, *, fields: dict) -> bool:
        sets: list[str] = []
        params: list = []
        for column in _UPDATABLE:
            if column not in fields:
                continue
            value = fields[column]
            if isinstance(value, Role):
                value = value.value
            elif isinstance(value, bool):
                value = int(value)
            sets.append(f"{column}=%s")
            params.append(value)
        if not sets:
            return self.get_by_id(user_id) is not None

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {', '.join(sets)} WHERE id=%s", (*params, user_id))
            if cur.rowcount > 0:
                return True
            # rowcount is 0 when values are unchanged; distinguish from a missing row.
            cur.execute("SELECT 1 FROM users WHERE id=%s", (user_id,))
            return fetchone(cur) is not None

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE id=%s", (user_id,))
            return cur.rowcount > 0

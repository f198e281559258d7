from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Guru
from .repository import GuruRepository

_COLUMNS = "id, user_id, nip, nama, foto, created_at, updated_at"
_UPDATABLE = ("nip", "nama", "foto")


def _row_to_guru(row: dict) -> Guru:
    return Guru(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        nip=row["nip"],
        nama=row["nama"],
        foto=row.get("foto"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLGuruRepository(GuruRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[Guru]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM guru WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return _row_to_guru(row) if row else None

    def get_by_id(self, guru_id: int) -> Optional[Guru]:
        return self._get_one("id", guru_id)

    def get_by_user_id(self, user_id: int) -> Optional[Guru]:
        return self._get_one("user_id", user_id)

    def get_by_nip(self, nip: str) -> Optional[Guru]:
        return self._get_one("nip", nip)

    def list_all(self) -> Sequence[Guru]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM guru ORDER BY nama")
            return [_row_to_guru(r) for r in fetchall(cur)]

    def create(self, *, user_id: int, nip: str, nama: str, foto: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO guru(user_id, nip, nama, foto) VALUES(%s,%s,%s,%s)",
                (user_id, nip, nama, foto),
            )
            return int(cur.lastrowid)

    def update(self, guru_id: int, *, fields: dict) -> bool:
        columns = [c for c in _UPDATABLE if c in fields]
        if not columns:
            return self.get_by_id(guru_id) is not None

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE guru SET {', '.join(f'{c}=%s' for c in columns)} WHERE id=%s",
                (*[fields[c] for c in columns], guru_id),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM guru WHERE id=%s", (guru_id,))
            return fetchone(cur) is not None

    def delete_by_id(self, guru_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM guru WHERE id=%s", (guru_id,))
            return cur.rowcount > 0

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM guru")
            row = fetchone(cur)
            return int(row["total"]) if row else 0

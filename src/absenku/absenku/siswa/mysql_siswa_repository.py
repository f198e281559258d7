from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders
from .model import Siswa
from .repository import SiswaRepository

_SELECT = """
    SELECT s.id, s.user_id, s.nisn, s.nama, s.kelas_id, s.foto, s.created_at, s.updated_at,
           k.nama_kelas
    FROM siswa s
    LEFT JOIN kelas k ON k.id = s.kelas_id
"""
_UPDATABLE = ("nisn", "nama", "kelas_id", "foto")


def _row_to_siswa(row: dict) -> Siswa:
    return Siswa(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        nisn=row["nisn"],
        nama=row["nama"],
        kelas_id=int(row["kelas_id"]),
        foto=row.get("foto"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        nama_kelas=row.get("nama_kelas"),
    )


class MySQLSiswaRepository(SiswaRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[Siswa]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE s.{where}=%s", (value,))
            row = fetchone(cur)
            return _row_to_siswa(row) if row else None

    def get_by_id(self, siswa_id: int) -> Optional[Siswa]:
        return self._get_one("id", siswa_id)

    def get_by_user_id(self, user_id: int) -> Optional[Siswa]:
        return self._get_one("user_id", user_id)

    def get_by_nisn(self, nisn: str) -> Optional[Siswa]:
        return self._get_one("nisn", nisn)

    def list_all(self) -> Sequence[Siswa]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY k.nama_kelas, s.nama")
            return [_row_to_siswa(r) for r in fetchall(cur)]

    def list_by_kelas(self, kelas_ids: Sequence[int]) -> Sequence[Siswa]:
        if not kelas_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE s.kelas_id IN ({in_placeholders(kelas_ids)}) ORDER BY k.nama_kelas, s.nama",
                tuple(kelas_ids),
            )
            return [_row_to_siswa(r) for r in fetchall(cur)]

    def create(self, *, user_id: int, nisn: str, nama: str, kelas_id: int, foto: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO siswa(user_id, nisn, nama, kelas_id, foto) VALUES(%s,%s,%s,%s,%s)",
                (user_id, nisn, nama, kelas_id, foto),
            )
            return int(cur.lastrowid)

    def update(self, siswa_id: int, *, fields: dict) -> bool:
        columns = [c for c in _UPDATABLE if c in fields]
        if not columns:
            return self.get_by_id(siswa_id) is not None

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE siswa SET {', '.join(f'{c}=%s' for c in columns)} WHERE id=%s",
                (*[fields[c] for c in columns], siswa_id),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM siswa WHERE id=%s", (siswa_id,))
            return fetchone(cur) is not None

    def delete_by_id(self, siswa_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM siswa WHERE id=%s", (siswa_id,))
            return cur.rowcount > 0

    def count(self, kelas_ids: Optional[Sequence[int]] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if kelas_ids is None:
                cur.execute("SELECT COUNT(*) AS total FROM siswa")
            elif not kelas_ids:
                return 0
            else:
                cur.execute(
                    f"SELECT COUNT(*) AS total FROM siswa WHERE kelas_id IN ({in_placeholders(kelas_ids)})",
                    tuple(kelas_ids),
                )
            row = fetchone(cur)
            return int(row["total"]) if row else 0

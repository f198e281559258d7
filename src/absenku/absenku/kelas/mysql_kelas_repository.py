from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Kelas
from .repository import KelasRepository

_SELECT = """
    SELECT k.id, k.nama_kelas, k.wali_kelas_id, k.created_at, k.updated_at,
           g.nama AS wali_kelas_nama,
           (SELECT COUNT(*) FROM siswa s WHERE s.kelas_id = k.id) AS jumlah_siswa
    FROM kelas k
    LEFT JOIN guru g ON g.id = k.wali_kelas_id
"""
_UPDATABLE = ("nama_kelas", "wali_kelas_id")


def _row_to_kelas(row: dict) -> Kelas:
    return Kelas(
        id=int(row["id"]),
        nama_kelas=row["nama_kelas"],
        wali_kelas_id=row.get("wali_kelas_id"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        wali_kelas_nama=row.get("wali_kelas_nama"),
        jumlah_siswa=int(row.get("jumlah_siswa") or 0),
    )


class MySQLKelasRepository(KelasRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, kelas_id: int) -> Optional[Kelas]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE k.id=%s", (kelas_id,))
            row = fetchone(cur)
            return _row_to_kelas(row) if row else None

    def get_by_name(self, nama_kelas: str) -> Optional[Kelas]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE k.nama_kelas=%s", (nama_kelas,))
            row = fetchone(cur)
            return _row_to_kelas(row) if row else None

    def list_all(self) -> Sequence[Kelas]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY k.nama_kelas")
            return [_row_to_kelas(r) for r in fetchall(cur)]

    def list_by_wali_kelas(self, guru_id: int) -> Sequence[Kelas]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE k.wali_kelas_id=%s ORDER BY k.nama_kelas", (guru_id,))
            return [_row_to_kelas(r) for r in fetchall(cur)]

    def list_by_teacher(self, guru_id: int) -> Sequence[Kelas]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE k.wali_kelas_id=%s
                   OR k.id IN (SELECT gk.kelas_id FROM guru_kelas gk WHERE gk.guru_id=%s)
                ORDER BY k.nama_kelas
                """,
                (guru_id, guru_id),
            )
            return [_row_to_kelas(r) for r in fetchall(cur)]

    def create(self, *, nama_kelas: str, wali_kelas_id: Optional[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO kelas(nama_kelas, wali_kelas_id) VALUES(%s,%s)",
                (nama_kelas, wali_kelas_id),
            )
            return int(cur.lastrowid)

    def update(self, kelas_id: int, *, fields: dict) -> bool:
        columns = [c for c in _UPDATABLE if c in fields]
        if not columns:
            return self.get_by_id(kelas_id) is not None

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE kelas SET {', '.join(f'{c}=%s' for c in columns)} WHERE id=%s",
                (*[fields[c] for c in columns], kelas_id),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM kelas WHERE id=%s", (kelas_id,))
            return fetchone(cur) is not None

    def delete_by_id(self, kelas_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM kelas WHERE id=%s", (kelas_id,))
            return cur.rowcount > 0

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM kelas")
            row = fetchone(cur)
            return int(row["total"]) if row else 0

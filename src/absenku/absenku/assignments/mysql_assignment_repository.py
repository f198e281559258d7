from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import TeacherAssignment
from .repository import AssignmentRepository

_SELECT = """
    SELECT gk.id, gk.guru_id, gk.kelas_id, gk.is_homeroom, gk.assigned_at,
           g.nama AS guru_nama, k.nama_kelas
    FROM guru_kelas gk
    JOIN guru g ON g.id = gk.guru_id
    JOIN kelas k ON k.id = gk.kelas_id
"""


def _row_to_assignment(row: dict) -> TeacherAssignment:
    return TeacherAssignment(
        id=int(row["id"]),
        guru_id=int(row["guru_id"]),
        kelas_id=int(row["kelas_id"]),
        is_homeroom=bool(row.get("is_homeroom")),
        assigned_at=row.get("assigned_at"),
        guru_nama=row.get("guru_nama"),
        nama_kelas=row.get("nama_kelas"),
    )


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, guru_id: int, kelas_id: int) -> Optional[TeacherAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE gk.guru_id=%s AND gk.kelas_id=%s", (guru_id, kelas_id))
            row = fetchone(cur)
            return _row_to_assignment(row) if row else None

    def list_by_guru(self, guru_id: int) -> Sequence[TeacherAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE gk.guru_id=%s ORDER BY k.nama_kelas", (guru_id,))
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def list_by_kelas(self, kelas_id: int) -> Sequence[TeacherAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE gk.kelas_id=%s ORDER BY gk.is_homeroom DESC, g.nama", (kelas_id,))
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def create(self, *, guru_id: int, kelas_id: int, is_homeroom: bool) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO guru_kelas(guru_id, kelas_id, is_homeroom) VALUES(%s,%s,%s)",
                (guru_id, kelas_id, int(is_homeroom)),
            )
            return int(cur.lastrowid)

    def set_homeroom(self, assignment_id: int, *, is_homeroom: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE guru_kelas SET is_homeroom=%s WHERE id=%s", (int(is_homeroom), assignment_id))
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM guru_kelas WHERE id=%s", (assignment_id,))
            return fetchone(cur) is not None

    def delete_by_id(self, assignment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM guru_kelas WHERE id=%s", (assignment_id,))
            return cur.rowcount > 0

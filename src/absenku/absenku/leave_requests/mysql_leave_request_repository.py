from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import JenisPengajuan, LeaveRequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRequestRepository

_SELECT = """
    SELECT p.id, p.siswa_id, p.jenis, p.start_date, p.end_date, p.alasan, p.status,
           p.approved_by, p.approved_at, p.created_at,
           s.nama AS siswa_nama, k.nama_kelas
    FROM pengajuan_izin p
    JOIN siswa s ON s.id = p.siswa_id
    LEFT JOIN kelas k ON k.id = s.kelas_id
"""


def _row_to_request(row: dict) -> LeaveRequest:
    return LeaveRequest(
        id=int(row["id"]),
        siswa_id=int(row["siswa_id"]),
        jenis=JenisPengajuan(row["jenis"]),
        start_date=row["start_date"],
        end_date=row["end_date"],
        alasan=row["alasan"],
        status=LeaveRequestStatus(row["status"]),
        approved_by=row.get("approved_by"),
        approved_at=row.get("approved_at"),
        created_at=row.get("created_at"),
        siswa_nama=row.get("siswa_nama"),
        nama_kelas=row.get("nama_kelas"),
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE p.id=%s", (request_id,))
            row = fetchone(cur)
            return _row_to_request(row) if row else None

    def find(
        self,
        *,
        status: Optional[LeaveRequestStatus] = None,
        siswa_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        where, params = build_where(
            [
                ("p.status=%s", status.value if status else None),
                ("p.siswa_id=%s", siswa_id),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY p.created_at DESC, p.id DESC", tuple(params))
            return [_row_to_request(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        siswa_id: int,
        jenis: JenisPengajuan,
        start_date: date,
        end_date: date,
        alasan: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO pengajuan_izin(siswa_id, jenis, start_date, end_date, alasan, status)
                VALUES(%s,%s,%s,%s,%s,'pending')
                """,
                (siswa_id, jenis.value, start_date, end_date, alasan),
            )
            return int(cur.lastrowid)

    def decide(
        self,
        request_id: int,
        *,
        status: LeaveRequestStatus,
        approved_by: int,
        approved_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE pengajuan_izin
                SET status=%s, approved_by=%s, approved_at=%s
                WHERE id=%s AND status='pending'
                """,
                (status.value, approved_by, approved_at, request_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM pengajuan_izin WHERE id=%s", (request_id,))
            return cur.rowcount > 0

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AbsensiStatus, JenisPengajuan
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, in_placeholders
from .model import Absensi, AbsensiFilter, NewAbsensi
from .repository import AbsensiRepository

_SELECT = """
    SELECT a.id, a.siswa_id, a.guru_id, a.kelas_id, a.status, a.tanggal,
           a.waktu_masuk, a.waktu_pulang, a.keterangan, a.jenis_pengajuan,
           a.created_at, a.updated_at,
           s.nama AS siswa_nama, s.nisn, k.nama_kelas, g.nama AS guru_nama
    FROM absensi a
    JOIN siswa s ON s.id = a.siswa_id
    JOIN kelas k ON k.id = a.kelas_id
    LEFT JOIN guru g ON g.id = a.guru_id
"""
_INSERT = """
    INSERT INTO absensi(siswa_id, kelas_id, status, tanggal, guru_id,
                        waktu_masuk, waktu_pulang, keterangan, jenis_pengajuan)
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
"""
_UPDATABLE = ("status", "guru_id", "waktu_masuk", "waktu_pulang", "keterangan", "jenis_pengajuan")


def _row_to_absensi(row: dict) -> Absensi:
    jenis = row.get("jenis_pengajuan")
    return Absensi(
        id=int(row["id"]),
        siswa_id=int(row["siswa_id"]),
        kelas_id=int(row["kelas_id"]),
        status=AbsensiStatus(row["status"]),
        tanggal=row["tanggal"],
        guru_id=row.get("guru_id"),
        waktu_masuk=row.get("waktu_masuk"),
        waktu_pulang=row.get("waktu_pulang"),
        keterangan=row.get("keterangan"),
        jenis_pengajuan=JenisPengajuan(jenis) if jenis else None,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        siswa_nama=row.get("siswa_nama"),
        nisn=row.get("nisn"),
        nama_kelas=row.get("nama_kelas"),
        guru_nama=row.get("guru_nama"),
    )


def _insert_params(r: NewAbsensi) -> tuple:
    return (
        r.siswa_id,
        r.kelas_id,
        r.status.value,
        r.tanggal,
        r.guru_id,
        r.waktu_masuk,
        r.waktu_pulang,
        r.keterangan,
        r.jenis_pengajuan.value if r.jenis_pengajuan else None,
    )


def _filter_sql(flt: AbsensiFilter) -> tuple[str, list]:
    where, params = build_where(
        [
            ("a.kelas_id=%s", flt.kelas_id),
            ("a.siswa_id=%s", flt.siswa_id),
            ("a.tanggal>=%s", flt.start_date),
            ("a.tanggal<=%s", flt.end_date),
            ("a.status=%s", flt.status.value if flt.status else None),
        ]
    )
    if flt.kelas_ids is not None:
        if not flt.kelas_ids:
            return "1=0", []
        where += f" AND a.kelas_id IN ({in_placeholders(flt.kelas_ids)})"
        params.extend(int(k) for k in flt.kelas_ids)
    return where, params


class MySQLAbsensiRepository(AbsensiRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, absensi_id: int) -> Optional[Absensi]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE a.id=%s", (absensi_id,))
            row = fetchone(cur)
            return _row_to_absensi(row) if row else None

    def get_for_siswa_and_date(self, siswa_id: int, tanggal: date) -> Optional[Absensi]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE a.siswa_id=%s AND a.tanggal=%s", (siswa_id, tanggal))
            row = fetchone(cur)
            return _row_to_absensi(row) if row else None

    def find(self, flt: AbsensiFilter, *, limit: Optional[int] = None) -> Sequence[Absensi]:
        where, params = _filter_sql(flt)
        sql = f"{_SELECT} WHERE {where} ORDER BY a.tanggal DESC, k.nama_kelas, s.nama"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_absensi(r) for r in fetchall(cur)]

    def create(self, record: NewAbsensi) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_INSERT, _insert_params(record))
            return int(cur.lastrowid)

    def create_many(self, records: Sequence[NewAbsensi]) -> list[int]:
        ids: list[int] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for r in records:
                cur.execute(_INSERT, _insert_params(r))
                ids.append(int(cur.lastrowid))
        return ids

    def update(self, absensi_id: int, *, fields: dict) -> bool:
        columns = [c for c in _UPDATABLE if c in fields]
        if not columns:
            return self.get_by_id(absensi_id) is not None

        params = []
        for c in columns:
            value = fields[c]
            if isinstance(value, (AbsensiStatus, JenisPengajuan)):
                value = value.value
            params.append(value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE absensi SET {', '.join(f'{c}=%s' for c in columns)} WHERE id=%s",
                (*params, absensi_id),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM absensi WHERE id=%s", (absensi_id,))
            return fetchone(cur) is not None

    def delete_by_id(self, absensi_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM absensi WHERE id=%s", (absensi_id,))
            return cur.rowcount > 0

    def count_by_status(self, flt: AbsensiFilter) -> dict[str, int]:
        counts = {s.value: 0 for s in AbsensiStatus}
        where, params = _filter_sql(flt)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT a.status, COUNT(*) AS total FROM absensi a WHERE {where} GROUP BY a.status",
                tuple(params),
            )
            for r in fetchall(cur):
                counts[str(r["status"])] = int(r["total"])
        return counts

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AbsensiStatus, JenisPengajuan


@dataclass(frozen=True)
class Absensi:
    """One attendance record per siswa per day."""

    id: int
    siswa_id: int
    kelas_id: int
    status: AbsensiStatus
    tanggal: date
    guru_id: Optional[int] = None
    waktu_masuk: Optional[datetime] = None
    waktu_pulang: Optional[datetime] = None
    keterangan: Optional[str] = None
    jenis_pengajuan: Optional[JenisPengajuan] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Summaries joined from siswa/kelas/guru.
    siswa_nama: Optional[str] = None
    nisn: Optional[str] = None
    nama_kelas: Optional[str] = None
    guru_nama: Optional[str] = None


@dataclass(frozen=True)
class NewAbsensi:
    siswa_id: int
    kelas_id: int
    status: AbsensiStatus
    tanggal: date
    guru_id: Optional[int] = None
    waktu_masuk: Optional[datetime] = None
    waktu_pulang: Optional[datetime] = None
    keterangan: Optional[str] = None
    jenis_pengajuan: Optional[JenisPengajuan] = None


@dataclass(frozen=True)
class AbsensiFilter:
    """Query filter. ``kelas_ids`` scopes to several classes (empty tuple matches nothing)."""

    kelas_id: Optional[int] = None
    siswa_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[AbsensiStatus] = None
    kelas_ids: Optional[Sequence[int]] = None
